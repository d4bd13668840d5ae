from __future__ import annotations  # Re-export llm_gateway public API

from .errors import FailureKind, LlmGatewayError, classify_failure, is_retryable
from .llm_gateway import HttpClient, HttpResponse, call, chat
from .retry import backoff_delay, with_retry

__all__ = [
    "FailureKind",
    "HttpClient",
    "HttpResponse",
    "LlmGatewayError",
    "backoff_delay",
    "call",
    "chat",
    "classify_failure",
    "is_retryable",
    "with_retry",
]
