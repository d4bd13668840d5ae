from __future__ import annotations  # Gateway error types and failure classification

import json
from typing import Literal, Optional

import httpx
from pydantic import ValidationError

FailureKind = Literal["rate_limited", "timed_out", "malformed_response", "unavailable"]


class LlmGatewayError(RuntimeError):  # Base gateway error
    def __init__(
        self,
        message: str,
        *,
        kind: FailureKind = "unavailable",
        status_code: Optional[int] = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.kind: FailureKind = kind
        self.status_code = status_code
        self.retryable = retryable


def is_retryable(exc: BaseException) -> bool:
    """Rate limits, timeouts, 5xx and dropped connections are worth another attempt."""

    if isinstance(exc, LlmGatewayError):
        return exc.retryable
    # TimeoutException, ConnectError, ReadError and RemoteProtocolError are all TransportErrors
    return isinstance(exc, httpx.TransportError)


def classify_failure(exc: BaseException) -> FailureKind:
    if isinstance(exc, LlmGatewayError):
        return exc.kind
    if isinstance(exc, httpx.TimeoutException):
        return "timed_out"
    if isinstance(exc, (json.JSONDecodeError, ValidationError)):
        return "malformed_response"
    return "unavailable"


__all__ = ["FailureKind", "LlmGatewayError", "classify_failure", "is_retryable"]
