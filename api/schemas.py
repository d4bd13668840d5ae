"""Pydantic schemas for the job description API."""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel


ErrorName = Literal[
    "ValidationError",
    "RateLimitError",
    "TimeoutError",
    "MalformedResponseError",
    "ServiceUnavailableError",
    "InternalServerError",
]


class ErrorResponse(BaseModel):
    error: ErrorName
    message: str
    details: Optional[Any] = None
