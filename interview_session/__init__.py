from __future__ import annotations  # Re-export interview session public API

from .errors import (
    BoundaryError,
    DeserializationError,
    NotFoundError,
    QuotaExceededError,
    RangeError,
    SessionError,
    SessionValidationError,
    StorageError,
    StorageUnavailableError,
)
from .manager import SessionManager
from .models import (
    AnswerFeedback,
    ExperienceLevel,
    InterviewQuestion,
    InterviewSession,
    ParsedJobDescription,
    PerformanceSummary,
    QuestionType,
    RoleType,
    SessionFeedback,
    utc_now,
)

__all__ = [
    "AnswerFeedback",
    "BoundaryError",
    "DeserializationError",
    "ExperienceLevel",
    "InterviewQuestion",
    "InterviewSession",
    "NotFoundError",
    "ParsedJobDescription",
    "PerformanceSummary",
    "QuestionType",
    "QuotaExceededError",
    "RangeError",
    "RoleType",
    "SessionError",
    "SessionFeedback",
    "SessionManager",
    "SessionValidationError",
    "StorageError",
    "StorageUnavailableError",
    "utc_now",
]
