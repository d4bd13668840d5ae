"""Exception hierarchy for interview session state and persistence."""
from __future__ import annotations


class SessionError(Exception):  # Base error for the session core
    pass


class SessionValidationError(SessionError, ValueError):  # Caller supplied data violates a precondition
    pass


class NotFoundError(SessionValidationError, LookupError):  # Unknown question identifier
    pass


class RangeError(SessionValidationError, IndexError):  # Cursor index outside the question sequence
    pass


class BoundaryError(RangeError):  # Navigation past the first or last question
    pass


class DeserializationError(SessionError, ValueError):
    """Raised when persisted session data cannot be turned back into a session.

    ``cause`` holds the short human-readable reason without the
    ``Failed to deserialize session:`` prefix.
    """

    def __init__(self, cause: str) -> None:
        self.cause = cause
        super().__init__(f"Failed to deserialize session: {cause}")


class StorageError(SessionError):  # Durable storage could not complete the request
    pass


class StorageUnavailableError(StorageError):  # No durable backing in this context
    pass


class QuotaExceededError(StorageError):  # Backing store rejected the write for capacity
    pass


__all__ = [
    "SessionError",
    "SessionValidationError",
    "NotFoundError",
    "RangeError",
    "BoundaryError",
    "DeserializationError",
    "StorageError",
    "StorageUnavailableError",
    "QuotaExceededError",
]
