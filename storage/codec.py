"""JSON wire form for interview sessions.

The wire form mirrors the session field names in camelCase. Associations
(answers and per-question feedback) are written as ``[questionId, value]``
pair lists and every timestamp is an ISO-8601 UTC string with millisecond
precision and a ``Z`` suffix.
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from interview_session.errors import DeserializationError
from interview_session.models import AnswerFeedback, InterviewSession


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string into an aware UTC datetime, or ``None`` if invalid."""

    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text[-1] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _feedback_to_wire(feedback: AnswerFeedback) -> Dict[str, Any]:
    payload = feedback.model_dump(by_alias=True, mode="json")
    payload["timestamp"] = format_timestamp(feedback.timestamp)
    return payload


def serialize_session(session: InterviewSession) -> str:
    payload: Dict[str, Any] = {
        "id": session.id,
        "parsedJD": session.parsed_jd.model_dump(by_alias=True, mode="json"),
        "questions": [question.model_dump(by_alias=True, mode="json") for question in session.questions],
        "answers": [[question_id, answer] for question_id, answer in session.answers.items()],
        "feedback": [
            [question_id, _feedback_to_wire(feedback)] for question_id, feedback in session.feedback.items()
        ],
        "sessionFeedback": (
            session.session_feedback.model_dump(by_alias=True, mode="json")
            if session.session_feedback is not None
            else None
        ),
        "currentQuestionIndex": session.current_question_index,
        "isComplete": session.is_complete,
        "createdAt": format_timestamp(session.created_at),
        "completedAt": format_timestamp(session.completed_at) if session.completed_at else None,
    }
    return json.dumps(payload)


def _pairs(raw: Any, field: str) -> List[Tuple[str, Any]]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise DeserializationError(f"Invalid session data: {field} must be a list of [questionId, value] pairs")
    pairs: List[Tuple[str, Any]] = []
    for item in raw:
        if not isinstance(item, (list, tuple)) or len(item) != 2 or not isinstance(item[0], str):
            raise DeserializationError(f"Invalid session data: {field} must be a list of [questionId, value] pairs")
        pairs.append((item[0], item[1]))
    return pairs


def _feedback_from_wire(raw: Any) -> Dict[str, Any]:
    entries: Dict[str, Any] = {}
    for question_id, item in _pairs(raw, "feedback"):
        if not isinstance(item, dict):
            raise DeserializationError(f"Invalid session data: feedback for question {question_id} is not an object")
        timestamp = parse_timestamp(item.get("timestamp"))
        if timestamp is None:
            raise DeserializationError(
                f"Invalid session data: feedback timestamp for question {question_id} is not a valid date"
            )
        entries[question_id] = {**item, "timestamp": timestamp}
    return entries


def _summarize(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def deserialize_session(text: str) -> InterviewSession:
    try:
        data = json.loads(text)
    except (TypeError, ValueError, RecursionError) as exc:
        raise DeserializationError(f"Invalid JSON format - {exc}") from exc

    if (
        not isinstance(data, dict)
        or not data.get("id")
        or not data.get("parsedJD")
        or not isinstance(data.get("questions"), list)
    ):
        raise DeserializationError("Invalid session data: missing required fields")

    created_at = parse_timestamp(data.get("createdAt"))
    if created_at is None:
        raise DeserializationError("Invalid session data: createdAt is not a valid date")

    completed_at = None
    if data.get("completedAt") is not None:
        completed_at = parse_timestamp(data["completedAt"])
        if completed_at is None:
            raise DeserializationError("Invalid session data: completedAt is not a valid date")

    answers = dict(_pairs(data.get("answers"), "answers"))
    feedback = _feedback_from_wire(data.get("feedback"))

    current_index = data.get("currentQuestionIndex")
    is_complete = data.get("isComplete")
    try:
        return InterviewSession.model_validate(
            {
                "id": data["id"],
                "parsedJD": data["parsedJD"],
                "questions": data["questions"],
                "answers": answers,
                "feedback": feedback,
                "sessionFeedback": data.get("sessionFeedback"),
                "currentQuestionIndex": 0 if current_index is None else current_index,
                "isComplete": False if is_complete is None else is_complete,
                "createdAt": created_at,
                "completedAt": completed_at,
            }
        )
    except ValidationError as exc:
        raise DeserializationError(f"Invalid session data: {_summarize(exc)}") from exc


__all__ = ["deserialize_session", "format_timestamp", "parse_timestamp", "serialize_session"]
