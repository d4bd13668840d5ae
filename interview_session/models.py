from __future__ import annotations  # Interview session aggregate and its value types

from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel

RoleType = Literal["software", "devops", "security"]
QuestionType = Literal["behavioral", "technical", "system-design"]
ExperienceLevel = Literal["junior", "mid", "senior", "staff"]


def utc_now() -> datetime:
    """Current UTC time truncated to whole milliseconds."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class _Frozen(BaseModel):  # Immutable value with camelCase wire aliases
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class ParsedJobDescription(_Frozen):  # Structured job context extracted from the raw posting
    role_type: RoleType
    skills: List[str] = Field(min_length=1)
    experience_level: ExperienceLevel
    technologies: List[str] = Field(default_factory=list)
    responsibilities: List[str] = Field(default_factory=list)
    raw_description: str = Field(min_length=50)


class InterviewQuestion(_Frozen):  # Generated interview question
    id: str = Field(min_length=1)
    type: QuestionType
    question: str = Field(min_length=10)
    difficulty: ExperienceLevel
    related_skills: List[str] = Field(default_factory=list)


class AnswerFeedback(_Frozen):  # Feedback for a single answered question
    question_id: str = Field(min_length=1)
    score: float = Field(ge=1, le=10)
    strengths: List[str] = Field(min_length=2)
    improvements: List[str] = Field(min_length=2)
    timestamp: AwareDatetime


class PerformanceSummary(_Frozen):  # Per-category breakdown of a session score
    behavioral: float = Field(ge=0, le=10)
    technical: float = Field(ge=0, le=10)
    system_design: float = Field(ge=0, le=10)


class SessionFeedback(_Frozen):  # Overall feedback for a finished session
    overall_score: float = Field(ge=1, le=10)
    performance_summary: PerformanceSummary
    strongest_areas: List[str] = Field(min_length=1)
    improvement_areas: List[str] = Field(min_length=1)
    recommendations: List[str] = Field(min_length=1)


class InterviewSession(_Frozen):
    """One interview attempt.

    Values are never mutated in place; every change goes through
    ``SessionManager`` which returns a new instance.
    """

    id: str = Field(min_length=1)
    parsed_jd: ParsedJobDescription = Field(alias="parsedJD")
    questions: Tuple[InterviewQuestion, ...]
    answers: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    feedback: Mapping[str, AnswerFeedback] = Field(default_factory=dict, validate_default=True)
    session_feedback: Optional[SessionFeedback] = None
    current_question_index: int = 0
    is_complete: bool = False
    created_at: AwareDatetime
    completed_at: Optional[AwareDatetime] = None

    @field_validator("answers", "feedback", mode="after")
    @classmethod
    def _read_only(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        # Versions may share these mappings, so none of them can be writable.
        return MappingProxyType(dict(value))

    @field_serializer("answers")
    def _dump_answers(self, value: Mapping[str, str]) -> Dict[str, str]:
        return dict(value)

    @field_serializer("feedback")
    def _dump_feedback(self, value: Mapping[str, AnswerFeedback]) -> Dict[str, AnswerFeedback]:
        return dict(value)

    @model_validator(mode="after")
    def _check_invariants(self) -> "InterviewSession":
        ids = [question.id for question in self.questions]
        if len(set(ids)) != len(ids):
            raise ValueError("question ids must be unique")
        if not 0 <= self.current_question_index < len(ids):
            raise ValueError(
                f"currentQuestionIndex {self.current_question_index} outside 0..{len(ids) - 1}"
            )
        unknown = set(self.answers) - set(ids)
        if unknown:
            raise ValueError(f"answers reference unknown questions: {sorted(unknown)}")
        for key, item in self.feedback.items():
            if item.question_id != key:
                raise ValueError(f"feedback keyed by {key} embeds questionId {item.question_id}")
        if self.is_complete != (self.completed_at is not None):
            raise ValueError("completedAt must be set exactly when isComplete is true")
        if self.completed_at is not None and self.completed_at < self.created_at:
            raise ValueError("completedAt precedes createdAt")
        return self

    def question_ids(self) -> List[str]:
        return [question.id for question in self.questions]


__all__ = [
    "RoleType",
    "QuestionType",
    "ExperienceLevel",
    "utc_now",
    "ParsedJobDescription",
    "InterviewQuestion",
    "AnswerFeedback",
    "PerformanceSummary",
    "SessionFeedback",
    "InterviewSession",
]
