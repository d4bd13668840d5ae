"""Pure state transitions over the interview session aggregate."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence

from .errors import BoundaryError, NotFoundError, RangeError
from .models import (
    AnswerFeedback,
    InterviewQuestion,
    InterviewSession,
    ParsedJobDescription,
    SessionFeedback,
    utc_now,
)


def _new_id() -> str:
    return str(uuid.uuid4())


def _evolve(session: InterviewSession, **changes: Any) -> InterviewSession:
    # Rebuilt through validation so every version holds its own read-only mappings.
    return InterviewSession(**{**dict(session), **changes})


class SessionManager:
    """Create and transform ``InterviewSession`` values.

    Every operation is side-effect free: inputs are never modified and a
    new session is returned for each change. Precondition violations raise
    immediately and are never caught here.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._clock = clock
        self._id_factory = id_factory

    def create_session(
        self,
        parsed_jd: ParsedJobDescription,
        questions: Sequence[InterviewQuestion],
    ) -> InterviewSession:
        return InterviewSession(
            id=self._id_factory(),
            parsed_jd=parsed_jd,
            questions=tuple(questions),
            answers={},
            feedback={},
            session_feedback=None,
            current_question_index=0,
            is_complete=False,
            created_at=self._clock(),
            completed_at=None,
        )

    def store_answer(self, session: InterviewSession, question_id: str, answer: str) -> InterviewSession:
        if question_id not in session.question_ids():
            raise NotFoundError(f"Question with ID {question_id} not found in session")
        answers = dict(session.answers)
        answers[question_id] = answer
        return _evolve(session, answers=answers)

    def get_answer(self, session: InterviewSession, question_id: str) -> Optional[str]:
        return session.answers.get(question_id)

    def store_feedback(self, session: InterviewSession, feedback: AnswerFeedback) -> InterviewSession:
        # Question membership is intentionally not checked here, unlike store_answer.
        entries = dict(session.feedback)
        entries[feedback.question_id] = feedback
        return _evolve(session, feedback=entries)

    def get_feedback(self, session: InterviewSession, question_id: str) -> Optional[AnswerFeedback]:
        return session.feedback.get(question_id)

    def set_current_question_index(self, session: InterviewSession, index: int) -> InterviewSession:
        total = len(session.questions)
        if index < 0 or index >= total:
            raise RangeError(f"Invalid question index: {index}. Must be between 0 and {total - 1}")
        return _evolve(session, current_question_index=index)

    def next_question(self, session: InterviewSession) -> InterviewSession:
        next_index = session.current_question_index + 1
        if next_index >= len(session.questions):
            raise BoundaryError("Already at the last question")
        return self.set_current_question_index(session, next_index)

    def previous_question(self, session: InterviewSession) -> InterviewSession:
        prev_index = session.current_question_index - 1
        if prev_index < 0:
            raise BoundaryError("Already at the first question")
        return self.set_current_question_index(session, prev_index)

    def get_current_question(self, session: InterviewSession) -> InterviewQuestion:
        return session.questions[session.current_question_index]

    def complete_session(self, session: InterviewSession) -> InterviewSession:
        """Mark the session finished.

        Unanswered questions do not block completion; callers decide
        whether to check ``are_all_questions_answered`` first.
        """
        completed_at = max(self._clock(), session.created_at)
        return _evolve(session, is_complete=True, completed_at=completed_at)

    def are_all_questions_answered(self, session: InterviewSession) -> bool:
        return len(session.answers) == len(session.questions)

    def store_session_feedback(self, session: InterviewSession, feedback: SessionFeedback) -> InterviewSession:
        return _evolve(session, session_feedback=feedback)

    def answered_count(self, session: InterviewSession) -> int:
        return len(session.answers)

    def unanswered_questions(self, session: InterviewSession) -> List[InterviewQuestion]:
        return [question for question in session.questions if question.id not in session.answers]


__all__ = ["SessionManager"]
