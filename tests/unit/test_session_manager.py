"""Tests for the pure session state transitions."""
from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from interview_session import (
    AnswerFeedback,
    BoundaryError,
    InterviewSession,
    NotFoundError,
    PerformanceSummary,
    RangeError,
    SessionFeedback,
    SessionValidationError,
)


def _feedback(question_id: str, score: float = 7.0, when: datetime | None = None) -> AnswerFeedback:
    return AnswerFeedback(
        question_id=question_id,
        score=score,
        strengths=["Clear structure", "Concrete example"],
        improvements=["Quantify impact", "Discuss trade-offs"],
        timestamp=when or datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc),
    )


def test_create_session_starts_fresh(manager, parsed_jd, make_questions, clock):
    questions = make_questions(3)
    session = manager.create_session(parsed_jd, questions)

    assert session.id == "session-1"
    assert [q.id for q in session.questions] == ["q1", "q2", "q3"]
    assert session.answers == {}
    assert session.feedback == {}
    assert session.session_feedback is None
    assert session.current_question_index == 0
    assert session.is_complete is False
    assert session.created_at == clock.now
    assert session.completed_at is None


def test_create_session_ids_are_distinct(manager, parsed_jd, make_questions):
    first = manager.create_session(parsed_jd, make_questions(3))
    second = manager.create_session(parsed_jd, make_questions(3))
    assert first.id != second.id


def test_create_session_rejects_empty_question_list(manager, parsed_jd):
    with pytest.raises(ValidationError):
        manager.create_session(parsed_jd, [])


def test_create_session_rejects_duplicate_question_ids(manager, parsed_jd, make_questions):
    questions = make_questions(2)
    with pytest.raises(ValidationError):
        manager.create_session(parsed_jd, [questions[0], questions[0]])


def test_store_answer_returns_new_session(manager, session):
    updated = manager.store_answer(session, "q2", "I led the migration.")

    assert updated.answers == {"q2": "I led the migration."}
    assert session.answers == {}
    assert updated is not session


def test_store_answer_overwrites_existing_answer(manager, session):
    once = manager.store_answer(session, "q1", "draft")
    twice = manager.store_answer(once, "q1", "final")
    again = manager.store_answer(twice, "q1", "final")

    assert twice.answers == {"q1": "final"}
    assert again == twice


def test_store_answer_accepts_empty_text(manager, session):
    updated = manager.store_answer(session, "q1", "")
    assert manager.get_answer(updated, "q1") == ""


def test_store_answer_unknown_question(manager, session):
    with pytest.raises(NotFoundError) as excinfo:
        manager.store_answer(session, "missing", "text")
    assert str(excinfo.value) == "Question with ID missing not found in session"
    assert isinstance(excinfo.value, SessionValidationError)


def test_get_answer_absent(manager, session):
    assert manager.get_answer(session, "q1") is None
    assert manager.get_answer(session, "nope") is None


def test_store_and_get_feedback(manager, session):
    feedback = _feedback("q1", 8.5)
    updated = manager.store_feedback(session, feedback)

    assert manager.get_feedback(updated, "q1") == feedback
    assert manager.get_feedback(session, "q1") is None


def test_store_feedback_does_not_check_question_membership(manager, session):
    updated = manager.store_feedback(session, _feedback("not-in-session"))
    assert manager.get_feedback(updated, "not-in-session") is not None


def test_feedback_score_bounds():
    with pytest.raises(ValidationError):
        _feedback("q1", score=0.5)
    with pytest.raises(ValidationError):
        _feedback("q1", score=10.5)


def test_navigation_across_three_questions(manager, session):
    at_second = manager.next_question(session)
    at_third = manager.next_question(at_second)

    assert manager.get_current_question(at_third).id == "q3"
    with pytest.raises(BoundaryError) as excinfo:
        manager.next_question(at_third)
    assert str(excinfo.value) == "Already at the last question"
    assert at_third.current_question_index == 2

    back = manager.previous_question(at_third)
    assert back.current_question_index == 1


def test_previous_question_at_start(manager, session):
    with pytest.raises(BoundaryError) as excinfo:
        manager.previous_question(session)
    assert str(excinfo.value) == "Already at the first question"
    assert session.current_question_index == 0


def test_boundary_error_is_a_range_error(manager, session):
    with pytest.raises(RangeError):
        manager.previous_question(session)


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_set_current_question_index_out_of_range(manager, session, index):
    with pytest.raises(RangeError) as excinfo:
        manager.set_current_question_index(session, index)
    assert str(excinfo.value) == f"Invalid question index: {index}. Must be between 0 and 2"


def test_set_current_question_index_jumps(manager, session):
    updated = manager.set_current_question_index(session, 2)
    assert manager.get_current_question(updated).id == "q3"
    assert session.current_question_index == 0


def test_complete_session_sets_timestamp(manager, session, clock):
    clock.advance(90)
    completed = manager.complete_session(session)

    assert completed.is_complete is True
    assert completed.completed_at == clock.now
    assert completed.completed_at >= completed.created_at
    assert session.is_complete is False


def test_complete_session_allows_unanswered_questions(manager, session):
    answered = manager.store_answer(session, "q1", "only one")
    completed = manager.complete_session(answered)

    assert completed.is_complete is True
    assert manager.are_all_questions_answered(completed) is False


def test_complete_session_never_precedes_creation(manager, session, clock):
    clock.advance(-60)
    completed = manager.complete_session(session)
    assert completed.completed_at == session.created_at


def test_are_all_questions_answered(manager, session):
    current = session
    for question_id in ("q1", "q2"):
        current = manager.store_answer(current, question_id, "answer")
    assert manager.are_all_questions_answered(current) is False
    assert manager.answered_count(current) == 2
    assert [q.id for q in manager.unanswered_questions(current)] == ["q3"]

    current = manager.store_answer(current, "q3", "answer")
    assert manager.are_all_questions_answered(current) is True
    assert manager.unanswered_questions(current) == []


def test_reanswering_keeps_all_answered(manager, session):
    current = session
    for question_id in ("q1", "q2", "q3"):
        current = manager.store_answer(current, question_id, "first")

    revised = manager.store_answer(current, "q2", "second")

    assert manager.are_all_questions_answered(revised) is True
    assert manager.answered_count(revised) == 3
    assert len(revised.answers) == 3
    assert revised.answers["q2"] == "second"


def test_store_session_feedback(manager, session):
    summary = SessionFeedback(
        overall_score=7.5,
        performance_summary=PerformanceSummary(behavioral=8, technical=7, system_design=6.5),
        strongest_areas=["Communication"],
        improvement_areas=["Capacity planning"],
        recommendations=["Practice estimating load"],
    )
    updated = manager.store_session_feedback(session, summary)
    assert updated.session_feedback == summary
    assert session.session_feedback is None


def test_sessions_are_immutable(session):
    with pytest.raises(ValidationError):
        session.current_question_index = 1  # type: ignore[misc]


def test_invariants_enforced_on_construction(session):
    data = session.model_dump()
    data["completed_at"] = session.created_at
    with pytest.raises(ValidationError):
        InterviewSession.model_validate(data)

    data = session.model_dump()
    data["answers"] = {"ghost": "text"}
    with pytest.raises(ValidationError):
        InterviewSession.model_validate(data)

    data = session.model_dump()
    data["feedback"] = {"q1": _feedback("q2").model_dump()}
    with pytest.raises(ValidationError):
        InterviewSession.model_validate(data)


def test_versions_do_not_share_writable_mappings(manager, session):
    answered = manager.store_answer(session, "q1", "a")
    moved = manager.next_question(answered)

    with pytest.raises(TypeError):
        moved.answers["ghost"] = "x"  # type: ignore[index]
    with pytest.raises(TypeError):
        moved.feedback["q1"] = _feedback("q1")  # type: ignore[index]

    assert answered.answers == {"q1": "a"}
    assert moved.answers == {"q1": "a"}
    assert session.answers == {}


def test_caller_dicts_are_copied_on_construction(session):
    answers = {"q1": "original"}
    built = InterviewSession.model_validate({**session.model_dump(), "answers": answers})
    answers["q1"] = "changed"
    answers["q2"] = "added"

    assert built.answers == {"q1": "original"}
    assert isinstance(built.model_dump()["answers"], dict)
