"""Tests for answer and session evaluation."""
from __future__ import annotations

import interview_evaluation.evaluation as eval_mod
from config import LlmRoute


def _route() -> LlmRoute:
    return LlmRoute(name="test", base_url="http://example.com", model="test-model")


def test_evaluate_answer_builds_feedback(monkeypatch, session, clock) -> None:
    captured: dict[str, object] = {}

    def fake_call(task, schema, *, cfg):
        captured["task"] = task
        captured["schema"] = schema
        return eval_mod.AnswerAssessment(
            score=8,
            strengths=["Structured", "Specific"],
            improvements=["Add metrics", "Mention trade-offs"],
        )

    monkeypatch.setattr(eval_mod, "call", fake_call)
    question = session.questions[0]
    feedback = eval_mod.evaluate_answer(question, "I led the rollout.", route=_route(), clock=clock)

    assert feedback.question_id == question.id
    assert feedback.score == 8
    assert feedback.timestamp == clock.now
    assert captured["schema"] is eval_mod.AnswerAssessment
    assert "I led the rollout." in captured["task"]
    assert question.question in captured["task"]


def test_summarize_session_maps_categories(monkeypatch, manager, session) -> None:
    answered = manager.store_answer(session, "q1", "Example answer")

    def fake_call(task, schema, *, cfg):
        assert "Example answer" in task
        assert "(no answer)" in task
        return eval_mod.SessionAssessment(
            overallScore=7,
            performanceSummary=eval_mod.CategoryScores(behavioral=8, technical=7, systemDesign=0),
            strongestAreas=["Communication"],
            improvementAreas=["Architecture depth"],
            recommendations=["Practice system design"],
        )

    monkeypatch.setattr(eval_mod, "call", fake_call)
    summary = eval_mod.summarize_session(answered, route=_route())

    assert summary.overall_score == 7
    assert summary.performance_summary.system_design == 0
    assert summary.recommendations == ["Practice system design"]

    stored = manager.store_session_feedback(answered, summary)
    assert stored.session_feedback == summary
