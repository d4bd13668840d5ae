"""Tests for LLM-backed interview question generation."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

import question_generation.generator as gen_mod
from config import LlmRoute
from llm_gateway import LlmGatewayError


def _route() -> LlmRoute:
    return LlmRoute(name="test", base_url="http://example.com", model="test-model")


def _question_set(count: int) -> gen_mod.GeneratedQuestionSet:
    kinds = ["behavioral", "technical", "system-design"]
    return gen_mod.GeneratedQuestionSet(
        questions=[
            gen_mod.GeneratedQuestion(
                type=kinds[index % 3],
                question=f"Describe scenario {index} in as much detail as you can.",
                difficulty="senior",
                relatedSkills=["python"],
            )
            for index in range(count)
        ]
    )


def test_build_task_mentions_context(parsed_jd) -> None:
    task = gen_mod._build_task(parsed_jd, 5)
    assert task.startswith("Prepare 5 interview questions for a senior software candidate.")
    assert "python, system design, mentoring" in task
    assert "- Design services" in task
    assert task.endswith("Return only JSON without markdown fences, text, or commentary.")


def test_generate_questions_assigns_ids(monkeypatch, parsed_jd) -> None:
    captured: dict[str, object] = {}

    def fake_call(task, schema, *, cfg):
        captured["schema"] = schema
        return _question_set(6)

    ids = iter(f"gen-{n}" for n in range(10))
    monkeypatch.setattr(gen_mod, "call", fake_call)
    questions = gen_mod.generate_questions(parsed_jd, route=_route(), id_factory=lambda: next(ids))

    assert captured["schema"] is gen_mod.GeneratedQuestionSet
    assert [q.id for q in questions] == ["gen-0", "gen-1", "gen-2", "gen-3", "gen-4"]
    assert questions[2].type == "system-design"
    assert questions[0].related_skills == ["python"]


def test_generate_questions_rejects_short_sets(monkeypatch, parsed_jd) -> None:
    monkeypatch.setattr(gen_mod, "call", lambda task, schema, *, cfg: _question_set(5))
    with pytest.raises(LlmGatewayError) as excinfo:
        gen_mod.generate_questions(parsed_jd, route=_route(), count=7)
    assert excinfo.value.kind == "malformed_response"


def test_question_set_requires_five_items() -> None:
    with pytest.raises(ValidationError):
        _question_set(4)


def test_generated_ids_are_unique_by_default(monkeypatch, parsed_jd) -> None:
    monkeypatch.setattr(gen_mod, "call", lambda task, schema, *, cfg: _question_set(5))
    questions = gen_mod.generate_questions(parsed_jd, route=_route())
    assert len({q.id for q in questions}) == 5
