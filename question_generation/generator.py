from __future__ import annotations  # Interview question generation module

import uuid
from pathlib import Path
from textwrap import dedent
from typing import Callable, List, Optional

from pydantic import BaseModel, Field

from config import LlmRoute, load_app_registry, settings
from interview_session.models import ExperienceLevel, InterviewQuestion, ParsedJobDescription, QuestionType
from llm_gateway import LlmGatewayError, call

REGISTRY_KEY = "question_generation.generate_questions"


class GeneratedQuestion(BaseModel):  # Question emitted by the LLM, before an id is assigned
    type: QuestionType
    question: str = Field(min_length=10)
    difficulty: ExperienceLevel
    relatedSkills: List[str] = Field(default_factory=list)


class GeneratedQuestionSet(BaseModel):  # Output contract for one interview's question list
    questions: List[GeneratedQuestion] = Field(min_length=5)


def generate_questions(
    parsed_jd: ParsedJobDescription,
    *,
    route: LlmRoute,
    count: Optional[int] = None,
    id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
) -> List[InterviewQuestion]:  # Generate interview questions via LLM
    wanted = count or settings.QUESTION_COUNT
    task = _build_task(parsed_jd, wanted)
    result = call(task, GeneratedQuestionSet, cfg=route)
    if len(result.questions) < wanted:
        raise LlmGatewayError(
            f"Expected {wanted} questions but received {len(result.questions)}",
            kind="malformed_response",
        )
    return [
        InterviewQuestion(
            id=id_factory(),
            type=item.type,
            question=item.question,
            difficulty=item.difficulty,
            related_skills=item.relatedSkills,
        )
        for item in result.questions[:wanted]
    ]


def generate_with_config(
    parsed_jd: ParsedJobDescription,
    *,
    config_path: Path,
    count: Optional[int] = None,
) -> List[InterviewQuestion]:  # Convenience helper using app config
    registry = load_app_registry(config_path, {REGISTRY_KEY: GeneratedQuestionSet})
    route, _ = registry[REGISTRY_KEY]
    return generate_questions(parsed_jd, route=route, count=count)


def _build_task(parsed_jd: ParsedJobDescription, count: int) -> str:  # Build task prompt for LLM
    skills = ", ".join(parsed_jd.skills)
    technologies = ", ".join(parsed_jd.technologies) or "(none listed)"
    responsibilities = "\n".join(f"- {item}" for item in parsed_jd.responsibilities) or "- (none listed)"
    return dedent(
        f"""
        Prepare {count} interview questions for a {parsed_jd.experience_level} {parsed_jd.role_type} candidate.
        Required skills: {skills}
        Technologies: {technologies}
        Responsibilities:
        {responsibilities}

        Respond with a JSON object following this contract:
        - questions: array with exactly {count} items, mixing behavioral, technical and system-design questions.
            Each item must contain:
              - type: one of "behavioral", "technical", "system-design".
              - question: the full question text, at least one sentence.
              - difficulty: one of "junior", "mid", "senior", "staff", matching the candidate level.
              - relatedSkills: the skills from the list above that the question exercises.
        Return only JSON without markdown fences, text, or commentary.
        """
    ).strip()
