from __future__ import annotations

from datetime import datetime
from pathlib import Path
from textwrap import dedent
from typing import Callable, List

from pydantic import BaseModel, Field

from config import LlmRoute, load_app_registry
from interview_session.models import (
    AnswerFeedback,
    InterviewQuestion,
    InterviewSession,
    PerformanceSummary,
    SessionFeedback,
    utc_now,
)
from llm_gateway import call

ANSWER_KEY = "interview_evaluation.evaluate_answer"
SESSION_KEY = "interview_evaluation.summarize_session"


class AnswerAssessment(BaseModel):  # LLM assessment of one answer
    score: float = Field(ge=1, le=10)
    strengths: List[str] = Field(min_length=2)
    improvements: List[str] = Field(min_length=2)


class CategoryScores(BaseModel):  # LLM per-category scores
    behavioral: float = Field(ge=0, le=10)
    technical: float = Field(ge=0, le=10)
    systemDesign: float = Field(ge=0, le=10)


class SessionAssessment(BaseModel):  # LLM assessment of a whole session
    overallScore: float = Field(ge=1, le=10)
    performanceSummary: CategoryScores
    strongestAreas: List[str] = Field(min_length=1)
    improvementAreas: List[str] = Field(min_length=1)
    recommendations: List[str] = Field(min_length=1)


def evaluate_answer(
    question: InterviewQuestion,
    answer: str,
    *,
    route: LlmRoute,
    clock: Callable[[], datetime] = utc_now,
) -> AnswerFeedback:  # Call LLM evaluator for one answer
    assessment = call(_build_answer_task(question, answer), AnswerAssessment, cfg=route)
    return AnswerFeedback(
        question_id=question.id,
        score=assessment.score,
        strengths=assessment.strengths,
        improvements=assessment.improvements,
        timestamp=clock(),
    )


def summarize_session(session: InterviewSession, *, route: LlmRoute) -> SessionFeedback:  # Call LLM for overall feedback
    assessment = call(_build_session_task(session), SessionAssessment, cfg=route)
    return SessionFeedback(
        overall_score=assessment.overallScore,
        performance_summary=PerformanceSummary(
            behavioral=assessment.performanceSummary.behavioral,
            technical=assessment.performanceSummary.technical,
            system_design=assessment.performanceSummary.systemDesign,
        ),
        strongest_areas=assessment.strongestAreas,
        improvement_areas=assessment.improvementAreas,
        recommendations=assessment.recommendations,
    )


def evaluate_with_config(question: InterviewQuestion, answer: str, *, config_path: Path) -> AnswerFeedback:  # Convenience helper
    registry = load_app_registry(config_path, {ANSWER_KEY: AnswerAssessment})
    route, _ = registry[ANSWER_KEY]
    return evaluate_answer(question, answer, route=route)


def summarize_with_config(session: InterviewSession, *, config_path: Path) -> SessionFeedback:  # Convenience helper
    registry = load_app_registry(config_path, {SESSION_KEY: SessionAssessment})
    route, _ = registry[SESSION_KEY]
    return summarize_session(session, route=route)


def _build_answer_task(question: InterviewQuestion, answer: str) -> str:  # Compose per-answer prompt
    skills = ", ".join(question.related_skills) or "(not specified)"
    return dedent(
        f"""
        You are an interview coach reviewing a candidate's answer.

        Question type: {question.type}
        Difficulty: {question.difficulty}
        Related skills: {skills}
        Question asked: {question.question}
        Candidate answer:
        {answer}

        Return a JSON object that matches this contract:
        - score: number from 1 (poor) to 10 (excellent).
        - strengths: at least two specific things the answer did well.
        - improvements: at least two concrete, actionable improvements.
        """
    ).strip()


def _build_session_task(session: InterviewSession) -> str:  # Compose whole-session prompt
    blocks: List[str] = []
    for index, question in enumerate(session.questions, start=1):
        answer = session.answers.get(question.id, "(no answer)")
        feedback = session.feedback.get(question.id)
        score = f"{feedback.score:g}/10" if feedback else "not scored"
        blocks.append(f"{index}. [{question.type}] {question.question}\n   Answer: {answer}\n   Score: {score}")
    transcript = "\n".join(blocks)
    jd = session.parsed_jd
    skills = ", ".join(jd.skills)
    return dedent(
        f"""
        Summarize a mock interview for a {jd.experience_level} {jd.role_type} role.
        Required skills: {skills}

        Transcript:
        """
    ).strip() + "\n" + transcript + "\n\n" + dedent(
        """
        Return a JSON object that matches this contract:
        - overallScore: number from 1 to 10.
        - performanceSummary: object with behavioral, technical and systemDesign scores from 0 to 10
          (use 0 for a category with no questions).
        - strongestAreas: at least one area of strength.
        - improvementAreas: at least one area to improve.
        - recommendations: at least one concrete next step.
        """
    ).strip()
