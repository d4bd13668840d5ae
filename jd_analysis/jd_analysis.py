from __future__ import annotations  # Job description parsing module

from pathlib import Path
from textwrap import dedent
from typing import List

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from config import LlmRoute, load_app_registry, settings
from interview_session.models import ExperienceLevel, ParsedJobDescription, RoleType
from llm_gateway import LlmGatewayError, call

REGISTRY_KEY = "jd_analysis.parse_job_description"


class JobDescriptionRequest(BaseModel):  # Input payload from UI
    job_description: str = Field(alias="jobDescription", min_length=settings.JD_MIN_CHARS)

    model_config = ConfigDict(populate_by_name=True)


class ParsedJobDescriptionDraft(BaseModel):  # Structured fields returned by the LLM
    roleType: RoleType
    skills: List[str] = Field(min_length=1)
    experienceLevel: ExperienceLevel
    technologies: List[str] = Field(default_factory=list)
    responsibilities: List[str] = Field(default_factory=list)


def parse_job_description(job_description: str, *, route: LlmRoute) -> ParsedJobDescription:  # Extract job context via LLM
    task = _build_task(job_description)
    draft = call(task, ParsedJobDescriptionDraft, cfg=route)
    try:
        return ParsedJobDescription(
            role_type=draft.roleType,
            skills=draft.skills,
            experience_level=draft.experienceLevel,
            technologies=draft.technologies,
            responsibilities=draft.responsibilities,
            raw_description=job_description,
        )
    except ValidationError as exc:
        raise LlmGatewayError(
            f"Parsed job description failed final validation: {exc}",
            kind="malformed_response",
        ) from exc


def parse_with_config(job_description: str, *, config_path: Path) -> ParsedJobDescription:  # Convenience helper using app config
    registry = load_app_registry(config_path, {REGISTRY_KEY: ParsedJobDescriptionDraft})
    route, _ = registry[REGISTRY_KEY]
    return parse_job_description(job_description, route=route)


def _build_task(job_description: str) -> str:  # Build task prompt for LLM
    return dedent(
        f"""
        Analyze the following job description and extract structured information.

        Job Description:
        {job_description}

        Extract the following information:
        1. roleType: classify the role as one of "software" (software engineering, full-stack, backend, frontend),
           "devops" (infrastructure, cloud, automation, SRE) or "security" (security engineering, AppSec, InfoSec).
        2. skills: list all required skills mentioned (e.g. "problem solving", "communication", "leadership").
        3. experienceLevel: one of "junior" (0-2 years), "mid" (3-5 years), "senior" (6-10 years)
           or "staff" (10+ years or staff/principal level).
        4. technologies: list all technologies, languages, frameworks and tools mentioned.
        5. responsibilities: list the key responsibilities mentioned in the job description.

        Return only JSON with these exact field names, without markdown fences or commentary.
        """
    ).strip()
