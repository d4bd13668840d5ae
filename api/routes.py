"""FastAPI routes for job description parsing."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from api.schemas import ErrorName, ErrorResponse
from config import LlmRoute, load_app_registry, settings
from jd_analysis import REGISTRY_KEY, JobDescriptionRequest, ParsedJobDescriptionDraft, parse_job_description
from llm_gateway import LlmGatewayError


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _error(status_code: int, error: ErrorName, message: str, details: Optional[Any] = None) -> JSONResponse:
    body = ErrorResponse(error=error, message=message, details=details)
    return JSONResponse(body.model_dump(), status_code=status_code)


def _resolve_route() -> LlmRoute:
    registry = load_app_registry(Path(settings.LLM_CONFIG_PATH), {REGISTRY_KEY: ParsedJobDescriptionDraft})
    route, _ = registry[REGISTRY_KEY]
    return route


def _validation_message(errors: List[Dict[str, Any]]) -> str:
    first = errors[0] if errors else {}
    kind = first.get("type")
    if kind == "string_too_short":
        return f"Job description must be at least {settings.JD_MIN_CHARS} characters"
    if kind == "missing":
        return "Job description is required"
    if kind == "string_type":
        return "Job description must be text"
    return "Invalid input"


def _gateway_error(exc: LlmGatewayError) -> JSONResponse:
    if exc.kind == "rate_limited":
        return _error(429, "RateLimitError", "Rate limit exceeded. Please try again later.", {"retryable": True})
    if exc.kind == "timed_out":
        return _error(504, "TimeoutError", "Request timed out. Please try again.", {"retryable": True})
    if exc.kind == "malformed_response":
        return _error(
            502,
            "MalformedResponseError",
            "The job description could not be analyzed. Please try again.",
            {"retryable": False},
        )
    return _error(
        503,
        "ServiceUnavailableError",
        "The analysis service is unavailable. Please try again later.",
        {"retryable": exc.retryable},
    )


@router.post("/parse-jd")
async def parse_jd(request: Request) -> JSONResponse:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error(400, "ValidationError", "Request body must be valid JSON")

    try:
        payload = JobDescriptionRequest.model_validate(body)
    except ValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False, include_input=False)
        return _error(400, "ValidationError", _validation_message(errors), errors)

    try:
        route = _resolve_route()
        parsed = await run_in_threadpool(parse_job_description, payload.job_description, route=route)
    except LlmGatewayError as exc:
        logger.error("Job description parsing failed (%s): %s", exc.kind, exc)
        return _gateway_error(exc)
    except (OSError, KeyError, ValidationError) as exc:
        logger.error("LLM configuration could not be loaded: %s", exc)
        return _error(503, "ServiceUnavailableError", "The analysis service is not configured.", {"retryable": False})
    except Exception:  # noqa: BLE001
        logger.exception("Unexpected error while parsing job description")
        return _error(500, "InternalServerError", "An unexpected error occurred while parsing the job description")

    return JSONResponse(parsed.model_dump(by_alias=True, mode="json"), status_code=200)


__all__ = ["router"]
