from __future__ import annotations  # Re-export jd_analysis public API

from .jd_analysis import (  # noqa: F401 F403
    REGISTRY_KEY,
    JobDescriptionRequest,
    ParsedJobDescriptionDraft,
    parse_job_description,
    parse_with_config,
)

__all__ = [
    "REGISTRY_KEY",
    "JobDescriptionRequest",
    "ParsedJobDescriptionDraft",
    "parse_job_description",
    "parse_with_config",
]
