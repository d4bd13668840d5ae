from __future__ import annotations  # Re-export question_generation public API

from .generator import (  # noqa: F401 F403
    REGISTRY_KEY,
    GeneratedQuestion,
    GeneratedQuestionSet,
    generate_questions,
    generate_with_config,
)

__all__ = [
    "REGISTRY_KEY",
    "GeneratedQuestion",
    "GeneratedQuestionSet",
    "generate_questions",
    "generate_with_config",
]
