from .evaluation import (
    ANSWER_KEY,
    SESSION_KEY,
    AnswerAssessment,
    CategoryScores,
    SessionAssessment,
    evaluate_answer,
    evaluate_with_config,
    summarize_session,
    summarize_with_config,
)

__all__ = [
    "ANSWER_KEY",
    "SESSION_KEY",
    "AnswerAssessment",
    "CategoryScores",
    "SessionAssessment",
    "evaluate_answer",
    "evaluate_with_config",
    "summarize_session",
    "summarize_with_config",
]
