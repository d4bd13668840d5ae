"""Observability utilities for interview session persistence."""
from .logger import log_event

__all__ = ["log_event"]
