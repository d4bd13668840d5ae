import os
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from storage.migrate import migrate
from config.settings import settings
from interview_session import InterviewQuestion, ParsedJobDescription, SessionManager


JD_TEXT = (
    "We are hiring a senior backend engineer to design Python services, "
    "own PostgreSQL schemas and mentor other engineers on the team."
)


class FakeClock:  # Deterministic, manually advanced clock
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 3, 1, 9, 30, 0, 123000, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    migrate(db_path)
    try:
        yield db_path
    finally:
        td.cleanup()


@pytest.fixture
def parsed_jd() -> ParsedJobDescription:
    return ParsedJobDescription(
        role_type="software",
        skills=["python", "system design", "mentoring"],
        experience_level="senior",
        technologies=["Python", "PostgreSQL"],
        responsibilities=["Design services", "Mentor engineers"],
        raw_description=JD_TEXT,
    )


@pytest.fixture
def make_questions():
    def _make(count: int = 3) -> list[InterviewQuestion]:
        kinds = ["behavioral", "technical", "system-design"]
        return [
            InterviewQuestion(
                id=f"q{index + 1}",
                type=kinds[index % len(kinds)],
                question=f"Question number {index + 1}: tell me about your work.",
                difficulty="senior",
                related_skills=["python"],
            )
            for index in range(count)
        ]

    return _make


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def manager(clock) -> SessionManager:
    counter = iter(range(1, 1000))
    return SessionManager(clock=clock, id_factory=lambda: f"session-{next(counter)}")


@pytest.fixture
def session(manager, parsed_jd, make_questions):
    return manager.create_session(parsed_jd, make_questions(3))
