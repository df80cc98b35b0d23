"""
Pytest configuration and shared fixtures for the test suite.
Points the app at a throwaway database and provides catalog/learner fixtures
for unit and integration tests.
"""
import os
import sys
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path

# Must be set before learnpath.config is imported anywhere.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="learnpath-logs-"))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

LEARNER_ID = "11111111-1111-1111-1111-111111111111"
LEARNER_EMAIL = "learner@example.com"


class FixedClock:
    """Manually advanced clock for session timing."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@dataclass
class Catalog:
    course_id: str = "course-security"
    draft_course_id: str = "course-draft"
    text_lesson_id: str = "lesson-text"
    quiz_lesson_id: str = "lesson-quiz"
    empty_quiz_lesson_id: str = "lesson-empty-quiz"
    draft_lesson_id: str = "lesson-draft"
    assessment_ids: list[str] = field(default_factory=lambda: ["q1", "q2", "q3"])
    answers: dict[str, str] = field(default_factory=dict)


# ----- Per-test SQLite file (store calls run on worker threads, each with its own connection) -----
@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'learnpath-test.db'}",
        connect_args={"check_same_thread": False},
        echo=False,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    from learnpath.config import Base
    import learnpath.models.models  # noqa: F401

    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(session_factory):
    from learnpath.services.record_store import SqlRecordStore

    return SqlRecordStore(session_factory)


@pytest.fixture
def learner():
    from learnpath.schemas.auth_schemas import LearnerContext

    return LearnerContext(user_id=LEARNER_ID, email=LEARNER_EMAIL)


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 11, 3, 9, 0, 0))


@pytest.fixture
def catalog(db_session) -> Catalog:
    """A learner profile, one published course (text, quiz, empty quiz) and one draft course."""
    from learnpath.models.models import Assessment, Course, Lesson, Profile

    cat = Catalog()
    db_session.add(Profile(id=LEARNER_ID, email=LEARNER_EMAIL, full_name="Test Learner"))
    db_session.add(
        Course(
            id=cat.course_id,
            title="Intro to Security",
            description="CIA triad and common threats",
            is_published=True,
            created_at=datetime(2025, 10, 1),
        )
    )
    db_session.add(
        Course(id=cat.draft_course_id, title="Unreleased", is_published=False, created_at=datetime(2025, 10, 5))
    )
    db_session.add(Lesson(id=cat.text_lesson_id, course_id=cat.course_id, title="CIA Triad", order_index=1, content_type="text"))
    db_session.add(Lesson(id=cat.quiz_lesson_id, course_id=cat.course_id, title="Quiz", order_index=2, content_type="quiz"))
    db_session.add(
        Lesson(id=cat.empty_quiz_lesson_id, course_id=cat.course_id, title="Coming soon", order_index=3, content_type="quiz")
    )
    db_session.add(Lesson(id=cat.draft_lesson_id, course_id=cat.draft_course_id, title="Draft", order_index=1))

    for n, assessment_id in enumerate(cat.assessment_ids, start=1):
        answer = f"answer {n}"
        cat.answers[assessment_id] = answer
        db_session.add(
            Assessment(
                id=assessment_id,
                lesson_id=cat.quiz_lesson_id,
                question=f"Question {n}?",
                options=[answer, f"wrong {n}a", f"wrong {n}b"],
                correct_answer=answer,
                explanation=f"Because {n}.",
                difficulty="easy",
            )
        )
    db_session.commit()
    return cat
