"""
Enumerations shared by the ORM models, the pydantic schemas and the services.
Values match the strings stored in the database.
"""

from enum import Enum


class ProgressStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ContentType(str, Enum):
    VIDEO = "video"
    TEXT = "text"
    INTERACTIVE = "interactive"
    QUIZ = "quiz"


class DifficultyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class QuestionDifficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class LearningStyle(str, Enum):
    VISUAL = "visual"
    AUDITORY = "auditory"
    KINESTHETIC = "kinesthetic"
    READING = "reading"


def sql_in(enum_cls: type[Enum]) -> str:
    """Render enum values for a CHECK constraint: 'a', 'b', 'c'."""
    return ", ".join(f"'{m.value}'" for m in enum_cls)
