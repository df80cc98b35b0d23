"""
Data models. Single import surface for DB entities and session types.

DB entities (learnpath.models.models):
- Profile, Course, Lesson, UserProgress, Assessment, UserAssessment, LearningPath

Session (learnpath.models.session):
- QuizSession, SessionPhase
"""

from learnpath.models.enums import (
    ContentType,
    DifficultyLevel,
    LearningStyle,
    ProgressStatus,
    QuestionDifficulty,
)
from learnpath.models.models import (
    Profile,
    Course,
    Lesson,
    UserProgress,
    Assessment,
    UserAssessment,
    LearningPath,
)
from learnpath.models.session import QuizSession, SessionPhase

__all__ = [
    "ContentType",
    "DifficultyLevel",
    "LearningStyle",
    "ProgressStatus",
    "QuestionDifficulty",
    "Profile",
    "Course",
    "Lesson",
    "UserProgress",
    "Assessment",
    "UserAssessment",
    "LearningPath",
    "QuizSession",
    "SessionPhase",
]
