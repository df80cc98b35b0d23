"""
In-memory lesson session state. Lives only while a lesson view is open and is
never persisted.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class SessionPhase(str, Enum):
    """Where a lesson view currently stands."""
    VIEWING = "viewing"  # non-quiz content, or a quiz without questions
    ANSWERING = "answering"
    SHOWING_EXPLANATION = "showing_explanation"
    QUIZ_COMPLETED = "quiz_completed"
    COMPLETED = "completed"


@dataclass
class QuizSession:
    start_time: datetime
    current_question_index: int = 0
    selected_answer: str = ""
    score: int = 0
    completed: bool = False
