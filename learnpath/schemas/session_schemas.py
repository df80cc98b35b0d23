"""
Lesson session request/response schemas.
"""

from typing import Optional

from pydantic import BaseModel

from learnpath.models.enums import ContentType, QuestionDifficulty
from learnpath.models.session import SessionPhase
from learnpath.utils.errors import WriteResult


class QuestionView(BaseModel):
    """The current question as shown to the learner; answer fields only after submitting."""
    assessment_id: str
    index: int
    total: int
    question: str
    options: list[str]
    difficulty: QuestionDifficulty
    correct_answer: Optional[str] = None
    explanation: Optional[str] = None


class SessionStateResponse(BaseModel):
    session_id: str
    lesson_id: str
    course_id: str
    content_type: ContentType
    phase: SessionPhase
    score: int
    total_questions: int
    selected_answer: str = ""
    was_correct: Optional[bool] = None
    question: Optional[QuestionView] = None


class AnswerRequest(BaseModel):
    answer: str
    submit: bool = False


class AnswerResponse(BaseModel):
    accepted: bool
    correct: Optional[bool] = None
    attempt_write: Optional[WriteResult] = None
    progress_write: Optional[WriteResult] = None
    state: SessionStateResponse


class AdvanceResponse(BaseModel):
    accepted: bool
    quiz_completed: bool = False
    close_session: bool = False
    progress_write: Optional[WriteResult] = None
    state: SessionStateResponse


class CompleteResponse(BaseModel):
    accepted: bool
    close_session: bool = False
    progress_write: Optional[WriteResult] = None
    state: SessionStateResponse


class OpenSessionResponse(BaseModel):
    progress_write: WriteResult
    state: SessionStateResponse
