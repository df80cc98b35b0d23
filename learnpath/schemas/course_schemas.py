"""
Course, lesson and assessment schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from learnpath.models.enums import ContentType, DifficultyLevel, ProgressStatus, QuestionDifficulty


class CourseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str = ""
    difficulty_level: DifficultyLevel = DifficultyLevel.BEGINNER
    estimated_hours: int = 0
    thumbnail_url: str = ""
    is_published: bool = False
    created_at: Optional[datetime] = None


class LessonResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    course_id: str
    title: str
    content: str = ""
    order_index: int
    difficulty_level: DifficultyLevel = DifficultyLevel.BEGINNER
    estimated_minutes: int = 15
    content_type: ContentType = ContentType.TEXT


class AssessmentItem(BaseModel):
    """Full assessment, including the answer. Never sent to a learner before they answer."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    lesson_id: str
    question: str
    options: list[str]
    correct_answer: str
    explanation: str = ""
    difficulty: QuestionDifficulty = QuestionDifficulty.MEDIUM


class CourseListItem(BaseModel):
    course: CourseResponse
    completion_percent: int


class CourseListResponse(BaseModel):
    courses: list[CourseListItem]


class LessonWithStatus(BaseModel):
    lesson: LessonResponse
    status: ProgressStatus


class CourseDetailResponse(BaseModel):
    course: CourseResponse
    lessons: list[LessonWithStatus]
    completed_count: int
    completion_percent: int
