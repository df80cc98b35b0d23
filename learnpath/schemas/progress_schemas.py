"""
Progress records, progress writes and the statistics derived from them.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from learnpath.models.enums import ProgressStatus
from learnpath.schemas.course_schemas import CourseResponse
from learnpath.schemas.profile_schemas import ProfileResponse


class ProgressRecord(BaseModel):
    """One learner's progress on one lesson."""
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    lesson_id: str
    course_id: str
    status: ProgressStatus = ProgressStatus.NOT_STARTED
    completion_percentage: int = Field(default=0, ge=0, le=100)
    time_spent_minutes: int = Field(default=0, ge=0)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    last_accessed_at: datetime


class ProgressUpdate(BaseModel):
    """A validated progress write for one (user, lesson) key."""

    user_id: str
    lesson_id: str
    course_id: str
    status: ProgressStatus
    completion_percentage: int = Field(ge=0, le=100)
    time_spent_minutes: int = Field(ge=0)
    last_accessed_at: datetime
    completed_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _full_iff_completed(self) -> "ProgressUpdate":
        if (self.status == ProgressStatus.COMPLETED) != (self.completion_percentage == 100):
            raise ValueError("completion_percentage must be 100 exactly when status is completed")
        return self

    def row_fields(self) -> dict[str, Any]:
        """Columns written on both insert and update."""
        fields: dict[str, Any] = {
            "course_id": self.course_id,
            "status": self.status.value,
            "completion_percentage": self.completion_percentage,
            "time_spent_minutes": self.time_spent_minutes,
            "last_accessed_at": self.last_accessed_at,
        }
        if self.completed_at is not None:
            fields["completed_at"] = self.completed_at
        return fields


class AttemptRecord(BaseModel):
    """One answered question. Append-only."""
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    assessment_id: str
    user_answer: str
    is_correct: bool
    time_taken_seconds: int = Field(ge=0)
    attempted_at: Optional[datetime] = None


class WeeklyStats(BaseModel):
    lessons_completed_this_week: int = 0
    minutes_this_week: int = 0


class TotalStats(BaseModel):
    total_completed: int = 0
    total_minutes: int = 0
    in_progress_course_count: int = 0

    @computed_field
    @property
    def learning_hours(self) -> int:
        return self.total_minutes // 60


class CourseProgressSummary(BaseModel):
    completed: int = 0
    total: int = 0
    percent: int = 0


class ActiveCourse(BaseModel):
    course: CourseResponse
    progress: CourseProgressSummary


class DashboardResponse(BaseModel):
    totals: TotalStats
    weekly: WeeklyStats
    active_courses: list[ActiveCourse]
    profile: Optional[ProfileResponse] = None


class ProgressListResponse(BaseModel):
    records: list[ProgressRecord]
