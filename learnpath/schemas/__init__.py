"""
Schemas package. Import from submodules or from this package.

Example:
    from learnpath.schemas import ProgressRecord, DashboardResponse
    from learnpath.schemas.progress_schemas import ProgressRecord
"""

from learnpath.schemas.auth_schemas import AuthTokenPayload, LearnerContext
from learnpath.schemas.course_schemas import (
    AssessmentItem,
    CourseDetailResponse,
    CourseListItem,
    CourseListResponse,
    CourseResponse,
    LessonResponse,
    LessonWithStatus,
)
from learnpath.schemas.profile_schemas import (
    EDITABLE_PROFILE_FIELDS,
    ProfileResponse,
    UpdateProfileRequest,
)
from learnpath.schemas.progress_schemas import (
    ActiveCourse,
    AttemptRecord,
    CourseProgressSummary,
    DashboardResponse,
    ProgressListResponse,
    ProgressRecord,
    ProgressUpdate,
    TotalStats,
    WeeklyStats,
)
from learnpath.schemas.session_schemas import (
    AdvanceResponse,
    AnswerRequest,
    AnswerResponse,
    CompleteResponse,
    OpenSessionResponse,
    QuestionView,
    SessionStateResponse,
)

__all__ = [
    # auth
    "AuthTokenPayload",
    "LearnerContext",
    # course
    "AssessmentItem",
    "CourseDetailResponse",
    "CourseListItem",
    "CourseListResponse",
    "CourseResponse",
    "LessonResponse",
    "LessonWithStatus",
    # profile
    "EDITABLE_PROFILE_FIELDS",
    "ProfileResponse",
    "UpdateProfileRequest",
    # progress
    "ActiveCourse",
    "AttemptRecord",
    "CourseProgressSummary",
    "DashboardResponse",
    "ProgressListResponse",
    "ProgressRecord",
    "ProgressUpdate",
    "TotalStats",
    "WeeklyStats",
    # session
    "AdvanceResponse",
    "AnswerRequest",
    "AnswerResponse",
    "CompleteResponse",
    "OpenSessionResponse",
    "QuestionView",
    "SessionStateResponse",
]
