"""
Learner dashboard: the cached snapshot behind the progress screens.
"""

import asyncio
from datetime import datetime, timedelta
from typing import Optional

from learnpath.schemas.auth_schemas import LearnerContext
from learnpath.schemas.course_schemas import CourseResponse
from learnpath.schemas.profile_schemas import EDITABLE_PROFILE_FIELDS, ProfileResponse
from learnpath.schemas.progress_schemas import ActiveCourse, DashboardResponse, ProgressRecord
from learnpath.services import progress_aggregator
from learnpath.services.record_store import RecordStore
from learnpath.utils.errors import RecordStoreError, WriteResult
from learnpath.utils.logger import get_logger, log_request

logger = get_logger("dashboard")


class LearnerDashboard:
    """
    Holds courses, progress and profile for one learner.

    A failed load keeps whatever was loaded before (possibly nothing) and sets
    `load_failed`; the dashboard stays readable either way.
    """

    def __init__(self, context: LearnerContext, store: RecordStore, window_days: int = 7):
        self.context = context
        self.store = store
        self.window = timedelta(days=window_days)
        self.courses: list[CourseResponse] = []
        self.progress: list[ProgressRecord] = []
        self.profile: Optional[ProfileResponse] = None
        self.load_failed = False

    async def load(self) -> bool:
        try:
            with log_request(logger, f"load dashboard user={self.context.user_id}"):
                courses, progress, profile = await asyncio.gather(
                    self.store.fetch_courses(published_only=True),
                    self.store.fetch_progress(self.context.user_id),
                    self.store.fetch_profile(self.context.user_id),
                )
        except RecordStoreError:
            self.load_failed = True
            return False
        self.courses, self.progress, self.profile = courses, progress, profile
        self.load_failed = False
        return True

    def summary(self, now: datetime) -> DashboardResponse:
        return DashboardResponse(
            totals=progress_aggregator.total_stats(self.progress),
            weekly=progress_aggregator.weekly_stats(self.progress, now, self.window),
            active_courses=[
                ActiveCourse(
                    course=course,
                    progress=progress_aggregator.course_progress_summary(self.progress, course.id),
                )
                for course in progress_aggregator.active_courses(self.courses, self.progress)
            ],
            profile=self.profile,
        )

    async def update_profile(self, fields: dict) -> WriteResult:
        """Persist profile changes; the cached profile only changes if the write succeeded."""
        result = await self.store.update_profile(self.context.user_id, fields)
        if result.ok and self.profile is not None:
            merged = {**self.profile.model_dump(), **{k: v for k, v in fields.items() if k in EDITABLE_PROFILE_FIELDS}}
            self.profile = ProfileResponse.model_validate(merged)
        return result
