"""
Dashboard statistics derived from a snapshot of progress records.

Every function here is pure: no I/O, no mutation of its inputs, and a
defined result for empty input.
"""

from datetime import datetime, timedelta
from typing import Iterable, Sequence

from learnpath.models.enums import ProgressStatus
from learnpath.schemas.course_schemas import CourseResponse, LessonResponse
from learnpath.schemas.progress_schemas import (
    CourseProgressSummary,
    ProgressRecord,
    TotalStats,
    WeeklyStats,
)
from learnpath.utils.common import as_naive_utc, round_half_up

WEEK = timedelta(days=7)


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return round_half_up(100 * part / whole)


def _completed(records: Iterable[ProgressRecord]) -> int:
    return sum(1 for r in records if r.status == ProgressStatus.COMPLETED)


def weekly_stats(records: Sequence[ProgressRecord], now: datetime, window: timedelta = WEEK) -> WeeklyStats:
    """Completed lessons and minutes for records touched within `window` before `now` (boundary included)."""
    cutoff = as_naive_utc(now) - window
    recent = [r for r in records if as_naive_utc(r.last_accessed_at) >= cutoff]
    return WeeklyStats(
        lessons_completed_this_week=_completed(recent),
        minutes_this_week=sum(r.time_spent_minutes for r in recent),
    )


def course_completion_percent(records: Sequence[ProgressRecord], course_id: str) -> int:
    return course_progress_summary(records, course_id).percent


def course_progress_summary(records: Sequence[ProgressRecord], course_id: str) -> CourseProgressSummary:
    course_records = [r for r in records if r.course_id == course_id]
    completed = _completed(course_records)
    return CourseProgressSummary(
        completed=completed,
        total=len(course_records),
        percent=_percent(completed, len(course_records)),
    )


def active_courses(courses: Sequence[CourseResponse], records: Sequence[ProgressRecord]) -> list[CourseResponse]:
    """Courses with at least one started record, in the order given."""
    started = {r.course_id for r in records if r.status != ProgressStatus.NOT_STARTED}
    return [c for c in courses if c.id in started]


def total_stats(records: Sequence[ProgressRecord]) -> TotalStats:
    return TotalStats(
        total_completed=_completed(records),
        total_minutes=sum(r.time_spent_minutes for r in records),
        in_progress_course_count=len({r.course_id for r in records if r.status == ProgressStatus.IN_PROGRESS}),
    )


def lesson_status(records: Sequence[ProgressRecord], lesson_id: str) -> ProgressStatus:
    for r in records:
        if r.lesson_id == lesson_id:
            return r.status
    return ProgressStatus.NOT_STARTED


def course_detail_percent(lessons: Sequence[LessonResponse], records: Sequence[ProgressRecord]) -> int:
    """
    Share of a course's lessons that are completed.

    Unlike course_completion_percent, the denominator is the lesson count,
    so lessons never opened count against the course.
    """
    lesson_ids = {l.id for l in lessons}
    completed = _completed(r for r in records if r.lesson_id in lesson_ids)
    return _percent(completed, len(lessons))
