"""Unit tests for the progress aggregator (pure functions over progress snapshots)."""
from datetime import datetime, timedelta, timezone

import pytest

from learnpath.models.enums import ProgressStatus
from learnpath.schemas.course_schemas import CourseResponse, LessonResponse
from learnpath.schemas.progress_schemas import ProgressRecord
from learnpath.services.progress_aggregator import (
    active_courses,
    course_completion_percent,
    course_detail_percent,
    course_progress_summary,
    lesson_status,
    total_stats,
    weekly_stats,
)

NOW = datetime(2025, 11, 10, 12, 0, 0)


def record(
    lesson_id: str = "l1",
    course_id: str = "c1",
    status: ProgressStatus = ProgressStatus.IN_PROGRESS,
    minutes: int = 0,
    accessed: datetime = NOW,
) -> ProgressRecord:
    return ProgressRecord(
        user_id="u1",
        lesson_id=lesson_id,
        course_id=course_id,
        status=status,
        completion_percentage=100 if status == ProgressStatus.COMPLETED else 0,
        time_spent_minutes=minutes,
        last_accessed_at=accessed,
    )


def course(course_id: str) -> CourseResponse:
    return CourseResponse(id=course_id, title=course_id.upper(), is_published=True)


@pytest.mark.unit
class TestWeeklyStats:
    def test_empty(self):
        stats = weekly_stats([], NOW)
        assert stats.lessons_completed_this_week == 0
        assert stats.minutes_this_week == 0

    def test_excludes_records_outside_window(self):
        records = [
            record("l1", status=ProgressStatus.COMPLETED, minutes=10, accessed=NOW - timedelta(days=1)),
            record("l2", status=ProgressStatus.IN_PROGRESS, minutes=5, accessed=NOW - timedelta(days=10)),
        ]
        stats = weekly_stats(records, NOW)
        assert (stats.lessons_completed_this_week, stats.minutes_this_week) == (1, 10)

    def test_boundary_instant_included(self):
        records = [record(status=ProgressStatus.COMPLETED, minutes=3, accessed=NOW - timedelta(days=7))]
        assert weekly_stats(records, NOW).lessons_completed_this_week == 1

    def test_just_outside_boundary_excluded(self):
        records = [record(minutes=3, accessed=NOW - timedelta(days=7, seconds=1))]
        assert weekly_stats(records, NOW).minutes_this_week == 0

    def test_minutes_count_every_status(self):
        records = [
            record("l1", status=ProgressStatus.IN_PROGRESS, minutes=4),
            record("l2", status=ProgressStatus.NOT_STARTED, minutes=1),
            record("l3", status=ProgressStatus.COMPLETED, minutes=7),
        ]
        stats = weekly_stats(records, NOW)
        assert stats.minutes_this_week == 12
        assert stats.lessons_completed_this_week == 1

    def test_aware_now_against_naive_records(self):
        aware_now = NOW.replace(tzinfo=timezone.utc)
        records = [record(status=ProgressStatus.COMPLETED, accessed=NOW - timedelta(hours=2))]
        assert weekly_stats(records, aware_now).lessons_completed_this_week == 1


@pytest.mark.unit
class TestCourseCompletionPercent:
    def test_no_records_is_zero(self):
        assert course_completion_percent([], "c1") == 0

    def test_other_course_records_ignored(self):
        records = [record(course_id="c2", status=ProgressStatus.COMPLETED)]
        assert course_completion_percent(records, "c1") == 0

    def test_two_of_three_rounds_to_67(self):
        records = [
            record("l1", status=ProgressStatus.COMPLETED),
            record("l2", status=ProgressStatus.COMPLETED),
            record("l3", status=ProgressStatus.IN_PROGRESS),
        ]
        assert course_completion_percent(records, "c1") == 67

    def test_half_rounds_up(self):
        # 1 of 8 = 12.5%
        records = [record("l0", status=ProgressStatus.COMPLETED)] + [record(f"l{i}") for i in range(1, 8)]
        assert course_completion_percent(records, "c1") == 13

    def test_always_within_bounds(self):
        for completed in range(0, 6):
            records = [record(f"a{i}", status=ProgressStatus.COMPLETED) for i in range(completed)]
            records += [record(f"b{i}") for i in range(5 - completed)]
            assert 0 <= course_completion_percent(records, "c1") <= 100

    def test_summary_counts(self):
        records = [record("l1", status=ProgressStatus.COMPLETED), record("l2")]
        summary = course_progress_summary(records, "c1")
        assert (summary.completed, summary.total, summary.percent) == (1, 2, 50)


@pytest.mark.unit
class TestActiveCourses:
    def test_excludes_course_with_only_not_started(self):
        records = [record(course_id="c1", status=ProgressStatus.NOT_STARTED)]
        assert active_courses([course("c1")], records) == []

    def test_includes_in_progress_or_completed(self):
        records = [
            record("l1", course_id="c1", status=ProgressStatus.NOT_STARTED),
            record("l2", course_id="c1", status=ProgressStatus.IN_PROGRESS),
            record("l3", course_id="c2", status=ProgressStatus.COMPLETED),
        ]
        result = active_courses([course("c1"), course("c2"), course("c3")], records)
        assert [c.id for c in result] == ["c1", "c2"]

    def test_preserves_input_order(self):
        records = [record("l1", course_id="a"), record("l2", course_id="b")]
        result = active_courses([course("b"), course("a")], records)
        assert [c.id for c in result] == ["b", "a"]


@pytest.mark.unit
class TestTotalStats:
    def test_empty(self):
        stats = total_stats([])
        assert (stats.total_completed, stats.total_minutes, stats.in_progress_course_count) == (0, 0, 0)

    def test_counts_distinct_in_progress_courses(self):
        records = [
            record("l1", course_id="c1", status=ProgressStatus.IN_PROGRESS, minutes=30),
            record("l2", course_id="c1", status=ProgressStatus.IN_PROGRESS, minutes=20),
            record("l3", course_id="c2", status=ProgressStatus.IN_PROGRESS, minutes=15),
            record("l4", course_id="c3", status=ProgressStatus.COMPLETED, minutes=60),
        ]
        stats = total_stats(records)
        assert stats.total_completed == 1
        assert stats.total_minutes == 125
        assert stats.in_progress_course_count == 2
        assert stats.learning_hours == 2


@pytest.mark.unit
class TestCourseDetail:
    def lessons(self, *ids: str) -> list[LessonResponse]:
        return [LessonResponse(id=i, course_id="c1", title=i, order_index=n) for n, i in enumerate(ids)]

    def test_lesson_status_defaults_to_not_started(self):
        assert lesson_status([], "l1") == ProgressStatus.NOT_STARTED

    def test_lesson_status_from_record(self):
        assert lesson_status([record("l1", status=ProgressStatus.COMPLETED)], "l1") == ProgressStatus.COMPLETED

    def test_percent_uses_lesson_count(self):
        records = [record("l1", status=ProgressStatus.COMPLETED)]
        assert course_detail_percent(self.lessons("l1", "l2", "l3", "l4"), records) == 25

    def test_percent_no_lessons(self):
        assert course_detail_percent([], [record("l1", status=ProgressStatus.COMPLETED)]) == 0
