"""
Course catalog and raw progress endpoints.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from learnpath.models.enums import ProgressStatus
from learnpath.schemas.auth_schemas import LearnerContext
from learnpath.schemas.course_schemas import (
    CourseDetailResponse,
    CourseListItem,
    CourseListResponse,
    LessonWithStatus,
)
from learnpath.schemas.progress_schemas import ProgressListResponse
from learnpath.services import progress_aggregator
from learnpath.services.record_store import SqlRecordStore, get_store
from learnpath.utils.auth import get_current_learner

catalog_routes = APIRouter()


@catalog_routes.get("/courses", response_model=CourseListResponse)
async def list_courses(
    learner: LearnerContext = Depends(get_current_learner),
    store: SqlRecordStore = Depends(get_store),
) -> CourseListResponse:
    """Published courses, newest first, with the learner's completion percent for each."""
    courses, progress = await asyncio.gather(
        store.fetch_courses(published_only=True),
        store.fetch_progress(learner.user_id),
    )
    return CourseListResponse(
        courses=[
            CourseListItem(
                course=c,
                completion_percent=progress_aggregator.course_completion_percent(progress, c.id),
            )
            for c in courses
        ]
    )


@catalog_routes.get("/courses/{course_id}", response_model=CourseDetailResponse)
async def get_course(
    course_id: str,
    learner: LearnerContext = Depends(get_current_learner),
    store: SqlRecordStore = Depends(get_store),
) -> CourseDetailResponse:
    """Course with its lessons in order and the learner's status on each."""
    course = await store.fetch_course(course_id)
    if course is None or not course.is_published:
        raise HTTPException(status_code=404, detail="Course not found")
    lessons, progress = await asyncio.gather(
        store.fetch_lessons(course_id),
        store.fetch_progress(learner.user_id, course_id=course_id),
    )
    items = [
        LessonWithStatus(lesson=l, status=progress_aggregator.lesson_status(progress, l.id))
        for l in lessons
    ]
    return CourseDetailResponse(
        course=course,
        lessons=items,
        completed_count=sum(1 for i in items if i.status == ProgressStatus.COMPLETED),
        completion_percent=progress_aggregator.course_detail_percent(lessons, progress),
    )


@catalog_routes.get("/progress", response_model=ProgressListResponse)
async def list_progress(
    course_id: Optional[str] = Query(None, description="Restrict to one course"),
    learner: LearnerContext = Depends(get_current_learner),
    store: SqlRecordStore = Depends(get_store),
) -> ProgressListResponse:
    return ProgressListResponse(records=await store.fetch_progress(learner.user_id, course_id=course_id))
