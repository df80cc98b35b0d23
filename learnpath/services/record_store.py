"""
Record store: the request/response boundary to the relational database.

Reads raise RecordStoreError on failure. Writes never raise; they return a
WriteResult so the caller decides whether a failure matters.
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from functools import lru_cache
from typing import AsyncIterator, Callable, Optional, Protocol, TypeVar
from uuid import uuid4

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session as DBSession, sessionmaker
from starlette.concurrency import run_in_threadpool

from learnpath.config import get_session_factory
from learnpath.models.models import (
    Assessment,
    Course,
    Lesson,
    Profile,
    UserAssessment,
    UserProgress,
)
from learnpath.schemas.course_schemas import AssessmentItem, CourseResponse, LessonResponse
from learnpath.schemas.profile_schemas import EDITABLE_PROFILE_FIELDS, ProfileResponse
from learnpath.schemas.progress_schemas import AttemptRecord, ProgressRecord, ProgressUpdate
from learnpath.utils.common import utcnow
from learnpath.utils.errors import RecordStoreError, WriteResult
from learnpath.utils.logger import get_logger

logger = get_logger("store")

T = TypeVar("T")


class RecordStore(Protocol):
    """Operations the lesson sessions and the dashboard need from storage."""

    async def fetch_courses(self, published_only: bool = True) -> list[CourseResponse]:
        ...

    async def fetch_course(self, course_id: str) -> Optional[CourseResponse]:
        ...

    async def fetch_lessons(self, course_id: str) -> list[LessonResponse]:
        ...

    async def fetch_lesson(self, lesson_id: str) -> Optional[LessonResponse]:
        ...

    async def fetch_progress(self, user_id: str, course_id: Optional[str] = None) -> list[ProgressRecord]:
        ...

    async def fetch_assessments(self, lesson_id: str) -> list[AssessmentItem]:
        ...

    async def upsert_progress(self, update: ProgressUpdate) -> WriteResult:
        ...

    async def log_attempt(self, attempt: AttemptRecord) -> WriteResult:
        ...

    async def fetch_profile(self, user_id: str) -> Optional[ProfileResponse]:
        ...

    async def update_profile(self, user_id: str, fields: dict) -> WriteResult:
        ...


@dataclass
class _KeyLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class KeyedLocks:
    """One asyncio.Lock per key, dropped once nothing holds or waits on it."""

    def __init__(self):
        self._locks: dict[tuple[str, ...], _KeyLock] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, *key: str) -> AsyncIterator[None]:
        entry = self._locks.get(key)
        if entry is None:
            entry = self._locks[key] = _KeyLock()
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[key]


class SqlRecordStore:
    """
    RecordStore over SQLAlchemy. Each call runs in its own short-lived ORM
    session on a worker thread, so concurrent calls overlap instead of
    blocking the event loop.
    """

    def __init__(self, session_factory: sessionmaker, locks: Optional[KeyedLocks] = None):
        self._session_factory = session_factory
        self._progress_locks = locks or KeyedLocks()

    async def _read(self, operation: str, query: Callable[[DBSession], T]) -> T:
        return await run_in_threadpool(self._read_sync, operation, query)

    def _read_sync(self, operation: str, query: Callable[[DBSession], T]) -> T:
        try:
            with self._session_factory() as db:
                return query(db)
        except SQLAlchemyError as e:
            logger.exception("read failed op=%s", operation)
            raise RecordStoreError(operation) from e

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def fetch_courses(self, published_only: bool = True) -> list[CourseResponse]:
        def query(db: DBSession) -> list[CourseResponse]:
            q = db.query(Course)
            if published_only:
                q = q.filter(Course.is_published.is_(True))
            return [CourseResponse.model_validate(r) for r in q.order_by(Course.created_at.desc()).all()]

        return await self._read("fetch_courses", query)

    async def fetch_course(self, course_id: str) -> Optional[CourseResponse]:
        def query(db: DBSession) -> Optional[CourseResponse]:
            row = db.query(Course).filter(Course.id == course_id).first()
            return CourseResponse.model_validate(row) if row else None

        return await self._read("fetch_course", query)

    async def fetch_lessons(self, course_id: str) -> list[LessonResponse]:
        def query(db: DBSession) -> list[LessonResponse]:
            rows = (
                db.query(Lesson)
                .filter(Lesson.course_id == course_id)
                .order_by(Lesson.order_index.asc())
                .all()
            )
            return [LessonResponse.model_validate(r) for r in rows]

        return await self._read("fetch_lessons", query)

    async def fetch_lesson(self, lesson_id: str) -> Optional[LessonResponse]:
        def query(db: DBSession) -> Optional[LessonResponse]:
            row = db.query(Lesson).filter(Lesson.id == lesson_id).first()
            return LessonResponse.model_validate(row) if row else None

        return await self._read("fetch_lesson", query)

    async def fetch_progress(self, user_id: str, course_id: Optional[str] = None) -> list[ProgressRecord]:
        def query(db: DBSession) -> list[ProgressRecord]:
            q = db.query(UserProgress).filter(UserProgress.user_id == user_id)
            if course_id is not None:
                q = q.filter(UserProgress.course_id == course_id)
            return [ProgressRecord.model_validate(r) for r in q.all()]

        return await self._read("fetch_progress", query)

    async def fetch_assessments(self, lesson_id: str) -> list[AssessmentItem]:
        # Order is whatever the database returns; callers must not rely on it.
        def query(db: DBSession) -> list[AssessmentItem]:
            rows = db.query(Assessment).filter(Assessment.lesson_id == lesson_id).all()
            return [AssessmentItem.model_validate(r) for r in rows]

        return await self._read("fetch_assessments", query)

    async def fetch_profile(self, user_id: str) -> Optional[ProfileResponse]:
        def query(db: DBSession) -> Optional[ProfileResponse]:
            row = db.query(Profile).filter(Profile.id == user_id).first()
            return ProfileResponse.model_validate(row) if row else None

        return await self._read("fetch_profile", query)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def upsert_progress(self, update: ProgressUpdate) -> WriteResult:
        """Update the (user, lesson) record if one exists, else insert it."""
        async with self._progress_locks.hold(update.user_id, update.lesson_id):
            try:
                await run_in_threadpool(self._upsert_progress_sync, update)
            except SQLAlchemyError as e:
                logger.warning(
                    "progress write failed user=%s lesson=%s status=%s error=%s",
                    update.user_id, update.lesson_id, update.status.value, e,
                )
                return WriteResult.failure(str(e))
        logger.debug(
            "progress written user=%s lesson=%s status=%s pct=%s",
            update.user_id, update.lesson_id, update.status.value, update.completion_percentage,
        )
        return WriteResult.success()

    def _find_progress(self, db: DBSession, update: ProgressUpdate) -> Optional[UserProgress]:
        return (
            db.query(UserProgress)
            .filter(UserProgress.user_id == update.user_id, UserProgress.lesson_id == update.lesson_id)
            .first()
        )

    def _upsert_progress_sync(self, update: ProgressUpdate) -> None:
        fields = update.row_fields()
        with self._session_factory() as db:
            existing = self._find_progress(db, update)
            if existing is not None:
                for name, value in fields.items():
                    setattr(existing, name, value)
                db.commit()
                return

            db.add(
                UserProgress(
                    id=str(uuid4()),
                    user_id=update.user_id,
                    lesson_id=update.lesson_id,
                    started_at=update.last_accessed_at,
                    **fields,
                )
            )
            try:
                db.commit()
            except IntegrityError:
                # Another process created the row first; apply ours on top of it.
                db.rollback()
                existing = self._find_progress(db, update)
                if existing is None:
                    raise
                for name, value in fields.items():
                    setattr(existing, name, value)
                db.commit()

    async def log_attempt(self, attempt: AttemptRecord) -> WriteResult:
        try:
            await run_in_threadpool(self._log_attempt_sync, attempt)
        except SQLAlchemyError as e:
            logger.warning("attempt log failed user=%s assessment=%s error=%s", attempt.user_id, attempt.assessment_id, e)
            return WriteResult.failure(str(e))
        return WriteResult.success()

    def _log_attempt_sync(self, attempt: AttemptRecord) -> None:
        with self._session_factory() as db:
            db.add(
                UserAssessment(
                    id=str(uuid4()),
                    user_id=attempt.user_id,
                    assessment_id=attempt.assessment_id,
                    user_answer=attempt.user_answer,
                    is_correct=attempt.is_correct,
                    time_taken_seconds=attempt.time_taken_seconds,
                    attempted_at=attempt.attempted_at or utcnow(),
                )
            )
            db.commit()

    async def update_profile(self, user_id: str, fields: dict) -> WriteResult:
        changes = {k: v for k, v in fields.items() if k in EDITABLE_PROFILE_FIELDS}
        if not changes:
            return WriteResult.failure("no editable profile fields")
        try:
            found = await run_in_threadpool(self._update_profile_sync, user_id, changes)
        except SQLAlchemyError as e:
            logger.warning("profile update failed user=%s error=%s", user_id, e)
            return WriteResult.failure(str(e))
        return WriteResult.success() if found else WriteResult.failure("profile not found")

    def _update_profile_sync(self, user_id: str, changes: dict) -> bool:
        with self._session_factory() as db:
            profile = db.query(Profile).filter(Profile.id == user_id).first()
            if profile is None:
                return False
            for name, value in changes.items():
                setattr(profile, name, value)
            profile.updated_at = utcnow()
            db.commit()
        return True


@lru_cache()
def get_store() -> SqlRecordStore:
    """Process-wide store, so per-key write locks are shared by every request."""
    return SqlRecordStore(get_session_factory())
