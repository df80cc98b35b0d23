"""
Lesson session endpoints: open a lesson, answer its quiz, complete it, close it.
"""

from fastapi import APIRouter, Depends, HTTPException

from learnpath.schemas.auth_schemas import LearnerContext
from learnpath.schemas.session_schemas import (
    AdvanceResponse,
    AnswerRequest,
    AnswerResponse,
    CompleteResponse,
    OpenSessionResponse,
    SessionStateResponse,
)
from learnpath.services.lesson_session import AnswerOutcome, LessonSession
from learnpath.services.record_store import SqlRecordStore, get_store
from learnpath.services.session_registry import LessonSessionRegistry, get_session_registry
from learnpath.utils.auth import get_current_learner

session_routes = APIRouter()


def _get_session(session_id: str, learner: LearnerContext, registry: LessonSessionRegistry) -> LessonSession:
    session = registry.get(session_id, learner.user_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _answer_response(session: LessonSession, outcome: AnswerOutcome | None) -> AnswerResponse:
    if outcome is None:
        return AnswerResponse(accepted=False, state=session.describe())
    return AnswerResponse(
        accepted=True,
        correct=outcome.correct,
        attempt_write=outcome.attempt_write,
        progress_write=outcome.progress_write,
        state=session.describe(),
    )


@session_routes.post("/lessons/{lesson_id}/sessions", response_model=OpenSessionResponse)
async def open_session(
    lesson_id: str,
    learner: LearnerContext = Depends(get_current_learner),
    store: SqlRecordStore = Depends(get_store),
    registry: LessonSessionRegistry = Depends(get_session_registry),
) -> OpenSessionResponse:
    """Open a lesson: records the visit and loads quiz questions when the lesson is a quiz."""
    lesson = await store.fetch_lesson(lesson_id)
    course = await store.fetch_course(lesson.course_id) if lesson else None
    if lesson is None or course is None or not course.is_published:
        raise HTTPException(status_code=404, detail="Lesson not found")

    session = LessonSession(context=learner, lesson=lesson, store=store)
    begin = await session.open()
    registry.add(session)
    return OpenSessionResponse(progress_write=begin, state=session.describe())


@session_routes.get("/sessions/{session_id}", response_model=SessionStateResponse)
async def get_session_state(
    session_id: str,
    learner: LearnerContext = Depends(get_current_learner),
    registry: LessonSessionRegistry = Depends(get_session_registry),
) -> SessionStateResponse:
    return _get_session(session_id, learner, registry).describe()


@session_routes.post("/sessions/{session_id}/answer", response_model=AnswerResponse)
async def select_answer(
    session_id: str,
    body: AnswerRequest,
    learner: LearnerContext = Depends(get_current_learner),
    registry: LessonSessionRegistry = Depends(get_session_registry),
) -> AnswerResponse:
    """Select an option; with submit=true it is graded straight away."""
    session = _get_session(session_id, learner, registry)
    if body.submit:
        return _answer_response(session, await session.submit_answer(body.answer))
    return AnswerResponse(accepted=session.select_answer(body.answer), state=session.describe())


@session_routes.post("/sessions/{session_id}/submit", response_model=AnswerResponse)
async def submit_answer(
    session_id: str,
    learner: LearnerContext = Depends(get_current_learner),
    registry: LessonSessionRegistry = Depends(get_session_registry),
) -> AnswerResponse:
    session = _get_session(session_id, learner, registry)
    return _answer_response(session, await session.submit_answer())


@session_routes.post("/sessions/{session_id}/advance", response_model=AdvanceResponse)
async def advance(
    session_id: str,
    learner: LearnerContext = Depends(get_current_learner),
    registry: LessonSessionRegistry = Depends(get_session_registry),
) -> AdvanceResponse:
    """Next question, or finish the quiz. A finished quiz session is closed."""
    session = _get_session(session_id, learner, registry)
    outcome = await session.advance()
    if outcome is None:
        return AdvanceResponse(accepted=False, state=session.describe())
    if outcome.close_session:
        registry.close(session_id, learner.user_id)
    return AdvanceResponse(
        accepted=True,
        quiz_completed=outcome.quiz_completed,
        close_session=outcome.close_session,
        progress_write=outcome.progress_write,
        state=session.describe(),
    )


@session_routes.post("/sessions/{session_id}/complete", response_model=CompleteResponse)
async def complete_lesson(
    session_id: str,
    learner: LearnerContext = Depends(get_current_learner),
    registry: LessonSessionRegistry = Depends(get_session_registry),
) -> CompleteResponse:
    """Mark a non-quiz lesson complete. The session is closed on success of the transition."""
    session = _get_session(session_id, learner, registry)
    outcome = await session.mark_complete()
    if outcome is None:
        return CompleteResponse(accepted=False, state=session.describe())
    if outcome.close_session:
        registry.close(session_id, learner.user_id)
    return CompleteResponse(
        accepted=True,
        close_session=outcome.close_session,
        progress_write=outcome.progress_write,
        state=session.describe(),
    )


@session_routes.delete("/sessions/{session_id}")
async def close_session(
    session_id: str,
    learner: LearnerContext = Depends(get_current_learner),
    registry: LessonSessionRegistry = Depends(get_session_registry),
) -> dict:
    if not registry.close(session_id, learner.user_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"session_id": session_id, "closed": True}
