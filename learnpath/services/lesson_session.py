"""
Lesson session: the state of one open lesson view.

Phases:
    VIEWING -> COMPLETED                         (mark_complete, non-quiz lessons)
    ANSWERING(i) -> SHOWING_EXPLANATION(i)       (submit_answer)
    SHOWING_EXPLANATION(i) -> ANSWERING(i + 1)   (advance, more questions left)
    SHOWING_EXPLANATION(last) -> QUIZ_COMPLETED  (advance)

Every progress write goes through a command (BeginLesson, SubmitAnswer,
CompleteLesson) that is validated and turned into a ProgressUpdate. Store
writes never block a transition: their WriteResult is returned to the caller
and kept in `write_log`.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Union
from uuid import uuid4

from learnpath.models.enums import ContentType, ProgressStatus
from learnpath.models.session import QuizSession, SessionPhase
from learnpath.schemas.auth_schemas import LearnerContext
from learnpath.schemas.course_schemas import AssessmentItem, LessonResponse
from learnpath.schemas.progress_schemas import AttemptRecord, ProgressUpdate
from learnpath.schemas.session_schemas import QuestionView, SessionStateResponse
from learnpath.services.record_store import RecordStore
from learnpath.utils.common import elapsed_seconds, elapsed_whole_minutes, round_half_up, utcnow
from learnpath.utils.errors import RecordStoreError, WriteResult
from learnpath.utils.logger import get_logger

logger = get_logger("session")

# A quiz stays below 100% until the learner finishes it.
MAX_IN_PROGRESS_PERCENT = 99


@dataclass(frozen=True)
class BeginLesson:
    pass


@dataclass(frozen=True)
class SubmitAnswer:
    question_index: int
    total_questions: int


@dataclass(frozen=True)
class CompleteLesson:
    pass


LessonCommand = Union[BeginLesson, SubmitAnswer, CompleteLesson]


@dataclass(frozen=True)
class AnswerOutcome:
    correct: bool
    correct_answer: str
    explanation: str
    attempt_write: WriteResult
    progress_write: WriteResult


@dataclass(frozen=True)
class AdvanceOutcome:
    quiz_completed: bool
    progress_write: Optional[WriteResult] = None
    close_session: bool = False


@dataclass(frozen=True)
class CompletionOutcome:
    progress_write: WriteResult
    close_session: bool = True


class LessonSession:
    def __init__(
        self,
        *,
        context: LearnerContext,
        lesson: LessonResponse,
        store: RecordStore,
        clock: Callable[[], datetime] = utcnow,
        session_id: Optional[str] = None,
    ):
        self.id = session_id or str(uuid4())
        self.context = context
        self.lesson = lesson
        self.store = store
        self._clock = clock
        self.quiz = QuizSession(start_time=clock())
        self.assessments: list[AssessmentItem] = []
        self.phase = SessionPhase.VIEWING
        self.was_correct: Optional[bool] = None
        self.write_log: list[WriteResult] = []
        self.opened = False

    @property
    def is_quiz(self) -> bool:
        return self.lesson.content_type == ContentType.QUIZ

    @property
    def total_questions(self) -> int:
        return len(self.assessments)

    @property
    def current_assessment(self) -> Optional[AssessmentItem]:
        if self.phase not in (SessionPhase.ANSWERING, SessionPhase.SHOWING_EXPLANATION):
            return None
        return self.assessments[self.quiz.current_question_index]

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    async def open(self) -> WriteResult:
        """Record the visit and, for quizzes, load the questions alongside it."""
        if self.opened:
            raise RuntimeError(f"session {self.id} already opened")
        self.opened = True
        if self.is_quiz:
            begin, assessments = await asyncio.gather(
                self._write(BeginLesson()),
                self._load_assessments(),
            )
            self.assessments = assessments
        else:
            begin = await self._write(BeginLesson())

        self.phase = SessionPhase.ANSWERING if self.assessments else SessionPhase.VIEWING
        logger.info(
            "session opened id=%s user=%s lesson=%s phase=%s questions=%s",
            self.id, self.context.user_id, self.lesson.id, self.phase.value, self.total_questions,
        )
        return begin

    def select_answer(self, answer: str) -> bool:
        """Pick one of the current question's options. Ignored outside ANSWERING or for anything else."""
        if self.phase != SessionPhase.ANSWERING:
            return False
        if answer not in self.assessments[self.quiz.current_question_index].options:
            logger.debug("answer ignored id=%s: not an option", self.id)
            return False
        self.quiz.selected_answer = answer
        return True

    async def submit_answer(self, answer: Optional[str] = None) -> Optional[AnswerOutcome]:
        """Grade the selected answer. Returns None (and writes nothing) when there is nothing to grade."""
        if answer is not None and not self.select_answer(answer):
            return None
        if self.phase != SessionPhase.ANSWERING or not self.quiz.selected_answer:
            return None

        index = self.quiz.current_question_index
        assessment = self.assessments[index]
        selected = self.quiz.selected_answer
        correct = selected == assessment.correct_answer
        if correct:
            self.quiz.score += 1
        self.was_correct = correct
        self.phase = SessionPhase.SHOWING_EXPLANATION

        now = self._clock()
        attempt_write = await self._log_attempt(
            AttemptRecord(
                user_id=self.context.user_id,
                assessment_id=assessment.id,
                user_answer=selected,
                is_correct=correct,
                time_taken_seconds=round_half_up(elapsed_seconds(self.quiz.start_time, now)),
                attempted_at=now,
            )
        )
        progress_write = await self._write(SubmitAnswer(index, self.total_questions))
        logger.debug("answer graded id=%s question=%s correct=%s score=%s", self.id, index, correct, self.quiz.score)
        return AnswerOutcome(
            correct=correct,
            correct_answer=assessment.correct_answer,
            explanation=assessment.explanation,
            attempt_write=attempt_write,
            progress_write=progress_write,
        )

    async def advance(self) -> Optional[AdvanceOutcome]:
        """Move past an explanation to the next question, or finish the quiz (the caller should then close the session)."""
        if self.phase != SessionPhase.SHOWING_EXPLANATION:
            return None
        if self.quiz.current_question_index + 1 < self.total_questions:
            self.quiz.current_question_index += 1
            self.quiz.selected_answer = ""
            self.was_correct = None
            self.phase = SessionPhase.ANSWERING
            return AdvanceOutcome(quiz_completed=False)

        self.quiz.completed = True
        self.phase = SessionPhase.QUIZ_COMPLETED
        progress_write = await self._write(CompleteLesson())
        logger.info(
            "quiz completed id=%s user=%s lesson=%s score=%s/%s",
            self.id, self.context.user_id, self.lesson.id, self.quiz.score, self.total_questions,
        )
        return AdvanceOutcome(quiz_completed=True, progress_write=progress_write, close_session=True)

    async def mark_complete(self) -> Optional[CompletionOutcome]:
        """Finish a lesson that has no questions. The caller should close the session afterwards."""
        if self.phase != SessionPhase.VIEWING:
            return None
        self.quiz.completed = True
        self.phase = SessionPhase.COMPLETED
        progress_write = await self._write(CompleteLesson())
        logger.info("lesson completed id=%s user=%s lesson=%s", self.id, self.context.user_id, self.lesson.id)
        return CompletionOutcome(progress_write=progress_write)

    # -------------------------------------------------------------------------
    # Commands -> store writes
    # -------------------------------------------------------------------------

    def build_update(self, command: LessonCommand, now: datetime) -> ProgressUpdate:
        completed_at = None
        if isinstance(command, BeginLesson):
            status, percent = ProgressStatus.IN_PROGRESS, 0
        elif isinstance(command, SubmitAnswer):
            if command.total_questions <= 0 or not 0 <= command.question_index < command.total_questions:
                raise ValueError(f"question {command.question_index} out of range for {command.total_questions}")
            status = ProgressStatus.IN_PROGRESS
            percent = min(
                round_half_up(100 * (command.question_index + 1) / command.total_questions),
                MAX_IN_PROGRESS_PERCENT,
            )
        elif isinstance(command, CompleteLesson):
            status, percent, completed_at = ProgressStatus.COMPLETED, 100, now
        else:
            raise TypeError(f"unknown lesson command: {command!r}")

        return ProgressUpdate(
            user_id=self.context.user_id,
            lesson_id=self.lesson.id,
            course_id=self.lesson.course_id,
            status=status,
            completion_percentage=percent,
            time_spent_minutes=elapsed_whole_minutes(self.quiz.start_time, now),
            last_accessed_at=now,
            completed_at=completed_at,
        )

    async def _write(self, command: LessonCommand) -> WriteResult:
        result = await self.store.upsert_progress(self.build_update(command, self._clock()))
        self.write_log.append(result)
        return result

    async def _log_attempt(self, attempt: AttemptRecord) -> WriteResult:
        result = await self.store.log_attempt(attempt)
        self.write_log.append(result)
        return result

    async def _load_assessments(self) -> list[AssessmentItem]:
        try:
            return await self.store.fetch_assessments(self.lesson.id)
        except RecordStoreError:
            logger.warning("assessments unavailable id=%s lesson=%s", self.id, self.lesson.id)
            return []

    # -------------------------------------------------------------------------
    # Presentation
    # -------------------------------------------------------------------------

    def describe(self) -> SessionStateResponse:
        question = None
        assessment = self.current_assessment
        if assessment is not None:
            revealed = self.phase == SessionPhase.SHOWING_EXPLANATION
            question = QuestionView(
                assessment_id=assessment.id,
                index=self.quiz.current_question_index,
                total=self.total_questions,
                question=assessment.question,
                options=list(assessment.options),
                difficulty=assessment.difficulty,
                correct_answer=assessment.correct_answer if revealed else None,
                explanation=assessment.explanation if revealed else None,
            )
        return SessionStateResponse(
            session_id=self.id,
            lesson_id=self.lesson.id,
            course_id=self.lesson.course_id,
            content_type=self.lesson.content_type,
            phase=self.phase,
            score=self.quiz.score,
            total_questions=self.total_questions,
            selected_answer=self.quiz.selected_answer,
            was_correct=self.was_correct,
            question=question,
        )
