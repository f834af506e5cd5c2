"""
Candidate Session - timed state machine for one candidate attempt

States move one way only:

    NOT_STARTED -> RUNNING -> SUBMITTING -> TERMINATED

While RUNNING two independent countdowns tick once per second. The question
countdown auto-advances to the next question (and re-arms on the last one);
the total countdown auto-submits. Expiry of one never resets the other.

CandidateSession is synchronous and has no I/O so it can be unit tested
tick by tick. SessionRunner owns the asyncio task that drives the ticks and
the single call into the submission callback.
"""

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

from pydantic import BaseModel

from quizlink.core.exceptions import InvalidOptionError, NotFoundError, SessionStateError
from quizlink.schemas.assessment_schema import AssessmentDefinition, Question
from quizlink.schemas.result_schema import CandidateAnswer, UNANSWERED
from quizlink.services.scoring import build_answers, elapsed_minutes, score_answers

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    SUBMITTING = "submitting"
    TERMINATED = "terminated"


class SessionEvent(str, Enum):
    AUTO_ADVANCED = "auto_advanced"
    QUESTION_REARMED = "question_rearmed"
    TIME_EXPIRED = "time_expired"


class SubmitReason(str, Enum):
    MANUAL = "manual"
    TIME_EXPIRED = "time_expired"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionSubmission(BaseModel):
    """Everything the submission guard needs, computed when the session closes"""
    answers: List[CandidateAnswer]
    score: int
    total_questions: int
    time_taken: int
    reason: SubmitReason
    started_at: datetime
    finished_at: datetime


class CandidateSession:
    def __init__(self, definition: AssessmentDefinition, clock: Callable[[], datetime] = utc_now):
        if not definition.questions:
            raise ValueError("Assessment has no questions")
        self.definition = definition
        self._clock = clock
        self._questions_by_id: Dict[str, Question] = {
            q.id: q for q in definition.questions}

        self.state = SessionState.NOT_STARTED
        self.current_index = 0
        self.total_remaining = 0
        self.question_remaining = 0
        self.started_at: Optional[datetime] = None
        self.finished_at: Optional[datetime] = None
        self.submit_reason: Optional[SubmitReason] = None

        self._selections: Dict[str, int] = {}
        # Seconds actually spent on each question, stamped at every transition
        self._dwell: Dict[str, float] = {}
        self._question_entered_at: Optional[datetime] = None

    @property
    def last_index(self) -> int:
        return len(self.definition.questions) - 1

    @property
    def current_question(self) -> Question:
        return self.definition.questions[self.current_index]

    @property
    def is_last_question(self) -> bool:
        return self.current_index == self.last_index

    @property
    def answers(self) -> Dict[str, int]:
        return dict(self._selections)

    def selected_option(self, question_id: str) -> int:
        return self._selections.get(question_id, UNANSWERED)

    def _require(self, *states: SessionState):
        if self.state not in states:
            raise SessionStateError(
                f"Not allowed while session is {self.state.value}")

    def start(self):
        self._require(SessionState.NOT_STARTED)
        now = self._clock()
        self.started_at = now
        self._question_entered_at = now
        self.total_remaining = self.definition.total_seconds
        self.question_remaining = self.definition.question_seconds
        self.state = SessionState.RUNNING
        logger.info(
            f"Session started for assessment {self.definition.assessment_id}: "
            f"{self.total_remaining}s total, {self.question_remaining}s per question")

    def tick(self) -> List[SessionEvent]:
        """Advance both countdowns by one second.

        Returns the events the tick produced. Ticks outside RUNNING are
        ignored, so a late tick can never touch a finalized session.
        """
        if self.state != SessionState.RUNNING:
            return []

        self.total_remaining = max(0, self.total_remaining - 1)
        self.question_remaining = max(0, self.question_remaining - 1)

        if self.total_remaining == 0:
            self._begin_submission(SubmitReason.TIME_EXPIRED)
            return [SessionEvent.TIME_EXPIRED]

        if self.question_remaining == 0:
            if self.is_last_question:
                self.question_remaining = self.definition.question_seconds
                return [SessionEvent.QUESTION_REARMED]
            self._move_to(self.current_index + 1)
            return [SessionEvent.AUTO_ADVANCED]

        return []

    def next_question(self) -> bool:
        """Move forward; stays on the last question. Returns True if moved"""
        self._require(SessionState.RUNNING)
        return self._move_to(self.current_index + 1)

    def previous_question(self) -> bool:
        """Move back; stays on the first question. Returns True if moved"""
        self._require(SessionState.RUNNING)
        return self._move_to(self.current_index - 1)

    def record_answer(self, question_id: str, option_index: int):
        self._require(SessionState.RUNNING)
        question = self._questions_by_id.get(question_id)
        if question is None:
            raise NotFoundError(f"Question {question_id} is not part of this assessment")
        if isinstance(option_index, bool) or not isinstance(option_index, int) \
                or not 0 <= option_index < len(question.options):
            raise InvalidOptionError(
                f"Option {option_index} is out of range for question {question_id}")
        self._selections[question_id] = option_index

    def submit(self) -> SessionSubmission:
        """Manual submit, allowed at any point while RUNNING"""
        self._require(SessionState.RUNNING)
        self._begin_submission(SubmitReason.MANUAL)
        return self.build_submission()

    def build_submission(self) -> SessionSubmission:
        self._require(SessionState.SUBMITTING, SessionState.TERMINATED)
        questions = self.definition.questions
        time_spent = {qid: int(round(s)) for qid, s in self._dwell.items()}
        return SessionSubmission(
            answers=build_answers(questions, self._selections, time_spent),
            score=score_answers(questions, self._selections),
            total_questions=len(questions),
            time_taken=elapsed_minutes(self.started_at, self.finished_at),
            reason=self.submit_reason,
            started_at=self.started_at,
            finished_at=self.finished_at,
        )

    def complete(self):
        self._require(SessionState.SUBMITTING)
        self.state = SessionState.TERMINATED

    def _move_to(self, index: int) -> bool:
        index = max(0, min(index, self.last_index))
        if index == self.current_index:
            return False
        self._close_dwell()
        self.current_index = index
        self.question_remaining = self.definition.question_seconds
        return True

    def _close_dwell(self):
        now = self._clock()
        qid = self.current_question.id
        spent = max(0.0, (now - self._question_entered_at).total_seconds())
        self._dwell[qid] = self._dwell.get(qid, 0.0) + spent
        self._question_entered_at = now

    def _begin_submission(self, reason: SubmitReason):
        self._close_dwell()
        self.finished_at = self._question_entered_at
        self.submit_reason = reason
        self.state = SessionState.SUBMITTING
        logger.info(
            f"Session for assessment {self.definition.assessment_id} submitting ({reason.value})")

    def snapshot(self) -> Dict[str, Any]:
        question = self.current_question
        return {
            "state": self.state.value,
            "question_index": self.current_index,
            "total_questions": len(self.definition.questions),
            "is_last_question": self.is_last_question,
            "total_remaining": self.total_remaining,
            "question_remaining": self.question_remaining,
            "question": {
                "id": question.id,
                "text": question.text,
                "options": question.options,
                "category": question.category,
                "difficulty": question.difficulty,
            },
            "selected_answer": self.selected_option(question.id),
        }


SubmitCallback = Callable[[SessionSubmission], Awaitable[Any]]
EventCallback = Callable[[SessionEvent, CandidateSession], Awaitable[None]]
TickCallback = Callable[[CandidateSession], Awaitable[None]]


class SessionRunner:
    """
    Drives one CandidateSession with its own countdown task

    The task is created on start() and torn down as soon as the session
    leaves RUNNING, so every session has exactly one timer and no timer
    outlives its session. on_submit is awaited exactly once, either from the
    timer (time expired) or from submit().
    """

    def __init__(
        self,
        session: CandidateSession,
        on_submit: SubmitCallback,
        on_event: Optional[EventCallback] = None,
        on_tick: Optional[TickCallback] = None,
        tick_seconds: float = 1.0
    ):
        self.session = session
        self.on_submit = on_submit
        self.on_event = on_event
        self.on_tick = on_tick
        self.tick_seconds = tick_seconds
        self.outcome: Any = None
        self.error: Optional[Exception] = None
        self._task: Optional[asyncio.Task] = None
        self._finished = asyncio.Event()

    @property
    def finished(self) -> bool:
        return self._finished.is_set()

    def start(self):
        self.session.start()
        self._task = asyncio.create_task(self._run())

    async def submit(self) -> Any:
        """Manual submit. Raises SessionStateError if already submitting"""
        submission = self.session.submit()
        await self._stop_timer()
        return await self._finalize(submission)

    async def abandon(self):
        """Stop the timer without submitting; the answers are discarded

        A submission already under way is not interrupted: while the session is
        SUBMITTING this waits for the result to be stored instead.
        """
        if self.session.state == SessionState.SUBMITTING:
            logger.info(
                f"Waiting for submission of assessment {self.session.definition.assessment_id} to finish")
            await self._finished.wait()
            return
        await self._stop_timer()
        self._finished.set()

    async def wait(self) -> Any:
        await self._finished.wait()
        return self.outcome

    async def _run(self):
        try:
            while self.session.state == SessionState.RUNNING:
                await asyncio.sleep(self.tick_seconds)
                events = self.session.tick()
                if self.on_tick and self.session.state == SessionState.RUNNING:
                    await self.on_tick(self.session)
                for event in events:
                    if self.on_event:
                        await self.on_event(event, self.session)
                if self.session.state == SessionState.SUBMITTING:
                    await self._finalize(self.session.build_submission())
        except asyncio.CancelledError:
            logger.info(
                f"Session timer cancelled for assessment {self.session.definition.assessment_id}")
        except Exception as e:
            logger.error(f"Error in session timer task: {str(e)}", exc_info=True)

    async def _stop_timer(self):
        task = self._task
        self._task = None
        if task is None or task is asyncio.current_task() or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _finalize(self, submission: SessionSubmission) -> Any:
        try:
            self.outcome = await self.on_submit(submission)
            return self.outcome
        except Exception as e:
            self.error = e
            raise
        finally:
            self.session.complete()
            self._finished.set()
