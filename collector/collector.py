"""
Sequential response collection for one respondent and one assessment.

Answers live in memory as an immutable ResponseSet and the store only ever
receives snapshots of it. A failed save leaves the in-memory answers untouched.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Mapping, Optional

from config import Settings
from content.table import ContentTable
from core.errors import IdentityRequired, PersistenceFailure, ValidationError
from core.respondent import Respondent
from core.response_set import ResponseSet
from core.result import AssessmentResult
from core.utils import percentage
from questionnaires.questions import Assessment, Question
from scoring.comparison import compare_results
from scoring.engine import score_assessment
from storage.ports import ILeadSink, IResponseStore

logger = logging.getLogger(__name__)

SAVE_FAILED_NOTICE = "Could not save your progress. Your answers are still here. Please try again."
RESULT_SAVE_FAILED_NOTICE = "Your results are ready, but we could not save them. Please try again later."


@dataclass(frozen=True)
class SaveOutcome:
    saved: bool
    notice: Optional[str] = None
    saved_at: Optional[datetime] = None


@dataclass(frozen=True)
class Submission:
    result: AssessmentResult
    response_set: ResponseSet
    save: SaveOutcome
    result_id: Optional[str] = None
    retake_number: Optional[int] = None
    comparison: Optional[dict] = None


class ResponseCollector:
    def __init__(
        self,
        assessment: Assessment,
        respondent: Optional[Respondent] = None,
        store: Optional[IResponseStore] = None,
        leads: Optional[ILeadSink] = None,
        settings: Optional[Settings] = None,
        content: Optional[ContentTable] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.assessment = assessment
        self.store = store
        self.leads = leads
        self.settings = settings or Settings()
        self.content = content
        self._sleep = sleep

        self.response_set = ResponseSet(assessment_id=assessment.id, respondent=respondent or Respondent())
        self.last_save: Optional[SaveOutcome] = None
        self._autosave: Optional[asyncio.Task] = None
        self._cursor = 0
        self._gate_open = False
        self._gate_passed = False

    # ── state ──────────────────────────────────────────────────────

    @property
    def respondent(self) -> Respondent:
        return self.response_set.respondent

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current_question(self) -> Question:
        return self.assessment.questions[self._cursor]

    @property
    def is_last_question(self) -> bool:
        return self._cursor == len(self.assessment.questions) - 1

    @property
    def progress(self) -> int:
        return percentage(len(self.response_set.answers), len(self.assessment.questions))

    @property
    def gate_open(self) -> bool:
        return self._gate_open

    @property
    def _gate_index(self) -> Optional[int]:
        question_number = self.settings.email_gate_question
        if question_number <= 0 or question_number > len(self.assessment.questions):
            return None
        return question_number - 1

    def _check_gate(self) -> None:
        if self._gate_open:
            raise IdentityRequired(
                f"Enter an email address (or skip) to continue '{self.assessment.id}'"
            )

    # ── navigation ─────────────────────────────────────────────────

    def record_answer(self, question_id, value) -> ResponseSet:
        """Record or replace an answer. Raises ValidationError on a bad id or value."""
        self._check_gate()
        question = self.assessment.question(question_id)
        self.response_set = self.response_set.with_answer(question, value)
        return self.response_set

    async def advance(self) -> Optional[Submission]:
        """
        Move to the next question, or submit when on the last one.

        Arriving at the gate question with an unidentified respondent opens
        the email gate; nothing more can be answered until it is closed.
        """
        self._check_gate()
        question = self.current_question
        if question.id not in self.response_set.answers:
            raise ValidationError(f"Answer question {question.id} before continuing")

        if self.is_last_question:
            return await self.submit()

        self._cursor += 1

        if (
            self._cursor == self._gate_index
            and not self.respondent.is_identified
            and not self._gate_passed
        ):
            logger.info("[COLLECTOR] email gate reached for %s", self.assessment.id)
            self._gate_open = True
        elif self.respondent.is_identified:
            self._schedule_autosave()
        return None

    def retreat(self) -> int:
        self._check_gate()
        self._cursor = max(0, self._cursor - 1)
        return self._cursor

    def restore(self, answers: Mapping[str, int], cursor: int = 0) -> None:
        """
        Replace the in-memory answers and cursor.

        Unknown question ids and values outside the question's scale are
        dropped, so those questions have to be answered again.
        """
        kept = {}
        for qid, value in answers.items():
            if qid not in self.assessment.question_ids:
                continue
            try:
                kept[qid] = self.assessment.question(qid).scale.validate(value)
            except ValidationError as e:
                logger.warning("[COLLECTOR] dropping saved answer for %s: %s", self.assessment.id, e)
        self.response_set = ResponseSet(
            assessment_id=self.assessment.id, respondent=self.respondent, answers=kept
        )
        self._cursor = min(max(cursor, 0), len(self.assessment.questions) - 1)
        if self.respondent.is_identified:
            self._gate_open = False
            self._gate_passed = True

    # ── identity ───────────────────────────────────────────────────

    async def provide_identity(self, email: str) -> SaveOutcome:
        respondent = self.respondent.with_email(email)
        self.response_set = self.response_set.with_respondent(respondent)
        self._gate_open = False
        self._gate_passed = True

        if self.leads is not None:
            source = f"assessment-progress: {self.assessment.id}"
            try:
                await self.leads.capture_lead(respondent.email, source)
            except PersistenceFailure as e:
                logger.warning("[COLLECTOR] lead capture failed for %s: %s", self.assessment.id, e)

        self.last_save = await self.persist_partial()
        return self.last_save

    def skip_identity(self) -> None:
        """Continue without an email; answers stay in memory only."""
        self._gate_open = False
        self._gate_passed = True

    # ── persistence ────────────────────────────────────────────────

    async def _with_retries(self, action: Callable[[], Awaitable], what: str):
        attempts = max(1, self.settings.save_max_retries + 1)
        for attempt in range(attempts):
            try:
                return await action()
            except PersistenceFailure as e:
                logger.warning(
                    "[COLLECTOR] %s failed (attempt %d/%d): %s", what, attempt + 1, attempts, e
                )
                if attempt == attempts - 1:
                    raise
                await self._sleep(self.settings.save_backoff_seconds * (2 ** attempt))

    async def persist_partial(self) -> SaveOutcome:
        """
        Save a snapshot of the current answers.

        Never raises for storage problems and never discards in-memory
        answers; a respondent without an identity is simply not saved.
        """
        if self.store is None or not self.respondent.is_identified:
            return SaveOutcome(saved=False)

        snapshot = self.response_set
        cursor = self._cursor
        try:
            saved_at = await self._with_retries(
                lambda: self.store.upsert_progress(snapshot, cursor), "save progress"
            )
        except PersistenceFailure:
            return SaveOutcome(saved=False, notice=SAVE_FAILED_NOTICE)
        return SaveOutcome(saved=True, saved_at=saved_at)

    def _schedule_autosave(self) -> None:
        """Save in the background; a newer snapshot replaces a pending save."""
        if self._autosave is not None and not self._autosave.done():
            self._autosave.cancel()
        self._autosave = asyncio.create_task(self._run_autosave())

    async def _run_autosave(self) -> SaveOutcome:
        self.last_save = await self.persist_partial()
        return self.last_save

    async def flush_autosave(self) -> Optional[SaveOutcome]:
        """Wait for a pending background save and return the latest outcome."""
        if self._autosave is not None:
            await asyncio.gather(self._autosave, return_exceptions=True)
        return self.last_save

    async def _cancel_autosave(self) -> None:
        if self._autosave is not None and not self._autosave.done():
            self._autosave.cancel()
            await asyncio.gather(self._autosave, return_exceptions=True)
        self._autosave = None

    # ── completion ─────────────────────────────────────────────────

    async def submit(self) -> Submission:
        """
        Score and store the completed response set.

        IncompleteResponseSet is raised before anything is stored. A storage
        failure after scoring still returns the result, with `save.saved`
        False.
        """
        result = score_assessment(self.assessment, self.response_set, self.content)
        completed = self.response_set.mark_complete(self.assessment.questions)
        # a late progress save must not land after the progress is cleared
        await self._cancel_autosave()

        if self.store is None:
            self.response_set = completed
            return Submission(result=result, response_set=completed, save=SaveOutcome(saved=False))

        comparison = None
        member_id = self.respondent.member_id
        if member_id:
            try:
                previous = await self._with_retries(
                    lambda: self.store.list_results(member_id, self.assessment.id), "load previous results"
                )
            except PersistenceFailure:
                logger.warning("[COLLECTOR] skipping retake comparison for %s", self.assessment.id)
                previous = []
            if previous:
                comparison = compare_results(previous[0].result, result)

        try:
            stored = await self._with_retries(
                lambda: self.store.insert_result(completed, result), "save result"
            )
        except PersistenceFailure:
            self.response_set = completed
            return Submission(
                result=result,
                response_set=completed,
                save=SaveOutcome(saved=False, notice=RESULT_SAVE_FAILED_NOTICE),
                comparison=comparison,
            )

        if self.respondent.is_identified:
            try:
                await self.store.clear_progress(self.assessment.id, self.respondent.key)
            except PersistenceFailure as e:
                logger.warning("[COLLECTOR] could not clear saved progress: %s", e)

        logger.info(
            "[COLLECTOR] submitted %s (result %s, retake %s)",
            self.assessment.id, stored.id, stored.retake_number,
        )
        self.response_set = completed
        return Submission(
            result=result,
            response_set=completed,
            save=SaveOutcome(saved=True, saved_at=stored.completed_at),
            result_id=stored.id,
            retake_number=stored.retake_number,
            comparison=comparison,
        )

    @classmethod
    async def resume(
        cls,
        assessment: Assessment,
        respondent: Respondent,
        store: IResponseStore,
        leads: Optional[ILeadSink] = None,
        settings: Optional[Settings] = None,
        content: Optional[ContentTable] = None,
    ) -> "ResponseCollector":
        """
        Collector restored from the respondent's saved progress.
        Saved state replaces any defaults; with nothing saved the collector starts fresh.
        """
        collector = cls(assessment, respondent, store, leads, settings, content)
        if not respondent.is_identified:
            return collector

        saved = await store.load_progress(assessment.id, respondent.key)
        if saved is None:
            return collector

        collector.restore(saved.response_set.answers, saved.cursor)
        logger.info("[COLLECTOR] resumed %s at question %d", assessment.id, collector._cursor + 1)
        return collector
