import asyncio

import pytest

from collector.collector import SAVE_FAILED_NOTICE, ResponseCollector
from config import Settings
from core.errors import IdentityRequired, IncompleteResponseSet, ValidationError
from core.respondent import Respondent
from core.response_set import ResponseSet
from fixtures.sample_responses import leaning_answers, uniform_answers
from questionnaires.banks import QUESTION_BANKS

from conftest import FailingLeadSink, FlakyStore, HistoryDownStore

SEASONAL = QUESTION_BANKS["seasonal"]
MEMBER = Respondent(member_id="m-1")


async def answer_until(collector, question_number, value=3):
    """Answer and advance until the cursor sits on `question_number` (1-based)."""
    while collector.cursor < question_number - 1:
        collector.record_answer(collector.current_question.id, value)
        await collector.advance()


class TestNavigation:
    async def test_record_and_advance(self, settings):
        collector = ResponseCollector(SEASONAL, MEMBER, settings=settings)
        collector.record_answer("1", 4)
        await collector.advance()
        assert collector.cursor == 1
        assert collector.current_question.id == "2"
        assert collector.progress == 7  # 1 of 15

    async def test_advance_requires_an_answer(self, settings):
        collector = ResponseCollector(SEASONAL, MEMBER, settings=settings)
        with pytest.raises(ValidationError):
            await collector.advance()
        assert collector.cursor == 0

    async def test_retreat_keeps_answers_and_stops_at_zero(self, settings):
        collector = ResponseCollector(SEASONAL, MEMBER, settings=settings)
        await answer_until(collector, 3)
        assert collector.retreat() == 1
        assert collector.retreat() == 0
        assert collector.retreat() == 0
        assert dict(collector.response_set.answers) == {"1": 3, "2": 3}

    def test_reanswer_after_going_back(self, settings):
        collector = ResponseCollector(SEASONAL, MEMBER, settings=settings)
        collector.record_answer("1", 2)
        collector.record_answer("1", 5)
        assert dict(collector.response_set.answers) == {"1": 5}

    def test_bad_answers_are_rejected(self, settings):
        collector = ResponseCollector(SEASONAL, MEMBER, settings=settings)
        with pytest.raises(ValidationError):
            collector.record_answer("1", 9)
        with pytest.raises(ValidationError):
            collector.record_answer("42", 3)
        assert collector.response_set.answers == {}


class TestEmailGate:
    async def test_gate_opens_at_fifth_question(self, settings):
        collector = ResponseCollector(SEASONAL, settings=settings)
        await answer_until(collector, 4)
        assert not collector.gate_open

        collector.record_answer("4", 3)
        await collector.advance()
        assert collector.cursor == 4
        assert collector.gate_open
        with pytest.raises(IdentityRequired):
            collector.record_answer("5", 3)
        with pytest.raises(IdentityRequired):
            await collector.advance()
        with pytest.raises(IdentityRequired):
            collector.retreat()
        assert collector.cursor == 4

    async def test_providing_email_captures_lead_and_saves(self, settings, store, leads):
        collector = ResponseCollector(SEASONAL, store=store, leads=leads, settings=settings)
        await answer_until(collector, 5)

        outcome = await collector.provide_identity("Reader@Example.com")

        assert outcome.saved
        assert not collector.gate_open
        assert leads.leads == [
            {"email": "reader@example.com", "source": "assessment-progress: seasonal", "status": "new"}
        ]
        saved = await store.load_progress("seasonal", "email:reader@example.com")
        assert dict(saved.response_set.answers) == {"1": 3, "2": 3, "3": 3, "4": 3}
        assert saved.cursor == 4

    async def test_invalid_email_keeps_gate_open(self, settings, store):
        collector = ResponseCollector(SEASONAL, store=store, settings=settings)
        await answer_until(collector, 5)
        with pytest.raises(ValidationError):
            await collector.provide_identity("nope")
        assert collector.gate_open

    async def test_skip_continues_in_memory_only(self, settings, store):
        collector = ResponseCollector(SEASONAL, store=store, settings=settings)
        await answer_until(collector, 5)
        collector.skip_identity()

        await answer_until(collector, 8)
        assert collector.cursor == 7
        assert not collector.gate_open
        assert store.progress == {}
        assert (await collector.persist_partial()).saved is False

    async def test_lead_failure_does_not_block(self, settings, store):
        collector = ResponseCollector(SEASONAL, store=store, leads=FailingLeadSink(), settings=settings)
        await answer_until(collector, 5)
        outcome = await collector.provide_identity("reader@example.com")
        assert outcome.saved
        assert not collector.gate_open

    async def test_members_never_see_the_gate(self, settings):
        collector = ResponseCollector(SEASONAL, MEMBER, settings=settings)
        await answer_until(collector, 7)
        assert not collector.gate_open

    async def test_gate_can_be_disabled(self):
        collector = ResponseCollector(SEASONAL, settings=Settings(email_gate_question=0))
        await answer_until(collector, 7)
        assert not collector.gate_open


class TestPersistence:
    async def test_retries_then_succeeds(self, settings):
        store = FlakyStore(failures=2)
        collector = ResponseCollector(SEASONAL, MEMBER, store=store, settings=settings)
        collector.record_answer("1", 4)

        outcome = await collector.persist_partial()

        assert outcome.saved
        assert store.attempts == 3

    async def test_failure_keeps_answers_and_reports_notice(self, settings):
        store = FlakyStore(failures=10)
        collector = ResponseCollector(SEASONAL, MEMBER, store=store, settings=settings)
        collector.record_answer("1", 4)
        collector.record_answer("2", 2)

        outcome = await collector.persist_partial()

        assert outcome.saved is False
        assert outcome.notice == SAVE_FAILED_NOTICE
        assert store.attempts == settings.save_max_retries + 1
        assert dict(collector.response_set.answers) == {"1": 4, "2": 2}

    async def test_failed_autosave_does_not_block_advancing(self, settings):
        collector = ResponseCollector(SEASONAL, MEMBER, store=FlakyStore(failures=100), settings=settings)
        await answer_until(collector, 4)
        assert collector.cursor == 3
        outcome = await collector.flush_autosave()
        assert outcome.notice == SAVE_FAILED_NOTICE

    async def test_autosave_runs_in_background(self):
        release = asyncio.Event()

        async def stalled_sleep(seconds):
            await release.wait()

        collector = ResponseCollector(
            SEASONAL, MEMBER, store=FlakyStore(failures=100),
            settings=Settings(save_max_retries=3, save_backoff_seconds=0.5),
            sleep=stalled_sleep,
        )
        collector.record_answer("1", 4)

        await asyncio.wait_for(collector.advance(), timeout=1)
        collector.record_answer("2", 5)
        assert collector.cursor == 1

        release.set()
        outcome = await collector.flush_autosave()
        assert outcome.saved is False
        assert dict(collector.response_set.answers) == {"1": 4, "2": 5}

    async def test_submit_cancels_pending_autosave(self, settings, store):
        collector = ResponseCollector(SEASONAL, MEMBER, store=store, settings=settings)
        collector.restore(uniform_answers("seasonal"), cursor=13)
        await collector.advance()

        submission = await collector.advance()

        assert submission.save.saved
        await collector.flush_autosave()
        assert await store.load_progress("seasonal", MEMBER.key) is None

    async def test_backoff_doubles(self):
        delays = []

        async def fake_sleep(seconds):
            delays.append(seconds)

        collector = ResponseCollector(
            SEASONAL, MEMBER, store=FlakyStore(failures=10),
            settings=Settings(save_max_retries=3, save_backoff_seconds=0.5),
            sleep=fake_sleep,
        )
        collector.record_answer("1", 4)
        await collector.persist_partial()
        assert delays == [0.5, 1.0, 2.0]

    async def test_resume_restores_answers_and_cursor(self, settings, store):
        first = ResponseCollector(SEASONAL, MEMBER, store=store, settings=settings)
        await answer_until(first, 6, value=4)
        await first.flush_autosave()

        resumed = await ResponseCollector.resume(SEASONAL, MEMBER, store, settings=settings)

        assert resumed.cursor == 5
        assert dict(resumed.response_set.answers) == {str(i): 4 for i in range(1, 6)}

    async def test_resume_drops_bad_stored_answers(self, settings, store):
        saved = ResponseSet("seasonal", MEMBER, {"1": 42, "2": "4", "3": 2, "4": None})
        await store.upsert_progress(saved, 4)

        resumed = await ResponseCollector.resume(SEASONAL, MEMBER, store, settings=settings)

        assert dict(resumed.response_set.answers) == {"3": 2}
        assert resumed.cursor == 4

    def test_restore_drops_out_of_range_values(self, settings):
        collector = ResponseCollector(SEASONAL, MEMBER, settings=settings)
        answers = uniform_answers("seasonal")
        answers["1"] = 42
        collector.restore(answers)
        assert "1" not in collector.response_set.answers

    async def test_resume_without_saved_progress_starts_fresh(self, settings, store):
        resumed = await ResponseCollector.resume(SEASONAL, MEMBER, store, settings=settings)
        assert resumed.cursor == 0
        assert resumed.response_set.answers == {}


class TestSubmit:
    async def test_advance_on_last_question_submits(self, settings, store):
        collector = ResponseCollector(SEASONAL, MEMBER, store=store, settings=settings)
        collector.restore(leaning_answers("seasonal", "summer"), cursor=14)

        submission = await collector.advance()

        assert submission.result.primary == "summer"
        assert submission.save.saved
        assert submission.retake_number == 1
        assert submission.comparison is None
        assert submission.response_set.is_completed
        assert await store.load_progress("seasonal", MEMBER.key) is None

    async def test_incomplete_submit_is_blocking(self, settings, store):
        collector = ResponseCollector(SEASONAL, MEMBER, store=store, settings=settings)
        collector.record_answer("1", 3)
        with pytest.raises(IncompleteResponseSet) as exc:
            await collector.submit()
        assert exc.value.missing[0] == "2"
        assert store.results == {}

    async def test_retake_is_numbered_and_compared(self, settings, store):
        for answers in (uniform_answers("spiritual-maturity", 3), uniform_answers("spiritual-maturity", 4)):
            collector = ResponseCollector(QUESTION_BANKS["spiritual-maturity"], MEMBER, store=store, settings=settings)
            collector.restore(answers)
            submission = await collector.submit()

        assert submission.retake_number == 2
        assert submission.comparison["summary"] == "You've grown 20% in spiritual maturity"

    async def test_anonymous_submission_is_stored_without_member(self, settings, store):
        collector = ResponseCollector(SEASONAL, store=store, settings=settings)
        collector.restore(uniform_answers("seasonal"))
        submission = await collector.submit()
        stored = await store.get_result(submission.result_id)
        assert stored.member_id is None
        assert stored.retake_number == 1

    async def test_store_failure_still_returns_result(self, settings):
        collector = ResponseCollector(SEASONAL, MEMBER, store=FlakyStore(failures=100), settings=settings)
        collector.restore(uniform_answers("seasonal"))
        submission = await collector.submit()
        # every season at 60%; winter has the most questions, so the largest raw sum
        assert submission.result.primary == "winter"
        assert submission.save.saved is False
        assert submission.save.notice
        assert submission.result_id is None

    async def test_history_read_failure_still_saves_result(self, settings):
        store = HistoryDownStore()
        collector = ResponseCollector(SEASONAL, MEMBER, store=store, settings=settings)
        collector.restore(uniform_answers("seasonal"))

        submission = await collector.submit()

        assert submission.save.saved
        assert submission.comparison is None
        assert len(store.results) == 1
        assert submission.retake_number == 1
