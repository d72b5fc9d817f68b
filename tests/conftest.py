import pytest

from config import Settings
from core.errors import PersistenceFailure
from questionnaires.questions import Assessment, Question
from storage.memory_store import InMemoryLeadSink, InMemoryResponseStore


def make_assessment(assessment_id="two-cats", categories=("x", "y"), tags=("x", "y", "x", "y", "y"), kind="ranked"):
    questions = tuple(
        Question(id=str(i), text=f"Statement {i}", category=tag, order=i)
        for i, tag in enumerate(tags, start=1)
    )
    return Assessment(
        id=assessment_id,
        name="Test assessment",
        description="",
        questions=questions,
        categories=tuple(categories),
        kind=kind,
    )


@pytest.fixture
def two_category_assessment():
    # X: q1, q3; Y: q2, q4, q5
    return make_assessment()


@pytest.fixture
def settings():
    return Settings(email_gate_question=5, save_max_retries=2, save_backoff_seconds=0)


@pytest.fixture
def store():
    return InMemoryResponseStore()


@pytest.fixture
def leads():
    return InMemoryLeadSink()


class FlakyStore(InMemoryResponseStore):
    """Fails the first `failures` writes, then behaves normally."""

    def __init__(self, failures):
        super().__init__()
        self.failures = failures
        self.attempts = 0

    async def upsert_progress(self, response_set, cursor):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise PersistenceFailure("store unavailable")
        return await super().upsert_progress(response_set, cursor)

    async def insert_result(self, response_set, result):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise PersistenceFailure("store unavailable")
        return await super().insert_result(response_set, result)


class FailingLeadSink(InMemoryLeadSink):
    async def capture_lead(self, email, source):
        raise PersistenceFailure("crm unavailable")


class HistoryDownStore(InMemoryResponseStore):
    """Accepts writes but cannot read previous results."""

    async def list_results(self, member_id, assessment_id=None):
        raise PersistenceFailure("history unavailable")
