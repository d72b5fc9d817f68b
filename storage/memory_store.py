import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from core.response_set import ResponseSet
from core.result import AssessmentResult
from storage.ports import ILeadSink, IResponseStore, SavedProgress, StoredResult


class InMemoryResponseStore(IResponseStore):
    """Process-local store for development and tests."""

    def __init__(self):
        self.progress: Dict[Tuple[str, str], SavedProgress] = {}
        self.results: Dict[str, StoredResult] = {}

    async def upsert_progress(self, response_set: ResponseSet, cursor: int) -> datetime:
        saved_at = datetime.now(timezone.utc)
        key = (response_set.assessment_id, response_set.respondent.key)
        self.progress[key] = SavedProgress(response_set=response_set, cursor=cursor, saved_at=saved_at)
        return saved_at

    async def load_progress(self, assessment_id: str, respondent_key: str) -> Optional[SavedProgress]:
        return self.progress.get((assessment_id, respondent_key))

    async def clear_progress(self, assessment_id: str, respondent_key: str) -> None:
        self.progress.pop((assessment_id, respondent_key), None)

    async def insert_result(self, response_set: ResponseSet, result: AssessmentResult) -> StoredResult:
        member_id = response_set.respondent.member_id
        retake_number = 1
        if member_id:
            previous = await self.list_results(member_id, response_set.assessment_id)
            if previous:
                retake_number = previous[0].retake_number + 1

        stored = StoredResult(
            id=str(uuid.uuid4()),
            assessment_id=response_set.assessment_id,
            member_id=member_id,
            email=response_set.respondent.email,
            retake_number=retake_number,
            completed_at=response_set.completed_at or datetime.now(timezone.utc),
            answers=dict(response_set.answers),
            result=result,
        )
        self.results[stored.id] = stored
        return stored

    async def list_results(self, member_id: str, assessment_id: Optional[str] = None) -> List[StoredResult]:
        rows = [
            r for r in self.results.values()
            if r.member_id == member_id and (assessment_id is None or r.assessment_id == assessment_id)
        ]
        return sorted(rows, key=lambda r: (r.retake_number, r.completed_at), reverse=True)

    async def get_result(self, result_id: str) -> Optional[StoredResult]:
        return self.results.get(result_id)


class InMemoryLeadSink(ILeadSink):
    def __init__(self):
        self.leads: List[Dict[str, str]] = []

    async def capture_lead(self, email: str, source: str) -> None:
        self.leads.append({"email": email, "source": source, "status": "new"})
