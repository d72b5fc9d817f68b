"""
Persistence ports for response sets, results and leads.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from core.response_set import ResponseSet
from core.result import AssessmentResult


@dataclass(frozen=True)
class SavedProgress:
    response_set: ResponseSet
    cursor: int
    saved_at: datetime


@dataclass(frozen=True)
class StoredResult:
    id: str
    assessment_id: str
    member_id: Optional[str]
    email: Optional[str]
    retake_number: int
    completed_at: datetime
    answers: dict
    result: AssessmentResult

    def to_dict(self):
        return {
            "id": self.id,
            "assessment_id": self.assessment_id,
            "member_id": self.member_id,
            "email": self.email,
            "retake_number": self.retake_number,
            "completed_at": self.completed_at.isoformat(),
            "answers": dict(self.answers),
            "result": self.result.to_dict(),
        }


class IResponseStore(ABC):
    """
    Raises core.errors.PersistenceFailure when the backing store is
    unreachable or rejects a write.
    """

    @abstractmethod
    async def upsert_progress(self, response_set: ResponseSet, cursor: int) -> datetime:
        """Save partial answers, replacing any earlier save for the same respondent."""

    @abstractmethod
    async def load_progress(self, assessment_id: str, respondent_key: str) -> Optional[SavedProgress]:
        pass

    @abstractmethod
    async def clear_progress(self, assessment_id: str, respondent_key: str) -> None:
        pass

    @abstractmethod
    async def insert_result(self, response_set: ResponseSet, result: AssessmentResult) -> StoredResult:
        """Store a completed response set; members get the next retake number."""

    @abstractmethod
    async def list_results(self, member_id: str, assessment_id: Optional[str] = None) -> List[StoredResult]:
        """Member results, newest retake first."""

    @abstractmethod
    async def get_result(self, result_id: str) -> Optional[StoredResult]:
        pass


class ILeadSink(ABC):
    @abstractmethod
    async def capture_lead(self, email: str, source: str) -> None:
        pass
