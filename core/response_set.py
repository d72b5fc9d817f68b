from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from core.errors import IncompleteResponseSet, ValidationError
from core.respondent import Respondent


def _freeze(answers: Mapping[str, int]) -> Mapping[str, int]:
    return MappingProxyType(dict(answers))


@dataclass(frozen=True)
class ResponseSet:
    """
    One respondent's answers to one assessment.

    Immutable: every change returns a new ResponseSet, so the collector,
    the scoring engine and the store never share mutable state.
    """

    assessment_id: str
    respondent: Respondent = field(default_factory=Respondent)
    answers: Mapping[str, int] = field(default_factory=dict)
    completed_at: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, "answers", _freeze({str(k): v for k, v in self.answers.items()}))

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def with_answer(self, question, value) -> "ResponseSet":
        """Record (or replace) the answer for `question` after checking its scale."""
        if self.is_completed:
            raise ValidationError(f"Response set for '{self.assessment_id}' is already complete")
        value = question.scale.validate(value)
        answers = dict(self.answers)
        answers[question.id] = value
        return replace(self, answers=answers)

    def with_respondent(self, respondent: Respondent) -> "ResponseSet":
        return replace(self, respondent=respondent)

    def missing(self, questions: Iterable) -> List[str]:
        return [q.id for q in questions if q.id not in self.answers]

    def is_complete(self, questions: Iterable) -> bool:
        return not self.missing(questions)

    def mark_complete(self, questions: Iterable, at: Optional[datetime] = None) -> "ResponseSet":
        missing = self.missing(questions)
        if missing:
            raise IncompleteResponseSet(self.assessment_id, missing)
        return replace(self, completed_at=at or datetime.now(timezone.utc))

    def to_dict(self) -> Dict:
        return {
            "assessment_id": self.assessment_id,
            "respondent": self.respondent.to_dict(),
            "answers": dict(self.answers),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "ResponseSet":
        completed_at = data.get("completed_at")
        if isinstance(completed_at, str):
            completed_at = datetime.fromisoformat(completed_at)
        return cls(
            assessment_id=data["assessment_id"],
            respondent=Respondent.from_dict(data.get("respondent")),
            answers=data.get("answers") or {},
            completed_at=completed_at,
        )
