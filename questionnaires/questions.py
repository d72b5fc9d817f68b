from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from core.errors import ValidationError


@dataclass(frozen=True)
class ResponseScale:
    name: str
    low: int
    high: int

    def validate(self, value) -> int:
        # bool is an int subclass; a checkbox value is not a Likert answer
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"Answer must be a whole number on the {self.name} scale: {value!r}")
        if not self.low <= value <= self.high:
            raise ValidationError(f"Answer {value} is outside the {self.name} range {self.low}-{self.high}")
        return value


SCALES: Dict[str, ResponseScale] = {
    "likert_5": ResponseScale("likert_5", 1, 5),
}


@dataclass(frozen=True)
class Question:
    id: str
    text: str
    response_type: str = "likert_5"
    category: Optional[str] = None
    order: int = 0

    @property
    def scale(self) -> ResponseScale:
        return SCALES[self.response_type]

    @classmethod
    def from_dict(cls, question: dict) -> "Question":
        return cls(
            id=str(question["id"]),
            text=question["text"],
            response_type=question.get("response_type", "likert_5"),
            category=question.get("category"),
            order=question.get("order", int(question["id"])),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "text": self.text,
            "response_type": self.response_type,
            "category": self.category,
            "order": self.order,
            "scale": {"low": self.scale.low, "high": self.scale.high},
        }


@dataclass(frozen=True)
class Assessment:
    """
    A static question bank plus the categories it scores.

    `categories` is kept in declaration order; ranking falls back to it
    when two categories tie.
    """

    id: str
    name: str
    description: str
    questions: Tuple[Question, ...]
    categories: Tuple[str, ...]
    kind: str = "ranked"  # "ranked" | "maturity"
    estimated_minutes: int = 10
    _index: Dict[str, Question] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self):
        if self.kind not in ("ranked", "maturity"):
            raise ValueError(f"Invalid assessment kind: {self.kind}")

        seen = {}
        for question in self.questions:
            if question.id in seen:
                raise ValueError(f"Duplicate question id {question.id} in {self.id}")
            if question.response_type not in SCALES:
                raise ValueError(f"Unknown response type {question.response_type} in {self.id}")
            if question.category is not None and question.category not in self.categories:
                raise ValueError(f"Question {question.id} uses undeclared category {question.category}")
            seen[question.id] = question

        for category in self.categories:
            if not any(q.category == category for q in self.questions):
                raise ValueError(f"Category {category} in {self.id} has no questions")

        self._index.update(seen)

    @property
    def question_ids(self) -> List[str]:
        return [q.id for q in self.questions]

    def question(self, question_id) -> Question:
        question = self._index.get(str(question_id))
        if question is None:
            raise ValidationError(f"Unknown question id {question_id!r} for assessment '{self.id}'")
        return question

    def questions_for(self, category: str) -> List[Question]:
        return [q for q in self.questions if q.category == category]

    def to_dict(self, include_questions: bool = False):
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "kind": self.kind,
            "question_count": len(self.questions),
            "estimated_minutes": self.estimated_minutes,
            "categories": list(self.categories),
        }
        if include_questions:
            data["questions"] = [q.to_dict() for q in self.questions]
        return data
