from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class CategoryScore:
    category: str
    raw: int
    maximum: int
    percentage: int
    question_count: int

    def to_dict(self):
        return {
            "category": self.category,
            "raw": self.raw,
            "maximum": self.maximum,
            "percentage": self.percentage,
            "question_count": self.question_count,
        }


@dataclass(frozen=True)
class NarrativeContent:
    title: str
    description: str
    strengths: Tuple[str, ...] = ()
    growth_areas: Tuple[str, ...] = ()
    ministry_recommendations: Tuple[str, ...] = ()
    scripture_references: Tuple[str, ...] = ()
    next_steps: Tuple[str, ...] = ()

    def to_dict(self):
        return {
            "title": self.title,
            "description": self.description,
            "strengths": list(self.strengths),
            "growth_areas": list(self.growth_areas),
            "ministry_recommendations": list(self.ministry_recommendations),
            "scripture_references": list(self.scripture_references),
            "next_steps": list(self.next_steps),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "NarrativeContent":
        return cls(
            title=data["title"],
            description=data["description"],
            strengths=tuple(data.get("strengths", ())),
            growth_areas=tuple(data.get("growth_areas", ())),
            ministry_recommendations=tuple(data.get("ministry_recommendations", ())),
            scripture_references=tuple(data.get("scripture_references", ())),
            next_steps=tuple(data.get("next_steps", ())),
        )


@dataclass(frozen=True)
class AssessmentResult:
    """
    Output of the scoring engine.

    `primary`/`secondary`/`tertiary` are category ids; `narrative` belongs to
    the primary category (or the maturity level) and `narratives` holds the
    content for every ranked category.
    """

    assessment_id: str
    primary: str
    secondary: Optional[str]
    tertiary: Optional[str]
    scores: Dict[str, int]
    category_scores: Dict[str, CategoryScore]
    ranking: List[str]
    title: str
    narrative: NarrativeContent
    narratives: Dict[str, NarrativeContent] = field(default_factory=dict)
    overall: Optional[int] = None
    level: Optional[str] = None
    quality: Dict = field(default_factory=dict)
    used_fallback: bool = False

    @property
    def description(self) -> str:
        return self.narrative.description

    def label(self, category: Optional[str]) -> Optional[str]:
        if category is None:
            return None
        content = self.narratives.get(category)
        return content.title if content else category

    @property
    def primary_result(self) -> str:
        return self.label(self.primary)

    @property
    def secondary_result(self) -> Optional[str]:
        return self.label(self.secondary)

    @property
    def tertiary_result(self) -> Optional[str]:
        return self.label(self.tertiary)

    def to_dict(self):
        return {
            "assessment_id": self.assessment_id,
            "primary": self.primary,
            "secondary": self.secondary,
            "tertiary": self.tertiary,
            "primary_result": self.primary_result,
            "secondary_result": self.secondary_result,
            "tertiary_result": self.tertiary_result,
            "scores": dict(self.scores),
            "category_scores": {k: v.to_dict() for k, v in self.category_scores.items()},
            "ranking": list(self.ranking),
            "title": self.title,
            "narrative": self.narrative.to_dict(),
            "narratives": {k: v.to_dict() for k, v in self.narratives.items()},
            "overall": self.overall,
            "level": self.level,
            "quality": dict(self.quality),
            "used_fallback": self.used_fallback,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AssessmentResult":
        return cls(
            assessment_id=data["assessment_id"],
            primary=data["primary"],
            secondary=data.get("secondary"),
            tertiary=data.get("tertiary"),
            scores=dict(data.get("scores") or {}),
            category_scores={
                k: CategoryScore(**v) for k, v in (data.get("category_scores") or {}).items()
            },
            ranking=list(data.get("ranking") or []),
            title=data["title"],
            narrative=NarrativeContent.from_dict(data["narrative"]),
            narratives={
                k: NarrativeContent.from_dict(v) for k, v in (data.get("narratives") or {}).items()
            },
            overall=data.get("overall"),
            level=data.get("level"),
            quality=dict(data.get("quality") or {}),
            used_fallback=bool(data.get("used_fallback", False)),
        )
