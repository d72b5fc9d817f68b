from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from content.narratives import (
    MATURITY_LEVELS,
    MATURITY_MINISTRY_RECOMMENDATIONS,
    MATURITY_SCRIPTURES,
    NARRATIVES,
    TITLE_TEMPLATES,
)
from core.errors import UnknownCategory
from core.result import NarrativeContent


class ContentTable(ABC):
    """Source of human-authored narrative content for scored categories."""

    @abstractmethod
    def lookup(self, assessment_id: str, category: str) -> NarrativeContent:
        """Return the narrative for (assessment, category) or raise UnknownCategory."""
        raise NotImplementedError

    def title_for(self, assessment_id: str, labels: List[str]) -> str:
        labels = [label for label in labels if label]
        if not labels:
            return "Your Results"
        template = TITLE_TEMPLATES.get(assessment_id)
        if template is None:
            return labels[0]
        return template.format(primary=labels[0], labels=", ".join(labels))


class StaticContentTable(ContentTable):
    def __init__(self, entries: Optional[Dict[Tuple[str, str], dict]] = None):
        source = NARRATIVES if entries is None else entries
        self._entries = {key: NarrativeContent.from_dict(value) for key, value in source.items()}

    def lookup(self, assessment_id: str, category: str) -> NarrativeContent:
        try:
            return self._entries[(assessment_id, category)]
        except KeyError:
            raise UnknownCategory(assessment_id, category) from None

    def title_for(self, assessment_id: str, labels: List[str]) -> str:
        # Seasonal results read as the season's own title
        if assessment_id == "seasonal" and labels:
            return labels[0]
        return super().title_for(assessment_id, labels)


def humanize(category: str) -> str:
    return category.replace("-", " ").replace("_", " ").title()


def fallback_narrative(category: str) -> NarrativeContent:
    """Generic narrative used when no authored content exists for a category."""
    label = humanize(category)
    return NarrativeContent(
        title=label,
        description=f"Your responses point most strongly toward {label}.",
    )


# -----------------------------
# Spiritual maturity bands
# -----------------------------

def maturity_level(overall: int) -> Tuple[str, str, str]:
    """(level id, label, description) for an overall maturity percentage."""
    for threshold, level, label, description in MATURITY_LEVELS:
        if overall >= threshold:
            return level, label, description
    _, level, label, description = MATURITY_LEVELS[-1]
    return level, label, description


def maturity_narrative(overall: int, ordered_titles: List[str]) -> NarrativeContent:
    """
    Headline narrative for a maturity result.

    `ordered_titles` are the area titles ranked strongest first.
    """
    _, label, description = maturity_level(overall)
    strongest = ordered_titles[0]
    second = ordered_titles[1] if len(ordered_titles) > 1 else strongest
    weakest = ordered_titles[-1]
    second_weakest = ordered_titles[-2] if len(ordered_titles) > 1 else weakest
    return NarrativeContent(
        title=label,
        description=description,
        strengths=(
            f"Strong in {strongest}",
            f"Developing well in {second}",
            f"Overall score of {overall}%",
        ),
        growth_areas=(
            f"Focus on developing {weakest}",
            f"Build consistency in {second_weakest}",
            "Consider finding a mentor in your growth areas",
        ),
        ministry_recommendations=tuple(MATURITY_MINISTRY_RECOMMENDATIONS),
        scripture_references=tuple(MATURITY_SCRIPTURES),
        next_steps=(
            f"Take a course or read a book on {weakest.lower()}",
            "Find an accountability partner for growth",
            "Set specific, measurable goals for spiritual development",
        ),
    )
