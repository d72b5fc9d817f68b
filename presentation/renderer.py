"""
Display policy for assessment results.

Anonymous viewers see the headline result; signed-in members also get the
guidance sections; paying members get the secondary and tertiary write-ups.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel

from core.respondent import ViewerTier
from core.result import AssessmentResult

UPGRADE_CREATE_ACCOUNT = "create_account"
UPGRADE_BECOME_PARTNER = "become_partner"


class CategorySummary(BaseModel):
    category: str
    title: str
    description: str
    score: int


class ResultView(BaseModel):
    assessment_id: str
    viewer_tier: str
    title: str
    primary_result: str
    secondary_result: Optional[str] = None
    tertiary_result: Optional[str] = None
    scores: Dict[str, int]
    description: str
    strengths: List[str]
    overall: Optional[int] = None
    level: Optional[str] = None

    growth_areas: Optional[List[str]] = None
    ministry_recommendations: Optional[List[str]] = None
    scripture_references: Optional[List[str]] = None
    next_steps: Optional[List[str]] = None
    can_download: bool = False

    additional_results: Optional[List[CategorySummary]] = None

    upgrade_prompt: Optional[str] = None


def _upgrade_prompt(tier: ViewerTier) -> Optional[str]:
    if not tier.is_authenticated:
        return UPGRADE_CREATE_ACCOUNT
    if not tier.is_paid:
        return UPGRADE_BECOME_PARTNER
    return None


def render(result: AssessmentResult, viewer_tier: ViewerTier) -> ResultView:
    narrative = result.narrative
    view = ResultView(
        assessment_id=result.assessment_id,
        viewer_tier=viewer_tier.value,
        title=result.title,
        primary_result=result.primary_result,
        secondary_result=result.secondary_result,
        tertiary_result=result.tertiary_result,
        scores=dict(result.scores),
        description=narrative.description,
        strengths=list(narrative.strengths),
        overall=result.overall,
        level=result.level,
        upgrade_prompt=_upgrade_prompt(viewer_tier),
    )

    if viewer_tier.is_authenticated:
        view.growth_areas = list(narrative.growth_areas)
        view.ministry_recommendations = list(narrative.ministry_recommendations)
        view.scripture_references = list(narrative.scripture_references)
        view.next_steps = list(narrative.next_steps)
        view.can_download = True

    if viewer_tier.is_paid:
        view.additional_results = [
            CategorySummary(
                category=category,
                title=result.narratives[category].title,
                description=result.narratives[category].description,
                score=result.scores.get(category, 0),
            )
            for category in (result.secondary, result.tertiary)
            if category is not None and category in result.narratives
        ]

    return view
