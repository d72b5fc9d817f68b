"""
Scoring orchestration layer.

Turns a complete ResponseSet into an AssessmentResult by coordinating the
aggregate, ranking and quality modules with a narrative content table.
Pure: no I/O beyond logging, and the same input always yields the same result.
"""
import logging
from typing import Dict, List, Optional, Tuple

from content.table import ContentTable, StaticContentTable, fallback_narrative, maturity_level, maturity_narrative
from core.errors import IncompleteResponseSet, UnknownCategory, ValidationError
from core.response_set import ResponseSet
from core.result import AssessmentResult, NarrativeContent
from questionnaires.banks import get_assessment
from questionnaires.questions import Assessment
from scoring.aggregate import category_scores, overall_percentage
from scoring.quality import check_response_quality
from scoring.ranking import rank_categories, top_three

logger = logging.getLogger(__name__)

_DEFAULT_CONTENT = StaticContentTable()


def _narratives_for(
    assessment: Assessment,
    ranking: List[str],
    content: ContentTable,
) -> Tuple[Dict[str, NarrativeContent], bool]:
    narratives = {}
    used_fallback = False
    for category in ranking:
        try:
            narratives[category] = content.lookup(assessment.id, category)
        except UnknownCategory as e:
            logger.warning("[SCORING] %s; using fallback narrative", e)
            narratives[category] = fallback_narrative(category)
            used_fallback = True
    return narratives, used_fallback


def score_assessment(
    assessment: Assessment,
    response_set: ResponseSet,
    content: Optional[ContentTable] = None,
) -> AssessmentResult:
    if response_set.assessment_id != assessment.id:
        raise ValidationError(
            f"Response set belongs to '{response_set.assessment_id}', not '{assessment.id}'"
        )

    missing = response_set.missing(assessment.questions)
    if missing:
        raise IncompleteResponseSet(assessment.id, missing)

    # sets built by hand or loaded from storage never went through with_answer
    for question in assessment.questions:
        question.scale.validate(response_set.answers[question.id])

    content = content or _DEFAULT_CONTENT
    answers = response_set.answers

    detail = category_scores(assessment, answers)
    ranking = rank_categories(detail, assessment.categories)
    primary, secondary, tertiary = top_three(ranking)
    narratives, used_fallback = _narratives_for(assessment, ranking, content)

    overall = None
    level = None
    if assessment.kind == "maturity":
        overall = overall_percentage(detail)
        level, level_label, _ = maturity_level(overall)
        narrative = maturity_narrative(overall, [narratives[c].title for c in ranking])
        title = content.title_for(assessment.id, [level_label])
    else:
        narrative = narratives[primary]
        title = content.title_for(
            assessment.id,
            [narratives[c].title for c in (primary, secondary, tertiary) if c is not None],
        )

    quality = check_response_quality(assessment, answers)
    if quality["confidence"] == "low":
        logger.info("[SCORING] low-confidence answers for %s: %s", assessment.id, quality["flags"])

    return AssessmentResult(
        assessment_id=assessment.id,
        primary=primary,
        secondary=secondary,
        tertiary=tertiary,
        scores={c: detail[c].percentage for c in ranking},
        category_scores={c: detail[c] for c in ranking},
        ranking=ranking,
        title=title,
        narrative=narrative,
        narratives=narratives,
        overall=overall,
        level=level,
        quality=quality,
        used_fallback=used_fallback,
    )


def score(
    assessment_id: str,
    response_set: ResponseSet,
    content: Optional[ContentTable] = None,
) -> AssessmentResult:
    """
    Entry point for scoring.

    Raises ValidationError for an unknown assessment and IncompleteResponseSet
    when any question is unanswered; a partial result is never produced.
    """
    assessment = get_assessment(assessment_id)
    if assessment is None:
        raise ValidationError(f"Unknown assessment: {assessment_id}")
    return score_assessment(assessment, response_set, content)
