from typing import Dict, Mapping

from core.result import CategoryScore
from core.utils import percentage
from questionnaires.questions import Assessment


def category_scores(assessment: Assessment, answers: Mapping[str, int]) -> Dict[str, CategoryScore]:
    """
    Sum answers per tagged category and normalise against the scale maximum.

    Untagged questions are skipped here; they only count toward completeness.
    Unanswered questions contribute nothing, so callers that need a full
    result must check completeness first.
    """
    scores: Dict[str, CategoryScore] = {}

    for category in assessment.categories:
        questions = assessment.questions_for(category)
        raw = sum(answers.get(q.id, 0) for q in questions)
        maximum = sum(q.scale.high for q in questions)
        scores[category] = CategoryScore(
            category=category,
            raw=raw,
            maximum=maximum,
            percentage=percentage(raw, maximum),
            question_count=len(questions),
        )

    return scores


def overall_percentage(scores: Mapping[str, CategoryScore]) -> int:
    """Mean of the category percentages, rounded half up."""
    if not scores:
        return 0
    total = sum(s.percentage for s in scores.values())
    return percentage(total, 100 * len(scores))
