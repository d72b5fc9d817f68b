"""
Deterministic answer-quality checks.
Pure statistical analysis of answer patterns; never blocks scoring.
"""
from collections import Counter
from statistics import stdev, variance
from typing import Dict, List, Mapping

from questionnaires.questions import Assessment


def check_response_quality(assessment: Assessment, answers: Mapping[str, int]) -> dict:
    """
    Analyse answers for straight-lining.

    Returns:
        confidence: str: "high", "medium", or "low"
        flags: list[str]: detected issues
        straight_line_ratio: float: fraction of the most common answer
        variance: float: variance of answers
    """
    flags: List[str] = []
    values = [answers[q.id] for q in assessment.questions if q.id in answers]

    if not values:
        return {
            "confidence": "low",
            "flags": ["no_answers"],
            "straight_line_ratio": 0.0,
            "variance": 0.0,
        }

    counts = Counter(values)
    most_common_count = counts.most_common(1)[0][1]
    straight_line_ratio = most_common_count / len(values)
    distinct_values = len(set(values))
    answer_variance = variance(values) if len(values) >= 2 else 0.0
    answer_stdev = stdev(values) if len(values) >= 2 else 0.0

    # ── Whole-assessment flags (first match wins) ─────────────────
    if distinct_values == 1:
        flags.append("all_identical")
    elif answer_stdev < 0.6:
        flags.append("low_differentiation")
    elif straight_line_ratio >= 0.45:
        flags.append("moderate_straight_lining")
    elif distinct_values <= 3:
        flags.append("limited_differentiation")
    elif answer_stdev < 0.9:
        flags.append("moderate_low_differentiation")

    # ── Per-category straight-lining ──────────────────────────────
    by_category: Dict[str, List[int]] = {}
    for question in assessment.questions:
        if question.category and question.id in answers:
            by_category.setdefault(question.category, []).append(answers[question.id])

    for category in assessment.categories:
        vals = by_category.get(category, [])
        if len(vals) > 1 and len(set(vals)) == 1:
            flags.append(f"category_straight_line_{category}")

    low_flags = {"all_identical", "low_differentiation"}
    medium_flags = {"moderate_straight_lining", "limited_differentiation", "moderate_low_differentiation"}

    if any(f in low_flags for f in flags):
        confidence = "low"
    elif any(f in medium_flags for f in flags):
        confidence = "medium"
    elif any(f.startswith("category_straight_line") for f in flags):
        # one flat category bumps HIGH to MEDIUM
        confidence = "medium"
    else:
        confidence = "high"

    return {
        "confidence": confidence,
        "flags": flags,
        "straight_line_ratio": round(straight_line_ratio, 3),
        "variance": round(answer_variance, 3),
    }
