from typing import Optional

from core.result import AssessmentResult


def compare_results(previous: Optional[AssessmentResult], current: AssessmentResult) -> Optional[dict]:
    """
    Summarise how a retake differs from the previous attempt.
    Returns None when there is nothing to compare against.
    """
    if previous is None or previous.assessment_id != current.assessment_id:
        return None

    changes = {
        "assessment_id": current.assessment_id,
        "has_changes": False,
        "improvements": [],
        "declines": [],
        "summary": "",
    }

    if current.overall is not None and previous.overall is not None:
        diff = current.overall - previous.overall
        if diff > 0:
            changes["improvements"].append(f"Overall maturity increased by {diff}%")
            changes["summary"] = f"You've grown {diff}% in spiritual maturity"
        elif diff < 0:
            changes["declines"].append(f"Overall maturity decreased by {abs(diff)}%")
            changes["summary"] = "This may reflect honest self-assessment or a challenging season"
    elif previous.primary != current.primary:
        changes["summary"] = (
            f"Your top result changed from {previous.primary_result} to {current.primary_result}"
        )
    else:
        before = previous.scores.get(current.primary, 0)
        after = current.scores.get(current.primary, 0)
        if after > before:
            changes["summary"] = f"Your {current.primary_result} result has strengthened"

    # per-category movement, in the current ranking order
    for category in current.ranking:
        if category not in previous.scores:
            continue
        diff = current.scores[category] - previous.scores[category]
        label = current.label(category)
        if diff > 0:
            changes["improvements"].append(f"{label} increased by {diff}%")
        elif diff < 0:
            changes["declines"].append(f"{label} decreased by {abs(diff)}%")

    changes["has_changes"] = bool(changes["summary"] or changes["improvements"] or changes["declines"])
    return changes
