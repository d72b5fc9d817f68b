from typing import Dict, Iterable, List

from questionnaires.banks import get_assessment
from storage.ports import StoredResult


def summarize_history(rows: Iterable[StoredResult]) -> Dict:
    """
    Group a member's stored results per assessment.

    Each group lists retakes newest first; groups are ordered by their most
    recent completion.
    """
    rows = sorted(rows, key=lambda r: r.completed_at, reverse=True)
    groups: Dict[str, Dict] = {}

    for row in rows:
        group = groups.get(row.assessment_id)
        if group is None:
            assessment = get_assessment(row.assessment_id)
            group = groups[row.assessment_id] = {
                "assessment": assessment.to_dict() if assessment else {"id": row.assessment_id},
                "times_completed": 0,
                "last_taken": None,
                "results": [],
            }
        group["times_completed"] += 1
        if group["last_taken"] is None or row.completed_at > group["last_taken"]:
            group["last_taken"] = row.completed_at
        group["results"].append(row)

    history: List[Dict] = []
    for group in groups.values():
        group["results"].sort(key=lambda r: r.retake_number, reverse=True)
        history.append({
            "assessment": group["assessment"],
            "times_completed": group["times_completed"],
            "last_taken": group["last_taken"].isoformat(),
            "results": [
                {
                    "id": r.id,
                    "completed_at": r.completed_at.isoformat(),
                    "retake_number": r.retake_number,
                    "primary_result": r.result.primary_result,
                    "scores": dict(r.result.scores),
                }
                for r in group["results"]
            ],
        })

    return {
        "summary": {
            "total_assessments_taken": len(groups),
            "total_completions": len(rows),
            "most_recent_completion": rows[0].completed_at.isoformat() if rows else None,
        },
        "assessment_history": history,
    }
