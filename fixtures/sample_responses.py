"""
Hand-authored answer sets for testing and UI prototyping.
Each maps question id -> 1..5 for a full bank.
"""
from questionnaires.banks import QUESTION_BANKS


def uniform_answers(assessment_id: str, value: int = 3) -> dict:
    return {q.id: value for q in QUESTION_BANKS[assessment_id].questions}


def leaning_answers(assessment_id: str, category: str, high: int = 5, low: int = 2) -> dict:
    """Strong agreement with one category's statements, mild disagreement elsewhere."""
    return {
        q.id: high if q.category == category else low
        for q in QUESTION_BANKS[assessment_id].questions
    }


SAMPLE_RESPONSES = {
    "teacher_heavy_gifts": leaning_answers("spiritual-gifts", "teaching"),
    "winter_season": leaning_answers("seasonal", "winter"),
    "intercessor": leaning_answers("prophetic-expression", "intercessor"),
    "evangelist": leaning_answers("ministry-calling", "evangelism"),
    "ruler": leaning_answers("redemptive-gifts", "ruler"),
    "growing_maturity": {
        **uniform_answers("spiritual-maturity", 3),
        "2": 5, "7": 5, "12": 4,  # prayer
        "5": 2, "10": 1, "15": 2,  # disciplines
    },
}

SAMPLE_ASSESSMENTS = {
    "teacher_heavy_gifts": "spiritual-gifts",
    "winter_season": "seasonal",
    "intercessor": "prophetic-expression",
    "evangelist": "ministry-calling",
    "ruler": "redemptive-gifts",
    "growing_maturity": "spiritual-maturity",
}
