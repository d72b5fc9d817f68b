from typing import Any, Dict, Mapping

from core.errors import ValidationError
from core.respondent import Respondent
from core.response_set import ResponseSet
from questionnaires.banks import get_assessment
from questionnaires.questions import Assessment


def coerce_answer(value: Any) -> Any:
    """
    Accept whole numbers sent as strings ("4") by form posts.
    Anything else is passed through for the scale to reject.
    """
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def convert_answers(assessment: Assessment, answers: Mapping[Any, Any]) -> Dict[str, int]:
    """
    Validate raw answers (question id -> 1..5) against an assessment.

    Unknown question ids and out-of-range values raise ValidationError.
    """
    converted: Dict[str, int] = {}
    for qid, raw_value in answers.items():
        question = assessment.question(qid)
        converted[question.id] = question.scale.validate(coerce_answer(raw_value))
    return converted


def build_response_set(
    assessment: Assessment,
    answers: Mapping[Any, Any],
    respondent: Respondent = None,
) -> ResponseSet:
    return ResponseSet(
        assessment_id=assessment.id,
        respondent=respondent or Respondent(),
        answers=convert_answers(assessment, answers),
    )


def require_assessment(assessment_id: str) -> Assessment:
    assessment = get_assessment(assessment_id)
    if assessment is None:
        raise ValidationError(f"Unknown assessment: {assessment_id}")
    return assessment
