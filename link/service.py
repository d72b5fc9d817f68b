from typing import Dict

from core.respondent import Respondent
from core.result import AssessmentResult
from inference.answer_converter import build_response_set, require_assessment
from scoring.engine import score_assessment


def run_assessment(assessment_id: str, answers: Dict[str, int], respondent: Respondent = None) -> AssessmentResult:
    assessment = require_assessment(assessment_id)
    response_set = build_response_set(assessment, answers, respondent)
    return score_assessment(assessment, response_set)
