import pytest

from core.errors import ValidationError
from core.respondent import Respondent
from inference.answer_converter import build_response_set, coerce_answer, convert_answers, require_assessment


@pytest.mark.parametrize(
    "raw, expected",
    [("4", 4), (" 2 ", 2), (3.0, 3), (5, 5), (2.5, 2.5), ("high", "high")],
)
def test_coerce_answer(raw, expected):
    assert coerce_answer(raw) == expected


def test_convert_answers_normalizes_ids(two_category_assessment):
    assert convert_answers(two_category_assessment, {1: "5", "2": 1.0}) == {"1": 5, "2": 1}


@pytest.mark.parametrize("answers", [{"1": 6}, {"1": "2.5"}, {"1": True}, {"99": 3}])
def test_convert_answers_rejects_bad_input(two_category_assessment, answers):
    with pytest.raises(ValidationError):
        convert_answers(two_category_assessment, answers)


def test_build_response_set_keeps_respondent(two_category_assessment):
    respondent = Respondent(email="a@b.co")
    rs = build_response_set(two_category_assessment, {"1": 4}, respondent)
    assert rs.respondent == respondent
    assert dict(rs.answers) == {"1": 4}
    assert build_response_set(two_category_assessment, {}).respondent == Respondent()


def test_require_assessment():
    assert require_assessment("seasonal").id == "seasonal"
    with pytest.raises(ValidationError):
        require_assessment("enneagram")
