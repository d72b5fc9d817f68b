import pytest

from core.errors import ValidationError
from questionnaires.banks import QUESTION_BANKS, get_assessment, get_questions, list_assessments
from questionnaires.questions import Assessment, Question

EXPECTED_SIZES = {
    "spiritual-gifts": (20, 11),
    "seasonal": (15, 4),
    "prophetic-expression": (16, 5),
    "ministry-calling": (18, 7),
    "redemptive-gifts": (25, 7),
    "spiritual-maturity": (15, 5),
}


@pytest.mark.parametrize("assessment_id,sizes", EXPECTED_SIZES.items())
def test_bank_sizes(assessment_id, sizes):
    assessment = get_assessment(assessment_id)
    assert (len(assessment.questions), len(assessment.categories)) == sizes


def test_questions_are_ordered_ordinals():
    for assessment in list_assessments():
        ids = [q.id for q in get_questions(assessment.id)]
        assert ids == [str(i) for i in range(1, len(ids) + 1)]


def test_unknown_assessment_returns_empty_list():
    assert get_questions("no-such-assessment") == []
    assert get_assessment("no-such-assessment") is None


def test_seasonal_untagged_questions():
    untagged = [q.id for q in get_questions("seasonal") if q.category is None]
    assert untagged == ["8", "13", "15"]


def test_spiritual_gift_mapping_pairs_questions():
    gifts = QUESTION_BANKS["spiritual-gifts"]
    assert [q.id for q in gifts.questions_for("teaching")] == ["3", "12"]
    assert [q.id for q in gifts.questions_for("administration")] == ["1", "13"]


def test_maturity_is_the_only_maturity_kind():
    kinds = {a.id: a.kind for a in list_assessments()}
    assert kinds.pop("spiritual-maturity") == "maturity"
    assert set(kinds.values()) == {"ranked"}


def test_unknown_question_id_is_a_validation_error():
    with pytest.raises(ValidationError):
        get_assessment("seasonal").question("99")


def test_bank_rejects_undeclared_category():
    with pytest.raises(ValueError):
        Assessment(
            id="bad",
            name="Bad",
            description="",
            questions=(Question(id="1", text="?", category="z"),),
            categories=("x",),
        )


def test_bank_rejects_category_without_questions():
    with pytest.raises(ValueError):
        Assessment(
            id="bad",
            name="Bad",
            description="",
            questions=(Question(id="1", text="?", category="x"),),
            categories=("x", "y"),
        )


def test_bank_rejects_duplicate_ids():
    with pytest.raises(ValueError):
        Assessment(
            id="bad",
            name="Bad",
            description="",
            questions=(Question(id="1", text="a", category="x"), Question(id="1", text="b", category="x")),
            categories=("x",),
        )
