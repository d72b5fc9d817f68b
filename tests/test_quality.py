from fixtures.sample_responses import leaning_answers, uniform_answers
from questionnaires.banks import QUESTION_BANKS
from scoring.quality import check_response_quality

GIFTS = QUESTION_BANKS["spiritual-gifts"]


def varied_answers():
    answers = {q.id: i % 5 + 1 for i, q in enumerate(GIFTS.questions)}
    # prophecy (q10, q20) would otherwise both be 5
    answers["20"] = 1
    return answers


def test_all_identical_is_low_confidence():
    report = check_response_quality(GIFTS, uniform_answers("spiritual-gifts", 4))
    assert report["confidence"] == "low"
    assert report["flags"][0] == "all_identical"
    assert report["straight_line_ratio"] == 1.0


def test_varied_answers_are_high_confidence():
    report = check_response_quality(GIFTS, varied_answers())
    assert report["confidence"] == "high"
    assert report["flags"] == []


def test_two_value_profile_is_flagged():
    report = check_response_quality(GIFTS, leaning_answers("spiritual-gifts", "teaching"))
    assert report["confidence"] == "medium"
    assert report["flags"][0] == "moderate_straight_lining"
    assert "category_straight_line_teaching" in report["flags"]


def test_flat_category_flags_that_category():
    answers = varied_answers()
    # teaching is q3 and q12
    answers["3"] = answers["12"] = 4
    report = check_response_quality(GIFTS, answers)
    assert report["flags"] == ["category_straight_line_teaching"]
    assert report["confidence"] == "medium"


def test_no_answers():
    report = check_response_quality(GIFTS, {})
    assert report == {"confidence": "low", "flags": ["no_answers"], "straight_line_ratio": 0.0, "variance": 0.0}
