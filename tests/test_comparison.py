from fixtures.sample_responses import leaning_answers, uniform_answers
from link.service import run_assessment
from scoring.comparison import compare_results


def test_first_attempt_has_no_comparison():
    current = run_assessment("spiritual-gifts", uniform_answers("spiritual-gifts"))
    assert compare_results(None, current) is None


def test_changed_primary_is_summarised():
    before = run_assessment("spiritual-gifts", leaning_answers("spiritual-gifts", "mercy"))
    after = run_assessment("spiritual-gifts", leaning_answers("spiritual-gifts", "faith"))
    changes = compare_results(before, after)
    assert changes["has_changes"]
    assert changes["summary"] == "Your top result changed from Mercy to Faith"
    assert "Faith increased by 60%" in changes["improvements"]
    assert "Mercy decreased by 60%" in changes["declines"]


def test_strengthened_primary():
    before = run_assessment("spiritual-gifts", leaning_answers("spiritual-gifts", "faith", high=4))
    after = run_assessment("spiritual-gifts", leaning_answers("spiritual-gifts", "faith", high=5))
    changes = compare_results(before, after)
    assert changes["summary"] == "Your Faith result has strengthened"
    assert changes["improvements"] == ["Faith increased by 20%"]


def test_maturity_overall_change():
    before = run_assessment("spiritual-maturity", uniform_answers("spiritual-maturity", 3))
    after = run_assessment("spiritual-maturity", uniform_answers("spiritual-maturity", 4))
    changes = compare_results(before, after)
    assert changes["improvements"][0] == "Overall maturity increased by 20%"
    assert changes["summary"] == "You've grown 20% in spiritual maturity"

    changes = compare_results(after, before)
    assert changes["declines"][0] == "Overall maturity decreased by 20%"


def test_identical_retake_has_no_changes():
    answers = leaning_answers("seasonal", "spring")
    changes = compare_results(run_assessment("seasonal", answers), run_assessment("seasonal", answers))
    assert changes["has_changes"] is False
    assert changes["summary"] == ""
