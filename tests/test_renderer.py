import pytest

from core.respondent import ViewerTier
from fixtures.sample_responses import SAMPLE_RESPONSES
from link.service import run_assessment
from presentation.renderer import UPGRADE_BECOME_PARTNER, UPGRADE_CREATE_ACCOUNT, render


@pytest.fixture(scope="module")
def result():
    return run_assessment("spiritual-gifts", SAMPLE_RESPONSES["teacher_heavy_gifts"])


def test_anonymous_sees_headline_only(result):
    view = render(result, ViewerTier.ANONYMOUS)
    assert view.primary_result == "Teaching"
    assert view.secondary_result == "Administration"
    assert view.tertiary_result == "Mercy"
    assert view.scores["teaching"] == 100
    assert view.description == result.narrative.description
    assert view.strengths

    assert view.growth_areas is None
    assert view.scripture_references is None
    assert view.next_steps is None
    assert view.can_download is False
    assert view.additional_results is None
    assert view.upgrade_prompt == UPGRADE_CREATE_ACCOUNT


def test_free_member_gets_guidance(result):
    view = render(result, ViewerTier.FREE)
    assert view.growth_areas == list(result.narrative.growth_areas)
    assert view.ministry_recommendations == list(result.narrative.ministry_recommendations)
    assert "Romans 12:7" in view.scripture_references
    assert view.next_steps
    assert view.can_download
    assert view.additional_results is None
    assert view.upgrade_prompt == UPGRADE_BECOME_PARTNER


@pytest.mark.parametrize("tier", [ViewerTier.PARTNER, ViewerTier.COVENANT])
def test_paid_tiers_get_secondary_and_tertiary(result, tier):
    view = render(result, tier)
    assert [r.category for r in view.additional_results] == ["administration", "mercy"]
    assert view.additional_results[0].title == "Administration"
    assert view.upgrade_prompt is None


def test_maturity_view_carries_overall(result):
    maturity = run_assessment("spiritual-maturity", SAMPLE_RESPONSES["growing_maturity"])
    view = render(maturity, ViewerTier.ANONYMOUS)
    assert view.overall == 61
    assert view.level == "growing"
    assert view.title == "Spiritual Maturity Level: Growing"


def test_rendering_does_not_touch_the_result(result):
    before = result.to_dict()
    render(result, ViewerTier.COVENANT)
    assert result.to_dict() == before
