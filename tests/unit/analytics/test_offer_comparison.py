import pandas as pd
import pytest

from comp_outlook.analytics.offers import (
    BEHIND_TOP_MESSAGE,
    BENEFITS_MESSAGE,
    BONUS_MESSAGE,
    EQUITY_MESSAGE,
    MATRIX_ROWS,
    build_comparison,
    compute_col_adjusted_total,
    compute_non_financial_score,
    compute_total_comp,
)
from comp_outlook.config.models import ComparisonDefaults

BENEFITS_NOTE = "Benefits are estimated (default 15000/yr if not provided). Verify health/401k/PTO details before deciding."


# ------------------------------------------------------------ total comp


def test_total_comp_uses_stored_components(offer_jobs):
    acme, globex = offer_jobs
    assert compute_total_comp(acme).to_dict() == {
        "salary": 100000,
        "bonus": 10000,
        "equity": 5000,
        "benefits": 12000,
        "total": 127000,
    }
    # Numeric strings coerce, garbage is 0 and missing benefits use the default
    comp = compute_total_comp(globex)
    assert (comp.salary, comp.bonus, comp.equity, comp.benefits) == (120000, 0, 0, 15000)
    assert comp.total == 135000


def test_total_comp_scenario_grows_each_component_once(offer_jobs):
    comp = compute_total_comp(
        offer_jobs[0],
        {"salaryIncreasePct": 10, "bonusIncreasePct": "50", "equityIncreasePct": None, "benefitsIncreasePct": "x"},
    )
    assert comp.salary == pytest.approx(110000)
    assert comp.bonus == pytest.approx(15000)
    assert comp.equity == 5000
    assert comp.benefits == 12000


def test_zero_benefits_use_default_before_growth():
    comp = compute_total_comp({"_id": "j", "finalSalary": 50000, "benefitsValue": 0}, {"benefitsIncreasePct": 10})
    assert comp.benefits == pytest.approx(16500)


# ------------------------------------------------------------ COL adjustment


def test_col_adjustment_scales_by_baseline_over_offer():
    assert compute_col_adjusted_total(100000, 80, 100) == pytest.approx(125000)
    assert compute_col_adjusted_total(130000, 130) == pytest.approx(100000)


@pytest.mark.parametrize("offer_index", [None, 0, "abc"])
def test_missing_offer_index_means_no_adjustment(offer_index):
    assert compute_col_adjusted_total(100000, offer_index, 120) == 100000


def test_negative_offer_index_leaves_total_unadjusted():
    assert compute_col_adjusted_total(100000, -5, 100) == 100000


def test_zero_baseline_falls_back_to_100():
    assert compute_col_adjusted_total(100000, 80, 0) == pytest.approx(125000)
    assert compute_col_adjusted_total("abc", 100) == 0


# ------------------------------------------------------- non-financial


def test_unrated_offer_scores_midpoint():
    assert compute_non_financial_score() == 50


def test_weighted_ratings():
    ratings = {"cultureFit": 5, "growth": 1}
    # (100 * 3 + 0 + 50 + 50) / 6 = 66.67
    assert compute_non_financial_score(ratings, {"cultureFitWeight": 3}) == 67


def test_ratings_are_clamped_to_scale():
    ratings = {"cultureFit": 9, "growth": -2, "workLifeBalance": "abc", "remotePolicy": 4}
    # 100, 0, 0, 75
    assert compute_non_financial_score(ratings) == 44


def test_non_financial_score_rounds_half_up():
    assert compute_non_financial_score({"cultureFit": 4, "growth": 4}) == 63


def test_zero_weights_do_not_divide_by_zero():
    weights = {
        "cultureFitWeight": 0,
        "growthWeight": 0,
        "workLifeBalanceWeight": 0,
        "remotePolicyWeight": 0,
    }
    assert compute_non_financial_score({"cultureFit": 5}, weights) == 0


# ----------------------------------------------------------- comparison


def test_comparison_with_defaults(offer_jobs, engine_config):
    data = build_comparison(offer_jobs, {}, config=engine_config).to_dict()
    acme, globex = data["offers"]

    assert [o["jobId"] for o in data["offers"]] == ["offerA", "offerB"]
    assert (acme["totalComp"], globex["totalComp"]) == (127000, 135000)
    assert (acme["colIndex"], acme["colAdjustedTotal"]) == (100, 127000)
    assert (acme["financialScore"], globex["financialScore"]) == (0, 100)
    assert acme["nonFinancialScore"] == globex["nonFinancialScore"] == 50
    # 0 * 0.65 + 50 * 0.35 = 17.5 and 100 * 0.65 + 17.5 = 82.5, both rounded up
    assert (acme["overallScore"], globex["overallScore"]) == (18, 83)
    assert acme["archived"] is False
    assert acme["archiveReason"] == ""

    assert acme["negotiationRecommendations"] == [
        BEHIND_TOP_MESSAGE,
        "Ask for a base salary increase (target: at least 120000).",
        BENEFITS_NOTE,
    ]
    assert globex["negotiationRecommendations"] == [BONUS_MESSAGE, EQUITY_MESSAGE, BENEFITS_NOTE]
    assert data["matrixRows"] == [dict(row) for row in MATRIX_ROWS]


def test_benefits_note_quotes_whole_default():
    assert BENEFITS_MESSAGE.format(default=15000) == BENEFITS_NOTE


def test_cost_of_living_changes_the_leader(offer_jobs, engine_config):
    inputs = {"colIndexByJobId": {"offerB": 150}, "weights": {"financialWeight": 0.6}}
    acme, globex = build_comparison(offer_jobs, inputs, config=engine_config).to_dict()["offers"]

    assert globex["colIndex"] == 150
    assert globex["colAdjustedTotal"] == pytest.approx(90000)
    assert (acme["financialScore"], globex["financialScore"]) == (100, 0)
    assert (acme["overallScore"], globex["overallScore"]) == (80, 20)
    assert BEHIND_TOP_MESSAGE not in acme["negotiationRecommendations"]
    assert globex["negotiationRecommendations"][0] == BEHIND_TOP_MESSAGE


def test_ratings_and_scenarios_are_per_job(offer_jobs, engine_config):
    inputs = {
        "ratingsByJobId": {"offerA": {"cultureFit": 5, "growth": 5, "workLifeBalance": 5, "remotePolicy": 5}},
        "scenarioByJobId": {"offerA": {"salaryIncreasePct": 10}},
    }
    acme, globex = build_comparison(offer_jobs, inputs, config=engine_config).offers
    assert acme.non_financial_score == 100
    assert globex.non_financial_score == 50
    assert acme.comp.salary == pytest.approx(110000)
    assert globex.comp.salary == 120000


def test_equal_offers_first_is_best(engine_config):
    jobs = [
        {"_id": "a", "company": "First", "finalSalary": 100000},
        {"_id": "b", "company": "Second", "finalSalary": 100000},
    ]
    first, second = build_comparison(jobs, {}, config=engine_config).to_dict()["offers"]
    assert first["financialScore"] == second["financialScore"] == 0
    assert BEHIND_TOP_MESSAGE not in first["negotiationRecommendations"]
    assert second["negotiationRecommendations"][0] == BEHIND_TOP_MESSAGE


def test_financial_weight_is_clamped(offer_jobs, engine_config):
    comparison = build_comparison(offer_jobs, {"weights": {"financialWeight": 2}}, config=engine_config)
    assert [o.overall_score for o in comparison.offers] == [0, 100]


def test_configured_defaults_apply(offer_jobs, engine_config):
    config = engine_config.model_copy(
        update={"comparison": ComparisonDefaults(baseline_col_index=100, financial_weight=0.0, default_rating=5)}
    )
    offers = build_comparison(offer_jobs, {}, config=config).offers
    assert [o.overall_score for o in offers] == [100, 100]


def test_malformed_inputs_are_ignored(offer_jobs, engine_config):
    inputs = {"colIndexByJobId": "nope", "ratingsByJobId": [1, 2], "weights": None, "baselineColIndex": None}
    offers = build_comparison(offer_jobs, inputs, config=engine_config).to_dict()["offers"]
    assert [o["colIndex"] for o in offers] == [100, 100]
    assert [o["overallScore"] for o in offers] == [18, 83]


def test_archived_offer_fields_pass_through(offer_jobs, engine_config):
    jobs = [dict(offer_jobs[0], archived=True, archiveReason="Declined"), offer_jobs[1]]
    acme = build_comparison(jobs, {}, config=engine_config).to_dict()["offers"][0]
    assert acme["archived"] is True
    assert acme["archiveReason"] == "Declined"


def test_no_offers(engine_config):
    data = build_comparison([], {}, config=engine_config).to_dict()
    assert data["offers"] == []
    assert len(data["matrixRows"]) == 9


def test_matrix_frame(offer_jobs, engine_config):
    df = build_comparison(offer_jobs, {}, config=engine_config).to_frame()
    assert isinstance(df, pd.DataFrame)
    assert df.shape == (9, 2)
    assert list(df.columns) == ["Acme (offerA)", "Globex (offerB)"]
    assert df.loc["Total comp", "Acme (offerA)"] == 127000
    assert df.loc["Overall score", "Globex (offerB)"] == 83
