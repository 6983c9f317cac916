from comp_outlook.projections.milestones import Milestone, milestones_by_year, normalize_milestones
from comp_outlook.projections.scenarios import normalize_scenario_inputs, scenario_definitions


def test_scenario_defaults_when_inputs_missing(engine_config):
    sc = normalize_scenario_inputs(None, engine_config)
    assert (sc.conservative_pct, sc.expected_pct, sc.optimistic_pct) == (2, 3, 5)
    assert (sc.bonus_growth_pct, sc.equity_growth_pct, sc.benefits_growth_pct) == (0, 0, 0)


def test_scenario_inputs_are_coerced_and_clamped(engine_config):
    sc = normalize_scenario_inputs(
        {
            "raiseScenarios": {"conservativePct": "-4", "expectedPct": "4.5", "optimisticPct": 99},
            "bonusGrowthPct": 40,
            "equityGrowthPct": "garbage",
            "benefitsGrowthPct": 2,
        },
        engine_config,
    )
    assert sc.conservative_pct == 0
    assert sc.expected_pct == 4.5
    assert sc.optimistic_pct == 20
    assert sc.bonus_growth_pct == 25
    assert sc.equity_growth_pct == 0
    assert sc.benefits_growth_pct == 2


def test_scenario_tolerates_non_mapping_raise_scenarios(engine_config):
    sc = normalize_scenario_inputs({"raiseScenarios": [1, 2, 3]}, engine_config)
    assert sc.expected_pct == 3


def test_scenario_round_trips_through_inputs(engine_config):
    sc = normalize_scenario_inputs({"raiseScenarios": {"expectedPct": 7}}, engine_config)
    assert normalize_scenario_inputs(sc.to_inputs(), engine_config) == sc


def test_scenario_definitions_order(engine_config):
    sc = normalize_scenario_inputs({}, engine_config)
    defs = scenario_definitions(sc)
    assert [d.key for d in defs] == ["conservative", "expected", "optimistic"]
    assert [d.raise_pct for d in defs] == [2, 3, 5]


def test_milestones_non_list_yields_empty(engine_config):
    assert normalize_milestones(None, engine_config) == []
    assert normalize_milestones({"year": 2}, engine_config) == []
    assert normalize_milestones("promotion", engine_config) == []


def test_milestones_are_clamped_and_sorted(engine_config):
    out = normalize_milestones(
        [
            {"year": 12, "title": "Principal"},
            {"year": "2.5", "title": 42, "salaryBumpPct": 45, "note": "promo"},
            {"year": 0, "bonusBumpPct": -3},
            {"title": "No year"},
            {"year": "soon"},
        ],
        engine_config,
    )
    assert [m.year for m in out] == [1, 3, 10]
    assert out[0].bonus_bump_pct == 0
    assert out[0].salary_bump_pct is None
    assert out[1].title == "42"
    assert out[1].salary_bump_pct == 30
    assert out[1].note == "promo"
    assert out[2].title == "Principal"


def test_milestones_sort_is_stable_and_idempotent(engine_config):
    items = [
        {"year": 3, "title": "B"},
        {"year": 2, "title": "A"},
        {"year": 3, "title": "C"},
    ]
    once = normalize_milestones(items, engine_config)
    assert [m.title for m in once] == ["A", "B", "C"]
    assert normalize_milestones(once, engine_config) == once


def test_milestone_to_dict_omits_absent_fields():
    m = Milestone(year=2, title="Senior", salary_bump_pct=10.0)
    assert m.to_dict() == {"year": 2, "title": "Senior", "salaryBumpPct": 10.0}


def test_milestones_by_year_keeps_list_order():
    ms = [Milestone(year=2, title="x"), Milestone(year=4), Milestone(year=2, title="y")]
    grouped = milestones_by_year(ms)
    assert [m.title for m in grouped[2]] == ["x", "y"]
    assert list(grouped) == [2, 4]
