"""Unit tests for combo detection and the combo score extras."""

import pytest

from agentcraft.engine.combos import (
    achieved_combos,
    combo_outcome,
    combo_progress,
    energy_efficiency,
    final_score,
    format_breakdown,
    pairwise_anti_synergy,
    pairwise_synergy,
    synergy_summary,
    total_bonus,
    would_complete,
)
from agentcraft.engine.models import ComboDefinition, Component, Role, TierThresholds

SPEED_DEMON = {"context-basic", "model-claude-haiku", "framework-sequential"}
EFFICIENT_WORKER = {"context-basic", "model-gpt35", "framework-sequential", "tool-search"}


@pytest.fixture
def combos(catalog):
    return catalog.combos


def _ids(achieved):
    return [c.id for c in achieved]


def test_achieved_combos_subset(combos):
    """A combo is achieved exactly when all its ids are placed."""
    assert _ids(achieved_combos(SPEED_DEMON, combos)) == ["speed-demon"]
    assert achieved_combos(SPEED_DEMON - {"framework-sequential"}, combos) == []


def test_extra_components_never_remove_a_combo(combos):
    """Adding unrelated ids keeps every already-achieved combo."""
    before = _ids(achieved_combos(SPEED_DEMON, combos))
    after = _ids(achieved_combos(SPEED_DEMON | {"guardrail-content-filter", "tool-database"}, combos))
    assert set(before) <= set(after)


def test_achieved_combos_follow_catalog_order():
    """Overlapping combos are reported in catalog order."""
    catalog = [
        ComboDefinition(id="b", name="B", required_component_ids=["x", "y"], bonus_percent=10),
        ComboDefinition(id="a", name="A", required_component_ids=["x"], bonus_percent=5),
    ]
    assert _ids(achieved_combos({"x", "y"}, catalog)) == ["b", "a"]


def test_total_bonus_stacks_without_cap():
    catalog = [
        ComboDefinition(id=str(i), name=str(i), required_component_ids=["x"], bonus_percent=40)
        for i in range(4)
    ]
    assert total_bonus(catalog) == 160


def test_combo_outcome(combos):
    outcome = combo_outcome(SPEED_DEMON | {"tool-search"}, combos)
    assert _ids(outcome.achieved) == ["speed-demon"]
    assert outcome.total_bonus_percent == 25


def test_would_complete_fires_once(combos):
    """The completing placement reports the combo; later ones do not."""
    placed = {"context-basic", "model-claude-haiku"}
    combo = would_complete("framework-sequential", placed, combos)
    assert combo is not None and combo.id == "speed-demon"

    # Already satisfied: no re-trigger
    assert would_complete("tool-database", SPEED_DEMON, combos) is None
    assert would_complete("framework-sequential", SPEED_DEMON, combos) is None


def test_would_complete_returns_first_in_catalog_order(combos):
    placed = {"context-basic", "model-gpt35", "tool-search"}
    combo = would_complete("framework-sequential", placed, combos)
    assert combo.id == "efficient-worker"


def test_combo_progress(combos):
    worker = next(c for c in combos if c.id == "efficient-worker")
    progress = combo_progress({"context-basic", "model-gpt35", "guardrail-content-filter"}, worker)

    assert progress.complete == 2
    assert progress.total == 4
    assert progress.percentage == 50
    assert progress.missing == ["framework-sequential", "tool-search"]


def test_final_score_applies_bonus_and_clamps(combos):
    thresholds = TierThresholds(tier1=60, tier2=75, tier3=90)
    speed = [c for c in combos if c.id == "speed-demon"]

    assert final_score(80, speed, thresholds).final_score == 100
    boosted = final_score(64, speed, thresholds)
    assert boosted.final_score == 80
    assert boosted.stars == 2
    assert boosted.combo_bonus_percent == 25

    plain = final_score(40, [], thresholds)
    assert plain.final_score == 40
    assert plain.stars == 0


def test_format_breakdown(combos):
    speed = [c for c in combos if c.id == "speed-demon"]
    text = format_breakdown(final_score(80, speed, TierThresholds()))

    assert text.startswith("Base Score: 80/100")
    assert "Speed Demon: +25%" in text
    assert text.endswith("Final Score: 100/100 (★★★)")


# ---------------------------------------------------------------------------
# Synergies
# ---------------------------------------------------------------------------


@pytest.fixture
def cards():
    """Three cards with one mutual synergy, one one-sided synergy and one clash."""
    return {
        "ctx": Component(
            id="ctx", name="Detailed", role=Role.CONTEXT, cost=2,
            synergies_with=["mdl"], synergy_bonus=10,
        ),
        "mdl": Component(
            id="mdl", name="GPT-4", role=Role.MODEL, cost=3,
            synergies_with=["ctx", "tool"], synergy_bonus=5,
        ),
        "tool": Component(
            id="tool", name="Search", role=Role.TOOL, cost=1,
            anti_synergies_with=["ctx"], anti_synergy_penalty=15,
        ),
    }


def test_pairwise_synergy_counts_both_sides(cards):
    assert pairwise_synergy(cards["ctx"], cards["mdl"]) == 15
    assert pairwise_synergy(cards["mdl"], cards["ctx"]) == 15
    assert pairwise_synergy(cards["mdl"], cards["tool"]) == 5
    assert pairwise_synergy(cards["ctx"], cards["tool"]) == 0


def test_pairwise_anti_synergy_is_declared_by_either_side(cards):
    assert pairwise_anti_synergy(cards["ctx"], cards["tool"]) == 15
    assert pairwise_anti_synergy(cards["tool"], cards["ctx"]) == 15
    assert pairwise_anti_synergy(cards["ctx"], cards["mdl"]) == 0


def test_synergy_summary_over_all_pairs(cards):
    summary = synergy_summary([cards["ctx"], cards["mdl"], cards["tool"]])

    assert summary.total_bonus == 20
    assert summary.total_penalty == 15
    assert summary.net_modifier == 5
    assert [(p.first, p.second, p.percent) for p in summary.synergy_pairs] == [
        ("Detailed", "GPT-4", 15), ("GPT-4", "Search", 5),
    ]
    assert [(p.first, p.second) for p in summary.anti_synergy_pairs] == [("Detailed", "Search")]


def test_final_score_adds_synergy_to_combo_bonus(cards, combos):
    """final = base * (1 + (synergy - penalty + combo) / 100)."""
    speed = [c for c in combos if c.id == "speed-demon"]
    thresholds = TierThresholds(tier1=0, tier2=60, tier3=80)
    placed = [cards["ctx"], cards["mdl"], cards["tool"]]

    breakdown = final_score(50, speed, thresholds, placed)
    assert breakdown.final_score == 65
    assert breakdown.stars == 2

    clash = final_score(50, [], thresholds, [cards["ctx"], cards["tool"]])
    assert clash.final_score == 43  # 42.5 rounds half up
    assert clash.synergy.total_penalty == 15


def test_final_score_never_drops_below_zero():
    heavy = [
        Component(id="a", name="A", role=Role.CONTEXT, cost=1,
                  anti_synergies_with=["b"], anti_synergy_penalty=80),
        Component(id="b", name="B", role=Role.MODEL, cost=1,
                  anti_synergies_with=["a"], anti_synergy_penalty=80),
    ]
    breakdown = final_score(90, [], TierThresholds(), heavy)
    assert breakdown.final_score == 0
    assert breakdown.stars == 1


def test_format_breakdown_lists_synergies(cards, combos):
    speed = [c for c in combos if c.id == "speed-demon"]
    placed = [cards["ctx"], cards["mdl"], cards["tool"]]
    text = format_breakdown(final_score(50, speed, TierThresholds(), placed))

    assert text.splitlines()[:4] == [
        "Base Score: 50/100",
        "",
        "Modifiers:",
        "  ✓ Synergy Bonus: +20%",
    ]
    assert "    • Detailed + GPT-4: +15%" in text
    assert "  ✗ Anti-Synergy Penalty: -15%" in text
    assert "    • Detailed ⚠ Search: -15%" in text
    assert "  ★ Combo Bonuses: +25%" in text


# ---------------------------------------------------------------------------
# Energy efficiency
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("score", "used", "budget", "efficiency", "rating", "bonus"),
    [
        (80, 2, 10, 36, "Excellent", 10),   # 40 * 0.9
        (100, 4, 8, 19, "Good", 5),         # 25 * 0.75 = 18.75
        (80, 5, 10, 12, "Average", 0),      # 16 * 0.75
        (60, 5, 5, 6, "Poor", -5),          # 12 * 0.5
    ],
)
def test_energy_efficiency_bands(score, used, budget, efficiency, rating, bonus):
    result = energy_efficiency(score, used, budget)
    assert (result.efficiency, result.rating, result.bonus) == (efficiency, rating, bonus)


@pytest.mark.parametrize(("used", "budget"), [(0, 5), (3, 0)])
def test_energy_efficiency_rejects_non_positive_energy(used, budget):
    with pytest.raises(ValueError):
        energy_efficiency(80, used, budget)
