"""Combo Detector — multi-component sets that earn stacking bonuses.

A combo is achieved when every one of its required component ids is placed.
Bonuses of achieved combos add up with no cap at this layer. Pairwise
synergies between single components add or subtract further percentages;
``final_score`` applies both to a level score for display, and
``energy_efficiency`` rates the score against the energy spent.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from itertools import combinations

from agentcraft.engine.models import (
    ComboDefinition,
    ComboOutcome,
    ComboProgress,
    Component,
    EnergyEfficiency,
    ScoreBreakdown,
    SynergyPair,
    SynergySummary,
    TierThresholds,
)


def _is_satisfied(combo: ComboDefinition, placed: set[str] | frozenset[str]) -> bool:
    return combo.required_component_ids <= placed


def achieved_combos(
    placed_ids: Iterable[str],
    catalog: Iterable[ComboDefinition],
) -> list[ComboDefinition]:
    """Combos whose required ids are all placed, in catalog order."""
    placed = frozenset(placed_ids)
    return [combo for combo in catalog if _is_satisfied(combo, placed)]


def total_bonus(achieved: Iterable[ComboDefinition]) -> float:
    return sum(combo.bonus_percent for combo in achieved)


def combo_outcome(
    placed_ids: Iterable[str],
    catalog: Iterable[ComboDefinition],
) -> ComboOutcome:
    achieved = achieved_combos(placed_ids, catalog)
    return ComboOutcome(achieved=achieved, total_bonus_percent=total_bonus(achieved))


def would_complete(
    candidate_id: str,
    placed_ids: Iterable[str],
    catalog: Iterable[ComboDefinition],
) -> ComboDefinition | None:
    """First combo that placing ``candidate_id`` would newly complete.

    A combo already satisfied before the placement is never returned, so a
    "combo discovered" notice fires once.
    """
    before = frozenset(placed_ids)
    after = before | {candidate_id}
    for combo in catalog:
        if not _is_satisfied(combo, before) and _is_satisfied(combo, after):
            return combo
    return None


def combo_progress(placed_ids: Iterable[str], combo: ComboDefinition) -> ComboProgress:
    """How many of the combo's components are placed, and which are missing."""
    placed = frozenset(placed_ids)
    missing = sorted(combo.required_component_ids - placed)
    total = len(combo.required_component_ids)
    complete = total - len(missing)
    return ComboProgress(
        combo_id=combo.id,
        complete=complete,
        total=total,
        percentage=round(complete / total * 100),
        missing=missing,
    )


# ---------------------------------------------------------------------------
# Pairwise synergies
# ---------------------------------------------------------------------------


def pairwise_synergy(first: Component, second: Component) -> float:
    """Bonus percent for placing two components together.

    Either side may declare the other as a partner; when both do, both
    bonuses count.
    """
    bonus = 0.0
    if second.id in first.synergies_with:
        bonus += first.synergy_bonus
    if first.id in second.synergies_with:
        bonus += second.synergy_bonus
    return bonus


def pairwise_anti_synergy(first: Component, second: Component) -> float:
    penalty = 0.0
    if second.id in first.anti_synergies_with:
        penalty += first.anti_synergy_penalty
    if first.id in second.anti_synergies_with:
        penalty += second.anti_synergy_penalty
    return penalty


def synergy_summary(components: Sequence[Component]) -> SynergySummary:
    """Sum synergy bonuses and anti-synergy penalties over every pair."""
    summary = SynergySummary()
    for first, second in combinations(components, 2):
        bonus = pairwise_synergy(first, second)
        if bonus > 0:
            summary.synergy_pairs.append(
                SynergyPair(first=first.name, second=second.name, percent=bonus)
            )
            summary.total_bonus += bonus

        penalty = pairwise_anti_synergy(first, second)
        if penalty > 0:
            summary.anti_synergy_pairs.append(
                SynergyPair(first=first.name, second=second.name, percent=penalty)
            )
            summary.total_penalty += penalty
    return summary


# ---------------------------------------------------------------------------
# Final score
# ---------------------------------------------------------------------------


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def final_score(
    base_score: int,
    achieved: list[ComboDefinition],
    thresholds: TierThresholds,
    components: Sequence[Component] = (),
) -> ScoreBreakdown:
    """Apply synergy and combo modifiers to a level score.

    final = base * (1 + (synergy bonus - anti-synergy penalty + combo bonus) / 100),
    clamped to 0-100. Stars run 0-3 and are rated on the unrounded score,
    since a boosted score below ``tier1`` earns none.
    """
    synergy = synergy_summary(components)
    bonus = total_bonus(achieved)
    modifier = (synergy.net_modifier + bonus) / 100
    boosted = min(100.0, max(0.0, base_score * (1 + modifier)))

    if boosted >= thresholds.tier3:
        stars = 3
    elif boosted >= thresholds.tier2:
        stars = 2
    elif boosted >= thresholds.tier1:
        stars = 1
    else:
        stars = 0

    return ScoreBreakdown(
        base_score=base_score,
        combo_bonus_percent=bonus,
        final_score=_round_half_up(boosted),
        stars=stars,
        achieved=achieved,
        synergy=synergy,
    )


def format_breakdown(breakdown: ScoreBreakdown) -> str:
    """Plain-text summary of a ScoreBreakdown."""
    lines = [f"Base Score: {breakdown.base_score}/100", "", "Modifiers:"]

    synergy = breakdown.synergy
    if synergy.total_bonus > 0:
        lines.append(f"  ✓ Synergy Bonus: +{synergy.total_bonus:g}%")
        for pair in synergy.synergy_pairs:
            lines.append(f"    • {pair.first} + {pair.second}: +{pair.percent:g}%")

    if synergy.total_penalty > 0:
        lines.append(f"  ✗ Anti-Synergy Penalty: -{synergy.total_penalty:g}%")
        for pair in synergy.anti_synergy_pairs:
            lines.append(f"    • {pair.first} ⚠ {pair.second}: -{pair.percent:g}%")

    if breakdown.achieved:
        lines.append(f"  ★ Combo Bonuses: +{breakdown.combo_bonus_percent:g}%")
        for combo in breakdown.achieved:
            lines.append(f"    • {combo.name}: +{combo.bonus_percent:g}%")

    stars = "★" * breakdown.stars + "☆" * (3 - breakdown.stars)
    lines.append("")
    lines.append(f"Final Score: {breakdown.final_score}/100 ({stars})")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Energy efficiency
# ---------------------------------------------------------------------------

# (minimum efficiency, rating, bonus), best first
_EFFICIENCY_BANDS = (
    (25, "Excellent", 10),
    (18, "Good", 5),
    (12, "Average", 0),
)


def energy_efficiency(score: int, energy_used: int, energy_budget: int) -> EnergyEfficiency:
    """Rate how much score a board earns per unit of energy.

    efficiency = (score / used) * (1 - (used / budget) * 0.5), so the same
    score is worth more when it leaves budget unspent.

    Raises:
        ValueError: ``energy_used`` or ``energy_budget`` is not positive.
    """
    if energy_used <= 0 or energy_budget <= 0:
        raise ValueError(
            f"Energy used and budget must be positive, got {energy_used} / {energy_budget}"
        )

    efficiency = (score / energy_used) * (1 - (energy_used / energy_budget) * 0.5)
    for minimum, rating, bonus in _EFFICIENCY_BANDS:
        if efficiency >= minimum:
            break
    else:
        rating, bonus = "Poor", -5

    return EnergyEfficiency(efficiency=_round_half_up(efficiency), rating=rating, bonus=bonus)
