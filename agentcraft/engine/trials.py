"""Trial runner — repeats a level run to estimate how a configuration fares.

A single level run depends on its random draws. Repeating it with a fresh,
seeded stream per trial gives the spread of totals and tiers and the pass
rate of each scenario.
"""

from __future__ import annotations

import logging
import random

from pydantic import BaseModel, Field

from agentcraft.engine.aggregator import LevelAggregator
from agentcraft.engine.config import EngineConfig
from agentcraft.engine.evaluator import OutcomeEvaluator
from agentcraft.engine.models import Configuration, Level

logger = logging.getLogger(__name__)


class TrialSummary(BaseModel):
    """Aggregate of repeated level runs."""

    level_id: str
    trials: int
    mean_total: float = 0.0
    min_total: int = 0
    max_total: int = 0
    tier_counts: dict[int, int] = Field(default_factory=lambda: {1: 0, 2: 0, 3: 0})
    scenario_pass_rates: dict[str, float] = Field(
        default_factory=dict, description="Scenario id -> fraction of trials passed",
    )


def run_trials(
    configuration: Configuration,
    level: Level,
    trials: int = 100,
    *,
    seed: int | None = None,
    config: EngineConfig | None = None,
) -> TrialSummary:
    """Run the level ``trials`` times, each with its own random stream."""
    if trials < 1:
        raise ValueError("trials must be at least 1")

    seeder = random.Random(seed)
    totals: list[int] = []
    tier_counts = {1: 0, 2: 0, 3: 0}
    passes = {scenario.id: 0 for scenario in level.scenarios}

    for _ in range(trials):
        evaluator = OutcomeEvaluator(config, seed=seeder.getrandbits(32))
        result = LevelAggregator(evaluator).run(configuration, level)
        totals.append(result.total)
        tier_counts[result.tier] += 1
        for sv in result.per_scenario:
            if sv.verdict.success:
                passes[sv.scenario_id] += 1

    summary = TrialSummary(
        level_id=level.id,
        trials=trials,
        mean_total=round(sum(totals) / trials, 2),
        min_total=min(totals),
        max_total=max(totals),
        tier_counts=tier_counts,
        scenario_pass_rates={sid: round(n / trials, 3) for sid, n in passes.items()},
    )
    logger.info(
        "Level %s over %d trials: mean %.1f (min %d, max %d)",
        level.id, trials, summary.mean_total, summary.min_total, summary.max_total,
    )
    return summary
