"""Level Aggregator — reduces per-scenario verdicts to a scored LevelResult.

Sub-scores:
    1. Accuracy    (0-30) — pass rate against the level's accuracy threshold
    2. Efficiency  (0-20) — base 10, plus mean latency and mean cost targets
    3. Practices   (0-30) — which roles are filled, and whether they fit the level
    4. Robustness  (0-20) — pass rate per difficulty, weighted 8 / 7 / 5

The total is the plain sum, so it is never above 100. The tier is 3, 2 or 1
against the level's tier thresholds.
"""

from __future__ import annotations

import logging
import math

from agentcraft.engine.config import EngineConfig
from agentcraft.engine.evaluator import OutcomeEvaluator, RandomSource
from agentcraft.engine.models import (
    Configuration,
    Difficulty,
    Level,
    LevelResult,
    Role,
    ScenarioVerdict,
    SubScores,
    TierThresholds,
)

logger = logging.getLogger(__name__)

ROBUSTNESS_WEIGHTS: dict[Difficulty, int] = {
    Difficulty.LOW: 8,
    Difficulty.MEDIUM: 7,
    Difficulty.HIGH: 5,
}


class LevelAggregator:
    """Runs every scenario of a level and scores the outcome.

    Usage:
        aggregator = LevelAggregator(OutcomeEvaluator(seed=7))
        result = aggregator.run(configuration, level)
    """

    def __init__(self, evaluator: OutcomeEvaluator | None = None) -> None:
        self.evaluator = evaluator or OutcomeEvaluator()

    def run(self, configuration: Configuration, level: Level) -> LevelResult:
        """Evaluate the level's scenarios in order and score them."""
        per_scenario = [
            ScenarioVerdict(
                scenario_id=scenario.id,
                difficulty=scenario.difficulty,
                verdict=self.evaluator.evaluate(configuration, scenario),
            )
            for scenario in level.scenarios
        ]

        total_tests = len(per_scenario)
        passed = sum(1 for sv in per_scenario if sv.verdict.success)
        pass_rate = passed / total_tests * 100
        mean_latency = sum(sv.verdict.latency for sv in per_scenario) / total_tests
        mean_cost = sum(sv.verdict.cost for sv in per_scenario) / total_tests

        feedback: list[str] = []
        sub_scores = SubScores(
            accuracy=score_accuracy(pass_rate, level.success_criteria.accuracy_threshold, feedback),
            efficiency=score_efficiency(
                mean_latency, mean_cost,
                level.success_criteria.max_latency, level.success_criteria.max_cost,
                feedback,
            ),
            practices=score_practices(configuration, level, feedback),
            robustness=score_robustness(per_scenario, feedback),
        )
        total = sub_scores.total()
        thresholds = level.tier_thresholds or self.evaluator.config.default_tier_thresholds
        tier = tier_for(total, thresholds)

        logger.info(
            "Level %s: %d/%d passed, total %d (tier %d)",
            level.id, passed, total_tests, total, tier,
        )
        return LevelResult(
            level_id=level.id,
            per_scenario=per_scenario,
            sub_scores=sub_scores,
            total=total,
            tier=tier,
            feedback=feedback,
            pass_rate=round(pass_rate, 3),
            mean_latency=round(mean_latency, 3),
            mean_cost=round(mean_cost, 3),
            missing_required_roles=configuration.missing_roles(level.required_roles),
        )


# ---------------------------------------------------------------------------
# Sub-scores
# ---------------------------------------------------------------------------


def score_accuracy(pass_rate: float, threshold: float, feedback: list[str]) -> int:
    """30 at or above the threshold, then 20 / 10 in 10-point bands, else 5."""
    if pass_rate >= threshold:
        feedback.append(f"✓ Excellent accuracy: {pass_rate:.0f}%")
        return 30
    if pass_rate >= threshold - 10:
        feedback.append(f"✓ Good accuracy: {pass_rate:.0f}%")
        return 20
    if pass_rate >= threshold - 20:
        feedback.append(f"⚠ Acceptable accuracy: {pass_rate:.0f}%")
        return 10
    feedback.append(f"✗ Low accuracy: {pass_rate:.0f}% (target: {threshold:g}%)")
    return 5


def score_efficiency(
    mean_latency: float,
    mean_cost: float,
    max_latency: float | None,
    max_cost: float | None,
    feedback: list[str],
) -> int:
    """Base 10, plus up to 5 for latency and 5 for cost when targets are set."""
    score = 10

    if max_latency:
        if mean_latency <= max_latency:
            score += 5
            feedback.append(f"✓ Fast response time: {mean_latency:.0f}ms")
        elif mean_latency <= max_latency * 1.5:
            score += 2
            feedback.append(f"⚠ Acceptable latency: {mean_latency:.0f}ms")
        else:
            feedback.append(
                f"✗ Slow response: {mean_latency:.0f}ms (target: <{max_latency:g}ms)"
            )

    if max_cost:
        if mean_cost <= max_cost:
            score += 5
            feedback.append(f"✓ Cost-effective: {mean_cost:.1f} energy/query")
        elif mean_cost <= max_cost * 1.5:
            score += 2
            feedback.append(f"⚠ Acceptable cost: {mean_cost:.1f} energy/query")
        else:
            feedback.append(
                f"✗ Expensive: {mean_cost:.1f} energy/query (target: <{max_cost:g})"
            )

    return score


def score_practices(configuration: Configuration, level: Level, feedback: list[str]) -> int:
    score = 0

    if configuration.has(Role.CONTEXT) and configuration.has(Role.MODEL):
        score += 10
        feedback.append("✓ Required components configured")

    complex_cases = level.has_complex_scenarios()
    if complex_cases and configuration.has(Role.TOOL):
        score += 7
        feedback.append("✓ Tools added for complex queries")
    elif complex_cases:
        feedback.append("⚠ Consider adding tools for complex queries")

    if configuration.has(Role.FRAMEWORK):
        score += 7
        feedback.append("✓ Framework provides structure")

    if configuration.has(Role.GUARDRAIL):
        score += 6
        feedback.append("✓ Guardrails ensure safety")
    else:
        feedback.append("⚠ Consider adding guardrails for production use")

    return score


def difficulty_pass_rates(per_scenario: list[ScenarioVerdict]) -> dict[Difficulty, float]:
    """Pass rate (0.0-1.0) per difficulty; an empty group counts as 1.0."""
    rates: dict[Difficulty, float] = {}
    for difficulty in Difficulty:
        group = [sv for sv in per_scenario if sv.difficulty == difficulty]
        if not group:
            rates[difficulty] = 1.0
            continue
        rates[difficulty] = sum(1 for sv in group if sv.verdict.success) / len(group)
    return rates


def score_robustness(per_scenario: list[ScenarioVerdict], feedback: list[str]) -> int:
    rates = difficulty_pass_rates(per_scenario)
    score = sum(
        math.floor(rates[difficulty] * weight)
        for difficulty, weight in ROBUSTNESS_WEIGHTS.items()
    )

    low, medium, high = rates[Difficulty.LOW], rates[Difficulty.MEDIUM], rates[Difficulty.HIGH]
    if low == 1 and medium >= 0.5 and high >= 0.5:
        feedback.append("✓ Agent handles diverse cases well")
    elif low < 1:
        feedback.append("✗ Agent struggles with basic cases")
    elif high < 0.3:
        feedback.append("⚠ Agent needs improvement on edge cases")
    else:
        feedback.append("⚠ Agent is inconsistent on harder cases")

    return score


def tier_for(total: float, thresholds: TierThresholds) -> int:
    if total >= thresholds.tier3:
        return 3
    if total >= thresholds.tier2:
        return 2
    return 1


def run_level(
    configuration: Configuration,
    level: Level,
    *,
    seed: int | None = None,
    rng: RandomSource | None = None,
    config: EngineConfig | None = None,
) -> LevelResult:
    """Run a level with a fresh evaluator."""
    evaluator = OutcomeEvaluator(config, seed=seed, rng=rng)
    return LevelAggregator(evaluator).run(configuration, level)
