"""Outcome Evaluator — estimates whether a configuration handles a scenario.

Flow:
    1. Sum the cost of every placed component
    2. Take the latency band of the model
    3. Gate on the required roles (context + model)
    4. Run the difficulty's decision table (see policy.py)
    5. Guardrail pass: latency penalty, 70% rescue of a failure
    6. Premium model pass: 40% rescue of a remaining failure

Every probability is its own draw from the evaluator's random stream, and a
draw only happens when its branch is reached. Seed the stream for
reproducible verdicts.
"""

from __future__ import annotations

import logging
import random
from typing import Protocol

from agentcraft.engine.config import EngineConfig
from agentcraft.engine.classifier import (
    ModelTier,
    classify_scenario,
    context_tier,
    model_tier,
)
from agentcraft.engine.policy import (
    CATEGORY_WORDING,
    DIFFICULTY_PREAMBLE,
    GUARDRAIL_LATENCY,
    GUARDRAIL_RESCUE_PROBABILITY,
    MODEL_LATENCY,
    PREMIUM_RESCUE_PROBABILITY,
    Outcome,
    RuleContext,
    select_rule,
)
from agentcraft.engine.models import Configuration, Role, Scenario, Verdict

logger = logging.getLogger(__name__)

INCOMPLETE_REASON = "Missing required components (Context and Model)"
INCOMPLETE_TRACE = "Agent configuration incomplete - context and model are required"


class RandomSource(Protocol):
    """Anything with ``random() -> float`` in [0, 1), e.g. random.Random."""

    def random(self) -> float: ...


class OutcomeEvaluator:
    """Maps (configuration, scenario) to a Verdict.

    Usage:
        evaluator = OutcomeEvaluator(seed=42)
        verdict = evaluator.evaluate(configuration, scenario)
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        seed: int | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        """Initialize the evaluator.

        Args:
            config: Component tiering. Defaults to EngineConfig().
            seed: Seed for a private random.Random stream.
            rng: An explicit random source; takes precedence over ``seed``.
        """
        self.config = config or EngineConfig()
        self.rng: RandomSource = rng if rng is not None else random.Random(seed)

    def evaluate(self, configuration: Configuration, scenario: Scenario) -> Verdict:
        """Evaluate one scenario. Never raises for well-formed input."""
        cost = configuration.total_cost()

        if not configuration.is_complete():
            logger.debug("Scenario %s: incomplete configuration", scenario.id)
            return Verdict(
                success=False,
                reason=INCOMPLETE_REASON,
                cost=0,
                latency=0,
                trace=[INCOMPLETE_TRACE],
                rule="incomplete-configuration",
            )

        context, model = configuration.context, configuration.model

        tier = model_tier(model, self.config)
        latency = MODEL_LATENCY[tier]
        trace = [f"Using {model.name} with {context.name}"]

        ctx = RuleContext(
            difficulty=scenario.difficulty,
            category=classify_scenario(scenario),
            context_tier=context_tier(context, self.config),
            model_tier=tier,
            has_tool=configuration.has(Role.TOOL),
            has_framework=configuration.has(Role.FRAMEWORK),
            has_guardrail=configuration.has(Role.GUARDRAIL),
        )
        rule = select_rule(ctx)
        words = self._wording(configuration, ctx)

        trace.append(DIFFICULTY_PREAMBLE[scenario.difficulty])
        trace.extend(line.format(**words) for line in rule.trace)
        latency += rule.latency

        if rule.outcome == Outcome.SUCCESS:
            success = True
        elif rule.outcome == Outcome.FAILURE:
            success = False
        else:
            success = self._draw(rule.probability)
        reason = (rule.success_reason if success else rule.failure_reason).format(**words)

        guardrail = configuration.guardrail
        if guardrail is not None:
            trace.append(f"{guardrail.name} ensures safe responses")
            latency += GUARDRAIL_LATENCY
            if not success and self._draw(GUARDRAIL_RESCUE_PROBABILITY):
                success = True
                reason = "Guardrails caught potential issue and ensured correct response"
                trace.append("Guardrails prevented failure")

        if not success and tier == ModelTier.PREMIUM:
            if self._draw(PREMIUM_RESCUE_PROBABILITY):
                success = True
                reason = "Advanced model compensated for suboptimal configuration"
                trace.append("Model capability helped overcome limitations")

        logger.debug(
            "Scenario %s [%s/%s] -> %s via %s",
            scenario.id, scenario.difficulty.value, ctx.category.value,
            "pass" if success else "fail", rule.name,
        )
        return Verdict(
            success=success,
            reason=reason,
            cost=cost,
            latency=latency,
            trace=trace,
            rule=rule.name,
        )

    def _draw(self, probability: float) -> bool:
        """One independent draw that succeeds with the given probability."""
        return self.rng.random() < probability

    @staticmethod
    def _wording(configuration: Configuration, ctx: RuleContext) -> dict[str, str]:
        """Template values for trace lines and reasons."""
        words = {
            "tool": configuration.tool.name if configuration.tool else "",
            "framework": configuration.framework.name if configuration.framework else "",
            "guardrail": configuration.guardrail.name if configuration.guardrail else "",
            "query_type": "",
            "risk": "",
            "exposure": "",
        }
        words.update(CATEGORY_WORDING.get(ctx.category, {}))
        return words


def evaluate(
    configuration: Configuration,
    scenario: Scenario,
    *,
    seed: int | None = None,
    rng: RandomSource | None = None,
    config: EngineConfig | None = None,
) -> Verdict:
    """Evaluate a single scenario with a fresh evaluator."""
    return OutcomeEvaluator(config, seed=seed, rng=rng).evaluate(configuration, scenario)
