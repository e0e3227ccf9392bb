"""Outcome policy — the decision table behind the evaluator.

Each row pairs a predicate over a RuleContext with an outcome policy. Rows are
tried in order within the scenario's difficulty and the first match wins.
Every difficulty ends with a row that always matches.

Outcomes:
    success  — deterministic pass
    failure  — deterministic fail
    chance   — pass with the row's probability, one independent draw
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from agentcraft.engine.classifier import ContextTier, ModelTier, ScenarioCategory
from agentcraft.engine.models import Difficulty


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MODEL_LATENCY: dict[ModelTier, int] = {
    ModelTier.PREMIUM: 1500,
    ModelTier.ECONOMY: 800,
    ModelTier.STANDARD: 1000,
}

GUARDRAIL_LATENCY = 150
GUARDRAIL_RESCUE_PROBABILITY = 0.7
PREMIUM_RESCUE_PROBABILITY = 0.4

DIFFICULTY_PREAMBLE: dict[Difficulty, str] = {
    Difficulty.LOW: "Test case is straightforward",
    Difficulty.MEDIUM: "Test case requires more sophisticated handling",
    Difficulty.HIGH: "Test case is challenging - likely an edge case or sensitive query",
}

# query_type / risk / exposure wording for the guarded categories
CATEGORY_WORDING: dict[ScenarioCategory, dict[str, str]] = {
    ScenarioCategory.SENSITIVE_INFO: {
        "query_type": "sensitive information request",
        "risk": "security breach",
        "exposure": "information disclosure",
    },
    ScenarioCategory.COMPETITIVE: {
        "query_type": "competitive/comparison query",
        "risk": "inappropriate claims",
        "exposure": "inappropriate claims",
    },
}

_GUARDED = (ScenarioCategory.SENSITIVE_INFO, ScenarioCategory.COMPETITIVE)


class Outcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    CHANCE = "chance"


@dataclass(frozen=True)
class RuleContext:
    """Everything a rule predicate may look at."""

    difficulty: Difficulty
    category: ScenarioCategory
    context_tier: ContextTier
    model_tier: ModelTier
    has_tool: bool
    has_framework: bool
    has_guardrail: bool

    @property
    def rich_context(self) -> bool:
        return self.context_tier in (ContextTier.DETAILED, ContextTier.REASONING)

    @property
    def proportionate_context(self) -> bool:
        return self.context_tier in (ContextTier.MINIMAL, ContextTier.DETAILED)

    @property
    def premium_model(self) -> bool:
        return self.model_tier == ModelTier.PREMIUM

    @property
    def guarded_category(self) -> bool:
        return self.category in _GUARDED


@dataclass(frozen=True)
class Rule:
    """One row of the decision table.

    Trace lines and reasons are templates; ``{tool}``, ``{framework}`` and
    ``{guardrail}`` expand to component names and the guarded categories add
    ``{query_type}``, ``{risk}`` and ``{exposure}``.
    """

    name: str
    difficulty: Difficulty
    when: Callable[[RuleContext], bool]
    outcome: Outcome
    trace: tuple[str, ...] = ()
    success_reason: str = ""
    failure_reason: str = ""
    probability: float = 0.0
    latency: int = 0


def _always(ctx: RuleContext) -> bool:
    return True


RULES: tuple[Rule, ...] = (
    # -- low ---------------------------------------------------------------
    Rule(
        name="low.proportionate-context",
        difficulty=Difficulty.LOW,
        when=lambda c: c.proportionate_context,
        outcome=Outcome.SUCCESS,
        trace=("Context is appropriate for simple queries",),
        success_reason="Agent handled the query correctly with appropriate context",
    ),
    Rule(
        name="low.excessive-context",
        difficulty=Difficulty.LOW,
        when=_always,
        outcome=Outcome.SUCCESS,
        trace=("Context might be overkill but works",),
        success_reason="Agent handled the query, though simpler context would suffice",
    ),
    # -- medium ------------------------------------------------------------
    Rule(
        name="medium.data-access-without-tool",
        difficulty=Difficulty.MEDIUM,
        when=lambda c: c.category == ScenarioCategory.DATA_ACCESS and not c.has_tool,
        outcome=Outcome.FAILURE,
        trace=("Query requires data access but no tools available",),
        failure_reason="Customer data queries need database tool for accuracy",
    ),
    Rule(
        name="medium.minimal-context-with-tool",
        difficulty=Difficulty.MEDIUM,
        when=lambda c: c.context_tier == ContextTier.MINIMAL and c.has_tool,
        outcome=Outcome.CHANCE,
        probability=0.6,
        trace=("Basic context insufficient for nuanced query",),
        success_reason="Tools helped compensate for basic context",
        failure_reason="Query needed better context in addition to tools",
    ),
    Rule(
        name="medium.minimal-context",
        difficulty=Difficulty.MEDIUM,
        when=lambda c: c.context_tier == ContextTier.MINIMAL,
        outcome=Outcome.FAILURE,
        trace=("Basic context insufficient for nuanced query",),
        failure_reason="Query too complex for basic context - needs more detailed instructions",
    ),
    Rule(
        name="medium.rich-context-with-tool",
        difficulty=Difficulty.MEDIUM,
        when=lambda c: c.rich_context and c.has_tool,
        outcome=Outcome.SUCCESS,
        latency=300,
        trace=(
            "Good context helps with complexity",
            "{tool} provides additional capability",
        ),
        success_reason="Agent handled complex query with strong context and tools",
    ),
    Rule(
        name="medium.rich-context",
        difficulty=Difficulty.MEDIUM,
        when=lambda c: c.rich_context,
        outcome=Outcome.CHANCE,
        probability=0.7,
        trace=("Good context helps with complexity",),
        success_reason="Agent handled query with strong context",
        failure_reason="Query would benefit from tool support",
    ),
    Rule(
        name="medium.unsuited-context",
        difficulty=Difficulty.MEDIUM,
        when=_always,
        outcome=Outcome.FAILURE,
        trace=("Context variant is not suited to this query",),
        failure_reason="Query needs a basic, detailed or chain-of-thought context",
    ),
    # -- high: sensitive / competitive --------------------------------------
    Rule(
        name="high.guarded-with-guardrail",
        difficulty=Difficulty.HIGH,
        when=lambda c: c.guarded_category and c.has_guardrail,
        outcome=Outcome.SUCCESS,
        trace=(
            "Detected {query_type} - needs careful handling",
            "{guardrail} ensures appropriate response",
        ),
        success_reason="Agent handled {query_type} appropriately with guardrails",
    ),
    Rule(
        name="high.guarded-premium-model",
        difficulty=Difficulty.HIGH,
        when=lambda c: c.guarded_category and c.premium_model,
        outcome=Outcome.CHANCE,
        probability=0.5,
        trace=(
            "Detected {query_type} - needs careful handling",
            "No guardrails - risk of {risk}",
        ),
        success_reason="Model handled query carefully, but guardrails would be safer",
        failure_reason="Query needed guardrails to prevent {exposure}",
    ),
    Rule(
        name="high.guarded-unprotected",
        difficulty=Difficulty.HIGH,
        when=lambda c: c.guarded_category,
        outcome=Outcome.FAILURE,
        trace=(
            "Detected {query_type} - needs careful handling",
            "No guardrails - risk of {risk}",
        ),
        failure_reason="Query needed guardrails to prevent {exposure}",
    ),
    # -- high: security status ----------------------------------------------
    Rule(
        name="high.security-thin-context",
        difficulty=Difficulty.HIGH,
        when=lambda c: c.category == ScenarioCategory.SECURITY_STATUS and not c.rich_context,
        outcome=Outcome.FAILURE,
        trace=(
            "Security-related query needs comprehensive handling",
            "Insufficient context for security scenario",
        ),
        failure_reason="Security issues require detailed context with clear policies",
    ),
    Rule(
        name="high.security-with-tool",
        difficulty=Difficulty.HIGH,
        when=lambda c: c.category == ScenarioCategory.SECURITY_STATUS and c.has_tool,
        outcome=Outcome.SUCCESS,
        latency=400,
        trace=(
            "Security-related query needs comprehensive handling",
            "Detailed context provides security policy guidance",
            "{tool} can check account status",
        ),
        success_reason="Agent handled security issue with proper context and tools",
    ),
    Rule(
        name="high.security-context-only",
        difficulty=Difficulty.HIGH,
        when=lambda c: c.category == ScenarioCategory.SECURITY_STATUS,
        outcome=Outcome.CHANCE,
        probability=0.6,
        trace=(
            "Security-related query needs comprehensive handling",
            "Detailed context provides security policy guidance",
        ),
        success_reason="Agent handled security scenario with strong context",
        failure_reason="Security cases benefit from tools for status verification",
    ),
    # -- high: generic edge case --------------------------------------------
    Rule(
        name="high.edge-case-thin-context",
        difficulty=Difficulty.HIGH,
        when=lambda c: c.context_tier != ContextTier.DETAILED,
        outcome=Outcome.FAILURE,
        trace=("Insufficient context for complex edge case",),
        failure_reason="Edge case requires comprehensive context",
    ),
    Rule(
        name="high.edge-case-context-only",
        difficulty=Difficulty.HIGH,
        when=lambda c: not c.has_tool,
        outcome=Outcome.CHANCE,
        probability=0.6,
        trace=("Detailed context provides good foundation",),
        success_reason="Agent handled edge case with strong context",
        failure_reason="Hard cases benefit from tool support",
    ),
    Rule(
        name="high.edge-case-full-stack",
        difficulty=Difficulty.HIGH,
        when=lambda c: c.has_framework,
        outcome=Outcome.SUCCESS,
        latency=500 + 200,
        trace=(
            "Detailed context provides good foundation",
            "{tool} enables sophisticated handling",
            "{framework} provides structure",
        ),
        success_reason="Agent successfully handled edge case with proper architecture",
    ),
    Rule(
        name="high.edge-case-with-tool",
        difficulty=Difficulty.HIGH,
        when=_always,
        outcome=Outcome.CHANCE,
        probability=0.5,
        latency=500,
        trace=(
            "Detailed context provides good foundation",
            "{tool} enables sophisticated handling",
        ),
        success_reason="Agent handled edge case, though framework would improve reliability",
        failure_reason="Edge case needed framework for consistent handling",
    ),
)


def rules_for(difficulty: Difficulty) -> list[Rule]:
    return [r for r in RULES if r.difficulty == difficulty]


def select_rule(ctx: RuleContext) -> Rule:
    """Return the first row matching the context."""
    for rule in rules_for(ctx.difficulty):
        if rule.when(ctx):
            return rule
    # Every difficulty ends with a catch-all row
    raise LookupError(f"No policy row for difficulty '{ctx.difficulty.value}'")
