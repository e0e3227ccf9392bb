"""Scenario and component classification.

The policy table never looks at raw text or component ids. It sees the
category of the scenario and the tier of each placed component, both derived
here. Matching is a case-insensitive substring search over the scenario input.
"""

from __future__ import annotations

from enum import Enum

from agentcraft.engine.config import EngineConfig
from agentcraft.engine.models import Component, Difficulty, Scenario


class Intent(str, Enum):
    """Signals detected in a scenario's input text."""

    DATA_ACCESS = "data_access"
    COMPETITIVE = "competitive"
    SENSITIVE_INFO = "sensitive_info"
    SECURITY_STATUS = "security_status"


class ScenarioCategory(str, Enum):
    """What the policy table branches on, after difficulty."""

    GENERAL = "general"
    DATA_ACCESS = "data_access"
    COMPETITIVE = "competitive"
    SENSITIVE_INFO = "sensitive_info"
    SECURITY_STATUS = "security_status"


class ContextTier(str, Enum):
    MINIMAL = "minimal"
    DETAILED = "detailed"
    REASONING = "reasoning"
    OTHER = "other"


class ModelTier(str, Enum):
    PREMIUM = "premium"
    ECONOMY = "economy"
    STANDARD = "standard"


INTENT_KEYWORDS: dict[Intent, tuple[str, ...]] = {
    Intent.DATA_ACCESS: ("account", "balance", "order", "transaction"),
    Intent.COMPETITIVE: ("competitor", "better than"),
    Intent.SENSITIVE_INFO: ("password", "credit card", "ssn"),
    Intent.SECURITY_STATUS: ("locked", "security", "breach"),
}

# High-difficulty precedence: a sensitive request outranks a comparison,
# which outranks a security-status question.
_HIGH_PRECEDENCE: tuple[tuple[Intent, ScenarioCategory], ...] = (
    (Intent.SENSITIVE_INFO, ScenarioCategory.SENSITIVE_INFO),
    (Intent.COMPETITIVE, ScenarioCategory.COMPETITIVE),
    (Intent.SECURITY_STATUS, ScenarioCategory.SECURITY_STATUS),
)


def detect_intents(text: str) -> frozenset[Intent]:
    """Return every intent whose keywords appear in the text."""
    lowered = text.lower()
    return frozenset(
        intent
        for intent, keywords in INTENT_KEYWORDS.items()
        if any(keyword in lowered for keyword in keywords)
    )


def categorize(difficulty: Difficulty, intents: frozenset[Intent]) -> ScenarioCategory:
    """Reduce detected intents to the single category a difficulty cares about.

    Low scenarios are always general. Medium scenarios only distinguish data
    access. High scenarios follow the sensitive > competitive > security order.
    """
    if difficulty == Difficulty.MEDIUM:
        if Intent.DATA_ACCESS in intents:
            return ScenarioCategory.DATA_ACCESS
        return ScenarioCategory.GENERAL

    if difficulty == Difficulty.HIGH:
        for intent, category in _HIGH_PRECEDENCE:
            if intent in intents:
                return category

    return ScenarioCategory.GENERAL


def classify_scenario(scenario: Scenario) -> ScenarioCategory:
    return categorize(scenario.difficulty, detect_intents(scenario.input))


def context_tier(component: Component, config: EngineConfig) -> ContextTier:
    if component.id in config.minimal_context_ids:
        return ContextTier.MINIMAL
    if component.id in config.detailed_context_ids:
        return ContextTier.DETAILED
    if component.id in config.reasoning_context_ids:
        return ContextTier.REASONING
    return ContextTier.OTHER


def model_tier(component: Component, config: EngineConfig) -> ModelTier:
    if component.id in config.premium_model_ids:
        return ModelTier.PREMIUM
    if component.id in config.economy_model_ids:
        return ModelTier.ECONOMY
    return ModelTier.STANDARD
