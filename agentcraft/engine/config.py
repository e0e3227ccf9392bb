"""Engine configuration — component tiering and scoring defaults in one place."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from agentcraft.engine.models import TierThresholds
from agentcraft.errors import ConfigError


class EngineConfig(BaseModel):
    """Which catalog components count as premium, economy, minimal, and so on.

    The policy table reasons about tiers, not ids; this model maps one to the
    other so new content can be slotted in without touching the rules.

    Usage:
        config = EngineConfig(premium_model_ids=["model-gpt4", "model-opus"])
    """

    model_config = {"protected_namespaces": ()}

    # Model tiers (latency band and premium rescue)
    premium_model_ids: list[str] = Field(
        default_factory=lambda: ["model-gpt4"],
        description="Models with the slowest band and the final rescue chance",
    )
    economy_model_ids: list[str] = Field(
        default_factory=lambda: ["model-gpt35"],
        description="Models with the fastest latency band",
    )

    # Context tiers
    minimal_context_ids: list[str] = Field(
        default_factory=lambda: ["context-basic"],
        description="Contexts too weak for nuanced medium queries",
    )
    detailed_context_ids: list[str] = Field(
        default_factory=lambda: ["context-detailed"],
        description="Richest contexts; the only ones fit for generic hard cases",
    )
    reasoning_context_ids: list[str] = Field(
        default_factory=lambda: ["context-chain-of-thought"],
        description="Rich contexts that are not proportionate for simple queries",
    )

    # Scoring
    default_tier_thresholds: TierThresholds = Field(
        default_factory=TierThresholds,
        description="Tier cut-offs used when a level does not set its own",
    )


def load_engine_config(path: Path | None = None) -> EngineConfig:
    """Load an EngineConfig from a YAML or JSON file.

    Returns the defaults when no path is given.

    Raises:
        ConfigError: the file is not valid YAML/JSON or not a mapping.
        pydantic.ValidationError: the mapping has invalid settings.
    """
    if path is None:
        return EngineConfig()

    with open(path, "r") as f:
        try:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f) or {}
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot parse {path.name}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must hold a mapping of settings")
    return EngineConfig.model_validate(data)
