"""Evaluation & Scoring Engine — verdicts, level scores and combo bonuses.

Public API:
    OutcomeEvaluator  — maps (configuration, scenario) to a Verdict
    LevelAggregator   — scores every scenario of a level into a LevelResult
    achieved_combos   — combos satisfied by a set of placed component ids
    final_score       — level score with synergy and combo modifiers, 0-3 stars
    run_trials        — repeats a level run to estimate pass rates
"""

from agentcraft.engine.config import EngineConfig, load_engine_config
from agentcraft.engine.models import (
    ComboDefinition,
    ComboOutcome,
    ComboProgress,
    Component,
    Configuration,
    Difficulty,
    EnergyEfficiency,
    Level,
    LevelResult,
    Role,
    Scenario,
    ScenarioVerdict,
    ScoreBreakdown,
    SubScores,
    SynergyPair,
    SynergySummary,
    SuccessCriteria,
    TierThresholds,
    Verdict,
)
from agentcraft.engine.evaluator import OutcomeEvaluator, evaluate
from agentcraft.engine.aggregator import LevelAggregator, run_level
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
from agentcraft.engine.trials import TrialSummary, run_trials

__all__ = [
    # config
    "EngineConfig",
    "load_engine_config",
    # models
    "ComboDefinition",
    "ComboOutcome",
    "ComboProgress",
    "Component",
    "Configuration",
    "Difficulty",
    "EnergyEfficiency",
    "Level",
    "LevelResult",
    "Role",
    "Scenario",
    "ScenarioVerdict",
    "ScoreBreakdown",
    "SubScores",
    "SynergyPair",
    "SynergySummary",
    "SuccessCriteria",
    "TierThresholds",
    "Verdict",
    # evaluator
    "OutcomeEvaluator",
    "evaluate",
    # aggregator
    "LevelAggregator",
    "run_level",
    # combos
    "achieved_combos",
    "combo_outcome",
    "combo_progress",
    "energy_efficiency",
    "final_score",
    "format_breakdown",
    "pairwise_anti_synergy",
    "pairwise_synergy",
    "synergy_summary",
    "total_bonus",
    "would_complete",
    # trials
    "TrialSummary",
    "run_trials",
]
