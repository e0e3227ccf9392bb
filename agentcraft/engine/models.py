"""Pydantic data models for the evaluation and scoring engine.

Components, configurations, scenarios and levels are inputs supplied by the
content catalog. Verdicts, level results and combo outcomes are value objects
recomputed on every call; the engine never stores them.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from agentcraft.errors import SlotConflictError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Role(str, Enum):
    """Slot a component occupies in an agent configuration."""

    CONTEXT = "context"
    MODEL = "model"
    TOOL = "tool"
    FRAMEWORK = "framework"
    GUARDRAIL = "guardrail"


class Difficulty(str, Enum):
    """Difficulty tier of a scenario."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Level content written for the game uses easy/hard
_DIFFICULTY_ALIASES = {"easy": "low", "hard": "high"}

REQUIRED_ROLES: frozenset[Role] = frozenset({Role.CONTEXT, Role.MODEL})


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class Component(BaseModel):
    """A placeable card: one context, model, tool, framework or guardrail."""

    model_config = {"frozen": True}

    id: str = Field(description="Unique id, e.g. 'model-gpt4'")
    name: str = Field(description="Display name, e.g. 'GPT-4'")
    role: Role
    cost: int = Field(ge=0, description="Energy cost of placing the component")
    description: str = Field(default="")
    unlock_level: int | None = Field(default=None, ge=1)
    synergies_with: frozenset[str] = Field(default_factory=frozenset)
    synergy_bonus: float = Field(default=0, ge=0, description="Percent added per synergy partner")
    anti_synergies_with: frozenset[str] = Field(default_factory=frozenset)
    anti_synergy_penalty: float = Field(default=0, ge=0)


class Configuration(BaseModel):
    """At most one component per role, as assembled on the board."""

    context: Component | None = None
    model: Component | None = None
    tool: Component | None = None
    framework: Component | None = None
    guardrail: Component | None = None

    @model_validator(mode="after")
    def _check_slot_roles(self) -> Configuration:
        for role in Role:
            component = getattr(self, role.value)
            if component is not None and component.role != role:
                raise ValueError(
                    f"Component '{component.id}' has role '{component.role.value}' "
                    f"but was placed in the '{role.value}' slot"
                )
        return self

    @classmethod
    def from_components(cls, components: Iterable[Component]) -> Configuration:
        """Place each component in the slot matching its role.

        Raises:
            SlotConflictError: two components share a role.
        """
        slots: dict[str, Component] = {}
        for component in components:
            role = component.role.value
            if role in slots:
                raise SlotConflictError(role, slots[role].id, component.id)
            slots[role] = component
        return cls(**slots)

    def get(self, role: Role) -> Component | None:
        return getattr(self, role.value)

    def has(self, role: Role) -> bool:
        return self.get(role) is not None

    def placed(self) -> list[Component]:
        """Placed components in role order."""
        return [c for c in (self.get(r) for r in Role) if c is not None]

    def placed_ids(self) -> set[str]:
        return {c.id for c in self.placed()}

    def missing_roles(self, required: set[Role] | frozenset[Role]) -> list[Role]:
        """Required roles left empty, in role order."""
        return [r for r in Role if r in required and not self.has(r)]

    def is_complete(self) -> bool:
        """True when the minimum roles for evaluation are filled."""
        return not self.missing_roles(REQUIRED_ROLES)

    def total_cost(self) -> int:
        return sum(c.cost for c in self.placed())

    def summary(self) -> str:
        return " + ".join(c.name for c in self.placed())


class Scenario(BaseModel):
    """One test case of a level."""

    model_config = {"frozen": True}

    id: str
    name: str = Field(default="")
    input: str = Field(description="What the user asks the agent")
    expected_behavior: str = Field(default="")
    difficulty: Difficulty

    @field_validator("difficulty", mode="before")
    @classmethod
    def _alias_difficulty(cls, value: object) -> object:
        if isinstance(value, str):
            return _DIFFICULTY_ALIASES.get(value.lower(), value.lower())
        return value


class SuccessCriteria(BaseModel):
    """Targets a level run is scored against."""

    accuracy_threshold: float = Field(ge=0, le=100, description="Pass-rate target in percent")
    max_latency: float | None = Field(default=None, gt=0, description="Mean latency target (ms)")
    max_cost: float | None = Field(default=None, gt=0, description="Mean cost target (energy)")


class TierThresholds(BaseModel):
    """Ascending score cut-offs for the 1-3 tier rating."""

    tier1: float = Field(default=0, ge=0, le=100)
    tier2: float = Field(default=60, ge=0, le=100)
    tier3: float = Field(default=80, ge=0, le=100)

    @model_validator(mode="after")
    def _check_ascending(self) -> TierThresholds:
        if not self.tier1 <= self.tier2 <= self.tier3:
            raise ValueError("Tier thresholds must be ascending (tier1 <= tier2 <= tier3)")
        return self


class Level(BaseModel):
    """A level: ordered scenarios plus the thresholds they are scored against."""

    id: str
    number: int = Field(default=1, ge=1)
    title: str = Field(default="")
    scenarios: list[Scenario] = Field(min_length=1)
    success_criteria: SuccessCriteria
    tier_thresholds: TierThresholds | None = Field(
        default=None, description="Falls back to the engine default (60 / 80) when unset",
    )
    required_roles: set[Role] = Field(default_factory=lambda: set(REQUIRED_ROLES))
    energy_budget: int | None = Field(default=None, ge=0)
    available_components: list[str] = Field(default_factory=list)

    def has_complex_scenarios(self) -> bool:
        return any(s.difficulty != Difficulty.LOW for s in self.scenarios)


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


class Verdict(BaseModel):
    """Outcome of evaluating one configuration against one scenario."""

    success: bool
    reason: str
    cost: int = Field(ge=0)
    latency: int = Field(ge=0, description="Simulated latency (ms)")
    trace: list[str] = Field(default_factory=list)
    rule: str | None = Field(default=None, description="Decision-table row that fired")


class SubScores(BaseModel):
    """The four independently bounded parts of a level score."""

    accuracy: int = Field(ge=0, le=30)
    efficiency: int = Field(ge=0, le=20)
    practices: int = Field(ge=0, le=30)
    robustness: int = Field(ge=0, le=20)

    def total(self) -> int:
        return self.accuracy + self.efficiency + self.practices + self.robustness


class ScenarioVerdict(BaseModel):
    """A verdict paired with the scenario it was produced for."""

    scenario_id: str
    difficulty: Difficulty
    verdict: Verdict


class LevelResult(BaseModel):
    """Aggregate of a level run."""

    level_id: str
    per_scenario: list[ScenarioVerdict] = Field(default_factory=list)
    sub_scores: SubScores
    total: int = Field(ge=0, le=100)
    tier: int = Field(ge=1, le=3)
    feedback: list[str] = Field(default_factory=list)

    pass_rate: float = Field(default=0.0, description="Percent of scenarios passed")
    mean_latency: float = 0.0
    mean_cost: float = 0.0
    missing_required_roles: list[Role] = Field(default_factory=list)

    @property
    def verdicts(self) -> list[Verdict]:
        return [sv.verdict for sv in self.per_scenario]

    @property
    def passed(self) -> int:
        return sum(1 for v in self.verdicts if v.success)


class ComboDefinition(BaseModel):
    """A named set of components that earns a bonus when all are placed."""

    model_config = {"frozen": True}

    id: str
    name: str
    description: str = Field(default="")
    required_component_ids: frozenset[str] = Field(min_length=1)
    bonus_percent: float = Field(ge=0)
    unlock_level: int | None = Field(default=None, ge=1)


class ComboOutcome(BaseModel):
    """Combos satisfied by a configuration and their stacked bonus."""

    achieved: list[ComboDefinition] = Field(default_factory=list)
    total_bonus_percent: float = 0.0


class ComboProgress(BaseModel):
    """How close a configuration is to completing one combo."""

    combo_id: str
    complete: int
    total: int
    percentage: int
    missing: list[str] = Field(default_factory=list)


class SynergyPair(BaseModel):
    """Two placed components whose pairing adjusts the final score."""

    first: str = Field(description="Display name of the earlier component")
    second: str
    percent: float


class SynergySummary(BaseModel):
    """Pairwise synergy bonuses and anti-synergy penalties of a board."""

    total_bonus: float = 0.0
    total_penalty: float = 0.0
    synergy_pairs: list[SynergyPair] = Field(default_factory=list)
    anti_synergy_pairs: list[SynergyPair] = Field(default_factory=list)

    @property
    def net_modifier(self) -> float:
        return self.total_bonus - self.total_penalty


class ScoreBreakdown(BaseModel):
    """Level score with synergy and combo modifiers applied, for display."""

    base_score: int
    combo_bonus_percent: float
    final_score: int = Field(ge=0, le=100)
    stars: int = Field(ge=0, le=3)
    achieved: list[ComboDefinition] = Field(default_factory=list)
    synergy: SynergySummary = Field(default_factory=SynergySummary)


class EnergyEfficiency(BaseModel):
    """Score earned per unit of energy, discounted by budget use."""

    efficiency: int
    rating: str = Field(description="Excellent, Good, Average or Poor")
    bonus: int = Field(description="Suggested score adjustment, -5 to +10")
