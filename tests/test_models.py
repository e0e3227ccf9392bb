"""Unit tests for the engine data models."""

import pytest
from pydantic import ValidationError

from agentcraft.engine.models import (
    ComboDefinition,
    Component,
    Configuration,
    Difficulty,
    Level,
    Role,
    Scenario,
    SubScores,
    SuccessCriteria,
    TierThresholds,
)
from agentcraft.errors import SlotConflictError


def _component(cid, role, cost=1):
    return Component(id=cid, name=cid.title(), role=role, cost=cost)


def test_component_rejects_negative_cost():
    """Component cost is a non-negative energy amount."""
    with pytest.raises(ValidationError):
        _component("model-x", Role.MODEL, cost=-1)


def test_configuration_rejects_component_in_wrong_slot():
    """A model card cannot sit in the context slot."""
    with pytest.raises(ValidationError):
        Configuration(context=_component("model-x", Role.MODEL))


def test_configuration_from_components_places_by_role():
    """from_components fills each component's own slot."""
    ctx = _component("context-a", Role.CONTEXT, cost=2)
    model = _component("model-a", Role.MODEL, cost=3)
    config = Configuration.from_components([model, ctx])

    assert config.context == ctx
    assert config.model == model
    assert config.is_complete()
    assert config.total_cost() == 5
    assert config.placed_ids() == {"context-a", "model-a"}
    # placed() follows role order, not insertion order
    assert [c.id for c in config.placed()] == ["context-a", "model-a"]


def test_configuration_from_components_rejects_duplicate_role():
    """Two models for one configuration are not allowed."""
    with pytest.raises(SlotConflictError) as exc:
        Configuration.from_components([
            _component("model-a", Role.MODEL),
            _component("model-b", Role.MODEL),
        ])
    assert exc.value.role == "model"
    assert "model-a" in str(exc.value) and "model-b" in str(exc.value)


def test_configuration_missing_roles_in_role_order():
    """missing_roles lists the empty required roles in role order."""
    config = Configuration(tool=_component("tool-a", Role.TOOL))
    missing = config.missing_roles({Role.FRAMEWORK, Role.MODEL, Role.CONTEXT})

    assert missing == [Role.CONTEXT, Role.MODEL, Role.FRAMEWORK]
    assert not config.is_complete()


def test_scenario_difficulty_aliases():
    """Game content uses easy/hard; they map to low/high."""
    assert Scenario(id="a", input="x", difficulty="easy").difficulty == Difficulty.LOW
    assert Scenario(id="b", input="x", difficulty="hard").difficulty == Difficulty.HIGH
    assert Scenario(id="c", input="x", difficulty="Medium").difficulty == Difficulty.MEDIUM

    with pytest.raises(ValidationError):
        Scenario(id="d", input="x", difficulty="impossible")


def test_tier_thresholds_must_ascend():
    """Tier cut-offs are ordered tier1 <= tier2 <= tier3."""
    assert TierThresholds().tier2 == 60
    assert TierThresholds().tier3 == 80
    with pytest.raises(ValidationError):
        TierThresholds(tier1=0, tier2=90, tier3=80)


def test_level_requires_scenarios():
    """A level with no scenarios cannot be scored."""
    with pytest.raises(ValidationError):
        Level(id="empty", scenarios=[], success_criteria=SuccessCriteria(accuracy_threshold=80))


def test_level_defaults():
    """Levels require context and model unless they say otherwise."""
    level = Level(
        id="lvl",
        scenarios=[Scenario(id="a", input="hi", difficulty="low")],
        success_criteria=SuccessCriteria(accuracy_threshold=80),
    )
    assert level.required_roles == {Role.CONTEXT, Role.MODEL}
    assert level.tier_thresholds is None
    assert not level.has_complex_scenarios()


def test_success_criteria_bounds():
    """Accuracy threshold is a percentage and targets are positive."""
    with pytest.raises(ValidationError):
        SuccessCriteria(accuracy_threshold=120)
    with pytest.raises(ValidationError):
        SuccessCriteria(accuracy_threshold=80, max_latency=0)


def test_sub_scores_bounds():
    """Each sub-score is capped at its documented maximum."""
    assert SubScores(accuracy=30, efficiency=20, practices=30, robustness=20).total() == 100
    with pytest.raises(ValidationError):
        SubScores(accuracy=31, efficiency=0, practices=0, robustness=0)


def test_combo_definition_needs_components():
    """A combo with no required components is meaningless."""
    with pytest.raises(ValidationError):
        ComboDefinition(id="none", name="None", required_component_ids=[], bonus_percent=10)

    combo = ComboDefinition(
        id="pair", name="Pair", required_component_ids=["a", "b", "a"], bonus_percent=10,
    )
    assert combo.required_component_ids == frozenset({"a", "b"})
