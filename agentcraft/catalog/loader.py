"""Content catalog — components, combos and levels loaded from YAML/JSON.

Layout of a catalog directory:

    components.yaml     {components: [...]}
    combos.yaml         {combos: [...]}
    levels/*.yaml       one level per file

The bundled catalog under ``agentcraft/catalog/data`` holds the game's
starter content. Any directory with the same layout can replace it.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from agentcraft.engine.models import ComboDefinition, Component, Configuration, Level
from agentcraft.errors import (
    CatalogError,
    UnknownComponentError,
    UnknownLevelError,
)

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_DIR = Path(__file__).parent / "data"

_DATA_SUFFIXES = (".yaml", ".yml", ".json")


class Catalog(BaseModel):
    """Everything the engine needs to know about the game's content."""

    components: dict[str, Component] = Field(default_factory=dict)
    combos: list[ComboDefinition] = Field(default_factory=list)
    levels: dict[str, Level] = Field(default_factory=dict)

    # -- lookups -------------------------------------------------------------

    def component(self, component_id: str) -> Component:
        try:
            return self.components[component_id]
        except KeyError:
            raise UnknownComponentError(component_id) from None

    def level(self, id_or_number: str | int) -> Level:
        """Find a level by id ('level-02') or by number (2 or '2')."""
        if isinstance(id_or_number, str) and id_or_number in self.levels:
            return self.levels[id_or_number]

        try:
            number = int(id_or_number)
        except ValueError:
            raise UnknownLevelError(id_or_number) from None

        for level in self.levels.values():
            if level.number == number:
                return level
        raise UnknownLevelError(id_or_number)

    def sorted_levels(self) -> list[Level]:
        return sorted(self.levels.values(), key=lambda lvl: lvl.number)

    # -- derived views ---------------------------------------------------------

    def build_configuration(self, component_ids: Iterable[str]) -> Configuration:
        """Resolve ids and place each component in the slot for its role.

        Raises:
            UnknownComponentError: an id the catalog does not define.
            SlotConflictError: two ids fill the same role.
        """
        return Configuration.from_components(self.component(cid) for cid in component_ids)

    def combos_for_level(self, number: int) -> list[ComboDefinition]:
        """Combos unlocked at or before the given level number."""
        return [
            combo for combo in self.combos
            if combo.unlock_level is None or combo.unlock_level <= number
        ]

    def components_for_level(self, level: Level) -> list[Component]:
        """Components a player may place on the level.

        Uses the level's explicit list when it has one, otherwise every
        component unlocked by the level's number.
        """
        if level.available_components:
            return [self.component(cid) for cid in level.available_components]
        return [
            c for c in self.components.values()
            if c.unlock_level is None or c.unlock_level <= level.number
        ]


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def _read_data(path: Path) -> dict[str, Any]:
    """Parse a YAML or JSON file, chosen by suffix, into a mapping."""
    with open(path, "r") as f:
        try:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise CatalogError(f"Cannot parse {path.name}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise CatalogError(f"{path.name} must hold a mapping, got {type(data).__name__}")
    return data


def _find_data_file(directory: Path, stem: str) -> Path | None:
    for suffix in _DATA_SUFFIXES:
        candidate = directory / f"{stem}{suffix}"
        if candidate.exists():
            return candidate
    return None


def _load_components(directory: Path) -> dict[str, Component]:
    path = _find_data_file(directory, "components")
    if path is None:
        raise CatalogError(f"No components file in catalog directory: {directory}")

    data = _read_data(path)
    components: dict[str, Component] = {}
    for raw in data.get("components") or []:
        component = Component.model_validate(raw)
        if component.id in components:
            raise CatalogError(f"Duplicate component id in {path.name}: '{component.id}'")
        components[component.id] = component
    return components


def _load_combos(directory: Path) -> list[ComboDefinition]:
    path = _find_data_file(directory, "combos")
    if path is None:
        return []
    data = _read_data(path)
    return [ComboDefinition.model_validate(raw) for raw in data.get("combos") or []]


def _load_levels(directory: Path) -> dict[str, Level]:
    levels_dir = directory / "levels"
    if not levels_dir.is_dir():
        return {}

    levels: dict[str, Level] = {}
    for path in sorted(levels_dir.iterdir()):
        if path.suffix not in _DATA_SUFFIXES:
            continue
        level = Level.model_validate(_read_data(path))
        if level.id in levels:
            raise CatalogError(f"Duplicate level id: '{level.id}' ({path.name})")
        levels[level.id] = level
    return levels


def _check_references(catalog: Catalog) -> None:
    """Level component lists must name defined components."""
    for level in catalog.levels.values():
        unknown = [cid for cid in level.available_components if cid not in catalog.components]
        if unknown:
            raise CatalogError(
                f"Level '{level.id}' lists unknown components: {', '.join(unknown)}"
            )

    # Combos may reference cards shipped by a later content pack
    for combo in catalog.combos:
        pending = sorted(combo.required_component_ids - set(catalog.components))
        if pending:
            logger.debug("Combo %s needs components not in catalog: %s", combo.id, pending)


def load_catalog(path: Path | str | None = None) -> Catalog:
    """Load a catalog directory, the bundled one by default."""
    directory = Path(path) if path is not None else DEFAULT_CATALOG_DIR
    if not directory.is_dir():
        raise CatalogError(f"Catalog directory not found: {directory}")

    catalog = Catalog(
        components=_load_components(directory),
        combos=_load_combos(directory),
        levels=_load_levels(directory),
    )
    _check_references(catalog)

    logger.info(
        "Loaded catalog from %s: %d components, %d combos, %d levels",
        directory, len(catalog.components), len(catalog.combos), len(catalog.levels),
    )
    return catalog
