"""Content catalog: the cards, combos and levels fed to the engine."""

from agentcraft.catalog.loader import DEFAULT_CATALOG_DIR, Catalog, load_catalog

__all__ = ["Catalog", "DEFAULT_CATALOG_DIR", "load_catalog"]
