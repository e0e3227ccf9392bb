"""AgentCraft CLI — run levels against the bundled or a custom catalog.

Commands:
    agentcraft run LEVEL --card ID ...       Score one run of a level
    agentcraft simulate LEVEL --card ID ...  Repeat a level to estimate pass rates
    agentcraft combos --card ID ...          Show achieved combos and progress
    agentcraft catalog                       List components and levels
    agentcraft version                       Print the version
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from agentcraft import __version__
from agentcraft.catalog import Catalog, load_catalog
from agentcraft.engine import (
    EngineConfig,
    LevelAggregator,
    OutcomeEvaluator,
    achieved_combos,
    combo_outcome,
    combo_progress,
    energy_efficiency,
    final_score,
    format_breakdown,
    load_engine_config,
    run_trials,
)
from agentcraft.engine.models import Configuration, Level, LevelResult
from agentcraft.errors import CatalogError, ConfigError

app = typer.Typer(
    name="agentcraft",
    help="🧩 AgentCraft — evaluation and scoring engine for agent configurations",
    add_completion=False,
)

console = Console()

_TIER_STYLE = {1: "red", 2: "yellow", 3: "green"}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Evaluate agent configurations against game levels."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        )


# ---------------------------------------------------------------------------
# Shared loading
# ---------------------------------------------------------------------------


def _load_catalog(catalog_path: Optional[Path]) -> Catalog:
    try:
        return load_catalog(catalog_path)
    except (CatalogError, ValidationError, OSError) as e:
        console.print(f"[red]Error:[/] Could not load catalog: {e}")
        raise typer.Exit(1)


def _load_config(config_path: Optional[Path]) -> EngineConfig:
    if config_path is not None and not config_path.exists():
        console.print(f"[red]Error:[/] Config not found: {config_path}")
        raise typer.Exit(1)
    try:
        return load_engine_config(config_path)
    except (ConfigError, ValidationError, OSError) as e:
        console.print(f"[red]Error:[/] Invalid engine config: {e}")
        raise typer.Exit(1)


def _resolve(
    catalog: Catalog, level_ref: str, cards: list[str],
) -> tuple[Level, Configuration]:
    try:
        level = catalog.level(level_ref)
        configuration = catalog.build_configuration(cards)
    except CatalogError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)
    return level, configuration


def _warn_level_rules(catalog: Catalog, level: Level, configuration: Configuration) -> None:
    """Report board rules the engine itself does not enforce."""
    allowed = {c.id for c in catalog.components_for_level(level)}
    locked = sorted(configuration.placed_ids() - allowed)
    if locked:
        console.print(f"[yellow]Warning:[/] Not available on this level: {', '.join(locked)}")

    spent = configuration.total_cost()
    if level.energy_budget is not None and spent > level.energy_budget:
        console.print(
            f"[yellow]Warning:[/] Configuration costs {spent} energy "
            f"(budget: {level.energy_budget})"
        )

    missing = configuration.missing_roles(level.required_roles)
    if missing:
        console.print(
            "[yellow]Warning:[/] Required roles not filled: "
            + ", ".join(r.value for r in missing)
        )


# ---------------------------------------------------------------------------
# Level commands
# ---------------------------------------------------------------------------


@app.command("run")
def run_level_cmd(
    level_ref: str = typer.Argument(..., metavar="LEVEL", help="Level number or id"),
    cards: list[str] = typer.Option(..., "--card", "-c", help="Component id to place"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for reproducibility"),
    catalog_path: Optional[Path] = typer.Option(
        None, "--catalog", help="Catalog directory (defaults to the bundled one)",
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Engine config YAML/JSON",
    ),
) -> None:
    """Run every scenario of a level once and score the configuration."""
    catalog = _load_catalog(catalog_path)
    config = _load_config(config_path)
    level, configuration = _resolve(catalog, level_ref, cards)

    console.print(Panel.fit(
        f"[bold]Level {level.number}:[/] {level.title or level.id}\n"
        f"[bold]Agent:[/] {configuration.summary() or '(empty)'}\n"
        f"[bold]Energy:[/] {configuration.total_cost()}"
        + (f" / {level.energy_budget}" if level.energy_budget is not None else ""),
        title="🧩 AgentCraft Run",
        border_style="cyan",
    ))
    _warn_level_rules(catalog, level, configuration)

    evaluator = OutcomeEvaluator(config, seed=seed)
    result = LevelAggregator(evaluator).run(configuration, level)

    _display_verdicts(level, result)
    _display_score(result)

    thresholds = level.tier_thresholds or config.default_tier_thresholds
    achieved = achieved_combos(configuration.placed_ids(), catalog.combos_for_level(level.number))
    breakdown = final_score(result.total, achieved, thresholds, configuration.placed())
    body = format_breakdown(breakdown)

    spent = configuration.total_cost()
    if level.energy_budget and spent > 0:
        rating = energy_efficiency(breakdown.final_score, spent, level.energy_budget)
        body += f"\nEnergy Efficiency: {rating.efficiency} ({rating.rating}, {rating.bonus:+d})"

    console.print(Panel(body, title="★ Final Score", border_style="magenta"))


@app.command("simulate")
def simulate_cmd(
    level_ref: str = typer.Argument(..., metavar="LEVEL", help="Level number or id"),
    cards: list[str] = typer.Option(..., "--card", "-c", help="Component id to place"),
    trials: int = typer.Option(100, "--trials", "-n", help="Number of level runs"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for reproducibility"),
    catalog_path: Optional[Path] = typer.Option(
        None, "--catalog", help="Catalog directory (defaults to the bundled one)",
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Engine config YAML/JSON",
    ),
) -> None:
    """Repeat a level run to estimate scores and per-scenario pass rates."""
    if trials < 1:
        console.print("[red]Error:[/] --trials must be at least 1")
        raise typer.Exit(1)

    catalog = _load_catalog(catalog_path)
    config = _load_config(config_path)
    level, configuration = _resolve(catalog, level_ref, cards)

    with console.status(f"[bold green]Running {trials} trial(s)..."):
        summary = run_trials(configuration, level, trials, seed=seed, config=config)

    score_table = Table(title=f"📊 {level.id} over {summary.trials} trials")
    score_table.add_column("Metric", style="bold")
    score_table.add_column("Value", justify="right")
    score_table.add_row("Mean total", f"{summary.mean_total:.1f}")
    score_table.add_row("Min total", str(summary.min_total))
    score_table.add_row("Max total", str(summary.max_total))
    for tier, count in sorted(summary.tier_counts.items()):
        score_table.add_row(f"Tier {tier}", str(count))
    console.print(score_table)

    scenario_table = Table(title="🎯 Scenario Pass Rates")
    scenario_table.add_column("Scenario", style="bold cyan")
    scenario_table.add_column("Difficulty")
    scenario_table.add_column("Pass rate", justify="right")
    for scenario in level.scenarios:
        rate = summary.scenario_pass_rates.get(scenario.id, 0.0)
        scenario_table.add_row(scenario.id, scenario.difficulty.value, f"{rate:.0%}")
    console.print(scenario_table)


# ---------------------------------------------------------------------------
# Content commands
# ---------------------------------------------------------------------------


@app.command("combos")
def combos_cmd(
    cards: list[str] = typer.Option(..., "--card", "-c", help="Component id to place"),
    level_number: Optional[int] = typer.Option(
        None, "--level", "-l", help="Only combos unlocked by this level",
    ),
    catalog_path: Optional[Path] = typer.Option(
        None, "--catalog", help="Catalog directory (defaults to the bundled one)",
    ),
) -> None:
    """Show which combos a set of cards achieves and how close the rest are."""
    catalog = _load_catalog(catalog_path)
    try:
        configuration = catalog.build_configuration(cards)
    except CatalogError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    combos = catalog.combos if level_number is None else catalog.combos_for_level(level_number)
    placed = configuration.placed_ids()

    table = Table(title="✨ Combos")
    table.add_column("Combo", style="bold")
    table.add_column("Bonus", justify="right")
    table.add_column("Progress", justify="right")
    table.add_column("Missing")
    outcome = combo_outcome(placed, combos)
    for combo in combos:
        progress = combo_progress(placed, combo)
        status = "[green]✓[/] " if combo in outcome.achieved else ""
        table.add_row(
            f"{status}{combo.name}",
            f"+{combo.bonus_percent:g}%",
            f"{progress.complete}/{progress.total} ({progress.percentage}%)",
            ", ".join(progress.missing) or "-",
        )
    console.print(table)

    console.print(
        f"\n[bold]Achieved:[/] {len(outcome.achieved)} | "
        f"[bold]Total bonus:[/] +{outcome.total_bonus_percent:g}%"
    )


@app.command("catalog")
def catalog_cmd(
    catalog_path: Optional[Path] = typer.Option(
        None, "--catalog", help="Catalog directory (defaults to the bundled one)",
    ),
) -> None:
    """List the catalog's components and levels."""
    catalog = _load_catalog(catalog_path)

    comp_table = Table(title="🃏 Components")
    comp_table.add_column("Id", style="bold cyan")
    comp_table.add_column("Name")
    comp_table.add_column("Role")
    comp_table.add_column("Cost", justify="right")
    comp_table.add_column("Unlock", justify="right")
    for c in catalog.components.values():
        comp_table.add_row(
            c.id, c.name, c.role.value, str(c.cost),
            str(c.unlock_level) if c.unlock_level is not None else "-",
        )
    console.print(comp_table)

    level_table = Table(title="🗺  Levels")
    level_table.add_column("#", justify="right")
    level_table.add_column("Id", style="bold cyan")
    level_table.add_column("Title")
    level_table.add_column("Scenarios", justify="right")
    level_table.add_column("Budget", justify="right")
    for lvl in catalog.sorted_levels():
        level_table.add_row(
            str(lvl.number), lvl.id, lvl.title, str(len(lvl.scenarios)),
            str(lvl.energy_budget) if lvl.energy_budget is not None else "-",
        )
    console.print(level_table)


@app.command("version")
def version_cmd() -> None:
    """Print the installed version."""
    console.print(f"agentcraft {__version__}")


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def _display_verdicts(level: Level, result: LevelResult) -> None:
    table = Table(title="🎯 Scenario Verdicts")
    table.add_column("Scenario", style="bold cyan")
    table.add_column("Difficulty")
    table.add_column("Result")
    table.add_column("Latency", justify="right")
    table.add_column("Reason")

    for scenario, sv in zip(level.scenarios, result.per_scenario):
        verdict = sv.verdict
        table.add_row(
            scenario.name or scenario.id,
            sv.difficulty.value,
            "[green]PASS[/]" if verdict.success else "[red]FAIL[/]",
            f"{verdict.latency}ms",
            verdict.reason,
        )
    console.print(table)


def _display_score(result: LevelResult) -> None:
    s = result.sub_scores
    style = _TIER_STYLE[result.tier]
    body = (
        f"[bold]Accuracy:[/]   {s.accuracy}/30\n"
        f"[bold]Efficiency:[/] {s.efficiency}/20\n"
        f"[bold]Practices:[/]  {s.practices}/30\n"
        f"[bold]Robustness:[/] {s.robustness}/20\n"
        f"[bold]Total:[/]      [{style}]{result.total}/100 (tier {result.tier})[/]\n"
        f"\n" + "\n".join(result.feedback)
    )
    console.print(Panel(body, title=f"📋 {result.level_id}", border_style=style))
