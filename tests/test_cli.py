"""CLI tests using Typer's CliRunner."""

import pytest
from rich.console import Console
from typer.testing import CliRunner

from agentcraft import __version__, cli

runner = CliRunner()

GOOD_BOARD = [
    "--card", "context-detailed",
    "--card", "model-gpt35",
    "--card", "tool-search",
    "--card", "framework-sequential",
]


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Render tables wide enough that ids never wrap."""
    monkeypatch.setattr(cli, "console", Console(width=200))


def test_version():
    result = runner.invoke(cli.app, ["version"])
    assert result.exit_code == 0
    assert f"agentcraft {__version__}" in result.output


def test_catalog_lists_components_and_levels():
    result = runner.invoke(cli.app, ["catalog"])
    assert result.exit_code == 0
    assert "guardrail-hallucination-check" in result.output
    assert "Customer FAQ Bot" in result.output


def test_run_level():
    result = runner.invoke(cli.app, ["run", "1", *GOOD_BOARD, "--seed", "7"])
    assert result.exit_code == 0, result.output
    assert "Scenario Verdicts" in result.output
    assert "Final Score" in result.output
    assert "Accuracy" in result.output


def test_run_warns_about_locked_cards():
    result = runner.invoke(
        cli.app,
        ["run", "1", "--card", "context-detailed", "--card", "model-gpt4", "--seed", "1"],
    )
    assert result.exit_code == 0, result.output
    assert "Not available on this level: model-gpt4" in result.output
    assert "Required roles not filled: framework" in result.output


def test_run_unknown_card_exits_1():
    result = runner.invoke(cli.app, ["run", "1", "--card", "model-gpt5"])
    assert result.exit_code == 1
    assert "Unknown component id" in result.output


def test_run_unknown_level_exits_1():
    result = runner.invoke(cli.app, ["run", "42", *GOOD_BOARD])
    assert result.exit_code == 1
    assert "Unknown level" in result.output


def test_run_slot_conflict_exits_1():
    result = runner.invoke(
        cli.app, ["run", "1", "--card", "model-gpt35", "--card", "model-claude-haiku"],
    )
    assert result.exit_code == 1
    assert "model" in result.output


def test_run_missing_config_exits_1(tmp_path):
    result = runner.invoke(cli.app, ["run", "1", *GOOD_BOARD, "--config", str(tmp_path / "x.yaml")])
    assert result.exit_code == 1
    assert "Config not found" in result.output


def test_simulate():
    result = runner.invoke(cli.app, ["simulate", "2", *GOOD_BOARD, "--trials", "5", "--seed", "3"])
    assert result.exit_code == 0, result.output
    assert "Scenario Pass Rates" in result.output
    assert "Mean total" in result.output


def test_simulate_rejects_zero_trials():
    result = runner.invoke(cli.app, ["simulate", "1", *GOOD_BOARD, "--trials", "0"])
    assert result.exit_code == 1


def test_combos():
    result = runner.invoke(
        cli.app,
        [
            "combos",
            "--card", "context-basic",
            "--card", "model-claude-haiku",
            "--card", "framework-sequential",
            "--level", "1",
        ],
    )
    assert result.exit_code == 0, result.output
    assert "Speed Demon" in result.output
    assert "Total bonus: +25%" in result.output


@pytest.mark.parametrize(
    ("name", "content"),
    [("bad.yaml", "premium_model_ids: [unclosed"), ("bad.json", "{not json")],
)
def test_run_unparseable_config_exits_1(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(content)

    result = runner.invoke(cli.app, ["run", "1", *GOOD_BOARD, "--config", str(path)])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert f"Cannot parse {name}" in result.output


def test_run_config_that_is_not_a_mapping_exits_1(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- model-gpt4\n- model-opus\n")

    result = runner.invoke(cli.app, ["run", "1", *GOOD_BOARD, "--config", str(path)])

    assert result.exit_code == 1
    assert "must hold a mapping" in result.output


def test_catalog_with_list_valued_components_file_exits_1(tmp_path):
    (tmp_path / "components.yaml").write_text("- id: ctx\n- id: mdl\n")

    result = runner.invoke(cli.app, ["catalog", "--catalog", str(tmp_path)])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "components.yaml must hold a mapping" in result.output


def test_run_shows_energy_efficiency():
    result = runner.invoke(cli.app, ["run", "1", *GOOD_BOARD, "--seed", "7"])
    assert result.exit_code == 0, result.output
    assert "Energy Efficiency:" in result.output
    assert "Modifiers:" in result.output
