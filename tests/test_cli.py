from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace

import pytest
from typer.testing import CliRunner

from pitstop_scatter.cli import app
from pitstop_scatter.domain import EmptyDomainError


def _config_path(tmp_path: Path, text: str = "{}") -> Path:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(text, encoding="utf-8")
    return config_path


def test_cli_help() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    assert "plot" in result.stdout
    assert "summary" in result.stdout


def test_plot_command_writes_outputs(tables_dir: Path, tmp_path: Path) -> None:
    out_dir = tmp_path / "out"
    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            "plot",
            "--tables",
            str(tables_dir),
            "--out",
            str(out_dir),
            "--config",
            str(_config_path(tmp_path)),
        ],
    )

    assert result.exit_code == 0, result.stdout
    assert "Plot complete. Figure:" in result.stdout
    assert (out_dir / "figures" / "pit_stops_scatter.svg").exists()
    assert (out_dir / "tables" / "points.csv").exists()
    assert (out_dir / "tables" / "observations.csv").exists()
    summary = json.loads((out_dir / "summary" / "summary.json").read_text(encoding="utf-8"))
    assert summary["n_plottable"] == 4


def test_plot_command_forwards_threshold_override(monkeypatch, tmp_path: Path) -> None:
    tables = tmp_path / "tables"
    tables.mkdir()
    captured: dict[str, object] = {}

    def _fake_run_all(tables_dir: Path, out_dir: Path, config: object) -> Path:
        captured["tables_dir"] = tables_dir
        captured["max_milliseconds"] = config.filter.max_milliseconds  # type: ignore[attr-defined]
        return out_dir / "figure.svg"

    monkeypatch.setattr("pitstop_scatter.cli.run_all", _fake_run_all)

    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            "plot",
            "--tables",
            str(tables),
            "--out",
            str(tmp_path / "out"),
            "--config",
            str(_config_path(tmp_path)),
            "--max-milliseconds",
            "60000",
        ],
    )

    assert result.exit_code == 0, result.stdout
    assert captured["tables_dir"] == tables
    assert captured["max_milliseconds"] == 60000



def test_plot_command_rejects_non_positive_threshold(monkeypatch, tmp_path: Path) -> None:
    tables = tmp_path / "tables"
    tables.mkdir()
    monkeypatch.setattr(
        "pitstop_scatter.cli.run_all",
        lambda **_kwargs: pytest.fail("run_all should not be reached"),
    )

    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            "plot",
            "--tables",
            str(tables),
            "--config",
            str(_config_path(tmp_path)),
            "--max-milliseconds",
            "0",
        ],
    )

    assert result.exit_code != 0
    combined_output = result.stdout
    if hasattr(result, "stderr") and result.stderr:
        combined_output += result.stderr
    message = "must be greater than 0"
    assert message in combined_output or message in str(result.exception)

def test_plot_command_requires_tables_directory(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(
        "pitstop_scatter.cli._load_app_config",
        lambda _path: SimpleNamespace(tables=SimpleNamespace(directory=None)),
    )

    runner = CliRunner()
    result = runner.invoke(app, ["plot", "--config", str(_config_path(tmp_path))])

    assert result.exit_code != 0
    combined_output = result.stdout
    if hasattr(result, "stderr") and result.stderr:
        combined_output += result.stderr
    assert "Missing --tables" in combined_output or "Missing --tables" in str(result.exception)


def test_plot_command_reports_empty_domain(monkeypatch, tmp_path: Path) -> None:
    tables = tmp_path / "tables"
    tables.mkdir()

    def _empty_run_all(tables_dir: Path, out_dir: Path, config: object) -> Path:
        raise EmptyDomainError("Cannot compute a domain over zero values")

    monkeypatch.setattr("pitstop_scatter.cli.run_all", _empty_run_all)

    runner = CliRunner()
    result = runner.invoke(
        app,
        ["plot", "--tables", str(tables), "--config", str(_config_path(tmp_path))],
    )

    assert result.exit_code == 1


def test_summary_command_prints_extremes(tables_dir: Path, tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["summary", "--tables", str(tables_dir), "--config", str(_config_path(tmp_path))],
    )

    assert result.exit_code == 0, result.stdout
    assert "- plottable: 4" in result.stdout
    assert "- fastest: 0:23.227 (Lewis Hamilton, Australian Grand Prix)" in result.stdout
    assert "- slowest: 0:26.898 (Sebastian Vettel, Australian Grand Prix)" in result.stdout


def test_summary_command_uses_config_tables_directory(tables_dir: Path, tmp_path: Path) -> None:
    config_path = _config_path(tmp_path, f"tables:\n  directory: {tables_dir}\n")

    runner = CliRunner()
    result = runner.invoke(app, ["summary", "--config", str(config_path)])

    assert result.exit_code == 0, result.stdout
    assert "- pit_stops: 6" in result.stdout
