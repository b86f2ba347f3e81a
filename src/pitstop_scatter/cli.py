from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError

from pitstop_scatter.config import DEFAULT_CONFIG_PATH, AppConfig, FilterConfig, load_config
from pitstop_scatter.domain import EmptyDomainError
from pitstop_scatter.io.read import load_tables
from pitstop_scatter.logging import configure_logging
from pitstop_scatter.pipeline.build_plot import build_plot
from pitstop_scatter.pipeline.run_all import run_all

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path) -> AppConfig:
    return load_config(config_path)


def _resolve_tables_dir(tables: Path | None, cfg: AppConfig) -> Path:
    if tables is not None:
        return tables
    if cfg.tables.directory:
        return Path(cfg.tables.directory)
    raise typer.BadParameter(
        "Missing --tables. Set --tables, tables.directory in config, "
        "or PITSTOP_SCATTER_TABLES_DIR."
    )


def _apply_threshold_override(cfg: AppConfig, max_milliseconds: float | None) -> None:
    if max_milliseconds is None:
        return
    try:
        cfg.filter = FilterConfig(max_milliseconds=max_milliseconds)
    except ValidationError as exc:
        raise typer.BadParameter(
            f"--max-milliseconds must be greater than 0, got {max_milliseconds}"
        ) from exc


@app.command()
def plot(
    tables: Path | None = typer.Option(
        None,
        exists=True,
        file_okay=False,
        resolve_path=True,
        help="Directory holding pit_stops, races, drivers, constructors and results CSVs.",
    ),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    max_milliseconds: float | None = typer.Option(
        None,
        min=0.0,
        help="Drop pit stops at or above this duration. Overrides filter.max_milliseconds.",
    ),
    log_level: str = typer.Option("INFO"),
) -> None:
    """Join the source tables, map pit stops to pixels, and render the scatterplot."""
    configure_logging(log_level)
    cfg = _load_app_config(config)
    _apply_threshold_override(cfg, max_milliseconds)
    tables_dir = _resolve_tables_dir(tables, cfg)
    try:
        figure_path = run_all(tables_dir=tables_dir, out_dir=out, config=cfg)
    except EmptyDomainError as exc:
        typer.echo(f"Nothing to plot: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"Plot complete. Figure: {figure_path}")


@app.command()
def summary(
    tables: Path | None = typer.Option(
        None,
        exists=True,
        file_okay=False,
        resolve_path=True,
    ),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    max_milliseconds: float | None = typer.Option(None, min=0.0),
) -> None:
    """Print observation counts, domains and the fastest/slowest pit stops."""
    configure_logging("WARNING")
    cfg = _load_app_config(config)
    _apply_threshold_override(cfg, max_milliseconds)
    tables_dir = _resolve_tables_dir(tables, cfg)
    try:
        data = build_plot(load_tables(tables_dir, cfg.tables), cfg).summary
    except EmptyDomainError as exc:
        typer.echo(f"Nothing to plot: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo("Pit stop summary")
    typer.echo(f"- pit_stops: {data['n_pit_stops']}")
    typer.echo(f"- observations: {data['n_observations']}")
    typer.echo(f"- plottable: {data['n_plottable']}")
    typer.echo(f"- x_domain: {data['x_domain'][0]} .. {data['x_domain'][1]}")
    typer.echo(f"- y_domain: {data['y_domain'][0]} .. {data['y_domain'][1]}")
    for label in ("fastest", "slowest"):
        stop = data[label]
        typer.echo(
            f"- {label}: {stop['duration']} "
            f"({stop['driver'] or 'unknown driver'}, {stop['race'] or 'unknown race'})"
        )


if __name__ == "__main__":
    app()
