from __future__ import annotations

import logging
from pathlib import Path

from pitstop_scatter.config import AppConfig
from pitstop_scatter.io.read import load_tables
from pitstop_scatter.io.write import write_summary, write_table
from pitstop_scatter.observations import observations_to_frame
from pitstop_scatter.paths import build_output_paths
from pitstop_scatter.pipeline.build_plot import PlotData, build_plot
from pitstop_scatter.viz.scatter import plot_scatter

LOGGER = logging.getLogger(__name__)


def _write_outputs(plot: PlotData, out_dir: Path, config: AppConfig) -> Path:
    paths = build_output_paths(out_dir)
    extension = "parquet" if config.outputs.tables_format == "parquet" else "csv"
    write_table(
        plot.points_frame(),
        paths.tables / f"points.{extension}",
        fmt=config.outputs.tables_format,
    )
    write_table(
        observations_to_frame(plot.observations),
        paths.tables / f"observations.{extension}",
        fmt=config.outputs.tables_format,
    )
    write_summary(plot.summary, paths.summary / "summary.json")

    figure_path = paths.figures / f"pit_stops_scatter.{config.outputs.figures_format}"
    try:
        return plot_scatter(
            plot,
            figure_path,
            layout=config.layout,
            tick_count=config.scales.tick_count,
        )
    except Exception:
        LOGGER.exception("Failed rendering scatter figure %s", figure_path)
        raise


def run_all(tables_dir: Path, out_dir: Path, config: AppConfig) -> Path:
    tables = load_tables(tables_dir, config.tables)
    plot = build_plot(tables, config)
    figure_path = _write_outputs(plot, out_dir=out_dir, config=config)
    LOGGER.info("Wrote %d points to %s", len(plot.points), figure_path)
    return figure_path
