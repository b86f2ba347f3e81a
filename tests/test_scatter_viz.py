from __future__ import annotations

from pathlib import Path

from pitstop_scatter.config import AppConfig
from pitstop_scatter.io.read import load_tables
from pitstop_scatter.pipeline.build_plot import build_plot
from pitstop_scatter.viz.scatter import plot_scatter


def test_plot_scatter_writes_svg(tables_dir: Path, tmp_path: Path) -> None:
    config = AppConfig()
    plot = build_plot(load_tables(tables_dir, config.tables), config)
    output_path = tmp_path / "figures" / "scatter.svg"

    result = plot_scatter(plot, output_path, layout=config.layout)

    assert result == output_path
    assert output_path.exists()
    svg = output_path.read_text(encoding="utf-8")
    assert "<svg" in svg


def test_plot_scatter_writes_png(tables_dir: Path, tmp_path: Path) -> None:
    config = AppConfig()
    plot = build_plot(load_tables(tables_dir, config.tables), config)
    output_path = tmp_path / "scatter.png"

    plot_scatter(plot, output_path, layout=config.layout, tick_count=5)

    assert output_path.stat().st_size > 0
