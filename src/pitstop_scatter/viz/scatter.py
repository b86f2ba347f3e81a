from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt

from pitstop_scatter.config import LayoutConfig
from pitstop_scatter.pipeline.build_plot import PlotData
from pitstop_scatter.ticks import format_date, format_duration
from pitstop_scatter.viz.common import save_figure

DPI = 100
TICK_LENGTH = 6
POINT_COLOR = "#4682b4"
AXIS_COLOR = "#333333"


def plot_scatter(
    plot: PlotData,
    output_path: Path,
    layout: LayoutConfig,
    tick_count: int = 10,
) -> Path:
    """Draw pit stops in pixel space with duration and date axes."""
    fig = plt.figure(figsize=(layout.width / DPI, layout.height / DPI), dpi=DPI)
    ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
    ax.set_xlim(0, layout.width)
    # Pixel rows grow downward, as in the scale ranges.
    ax.set_ylim(layout.height, 0)
    ax.axis("off")

    ax.scatter(
        [point.x_px for point in plot.points],
        [point.y_px for point in plot.points],
        s=9,
        color=POINT_COLOR,
        alpha=0.5,
        linewidths=0,
    )

    x0, x1 = plot.x_scale.range
    y0, y1 = plot.y_scale.range
    ax.plot([x0, x1], [y0, y0], color=AXIS_COLOR, linewidth=1)
    ax.plot([x0, x0], [y0, y1], color=AXIS_COLOR, linewidth=1)

    for tick in plot.x_scale.ticks(tick_count):
        x = plot.x_scale(tick)
        ax.plot([x, x], [y0, y0 + TICK_LENGTH], color=AXIS_COLOR, linewidth=1)
        ax.text(x, y0 + TICK_LENGTH + 2, format_date(tick), ha="center", va="top", fontsize=8)

    for tick in plot.y_scale.ticks(tick_count):
        y = plot.y_scale(tick)
        ax.plot([x0 - TICK_LENGTH, x0], [y, y], color=AXIS_COLOR, linewidth=1)
        ax.text(
            x0 - TICK_LENGTH - 2,
            y,
            format_duration(tick),
            ha="right",
            va="center",
            fontsize=8,
        )

    return save_figure(output_path)
