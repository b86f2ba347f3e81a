from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd

from pitstop_scatter.config import AppConfig
from pitstop_scatter.domain import extent, fastest_and_slowest
from pitstop_scatter.io.read import SourceTables
from pitstop_scatter.join.resolver import RelationResolver
from pitstop_scatter.observations import (
    Observation,
    below_threshold,
    build_observations,
    tooltip_text,
)
from pitstop_scatter.scales import LinearScale, TimeScale, linear_scale, time_scale
from pitstop_scatter.ticks import format_duration

LOGGER = logging.getLogger(__name__)

POINT_COLUMNS = [
    "x_px",
    "y_px",
    "date",
    "milliseconds",
    "race",
    "driver",
    "constructor",
    "lap",
    "tooltip",
]


@dataclass(frozen=True)
class PlotPoint:
    x_px: float
    y_px: float
    tooltip: str
    observation: Observation


@dataclass(frozen=True)
class PlotData:
    observations: tuple[Observation, ...]
    points: tuple[PlotPoint, ...]
    x_scale: TimeScale
    y_scale: LinearScale
    summary: dict[str, Any] = field(default_factory=dict)

    def points_frame(self) -> pd.DataFrame:
        rows = [
            {
                "x_px": point.x_px,
                "y_px": point.y_px,
                "date": point.observation.x,
                "milliseconds": point.observation.y,
                "race": point.observation.race,
                "driver": point.observation.driver,
                "constructor": point.observation.constructor,
                "lap": point.observation.lap,
                "tooltip": point.tooltip,
            }
            for point in self.points
        ]
        return pd.DataFrame(rows, columns=POINT_COLUMNS)


def _describe_stop(observation: Observation) -> dict[str, Any]:
    return {
        "milliseconds": observation.y,
        "duration": format_duration(observation.y),
        "race": observation.race,
        "driver": observation.driver,
        "constructor": observation.constructor,
        "lap": observation.lap,
    }


def build_plot(tables: SourceTables, config: AppConfig) -> PlotData:
    """Join the source tables into observations and map them to pixel space.

    Raises ``EmptyDomainError`` when no pit stop survives filtering with a
    resolvable race date.
    """
    resolver = RelationResolver.from_tables(
        races=tables.races,
        drivers=tables.drivers,
        constructors=tables.constructors,
        results=tables.results,
    )
    observations = build_observations(
        tables.pit_stops,
        predicate=below_threshold(config.filter.max_milliseconds),
        resolver=resolver,
    )
    plottable = [item for item in observations if item.is_plottable]
    LOGGER.info(
        "Resolved %d of %d pit stops into %d plottable observations",
        len(observations),
        len(tables.pit_stops),
        len(plottable),
    )

    x_domain = extent(plottable, key=lambda item: item.x)
    y_domain = extent(plottable, key=lambda item: item.y)
    count = config.scales.tick_count
    x_scale = time_scale(
        x_domain,
        config.layout.x_range(),
        nice=config.scales.nice_x,
        count=count,
    )
    y_scale = linear_scale(
        y_domain,
        config.layout.y_range(),
        nice=config.scales.nice_y,
        count=count,
    )

    x_px = np.asarray(x_scale(pd.Series([item.x for item in plottable])), dtype=float)
    y_px = y_scale(np.array([item.y for item in plottable], dtype=float))
    points = tuple(
        PlotPoint(
            x_px=float(x_value),
            y_px=float(y_value),
            tooltip=tooltip_text(item),
            observation=item,
        )
        for item, x_value, y_value in zip(plottable, x_px, y_px)
    )

    fastest, slowest = fastest_and_slowest(plottable)
    summary = {
        "n_pit_stops": len(tables.pit_stops),
        "n_observations": len(observations),
        "n_plottable": len(plottable),
        "n_missing_constructor": sum(1 for item in observations if item.constructor is None),
        "max_milliseconds": config.filter.max_milliseconds,
        "x_domain": [x_domain[0].isoformat(), x_domain[1].isoformat()],
        "x_domain_nice": [value.isoformat() for value in x_scale.domain],
        "y_domain": list(y_domain),
        "y_domain_nice": list(y_scale.domain),
        "fastest": _describe_stop(fastest),
        "slowest": _describe_stop(slowest),
    }
    return PlotData(
        observations=observations,
        points=points,
        x_scale=x_scale,
        y_scale=y_scale,
        summary=summary,
    )
