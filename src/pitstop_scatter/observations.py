from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Callable, Iterable

import pandas as pd

from pitstop_scatter.config import DEFAULT_MAX_PIT_STOP_MILLISECONDS
from pitstop_scatter.join.keyed_index import Record
from pitstop_scatter.join.resolver import RelationResolver
from pitstop_scatter.scales import to_timestamp
from pitstop_scatter.ticks import format_duration

LOGGER = logging.getLogger(__name__)

OBSERVATION_COLUMNS = ["x", "y", "race", "driver", "constructor", "lap"]

Predicate = Callable[[Record], bool]


@dataclass(frozen=True)
class Observation:
    x: pd.Timestamp | None
    y: float
    race: str | None
    driver: str | None
    constructor: str | None
    lap: str | None

    @property
    def is_plottable(self) -> bool:
        return self.x is not None and not pd.isna(self.x) and math.isfinite(self.y)


def parse_milliseconds(value: object) -> float | None:
    try:
        parsed = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


def below_threshold(
    max_milliseconds: float = DEFAULT_MAX_PIT_STOP_MILLISECONDS,
) -> Predicate:
    """Keep pit stops strictly shorter than ``max_milliseconds``.

    Larger values are "no time recorded" markers, not real stop durations.
    Negative or unparseable durations are dropped as well.
    """

    def _predicate(fact: Record) -> bool:
        milliseconds = parse_milliseconds(fact.get("milliseconds"))
        return milliseconds is not None and 0 <= milliseconds < max_milliseconds

    return _predicate


def _driver_label(driver: Record) -> str | None:
    parts = [str(driver.get(name) or "").strip() for name in ("forename", "surname")]
    label = " ".join(part for part in parts if part)
    return label or None


def _race_date(race: Record) -> pd.Timestamp:
    # Unparseable dates become NaT and are left for callers to filter.
    parsed = pd.to_datetime(race.get("date"), errors="coerce")
    if parsed is None or pd.isna(parsed):
        return parsed
    return to_timestamp(parsed)


def project(fact: Record, resolver: RelationResolver) -> Observation:
    resolution = resolver.resolve(fact)
    milliseconds = parse_milliseconds(fact.get("milliseconds"))
    lap = fact.get("lap")
    return Observation(
        x=resolution.race.map(_race_date).or_none(),
        y=math.nan if milliseconds is None else milliseconds,
        race=resolution.race.get("name").or_none(),
        driver=resolution.driver.map(_driver_label).or_none(),
        constructor=resolution.constructor.get("name").or_none(),
        lap=None if lap is None else str(lap),
    )


def build_observations(
    facts: Iterable[Record],
    predicate: Predicate,
    resolver: RelationResolver,
) -> tuple[Observation, ...]:
    """Filter fact rows and project each survivor into an Observation, in input order."""
    observations: list[Observation] = []
    dropped = 0
    for fact in facts:
        if not predicate(fact):
            dropped += 1
            continue
        observations.append(project(fact, resolver))
    LOGGER.debug("Built %d observations (%d facts filtered out)", len(observations), dropped)
    return tuple(observations)


def tooltip_text(observation: Observation) -> str:
    lines = [
        label
        for label in (observation.race, observation.constructor, observation.driver)
        if label
    ]
    if observation.lap:
        lines.append(f"Lap {observation.lap}")
    if math.isfinite(observation.y):
        lines.append(format_duration(observation.y))
    return "\n".join(lines)


def observations_to_frame(observations: Iterable[Observation]) -> pd.DataFrame:
    return pd.DataFrame([asdict(item) for item in observations], columns=OBSERVATION_COLUMNS)
