from __future__ import annotations

import bisect
import math
from dataclasses import dataclass
from typing import Any, Iterator

import pandas as pd

# Thresholds between the 1, 2, 5 and 10 step multipliers, on a log scale.
E10 = math.sqrt(50)
E5 = math.sqrt(10)
E2 = math.sqrt(2)

EPOCH = pd.Timestamp("1970-01-01")
ONE_MILLISECOND = pd.Timedelta(milliseconds=1)

DURATION_SECOND = 1_000
DURATION_MINUTE = 60 * DURATION_SECOND
DURATION_HOUR = 60 * DURATION_MINUTE
DURATION_DAY = 24 * DURATION_HOUR
DURATION_WEEK = 7 * DURATION_DAY
DURATION_MONTH = 30 * DURATION_DAY
DURATION_YEAR = 365 * DURATION_DAY

MAX_NICE_ITERATIONS = 10


def tick_increment(start: float, stop: float, count: int) -> float:
    """Round step for about ``count`` ticks over ``[start, stop]``.

    Positive results are the step itself; negative results ``-k`` stand for a
    step of ``1 / k`` and keep sub-unit steps exact in floating point.
    """
    if count <= 0:
        return math.nan
    step = (stop - start) / count
    if not math.isfinite(step) or step <= 0:
        return math.nan
    power = math.floor(math.log10(step))
    error = step / 10**power
    if error >= E10:
        factor = 10
    elif error >= E5:
        factor = 5
    elif error >= E2:
        factor = 2
    else:
        factor = 1
    if power >= 0:
        return factor * 10**power
    return -(10 ** -power) / factor


def tick_step(start: float, stop: float, count: int) -> float:
    if count <= 0:
        return math.nan
    step0 = abs(stop - start) / count
    if not math.isfinite(step0) or step0 <= 0:
        return math.nan
    step1 = 10 ** math.floor(math.log10(step0))
    error = step0 / step1
    if error >= E10:
        step1 *= 10
    elif error >= E5:
        step1 *= 5
    elif error >= E2:
        step1 *= 2
    return -step1 if stop < start else step1


def nice_linear(domain: tuple[float, float], count: int = 10) -> tuple[float, float]:
    """Widen ``domain`` outward until both ends sit on a shared round step."""
    start, stop = float(domain[0]), float(domain[1])
    reverse = stop < start
    if reverse:
        start, stop = stop, start

    previous_step: float | None = None
    for _ in range(MAX_NICE_ITERATIONS):
        if not stop > start:
            break
        step = tick_increment(start, stop, count)
        if math.isnan(step) or step == previous_step:
            break
        if step > 0:
            start = math.floor(start / step) * step
            stop = math.ceil(stop / step) * step
        else:
            start = math.ceil(start * step) / step
            stop = math.floor(stop * step) / step
        previous_step = step

    return (stop, start) if reverse else (start, stop)


def linear_ticks(start: float, stop: float, count: int = 10) -> list[float]:
    if count <= 0:
        return []
    if start == stop:
        return [float(start)]
    reverse = stop < start
    if reverse:
        start, stop = stop, start
    increment = tick_increment(start, stop, count)
    if math.isnan(increment) or increment == 0:
        return []
    if increment > 0:
        first = math.ceil(start / increment)
        last = math.floor(stop / increment)
        ticks = [float((first + i) * increment) for i in range(last - first + 1)]
    else:
        increment = -increment
        first = math.ceil(start * increment)
        last = math.floor(stop * increment)
        ticks = [float((first + i) / increment) for i in range(last - first + 1)]
    return ticks[::-1] if reverse else ticks


def _interpolate(
    value: Any,
    domain: tuple[float, float],
    range_: tuple[float, float],
) -> Any:
    d0, d1 = domain
    r0, r1 = range_
    if d1 == d0:
        # Degenerate domain: every value sits at the middle of the range.
        return value * 0.0 + (r0 + r1) / 2.0
    return r0 + (value - d0) / (d1 - d0) * (r1 - r0)


@dataclass(frozen=True)
class LinearScale:
    """Affine map from a numeric domain onto a pixel range.

    Values outside the domain extrapolate; nothing is clamped. A reversed range
    is used as given.
    """

    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: Any) -> Any:
        return _interpolate(value, self.domain, self.range)

    def invert(self, pixel: Any) -> Any:
        return _interpolate(pixel, self.range, self.domain)

    def ticks(self, count: int = 10) -> list[float]:
        return linear_ticks(self.domain[0], self.domain[1], count)


def linear_scale(
    domain: tuple[float, float],
    range_: tuple[float, float],
    *,
    nice: bool = False,
    count: int = 10,
) -> LinearScale:
    resolved_domain = (float(domain[0]), float(domain[1]))
    if nice:
        resolved_domain = nice_linear(resolved_domain, count=count)
    return LinearScale(domain=resolved_domain, range=(float(range_[0]), float(range_[1])))


def to_timestamp(value: Any) -> pd.Timestamp:
    timestamp = pd.Timestamp(value)
    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert("UTC").tz_localize(None)
    return timestamp


def to_epoch_milliseconds(value: Any) -> Any:
    if isinstance(value, pd.DatetimeIndex):
        value = pd.Series(value)
    if isinstance(value, pd.Series):
        values = pd.to_datetime(value)
        if values.dt.tz is not None:
            values = values.dt.tz_convert("UTC").dt.tz_localize(None)
        return (values - EPOCH) / ONE_MILLISECOND
    return (to_timestamp(value) - EPOCH) / ONE_MILLISECOND


def from_epoch_milliseconds(value: float) -> pd.Timestamp:
    return EPOCH + pd.Timedelta(milliseconds=value)


@dataclass(frozen=True)
class TimeInterval:
    """A calendar step such as "15 minutes" or "3 months"."""

    unit: str
    step: int = 1

    @property
    def duration(self) -> float:
        return UNIT_DURATIONS[self.unit] * self.step

    def floor(self, value: pd.Timestamp) -> pd.Timestamp:
        timestamp = to_timestamp(value)
        if self.unit == "ms":
            millis = to_epoch_milliseconds(timestamp)
            return from_epoch_milliseconds(math.floor(millis / self.step) * self.step)
        if self.unit in FIXED_FREQUENCIES:
            return timestamp.floor(f"{self.step}{FIXED_FREQUENCIES[self.unit]}")
        if self.unit == "week":
            # Weeks start on Sunday.
            day = timestamp.normalize()
            return day - pd.Timedelta(days=(day.dayofweek + 1) % 7)
        if self.unit == "month":
            month = (timestamp.month - 1) // self.step * self.step + 1
            return pd.Timestamp(year=timestamp.year, month=month, day=1)
        if self.unit == "year":
            year = timestamp.year // self.step * self.step
            return pd.Timestamp(year=year, month=1, day=1)
        raise ValueError(f"Unsupported time interval unit: {self.unit}")

    def offset(self, value: pd.Timestamp, steps: int = 1) -> pd.Timestamp:
        if self.unit == "month":
            return value + pd.DateOffset(months=self.step * steps)
        if self.unit == "year":
            return value + pd.DateOffset(years=self.step * steps)
        return value + pd.Timedelta(milliseconds=self.duration * steps)

    def ceil(self, value: pd.Timestamp) -> pd.Timestamp:
        timestamp = to_timestamp(value)
        floored = self.floor(timestamp)
        if floored == timestamp:
            return floored
        return self.floor(self.offset(floored))

    def range(self, start: pd.Timestamp, stop: pd.Timestamp) -> Iterator[pd.Timestamp]:
        """Yield interval boundaries within ``[start, stop]``."""
        current = self.ceil(start)
        stop = to_timestamp(stop)
        while current <= stop:
            yield current
            current = self.floor(self.offset(current))


UNIT_DURATIONS = {
    "ms": 1,
    "second": DURATION_SECOND,
    "minute": DURATION_MINUTE,
    "hour": DURATION_HOUR,
    "day": DURATION_DAY,
    "week": DURATION_WEEK,
    "month": DURATION_MONTH,
    "year": DURATION_YEAR,
}

FIXED_FREQUENCIES = {
    "second": "s",
    "minute": "min",
    "hour": "h",
    "day": "D",
}

TICK_INTERVALS = [
    TimeInterval("second", 1),
    TimeInterval("second", 5),
    TimeInterval("second", 15),
    TimeInterval("second", 30),
    TimeInterval("minute", 1),
    TimeInterval("minute", 5),
    TimeInterval("minute", 15),
    TimeInterval("minute", 30),
    TimeInterval("hour", 1),
    TimeInterval("hour", 3),
    TimeInterval("hour", 6),
    TimeInterval("hour", 12),
    TimeInterval("day", 1),
    TimeInterval("day", 2),
    TimeInterval("week", 1),
    TimeInterval("month", 1),
    TimeInterval("month", 3),
    TimeInterval("year", 1),
]
_TICK_DURATIONS = [interval.duration for interval in TICK_INTERVALS]


def tick_interval(start: pd.Timestamp, stop: pd.Timestamp, count: int = 10) -> TimeInterval:
    """Pick the calendar step giving closest to ``count`` ticks over the span."""
    start_ms = to_epoch_milliseconds(start)
    stop_ms = to_epoch_milliseconds(stop)
    target = abs(stop_ms - start_ms) / max(1, count)
    index = bisect.bisect_right(_TICK_DURATIONS, target)
    if index == len(TICK_INTERVALS):
        step = tick_step(start_ms / DURATION_YEAR, stop_ms / DURATION_YEAR, count)
        return TimeInterval("year", max(1, int(round(abs(step)))))
    if index == 0:
        step = tick_step(start_ms, stop_ms, count)
        return TimeInterval("ms", max(1, int(round(abs(step))) if math.isfinite(step) else 1))
    before = TICK_INTERVALS[index - 1]
    after = TICK_INTERVALS[index]
    return before if target / before.duration < after.duration / target else after


def nice_time(
    domain: tuple[pd.Timestamp, pd.Timestamp],
    count: int = 10,
) -> tuple[pd.Timestamp, pd.Timestamp]:
    start, stop = to_timestamp(domain[0]), to_timestamp(domain[1])
    reverse = stop < start
    if reverse:
        start, stop = stop, start
    interval = tick_interval(start, stop, count)
    niced = (interval.floor(start), interval.ceil(stop))
    return (niced[1], niced[0]) if reverse else niced


@dataclass(frozen=True)
class TimeScale:
    """Maps instants onto a pixel range in proportion to elapsed time."""

    domain: tuple[pd.Timestamp, pd.Timestamp]
    range: tuple[float, float]

    @property
    def numeric_domain(self) -> tuple[float, float]:
        return (
            float(to_epoch_milliseconds(self.domain[0])),
            float(to_epoch_milliseconds(self.domain[1])),
        )

    def __call__(self, value: Any) -> Any:
        return _interpolate(to_epoch_milliseconds(value), self.numeric_domain, self.range)

    def invert(self, pixel: float) -> pd.Timestamp:
        return from_epoch_milliseconds(_interpolate(pixel, self.range, self.numeric_domain))

    def ticks(self, count: int = 10) -> list[pd.Timestamp]:
        start, stop = sorted(self.domain)
        if start == stop:
            return [start]
        interval = tick_interval(start, stop, count)
        ticks = list(interval.range(start, stop))
        return ticks if self.domain[0] <= self.domain[1] else ticks[::-1]


def time_scale(
    domain: tuple[Any, Any],
    range_: tuple[float, float],
    *,
    nice: bool = False,
    count: int = 10,
) -> TimeScale:
    resolved_domain = (to_timestamp(domain[0]), to_timestamp(domain[1]))
    if nice and resolved_domain[0] != resolved_domain[1]:
        resolved_domain = nice_time(resolved_domain, count=count)
    return TimeScale(domain=resolved_domain, range=(float(range_[0]), float(range_[1])))
