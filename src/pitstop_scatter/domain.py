from __future__ import annotations

from typing import Any, Callable, Iterable, Sequence, TypeVar

from pitstop_scatter.observations import Observation

T = TypeVar("T")


class EmptyDomainError(ValueError):
    """Raised when an extent is requested over zero values."""


def extent(items: Iterable[T], key: Callable[[T], Any] | None = None) -> tuple[Any, Any]:
    """Return ``(min, max)`` of ``items``, or of ``key(item)`` when a key is given.

    Values are compared with their own ordering, so numbers compare by magnitude
    and timestamps by instant. Values that cannot be ordered (NaN, NaT) must be
    filtered out beforehand.
    """
    values = list(items) if key is None else [key(item) for item in items]
    if not values:
        raise EmptyDomainError("Cannot compute a domain over zero values")
    low = high = values[0]
    for value in values[1:]:
        if value < low:
            low = value
        elif value > high:
            high = value
    return low, high


def fastest_and_slowest(observations: Sequence[Observation]) -> tuple[Observation, Observation]:
    if not observations:
        raise EmptyDomainError("No observations to rank")
    fastest = min(observations, key=lambda item: item.y)
    slowest = max(observations, key=lambda item: item.y)
    return fastest, slowest
