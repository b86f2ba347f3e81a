from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Sequence, TypeVar

from pitstop_scatter.join.keyed_index import KeyedIndex, Record, TwoLevelIndex, field_key

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Maybe(Generic[T]):
    """A value that is either present or absent.

    ``bind`` and ``map`` skip their function when the value is absent, so a
    chain of lookups stops at the first missing hop without raising.
    """

    value: T | None = None
    present: bool = False

    @classmethod
    def of(cls, value: T | None) -> Maybe[T]:
        if value is None:
            return cls()
        return cls(value=value, present=True)

    @classmethod
    def empty(cls) -> Maybe[T]:
        return cls()

    def bind(self, fn: Callable[[T], Maybe[U]]) -> Maybe[U]:
        if not self.present:
            return Maybe()
        return fn(self.value)  # type: ignore[arg-type]

    def map(self, fn: Callable[[T], U | None]) -> Maybe[U]:
        if not self.present:
            return Maybe()
        return Maybe.of(fn(self.value))  # type: ignore[arg-type]

    def get(self, name: str) -> Maybe[Any]:
        """Read one field of a present record."""
        return self.map(lambda record: record.get(name))  # type: ignore[attr-defined]

    def or_none(self) -> T | None:
        return self.value if self.present else None


def first(rows: Sequence[Record]) -> Maybe[Record]:
    if not rows:
        return Maybe.empty()
    return Maybe.of(rows[0])


@dataclass(frozen=True)
class Resolution:
    race: Maybe[Record]
    driver: Maybe[Record]
    constructor: Maybe[Record]


@dataclass(frozen=True)
class RelationResolver:
    races: KeyedIndex
    drivers: KeyedIndex
    constructors: KeyedIndex
    results: TwoLevelIndex

    @classmethod
    def from_tables(
        cls,
        races: Sequence[Record],
        drivers: Sequence[Record],
        constructors: Sequence[Record],
        results: Sequence[Record],
    ) -> RelationResolver:
        return cls(
            races=KeyedIndex.build(races, field_key("raceId")),
            drivers=KeyedIndex.build(drivers, field_key("driverId")),
            constructors=KeyedIndex.build(constructors, field_key("constructorId")),
            results=TwoLevelIndex.build(results, field_key("raceId"), field_key("driverId")),
        )

    def race(self, fact: Record) -> Maybe[Record]:
        return Maybe.of(fact.get("raceId")).bind(lambda race_id: first(self.races.get(race_id)))

    def driver(self, fact: Record) -> Maybe[Record]:
        return Maybe.of(fact.get("driverId")).bind(
            lambda driver_id: first(self.drivers.get(driver_id))
        )

    def result(self, fact: Record) -> Maybe[Record]:
        race_id = fact.get("raceId")
        driver_id = fact.get("driverId")
        if race_id is None or driver_id is None:
            return Maybe.empty()
        return first(self.results.get(race_id, driver_id))

    def constructor(self, fact: Record) -> Maybe[Record]:
        return (
            self.result(fact)
            .get("constructorId")
            .bind(lambda constructor_id: first(self.constructors.get(constructor_id)))
        )

    def resolve(self, fact: Record) -> Resolution:
        return Resolution(
            race=self.race(fact),
            driver=self.driver(fact),
            constructor=self.constructor(fact),
        )
