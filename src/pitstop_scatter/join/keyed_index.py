from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, Iterator, Mapping

Record = Mapping[str, Any]
KeyFn = Callable[[Record], Any]


def field_key(name: str) -> KeyFn:
    """Key function reading one field from a record."""

    def _key(record: Record) -> Any:
        return record.get(name)

    return _key


def _group(records: Iterable[Record], key_fn: KeyFn) -> dict[str, list[Record]]:
    groups: dict[str, list[Record]] = {}
    for record in records:
        groups.setdefault(str(key_fn(record)), []).append(record)
    return groups


@dataclass(frozen=True)
class KeyedIndex:
    """Records grouped by a string key, in input order within each group.

    Keys are coerced with ``str`` both when building and when looking up, so an
    integer ``raceId`` finds rows loaded with the string ``"1"``.
    """

    _groups: Mapping[str, tuple[Record, ...]] = field(default_factory=dict)

    @classmethod
    def build(cls, records: Iterable[Record], key_fn: KeyFn) -> KeyedIndex:
        groups = {key: tuple(rows) for key, rows in _group(records, key_fn).items()}
        return cls(MappingProxyType(groups))

    def get(self, key: Any) -> tuple[Record, ...]:
        return self._groups.get(str(key), ())

    def keys(self) -> Iterator[str]:
        return iter(self._groups)

    def __contains__(self, key: object) -> bool:
        return str(key) in self._groups

    def __len__(self) -> int:
        return len(self._groups)


@dataclass(frozen=True)
class TwoLevelIndex:
    """Records grouped by a first key, then by a second key within each group."""

    _groups: Mapping[str, KeyedIndex] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        records: Iterable[Record],
        key_fn1: KeyFn,
        key_fn2: KeyFn,
    ) -> TwoLevelIndex:
        groups = {
            key: KeyedIndex.build(rows, key_fn2)
            for key, rows in _group(records, key_fn1).items()
        }
        return cls(MappingProxyType(groups))

    def get_group(self, key1: Any) -> KeyedIndex:
        return self._groups.get(str(key1), KeyedIndex())

    def get(self, key1: Any, key2: Any) -> tuple[Record, ...]:
        return self.get_group(key1).get(key2)

    def keys(self) -> Iterator[str]:
        return iter(self._groups)

    def __contains__(self, key1: object) -> bool:
        return str(key1) in self._groups

    def __len__(self) -> int:
        return len(self._groups)
