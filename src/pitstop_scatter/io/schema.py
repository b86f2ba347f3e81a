from __future__ import annotations

from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class TableSchema:
    name: str
    required_columns: tuple[str, ...]


PIT_STOPS = TableSchema("pit_stops", ("raceId", "driverId", "lap", "milliseconds"))
RACES = TableSchema("races", ("raceId", "name", "date"))
DRIVERS = TableSchema("drivers", ("driverId", "forename", "surname"))
CONSTRUCTORS = TableSchema("constructors", ("constructorId", "name"))
RESULTS = TableSchema("results", ("raceId", "driverId", "constructorId"))

TABLE_SCHEMAS = {
    schema.name: schema for schema in (PIT_STOPS, RACES, DRIVERS, CONSTRUCTORS, RESULTS)
}


def validate_columns(df: pd.DataFrame, schema: TableSchema) -> pd.DataFrame:
    """Raise when a loaded table lacks one of its required columns."""
    missing = [column for column in schema.required_columns if column not in df.columns]
    if missing:
        missing_str = ", ".join(missing)
        raise ValueError(f"Table '{schema.name}' is missing required columns: {missing_str}")
    return df
