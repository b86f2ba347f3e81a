from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from pitstop_scatter.config import TablesConfig
from pitstop_scatter.io.schema import TABLE_SCHEMAS, TableSchema, validate_columns
from pitstop_scatter.join.keyed_index import Record

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceTables:
    pit_stops: list[Record]
    races: list[Record]
    drivers: list[Record]
    constructors: list[Record]
    results: list[Record]


def read_frame(path: Path, schema: TableSchema) -> pd.DataFrame:
    # Every field stays a string; numeric parsing belongs to the projection step.
    # utf-8-sig strips BOM-prefixed headers commonly found in exported CSV files.
    df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    df.columns = [str(column).strip() for column in df.columns]
    return validate_columns(df, schema)


def frame_to_records(df: pd.DataFrame) -> list[Record]:
    return df.to_dict(orient="records")


def load_tables(tables_dir: Path, config: TablesConfig) -> SourceTables:
    """Load the five source tables from ``tables_dir`` as lists of string records."""
    if not tables_dir.is_dir():
        raise FileNotFoundError(f"Tables directory does not exist: {tables_dir}")

    loaded: dict[str, list[Record]] = {}
    for name, schema in TABLE_SCHEMAS.items():
        path = tables_dir / getattr(config, name)
        if not path.exists():
            raise FileNotFoundError(f"Missing '{name}' table: {path}")
        loaded[name] = frame_to_records(read_frame(path, schema))
        LOGGER.info("Loaded %s rows from %s", len(loaded[name]), path.name)
    return SourceTables(**loaded)

