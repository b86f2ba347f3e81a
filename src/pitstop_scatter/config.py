from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MAX_PIT_STOP_MILLISECONDS = 120_000


class TablesConfig(BaseModel):
    directory: str | None = None
    pit_stops: str = "pit_stops.csv"
    races: str = "races.csv"
    drivers: str = "drivers.csv"
    constructors: str = "constructors.csv"
    results: str = "results.csv"


class FilterConfig(BaseModel):
    # Pit stops at or above this duration are "no time recorded" placeholders.
    max_milliseconds: float = Field(default=DEFAULT_MAX_PIT_STOP_MILLISECONDS, gt=0)


class MarginConfig(BaseModel):
    top: int = Field(default=20, ge=0)
    right: int = Field(default=20, ge=0)
    bottom: int = Field(default=40, ge=0)
    left: int = Field(default=60, ge=0)


class LayoutConfig(BaseModel):
    width: int = Field(default=800, ge=1)
    height: int = Field(default=600, ge=1)
    margin: MarginConfig = Field(default_factory=MarginConfig)

    def x_range(self) -> tuple[float, float]:
        return float(self.margin.left), float(self.width - self.margin.right)

    def y_range(self) -> tuple[float, float]:
        # Pixel rows grow downward; the larger duration goes to the top edge.
        return float(self.height - self.margin.bottom), float(self.margin.top)


class ScalesConfig(BaseModel):
    nice_x: bool = True
    nice_y: bool = True
    tick_count: int = Field(default=10, ge=1)


class OutputsConfig(BaseModel):
    tables_format: Literal["csv", "parquet"] = "csv"
    figures_format: str = "svg"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tables: TablesConfig = Field(default_factory=TablesConfig)
    filter: FilterConfig = Field(default_factory=FilterConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    scales: ScalesConfig = Field(default_factory=ScalesConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def _resolve_optional_path(path_value: str | None, base_dir: Path) -> str | None:
    if not path_value:
        return None
    candidate = Path(path_value)
    if candidate.is_absolute():
        return str(candidate)
    return str((base_dir / candidate).resolve())


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    config = AppConfig.model_validate(data)
    base_dir = path.resolve().parent

    config.tables.directory = _resolve_optional_path(
        config.tables.directory or os.getenv("PITSTOP_SCATTER_TABLES_DIR"),
        base_dir,
    )
    return config
