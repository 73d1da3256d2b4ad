from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

TEMPERATURE_BIN_WIDTHS = (5, 10, 15, 20)
DEFAULT_AUTHORIZED_IMEIS = ["865044073967657", "865044073949366"]

BinWidth = Literal[5, 10, 15, 20]


class DevicesConfig(BaseModel):
    authorized_imeis: list[str] = Field(
        default_factory=lambda: list(DEFAULT_AUTHORIZED_IMEIS), min_length=1
    )
    default_imei: str | None = None

    @model_validator(mode="after")
    def _resolve_default_imei(self) -> DevicesConfig:
        if self.default_imei is None:
            self.default_imei = self.authorized_imeis[0]
        elif self.default_imei not in self.authorized_imeis:
            raise ValueError(f"default_imei {self.default_imei} is not an authorized device")
        return self


class InputConfig(BaseModel):
    mode: Literal["json", "mock"] = "mock"
    source_file: str | None = None
    mock_cycles: int = Field(default=45, ge=1)
    random_seed: int = Field(default=42, ge=0)


class TemperatureConfig(BaseModel):
    bin_width: BinWidth = 10


class AnimationConfig(BaseModel):
    line_reveal_ms: int = Field(default=1500, ge=0)
    trend_reveal_ms: int = Field(default=2000, ge=0)
    area_fade_ms: int = Field(default=1000, ge=0)
    bar_grow_ms: int = Field(default=750, ge=0)
    marker_grow_ms: int = Field(default=300, ge=0)
    health_marker_stagger_ms: int = Field(default=300, ge=0)
    performance_marker_stagger_ms: int = Field(default=200, ge=0)
    trend_marker_stagger_ms: int = Field(default=10, ge=0)


class ChartsConfig(BaseModel):
    width: int = Field(default=700, ge=100)
    height: int = Field(default=400, ge=100)
    trend_width: int = Field(default=900, ge=100)
    trend_height: int = Field(default=500, ge=100)
    overview_height: int = Field(default=50, ge=10)
    zoom_min: float = Field(default=1.0, ge=1.0)
    zoom_max: float = Field(default=10.0, gt=1.0)
    animation: AnimationConfig = Field(default_factory=AnimationConfig)

    @model_validator(mode="after")
    def _check_zoom_extent(self) -> ChartsConfig:
        if self.zoom_max <= self.zoom_min:
            raise ValueError("zoom_max must be greater than zoom_min")
        return self


class OutputsConfig(BaseModel):
    tables_format: Literal["csv", "parquet"] = "csv"
    figures: bool = False
    figures_format: str = "png"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    devices: DevicesConfig = Field(default_factory=DevicesConfig)
    input: InputConfig = Field(default_factory=InputConfig)
    temperature: TemperatureConfig = Field(default_factory=TemperatureConfig)
    charts: ChartsConfig = Field(default_factory=ChartsConfig)
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

    config.input.source_file = _resolve_optional_path(
        os.getenv("CYCLE_DASHBOARD_SOURCE") or config.input.source_file,
        base_dir,
    )
    return config
