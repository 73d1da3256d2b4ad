from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from typing import Any, Mapping, Sequence

TEMPERATURE_MAP_FIELDS = {
    5: "temperature_dist_5deg",
    10: "temperature_dist_10deg",
    15: "temperature_dist_15deg",
    20: "temperature_dist_20deg",
}


def _as_float(value: Any, default: float = 0.0) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class AlertDetails:
    warnings: tuple[str, ...] = ()
    protections: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> AlertDetails:
        if not data:
            return cls()
        return cls(
            warnings=tuple(str(item) for item in data.get("warnings") or []),
            protections=tuple(str(item) for item in data.get("protections") or []),
        )


@dataclass(frozen=True)
class CycleRecord:
    """Snapshot of one charge/discharge cycle as delivered by the snapshots API.

    The four ``temperature_dist_*`` maps hold the same time-in-temperature
    distribution resampled at 5/10/15/20 degree bin widths. Keys look like
    ``"25-30"`` and values are minutes spent in that half-open range; they are
    kept as received so malformed entries can be skipped at display time.
    """

    imei: str
    cycle_number: int
    cycle_start_time: str = ""
    cycle_end_time: str = ""
    cycle_duration_hours: float = 0.0
    data_points_count: int = 0

    soh_drop: float = 0.0
    average_soc: float = 0.0
    min_soc: float = 0.0
    max_soc: float = 0.0
    average_soh: float = 0.0
    min_soh: float = 0.0
    max_soh: float = 0.0

    average_temperature: float = 0.0
    temperature_dist_5deg: Mapping[str, Any] = field(default_factory=dict)
    temperature_dist_10deg: Mapping[str, Any] = field(default_factory=dict)
    temperature_dist_15deg: Mapping[str, Any] = field(default_factory=dict)
    temperature_dist_20deg: Mapping[str, Any] = field(default_factory=dict)

    total_distance: float = 0.0
    average_speed: float = 0.0
    max_speed: float = 0.0

    charging_instances_count: int = 0
    average_charge_start_soc: float = 0.0

    voltage_avg: float = 0.0
    voltage_min: float = 0.0
    voltage_max: float = 0.0
    current_avg: float = 0.0

    alert_details: AlertDetails = field(default_factory=AlertDetails)
    warning_count: int = 0
    protection_count: int = 0

    created_at: str = ""

    def temperature_map(self, bin_width: int) -> Mapping[str, Any]:
        try:
            return getattr(self, TEMPERATURE_MAP_FIELDS[int(bin_width)])
        except KeyError:
            raise ValueError(
                f"Unsupported temperature bin width: {bin_width}. "
                f"Expected one of {sorted(TEMPERATURE_MAP_FIELDS)}."
            ) from None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> CycleRecord:
        """Build a record from an API-shaped mapping; unknown keys are ignored."""
        if "imei" not in data or "cycle_number" not in data:
            raise ValueError("Cycle snapshot requires 'imei' and 'cycle_number'")
        values: dict[str, Any] = {}
        for item in fields(cls):
            if item.name not in data:
                continue
            raw = data[item.name]
            if item.name == "alert_details":
                values[item.name] = AlertDetails.from_mapping(raw)
            elif item.name.startswith("temperature_dist_"):
                values[item.name] = dict(raw or {})
            elif item.name in ("imei", "cycle_start_time", "cycle_end_time", "created_at"):
                values[item.name] = "" if raw is None else str(raw)
            elif item.type == "int":
                values[item.name] = _as_int(raw)
            else:
                values[item.name] = _as_float(raw)
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, AlertDetails):
                value = {"warnings": list(value.warnings), "protections": list(value.protections)}
            elif isinstance(value, Mapping):
                value = dict(value)
            payload[item.name] = value
        return payload


CycleList = Sequence[CycleRecord]


def find_cycle(cycles: CycleList, cycle_number: int) -> CycleRecord | None:
    for record in cycles:
        if record.cycle_number == cycle_number:
            return record
    return None
