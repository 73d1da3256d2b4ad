from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Sequence

import pandas as pd

from cycle_dashboard.charts.binning import TemperatureBin
from cycle_dashboard.charts.formatting import safe_number
from cycle_dashboard.charts.synthetic import SYNTHETIC_SERIES_NOTE
from cycle_dashboard.models import CycleRecord

TREND_COLUMNS = ["cycle_number", "soh", "soh_drop", "timestamp"]


@dataclass(frozen=True)
class TrendPoint:
    cycle_number: int
    soh: float
    soh_drop: float
    timestamp: str


def trend_points(cycles: Sequence[CycleRecord]) -> list[TrendPoint]:
    """Per-cycle SOH points ordered by cycle number, whatever the fetch order."""
    ordered = sorted(cycles, key=lambda record: record.cycle_number)
    return [
        TrendPoint(
            cycle_number=record.cycle_number,
            soh=record.average_soh,
            soh_drop=record.soh_drop,
            timestamp=record.cycle_start_time,
        )
        for record in ordered
    ]


def trend_frame(cycles: Sequence[CycleRecord]) -> pd.DataFrame:
    points = trend_points(cycles)
    if not points:
        return pd.DataFrame(columns=TREND_COLUMNS)
    return pd.DataFrame([asdict(point) for point in points], columns=TREND_COLUMNS)


def trend_stats(cycles: Sequence[CycleRecord]) -> dict[str, Any] | None:
    frame = trend_frame(cycles)
    if frame.empty:
        return None
    soh = frame["soh"].astype(float)
    first, last = float(soh.iloc[0]), float(soh.iloc[-1])
    total = first - last
    return {
        "first_soh": first,
        "last_soh": last,
        "total_degradation": total,
        "avg_degradation_per_cycle": total / len(frame),
        "total_cycles": int(len(frame)),
        "min_soh": float(soh.min()),
        "max_soh": float(soh.max()),
    }


def temperature_stats(
    record: CycleRecord | None, bins: Sequence[TemperatureBin], bin_width: int
) -> dict[str, Any] | None:
    if record is None:
        return None
    total = sum(item.minutes for item in bins)
    hottest = max(bins, key=lambda item: item.range_start, default=None)
    dominant = max(bins, key=lambda item: item.minutes, default=None)
    return {
        "cycle_number": record.cycle_number,
        "bin_width": int(bin_width),
        "average_temperature": safe_number(record.average_temperature),
        "total_minutes": float(total),
        "range_count": len(bins),
        "dominant_range": dominant.range if dominant is not None else None,
        "hottest_range": hottest.range if hottest is not None else None,
    }


def health_stats(record: CycleRecord | None) -> dict[str, Any] | None:
    if record is None:
        return None
    return {
        "cycle_number": record.cycle_number,
        "average_soc": safe_number(record.average_soc),
        "soc_range": safe_number(record.max_soc) - safe_number(record.min_soc),
        "average_soh": safe_number(record.average_soh),
        "soh_drop": safe_number(record.soh_drop),
        "note": SYNTHETIC_SERIES_NOTE,
    }


def performance_stats(record: CycleRecord | None) -> dict[str, Any] | None:
    if record is None:
        return None
    return {
        "cycle_number": record.cycle_number,
        "total_distance": safe_number(record.total_distance),
        "average_speed": safe_number(record.average_speed),
        "max_speed": safe_number(record.max_speed),
        "duration_hours": safe_number(record.cycle_duration_hours),
        "note": SYNTHETIC_SERIES_NOTE,
    }


def charging_strategy(count: int) -> str:
    if count <= 0:
        return "No charging events detected during this cycle."
    if count == 1:
        return "Single charge cycle - battery maintained well."
    if count == 2:
        return "Moderate charging - good balance between usage and recharge."
    if count <= 5:
        return "Frequent charging pattern - optimal for battery longevity."
    return "High frequency charging - ensure charger is functioning properly."


def charge_start_advice(start_soc: float) -> str:
    if start_soc < 20:
        return "Low - consider charging earlier"
    if start_soc < 40:
        return "Good range"
    return "Optimal - prevents deep discharge"


def charging_insights(record: CycleRecord | None) -> dict[str, Any] | None:
    if record is None:
        return None
    count = int(safe_number(record.charging_instances_count))
    start_soc = safe_number(record.average_charge_start_soc)
    duration = safe_number(record.cycle_duration_hours, fallback=1.0)
    return {
        "charging_instances_count": count,
        "average_charge_start_soc": start_soc,
        "soc_gain_per_charge": (100 - start_soc) / count if count > 0 else 0.0,
        "charges_per_hour": count / duration if duration > 0 else 0.0,
        "strategy": charging_strategy(count),
        "start_soc_advice": charge_start_advice(start_soc),
    }


def alert_summary(record: CycleRecord | None) -> dict[str, Any] | None:
    if record is None:
        return None
    warnings = list(record.alert_details.warnings)
    protections = list(record.alert_details.protections)
    return {
        "warning_count": record.warning_count,
        "protection_count": record.protection_count,
        "warnings": warnings,
        "protections": protections,
        "has_alerts": bool(warnings or protections),
    }


OVERVIEW_COLUMNS = [
    "cycle_number",
    "average_soc",
    "average_soh",
    "average_temperature",
    "total_distance",
    "charging_instances_count",
    "cycle_start_time",
]


def battery_overview(cycles: Sequence[CycleRecord]) -> dict[str, Any] | None:
    """Device-level totals and averages across every loaded cycle."""
    if not cycles:
        return None
    frame = pd.DataFrame(
        [{column: getattr(record, column) for column in OVERVIEW_COLUMNS} for record in cycles],
        columns=OVERVIEW_COLUMNS,
    ).sort_values("cycle_number", kind="stable")
    return {
        "total_cycles": int(len(frame)),
        "first_cycle": int(frame["cycle_number"].iloc[0]),
        "last_cycle": int(frame["cycle_number"].iloc[-1]),
        "avg_soc_across_cycles": float(frame["average_soc"].mean()),
        "avg_soh_across_cycles": float(frame["average_soh"].mean()),
        "avg_temp_across_cycles": float(frame["average_temperature"].mean()),
        "total_distance_all_cycles": float(frame["total_distance"].sum()),
        "total_charging_instances": int(frame["charging_instances_count"].sum()),
        "first_cycle_time": str(frame["cycle_start_time"].iloc[0]),
        "last_cycle_time": str(frame["cycle_start_time"].iloc[-1]),
    }


def cycle_stats(record: CycleRecord | None) -> dict[str, Any] | None:
    if record is None:
        return None
    return {
        "cycle_number": record.cycle_number,
        "start_time": record.cycle_start_time,
        "end_time": record.cycle_end_time,
        "duration_hours": safe_number(record.cycle_duration_hours),
        "soh_drop": safe_number(record.soh_drop),
        "average_soc": safe_number(record.average_soc),
        "min_soc": safe_number(record.min_soc),
        "max_soc": safe_number(record.max_soc),
        "average_temperature": safe_number(record.average_temperature),
        "total_distance": safe_number(record.total_distance),
        "average_speed": safe_number(record.average_speed),
        "max_speed": safe_number(record.max_speed),
        "charging_instances_count": int(record.charging_instances_count),
        "voltage_avg": safe_number(record.voltage_avg),
        "voltage_min": safe_number(record.voltage_min),
        "voltage_max": safe_number(record.voltage_max),
        "current_avg": safe_number(record.current_avg),
        "data_points_count": int(record.data_points_count),
    }


def dashboard_stats(
    record: CycleRecord | None,
    cycles: Sequence[CycleRecord],
    bins: Sequence[TemperatureBin],
    bin_width: int,
) -> dict[str, Any]:
    return {
        "overview": battery_overview(cycles),
        "cycle": cycle_stats(record),
        "trend": trend_stats(cycles),
        "temperature": temperature_stats(record, bins, bin_width),
        "health": health_stats(record),
        "performance": performance_stats(record),
        "charging": charging_insights(record),
        "alerts": alert_summary(record),
    }
