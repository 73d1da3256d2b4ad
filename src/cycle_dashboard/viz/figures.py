from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt

from cycle_dashboard.charts.binning import TemperatureBin, temperature_color
from cycle_dashboard.charts.render import soh_color
from cycle_dashboard.charts.stats import trend_frame
from cycle_dashboard.models import CycleRecord
from cycle_dashboard.viz.common import save_figure


def plot_temperature_histogram(
    bins: Sequence[TemperatureBin], output_path: Path, cycle_number: int | None = None
) -> Path | None:
    if not bins:
        return None
    plt.figure(figsize=(9, 4.5))
    labels = [item.range for item in bins]
    minutes = [item.minutes for item in bins]
    plt.bar(labels, minutes, color=[temperature_color(item.range_start) for item in bins])
    for index, value in enumerate(minutes):
        plt.text(index, value, f"{value:.1f}", ha="center", va="bottom", fontsize=8)
    title = "Temperature distribution"
    if cycle_number is not None:
        title += f" - cycle #{cycle_number}"
    plt.title(title)
    plt.xlabel("Temperature Range (°C)")
    plt.ylabel("Time (minutes)")
    plt.xticks(rotation=45, ha="right")
    return save_figure(output_path)


def plot_soh_trend(cycles: Sequence[CycleRecord], output_path: Path) -> Path | None:
    frame = trend_frame(cycles)
    if frame.empty:
        return None
    plt.figure(figsize=(12, 4))
    plt.plot(frame["cycle_number"], frame["soh"], color="#6366f1", linewidth=1.5)
    plt.scatter(
        frame["cycle_number"],
        frame["soh"],
        c=[soh_color(value) for value in frame["soh"]],
        s=12,
        zorder=3,
    )
    plt.title("State of health by cycle")
    plt.xlabel("Cycle Number")
    plt.ylabel("State of Health (%)")
    return save_figure(output_path)
