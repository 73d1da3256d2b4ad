from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from cycle_dashboard.charts.binning import bins_frame, temperature_bins
from cycle_dashboard.charts.host import ChartHost
from cycle_dashboard.charts.render import (
    HealthChart,
    PerformanceChart,
    TemperatureHistogramChart,
    TrendChart,
)
from cycle_dashboard.charts.stats import (
    dashboard_stats,
    health_stats,
    performance_stats,
    temperature_stats,
    trend_frame,
    trend_stats,
)
from cycle_dashboard.config import AppConfig
from cycle_dashboard.io.write import write_summary, write_table, write_text
from cycle_dashboard.models import CycleRecord, find_cycle
from cycle_dashboard.paths import build_output_paths
from cycle_dashboard.report.dashboard import render_dashboard
from cycle_dashboard.viz.common import figure_path
from cycle_dashboard.viz.figures import plot_soh_trend, plot_temperature_histogram

logger = logging.getLogger(__name__)


@dataclass
class DashboardHosts:
    temperature: ChartHost
    health: ChartHost
    performance: ChartHost
    trend: ChartHost

    def items(self) -> list[tuple[str, ChartHost]]:
        return [
            ("temperature", self.temperature),
            ("health", self.health),
            ("performance", self.performance),
            ("trend", self.trend),
        ]


def build_hosts(config: AppConfig) -> DashboardHosts:
    charts = config.charts
    hosts = DashboardHosts(
        temperature=ChartHost(
            TemperatureHistogramChart(
                width=charts.width, height=charts.height, animation=charts.animation
            ),
            prepare=temperature_bins,
            summarize=lambda record, width: temperature_stats(
                record, temperature_bins(record, width), width
            ),
        ),
        health=ChartHost(
            HealthChart(width=charts.width, height=charts.height, animation=charts.animation),
            summarize=health_stats,
        ),
        performance=ChartHost(
            PerformanceChart(width=charts.width, height=charts.height, animation=charts.animation),
            summarize=performance_stats,
        ),
        trend=ChartHost(
            TrendChart(
                width=charts.trend_width,
                height=charts.trend_height,
                overview_height=charts.overview_height,
                scale_extent=(charts.zoom_min, charts.zoom_max),
                animation=charts.animation,
            ),
            summarize=trend_stats,
        ),
    )
    for _, host in hosts.items():
        host.mount()
    return hosts


def select_cycle(cycles: Sequence[CycleRecord], cycle_number: int | None) -> CycleRecord | None:
    """Pick the requested cycle, or the latest one when none is requested."""
    if not cycles:
        return None
    if cycle_number is None:
        return max(cycles, key=lambda record: record.cycle_number)
    record = find_cycle(cycles, cycle_number)
    if record is None:
        raise ValueError(f"Cycle {cycle_number} not found for this device")
    return record


def build_dashboard(
    cycles: Sequence[CycleRecord],
    out_dir: Path,
    config: AppConfig,
    *,
    imei: str,
    cycle_number: int | None = None,
    bin_width: int | None = None,
) -> dict[str, Path]:
    width = int(bin_width or config.temperature.bin_width)
    record = select_cycle(cycles, cycle_number)
    paths = build_output_paths(out_dir)

    hosts = build_hosts(config)
    hosts.temperature.update(record, width)
    hosts.health.update(record)
    hosts.performance.update(record)
    hosts.trend.update(cycles)
    for _, host in hosts.items():
        host.renderer.timeline.flush()

    artifacts: dict[str, Path] = {}
    svgs: dict[str, str] = {}
    for name, host in hosts.items():
        svg = host.to_svg()
        svgs[name] = svg
        artifacts[f"chart_{name}"] = write_text(svg, paths.charts / f"{name}.svg")

    bins = temperature_bins(record, width)
    stats = dashboard_stats(record, cycles, bins, width)
    stats["device"] = {
        "imei": imei,
        "cycles": len(cycles),
        "selected_cycle": record.cycle_number if record is not None else None,
    }
    artifacts["stats"] = write_summary(stats, paths.summary / "stats.json")

    fmt = config.outputs.tables_format
    artifacts["temperature_bins"] = write_table(
        bins_frame(bins), paths.tables / f"temperature_bins.{fmt}", fmt=fmt
    )
    artifacts["soh_trend"] = write_table(
        trend_frame(cycles), paths.tables / f"soh_trend.{fmt}", fmt=fmt
    )

    figures: dict[str, str] = {}
    if config.outputs.figures:
        fig_fmt = config.outputs.figures_format
        histogram = plot_temperature_histogram(
            bins,
            figure_path(paths.figures, "temperature_histogram", fig_fmt),
            cycle_number=record.cycle_number if record is not None else None,
        )
        trend = plot_soh_trend(cycles, figure_path(paths.figures, "soh_trend", fig_fmt))
        for name, path in (("temperature_histogram", histogram), ("soh_trend", trend)):
            if path is not None:
                artifacts[f"figure_{name}"] = path
                figures[name] = str(path.relative_to(paths.root))

    artifacts["dashboard"] = render_dashboard(
        paths.root,
        imei=imei,
        record=record,
        bin_width=width,
        charts=svgs,
        stats=stats,
        figures=figures,
    )
    for _, host in hosts.items():
        host.unmount()
    logger.info("Dashboard written to %s", artifacts["dashboard"])
    return artifacts
