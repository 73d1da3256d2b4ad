from __future__ import annotations

from pathlib import Path

import numpy as np

from cycle_dashboard.charts.binning import temperature_bins
from cycle_dashboard.charts.stats import dashboard_stats
from cycle_dashboard.report.dashboard import _json_safe, render_dashboard

IMEI = "865044073967657"


def test_render_dashboard_embeds_charts_and_summaries(tmp_path: Path, record, cycles) -> None:
    bins = temperature_bins(record, 5)
    stats = dashboard_stats(record, cycles, bins, 5)

    path = render_dashboard(
        tmp_path,
        imei=IMEI,
        record=record,
        bin_width=5,
        charts={"temperature": '<svg class="temperature-histogram"></svg>', "trend": "<svg></svg>"},
        stats=stats,
        figures={"soh_trend": "figures/soh_trend.png"},
    )

    html = path.read_text(encoding="utf-8")
    assert path == tmp_path / "dashboard.html"
    assert f"Device {IMEI}" in html
    assert "cycle #12 (4.0 hrs)" in html
    assert '<svg class="temperature-histogram"></svg>' in html
    assert "Temperature Distribution" in html
    assert "Long-term Trend Analysis" in html
    assert "5°C sampling rate" in html
    assert "Moderate charging" in html
    assert "+37.5% per charge" in html
    assert "No alerts recorded for this cycle." in html
    assert 'src="figures/soh_trend.png"' in html
    assert "Select a cycle to view its details." not in html
    assert "Battery Overview" in html
    assert "50 (#1 - #50)" in html
    assert "Cycle Statistics" in html
    assert "Cycle #12: 2024-01-12T00:00:00.000Z to 2024-01-12T04:00:00.000Z" in html
    assert "<dt>data points</dt><dd>800</dd>" in html


def test_render_dashboard_without_selection(tmp_path: Path, cycles) -> None:
    path = render_dashboard(
        tmp_path,
        imei=IMEI,
        record=None,
        bin_width=10,
        charts={"health": "<svg></svg>"},
        stats=dashboard_stats(None, cycles, [], 10),
    )

    html = path.read_text(encoding="utf-8")
    assert "Select a cycle to view its details." in html
    assert "Charging Insights" not in html
    assert "Cycle Statistics" not in html
    assert "Battery Overview" in html
    assert "Battery Health Metrics" in html


def test_json_safe_converts_numpy_and_non_finite_values() -> None:
    payload = {"a": np.float64(1.5), "b": float("nan"), "c": (np.int64(2), "x"), 3: True}

    assert _json_safe(payload) == {"a": 1.5, "b": None, "c": [2, "x"], "3": True}
