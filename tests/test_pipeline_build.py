from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from cycle_dashboard.config import AppConfig
from cycle_dashboard.pipeline.build import build_dashboard, build_hosts, select_cycle

IMEI = "865044073967657"


def test_select_cycle_defaults_to_latest(cycles) -> None:
    assert select_cycle(cycles, None).cycle_number == 50
    assert select_cycle(cycles, 7).cycle_number == 7
    assert select_cycle([], None) is None
    with pytest.raises(ValueError, match="Cycle 99 not found"):
        select_cycle(cycles, 99)


def test_build_hosts_mounts_every_chart() -> None:
    hosts = build_hosts(AppConfig())

    names = [name for name, _ in hosts.items()]
    assert names == ["temperature", "health", "performance", "trend"]
    assert all(host.mounted for _, host in hosts.items())
    assert hosts.trend.renderer.width == 900
    assert hosts.trend.renderer.scale_extent == (1.0, 10.0)


def test_build_dashboard_writes_every_artifact(tmp_path: Path, cycles) -> None:
    cfg = AppConfig()
    cfg.outputs.figures = True

    artifacts = build_dashboard(cycles, tmp_path / "out", cfg, imei=IMEI, cycle_number=12, bin_width=5)

    for name in ("temperature", "health", "performance", "trend"):
        svg = artifacts[f"chart_{name}"].read_text(encoding="utf-8")
        assert svg.startswith("<svg")
        assert "placeholder" not in svg
    assert artifacts["figure_temperature_histogram"].exists()
    assert artifacts["figure_soh_trend"].exists()

    stats = json.loads(artifacts["stats"].read_text(encoding="utf-8"))
    assert stats["device"] == {"imei": IMEI, "cycles": 50, "selected_cycle": 12}
    assert stats["temperature"]["bin_width"] == 5
    assert stats["trend"]["total_cycles"] == 50

    bins = pd.read_csv(artifacts["temperature_bins"])
    assert list(bins["range"]) == ["15-20", "20-25", "25-30"]
    trend = pd.read_csv(artifacts["soh_trend"])
    assert list(trend["cycle_number"]) == list(range(1, 51))

    html = artifacts["dashboard"].read_text(encoding="utf-8")
    assert "cycle #12" in html
    assert "figures/soh_trend.png" in html


def test_build_dashboard_finishes_animations_before_serialising(tmp_path: Path, record) -> None:
    artifacts = build_dashboard([record], tmp_path, AppConfig(), imei=IMEI)

    svg = artifacts["chart_health"].read_text(encoding="utf-8")
    assert 'r="0"' not in svg
    assert 'r="5"' in svg


def test_build_dashboard_without_cycles_renders_placeholders(tmp_path: Path) -> None:
    cfg = AppConfig()
    cfg.outputs.tables_format = "parquet"

    artifacts = build_dashboard([], tmp_path, cfg, imei=IMEI)

    trend_svg = artifacts["chart_trend"].read_text(encoding="utf-8")
    assert "No cycle data available for long-term analysis." in trend_svg
    assert artifacts["temperature_bins"].suffix == ".parquet"
    assert pd.read_parquet(artifacts["temperature_bins"]).empty
    assert "figure_soh_trend" not in artifacts
    stats = json.loads(artifacts["stats"].read_text(encoding="utf-8"))
    assert stats["device"]["selected_cycle"] is None
    assert stats["trend"] is None
