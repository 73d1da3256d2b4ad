from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, FileSystemLoader, select_autoescape

from cycle_dashboard.charts.formatting import format_duration, safe_to_fixed
from cycle_dashboard.charts.synthetic import SYNTHETIC_SERIES_NOTE
from cycle_dashboard.models import CycleRecord

CHART_TITLES = {
    "temperature": "Temperature Distribution",
    "health": "Battery Health Metrics",
    "performance": "Performance Metrics",
    "trend": "Long-term Trend Analysis",
}


def _template_env() -> Environment:
    templates_path = Path(__file__).resolve().parent / "templates"
    env = Environment(
        loader=FileSystemLoader(str(templates_path)),
        autoescape=select_autoescape(enabled_extensions=("html", "xml", "j2")),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["fixed"] = safe_to_fixed
    env.filters["duration"] = format_duration
    return env


def _json_safe(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key): _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    if hasattr(value, "item") and not isinstance(value, (int, float, str, bool)):
        value = value.item()
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    return value


def render_dashboard(
    out_dir: Path,
    *,
    imei: str,
    record: CycleRecord | None,
    bin_width: int,
    charts: Mapping[str, str],
    stats: Mapping[str, Any],
    figures: Mapping[str, str] | None = None,
) -> Path:
    """Write ``dashboard.html`` embedding the chart SVGs and their summaries."""
    env = _template_env()
    template = env.get_template("dashboard.html.j2")
    sections = [
        {"key": key, "title": CHART_TITLES.get(key, key.title()), "svg": svg}
        for key, svg in charts.items()
    ]
    html = template.render(
        imei=imei,
        cycle=record.to_dict() if record is not None else None,
        bin_width=bin_width,
        sections=sections,
        stats=_json_safe(stats),
        figures=dict(figures or {}),
        synthetic_note=SYNTHETIC_SERIES_NOTE,
    )
    out_dir.mkdir(parents=True, exist_ok=True)
    report_path = out_dir / "dashboard.html"
    report_path.write_text(html, encoding="utf-8")
    return report_path
