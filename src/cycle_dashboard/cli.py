from __future__ import annotations

from pathlib import Path

import typer

from cycle_dashboard.charts.binning import bins_frame, temperature_bins
from cycle_dashboard.config import (
    DEFAULT_CONFIG_PATH,
    TEMPERATURE_BIN_WIDTHS,
    AppConfig,
    load_config,
)
from cycle_dashboard.io.mock import generate_mock_snapshots
from cycle_dashboard.io.read import load_cycles
from cycle_dashboard.io.write import write_snapshots, write_table
from cycle_dashboard.logging import configure_logging
from cycle_dashboard.models import CycleRecord
from cycle_dashboard.pipeline.build import build_dashboard, select_cycle

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path) -> AppConfig:
    return load_config(config_path)


def _resolve_imei(cfg: AppConfig, imei: str | None) -> str:
    selected = imei or cfg.devices.default_imei
    if selected not in cfg.devices.authorized_imeis:
        raise typer.BadParameter(
            f"Device {selected} is not authorized. "
            f"Known devices: {', '.join(cfg.devices.authorized_imeis)}."
        )
    return selected


def _resolve_bin_width(cfg: AppConfig, bin_width: int | None) -> int:
    width = cfg.temperature.bin_width if bin_width is None else bin_width
    if width not in TEMPERATURE_BIN_WIDTHS:
        raise typer.BadParameter(
            f"--bin-width must be one of {', '.join(str(value) for value in TEMPERATURE_BIN_WIDTHS)}."
        )
    return width


def _load_device_cycles(cfg: AppConfig, imei: str, source: Path | None) -> list[CycleRecord]:
    try:
        return load_cycles(cfg, imei, source=source)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def render(
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    source: Path | None = typer.Option(
        None,
        exists=True,
        readable=True,
        resolve_path=True,
        help="Snapshots JSON file. Overrides input.source_file and mock mode.",
    ),
    imei: str | None = typer.Option(None, help="Device to show. Defaults to devices.default_imei."),
    cycle: int | None = typer.Option(None, help="Cycle number to show. Defaults to the latest."),
    bin_width: int | None = typer.Option(None, help="Temperature bin width: 5, 10, 15 or 20."),
    figures: bool | None = typer.Option(
        None, "--figures/--no-figures", help="Override outputs.figures."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Log skipped bins and dropped animations."
    ),
) -> None:
    """Render every chart and write the static dashboard into out/."""
    configure_logging(chart_level="DEBUG" if verbose else None)
    cfg = _load_app_config(config)
    device = _resolve_imei(cfg, imei)
    width = _resolve_bin_width(cfg, bin_width)
    if figures is not None:
        cfg.outputs.figures = figures
    cycles = _load_device_cycles(cfg, device, source)
    try:
        artifacts = build_dashboard(
            cycles, out, cfg, imei=device, cycle_number=cycle, bin_width=width
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(f"Dashboard complete: {artifacts['dashboard']}")
    typer.echo(f"Artifacts: {', '.join(sorted(artifacts.keys()))}")


@app.command()
def mock(
    out: Path = typer.Option(Path("data/mock_snapshots.json"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    imei: str | None = typer.Option(None, help="Device to generate. Defaults to devices.default_imei."),
    count: int | None = typer.Option(None, min=1, help="Number of cycles. Defaults to input.mock_cycles."),
    seed: int | None = typer.Option(None, min=0, help="Random seed. Defaults to input.random_seed."),
) -> None:
    """Write a seeded mock snapshots file in the API response shape."""
    configure_logging()
    cfg = _load_app_config(config)
    device = _resolve_imei(cfg, imei)
    snapshots = generate_mock_snapshots(
        device,
        count=count or cfg.input.mock_cycles,
        seed=cfg.input.random_seed if seed is None else seed,
    )
    path = write_snapshots(snapshots, out)
    typer.echo(f"Wrote {len(snapshots)} mock cycles for {device} to {path}")


@app.command()
def bins(
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    source: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    imei: str | None = typer.Option(None),
    cycle: int | None = typer.Option(None, help="Cycle number. Defaults to the latest."),
    bin_width: int | None = typer.Option(None, help="Temperature bin width: 5, 10, 15 or 20."),
    out: Path | None = typer.Option(None, resolve_path=True, help="Optional CSV/parquet output."),
    verbose: bool = typer.Option(False, "--verbose", help="Log skipped bins."),
) -> None:
    """Print the temperature histogram bins of one cycle."""
    configure_logging(chart_level="DEBUG" if verbose else None)
    cfg = _load_app_config(config)
    device = _resolve_imei(cfg, imei)
    width = _resolve_bin_width(cfg, bin_width)
    cycles = _load_device_cycles(cfg, device, source)
    try:
        record = select_cycle(cycles, cycle)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if record is None:
        raise typer.BadParameter(f"No cycles found for device {device}")

    result = temperature_bins(record, width)
    for item in result:
        typer.echo(f"{item.range}\t{item.minutes:.1f}")
    typer.echo(f"Cycle {record.cycle_number}: {len(result)} ranges at {width}°C")
    if out is not None:
        write_table(bins_frame(result), out)
        typer.echo(f"Wrote {out}")


if __name__ == "__main__":
    app()
