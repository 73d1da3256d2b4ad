from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from cycle_dashboard.config import AppConfig
from cycle_dashboard.io.mock import generate_mock_cycles
from cycle_dashboard.models import CycleRecord

logger = logging.getLogger(__name__)

SNAPSHOT_KEYS = ("data", "snapshots")


def _snapshot_items(payload: Any) -> list[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in SNAPSHOT_KEYS:
            items = payload.get(key)
            if isinstance(items, list):
                return items
    raise ValueError("Snapshot file must be a list or an object with a 'data' or 'snapshots' list")


def load_cycle_list(path: Path, imei: str | None = None) -> list[CycleRecord]:
    """Read API-shaped cycle snapshots from JSON, optionally for a single device."""
    if not path.exists():
        raise ValueError(f"Snapshot file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        try:
            payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Snapshot file is not valid JSON: {path}") from exc

    records = []
    for index, item in enumerate(_snapshot_items(payload)):
        if not isinstance(item, dict):
            raise ValueError(f"Snapshot {index} in {path} is not an object")
        records.append(CycleRecord.from_mapping(item))

    if imei is not None:
        records = [record for record in records if record.imei == imei]
    logger.info("Loaded %d cycle snapshots from %s", len(records), path)
    return records


def load_cycles(config: AppConfig, imei: str, source: Path | None = None) -> list[CycleRecord]:
    """Load cycles for ``imei`` from JSON or the seeded mock generator."""
    if imei not in config.devices.authorized_imeis:
        raise ValueError(f"Device {imei} is not in devices.authorized_imeis")

    if config.input.mode == "mock" and source is None:
        return generate_mock_cycles(
            imei, count=config.input.mock_cycles, seed=config.input.random_seed
        )

    path = source or (Path(config.input.source_file) if config.input.source_file else None)
    if path is None:
        raise ValueError("input.source_file must be set when input.mode is 'json'")
    return load_cycle_list(path, imei=imei)
