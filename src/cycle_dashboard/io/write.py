from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

TABLE_FORMATS = ("csv", "parquet")


def _table_format(path: Path, fmt: str | None) -> str:
    if fmt is not None:
        return fmt
    return "parquet" if path.suffix == ".parquet" else "csv"


def write_table(df: pd.DataFrame, path: Path, fmt: str | None = None) -> Path:
    """Write ``df`` as CSV or parquet; without ``fmt`` the suffix decides."""
    fmt = _table_format(path, fmt)
    if fmt not in TABLE_FORMATS:
        raise ValueError(f"Unsupported table format: {fmt}")
    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "parquet":
        df.to_parquet(path, index=False)
    else:
        df.to_csv(path, index=False)
    return path


def _json_default(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"{type(value).__name__} is not JSON serialisable")


def write_summary(data: dict[str, Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(data, indent=2, sort_keys=True, default=_json_default)
    path.write_text(text, encoding="utf-8")
    return path


def write_text(text: str, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def write_snapshots(snapshots: list[dict[str, Any]], path: Path) -> Path:
    """Write snapshots wrapped the way the snapshots endpoint returns them."""
    payload = {"success": True, "count": len(snapshots), "data": snapshots}
    return write_summary(payload, path)
