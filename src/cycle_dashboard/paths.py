from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class OutputPaths:
    root: Path
    charts: Path
    figures: Path
    summary: Path
    tables: Path


def build_output_paths(out_dir: Path) -> OutputPaths:
    paths = OutputPaths(
        root=out_dir,
        charts=out_dir / "charts",
        figures=out_dir / "figures",
        summary=out_dir / "summary",
        tables=out_dir / "tables",
    )
    for path in (
        paths.root,
        paths.charts,
        paths.figures,
        paths.summary,
        paths.tables,
    ):
        path.mkdir(parents=True, exist_ok=True)
    return paths
