from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt

FIGURE_FORMATS = ("png", "svg", "pdf")


def figure_path(figures_dir: Path, name: str, fmt: str = "png") -> Path:
    if fmt not in FIGURE_FORMATS:
        raise ValueError(f"Unsupported figure format: {fmt}")
    return figures_dir / f"{name}.{fmt}"


def save_figure(path: Path, dpi: int = 120) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(path, dpi=dpi)
    plt.close()
    return path
