from __future__ import annotations

import logging


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
CHART_LOGGER = "cycle_dashboard.charts"
NOISY_LOGGERS = ("matplotlib", "PIL")


def configure_logging(level: str = "INFO", chart_level: str | None = None) -> None:
    """Set up root logging; ``chart_level`` overrides the chart engine loggers.

    Skipped temperature bins and dropped animations are logged at DEBUG, so
    ``chart_level="DEBUG"`` surfaces them without flooding the rest.
    """
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if chart_level:
        logging.getLogger(CHART_LOGGER).setLevel(chart_level.upper())
