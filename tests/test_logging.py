from __future__ import annotations

import logging

from cycle_dashboard.logging import CHART_LOGGER, configure_logging


def test_configure_logging_sets_chart_level(monkeypatch) -> None:
    chart_logger = logging.getLogger(CHART_LOGGER)
    monkeypatch.setattr(chart_logger, "level", logging.NOTSET)

    configure_logging(chart_level="debug")

    assert chart_logger.level == logging.DEBUG
    assert logging.getLogger("matplotlib").level == logging.WARNING
