from __future__ import annotations

import logging

import pytest

from cosirob.common.logging_config import (
    EVENTS_LOGGER,
    AnsiColorFormatter,
    NiceGuiLogHandler,
    attach_ui_log,
)


class FakeLogWidget:
    def __init__(self) -> None:
        self.lines: list[tuple[str, str | None]] = []

    def push(self, line: str, classes: str | None = None) -> None:
        self.lines.append((line, classes))


def _record(name: str, level: int, msg: str) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, msg, None, None)


@pytest.mark.unit
def test_plain_formatter_layout():
    fmt = AnsiColorFormatter(colored=False)
    line = fmt.format(_record("cosirob.session", logging.WARNING, "Homing stopped"))
    ts, rest = line.split(" ", 1)
    assert len(ts) == 8 and ts.count(":") == 2
    assert rest == "WARNING cosirob.session: Homing stopped"


@pytest.mark.unit
def test_ui_handler_styles_by_level_and_skips_protocol_events():
    widget = FakeLogWidget()
    attach_ui_log(widget)
    handler = NiceGuiLogHandler(level=logging.INFO)

    handler.handle(_record("cosirob.pages", logging.ERROR, "Config update failed"))
    handler.handle(_record("cosirob.pages", logging.INFO, "Loaded program"))
    handler.handle(_record(EVENTS_LOGGER, logging.ERROR, "[ERROR] Send failed: port busy"))

    assert [css for _, css in widget.lines] == ["log-error", "log-info"]
    assert "Config update failed" in widget.lines[0][0]
