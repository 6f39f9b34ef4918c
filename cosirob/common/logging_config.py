from __future__ import annotations

import logging
import os
import re
import sys
import threading
import weakref

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# COSIROB_TRACE=1 also lets raw httpx request logs through
TRACE_ENABLED = str(os.getenv("COSIROB_TRACE", "0")).lower() in ("1", "true", "yes", "on")

LEVEL_NAMES = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Logger that mirrors every protocol event (see services/event_log.py)
EVENTS_LOGGER = "cosirob.events"

_RESET = "\033[0m"
_DIM = "\033[2m"
_LEVEL_COLORS = {
    TRACE: "\033[32m",
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[37m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[41m",
}
# Direction tags written by the event log mirror
_EVENT_TAG_COLORS = {
    "TX": "\033[96m",
    "RX": "\033[92m",
    "WARNING": "\033[33m",
    "ERROR": "\033[91m",
}
_EVENT_TAG_RE = re.compile(r"^\[(TX|RX|INFO|WARNING|ERROR)\] ")

# ui.log line classes, matching the CSS in common/theme.py
_UI_CLASSES = {
    logging.WARNING: "log-warning",
    logging.ERROR: "log-error",
    logging.CRITICAL: "log-error",
}


def _color_wanted(requested: bool) -> bool:
    return requested and "NO_COLOR" not in os.environ and sys.stderr.isatty()


class AnsiColorFormatter(logging.Formatter):
    """Compact "HH:MM:SS LEVEL logger: msg" lines, colored by level and event direction."""

    def __init__(self, colored: bool = True) -> None:
        super().__init__(fmt="%(levelname)s %(name)s: %(message)s")
        self.colored = _color_wanted(colored)

    def format(self, record: logging.LogRecord) -> str:
        ts = self.formatTime(record, "%H:%M:%S")
        if not self.colored:
            return f"{ts} {super().format(record)}"

        original = record.levelname
        color = _LEVEL_COLORS.get(record.levelno, "")
        record.levelname = f"{color}{original}{_RESET}" if color else original
        try:
            line = super().format(record)
        finally:
            record.levelname = original

        if record.name == EVENTS_LOGGER:
            line = self._color_event_tag(line, record.getMessage())
        return f"{_DIM}{ts}{_RESET} {line}"

    @staticmethod
    def _color_event_tag(line: str, message: str) -> str:
        m = _EVENT_TAG_RE.match(message)
        if not m or m.group(1) not in _EVENT_TAG_COLORS:
            return line
        tag = m.group(0).rstrip()
        return line.replace(tag, f"{_EVENT_TAG_COLORS[m.group(1)]}{tag}{_RESET}", 1)


# ---- NiceGUI UI log handler ----

_ui_log_targets: set[weakref.ref] = set()
_ui_lock = threading.Lock()


class _SkipProtocolEvents(logging.Filter):
    """The monitor tab already shows protocol traffic."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.name != EVENTS_LOGGER


class NiceGuiLogHandler(logging.Handler):
    """Mirror application log records into registered ui.log widgets."""

    def __init__(self, level: int = logging.INFO) -> None:
        super().__init__(level=level)
        self.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s", "%H:%M:%S")
        )
        self.addFilter(_SkipProtocolEvents())

    def emit(self, record: logging.LogRecord) -> None:
        if not _ui_log_targets:
            return
        msg = self.format(record)
        css = _UI_CLASSES.get(record.levelno, "log-info")
        with _ui_lock:
            for ref in list(_ui_log_targets):
                widget = ref()
                if widget is None:
                    _ui_log_targets.discard(ref)
                    continue
                try:
                    widget.push(msg, classes=css)
                except Exception:
                    # Widget deleted with its client
                    _ui_log_targets.discard(ref)


def attach_ui_log(log_widget) -> None:
    """Register a ui.log widget as a sink for log records."""
    try:
        ref = weakref.ref(log_widget)
    except TypeError:
        return
    with _ui_lock:
        _ui_log_targets.add(ref)


def _have_handler(logger: logging.Logger, kind: type[logging.Handler]) -> bool:
    return any(type(h) is kind for h in logger.handlers)


def configure_logging(
    level: int = logging.INFO, use_color: bool = True, add_ui_handler: bool = True
) -> logging.Logger:
    """
    Configure the root logger for the webapp.

    - colored console handler on stderr (plain when NO_COLOR is set or not a tty)
    - optional handler feeding the Application Log on the settings page
    - protocol event mirror follows the root level; raw httpx request logs
      only show with COSIROB_TRACE

    Safe to call more than once.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    if not _have_handler(logger, logging.StreamHandler):
        console = logging.StreamHandler(stream=sys.stderr)
        console.setLevel(level)
        console.setFormatter(AnsiColorFormatter(colored=use_color))
        logger.addHandler(console)

    if add_ui_handler and not _have_handler(logger, NiceGuiLogHandler):
        logger.addHandler(NiceGuiLogHandler(level=max(level, logging.INFO)))

    logging.getLogger(EVENTS_LOGGER).setLevel(level)
    logging.getLogger("httpx").setLevel(TRACE if TRACE_ENABLED else logging.WARNING)

    return logger
