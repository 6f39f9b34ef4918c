from __future__ import annotations

import logging
import os


# Backend that owns the serial port (what the UI talks to)
BACKEND_URL: str = os.getenv("COSIROB_BACKEND_URL", "http://localhost:8080").rstrip("/")


def _resolve_timeout() -> float | None:
    """Seconds for backend calls; 0 or negative disables the timeout."""
    raw = os.getenv("COSIROB_BACKEND_TIMEOUT", "5.0")
    try:
        value = float(raw)
    except ValueError:
        return 5.0
    return value if value > 0 else None


BACKEND_TIMEOUT_S: float | None = _resolve_timeout()

# Webserver bind (NiceGUI host/port); 8080 is taken by the backend
SERVER_HOST: str = os.getenv("COSIROB_SERVER_IP", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("COSIROB_SERVER_PORT", "8081"))

# Channel used by manual controls and named positions
DEFAULT_CHANNEL: str = os.getenv("COSIROB_DEFAULT_CHANNEL", "00")

# Manual control defaults
DEFAULT_STEP_MM: float = 5.0
STEP_MIN_MM: float = 1.0
STEP_MAX_MM: float = 1000.0
DEFAULT_READ_SLOT: int = 1

# Key under which named positions are persisted
POSITIONS_STORAGE_KEY = "cosirob_positions_v1"


def _resolve_log_level() -> int:
    s = os.getenv("COSIROB_LOG_LEVEL")
    if s:
        name = s.strip().upper()
        mapping = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL,
        }
        return mapping.get(name, logging.WARNING)
    else:
        return logging.WARNING


LOG_LEVEL: int = _resolve_log_level()
