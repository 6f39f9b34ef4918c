"""
Type definitions for the Cosirob command protocol.

Defines enums, dataclasses and exceptions shared by the catalog, the encoder,
the backend client and the event log.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Literal

# Cartesian axis literals
Axis = Literal["x", "y", "z"]


class LogKind(str, Enum):
    """Kind of a protocol event."""

    INFO = "info"
    TX = "tx"
    RX = "rx"
    ERROR = "error"
    WARNING = "warning"


class ErrorKind(str, Enum):
    """Why a backend round trip failed."""

    REJECTED = "rejected"  # backend answered with a non-2xx status
    UNREACHABLE = "unreachable"  # no response at all


# ---- Exceptions ----


class ValidationError(ValueError):
    """Operator input that cannot be turned into a protocol line."""


class CommandNotFound(ValidationError, LookupError):
    """Command code missing from the catalog."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Unknown command: {code!r}")
        self.code = code


class ParamCountMismatch(ValidationError):
    """Parameter list does not match the catalog syntax."""

    def __init__(self, code: str, expected: int, got: int) -> None:
        super().__init__(f"Command {code!r} expects {expected} parameter(s), got {got}")
        self.code = code
        self.expected = expected
        self.got = got


class CatalogError(ValueError):
    """Malformed command schema."""


# ---- Records ----


@dataclass(slots=True, frozen=True)
class CommandDefinition:
    """One catalog entry."""

    syntax: str
    description: str
    example: str


@dataclass(slots=True, frozen=True)
class ComposedCommand:
    """A fully materialized protocol line."""

    channel: str
    code: str
    parameters: tuple[str, ...] = ()

    @property
    def line(self) -> str:
        return " ".join((self.channel, self.code, *self.parameters)).rstrip()

    def __str__(self) -> str:
        return self.line


@dataclass(slots=True, frozen=True)
class ProtocolEvent:
    """One log record of a protocol action."""

    timestamp: datetime
    kind: LogKind
    message: str

    @property
    def time_str(self) -> str:
        return self.timestamp.strftime("%H:%M:%S")


@dataclass(slots=True, frozen=True)
class BackendError:
    kind: ErrorKind
    message: str
    status_code: int | None = None


@dataclass(slots=True, frozen=True)
class BackendResponse:
    """Parsed view of one backend reply.

    Either ``error`` is set, or the call succeeded and the serial fields
    (or ``raw_text`` when the body was not JSON) describe the result.
    """

    serial_port: str | None = None
    serial_written: int | None = None
    serial_reply: str | None = None
    raw_text: str | None = None
    error: BackendError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def rejected(self) -> bool:
        return self.error is not None and self.error.kind is ErrorKind.REJECTED

    @property
    def unreachable(self) -> bool:
        return self.error is not None and self.error.kind is ErrorKind.UNREACHABLE

    @classmethod
    def failure(
        cls, kind: ErrorKind, message: str, status_code: int | None = None
    ) -> BackendResponse:
        return cls(error=BackendError(kind=kind, message=message, status_code=status_code))


@dataclass(slots=True, frozen=True)
class ConnectionStatus:
    """Side-channel connectivity observation from a backend reply."""

    port: str | None
    connected: bool
