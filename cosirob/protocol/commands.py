from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from .catalog import CommandCatalog
from .parsing import looks_like_channel_prefixed
from .types import ComposedCommand, LogKind, ParamCountMismatch

logger = logging.getLogger(__name__)

CHANNEL_WIDTH = 2

# Conventional channel assignments
CHANNEL_SYSTEM = "00"
CHANNEL_MOTION = "10"
CHANNEL_MOTION_AUX = "20"
CHANNEL_IO = "30"
CHANNEL_GRIPPER = "40"
CHANNEL_POSITION = "50"

NO_PREFIX_WARNING = 'Command does not start with a two-digit channel prefix (e.g. "00 ")'


class EventSink(Protocol):
    def append(self, kind: LogKind, message: str) -> object: ...


def channel_problem(channel: str) -> str | None:
    """Describe what is unusual about a channel, or None if it looks right."""
    if len(channel) != CHANNEL_WIDTH:
        return f"Channel {channel!r} is not {CHANNEL_WIDTH} characters long"
    if not channel.isdigit():
        return f"Channel {channel!r} is not numeric"
    return None


class CommandEncoder:
    """Builds channel-prefixed protocol lines from catalog entries."""

    def __init__(self, catalog: CommandCatalog, events: EventSink | None = None) -> None:
        self.catalog = catalog
        self.events = events

    def compose(
        self, code: str, channel: str, parameters: Sequence[str] = ()
    ) -> ComposedCommand:
        """
        Validate and build a command.

        Raises:
            CommandNotFound: code is not in the catalog
            ParamCountMismatch: wrong number of parameters for code

        An unusual channel only produces a warning event; the device may
        still accept it.
        """
        expected = self.catalog.parameter_count(code)
        params = tuple(str(p) for p in parameters)
        if len(params) != expected:
            raise ParamCountMismatch(code, expected, len(params))

        problem = channel_problem(channel)
        if problem:
            self._warn(problem)

        return ComposedCommand(
            channel=channel, code=self.catalog.mnemonic(code), parameters=params
        )

    def check_raw(self, line: str) -> bool:
        """Advisory check for free-form lines; warns and returns False when unprefixed."""
        if looks_like_channel_prefixed(line):
            return True
        self._warn(NO_PREFIX_WARNING)
        return False

    def _warn(self, message: str) -> None:
        logger.debug("Encoder warning: %s", message)
        if self.events is not None:
            self.events.append(LogKind.WARNING, message)
