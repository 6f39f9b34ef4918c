from __future__ import annotations

import logging
from collections.abc import Callable

from nicegui import ui

from cosirob.protocol.types import LogKind, ProtocolEvent
from cosirob.services.event_log import EventLog
from cosirob.services.session import RobotSession
from cosirob.state import connection_state

_PREFIX = {
    LogKind.TX: "TX",
    LogKind.RX: "RX",
    LogKind.ERROR: "ERR",
    LogKind.WARNING: "WARN",
    LogKind.INFO: "INFO",
}


def format_event(event: ProtocolEvent) -> str:
    return f"{event.time_str} [{_PREFIX[event.kind]}] {event.message}"


class MonitorPage:
    """Communication monitor: live protocol log plus a raw command line."""

    def __init__(self, session: RobotSession, events: EventLog) -> None:
        self.session = session
        self.events = events
        self.log_view: ui.log | None = None
        self.command_input: ui.input | None = None
        self.send_button: ui.button | None = None
        self.sending = False
        self._unsubscribe: Callable[[], None] | None = None

    def _push(self, event: ProtocolEvent) -> None:
        if self.log_view is None:
            return
        self.log_view.push(format_event(event), classes=f"log-{event.kind.value}")

    def _clear(self) -> None:
        if self.log_view is not None:
            self.log_view.clear()
        # clear() broadcasts "Log cleared", which lands in the emptied view
        self.events.clear()

    async def send_command(self) -> None:
        if self.command_input is None or self.sending:
            return
        command = (self.command_input.value or "").strip()
        if not command:
            return
        self.command_input.value = ""
        self.sending = True
        if self.send_button:
            self.send_button.props("loading")
        try:
            await self.session.send_raw(command)
        except Exception as e:
            logging.error("Raw send failed: %s", e)
        finally:
            self.sending = False
            if self.send_button:
                self.send_button.props(remove="loading")

    def build(self) -> None:
        with ui.card().classes("w-full"):
            with ui.row().classes("items-center gap-2"):
                ui.label("Communication Monitor").classes("text-md font-medium")
                ui.label().bind_text_from(
                    connection_state, "port_name", backward=lambda p: f"● {p}" if p else ""
                ).bind_visibility_from(connection_state, "connected").classes(
                    "text-sm text-[var(--cr-accent)]"
                )
            self.log_view = ui.log(max_lines=self.events.max_history).classes(
                "w-full h-80 font-mono text-xs"
            )
            history = self.events.snapshot()
            if history:
                for event in history:
                    self._push(event)
            else:
                self.log_view.push("[INFO] Waiting for commands...", classes="log-info")

            if self._unsubscribe is not None:
                self._unsubscribe()
            self._unsubscribe = self.events.subscribe(self._push)

            with ui.row().classes("w-full items-center gap-2"):
                self.command_input = (
                    ui.input(placeholder="Send raw command...")
                    .classes("grow")
                    .on("keydown.enter", self.send_command)
                )
                self.send_button = ui.button("Send", on_click=self.send_command)
                ui.button("Clear", on_click=self._clear).props("flat")
