from __future__ import annotations

import logging

import httpx
from nicegui import ui

from cosirob.common.logging_config import attach_ui_log
from cosirob.common.theme import ThemeMode, get_theme, set_theme
from cosirob.config import BAUD_RATES, FLOW_CONTROL_OPTIONS, PARITY_OPTIONS, SerialConfig
from cosirob.services.backend_client import BackendClient


class SettingsPage:
    """Serial link configuration, theme and application log."""

    def __init__(self, client: BackendClient) -> None:
        self.client = client
        self.config = SerialConfig()
        self.port_select: ui.select | None = None
        self.os_label: ui.label | None = None
        self.app_log: ui.log | None = None

    async def refresh(self) -> None:
        """Pull config, port list and OS from the backend."""
        try:
            fresh = await self.client.get_config()
            ports = await self.client.list_serial_ports()
            os_name = await self.client.get_system_os()
        except httpx.HTTPError as e:
            logging.error("Backend settings refresh failed: %s", e)
            ui.notify(f"Backend unavailable: {e}", color="negative")
            return
        # Update in place; the form is bound to this instance
        for name, value in fresh.to_dict().items():
            setattr(self.config, name, value)
        if self.port_select is not None:
            options = sorted(set(ports) | {self.config.port_name})
            self.port_select.set_options(options, value=self.config.port_name)
        if self.os_label is not None:
            self.os_label.text = f"Backend OS: {os_name or 'unknown'}"

    async def apply(self) -> None:
        if self.port_select is not None and self.port_select.value:
            self.config.port_name = str(self.port_select.value)
        try:
            await self.client.update_config(self.config)
            ui.notify(f"Serial config applied: {self.config.port_name}", color="positive")
        except ValueError as e:
            ui.notify(str(e), color="warning")
        except httpx.HTTPError as e:
            logging.error("Config update failed: %s", e)
            ui.notify(f"Config update failed: {e}", color="negative")

    def build(self) -> None:
        with ui.card().classes("w-full"):
            ui.label("Serial Link").classes("text-md font-medium")
            with ui.row().classes("items-center gap-2 flex-wrap"):
                self.port_select = ui.select(
                    [self.config.port_name], value=self.config.port_name, label="Port", new_value_mode="add-unique"
                ).classes("w-40")
                ui.select(BAUD_RATES, label="Baud").bind_value(self.config, "baud_rate").classes("w-28")
                ui.select([5, 6, 7, 8], label="Data bits").bind_value(self.config, "data_bits").classes("w-24")
                ui.select(PARITY_OPTIONS, label="Parity").bind_value(self.config, "parity").classes("w-24")
                ui.select([1, 2], label="Stop bits").bind_value(self.config, "stop_bits").classes("w-24")
                ui.select(FLOW_CONTROL_OPTIONS, label="Flow").bind_value(self.config, "flow_control").classes("w-28")
            with ui.row().classes("items-center gap-2"):
                ui.button("Refresh", on_click=self.refresh).props("flat")
                ui.button("Apply", on_click=self.apply)
                self.os_label = ui.label("Backend OS: unknown").classes("text-xs")

        with ui.card().classes("w-full"):
            ui.label("Appearance").classes("text-md font-medium")
            mode_toggle = ui.toggle(
                {"light": "Light", "dark": "Dark"}, value=get_theme()
            ).props("dense")

            def _on_mode() -> None:
                mode: ThemeMode = "light" if mode_toggle.value == "light" else "dark"
                set_theme(mode)
                logging.debug("Set theme to mode: %s", mode)

            mode_toggle.on_value_change(lambda e: _on_mode())

        with ui.card().classes("w-full"):
            ui.label("Application Log").classes("text-md font-medium")
            self.app_log = ui.log(max_lines=500).classes("w-full h-48 font-mono text-xs")
            attach_ui_log(self.app_log)
