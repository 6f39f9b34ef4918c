from __future__ import annotations

import logging

import httpx
from nicegui import ui

from cosirob.protocol.types import ValidationError
from cosirob.services.session import RobotSession


class CommandBuilder:
    """Dialog that composes one catalog command and hands the line to on_add."""

    def __init__(self, session: RobotSession, on_add) -> None:
        self.session = session
        self.on_add = on_add
        self.dialog: ui.dialog | None = None
        self.code_select: ui.select | None = None
        self.channel_input: ui.input | None = None
        self.param_inputs: list[ui.input] = []
        self.params_box: ui.column | None = None
        self.example_label: ui.label | None = None

    def _options(self) -> dict[str, str]:
        return {
            code: f"{code} - {definition.description}"
            for code, definition in self.session.catalog.list()
        }

    def _on_select(self) -> None:
        code = self.code_select.value if self.code_select else None
        self.param_inputs = []
        if self.params_box is None:
            return
        self.params_box.clear()
        if not code:
            if self.example_label:
                self.example_label.text = ""
            return
        with self.params_box:
            for name in self.session.catalog.parameter_names(code):
                self.param_inputs.append(ui.input(label=name, placeholder=name))
        if self.example_label:
            self.example_label.text = f"Example: {self.session.catalog.lookup(code).example}"

    def _add(self) -> None:
        code = self.code_select.value if self.code_select else None
        if not code:
            return
        channel = (self.channel_input.value if self.channel_input else "") or ""
        params = [(i.value or "").strip() for i in self.param_inputs]
        if any(not p for p in params):
            ui.notify("Fill in every parameter", color="warning")
            return
        try:
            cmd = self.session.encoder.compose(code, channel.strip(), params)
        except ValidationError as e:
            ui.notify(str(e), color="negative")
            logging.warning("Command builder: %s", e)
            return
        self.on_add(cmd.line)
        if self.code_select:
            self.code_select.value = None
        if self.dialog:
            self.dialog.close()

    def open(self) -> None:
        if self.dialog:
            self.dialog.open()

    def build(self) -> None:
        with ui.dialog() as self.dialog, ui.card().classes("min-w-[24rem]"):
            ui.label("Add Command").classes("text-md font-medium")
            self.code_select = ui.select(
                self._options(), label="Command", on_change=lambda _: self._on_select()
            ).classes("w-full")
            self.channel_input = ui.input("Channel", value=self.session.channel, placeholder="00")
            self.params_box = ui.column().classes("w-full gap-1")
            self.example_label = ui.label("").classes("text-xs text-[var(--cr-muted)]")
            with ui.row().classes("justify-end w-full"):
                ui.button("Cancel", on_click=self.dialog.close).props("flat")
                ui.button("Add Command", on_click=self._add)


class ProgramPage:
    """Program listing/editor: load, save and send a multi-line program."""

    def __init__(self, session: RobotSession) -> None:
        self.session = session
        self.editor: ui.textarea | None = None
        self.status_label: ui.label | None = None
        self.builder = CommandBuilder(session, self.append_line)

    @property
    def program(self) -> str:
        return (self.editor.value if self.editor else "") or ""

    def append_line(self, line: str) -> None:
        if self.editor is None:
            return
        current = self.program
        self.editor.value = f"{current}\n{line}" if current else line

    def _set_status(self, text: str) -> None:
        if self.status_label is not None:
            self.status_label.text = text

    async def load(self) -> None:
        try:
            program = await self.session.client.get_program()
            if self.editor:
                self.editor.value = program
            self._set_status("Loaded program")
        except httpx.HTTPError as e:
            self._set_status(f"Load failed: {e}")
            logging.error("Program load failed: %s", e)

    async def save(self) -> None:
        try:
            await self.session.client.save_program(self.program)
            self._set_status("Program saved")
        except httpx.HTTPError as e:
            self._set_status(f"Save failed: {e}")
            logging.error("Program save failed: %s", e)

    async def send(self) -> None:
        if not self.program.strip():
            ui.notify("Program is empty", color="warning")
            return
        res = await self.session.send_program(self.program)
        if res.error is not None:
            self._set_status(f"Send failed: {res.error.message}")
            return
        status = f"Sent {res.serial_written or 0} bytes to {res.serial_port or 'robot'}"
        if res.serial_reply:
            status += f" | Reply: {res.serial_reply}"
        self._set_status(status)

    def build(self) -> None:
        with ui.card().classes("w-full"):
            with ui.row().classes("items-center gap-2"):
                ui.label("Program Listing / Editor").classes("text-md font-medium")
                ui.button("Add Command", on_click=self.builder.open).props("dense")
            self.editor = ui.textarea(placeholder="Write program here...").classes(
                "w-full font-mono"
            ).props("outlined autogrow")
            with ui.row().classes("gap-2"):
                ui.button("Load", on_click=self.load)
                ui.button("Save", on_click=self.save)
                ui.button("Send to Robot", on_click=self.send).props("color=positive")
            self.status_label = ui.label("").classes("text-xs text-[var(--cr-muted)]")
        self.builder.build()
