from __future__ import annotations

import logging
from functools import partial

from nicegui import binding, ui

from cosirob.constants import DEFAULT_STEP_MM, STEP_MAX_MM, STEP_MIN_MM
from cosirob.protocol.types import Axis, BackendResponse
from cosirob.services.session import RobotSession
from cosirob.state import robot_state


class ControlPanel:
    """Manual controls: Cartesian steps, homing and position read-back."""

    step_mm = binding.BindableProperty()

    def __init__(self, session: RobotSession) -> None:
        self.session = session
        self.step_mm = DEFAULT_STEP_MM
        self.status_label: ui.label | None = None

    def _set_status(self, text: str) -> None:
        if self.status_label is not None:
            self.status_label.text = text

    def _describe(self, prefix: str, res: BackendResponse) -> str:
        if res.error is not None:
            return f"{prefix} failed: {res.error.message}"
        parts = [prefix]
        if res.serial_written:
            parts.append(f"OK: {res.serial_written}")
        if res.serial_reply:
            parts.append(f"Reply: {res.serial_reply}")
        return " | ".join(parts)

    async def step(self, axis: Axis, direction: int) -> None:
        try:
            size = min(max(float(self.step_mm or STEP_MIN_MM), STEP_MIN_MM), STEP_MAX_MM)
            res = await self.session.step(axis, direction * size)
            self._set_status(self._describe(f"Step {axis.upper()}{'+' if direction > 0 else '-'}", res))
        except Exception as e:
            logging.error("Step %s failed: %s", axis, e)

    async def home(self) -> None:
        try:
            res = await self.session.go_home()
            self._set_status(self._describe("Home", res))
        except Exception as e:
            logging.error("Home failed: %s", e)

    async def read(self) -> None:
        slot = int(self.session.read_slot)
        try:
            res = await self.session.read_position(slot)
            self._set_status(self._describe(f"RD {slot}", res))
        except Exception as e:
            logging.error("Read slot %s failed: %s", slot, e)

    def build(self) -> None:
        with ui.card().classes("w-full"):
            ui.label("Manual Controls").classes("text-md font-medium")
            with ui.row().classes("items-center gap-2 flex-wrap"):
                for axis in ("x", "y", "z"):
                    ui.button(f"Step +{axis.upper()}", on_click=partial(self.step, axis, 1))
                    ui.button(f"Step -{axis.upper()}", on_click=partial(self.step, axis, -1))
                ui.button("Home", on_click=self.home).props("color=warning")

            with ui.row().classes("items-center gap-4"):
                ui.number(
                    "Step size (mm)", min=STEP_MIN_MM, max=STEP_MAX_MM, step=1
                ).bind_value(self, "step_mm").classes("w-32")

            with ui.row().classes("items-center gap-4 text-sm"):
                ui.label("Position:")
                for axis in ("x", "y", "z"):
                    ui.label().bind_text_from(
                        robot_state, axis, backward=lambda v, a=axis: f"{a.upper()}={v:g}"
                    )
                ui.label("(unconfirmed)").bind_visibility_from(
                    robot_state, "pending"
                ).classes("text-[var(--cr-muted)]")

            with ui.row().classes("items-center gap-2"):
                ui.number("Read slot", min=0, step=1, format="%d").bind_value(
                    self.session, "read_slot", forward=lambda v: int(v or 0)
                ).classes("w-24")
                ui.button("Read", on_click=self.read)
                ui.switch("Auto-read after move").bind_value(
                    self.session, "auto_read_after_move"
                )
            self.status_label = ui.label("").classes("text-xs text-[var(--cr-muted)]")
