from __future__ import annotations

import logging
from dataclasses import asdict, replace

from nicegui import app as ng_app
from nicegui import ui

from cosirob.services.positions import NamedPosition, PositionStore
from cosirob.services.session import RobotSession

COLUMNS = [
    {"name": "name", "label": "Name", "field": "name", "align": "left"},
    {"name": "x", "label": "X", "field": "x"},
    {"name": "y", "label": "Y", "field": "y"},
    {"name": "z", "label": "Z", "field": "z"},
    {"name": "action", "label": "Action", "field": "id"},
]


class PositionsPage:
    """Named positions list with go-to, edit and delete."""

    def __init__(self, session: RobotSession) -> None:
        self.session = session
        self._store: PositionStore | None = None
        self.table: ui.table | None = None
        self.dialog: ui.dialog | None = None
        self.editing: NamedPosition | None = None
        self.name_input: ui.input | None = None
        self.coord_inputs: dict[str, ui.number] = {}

    @property
    def store(self) -> PositionStore:
        # app.storage.general is only available once the app is running
        if self._store is None:
            self._store = PositionStore(ng_app.storage.general)
        return self._store

    def _refresh(self) -> None:
        if self.table is not None:
            self.table.rows = [asdict(p) for p in self.store.all()]

    async def go(self, position_id: str) -> None:
        pos = self.store.get(position_id)
        if pos is None:
            return
        res = await self.session.go_to(pos.x, pos.y, pos.z)
        if res.error is not None:
            ui.notify(f"Failed to send move: {res.error.message}", color="negative")
        else:
            logging.info("Moved to %s (%s, %s, %s)", pos.name, pos.x, pos.y, pos.z)

    def edit(self, position: NamedPosition | None) -> None:
        self.editing = position or NamedPosition.new()
        if self.name_input:
            self.name_input.value = self.editing.name
        for axis, field in self.coord_inputs.items():
            field.value = getattr(self.editing, axis)
        if self.dialog:
            self.dialog.open()

    def save_edit(self) -> None:
        if self.editing is None:
            return
        updated = replace(
            self.editing,
            name=(self.name_input.value if self.name_input else "") or "",
            **{axis: float(f.value or 0) for axis, f in self.coord_inputs.items()},
        )
        self.store.upsert(updated)
        self.editing = None
        if self.dialog:
            self.dialog.close()
        self._refresh()

    def delete(self, position_id: str) -> None:
        self.store.delete(position_id)
        self._refresh()

    def _on_action(self, e) -> None:
        action, position_id = e.args
        if action == "edit":
            self.edit(self.store.get(position_id))
        elif action == "delete":
            self.delete(position_id)

    def build(self) -> None:
        with ui.card().classes("w-full"):
            with ui.row().classes("items-center gap-2"):
                ui.label("Positions List").classes("text-md font-medium")
                ui.button("Add", on_click=lambda: self.edit(None)).props("dense")
            self.table = ui.table(columns=COLUMNS, rows=[], row_key="id").classes("w-full")
            self.table.add_slot(
                "body-cell-action",
                """
<q-td :props="props">
  <q-btn dense flat label="Go" @click="() => $parent.$emit('go', props.row.id)" />
  <q-btn dense flat label="Edit" @click="() => $parent.$emit('row_action', ['edit', props.row.id])" />
  <q-btn dense flat color="negative" label="Delete" @click="() => $parent.$emit('row_action', ['delete', props.row.id])" />
</q-td>
""",
            )
            self.table.on("go", lambda e: self.go(e.args))
            self.table.on("row_action", self._on_action)
            self._refresh()

        with ui.dialog() as self.dialog, ui.card():
            ui.label("Position").classes("text-md font-medium")
            self.name_input = ui.input("Name")
            for axis in ("x", "y", "z"):
                self.coord_inputs[axis] = ui.number(axis.upper(), value=0)
            with ui.row():
                ui.button("Save", on_click=self.save_edit)
                ui.button("Cancel", on_click=self.dialog.close).props("flat")
