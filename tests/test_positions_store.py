from __future__ import annotations

import pytest

from cosirob.constants import POSITIONS_STORAGE_KEY
from cosirob.services.positions import NamedPosition, PositionStore, default_positions


@pytest.mark.unit
def test_empty_storage_yields_defaults():
    store = PositionStore({})
    assert [p.name for p in store.all()] == ["Home", "Pick"]
    assert store.get("pick") == NamedPosition(id="pick", name="Pick", x=120, y=45, z=-10)


@pytest.mark.unit
def test_upsert_appends_then_replaces():
    storage: dict = {}
    store = PositionStore(storage)

    store.upsert(NamedPosition(id="place", name="Place", x=1, y=2, z=3))
    store.upsert(NamedPosition(id="place", name="Place bin", x=4, y=5, z=6))

    assert [p.id for p in store.all()] == ["home", "pick", "place"]
    assert store.get("place") == NamedPosition(id="place", name="Place bin", x=4, y=5, z=6)
    assert storage[POSITIONS_STORAGE_KEY][-1] == {
        "id": "place",
        "name": "Place bin",
        "x": 4,
        "y": 5,
        "z": 6,
    }


@pytest.mark.unit
def test_delete_persists_even_when_empty():
    store = PositionStore({})
    for p in default_positions():
        store.delete(p.id)
    assert store.all() == []


@pytest.mark.unit
def test_unreadable_storage_falls_back_to_defaults():
    store = PositionStore({POSITIONS_STORAGE_KEY: [{"name": "missing id"}]})
    assert [p.id for p in store.all()] == ["home", "pick"]


@pytest.mark.unit
def test_new_position_gets_unique_looking_id():
    p = NamedPosition.new("Drop", 1.5, 2, 3)
    assert p.id.isdigit()
    assert (p.name, p.x, p.y, p.z) == ("Drop", 1.5, 2, 3)
