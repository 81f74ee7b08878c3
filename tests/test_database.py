import logging

import pytest

from worldgraph.database import TripleStore
from worldgraph.errors import NotFoundError, StoreError
from worldgraph.models import Triple


def test_get_returns_inserted_triple(store):
    store.insert("woman", "king", "queen")

    assert store.get("woman", "king") == Triple(a="woman", b="king", c="queen")


def test_get_missing_pair_raises_not_found(store):
    store.insert("woman", "king", "queen")

    with pytest.raises(NotFoundError):
        store.get("king", "woman")


def test_get_returns_first_row_when_duplicates_exist(store):
    store.insert("Water", "Fire", "Steam")
    store.insert("Water", "Fire", "Vapour")

    assert store.get("Water", "Fire").c == "Steam"
    assert store.count() == 2


def test_identical_insert_is_tolerated(store, caplog):
    caplog.set_level(logging.INFO, logger="worldgraph.database.store")

    assert store.insert("Water", "Fire", "Steam") is True
    assert store.insert("Water", "Fire", "Steam") is False

    assert store.list_all() == [Triple(a="Water", b="Fire", c="Steam")]
    messages = [record.getMessage() for record in caplog.records]
    assert messages == [
        "inserted: Water + Fire = Steam",
        "already stored: Water + Fire = Steam",
    ]


def test_find_by_operand_matches_any_column_in_insertion_order(store):
    store.insert("Water", "Fire", "Steam")
    store.insert("Wind", "Earth", "Dust")
    store.insert("Steam", "Earth", "Geyser")
    store.insert("Water", "Earth", "Mud")

    assert [t.c for t in store.find_by_operand("Earth")] == ["Dust", "Geyser", "Mud"]
    assert [t.c for t in store.find_by_operand("Steam")] == ["Steam", "Geyser"]
    assert store.find_by_operand("Lava") == []


def test_list_all_returns_everything(store):
    facts = [("b", "a", "c"), ("y", "x", "z"), ("q", "p", "undefined")]
    for fact in facts:
        store.insert(*fact)

    assert [(t.a, t.b, t.c) for t in store.list_all()] == facts


def test_file_backed_store_persists_between_connections(tmp_path):
    db_path = tmp_path / "nested" / "db.sqlite"
    first = TripleStore(str(db_path))
    first.insert("Water", "Fire", "Steam")
    first.close()

    second = TripleStore(str(db_path))
    try:
        assert second.get("Water", "Fire").c == "Steam"
    finally:
        second.close()


def test_sqlite_errors_surface_as_store_error(store):
    store.cursor.execute("DROP TABLE triple")

    with pytest.raises(StoreError):
        store.get("a", "b")
    with pytest.raises(StoreError):
        store.insert("a", "b", "c")
    with pytest.raises(StoreError):
        store.find_by_operand("a")
    with pytest.raises(StoreError):
        store.list_all()


def test_unopenable_path_raises_store_error(tmp_path):
    directory = tmp_path / "not_a_file"
    directory.mkdir()

    with pytest.raises(StoreError):
        TripleStore(str(directory))
