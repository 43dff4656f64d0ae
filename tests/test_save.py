"""Tests for save/load and the catalog merge."""

import json
import logging

from biscoito.data.balance import BALANCE
from biscoito.data.catalog import ALL_BUILDINGS, ALL_STORE_UPGRADES
from biscoito.engine.game_state import GameState, new_game_state
from biscoito.engine.save import (
    FileStore,
    MemoryStore,
    PersistenceAdapter,
    SaveSnapshot,
)

KEY = BALANCE.persistence.save_key


class BrokenStore(MemoryStore):
    """Every write fails, like a full disk."""

    def set(self, key: str, value: str) -> None:
        raise OSError("No space left on device")


def _played_state() -> GameState:
    state = new_game_state()
    state.cookies = 123.4
    state.lifetime_cookies = 5000.25
    state.building("cursor").count = 12
    state.building("grandma").count = 5
    state.building("lab").count = 1
    state.purchased_upgrades = {"reinforcedIndexFinger", "forwardsFromGrandma"}
    return state


# ── save ─────────────────────────────────────────────────────────


def test_save_writes_record_layout():
    kv = MemoryStore()
    adapter = PersistenceAdapter(kv, clock=lambda: 1000.0)
    assert adapter.save(_played_state())

    record = json.loads(kv.data[KEY])
    assert set(record) == {"cookies", "lifetimeCookies", "startTime", "upgrades", "storeUpgrades"}
    assert record["cookies"] == 123.4
    assert record["lifetimeCookies"] == 5000.25
    assert record["upgrades"][0] == {"id": "cursor", "count": 12}
    assert len(record["upgrades"]) == len(ALL_BUILDINGS)
    # Ids only, in catalog order
    assert record["storeUpgrades"] == ["reinforcedIndexFinger", "forwardsFromGrandma"]


def test_save_updates_last_save_time():
    adapter = PersistenceAdapter(MemoryStore(), clock=lambda: 1234.5)
    state = new_game_state()
    adapter.save(state)
    assert adapter.last_save_time == 1234.5
    assert state.last_save_time == 1234.5


def test_failed_save_is_skipped_not_raised(caplog):
    adapter = PersistenceAdapter(BrokenStore())
    with caplog.at_level(logging.WARNING):
        assert not adapter.save(new_game_state())
    assert adapter.last_save_time == 0.0
    assert "Save skipped" in caplog.text


# ── load ─────────────────────────────────────────────────────────


def test_load_without_save_returns_none():
    assert PersistenceAdapter(MemoryStore()).load() is None


def test_corrupt_save_returns_none_and_logs(caplog):
    adapter = PersistenceAdapter(MemoryStore({KEY: "{definitely not json"}))
    with caplog.at_level(logging.WARNING):
        assert adapter.load() is None
    assert "Corrupt save" in caplog.text


def test_out_of_range_numbers_count_as_corrupt(caplog):
    record = '{"cookies": 1, "upgrades": [{"id": "cursor", "count": Infinity}]}'
    with caplog.at_level(logging.WARNING):
        assert PersistenceAdapter(MemoryStore({KEY: record})).load() is None
    assert "Corrupt save" in caplog.text

    record = '{"upgrades": [{"id": "grandma", "count": 1e400}]}'
    assert PersistenceAdapter(MemoryStore({KEY: record})).load() is None


def test_deeply_nested_save_counts_as_corrupt():
    record = "[" * 100_000 + "]" * 100_000
    assert PersistenceAdapter(MemoryStore({KEY: record})).load() is None


def test_wrong_shape_returns_none():
    assert PersistenceAdapter(MemoryStore({KEY: "[1, 2, 3]"})).load() is None
    bad_entry = json.dumps({"cookies": 1, "upgrades": [{"id": "cursor"}]})
    assert PersistenceAdapter(MemoryStore({KEY: bad_entry})).load() is None


def test_load_reads_legacy_field():
    kv = MemoryStore({KEY: json.dumps({
        "cookies": 10,
        "lifetimeCookies": 10,
        "upgrades": [],
        "cursorUpgrades": ["reinforcedIndexFinger"],
    })})
    snapshot = PersistenceAdapter(kv).load()
    assert snapshot.store_upgrades == ["reinforcedIndexFinger"]


def test_primary_field_wins_over_legacy():
    kv = MemoryStore({KEY: json.dumps({
        "storeUpgrades": ["ambidextrous"],
        "cursorUpgrades": ["reinforcedIndexFinger"],
    })})
    assert PersistenceAdapter(kv).load().store_upgrades == ["ambidextrous"]


def test_missing_currency_defaults_to_zero():
    kv = MemoryStore({KEY: json.dumps({"upgrades": []})})
    snapshot = PersistenceAdapter(kv).load()
    assert snapshot.cookies == 0
    assert snapshot.lifetime_cookies == 0


# ── merge ────────────────────────────────────────────────────────


def test_round_trip_restores_state():
    kv = MemoryStore()
    adapter = PersistenceAdapter(kv)
    state = _played_state()
    adapter.save(state)
    restored = adapter.merge(adapter.load())
    assert restored == state
    assert abs(restored.start_time - state.start_time) < 0.001


def test_merge_drops_unknown_building_and_defaults_missing():
    snapshot = SaveSnapshot(building_counts={"cursor": 3, "portal": 7})
    state = PersistenceAdapter(MemoryStore()).merge(snapshot)
    assert [b.id for b in state.buildings] == list(ALL_BUILDINGS)
    assert state.count_of("cursor") == 3
    assert state.count_of("lab") == 0
    assert state.building("portal") is None


def test_merge_drops_unknown_store_upgrades():
    snapshot = SaveSnapshot(store_upgrades=["reinforcedIndexFinger", "goldenCookie"])
    state = PersistenceAdapter(MemoryStore()).merge(snapshot)
    assert state.purchased_upgrades == {"reinforcedIndexFinger"}


def test_merge_against_smaller_catalog():
    buildings = {bid: ALL_BUILDINGS[bid] for bid in ("cursor", "grandma")}
    upgrades = {"pruneJuice": ALL_STORE_UPGRADES["pruneJuice"]}
    snapshot = SaveSnapshot(
        cookies=5,
        building_counts={"cursor": 1, "grandma": 2, "farm": 3},
        store_upgrades=["pruneJuice", "ambidextrous"],
    )
    state = PersistenceAdapter(MemoryStore()).merge(snapshot, buildings, upgrades)
    assert state.counts() == {"cursor": 1, "grandma": 2}
    assert state.purchased_upgrades == {"pruneJuice"}
    assert state.cookies == 5


# ── erase / file store ───────────────────────────────────────────


def test_erase_removes_record():
    kv = MemoryStore()
    adapter = PersistenceAdapter(kv)
    adapter.save(new_game_state())
    adapter.erase()
    assert KEY not in kv.data
    assert adapter.load() is None


def test_file_store_round_trip(tmp_path):
    store = FileStore(tmp_path / "saves")
    assert store.get("k") is None
    store.set("k", "value")
    assert store.get("k") == "value"
    store.delete("k")
    assert store.get("k") is None
    store.delete("k")  # deleting twice is fine


def test_adapter_over_file_store(tmp_path):
    adapter = PersistenceAdapter(FileStore(tmp_path))
    state = _played_state()
    adapter.save(state)
    assert (tmp_path / f"{KEY}.json").exists()
    assert adapter.merge(adapter.load()) == state


def test_undecodable_save_file_starts_fresh(tmp_path, caplog):
    (tmp_path / f"{KEY}.json").write_bytes(b'{"cookies": \xff\xfe}')
    with caplog.at_level(logging.WARNING):
        assert PersistenceAdapter(FileStore(tmp_path)).load() is None
    assert "Corrupt save" in caplog.text
