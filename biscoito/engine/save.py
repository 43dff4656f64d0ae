"""Save/load — persists the bakery to a string-keyed store between sessions.

The record layout is shared with the browser version of the game:

    {
      "cookies": 12.5,
      "lifetimeCookies": 140.0,
      "startTime": 1700000000000,
      "upgrades": [{"id": "cursor", "count": 3}, ...],
      "storeUpgrades": ["reinforcedIndexFinger", ...]
    }

Older saves kept the purchased list under "cursorUpgrades".
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from biscoito.data.balance import BALANCE
from biscoito.data.catalog import (
    ALL_BUILDINGS,
    ALL_STORE_UPGRADES,
    BuildingDef,
    StoreUpgradeDef,
)
from biscoito.engine.game_state import BuildingState, GameState

logger = logging.getLogger(__name__)


# ── Key-value stores ─────────────────────────────────────────────


class KeyValueStore(Protocol):
    """Durable string-keyed storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class FileStore:
    """One file per key inside a directory (default ~/.biscoito)."""

    def __init__(self, directory: Path | None = None) -> None:
        self.directory = directory if directory is not None else BALANCE.persistence.save_dir

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(value, encoding="utf-8")

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class MemoryStore:
    """In-process store, used by tests and the web server."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


# ── Snapshot ─────────────────────────────────────────────────────


@dataclass
class SaveSnapshot:
    """A parsed save record, not yet reconciled with the catalog."""

    cookies: float = 0.0
    lifetime_cookies: float = 0.0
    start_time: float = 0.0  # epoch ms
    building_counts: dict[str, int] = field(default_factory=dict)
    store_upgrades: list[str] = field(default_factory=list)


def _state_to_dict(state: GameState) -> dict:
    purchased = [uid for uid in ALL_STORE_UPGRADES if uid in state.purchased_upgrades]
    # Ids outside the catalog go last
    purchased += sorted(state.purchased_upgrades - set(purchased))
    return {
        "cookies": state.cookies,
        "lifetimeCookies": state.lifetime_cookies,
        "startTime": int(state.start_time * 1000),
        "upgrades": [{"id": b.id, "count": b.count} for b in state.buildings],
        "storeUpgrades": purchased,
    }


def _dict_to_snapshot(d: dict) -> SaveSnapshot:
    if not isinstance(d, dict):
        raise TypeError(f"save record must be an object, got {type(d).__name__}")

    counts: dict[str, int] = {}
    for entry in d.get("upgrades") or []:
        counts[str(entry["id"])] = max(0, int(entry["count"]))

    purchased = d.get("storeUpgrades")
    if purchased is None:
        purchased = d.get(BALANCE.persistence.legacy_store_upgrades_field)
    if purchased is None:
        purchased = []
    if not isinstance(purchased, list):
        raise TypeError("purchased store upgrades must be a list")

    return SaveSnapshot(
        cookies=max(0.0, float(d.get("cookies") or 0.0)),
        lifetime_cookies=max(0.0, float(d.get("lifetimeCookies") or 0.0)),
        start_time=float(d.get("startTime") or 0.0),
        building_counts=counts,
        store_upgrades=[str(uid) for uid in purchased],
    )


# ── Adapter ──────────────────────────────────────────────────────


class PersistenceAdapter:
    """Reads, writes and reconciles the single save record."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str = BALANCE.persistence.save_key,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.key = key
        self._clock = clock
        self.last_save_time: float = 0.0

    def save(self, state: GameState) -> bool:
        """Persist the state. Returns False (and logs) if the write failed."""
        now = self._clock()
        payload = json.dumps(_state_to_dict(state))
        try:
            self.store.set(self.key, payload)
        except OSError as exc:
            logger.warning("Save skipped, will retry: %s", exc)
            return False
        self.last_save_time = now
        state.last_save_time = now
        return True

    def load(self) -> SaveSnapshot | None:
        """Read the save record.  Returns None if none exists or it is corrupt."""
        try:
            raw = self.store.get(self.key)
            if raw is None:
                return None
            return _dict_to_snapshot(json.loads(raw))
        except Exception as exc:
            logger.warning("Corrupt save %r, starting fresh: %s", self.key, exc)
            return None

    def merge(
        self,
        snapshot: SaveSnapshot,
        buildings: Mapping[str, BuildingDef] | None = None,
        upgrades: Mapping[str, StoreUpgradeDef] | None = None,
    ) -> GameState:
        """Lay a snapshot over the catalog.

        Buildings and upgrades missing from the save get defaults; entries the
        catalog no longer has are dropped.
        """
        buildings = ALL_BUILDINGS if buildings is None else buildings
        upgrades = ALL_STORE_UPGRADES if upgrades is None else upgrades

        saved_ids = set(snapshot.store_upgrades)
        state = GameState(
            cookies=snapshot.cookies,
            lifetime_cookies=snapshot.lifetime_cookies,
            buildings=[
                BuildingState(id=bid, count=snapshot.building_counts.get(bid, 0))
                for bid in buildings
            ],
            purchased_upgrades={uid for uid in upgrades if uid in saved_ids},
        )
        if snapshot.start_time:
            state.start_time = snapshot.start_time / 1000.0
        return state

    def erase(self) -> None:
        """Remove the save record entirely."""
        try:
            self.store.delete(self.key)
        except OSError as exc:
            logger.warning("Could not erase save %r: %s", self.key, exc)
        self.last_save_time = 0.0
