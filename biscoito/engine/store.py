"""Game store — every state transition: clicks, purchases, production, reset.

All mutations run under one lock so a tick and a purchase never interleave
half-way through a read-modify-write of the cookie balance.
"""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Mapping
from dataclasses import dataclass

from biscoito.data.catalog import (
    ALL_BUILDINGS,
    ALL_STORE_UPGRADES,
    BuildingDef,
    StoreUpgradeDef,
)
from biscoito.engine.formulas import (
    building_cost,
    building_rate,
    click_power,
    compute_multipliers,
    is_unlocked,
    total_cps,
)
from biscoito.engine.game_state import GameState, new_game_state
from biscoito.engine.save import PersistenceAdapter
from biscoito.engine.sound import SilentSound, SoundPlayer

logger = logging.getLogger(__name__)


# ── Read-only views for the presentation layer ───────────────────


@dataclass(frozen=True)
class BuildingView:
    id: str
    name: str
    description: str
    icon: str
    count: int
    cost: int
    affordable: bool
    cps_each: float


@dataclass(frozen=True)
class UpgradeView:
    id: str
    name: str
    description: str
    flavor_text: str
    icon: str
    cost: float
    trigger_id: str
    req_count: int
    purchased: bool
    unlocked: bool
    affordable: bool

    @property
    def buyable(self) -> bool:
        return self.unlocked and self.affordable and not self.purchased


@dataclass(frozen=True)
class GameSnapshot:
    cookies: float
    lifetime_cookies: float
    cps: float
    click_power: float
    buildings: tuple[BuildingView, ...]
    upgrades: tuple[UpgradeView, ...]
    last_save_time: float


# ── Store ────────────────────────────────────────────────────────


class GameStore:
    """Owns the GameState and is the only thing allowed to change it."""

    def __init__(
        self,
        persistence: PersistenceAdapter,
        sound: SoundPlayer | None = None,
        buildings: Mapping[str, BuildingDef] | None = None,
        upgrades: Mapping[str, StoreUpgradeDef] | None = None,
    ) -> None:
        self._persistence = persistence
        self.sound: SoundPlayer = sound if sound is not None else SilentSound()
        self._buildings = ALL_BUILDINGS if buildings is None else buildings
        self._upgrades = ALL_STORE_UPGRADES if upgrades is None else upgrades
        self._lock = threading.RLock()
        self._state = new_game_state(dict(self._buildings))
        self.loaded = False

    @property
    def state(self) -> GameState:
        """The live state. Read it, never write it."""
        return self._state

    # ── Lifecycle ────────────────────────────────────────

    def load(self) -> None:
        """Hydrate from storage, falling back to defaults."""
        with self._lock:
            snapshot = self._persistence.load()
            if snapshot is not None:
                self._state = self._persistence.merge(snapshot, self._buildings, self._upgrades)
            else:
                self._state = new_game_state(dict(self._buildings))
            self.loaded = True

    def save(self) -> bool:
        """Persist the current state. Skipped until load() has run."""
        with self._lock:
            if not self.loaded:
                return False
            return self._persistence.save(self._state)

    def reset(self) -> None:
        """Wipe all progress and the stored save.

        Asks nothing; callers confirm with the player first.
        """
        with self._lock:
            self._state = new_game_state(dict(self._buildings))
            self._persistence.erase()
        logger.info("Progress reset")

    # ── Derived values ───────────────────────────────────

    def click_power(self) -> float:
        with self._lock:
            return click_power(self._state.counts(), self._state.purchased_upgrades, self._upgrades)

    def cps(self) -> float:
        with self._lock:
            return total_cps(
                self._state.counts(),
                self._state.purchased_upgrades,
                self._buildings,
                self._upgrades,
            )

    # ── Transitions ──────────────────────────────────────

    def earn_currency(self, raw_amount: float = 1.0) -> float:
        """Manual click. Returns cookies earned."""
        with self._lock:
            if not math.isfinite(raw_amount) or raw_amount <= 0:
                return 0.0
            earned = raw_amount * self.click_power()
            self._state.cookies += earned
            self._state.lifetime_cookies += earned
        self.sound.play_effect()
        return earned

    def purchase_building(self, building_id: str) -> bool:
        """Buy one unit. Returns True if successful."""
        with self._lock:
            bdef = self._buildings.get(building_id)
            owned = self._state.building(building_id)
            if bdef is None or owned is None:
                return False

            cost = building_cost(bdef.base_cost, owned.count)
            if self._state.cookies < cost:
                return False

            self._state.cookies -= cost
            owned.count += 1
            self.save()
        self.sound.play_effect()
        return True

    def purchase_store_upgrade(self, upgrade_id: str) -> bool:
        """Buy a one-time store upgrade. Returns True if successful."""
        with self._lock:
            udef = self._upgrades.get(upgrade_id)
            if udef is None or self._state.is_purchased(upgrade_id):
                return False
            if not is_unlocked(udef, self._state.counts()):
                return False
            if self._state.cookies < udef.base_cost:
                return False

            self._state.cookies -= udef.base_cost
            self._state.purchased_upgrades.add(upgrade_id)
            self.save()
        self.sound.play_effect()
        return True

    def apply_production(self, elapsed_s: float) -> float:
        """Add elapsed_s seconds of building output. Returns cookies earned."""
        with self._lock:
            rate = self.cps()
            if rate <= 0 or elapsed_s <= 0:
                return 0.0
            earned = rate * elapsed_s
            self._state.cookies += earned
            self._state.lifetime_cookies += earned
            return earned

    # ── Snapshot ─────────────────────────────────────────

    def snapshot(self) -> GameSnapshot:
        """Immutable picture of everything the UI draws."""
        with self._lock:
            s = self._state
            counts = s.counts()
            mults = compute_multipliers(s.purchased_upgrades, self._upgrades)

            buildings = []
            for bid, bdef in self._buildings.items():
                count = counts.get(bid, 0)
                cost = building_cost(bdef.base_cost, count)
                buildings.append(BuildingView(
                    id=bid,
                    name=bdef.name,
                    description=bdef.description,
                    icon=bdef.icon,
                    count=count,
                    cost=cost,
                    affordable=s.cookies >= cost,
                    cps_each=building_rate(bdef, counts, mults),
                ))

            upgrades = []
            for uid, udef in self._upgrades.items():
                upgrades.append(UpgradeView(
                    id=uid,
                    name=udef.name,
                    description=udef.description,
                    flavor_text=udef.flavor_text,
                    icon=udef.icon,
                    cost=udef.base_cost,
                    trigger_id=udef.trigger_id,
                    req_count=udef.req_count,
                    purchased=s.is_purchased(uid),
                    unlocked=is_unlocked(udef, counts),
                    affordable=s.cookies >= udef.base_cost,
                ))

            return GameSnapshot(
                cookies=s.cookies,
                lifetime_cookies=s.lifetime_cookies,
                cps=self.cps(),
                click_power=self.click_power(),
                buildings=tuple(buildings),
                upgrades=tuple(upgrades),
                last_save_time=self._persistence.last_save_time,
            )
