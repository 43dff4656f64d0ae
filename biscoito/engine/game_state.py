"""Game state — single source of truth for the bakery."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from biscoito.data.catalog import ALL_BUILDINGS, BuildingDef


@dataclass
class BuildingState:
    """How many of one building the player owns."""

    id: str
    count: int = 0


def default_buildings(catalog: dict[str, BuildingDef] | None = None) -> list[BuildingState]:
    """One zero-count BuildingState per catalog building, in catalog order."""
    catalog = ALL_BUILDINGS if catalog is None else catalog
    return [BuildingState(id=bid) for bid in catalog]


@dataclass
class GameState:
    """Complete mutable state for one save."""

    # ── Currency ─────────────────────────────────────────
    cookies: float = 0.0
    lifetime_cookies: float = 0.0  # never reduced by spending

    # ── Owned buildings, catalog order ───────────────────
    buildings: list[BuildingState] = field(default_factory=default_buildings)

    # ── Purchased store upgrade ids ──────────────────────
    purchased_upgrades: set[str] = field(default_factory=set)

    # ── Timestamps (informational, not part of equality) ─
    start_time: float = field(default_factory=time.time, compare=False)
    last_save_time: float = field(default=0.0, compare=False)

    def building(self, building_id: str) -> BuildingState | None:
        for b in self.buildings:
            if b.id == building_id:
                return b
        return None

    def count_of(self, building_id: str) -> int:
        """Owned count for a building; 0 for ids not tracked."""
        b = self.building(building_id)
        return b.count if b is not None else 0

    def counts(self) -> dict[str, int]:
        """Building id → owned count, in catalog order."""
        return {b.id: b.count for b in self.buildings}

    def is_purchased(self, upgrade_id: str) -> bool:
        return upgrade_id in self.purchased_upgrades


def new_game_state(catalog: dict[str, BuildingDef] | None = None) -> GameState:
    """Fresh defaults: no cookies, no buildings, no upgrades."""
    return GameState(buildings=default_buildings(catalog))
