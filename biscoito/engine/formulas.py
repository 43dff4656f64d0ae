"""Formula engine — building costs, upgrade multipliers, click power and CPS.

Everything here is pure: functions read building counts and the set of
purchased store upgrades and never touch a GameState directly.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from biscoito.data.balance import BALANCE
from biscoito.data.catalog import (
    ALL_BUILDINGS,
    ALL_STORE_UPGRADES,
    BuildingDef,
    StoreUpgradeDef,
    StoreUpgradeEffect,
    special_role,
)


@dataclass(frozen=True)
class Multipliers:
    """Aggregate effect of every purchased store upgrade."""

    click: float = 1.0
    cursor: float = 1.0
    grandma: float = 1.0
    # Extra cookies per non-cursor building, added to clicks and to each cursor
    flat_per_building: float = 0.0


def building_cost(base_cost: float, owned: int) -> int:
    """Price of the next unit: ceil(base_cost * growth ^ owned)."""
    return math.ceil(base_cost * BALANCE.economy.cost_growth ** owned)


def compute_multipliers(
    purchased: Iterable[str],
    upgrades: Mapping[str, StoreUpgradeDef] | None = None,
) -> Multipliers:
    """Fold purchased upgrades in catalog order.

    FINGERS_MULTI scales whatever FINGERS_BASE accumulated before it, so the
    catalog declaration order decides the result.
    """
    upgrades = ALL_STORE_UPGRADES if upgrades is None else upgrades
    owned = set(purchased)

    click = 1.0
    cursor = 1.0
    grandma = 1.0
    flat = 0.0

    for uid, udef in upgrades.items():
        if uid not in owned:
            continue

        if udef.effect == StoreUpgradeEffect.CURSOR_MULTI:
            if udef.multiplier_value:
                click *= udef.multiplier_value
                cursor *= udef.multiplier_value
        elif udef.effect == StoreUpgradeEffect.GRANDMA_MULTI:
            if udef.multiplier_value:
                grandma *= udef.multiplier_value
        elif udef.effect == StoreUpgradeEffect.FINGERS_BASE:
            if udef.flat_value:
                flat += udef.flat_value
        elif udef.effect == StoreUpgradeEffect.FINGERS_MULTI:
            if udef.multiplier_value:
                flat *= udef.multiplier_value
        # Anything else has no effect

    return Multipliers(click=click, cursor=cursor, grandma=grandma, flat_per_building=flat)


def non_cursor_count(counts: Mapping[str, int]) -> int:
    """Total owned buildings, cursors excluded."""
    return sum(n for bid, n in counts.items() if special_role(bid) != "cursor")


def click_power(
    counts: Mapping[str, int],
    purchased: Iterable[str],
    upgrades: Mapping[str, StoreUpgradeDef] | None = None,
) -> float:
    """Cookies granted by one manual click."""
    mults = compute_multipliers(purchased, upgrades)
    return BALANCE.economy.base_click * mults.click + mults.flat_per_building * non_cursor_count(counts)


def building_rate(building: BuildingDef, counts: Mapping[str, int], mults: Multipliers) -> float:
    """Effective cookies per second for ONE unit of a building."""
    role = special_role(building.id)
    if role == "cursor":
        return building.base_cps * mults.cursor + mults.flat_per_building * non_cursor_count(counts)
    if role == "grandma":
        return building.base_cps * mults.grandma
    return building.base_cps


def total_cps(
    counts: Mapping[str, int],
    purchased: Iterable[str],
    buildings: Mapping[str, BuildingDef] | None = None,
    upgrades: Mapping[str, StoreUpgradeDef] | None = None,
) -> float:
    """Cookies per second from every owned building."""
    buildings = ALL_BUILDINGS if buildings is None else buildings
    mults = compute_multipliers(purchased, upgrades)

    total = 0.0
    for bid, bdef in buildings.items():
        owned = counts.get(bid, 0)
        if owned <= 0:
            continue
        total += building_rate(bdef, counts, mults) * owned
    return total


def is_unlocked(upgrade: StoreUpgradeDef, counts: Mapping[str, int]) -> bool:
    """True once the trigger building count reaches the requirement."""
    return counts.get(upgrade.trigger_id, 0) >= upgrade.req_count


def format_number(n: float) -> str:
    """Short display format: 12.5, 3k, 1.2k, 4.5M."""
    if n < 0:
        return f"-{format_number(-n)}"

    for threshold, suffix in reversed(BALANCE.economy.suffixes):
        if n >= threshold:
            value = n / threshold
            if value == int(value):
                return f"{value:.0f}{suffix}"
            return f"{value:.1f}{suffix}"

    rounded = round(n, 1)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.1f}"
