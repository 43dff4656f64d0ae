"""Catalog — every building and store upgrade in the game.

Declaration order is display order, and for store upgrades it is also the
order in which effects are folded (see engine.formulas.compute_multipliers).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StoreUpgradeEffect(Enum):
    """Which formula a store upgrade modifies."""

    CURSOR_MULTI = "cursor_multi"      # Multiply click power and cursor output
    GRANDMA_MULTI = "grandma_multi"    # Multiply grandma output
    FINGERS_BASE = "fingers_base"      # Flat bonus per non-cursor building (additive)
    FINGERS_MULTI = "fingers_multi"    # Multiply the accumulated flat bonus


@dataclass(frozen=True)
class BuildingDef:
    """Definition of a purchasable building."""

    id: str
    name: str
    description: str
    base_cost: float
    # Cookies per second produced by one owned unit
    base_cps: float
    icon: str = ""


@dataclass(frozen=True)
class StoreUpgradeDef:
    """Definition of a one-time store upgrade."""

    id: str
    name: str
    description: str
    base_cost: float
    # Unlock: trigger_id building must be owned at least req_count times
    trigger_id: str
    req_count: int
    effect: StoreUpgradeEffect
    icon: str = ""
    # Interpretation depends on effect
    multiplier_value: float | None = None
    flat_value: float | None = None
    flavor_text: str = ""


# Buildings the formulas treat specially
CURSOR_ID = "cursor"
GRANDMA_ID = "grandma"


def special_role(building_id: str) -> str:
    """Return "cursor", "grandma" or "" for a building id.

    Every formula that special-cases a building goes through here.
    """
    if building_id == CURSOR_ID:
        return "cursor"
    if building_id == GRANDMA_ID:
        return "grandma"
    return ""


# ── Buildings ────────────────────────────────────────────────────

CURSOR = BuildingDef(
    id=CURSOR_ID,
    name="Auto Cursor",
    description="Clicks on its own once every 10 seconds.",
    base_cost=15,
    base_cps=0.1,
    icon="👆",
)

GRANDMA = BuildingDef(
    id=GRANDMA_ID,
    name="Grandma",
    description="A nice grandma to bake more cookies.",
    base_cost=100,
    base_cps=1,
    icon="👵",
)

FARM = BuildingDef(
    id="farm",
    name="Cookie Farm",
    description="Grow cookies straight from the soil.",
    base_cost=1100,
    base_cps=8,
    icon="🚜",
)

BAKERY = BuildingDef(
    id="bakery",
    name="Factory",
    description="Mass production of delicious cookies.",
    base_cost=12000,
    base_cps=47,
    icon="🏭",
)

MINE = BuildingDef(
    id="mine",
    name="Chocolate Mine",
    description="Digs pure chocolate out of the ground.",
    base_cost=130000,
    base_cps=260,
    icon="⛏️",
)

LAB = BuildingDef(
    id="lab",
    name="Alchemy Lab",
    description="Turns gold into cookies.",
    base_cost=1400000,
    base_cps=1400,
    icon="🧪",
)


# ── Cursor upgrades ──────────────────────────────────────────────

REINFORCED_INDEX_FINGER = StoreUpgradeDef(
    id="reinforcedIndexFinger",
    name="Reinforced Index Finger",
    description="The mouse and cursors are twice as efficient.",
    flavor_text="prod prod",
    base_cost=100,
    trigger_id=CURSOR_ID,
    req_count=1,
    effect=StoreUpgradeEffect.CURSOR_MULTI,
    multiplier_value=2,
    icon="☝️",
)

CARPAL_TUNNEL_PREVENTION_CREAM = StoreUpgradeDef(
    id="carpalTunnelPreventionCream",
    name="Carpal Tunnel Prevention Cream",
    description="The mouse and cursors are twice as efficient.",
    flavor_text="it... it hurts to click...",
    base_cost=500,
    trigger_id=CURSOR_ID,
    req_count=1,
    effect=StoreUpgradeEffect.CURSOR_MULTI,
    multiplier_value=2,
    icon="🧴",
)

AMBIDEXTROUS = StoreUpgradeDef(
    id="ambidextrous",
    name="Ambidextrous",
    description="The mouse and cursors are twice as efficient.",
    flavor_text="Look ma, both hands!",
    base_cost=10000,
    trigger_id=CURSOR_ID,
    req_count=10,
    effect=StoreUpgradeEffect.CURSOR_MULTI,
    multiplier_value=2,
    icon="👐",
)

THOUSAND_FINGERS = StoreUpgradeDef(
    id="thousandFingers",
    name="Thousand Fingers",
    description="The mouse and cursors gain +0.1 cookies for each non-cursor building.",
    flavor_text="clickity",
    base_cost=100000,
    trigger_id=CURSOR_ID,
    req_count=25,
    effect=StoreUpgradeEffect.FINGERS_BASE,
    flat_value=0.1,
    icon="🖐️",
)

MILLION_FINGERS = StoreUpgradeDef(
    id="millionFingers",
    name="Million Fingers",
    description="Multiplies the Thousand Fingers gain by 5.",
    flavor_text="clickityclickity",
    base_cost=10000000,
    trigger_id=CURSOR_ID,
    req_count=50,
    effect=StoreUpgradeEffect.FINGERS_MULTI,
    multiplier_value=5,
    icon="🙌",
)


# ── Grandma upgrades ─────────────────────────────────────────────

FORWARDS_FROM_GRANDMA = StoreUpgradeDef(
    id="forwardsFromGrandma",
    name="Forwards from Grandma",
    description="Grandmas are twice as efficient.",
    flavor_text="RE: RE: RE: look at this cookie",
    base_cost=1000,
    trigger_id=GRANDMA_ID,
    req_count=1,
    effect=StoreUpgradeEffect.GRANDMA_MULTI,
    multiplier_value=2,
    icon="👵",
)

STEEL_PLATED_ROLLING_PINS = StoreUpgradeDef(
    id="steelPlatedRollingPins",
    name="Steel-plated Rolling Pins",
    description="Grandmas are twice as efficient.",
    flavor_text="Tough as nails.",
    base_cost=5000,
    trigger_id=GRANDMA_ID,
    req_count=5,
    effect=StoreUpgradeEffect.GRANDMA_MULTI,
    multiplier_value=2,
    icon="👵",
)

LUBRICATED_DENTURES = StoreUpgradeDef(
    id="lubricatedDentures",
    name="Lubricated Dentures",
    description="Grandmas are twice as efficient.",
    flavor_text="For that smooth chew.",
    base_cost=50000,
    trigger_id=GRANDMA_ID,
    req_count=25,
    effect=StoreUpgradeEffect.GRANDMA_MULTI,
    multiplier_value=2,
    icon="👵",
)

PRUNE_JUICE = StoreUpgradeDef(
    id="pruneJuice",
    name="Prune Juice",
    description="Grandmas are twice as efficient.",
    flavor_text="Keeps things flowing.",
    base_cost=5000000,
    trigger_id=GRANDMA_ID,
    req_count=50,
    effect=StoreUpgradeEffect.GRANDMA_MULTI,
    multiplier_value=2,
    icon="👵",
)


# ── Registries ───────────────────────────────────────────────────

ALL_BUILDINGS: dict[str, BuildingDef] = {
    b.id: b
    for b in [
        CURSOR,
        GRANDMA,
        FARM,
        BAKERY,
        MINE,
        LAB,
    ]
}

# FINGERS_BASE must stay ahead of FINGERS_MULTI
ALL_STORE_UPGRADES: dict[str, StoreUpgradeDef] = {
    u.id: u
    for u in [
        REINFORCED_INDEX_FINGER,
        CARPAL_TUNNEL_PREVENTION_CREAM,
        AMBIDEXTROUS,
        THOUSAND_FINGERS,
        MILLION_FINGERS,
        FORWARDS_FROM_GRANDMA,
        STEEL_PLATED_ROLLING_PINS,
        LUBRICATED_DENTURES,
        PRUNE_JUICE,
    ]
}
