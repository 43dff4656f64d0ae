"""Balance constants — all tuning knobs in one place.

Building costs follow: ceil(base_cost * (cost_growth ^ owned_count))
Store upgrades have a fixed cost.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class EconomyBalance:
    """Tuning for cookie generation and spending."""

    # Cookies granted by a single manual click (before multipliers)
    base_click: float = 1.0

    # Building cost scaling: cost = ceil(base * (growth ^ owned))
    cost_growth: float = 1.15

    # Short number formatting thresholds
    suffixes: tuple[tuple[float, str], ...] = (
        (1e3, "k"),
        (1e6, "M"),
    )


@dataclass(frozen=True)
class LoopBalance:
    """Timer cadences for the production tick and autosave."""

    tick_interval_s: float = 0.1
    autosave_interval_s: float = 10.0
    # Lazily driven hosts (web) never catch up more than this in one go
    max_catch_up_s: float = 60.0


@dataclass(frozen=True)
class PersistenceBalance:
    """Where and under which keys state is stored."""

    save_key: str = "biscoito_clicker_save_v3"
    # Older saves stored the purchased store upgrades under this name
    legacy_store_upgrades_field: str = "cursorUpgrades"
    sound_settings_key: str = "biscoito_sound_settings"
    save_dir: Path = field(default_factory=lambda: Path.home() / ".biscoito")


@dataclass(frozen=True)
class SoundBalance:
    """Defaults for the click sound settings."""

    enabled: bool = True
    volume: float = 0.5
    click_samples: int = 7


@dataclass(frozen=True)
class GameBalance:
    """Top-level container for all balance constants."""

    economy: EconomyBalance = field(default_factory=EconomyBalance)
    loop: LoopBalance = field(default_factory=LoopBalance)
    persistence: PersistenceBalance = field(default_factory=PersistenceBalance)
    sound: SoundBalance = field(default_factory=SoundBalance)


# Singleton — import this everywhere
BALANCE = GameBalance()
