"""Biscoito — Main Textual Application.

Wires the game store, the game loop and the UI panels into a playable TUI.
"""

from __future__ import annotations

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Header, Footer
from textual.timer import Timer

from biscoito.data.balance import BALANCE
from biscoito.engine.save import FileStore, PersistenceAdapter
from biscoito.engine.scheduler import GameLoop
from biscoito.engine.sound import SoundSettings
from biscoito.engine.store import GameStore

from biscoito.ui.building_panel import BUILDING_KEYS, BuildingPanel
from biscoito.ui.confirm_screen import ConfirmResetScreen
from biscoito.ui.hud import HUD
from biscoito.ui.upgrade_panel import UPGRADE_KEYS, UpgradePanel


class BiscoitoApp(App):
    """The Biscoito Clicker TUI game application."""

    TITLE = "Biscoito Clicker"
    SUB_TITLE = "Bake. Buy. Bake more."

    CSS = """
    #game-container {
        height: 1fr;
    }
    #hud-panel {
        width: 1fr;
    }
    #building-panel {
        width: 2fr;
    }
    #upgrade-panel {
        width: 2fr;
    }
    """

    BINDINGS = [
        Binding("space", "bake", "Bake", show=True, priority=True),
        Binding("enter", "bake", "Bake", show=False),
        *[
            Binding(k, f"buy_building({i})", f"Building {k}", show=False)
            for i, k in enumerate(BUILDING_KEYS)
        ],
        *[
            Binding(k, f"buy_store_upgrade({i})", f"Upgrade {k.upper()}", show=False)
            for i, k in enumerate(UPGRADE_KEYS)
        ],
        Binding("m", "toggle_sound", "Sound", show=True),
        Binding("plus", "volume(0.1)", "Vol +", show=False),
        Binding("minus", "volume(-0.1)", "Vol -", show=False),
        Binding("ctrl+s", "save_game", "Save", show=True),
        Binding("r", "reset_game", "Reset", show=True),
        Binding("q", "quit_game", "Quit", show=True),
    ]

    def __init__(self, store: GameStore | None = None) -> None:
        super().__init__()
        if store is None:
            kv = FileStore()
            store = GameStore(PersistenceAdapter(kv), SoundSettings(kv, output=self._ring))
        self._store = store
        self._loop = GameLoop(self._store)
        self._tick_timer: Timer | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="game-container"):
            yield HUD(id="hud-panel")
            yield BuildingPanel(id="building-panel")
            yield UpgradePanel(id="upgrade-panel")
        yield Footer()

    def on_mount(self) -> None:
        """Load the save, then start the game loop timer."""
        self._store.load()
        self._loop.start()
        self._tick_timer = self.set_interval(BALANCE.loop.tick_interval_s, self._game_tick)
        self._sync_ui()

    def on_unmount(self) -> None:
        self._loop.stop()
        if self._tick_timer is not None:
            self._tick_timer.stop()

    def _ring(self, sample_index: int, volume: float) -> None:
        """Terminal stand-in for the click samples."""
        if volume > 0:
            self.bell()

    def _game_tick(self) -> None:
        self._loop.pump()
        self._sync_ui()

    def _sync_ui(self) -> None:
        """Push the latest snapshot to all panels."""
        snap = self._store.snapshot()
        self.query_one("#hud-panel", HUD).update_from_snapshot(snap, self._store.sound)
        self.query_one("#building-panel", BuildingPanel).update_from_snapshot(snap)
        self.query_one("#upgrade-panel", UpgradePanel).update_from_snapshot(snap)

    # ── Actions ──────────────────────────────────────

    def action_bake(self) -> None:
        self._store.earn_currency(1)
        self._sync_ui()

    def action_buy_building(self, index: int) -> None:
        buildings = self._store.snapshot().buildings
        if index >= len(buildings):
            return
        b = buildings[index]
        if self._store.purchase_building(b.id):
            self.notify(f"Bought {b.name}!", severity="information", timeout=1)
        else:
            self.notify("Not enough cookies.", severity="error", timeout=1)
        self._sync_ui()

    def action_buy_store_upgrade(self, index: int) -> None:
        upgrades = self._store.snapshot().upgrades
        if index >= len(upgrades):
            return
        u = upgrades[index]
        if self._store.purchase_store_upgrade(u.id):
            self.notify(f"{u.name} unlocked!", severity="information", timeout=1)
        elif u.purchased:
            self.notify("Already purchased.", severity="information", timeout=1)
        elif not u.unlocked:
            self.notify("Still locked.", severity="error", timeout=1)
        else:
            self.notify("Not enough cookies.", severity="error", timeout=1)
        self._sync_ui()

    def action_toggle_sound(self) -> None:
        sound = self._store.sound
        sound.set_enabled(not sound.is_enabled())
        self._sync_ui()

    def action_volume(self, delta: float) -> None:
        sound = self._store.sound
        sound.set_volume(sound.get_volume() + delta)
        sound.play_effect()
        self._sync_ui()

    def action_save_game(self) -> None:
        if self._store.save():
            self.notify("💾 Game saved", severity="information", timeout=2)
        else:
            self.notify("Save failed, will retry.", severity="error", timeout=2)

    def action_reset_game(self) -> None:
        self.push_screen(ConfirmResetScreen(), self._on_reset_confirmed)

    def _on_reset_confirmed(self, confirmed: bool | None) -> None:
        if not confirmed:
            return
        self._store.reset()
        self._sync_ui()
        self.notify("Progress reset.", severity="warning", timeout=3)

    def action_quit_game(self) -> None:
        """Save and quit."""
        self._store.save()
        self.exit()
