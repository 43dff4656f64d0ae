"""HUD widget — cookie counter, rates, sound and save status."""

from __future__ import annotations

import time

from rich.text import Text
from textual.widget import Widget
from textual.reactive import reactive

from biscoito.data.catalog import CURSOR_ID
from biscoito.engine.formulas import format_number
from biscoito.engine.sound import SoundPlayer
from biscoito.engine.store import GameSnapshot


class HUD(Widget):
    """Heads-up display showing the bakery totals."""

    DEFAULT_CSS = """
    HUD {
        width: 100%;
        height: 100%;
        padding: 1;
    }
    """

    cookies: reactive[str] = reactive("0")
    per_second: reactive[str] = reactive("0")
    per_click: reactive[str] = reactive("1")
    lifetime: reactive[str] = reactive("0")
    cursors: reactive[int] = reactive(0)
    sound_text: reactive[str] = reactive("on 50%")
    saved_text: reactive[str] = reactive("")

    def render(self) -> Text:
        text = Text()
        text.append("  === Cookie Master ===\n\n", style="bold yellow")

        text.append("  🍪 ", style="bold")
        text.append(f"{self.cookies} cookies\n", style="bold yellow")
        text.append("  per second: ", style="dim")
        text.append(f"{self.per_second}\n", style="green")
        text.append("  per click: ", style="dim")
        text.append(f"{self.per_click}\n", style="green")
        text.append("  baked all time: ", style="dim")
        text.append(f"{self.lifetime}\n", style="green")

        text.append("\n")
        if self.cursors:
            # Cursor ring, capped so it fits the panel
            text.append(f"  {'👆' * min(self.cursors, 12)}\n\n")

        text.append("  Sound: ", style="dim")
        text.append(f"{self.sound_text}\n", style="cyan")
        if self.saved_text:
            text.append(f"  💾 {self.saved_text}\n", style="dim green")

        text.append("\n")
        text.append("  [Space] Bake  [1-6] Buy building\n", style="dim italic")
        text.append("  [A-L] Buy store upgrade\n", style="dim italic")
        text.append("  [M] Sound  [+/-] Volume\n", style="dim italic")
        text.append("  [R] Reset  [Q] Save & quit\n", style="dim italic")

        return text

    def update_from_snapshot(self, snap: GameSnapshot, sound: SoundPlayer) -> None:
        """Sync HUD with the latest snapshot."""
        self.cookies = format_number(int(snap.cookies))
        self.per_second = format_number(snap.cps)
        self.per_click = format_number(snap.click_power)
        self.lifetime = format_number(int(snap.lifetime_cookies))
        self.cursors = next((b.count for b in snap.buildings if b.id == CURSOR_ID), 0)

        state = "on" if sound.is_enabled() else "off"
        self.sound_text = f"{state} {sound.get_volume() * 100:.0f}%"

        if snap.last_save_time:
            ago = max(0, int(time.time() - snap.last_save_time))
            self.saved_text = f"Game saved {ago}s ago"
        else:
            self.saved_text = ""
