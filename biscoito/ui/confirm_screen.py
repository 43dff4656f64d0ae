"""Reset confirmation — the yes/no gate in front of GameStore.reset()."""

from __future__ import annotations

from rich.text import Text
from textual.screen import Screen
from textual.widgets import Static, Footer
from textual.binding import Binding


class ConfirmResetScreen(Screen[bool]):
    """Dismisses with True only when the player presses [Y]."""

    BINDINGS = [
        Binding("y", "confirm", "Yes, reset"),
        Binding("n", "cancel", "No"),
        Binding("escape", "cancel", "Back", show=False),
    ]

    DEFAULT_CSS = """
    ConfirmResetScreen {
        background: $surface;
        align: center middle;
    }

    #confirm-text {
        width: auto;
        padding: 2 4;
        border: heavy $error;
    }
    """

    def compose(self):
        text = Text()
        text.append("Are you sure you want to reset all progress?\n\n", style="bold red")
        text.append("Cookies, buildings and upgrades will be lost.\n", style="dim")
        text.append("[Y] Yes   [N] No", style="bold")
        yield Static(text, id="confirm-text")
        yield Footer()

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)
