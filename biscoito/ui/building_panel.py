"""Building panel — every building with its count, price and output."""

from __future__ import annotations

from rich.text import Text
from textual.widget import Widget
from textual.reactive import reactive

from biscoito.engine.formulas import format_number
from biscoito.engine.store import GameSnapshot

BUILDING_KEYS = "123456789"


class BuildingPanel(Widget):
    """Lists buildings in catalog order with affordability colouring."""

    DEFAULT_CSS = """
    BuildingPanel {
        width: 100%;
        height: 100%;
        padding: 1;
        overflow-y: auto;
    }
    """

    # Serialized row data for reactivity
    rows_text: reactive[str] = reactive("")

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._snap: GameSnapshot | None = None

    def render(self) -> Text:
        text = Text()
        text.append("  ═══ Buildings ═══\n\n", style="bold magenta")

        if self._snap is None:
            return text

        for key, b in zip(BUILDING_KEYS, self._snap.buildings):
            name_style = "bold green" if b.affordable else "bold red"
            text.append(f"  [{key}] {b.icon} ", style="bold")
            text.append(f"{b.name} ", style=name_style)
            text.append(f"x{b.count}\n", style="dim")
            text.append(f"      {b.description}\n", style="dim italic")
            if b.count:
                text.append(
                    f"      {format_number(b.cps_each)}/s each, {format_number(b.cps_each * b.count)}/s total\n",
                    style="cyan",
                )
            cost_style = "green" if b.affordable else "red"
            text.append(f"      Cost: {format_number(b.cost)}\n\n", style=cost_style)

        return text

    def update_from_snapshot(self, snap: GameSnapshot) -> None:
        self._snap = snap
        self.rows_text = "|".join(
            f"{b.id}:{b.count}:{int(b.affordable)}" for b in snap.buildings
        )
