"""Store upgrade panel — one-time upgrades, locked until their trigger is met."""

from __future__ import annotations

from rich.text import Text
from textual.widget import Widget
from textual.reactive import reactive

from biscoito.data.catalog import ALL_BUILDINGS
from biscoito.engine.formulas import format_number
from biscoito.engine.store import GameSnapshot

UPGRADE_KEYS = "asdfghjkl"


class UpgradePanel(Widget):
    """Displays store upgrades with lock, cost and purchase status."""

    DEFAULT_CSS = """
    UpgradePanel {
        width: 100%;
        height: 100%;
        padding: 1;
        overflow-y: auto;
    }
    """

    offerings_text: reactive[str] = reactive("")

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._snap: GameSnapshot | None = None

    def render(self) -> Text:
        text = Text()
        text.append("  ═══ Upgrades ═══\n\n", style="bold magenta")

        if self._snap is None:
            return text

        for key, u in zip(UPGRADE_KEYS, self._snap.upgrades):
            text.append(f"  [{key.upper()}] ", style="bold")

            if u.purchased:
                text.append(f"✅ {u.name}\n", style="dim green")
                continue

            if not u.unlocked:
                trigger = ALL_BUILDINGS.get(u.trigger_id)
                trigger_name = trigger.name.lower() if trigger else "buildings"
                text.append(f"🔒 {u.name}\n", style="dim")
                text.append(f"      Locked: needs {u.req_count} {trigger_name}.\n", style="red")
                continue

            name_style = "bold green" if u.affordable else "bold red"
            text.append(f"{u.icon} {u.name}\n", style=name_style)
            text.append(f"      {u.description}\n", style="dim italic")
            if u.flavor_text:
                text.append(f'      "{u.flavor_text}"\n', style="dim")
            cost_style = "green" if u.affordable else "red"
            text.append(f"      Cost: {format_number(u.cost)}\n", style=cost_style)

        return text

    def update_from_snapshot(self, snap: GameSnapshot) -> None:
        self._snap = snap
        self.offerings_text = "|".join(
            f"{u.id}:{int(u.purchased)}:{int(u.unlocked)}:{int(u.affordable)}"
            for u in snap.upgrades
        )
