"""Biscoito Web — Flask JSON API that wraps the game store.

The game loop is driven lazily: each API request catches up on elapsed
ticks before acting and returning the current state.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from flask import Flask, jsonify, request

from biscoito.data.balance import BALANCE
from biscoito.engine.formulas import format_number
from biscoito.engine.save import FileStore, KeyValueStore, PersistenceAdapter
from biscoito.engine.scheduler import GameLoop
from biscoito.engine.sound import SoundSettings
from biscoito.engine.store import GameStore

# ---------------------------------------------------------------------------
# Flask app
# ---------------------------------------------------------------------------

app = Flask(__name__)

# ---------------------------------------------------------------------------
# In-memory game session (single-player)
# ---------------------------------------------------------------------------

_lock = threading.Lock()
_kv: KeyValueStore | None = None
_clock: Callable[[], float] = time.monotonic
_store: GameStore | None = None
_loop: GameLoop | None = None


def configure(kv: KeyValueStore | None = None, clock: Callable[[], float] = time.monotonic) -> None:
    """Swap the storage backend / clock and drop the current session."""
    global _kv, _clock, _store, _loop
    with _lock:
        if _loop is not None:
            _loop.stop()
        _kv = kv
        _clock = clock
        _store = None
        _loop = None


def _ensure_game() -> None:
    """Load the save and start the loop if not yet done."""
    global _store, _loop
    if _store is not None:
        return
    kv = _kv if _kv is not None else FileStore()
    # The browser plays the sounds itself; settings are still kept here
    _store = GameStore(PersistenceAdapter(kv), SoundSettings(kv))
    _store.load()
    _loop = GameLoop(_store, clock=_clock, max_catch_up_s=BALANCE.loop.max_catch_up_s)
    _loop.start()


def _do_ticks() -> None:
    """Catch up game ticks since the last call."""
    assert _loop is not None
    _loop.pump()


def _state_json() -> dict:
    """Build the JSON blob sent to the frontend."""
    assert _store is not None
    snap = _store.snapshot()
    sound = _store.sound
    return {
        "cookies": format_number(int(snap.cookies)),
        "cookies_raw": snap.cookies,
        "lifetime_cookies_raw": snap.lifetime_cookies,
        "cps": format_number(snap.cps),
        "cps_raw": snap.cps,
        "click_power": format_number(snap.click_power),
        "click_power_raw": snap.click_power,
        "buildings": [
            {
                "id": b.id,
                "name": b.name,
                "description": b.description,
                "icon": b.icon,
                "count": b.count,
                "cost": format_number(b.cost),
                "cost_raw": b.cost,
                "can_afford": b.affordable,
                "cps_each": b.cps_each,
            }
            for b in snap.buildings
        ],
        "store_upgrades": [
            {
                "id": u.id,
                "name": u.name,
                "description": u.description,
                "flavor_text": u.flavor_text,
                "icon": u.icon,
                "cost": format_number(u.cost),
                "cost_raw": u.cost,
                "trigger_id": u.trigger_id,
                "req_count": u.req_count,
                "purchased": u.purchased,
                "unlocked": u.unlocked,
                "can_afford": u.affordable,
                "buyable": u.buyable,
            }
            for u in snap.upgrades
        ],
        "sound": {"enabled": sound.is_enabled(), "volume": sound.get_volume()},
        "last_save_time": snap.last_save_time,
    }


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.route("/api/state")
def api_state():
    with _lock:
        _ensure_game()
        _do_ticks()
        return jsonify(_state_json())


@app.route("/api/action/click", methods=["POST"])
def action_click():
    with _lock:
        _ensure_game()
        assert _store is not None
        _do_ticks()
        earned = _store.earn_currency(1)
        data = _state_json()
        data["earned"] = earned
        return jsonify(data)


@app.route("/api/action/buy/<building_id>", methods=["POST"])
def action_buy(building_id: str):
    with _lock:
        _ensure_game()
        assert _store is not None
        _do_ticks()
        result = _store.purchase_building(building_id)
        data = _state_json()
        data["purchase_result"] = result
        return jsonify(data)


@app.route("/api/action/store/<upgrade_id>", methods=["POST"])
def action_buy_store_upgrade(upgrade_id: str):
    with _lock:
        _ensure_game()
        assert _store is not None
        _do_ticks()
        result = _store.purchase_store_upgrade(upgrade_id)
        data = _state_json()
        data["purchase_result"] = result
        return jsonify(data)


@app.route("/api/action/reset", methods=["POST"])
def action_reset():
    """Reset everything. The body must carry {"confirm": true}."""
    with _lock:
        _ensure_game()
        assert _store is not None
        body = request.get_json(silent=True) or {}
        if not isinstance(body, dict) or body.get("confirm") is not True:
            return jsonify({"error": "Reset needs confirmation"}), 400
        _store.reset()
        data = _state_json()
        data["reset"] = True
        return jsonify(data)


@app.route("/api/action/save", methods=["POST"])
def action_save():
    with _lock:
        _ensure_game()
        assert _store is not None
        _do_ticks()
        return jsonify({"saved": _store.save()})


@app.route("/api/settings/sound", methods=["GET", "POST"])
def settings_sound():
    with _lock:
        _ensure_game()
        assert _store is not None
        sound = _store.sound
        if request.method == "POST":
            body = request.get_json(silent=True) or {}
            if not isinstance(body, dict):
                return jsonify({"error": "body must be a JSON object"}), 400
            if "enabled" in body:
                sound.set_enabled(bool(body["enabled"]))
            if "volume" in body:
                try:
                    sound.set_volume(float(body["volume"]))
                except (TypeError, ValueError):
                    return jsonify({"error": "volume must be a number"}), 400
        return jsonify({"enabled": sound.is_enabled(), "volume": sound.get_volume()})


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def run_server(host: str = "127.0.0.1", port: int = 5000, debug: bool = False) -> None:
    """Start the Flask development server."""
    app.run(host=host, port=port, debug=debug, use_reloader=False)
