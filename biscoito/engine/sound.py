"""Sound settings — click effects and the enabled/volume preferences.

The game core only ever sees the SoundPlayer interface; it never reaches for
a process-wide audio object.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Protocol

from biscoito.data.balance import BALANCE
from biscoito.engine.save import KeyValueStore

logger = logging.getLogger(__name__)


class SoundPlayer(Protocol):
    """Fire-and-forget audio collaborator."""

    def play_effect(self) -> None: ...

    def is_enabled(self) -> bool: ...

    def set_enabled(self, enabled: bool) -> None: ...

    def get_volume(self) -> float: ...

    def set_volume(self, volume: float) -> None: ...


class SilentSound:
    """Keeps settings in memory and never makes a sound."""

    def __init__(self) -> None:
        self._enabled = BALANCE.sound.enabled
        self._volume = BALANCE.sound.volume
        self.plays = 0

    def play_effect(self) -> None:
        self.plays += 1

    def is_enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)

    def get_volume(self) -> float:
        return self._volume

    def set_volume(self, volume: float) -> None:
        self._volume = max(0.0, min(1.0, float(volume)))


class SoundSettings:
    """Persisted sound preferences that cycle through the click samples.

    ``output`` receives (sample_index, volume) for each effect actually played;
    the TUI passes a callable that rings the terminal bell.
    """

    def __init__(
        self,
        store: KeyValueStore,
        output: Callable[[int, float], None] | None = None,
        key: str = BALANCE.persistence.sound_settings_key,
    ) -> None:
        self._store = store
        self._output = output
        self._key = key
        self._enabled = BALANCE.sound.enabled
        self._volume = BALANCE.sound.volume
        self._sample_index = 0
        self._load()

    def _load(self) -> None:
        try:
            raw = self._store.get(self._key)
            if raw is None:
                return
            data = json.loads(raw)
            self._enabled = bool(data.get("enabled", BALANCE.sound.enabled))
            self._volume = max(0.0, min(1.0, float(data.get("volume", BALANCE.sound.volume))))
        except Exception as exc:
            logger.warning("Failed to load sound settings: %s", exc)

    def _persist(self) -> None:
        payload = json.dumps({"enabled": self._enabled, "volume": self._volume})
        try:
            self._store.set(self._key, payload)
        except OSError as exc:
            logger.warning("Failed to save sound settings: %s", exc)

    @property
    def sample_index(self) -> int:
        return self._sample_index

    def play_effect(self) -> None:
        if not self._enabled or self._output is None:
            return
        self._output(self._sample_index, self._volume)
        self._sample_index = (self._sample_index + 1) % BALANCE.sound.click_samples

    def is_enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)
        self._persist()

    def get_volume(self) -> float:
        return self._volume

    def set_volume(self, volume: float) -> None:
        self._volume = max(0.0, min(1.0, float(volume)))
        self._persist()
