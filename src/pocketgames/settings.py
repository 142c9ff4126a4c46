"""Player preferences: best quiz score, colour theme and sound toggle."""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError

_log = logging.getLogger(__name__)


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    NEON = "neon"

    @property
    def background(self) -> Tuple[str, ...]:
        """Gradient stops, top-left to bottom-right."""
        return _THEME_COLOURS[self][0]

    @property
    def foreground(self) -> str:
        return _THEME_COLOURS[self][1]

    def describe(self) -> Dict[str, object]:
        return {
            "name": self.value,
            "background": list(self.background),
            "foreground": self.foreground,
        }


_THEME_COLOURS: Dict[Theme, Tuple[Tuple[str, ...], str]] = {
    Theme.LIGHT: (("#d3f1f4", "#e6f0ff"), "#000000"),
    Theme.DARK: (("#000000", "#5856d6"), "#ffffff"),
    Theme.NEON: (("#af52de", "#ff2d55", "#007aff"), "#ffffff"),
}


class Preferences(BaseModel):
    best_score: int = Field(default=0, ge=0)
    theme: Theme = Theme.LIGHT
    sound_enabled: bool = True


class PreferenceStore:
    """Keeps ``Preferences`` in memory and, when given a path, on disk as JSON.

    The file is replaced atomically. A failed save is logged and the new
    values stay in memory, so a full disk never interrupts a game.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else None
        self._lock = threading.Lock()
        self._prefs = self._read()

    def _read(self) -> Preferences:
        if self.path is None or not self.path.exists():
            return Preferences()
        try:
            return Preferences.model_validate_json(self.path.read_text("utf-8"))
        except (OSError, ValidationError) as exc:
            _log.warning("Ignoring unreadable preferences at %s: %s", self.path, exc)
            return Preferences()

    def _write(self, prefs: Preferences) -> None:
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            tmp = Path(tmp_name)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(prefs.model_dump_json(indent=2))
                os.replace(tmp, self.path)
            except BaseException:
                tmp.unlink(missing_ok=True)
                raise
        except OSError as exc:
            _log.warning("Could not save preferences to %s: %s", self.path, exc)

    def _commit(self, prefs: Preferences) -> None:
        # Caller holds the lock.
        self._write(prefs)
        self._prefs = prefs

    def load(self) -> Preferences:
        with self._lock:
            return self._prefs.model_copy()

    def update(
        self,
        theme: Optional[Theme] = None,
        sound_enabled: Optional[bool] = None,
    ) -> Preferences:
        with self._lock:
            changes: Dict[str, object] = {}
            if theme is not None:
                changes["theme"] = Theme(theme)
            if sound_enabled is not None:
                changes["sound_enabled"] = sound_enabled
            if changes:
                self._commit(self._prefs.model_copy(update=changes))
            return self._prefs.model_copy()

    def record_score(self, score: int) -> bool:
        """Keep ``score`` if it beats the stored best. Returns True if it did."""
        with self._lock:
            if score <= self._prefs.best_score:
                return False
            self._commit(self._prefs.model_copy(update={"best_score": score}))
            return True

    def reset_best_score(self) -> None:
        with self._lock:
            self._commit(self._prefs.model_copy(update={"best_score": 0}))
