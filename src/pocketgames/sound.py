"""Sound cues for the quiz, passed in rather than looked up globally."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Protocol


CORRECT = "correct"
WRONG = "wrong"
TICK_START = "tick-start"
TICK_STOP = "tick-stop"


class SoundEffects(Protocol):
    def play_correct(self) -> None: ...

    def play_wrong(self) -> None: ...

    def start_tick(self) -> None: ...

    def stop_tick(self) -> None: ...


class SilentSound:
    """Does nothing. Handy for tests and headless rounds."""

    def play_correct(self) -> None:
        pass

    def play_wrong(self) -> None:
        pass

    def start_tick(self) -> None:
        pass

    def stop_tick(self) -> None:
        pass


@dataclass
class CueQueue:
    """Collects cue names for the browser to play on its next poll.

    Muting drops new cues. ``ticking`` follows the round, not the speaker:
    muting mid-round queues a ``tick-stop`` and unmuting queues a fresh
    ``tick-start``.
    """

    enabled: bool = True
    ticking: bool = False
    _pending: List[str] = field(default_factory=list, repr=False)

    def _push(self, cue: str) -> None:
        if self.enabled:
            self._pending.append(cue)

    def play_correct(self) -> None:
        self._push(CORRECT)

    def play_wrong(self) -> None:
        self._push(WRONG)

    def start_tick(self) -> None:
        self.ticking = True
        self._push(TICK_START)

    def stop_tick(self) -> None:
        self.ticking = False
        self._push(TICK_STOP)

    def set_enabled(self, enabled: bool) -> None:
        if enabled == self.enabled:
            return
        if self.ticking:
            self._pending.append(TICK_START if enabled else TICK_STOP)
        self.enabled = enabled

    def drain(self) -> List[str]:
        cues, self._pending = self._pending, []
        return cues
