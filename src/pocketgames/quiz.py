"""Math Minute: a one-minute arithmetic sprint."""

from __future__ import annotations

import logging
import math
import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from .settings import PreferenceStore
from .sound import SilentSound, SoundEffects

_log = logging.getLogger(__name__)

ROUND_SECONDS = 60
OPERAND_RANGE = (1, 12)


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class RoundOver(ValueError):
    """Raised when an answer arrives after the round has ended."""


@dataclass(frozen=True)
class Problem:
    text: str
    answer: int


def generate_problem(difficulty: Difficulty, rng: random.Random) -> Problem:
    a = rng.randint(*OPERAND_RANGE)
    b = rng.randint(*OPERAND_RANGE)

    if difficulty is Difficulty.MEDIUM and rng.choice((True, False)):
        hi, lo = max(a, b), min(a, b)
        return Problem(f"{hi} - {lo} = ?", hi - lo)
    if difficulty is Difficulty.HARD:
        if rng.choice((True, False)):
            return Problem(f"{a} × {b} = ?", a * b)
        # Built from the product, so the quotient is always a.
        return Problem(f"{a * b} ÷ {b} = ?", a)
    return Problem(f"{a} + {b} = ?", a + b)


def parse_answer(text: str) -> Optional[int]:
    try:
        return int(text.strip())
    except ValueError:
        return None


@dataclass
class RoundClock:
    """Countdown derived from one elapsed-time reading.

    Both the whole-second display and the progress ring come from the same
    ``elapsed()`` so they can never disagree. A new clock reads as stopped
    at full time until ``restart()``.
    """

    duration: float = ROUND_SECONDS
    clock: Callable[[], float] = time.monotonic
    started_at: float = field(init=False)
    stopped_at: Optional[float] = field(init=False)

    def __post_init__(self) -> None:
        self.started_at = self.stopped_at = self.clock()

    def restart(self) -> None:
        self.started_at = self.clock()
        self.stopped_at = None

    def stop(self) -> None:
        if self.stopped_at is None:
            self.stopped_at = min(self.clock(), self.started_at + self.duration)

    @property
    def running(self) -> bool:
        return self.stopped_at is None

    def elapsed(self) -> float:
        now = self.clock() if self.stopped_at is None else self.stopped_at
        return min(self.duration, max(0.0, now - self.started_at))

    @property
    def remaining_seconds(self) -> int:
        return max(0, int(self.duration) - math.floor(self.elapsed()))

    @property
    def progress(self) -> float:
        """1.0 at the start, 0.0 once time is up."""
        if not self.duration:
            return 0.0
        return (self.duration - self.elapsed()) / self.duration

    @property
    def expired(self) -> bool:
        return self.remaining_seconds == 0


@dataclass
class QuizRound:
    difficulty: Difficulty = Difficulty.EASY
    duration: float = ROUND_SECONDS
    sound: SoundEffects = field(default_factory=SilentSound)
    store: Optional[PreferenceStore] = None
    rng: random.Random = field(default_factory=random.Random, repr=False)
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)

    score: int = field(default=0, init=False)
    active: bool = field(default=False, init=False)
    new_best: bool = field(default=False, init=False)
    problem: Problem = field(init=False)
    timer: RoundClock = field(init=False)

    def __post_init__(self) -> None:
        self.difficulty = Difficulty(self.difficulty)
        self.timer = RoundClock(self.duration, self.clock)
        self.problem = generate_problem(self.difficulty, self.rng)

    # ---- lifecycle ----

    def start(self) -> None:
        self.score = 0
        self.new_best = False
        self.active = True
        self.timer.restart()
        self.sound.start_tick()
        self.next_problem()

    def restart(self) -> None:
        """Play again with the same difficulty."""
        if self.active:
            self.end()
        self.start()

    def poll(self) -> None:
        if self.active and self.timer.expired:
            self.end()

    def end(self) -> bool:
        """Finish the round. Only the first call has any effect."""
        if not self.active:
            return False
        self.active = False
        self.timer.stop()
        self.sound.stop_tick()
        if self.store is not None:
            self.new_best = self.store.record_score(self.score)
        _log.info(
            "Quiz round over: difficulty=%s score=%d new_best=%s",
            self.difficulty.value,
            self.score,
            self.new_best,
        )
        return True

    # ---- play ----

    def next_problem(self) -> Problem:
        self.problem = generate_problem(self.difficulty, self.rng)
        return self.problem

    def submit(self, text: str) -> bool:
        self.poll()
        if not self.active:
            raise RoundOver("Round is over")

        correct = parse_answer(text) == self.problem.answer
        if correct:
            self.score += 1
            self.sound.play_correct()
        else:
            self.sound.play_wrong()
        self.next_problem()
        return correct

    @property
    def remaining_seconds(self) -> int:
        return self.timer.remaining_seconds

    @property
    def progress(self) -> float:
        return self.timer.progress
