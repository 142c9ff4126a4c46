"""Core rules for classic 3x3 tic-tac-toe."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Sequence, Tuple


class Player(str, Enum):
    X = "X"
    O = "O"

    @property
    def opposite(self) -> "Player":
        return Player.O if self is Player.X else Player.X


class Outcome(str, Enum):
    IN_PROGRESS = "in_progress"
    WIN = "win"
    DRAW = "draw"


EMPTY = " "

Board = Tuple[str, ...]

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class InvalidMove(ValueError):
    """Raised when a move cannot be applied to the current state."""


# ---------- Board helpers ----------


def empty_board() -> Board:
    return (EMPTY,) * 9


def empty_cells(board: Sequence[str]) -> List[int]:
    return [i for i, c in enumerate(board) if c == EMPTY]


def check_win(board: Sequence[str], symbol: str) -> bool:
    """True if any of the eight lines is fully held by ``symbol``."""
    return any(all(board[i] == symbol for i in line) for line in WINNING_LINES)


# ---------- Game ----------


@dataclass(frozen=True)
class GameState:
    # Server-internal: 'X', 'O', or ' ' (space) for empty
    board: Board = field(default_factory=empty_board)
    current_player: Player = Player.X
    outcome: Outcome = Outcome.IN_PROGRESS
    winner: Optional[Player] = None

    @property
    def terminal(self) -> bool:
        return self.outcome is not Outcome.IN_PROGRESS


def new_game() -> GameState:
    """Empty board, X to move."""
    return GameState()


def apply_move(state: GameState, position: int, player: Player) -> GameState:
    """Place ``player`` at ``position`` and return the resulting state.

    The given state is left untouched, so a rejected move needs no rollback.
    """
    if state.terminal:
        raise InvalidMove("Game already finished")
    if not 0 <= position <= 8:
        raise InvalidMove(f"Position {position} is off the board")
    try:
        player = Player(player)
    except ValueError as exc:
        raise InvalidMove(f"Unknown player {player!r}") from exc
    if player is not state.current_player:
        raise InvalidMove(f"It is not {player.value}'s turn")
    if state.board[position] != EMPTY:
        raise InvalidMove("Cell already occupied")

    cells = list(state.board)
    cells[position] = player.value
    board = tuple(cells)

    if check_win(board, player.value):
        return replace(state, board=board, outcome=Outcome.WIN, winner=player)
    if not empty_cells(board):
        return replace(state, board=board, outcome=Outcome.DRAW)
    return replace(state, board=board, current_player=player.opposite)


def outcome_message(state: GameState) -> str:
    if state.outcome is Outcome.WIN and state.winner is not None:
        return f"{state.winner.value} Wins!"
    if state.outcome is Outcome.DRAW:
        return "It's a Draw!"
    return ""


# ---------- Scores ----------


@dataclass
class ScoreBoard:
    x_wins: int = 0
    o_wins: int = 0
    draws: int = 0

    def record(self, state: GameState) -> None:
        """Count a finished game; in-progress states are ignored."""
        if state.outcome is Outcome.WIN:
            if state.winner is Player.X:
                self.x_wins += 1
            else:
                self.o_wins += 1
        elif state.outcome is Outcome.DRAW:
            self.draws += 1
