"""Greedy one-ply tic-tac-toe AI: win if possible, else block, else random.

The policy never looks further ahead than the next placement, so an
opponent who sets up two threats at once (a fork) will beat it.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .game import EMPTY, WINNING_LINES, GameState, Player, empty_cells


class NoLegalMove(ValueError):
    """Raised when the AI is asked to move on a full board."""


def find_completion(board: Sequence[str], symbol: str) -> Optional[int]:
    """Empty index of the first line holding two ``symbol`` marks and a gap.

    Lines are scanned rows, columns, then diagonals; the first hit wins.
    """
    for line in WINNING_LINES:
        trio = [board[i] for i in line]
        if trio.count(symbol) == 2 and trio.count(EMPTY) == 1:
            return next(i for i in line if board[i] == EMPTY)
    return None


def select_ai_move(
    board: Sequence[str],
    ai_symbol: str,
    rng: Optional[random.Random] = None,
) -> int:
    moves = empty_cells(board)
    if not moves:
        raise NoLegalMove("No empty cell left on the board")

    me = Player(ai_symbol)

    # 1) Complete our own line
    win = find_completion(board, me.value)
    if win is not None:
        return win

    # 2) Stop the opponent completing theirs
    block = find_completion(board, me.opposite.value)
    if block is not None:
        return block

    # 3) Anything else
    return (rng or random.Random()).choice(moves)


@dataclass
class HeuristicAI:
    """AI opponent held by a game session.

    ``choose(state)`` returns the cell index to play for ``player``.
    """

    player: Player = Player.O
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def choose(self, state: GameState) -> int:
        if state.terminal:
            raise NoLegalMove("Game already finished")
        if state.current_player is not self.player:
            raise ValueError("It is not this AI player's turn")
        return select_ai_move(state.board, self.player, self.rng)
