"""Pocket Games package exposing tic-tac-toe, the Math Minute quiz, and the web application."""

from .ai import HeuristicAI, select_ai_move
from .game import GameState, Player, apply_move, check_win, new_game
from .quiz import QuizRound
from .ui import app

__all__ = [
    "GameState",
    "HeuristicAI",
    "Player",
    "QuizRound",
    "app",
    "apply_move",
    "check_win",
    "new_game",
    "select_ai_move",
]
