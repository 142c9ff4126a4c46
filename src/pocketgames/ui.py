"""FastAPI-powered web UI for tic-tac-toe and Math Minute."""

from __future__ import annotations

import logging
import os
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Literal, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .ai import HeuristicAI, NoLegalMove
from .game import (
    GameState,
    InvalidMove,
    Player,
    ScoreBoard,
    apply_move,
    new_game,
    outcome_message,
)
from .quiz import Difficulty, QuizRound, RoundOver
from .settings import PreferenceStore, Theme
from .sound import CueQueue

_log = logging.getLogger(__name__)

Mode = Literal["pvp", "ai"]

AI_PLAYER = Player.O
AI_THINK_DELAY: float = 0.5
QUIZ_CLOCK: Callable[[], float] = time.monotonic
SESSION_TTL_SECONDS = 60 * 30  # 30 minutes

app = FastAPI(
    title="Pocket Games",
    description="Tic-tac-toe and a one-minute arithmetic quiz in the browser",
)


def _open_store() -> PreferenceStore:
    path = os.environ.get("POCKETGAMES_PREFS_PATH")
    return PreferenceStore(path or None)


PREFERENCES = _open_store()


# ---------- Tic-tac-toe sessions ----------


@dataclass
class TicTacToeSession:
    """A board, its scores and (in AI mode) the AI opponent."""

    state: GameState
    mode: Mode
    ai: Optional[HeuristicAI]
    rng: random.Random = field(default_factory=random.Random, repr=False)
    scores: ScoreBoard = field(default_factory=ScoreBoard)
    move_log: List[Dict[str, object]] = field(default_factory=list)
    ai_pending: bool = False
    # Bumped on every reset so a queued AI move can tell it is stale.
    generation: int = 0
    last_seen: float = field(default_factory=lambda: time.time())
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def reset(self) -> None:
        self.state = new_game()
        self.move_log = []
        self.ai_pending = False
        self.generation += 1


SESSIONS: Dict[str, TicTacToeSession] = {}


def _cleanup_sessions() -> None:
    """Forget games and quizzes nobody has touched for a while."""

    cutoff = time.time() - SESSION_TTL_SECONDS
    for game_id, session in list(SESSIONS.items()):
        if session.last_seen <= cutoff:
            SESSIONS.pop(game_id, None)
    for quiz_id, quiz in list(QUIZZES.items()):
        if quiz.last_seen <= cutoff:
            with quiz.lock:
                _cancel_quiz_timer(quiz)
                quiz.game.end()
            QUIZZES.pop(quiz_id, None)


class NewGameRequest(BaseModel):
    """Request payload for starting a tic-tac-toe game."""

    mode: Mode = Field(default="pvp", description="'pvp' or 'ai'")
    seed: Optional[int] = Field(
        default=None, description="Seed for the AI's random fallback"
    )


class MoveRequest(BaseModel):
    position: int = Field(ge=0, le=8)


class ModeRequest(BaseModel):
    mode: Mode


def _make_ai(mode: Mode, rng: random.Random) -> Optional[HeuristicAI]:
    if mode != "ai":
        return None
    return HeuristicAI(player=AI_PLAYER, rng=rng)


def _create_session(
    mode: Mode, seed: Optional[int] = None
) -> Tuple[str, TicTacToeSession]:
    _cleanup_sessions()
    rng = random.Random(seed)
    session = TicTacToeSession(
        state=new_game(), mode=mode, ai=_make_ai(mode, rng), rng=rng
    )
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    _log.info("Created tic-tac-toe game %s (mode=%s)", session_id, mode)
    return session_id, session


def _get_session(game_id: str) -> TicTacToeSession:
    try:
        session = SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc
    session.last_seen = time.time()
    return session


def _place(session: TicTacToeSession, position: int) -> None:
    """Apply a move for the player to move; caller holds the lock."""
    player = session.state.current_player
    session.state = apply_move(session.state, position, player)
    session.move_log.append({"player": player.value, "position": position})
    if session.state.terminal:
        session.scores.record(session.state)
        _log.info("Tic-tac-toe game over: %s", outcome_message(session.state))


def _run_ai_turn(game_id: str, generation: int) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, AI_THINK_DELAY))

    with session.lock:
        if session.generation != generation:
            return
        try:
            if not session.ai:
                return
            state = session.state
            if state.terminal or state.current_player is not session.ai.player:
                return
            try:
                position = session.ai.choose(state)
                _place(session, position)
            except (InvalidMove, NoLegalMove) as exc:
                _log.warning("AI skipped its turn in game %s: %s", game_id, exc)
        finally:
            session.ai_pending = False


def _serialize_session(game_id: str, session: TicTacToeSession) -> Dict[str, object]:
    with session.lock:
        state = session.state
        result: Dict[str, object] = {
            "id": game_id,
            "mode": session.mode,
            "board": [c if c in ("X", "O") else "" for c in state.board],
            "currentPlayer": state.current_player.value,
            "outcome": state.outcome.value,
            "winner": state.winner.value if state.winner else None,
            "gameOver": state.terminal,
            "message": outcome_message(state),
            "scores": {
                "xWins": session.scores.x_wins,
                "oWins": session.scores.o_wins,
                "draws": session.scores.draws,
            },
            "moveLog": list(session.move_log),
            "aiPending": session.ai_pending,
        }
        if session.move_log:
            result["lastMove"] = session.move_log[-1]
        return result


def _apply_player_move(
    game_id: str,
    session: TicTacToeSession,
    position: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with session.lock:
        state = session.state
        if state.terminal:
            raise HTTPException(status_code=400, detail="Game already finished")

        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        if session.ai and state.current_player is session.ai.player:
            raise HTTPException(status_code=400, detail="Waiting for the AI to move")

        try:
            _place(session, position)
        except InvalidMove as exc:
            _log.debug("Rejected move %d in game %s: %s", position, game_id, exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        should_schedule_ai = bool(
            session.ai
            and not session.state.terminal
            and session.state.current_player is session.ai.player
        )
        if should_schedule_ai:
            session.ai_pending = True
        generation = session.generation

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id, generation)


@app.post("/api/tictactoe")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.mode, request.seed)
    return _serialize_session(game_id, session)


@app.get("/api/tictactoe/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/tictactoe/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.position, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/tictactoe/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.reset()
    return _serialize_session(game_id, session)


@app.post("/api/tictactoe/{game_id}/mode")
def change_mode(game_id: str, request: ModeRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.reset()
        if request.mode != session.mode:
            session.mode = request.mode
            session.ai = _make_ai(request.mode, session.rng)
            _log.info("Game %s switched to mode=%s", game_id, request.mode)
    return _serialize_session(game_id, session)


# ---------- Math Minute sessions ----------


@dataclass
class QuizSession:
    game: QuizRound
    cues: CueQueue
    # Bumped on every start so a pending end timer can tell it is stale.
    round_id: int = 0
    end_timer: Optional[threading.Timer] = field(default=None, repr=False)
    last_seen: float = field(default_factory=lambda: time.time())
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


QUIZZES: Dict[str, QuizSession] = {}


class NewQuizRequest(BaseModel):
    difficulty: Difficulty = Difficulty.EASY
    seed: Optional[int] = None


class AnswerRequest(BaseModel):
    answer: str = Field(max_length=32)


def _get_quiz(quiz_id: str) -> QuizSession:
    try:
        quiz = QUIZZES[quiz_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Quiz not found") from exc
    quiz.last_seen = time.time()
    return quiz


def _cancel_quiz_timer(quiz: QuizSession) -> None:
    if quiz.end_timer is not None:
        quiz.end_timer.cancel()
        quiz.end_timer = None


def _expire_quiz(quiz_id: str, round_id: int) -> None:
    """End a round whose time is up even if no client is polling."""

    quiz = QUIZZES.get(quiz_id)
    if not quiz:
        return
    with quiz.lock:
        if quiz.round_id != round_id:
            return
        quiz.end_timer = None
        quiz.game.end()


def _start_round(quiz_id: str, quiz: QuizSession) -> None:
    """(Re)start the round and arm its end timer; caller holds the lock."""

    _cancel_quiz_timer(quiz)
    quiz.game.restart()
    quiz.round_id += 1
    timer = threading.Timer(quiz.game.duration, _expire_quiz, (quiz_id, quiz.round_id))
    timer.daemon = True
    quiz.end_timer = timer
    timer.start()


def _settle_quizzes() -> None:
    """Close out rounds whose countdown has already reached zero."""

    for quiz in list(QUIZZES.values()):
        with quiz.lock:
            quiz.game.poll()


def _serialize_quiz(
    quiz_id: str, quiz: QuizSession, correct: Optional[bool] = None
) -> Dict[str, object]:
    # Caller holds the lock.
    rnd = quiz.game
    result: Dict[str, object] = {
        "id": quiz_id,
        "difficulty": rnd.difficulty.value,
        "active": rnd.active,
        "score": rnd.score,
        "bestScore": PREFERENCES.load().best_score,
        "newBest": rnd.new_best,
        "problem": rnd.problem.text,
        "remainingSeconds": rnd.remaining_seconds,
        "progress": round(rnd.progress, 4),
        "cues": quiz.cues.drain(),
    }
    if correct is not None:
        result["correct"] = correct
    return result


@app.post("/api/quiz")
def create_quiz(request: NewQuizRequest) -> Dict[str, object]:
    _cleanup_sessions()
    cues = CueQueue(enabled=PREFERENCES.load().sound_enabled)
    rnd = QuizRound(
        difficulty=request.difficulty,
        sound=cues,
        store=PREFERENCES,
        rng=random.Random(request.seed),
        clock=QUIZ_CLOCK,
    )
    quiz = QuizSession(game=rnd, cues=cues)
    quiz_id = uuid.uuid4().hex
    QUIZZES[quiz_id] = quiz
    with quiz.lock:
        _start_round(quiz_id, quiz)
        _log.info("Started quiz %s (difficulty=%s)", quiz_id, rnd.difficulty.value)
        return _serialize_quiz(quiz_id, quiz)


@app.get("/api/quiz/{quiz_id}")
def get_quiz(quiz_id: str) -> Dict[str, object]:
    quiz = _get_quiz(quiz_id)
    with quiz.lock:
        quiz.game.poll()
        return _serialize_quiz(quiz_id, quiz)


@app.post("/api/quiz/{quiz_id}/answer")
def answer_quiz(quiz_id: str, request: AnswerRequest) -> Dict[str, object]:
    quiz = _get_quiz(quiz_id)
    with quiz.lock:
        try:
            correct = quiz.game.submit(request.answer)
        except RoundOver as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _serialize_quiz(quiz_id, quiz, correct)


@app.post("/api/quiz/{quiz_id}/end")
def end_quiz(quiz_id: str) -> Dict[str, object]:
    quiz = _get_quiz(quiz_id)
    with quiz.lock:
        _cancel_quiz_timer(quiz)
        quiz.game.end()
        return _serialize_quiz(quiz_id, quiz)


@app.post("/api/quiz/{quiz_id}/restart")
def restart_quiz(quiz_id: str) -> Dict[str, object]:
    quiz = _get_quiz(quiz_id)
    with quiz.lock:
        _start_round(quiz_id, quiz)
        return _serialize_quiz(quiz_id, quiz)


# ---------- Preferences ----------


class SettingsUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    theme: Optional[Theme] = None
    sound_enabled: Optional[bool] = Field(default=None, alias="soundEnabled")


def _serialize_settings() -> Dict[str, object]:
    _settle_quizzes()
    prefs = PREFERENCES.load()
    return {
        "bestScore": prefs.best_score,
        "theme": prefs.theme.describe(),
        "soundEnabled": prefs.sound_enabled,
    }


@app.get("/api/settings")
def get_settings() -> Dict[str, object]:
    return _serialize_settings()


@app.put("/api/settings")
def update_settings(request: SettingsUpdate) -> Dict[str, object]:
    prefs = PREFERENCES.update(theme=request.theme, sound_enabled=request.sound_enabled)
    if request.sound_enabled is not None:
        for quiz in list(QUIZZES.values()):
            with quiz.lock:
                quiz.cues.set_enabled(prefs.sound_enabled)
    return _serialize_settings()


@app.post("/api/settings/reset-best-score")
def reset_best_score() -> Dict[str, object]:
    _settle_quizzes()
    PREFERENCES.reset_best_score()
    _log.info("Best quiz score reset")
    return _serialize_settings()


@app.get("/api/themes")
def list_themes() -> List[Dict[str, object]]:
    return [theme.describe() for theme in Theme]


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Pocket Games</title>
    <style>
      :root {
        --bg: linear-gradient(135deg, #d3f1f4, #e6f0ff);
        --fg: #000000;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      * {
        box-sizing: border-box;
      }
      body {
        margin: 0;
        min-height: 100vh;
        background: var(--bg);
        color: var(--fg);
        display: flex;
        justify-content: center;
        padding: 2rem 1rem 3rem;
      }
      main {
        width: min(760px, 100%);
      }
      h1 {
        text-align: center;
        margin: 0 0 1.5rem;
      }
      nav {
        display: flex;
        gap: 0.75rem;
        justify-content: center;
        margin-bottom: 1.5rem;
      }
      button,
      select,
      input {
        font: inherit;
        padding: 0.5rem 0.9rem;
        border-radius: 10px;
        border: 1px solid rgba(60, 70, 120, 0.25);
        background: white;
        cursor: pointer;
      }
      button.primary {
        background: #1e63ff;
        color: white;
        border: none;
      }
      button.danger {
        background: #e0393e;
        color: white;
        border: none;
      }
      section[hidden] {
        display: none;
      }
      .grid {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 12px;
        max-width: 360px;
        margin: 1rem auto;
      }
      .cell {
        height: 100px;
        font-size: 3.5rem;
        font-weight: 700;
        color: white;
        background: rgba(30, 99, 255, 0.7);
        border-radius: 10px;
      }
      .scores,
      .row {
        display: flex;
        gap: 2rem;
        justify-content: center;
        align-items: center;
        margin: 1rem 0;
        text-align: center;
      }
      .message {
        text-align: center;
        color: #d0021b;
        font-size: 1.4rem;
        min-height: 1.8rem;
      }
      .ring {
        width: 180px;
        height: 180px;
        margin: 1rem auto;
        border-radius: 50%;
        display: flex;
        flex-direction: column;
        align-items: center;
        justify-content: center;
        background: conic-gradient(#34c759 calc(var(--p, 1) * 360deg), rgba(0, 0, 0, 0.12) 0);
      }
      .ring span {
        font-size: 2.8rem;
        font-weight: 700;
      }
      .problem {
        text-align: center;
        font-size: 2.5rem;
        font-weight: 700;
      }
      .time {
        color: #d0021b;
        font-weight: 600;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Pocket Games</h1>
      <nav>
        <button data-tab=\"ttt\" class=\"primary\">Tic Tac Toe</button>
        <button data-tab=\"quiz\">Math Minute</button>
        <button data-tab=\"settings\">Settings</button>
      </nav>

      <section id=\"ttt\">
        <div class=\"row\">
          <span>Mode:</span>
          <button id=\"ttt-mode\" class=\"primary\">2 Players</button>
        </div>
        <div class=\"row\">Current Player: <strong id=\"ttt-turn\">X</strong></div>
        <div class=\"grid\" id=\"ttt-grid\"></div>
        <div class=\"message\" id=\"ttt-message\"></div>
        <div class=\"scores\">
          <div>X Wins<br /><strong id=\"ttt-x\">0</strong></div>
          <div>Draws<br /><strong id=\"ttt-d\">0</strong></div>
          <div>O Wins<br /><strong id=\"ttt-o\">0</strong></div>
        </div>
        <div class=\"row\"><button id=\"ttt-reset\" class=\"primary\">Reset Game</button></div>
      </section>

      <section id=\"quiz\" hidden>
        <div class=\"row\">Time <span class=\"time\" id=\"quiz-time\">60s</span></div>
        <div class=\"ring\" id=\"quiz-ring\"><span id=\"quiz-score\">0</span>Score</div>
        <div class=\"problem\" id=\"quiz-problem\"></div>
        <form class=\"row\" id=\"quiz-form\">
          <input id=\"quiz-answer\" inputmode=\"numeric\" autocomplete=\"off\" placeholder=\"Answer\" />
          <button class=\"primary\" type=\"submit\">Submit</button>
        </form>
        <div id=\"quiz-idle\">
          <div class=\"row\">
            <select id=\"quiz-difficulty\">
              <option>Easy</option>
              <option>Medium</option>
              <option>Hard</option>
            </select>
            <span>Best Score: <strong id=\"quiz-best\">0</strong></span>
          </div>
          <div class=\"row\"><button id=\"quiz-start\" class=\"primary\">Start Game</button></div>
        </div>
        <div class=\"row\" id=\"quiz-running\" hidden>
          <button id=\"quiz-end\" class=\"danger\">End Game</button>
        </div>
        <div class=\"message\" id=\"quiz-summary\"></div>
      </section>

      <section id=\"settings\" hidden>
        <div class=\"row\">
          <label>Theme <select id=\"set-theme\"></select></label>
        </div>
        <div class=\"row\">
          <label><input type=\"checkbox\" id=\"set-sound\" /> Sound Effects</label>
        </div>
        <div class=\"row\"><button id=\"set-reset\" class=\"danger\">Reset Best Score</button></div>
      </section>
    </main>

    <script>
      const $ = (id) => document.getElementById(id);
      const api = async (method, url, body) => {
        const response = await fetch(url, {
          method,
          headers: { 'Content-Type': 'application/json' },
          body: body === undefined ? undefined : JSON.stringify(body),
        });
        const payload = await response.json();
        if (!response.ok) {
          throw new Error(payload.detail || response.statusText);
        }
        return payload;
      };

      document.querySelectorAll('nav button').forEach((button) => {
        button.addEventListener('click', () => {
          document.querySelectorAll('nav button').forEach((b) => b.classList.remove('primary'));
          button.classList.add('primary');
          document.querySelectorAll('main > section').forEach((s) => {
            s.hidden = s.id !== button.dataset.tab;
          });
        });
      });

      // ---- tic-tac-toe ----
      let game = null;
      let aiPoll = null;

      const renderGame = () => {
        const grid = $('ttt-grid');
        grid.innerHTML = '';
        game.board.forEach((mark, index) => {
          const cell = document.createElement('button');
          cell.className = 'cell';
          cell.textContent = mark;
          cell.disabled =
            mark !== '' || game.gameOver || game.aiPending ||
            (game.mode === 'ai' && game.currentPlayer === 'O');
          cell.addEventListener('click', () => playAt(index));
          grid.appendChild(cell);
        });
        $('ttt-mode').textContent = game.mode === 'ai' ? 'VS AI' : '2 Players';
        $('ttt-turn').textContent = game.currentPlayer;
        $('ttt-message').textContent = game.message;
        $('ttt-x').textContent = game.scores.xWins;
        $('ttt-o').textContent = game.scores.oWins;
        $('ttt-d').textContent = game.scores.draws;
        clearTimeout(aiPoll);
        if (game.aiPending) {
          aiPoll = setTimeout(async () => {
            game = await api('GET', `/api/tictactoe/${game.id}`);
            renderGame();
          }, 250);
        }
      };

      const playAt = async (index) => {
        try {
          game = await api('POST', `/api/tictactoe/${game.id}/move`, { position: index });
          renderGame();
        } catch (err) {
          $('ttt-message').textContent = err.message;
        }
      };

      $('ttt-reset').addEventListener('click', async () => {
        game = await api('POST', `/api/tictactoe/${game.id}/reset`);
        renderGame();
      });
      $('ttt-mode').addEventListener('click', async () => {
        const mode = game.mode === 'ai' ? 'pvp' : 'ai';
        game = await api('POST', `/api/tictactoe/${game.id}/mode`, { mode });
        renderGame();
      });

      // ---- Math Minute ----
      let quiz = null;
      let quizPoll = null;
      let audioCtx = null;
      let tickTimer = null;
      const beep = (freq, duration) => {
        audioCtx = audioCtx || new AudioContext();
        const osc = audioCtx.createOscillator();
        const gain = audioCtx.createGain();
        osc.frequency.value = freq;
        gain.gain.value = 0.08;
        osc.connect(gain).connect(audioCtx.destination);
        osc.start();
        osc.stop(audioCtx.currentTime + duration);
      };
      const cueHandlers = {
        correct: () => beep(880, 0.15),
        wrong: () => beep(220, 0.25),
        'tick-start': () => {
          clearInterval(tickTimer);
          tickTimer = setInterval(() => beep(1200, 0.02), 1000);
        },
        'tick-stop': () => clearInterval(tickTimer),
      };
      const playCue = (cue) => (cueHandlers[cue] || (() => {}))();

      const renderQuiz = () => {
        $('quiz-time').textContent = `${quiz.remainingSeconds}s`;
        $('quiz-ring').style.setProperty('--p', quiz.progress);
        $('quiz-score').textContent = quiz.score;
        $('quiz-problem').textContent = quiz.problem;
        $('quiz-best').textContent = quiz.bestScore;
        $('quiz-idle').hidden = quiz.active;
        $('quiz-running').hidden = !quiz.active;
        quiz.cues.forEach(playCue);
        clearInterval(quizPoll);
        if (quiz.active) {
          $('quiz-summary').textContent = '';
          quizPoll = setInterval(async () => {
            quiz = await api('GET', `/api/quiz/${quiz.id}`);
            renderQuiz();
          }, 200);
        } else {
          $('quiz-summary').textContent =
            `Time's Up! Score: ${quiz.score}  Best: ${quiz.bestScore}`;
        }
      };

      $('quiz-start').addEventListener('click', async () => {
        const difficulty = $('quiz-difficulty').value;
        quiz = quiz && quiz.difficulty === difficulty
          ? await api('POST', `/api/quiz/${quiz.id}/restart`)
          : await api('POST', '/api/quiz', { difficulty });
        renderQuiz();
        $('quiz-answer').focus();
      });
      $('quiz-end').addEventListener('click', async () => {
        quiz = await api('POST', `/api/quiz/${quiz.id}/end`);
        renderQuiz();
      });
      $('quiz-form').addEventListener('submit', async (event) => {
        event.preventDefault();
        if (!quiz || !quiz.active) return;
        try {
          quiz = await api('POST', `/api/quiz/${quiz.id}/answer`, { answer: $('quiz-answer').value });
        } catch (err) {
          quiz = await api('GET', `/api/quiz/${quiz.id}`);
        }
        $('quiz-answer').value = '';
        renderQuiz();
      });

      // ---- settings ----
      const applyTheme = (theme) => {
        document.documentElement.style.setProperty(
          '--bg', `linear-gradient(135deg, ${theme.background.join(', ')})`
        );
        document.documentElement.style.setProperty('--fg', theme.foreground);
      };
      const renderSettings = (settings) => {
        $('set-theme').value = settings.theme.name;
        $('set-sound').checked = settings.soundEnabled;
        $('quiz-best').textContent = settings.bestScore;
        applyTheme(settings.theme);
      };

      $('set-theme').addEventListener('change', async () => {
        renderSettings(await api('PUT', '/api/settings', { theme: $('set-theme').value }));
      });
      $('set-sound').addEventListener('change', async () => {
        renderSettings(await api('PUT', '/api/settings', { soundEnabled: $('set-sound').checked }));
      });
      $('set-reset').addEventListener('click', async () => {
        renderSettings(await api('POST', '/api/settings/reset-best-score'));
      });

      (async () => {
        const themes = await api('GET', '/api/themes');
        themes.forEach((theme) => {
          const option = document.createElement('option');
          option.value = theme.name;
          option.textContent = theme.name[0].toUpperCase() + theme.name.slice(1);
          $('set-theme').appendChild(option);
        });
        renderSettings(await api('GET', '/api/settings'));
        game = await api('POST', '/api/tictactoe', { mode: 'pvp' });
        renderGame();
      })();
    </script>
  </body>
</html>
"""
