"""Tests for the FastAPI interface."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from pocketgames import ui
from pocketgames.settings import PreferenceStore
from pocketgames.ui import app


client = TestClient(app)
ui.AI_THINK_DELAY = 0.0


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture(autouse=True)
def fresh_preferences(monkeypatch):
    monkeypatch.setattr(ui, "PREFERENCES", PreferenceStore())


def _new_game(mode="pvp", seed=None):
    response = client.post("/api/tictactoe", json={"mode": mode, "seed": seed})
    assert response.status_code == 200
    return response.json()


def _move(game_id, position):
    return client.post(f"/api/tictactoe/{game_id}/move", json={"position": position})


def test_create_game_and_first_move():
    payload = _new_game()
    assert payload["currentPlayer"] == "X"
    assert payload["board"] == [""] * 9
    assert payload["outcome"] == "in_progress"
    assert payload["moveLog"] == []

    state = _move(payload["id"], 4).json()
    assert state["board"][4] == "X"
    assert state["currentPlayer"] == "O"
    assert state["lastMove"] == {"player": "X", "position": 4}
    assert state["aiPending"] is False


def test_two_player_win_updates_scores():
    game_id = _new_game()["id"]
    for position in (0, 3, 1, 4):
        assert _move(game_id, position).status_code == 200
    state = _move(game_id, 2).json()
    assert state["outcome"] == "win"
    assert state["winner"] == "X"
    assert state["message"] == "X Wins!"
    assert state["scores"] == {"xWins": 1, "oWins": 0, "draws": 0}

    after = _move(game_id, 8)
    assert after.status_code == 400
    assert client.get(f"/api/tictactoe/{game_id}").json()["board"][8] == ""


def test_draw_message():
    game_id = _new_game()["id"]
    for position in (0, 1, 2, 4, 3, 5, 7, 6, 8):
        state = _move(game_id, position).json()
    assert state["outcome"] == "draw"
    assert state["message"] == "It's a Draw!"
    assert state["scores"]["draws"] == 1


def test_occupied_cell_rejected():
    game_id = _new_game()["id"]
    assert _move(game_id, 0).status_code == 200
    duplicate = _move(game_id, 0)
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"]


def test_out_of_range_position_is_validation_error():
    game_id = _new_game()["id"]
    assert _move(game_id, 9).status_code == 422


def test_unknown_game_returns_404():
    assert client.get("/api/tictactoe/missing").status_code == 404


def test_ai_replies_after_human_move():
    payload = _new_game(mode="ai", seed=1)
    game_id = payload["id"]

    state = _move(game_id, 4).json()
    assert state["aiPending"] is True
    assert state["currentPlayer"] == "O"

    follow_up = client.get(f"/api/tictactoe/{game_id}").json()
    assert follow_up["aiPending"] is False
    assert follow_up["currentPlayer"] == "X"
    assert follow_up["moveLog"][-1]["player"] == "O"
    assert follow_up["board"].count("O") == 1


def test_ai_blocks_in_api_game():
    game_id = _new_game(mode="ai", seed=3)["id"]
    _move(game_id, 0)
    state = client.get(f"/api/tictactoe/{game_id}").json()
    first_reply = state["moveLog"][-1]["position"]

    # Pick a second X cell that threatens a line the AI has not touched.
    for second in (1, 3, 4):
        line = {1: 2, 3: 6, 4: 8}[second]
        if first_reply not in (second, line) and state["board"][second] == "":
            break
    _move(game_id, second)
    state = client.get(f"/api/tictactoe/{game_id}").json()
    assert state["board"][line] == "O"


def test_reset_keeps_scores():
    game_id = _new_game()["id"]
    for position in (0, 3, 1, 4, 2):
        _move(game_id, position)
    state = client.post(f"/api/tictactoe/{game_id}/reset").json()
    assert state["board"] == [""] * 9
    assert state["currentPlayer"] == "X"
    assert state["outcome"] == "in_progress"
    assert state["scores"]["xWins"] == 1
    assert state["moveLog"] == []
    assert state["gameOver"] is False
    assert _move(game_id, 4).status_code == 200


def test_reset_discards_a_queued_ai_move():
    game_id = _new_game(mode="ai", seed=2)["id"]
    session = ui.SESSIONS[game_id]
    ui._apply_player_move(game_id, session, 4)
    stale = session.generation
    assert session.ai_pending is True

    client.post(f"/api/tictactoe/{game_id}/reset")
    ui._apply_player_move(game_id, session, 0)
    ui._run_ai_turn(game_id, stale)
    state = client.get(f"/api/tictactoe/{game_id}").json()
    assert state["board"].count("X") == 1
    assert state["board"].count("O") == 0
    assert state["aiPending"] is True

    ui._run_ai_turn(game_id, session.generation)
    state = client.get(f"/api/tictactoe/{game_id}").json()
    assert state["board"].count("O") == 1
    assert state["aiPending"] is False


def test_idle_sessions_are_forgotten(monkeypatch):
    game_id = _new_game()["id"]
    quiz, _clock = _start_quiz(monkeypatch)
    quiz_id = quiz["id"]

    stale = ui.time.time() - ui.SESSION_TTL_SECONDS - 1
    ui.SESSIONS[game_id].last_seen = stale
    ui.QUIZZES[quiz_id].last_seen = stale
    fresh_id = _new_game()["id"]

    assert client.get(f"/api/tictactoe/{game_id}").status_code == 404
    assert client.get(f"/api/quiz/{quiz_id}").status_code == 404
    assert client.get(f"/api/tictactoe/{fresh_id}").status_code == 200


def test_mode_switch_resets_board():
    game_id = _new_game()["id"]
    _move(game_id, 0)
    state = client.post(f"/api/tictactoe/{game_id}/mode", json={"mode": "ai"}).json()
    assert state["mode"] == "ai"
    assert state["board"] == [""] * 9

    bad = client.post(f"/api/tictactoe/{game_id}/mode", json={"mode": "online"})
    assert bad.status_code == 422


# ---------- quiz ----------


def _start_quiz(monkeypatch, difficulty="Easy"):
    clock = FakeClock()
    monkeypatch.setattr(ui, "QUIZ_CLOCK", clock)
    response = client.post("/api/quiz", json={"difficulty": difficulty, "seed": 11})
    assert response.status_code == 200
    return response.json(), clock


def _answer_for(quiz_id):
    return ui.QUIZZES[quiz_id].game.problem.answer


def test_quiz_round_flow(monkeypatch):
    quiz, clock = _start_quiz(monkeypatch)
    quiz_id = quiz["id"]
    assert quiz["active"] is True
    assert quiz["remainingSeconds"] == 60
    assert quiz["progress"] == 1.0
    assert quiz["cues"] == ["tick-start"]
    assert quiz["problem"].endswith("= ?")

    right = client.post(
        f"/api/quiz/{quiz_id}/answer", json={"answer": str(_answer_for(quiz_id))}
    ).json()
    assert right["correct"] is True
    assert right["score"] == 1
    assert right["cues"] == ["correct"]

    wrong = client.post(f"/api/quiz/{quiz_id}/answer", json={"answer": "nope"}).json()
    assert wrong["correct"] is False
    assert wrong["score"] == 1

    clock.now += 30
    half = client.get(f"/api/quiz/{quiz_id}").json()
    assert half["remainingSeconds"] == 30
    assert half["progress"] == 0.5

    clock.now += 30
    done = client.get(f"/api/quiz/{quiz_id}").json()
    assert done["active"] is False
    assert done["remainingSeconds"] == 0
    assert done["bestScore"] == 1
    assert done["newBest"] is True
    assert done["cues"] == ["tick-stop"]

    late = client.post(f"/api/quiz/{quiz_id}/answer", json={"answer": "1"})
    assert late.status_code == 409

    again = client.get(f"/api/quiz/{quiz_id}").json()
    assert again["cues"] == []


def test_quiz_end_and_restart(monkeypatch):
    quiz, clock = _start_quiz(monkeypatch, "Hard")
    quiz_id = quiz["id"]
    ended = client.post(f"/api/quiz/{quiz_id}/end").json()
    assert ended["active"] is False

    clock.now += 5
    restarted = client.post(f"/api/quiz/{quiz_id}/restart").json()
    assert restarted["active"] is True
    assert restarted["difficulty"] == "Hard"
    assert restarted["score"] == 0
    assert restarted["remainingSeconds"] == 60


def test_best_score_recorded_when_nobody_polls(monkeypatch):
    quiz, clock = _start_quiz(monkeypatch)
    quiz_id = quiz["id"]
    client.post(
        f"/api/quiz/{quiz_id}/answer", json={"answer": str(_answer_for(quiz_id))}
    )

    clock.now += 120
    settings = client.get("/api/settings").json()
    assert settings["bestScore"] == 1
    assert ui.QUIZZES[quiz_id].game.active is False


def test_end_timer_closes_the_round(monkeypatch):
    quiz, clock = _start_quiz(monkeypatch)
    quiz_id = quiz["id"]
    session = ui.QUIZZES[quiz_id]
    assert session.end_timer is not None
    client.post(
        f"/api/quiz/{quiz_id}/answer", json={"answer": str(_answer_for(quiz_id))}
    )

    clock.now += 60
    ui._expire_quiz(quiz_id, session.round_id)
    assert session.game.active is False
    assert ui.PREFERENCES.load().best_score == 1

    state = client.get(f"/api/quiz/{quiz_id}").json()
    assert state["active"] is False
    assert state["cues"] == ["tick-stop"]


def test_restart_discards_the_previous_end_timer(monkeypatch):
    quiz, _clock = _start_quiz(monkeypatch)
    quiz_id = quiz["id"]
    session = ui.QUIZZES[quiz_id]
    stale = session.round_id
    old_timer = session.end_timer

    client.post(f"/api/quiz/{quiz_id}/restart")
    assert session.round_id == stale + 1
    assert session.end_timer is not old_timer
    assert old_timer.finished.is_set()

    ui._expire_quiz(quiz_id, stale)
    assert session.game.active is True

    client.post(f"/api/quiz/{quiz_id}/end")
    assert session.end_timer is None


def test_unknown_difficulty_rejected():
    assert client.post("/api/quiz", json={"difficulty": "Insane"}).status_code == 422


# ---------- settings ----------


def test_settings_update_and_reset(monkeypatch):
    settings = client.get("/api/settings").json()
    assert settings["theme"]["name"] == "light"
    assert settings["soundEnabled"] is True

    updated = client.put(
        "/api/settings", json={"theme": "dark", "soundEnabled": False}
    ).json()
    assert updated["theme"]["name"] == "dark"
    assert updated["theme"]["foreground"] == "#ffffff"
    assert updated["soundEnabled"] is False

    ui.PREFERENCES.record_score(7)
    assert client.get("/api/settings").json()["bestScore"] == 7
    reset = client.post("/api/settings/reset-best-score").json()
    assert reset["bestScore"] == 0


def test_muting_silences_running_quiz(monkeypatch):
    quiz, _clock = _start_quiz(monkeypatch)
    quiz_id = quiz["id"]
    client.put("/api/settings", json={"soundEnabled": False})
    state = client.get(f"/api/quiz/{quiz_id}").json()
    assert state["cues"] == ["tick-stop"]

    answered = client.post(f"/api/quiz/{quiz_id}/answer", json={"answer": "x"}).json()
    assert answered["cues"] == []


def test_bad_theme_rejected():
    assert client.put("/api/settings", json={"theme": "sepia"}).status_code == 422


def test_themes_listed():
    names = [theme["name"] for theme in client.get("/api/themes").json()]
    assert names == ["light", "dark", "neon"]


def test_index_serves_page():
    response = client.get("/")
    assert response.status_code == 200
    assert "Pocket Games" in response.text
