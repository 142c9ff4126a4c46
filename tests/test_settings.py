"""Tests for stored preferences."""

import json

from pocketgames.settings import Preferences, PreferenceStore, Theme


def test_defaults():
    prefs = PreferenceStore().load()
    assert prefs == Preferences(best_score=0, theme=Theme.LIGHT, sound_enabled=True)


def test_best_score_only_goes_up():
    store = PreferenceStore()
    assert store.record_score(5) is True
    assert store.record_score(3) is False
    assert store.record_score(5) is False
    assert store.load().best_score == 5


def test_reset_best_score():
    store = PreferenceStore()
    store.record_score(12)
    store.reset_best_score()
    assert store.load().best_score == 0


def test_round_trips_through_file(tmp_path):
    path = tmp_path / "prefs.json"
    store = PreferenceStore(path)
    store.update(theme=Theme.NEON, sound_enabled=False)
    store.record_score(17)

    on_disk = json.loads(path.read_text("utf-8"))
    assert on_disk == {"best_score": 17, "theme": "neon", "sound_enabled": False}

    reopened = PreferenceStore(path).load()
    assert reopened.theme is Theme.NEON
    assert reopened.sound_enabled is False
    assert reopened.best_score == 17


def test_unreadable_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text("{not json", "utf-8")
    assert PreferenceStore(path).load() == Preferences()


def test_load_returns_a_copy():
    store = PreferenceStore()
    prefs = store.load()
    prefs.best_score = 99
    assert store.load().best_score == 0


def test_theme_colours():
    assert Theme.DARK.foreground == "#ffffff"
    assert len(Theme.NEON.background) == 3
    assert Theme("light").describe()["name"] == "light"


def test_failed_save_keeps_file_and_memory_consistent(tmp_path, monkeypatch, caplog):
    path = tmp_path / "prefs.json"
    store = PreferenceStore(path)
    store.record_score(3)

    def refuse(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr("pocketgames.settings.os.replace", refuse)
    assert store.record_score(9) is True

    assert store.load().best_score == 9
    assert json.loads(path.read_text("utf-8"))["best_score"] == 3
    assert list(tmp_path.iterdir()) == [path]
    assert "Could not save preferences" in caplog.text


def test_save_replaces_file_without_leftovers(tmp_path):
    path = tmp_path / "nested" / "prefs.json"
    store = PreferenceStore(path)
    store.record_score(4)
    store.reset_best_score()
    assert json.loads(path.read_text("utf-8"))["best_score"] == 0
    assert list(path.parent.iterdir()) == [path]
