"""
Tests for persisted user preferences.
"""

import json

from momentum_board.core.preferences import (
    DEFAULT_PREFERENCES,
    load_preferences,
    reset_preferences,
    save_preferences,
    update_preferences,
)


def test_defaults_when_missing(tmp_path):
    assert load_preferences(tmp_path / "preferences.json") == DEFAULT_PREFERENCES


def test_stored_values_merge_over_defaults(tmp_path):
    path = tmp_path / "preferences.json"
    path.write_text(json.dumps({"page_size": 50, "unknown_key": 1}))

    prefs = load_preferences(path)
    assert prefs["page_size"] == 50
    assert prefs["default_view"] == "all"
    assert "unknown_key" not in prefs


def test_corrupt_file_gives_defaults(tmp_path):
    path = tmp_path / "preferences.json"
    path.write_text("[1, 2")
    assert load_preferences(path) == DEFAULT_PREFERENCES


def test_save_update_reset(tmp_path):
    path = tmp_path / "preferences.json"
    save_preferences({"hide_top3": True, "junk": "x"}, path)
    stored = json.loads(path.read_text())
    assert stored["hide_top3"] is True
    assert "junk" not in stored

    prefs = update_preferences(path, all_sort_key="name", bogus=True)
    assert prefs["all_sort_key"] == "name"
    assert prefs["hide_top3"] is True
    assert load_preferences(path)["all_sort_key"] == "name"

    assert reset_preferences(path) == DEFAULT_PREFERENCES
    assert not path.exists()
    assert load_preferences(path) == DEFAULT_PREFERENCES


def test_defaults_are_not_mutated(tmp_path):
    prefs = load_preferences(tmp_path / "preferences.json")
    prefs["page_size"] = 50
    assert DEFAULT_PREFERENCES["page_size"] == 25
