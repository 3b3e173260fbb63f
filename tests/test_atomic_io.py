"""
Test atomic JSON I/O.
"""

import json
from pathlib import Path

import pytest

from momentum_board.core.atomic_io import atomic_write_json, load_json


def test_atomic_write_json(tmp_path):
    """Writes valid JSON and doesn't leave a .tmp file behind."""
    test_path = tmp_path / "test.json"
    test_data = {"key": "value", "number": 42, "nested": {"a": 1, "b": 2}}

    atomic_write_json(test_path, test_data)

    assert test_path.exists()
    assert list(tmp_path.glob("*.tmp")) == []
    assert json.loads(test_path.read_text()) == test_data

    # Parent directories are created
    nested_path = tmp_path / "nested" / "deep" / "list.json"
    atomic_write_json(nested_path, ["bitcoin", "ethereum"])
    assert json.loads(nested_path.read_text()) == ["bitcoin", "ethereum"]


def test_atomic_write_json_failure_keeps_original(tmp_path):
    test_path = tmp_path / "state.json"
    atomic_write_json(test_path, {"ok": True})

    with pytest.raises(TypeError):
        atomic_write_json(test_path, {"bad": object()})

    assert json.loads(test_path.read_text()) == {"ok": True}
    assert list(tmp_path.glob("*.tmp")) == []


def test_load_json_defaults(tmp_path):
    assert load_json(tmp_path / "missing.json", default=[]) == []

    empty = tmp_path / "empty.json"
    empty.write_text("   ")
    assert load_json(empty, default={}) == {}

    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    assert load_json(broken, default={"fallback": 1}) == {"fallback": 1}

    good = tmp_path / "good.json"
    good.write_text('{"a": 1}')
    assert load_json(good) == {"a": 1}
