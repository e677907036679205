import json

import pytest

import settings
from settings import load_settings, save_settings


@pytest.fixture
def path(tmp_path):
    return str(tmp_path / "settings.json")


def test_missing_file_gives_defaults(path):
    assert load_settings(path) == settings._DEFAULTS


def test_round_trip(path):
    stored = load_settings(path)
    stored.update(label_format="%B %Y", dark_mode=True, show_week_numbers=False,
                  first_weekday=6, window_x=120, window_y=40)
    save_settings(stored, path)
    assert load_settings(path) == stored


def test_default_path_is_used(tmp_path, monkeypatch):
    target = str(tmp_path / "default.json")
    monkeypatch.setattr(settings, "_SETTINGS_PATH", target)
    save_settings({"dark_mode": True})
    assert load_settings()["dark_mode"] is True


def test_corrupt_file_gives_defaults(path):
    with open(path, "w", encoding="utf-8") as f:
        f.write("{not json")
    assert load_settings(path) == settings._DEFAULTS


def test_non_object_gives_defaults(path):
    with open(path, "w", encoding="utf-8") as f:
        json.dump([1, 2, 3], f)
    assert load_settings(path) == settings._DEFAULTS


def test_ill_typed_values_are_ignored(path):
    with open(path, "w", encoding="utf-8") as f:
        json.dump({
            "label_format": "",
            "dark_mode": "yes",
            "show_week_numbers": 0,
            "first_weekday": 9,
            "window_x": True,
            "window_y": "10",
        }, f)
    assert load_settings(path) == settings._DEFAULTS


def test_unknown_keys_are_dropped(path):
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"holidays": ["x"], "dark_mode": True}, f)
    loaded = load_settings(path)
    assert "holidays" not in loaded
    assert loaded["dark_mode"] is True


def test_loaded_settings_do_not_alias_defaults(path):
    loaded = load_settings(path)
    loaded["dark_mode"] = True
    assert settings._DEFAULTS["dark_mode"] is False
