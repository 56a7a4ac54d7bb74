import json
import logging

import pytest

import storage
from storage import get_key_path, kv_get, kv_set, load_slice, save_slice


def test_missing_key_returns_default_copy():
    default = {"a": 1, "nested": [1, 2]}
    value = load_slice("nothing_here", default)
    assert value == default
    value["nested"].append(3)
    assert default["nested"] == [1, 2]


def test_save_then_load_round_trip():
    radar = {"inner": 10, "peers": 20, "family": 30, "media": 40, "professors": 50, "fog": 60}
    save_slice("pilot_radar", radar)
    assert load_slice("pilot_radar", {}) == radar


def test_non_ascii_text_is_kept():
    save_slice("pilot_crisis", {"supportPerson": "Zoé", "booster": "Chanter Céline Dion"})
    assert "Céline" in kv_get("pilot_crisis")
    assert load_slice("pilot_crisis", {})["booster"] == "Chanter Céline Dion"


def test_corrupt_value_falls_back_and_logs(caplog):
    kv_set("pilot_goal", "{not json")
    with caplog.at_level(logging.WARNING, logger="pilot.storage"):
        value = load_slice("pilot_goal", {"title": ""})
    assert value == {"title": ""}
    assert "corrupt" in caplog.text


def test_wrong_type_is_treated_as_corrupt():
    kv_set("pilot_logs", json.dumps({"id": 1}))
    assert load_slice("pilot_logs", []) == []


def test_partial_record_is_completed_from_default():
    kv_set("pilot_goal", json.dumps({"title": "Marathon", "legacy": True}))
    value = load_slice("pilot_goal", {"title": "", "date": "15 Mai"})
    assert value == {"title": "Marathon", "date": "15 Mai", "legacy": True}


def test_save_failure_is_logged_not_raised(caplog):
    with caplog.at_level(logging.ERROR, logger="pilot.storage"):
        save_slice("pilot_logs", [{"id": object()}])
    assert "Failed to save slice" in caplog.text
    assert kv_get("pilot_logs") is None


def test_kv_set_replaces_file_and_leaves_no_temp(data_dir):
    kv_set("pilot_logs", "[]")
    kv_set("pilot_logs", "[1]")
    assert kv_get("pilot_logs") == "[1]"
    assert sorted(p.name for p in data_dir.iterdir()) == ["pilot_logs.json"]


def test_key_path_follows_base_dir(data_dir):
    assert get_key_path("pilot_radar") == str(data_dir / "pilot_radar.json")
    assert storage.BASE_DIR == str(data_dir)


def test_invalid_utf8_falls_back_and_logs(caplog):
    with open(get_key_path("pilot_goal"), "wb") as f:
        f.write(b'{"title": "\xff\xfe"}')
    with caplog.at_level(logging.WARNING, logger="pilot.storage"):
        value = load_slice("pilot_goal", {"title": ""})
    assert value == {"title": ""}
    assert "Could not read slice" in caplog.text


def test_unreadable_path_falls_back(data_dir):
    (data_dir / "pilot_radar.json").mkdir()
    assert load_slice("pilot_radar", {"fog": 75}) == {"fog": 75}


def test_wrong_field_type_uses_field_default(caplog):
    kv_set("pilot_goal", json.dumps({"title": None, "date": "1 Juin"}))
    with caplog.at_level(logging.WARNING, logger="pilot.storage"):
        value = load_slice("pilot_goal", {"title": "", "date": "15 Mai"})
    assert value == {"title": "", "date": "1 Juin"}
    assert "'title'" in caplog.text


@pytest.mark.parametrize(
    "stored, expected",
    [
        ("75", 50),
        (True, 50),
        (None, 50),
        (42.0, 42.0),
        (42, 42),
    ],
)
def test_numeric_field_kinds(stored, expected):
    kv_set("pilot_radar", json.dumps({"fog": stored}))
    assert load_slice("pilot_radar", {"fog": 50}) == {"fog": expected}


def test_setup_logging_leaves_root_logger_alone():
    from logging_config import LOGGER_NAME, setup_logging

    root_handlers = list(logging.getLogger().handlers)
    pilot = logging.getLogger(LOGGER_NAME)
    try:
        setup_logging(logging.DEBUG)
        assert logging.getLogger().handlers == root_handlers
        assert len(pilot.handlers) == 1
        assert not pilot.propagate
        assert logging.getLogger("pilot.storage").getEffectiveLevel() == logging.DEBUG
    finally:
        pilot.handlers.clear()
        pilot.propagate = True
        pilot.setLevel(logging.NOTSET)
