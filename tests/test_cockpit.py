import json
from datetime import datetime

import pytest

from logic.logic_cockpit import (
    add_log,
    add_log_action,
    clear_logs,
    confirm_clear_action,
    format_log_date,
    load_cockpit_for_ui,
    load_crisis_data,
    load_logs_data,
    logs_frame,
    next_log_id,
    update_crisis_field,
)
from storage import kv_set

NOW = datetime(2024, 4, 1, 9, 41)


@pytest.mark.parametrize(
    "when, locale, label",
    [
        (datetime(2024, 4, 1), "fr", "Lun 1"),
        (datetime(2024, 5, 4), "fr", "Sam 4"),
        (datetime(2024, 5, 15), "fr", "Mer 15"),
        (datetime(2024, 4, 7), "en", "Sun 7"),
    ],
)
def test_format_log_date(when, locale, label):
    assert format_log_date(when, locale) == label


def test_unknown_locale_falls_back_to_french():
    assert format_log_date(datetime(2024, 4, 2), "xx") == "Mar 2"


def test_blank_text_is_ignored():
    assert add_log("  ", now=NOW) == []
    assert load_logs_data() == []


def test_add_log_appends_one_entry():
    add_log("Lu 10 pages", now=NOW)
    logs = add_log("Ran 5k", now=NOW)
    assert len(logs) == 2
    assert logs[-1]["domain"] == "Ran 5k"
    assert logs[-1]["date"] == format_log_date(NOW)
    assert load_logs_data() == logs


def test_add_log_trims_text():
    logs = add_log("  Ran 5k \n", now=NOW)
    assert logs[0]["domain"] == "Ran 5k"


def test_ids_are_unique_and_increasing_within_one_millisecond():
    for text in ("a1", "b2", "c3"):
        add_log(text, now=NOW)
    ids = [entry["id"] for entry in load_logs_data()]
    assert ids[0] == int(NOW.timestamp() * 1000)
    assert ids == sorted(set(ids))


def test_next_log_id_uses_clock_when_ahead():
    later = datetime(2024, 4, 2)
    assert next_log_id([{"id": 5}], later) == int(later.timestamp() * 1000)
    assert next_log_id([], NOW) == int(NOW.timestamp() * 1000)


def test_clear_logs():
    add_log("Ran 5k", now=NOW)
    assert clear_logs() == []
    assert load_logs_data() == []
    assert clear_logs() == []
    assert load_logs_data() == []


def test_logs_frame_is_newest_first():
    add_log("first", now=datetime(2024, 4, 1))
    add_log("second", now=datetime(2024, 4, 2))
    frame = logs_frame(load_logs_data())
    assert list(frame["Progression"]) == ["second", "first"]
    assert list(frame["Date"]) == ["Mar 2", "Lun 1"]


def test_crisis_fields_persist():
    assert load_crisis_data() == {"supportPerson": "", "booster": ""}
    update_crisis_field("supportPerson", "Meilleur Pote")
    assert load_crisis_data()["supportPerson"] == "Meilleur Pote"
    with pytest.raises(KeyError):
        update_crisis_field("therapist", "x")


def test_add_log_action_keeps_text_on_blank_input():
    new_text, table, count, _, status = add_log_action("   ")
    assert new_text == "   "
    assert len(table) == 0
    assert "0 entrées" in count
    assert status.startswith("Rien")


def test_add_log_action_clears_input():
    new_text, table, count, _, _ = add_log_action("Ran 5k")
    assert new_text == ""
    assert len(table) == 1
    assert "1 entrées" in count


def test_confirm_clear_action_empties_log():
    add_log("Ran 5k", now=NOW)
    _, table, count, _, status = confirm_clear_action()
    assert len(table) == 0
    assert load_logs_data() == []
    assert status == "Historique réinitialisé."


def test_load_cockpit_for_ui():
    add_log("Ran 5k", now=NOW)
    update_crisis_field("booster", "Chanter")
    table, count, _, support, booster = load_cockpit_for_ui()
    assert len(table) == 1
    assert support == ""
    assert booster == "Chanter"


def test_malformed_log_entries_are_dropped():
    kv_set("pilot_logs", json.dumps([1, "x", {"id": 5, "date": "Lun 1", "domain": "Ran 5k"}]))
    logs = add_log("Lu 10 pages", now=NOW)
    assert [entry["domain"] for entry in logs] == ["Ran 5k", "Lu 10 pages"]
    assert len(logs_frame(logs)) == 2
