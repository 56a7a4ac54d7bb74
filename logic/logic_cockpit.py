import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import gradio as gr
import pandas as pd

from pilot_config import DATE_LOCALE
from storage import load_slice, save_slice

logger = logging.getLogger("pilot.cockpit")

LOGS_KEY = "pilot_logs"
CRISIS_KEY = "pilot_crisis"

CRISIS_FIELDS = ("supportPerson", "booster")

# Short weekday names as a browser renders them, Monday first
WEEKDAY_NAMES = {
    "fr": ["lun.", "mar.", "mer.", "jeu.", "ven.", "sam.", "dim."],
    "en": ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"],
}

LOG_COLUMNS = ["Date", "Progression"]


# ================== Log slice ==================


def load_logs_data() -> List[Dict[str, Any]]:
    """
    Load the progress log, oldest entry first.
    Structure: [ { "id": int, "date": "Lun 1", "domain": str }, ... ]
    """
    logs = load_slice(LOGS_KEY, [])
    entries = [entry for entry in logs if isinstance(entry, dict)]
    if len(entries) != len(logs):
        logger.warning("Dropped %d malformed log entries", len(logs) - len(entries))
    return entries


def save_logs_data(logs: List[Dict[str, Any]]) -> None:
    save_slice(LOGS_KEY, logs)


def format_log_date(now: datetime, locale: Optional[str] = None) -> str:
    """Return the short label of a log entry, e.g. "Lun 1" or "Sam 4"."""
    names = WEEKDAY_NAMES.get(locale or DATE_LOCALE, WEEKDAY_NAMES["fr"])
    day_name = names[now.weekday()].rstrip(".").lower()
    day_name = day_name[:1].upper() + day_name[1:]
    return f"{day_name} {now.day}"


def next_log_id(logs: List[Dict[str, Any]], now: datetime) -> int:
    """
    Millisecond timestamp of now, bumped past the last stored id so ids stay
    unique and increasing even for two appends within the same millisecond.
    """
    candidate = int(now.timestamp() * 1000)
    if logs:
        last_id = logs[-1].get("id")
        if isinstance(last_id, int) and candidate <= last_id:
            candidate = last_id + 1
    return candidate


def add_log(domain: str, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Append a progress entry and persist the log. Blank text is ignored."""
    logs = load_logs_data()
    text = (domain or "").strip()
    if not text:
        return logs

    now = now or datetime.now()
    entry = {
        "id": next_log_id(logs, now),
        "date": format_log_date(now),
        "domain": text,
    }
    logs.append(entry)
    save_logs_data(logs)
    logger.info("Logged progress entry %s (%d total)", entry["id"], len(logs))
    return logs


def clear_logs() -> List[Dict[str, Any]]:
    """Remove every entry. The caller is responsible for asking first."""
    logs: List[Dict[str, Any]] = []
    save_logs_data(logs)
    logger.info("Progress log cleared")
    return logs


def logs_frame(logs: List[Dict[str, Any]]) -> pd.DataFrame:
    """Display table, newest entry first."""
    rows = [[entry.get("date", ""), entry.get("domain", "")] for entry in reversed(logs)]
    return pd.DataFrame(rows, columns=LOG_COLUMNS)


def count_label(logs: List[Dict[str, Any]]) -> str:
    return f"**{len(logs)} entrées**"


# ================== Crisis slice ==================


def default_crisis() -> Dict[str, str]:
    return {"supportPerson": "", "booster": ""}


def load_crisis_data() -> Dict[str, Any]:
    return load_slice(CRISIS_KEY, default_crisis())


def save_crisis_data(data: Dict[str, Any]) -> None:
    save_slice(CRISIS_KEY, data)


def update_crisis_field(key: str, value: str) -> Dict[str, Any]:
    """Set one crisis anchor and persist the slice. Raises KeyError on an unknown field."""
    if key not in CRISIS_FIELDS:
        raise KeyError(key)
    data = load_crisis_data()
    data[key] = value or ""
    save_crisis_data(data)
    return data


# ================== Gradio callbacks ==================


def load_cockpit_for_ui():
    """
    Returns:
        log_table:      DataFrame (newest first)
        log_count:      str (markdown)
        clear_btn:      update (visible only when there is something to clear)
        support_person: str
        booster:        str
    """
    logs = load_logs_data()
    crisis = load_crisis_data()
    return (
        logs_frame(logs),
        count_label(logs),
        gr.update(visible=bool(logs)),
        crisis["supportPerson"],
        crisis["booster"],
    )


def add_log_action(text: str):
    """Gradio callback: append a '+1%' entry and clear the input box."""
    before = len(load_logs_data())
    logs = add_log(text)
    if len(logs) == before:
        status = "Rien à enregistrer : écris d'abord ta progression."
        new_text = text
    else:
        status = f"Progression enregistrée ({logs[-1]['date']})."
        new_text = ""
    return (
        new_text,
        logs_frame(logs),
        count_label(logs),
        gr.update(visible=bool(logs)),
        status,
    )


def request_clear_action():
    """Show the confirm/cancel pair instead of clearing right away."""
    return gr.update(visible=True), "Réinitialiser l'historique de vol ?"


def cancel_clear_action():
    return gr.update(visible=False), ""


def confirm_clear_action():
    logs = clear_logs()
    return (
        gr.update(visible=False),  # confirm row
        logs_frame(logs),
        count_label(logs),
        gr.update(visible=False),  # clear button
        "Historique réinitialisé.",
    )


def open_crisis_action():
    return gr.update(visible=False), gr.update(visible=True)


def close_crisis_action():
    return gr.update(visible=True), gr.update(visible=False)


def update_crisis_action(key: str, value: str):
    update_crisis_field(key, value)
    return "Ancrage enregistré."
