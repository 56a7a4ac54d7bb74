from typing import Any, Dict

from storage import load_slice, save_slice

GOAL_KEY = "pilot_goal"

# The three habit anchors ("mousquetons") and their labels on the Topo page
CARB_FIELDS = [
    ("carb_cognitive", "COGNITIF (Deep Work)", "Ex: Lecture"),
    ("carb_physical", "PHYSIQUE (Activation)", "Ex: 20 Pompes au réveil"),
    ("carb_recovery", "RÉCUPÉRATION (Off)", "Ex: Sieste 15min"),
]

GOAL_FIELDS = ("title", "date") + tuple(field for field, _, _ in CARB_FIELDS)


def default_goal() -> Dict[str, str]:
    return {
        "title": "",
        "date": "15 Mai",
        "carb_cognitive": "",
        "carb_physical": "",
        "carb_recovery": "",
    }


def load_goal_data() -> Dict[str, Any]:
    """
    Load the goal slice.
    Structure: { "title": str, "date": str, "carb_cognitive": str, ... }
    """
    return load_slice(GOAL_KEY, default_goal())


def save_goal_data(data: Dict[str, Any]) -> None:
    save_slice(GOAL_KEY, data)


def update_goal_field(key: str, value: str) -> Dict[str, Any]:
    """Set one goal field and persist the slice. Raises KeyError on an unknown field."""
    if key not in GOAL_FIELDS:
        raise KeyError(key)
    data = load_goal_data()
    data[key] = value or ""
    save_goal_data(data)
    return data


# ================== Gradio callbacks ==================


def load_goal_for_ui():
    """
    Returns:
        title, date, carb_cognitive, carb_physical, carb_recovery: str
    """
    data = load_goal_data()
    return tuple(data[field] for field in GOAL_FIELDS)


def update_goal_action(key: str, value: str):
    """Gradio callback: persist a single Topo field as the user types."""
    update_goal_field(key, value)
    return "Enregistré."
