"""
Mastery / impact matrix shown on the Mission page.

Both scores live on a 0-10 scale and are recomputed from the stored radar,
goal and log slices every time the page is shown. Nothing here is persisted.
"""

from typing import Any, Dict, Tuple

import pandas as pd

from .logic_cockpit import load_logs_data
from .logic_goals import CARB_FIELDS, load_goal_data
from .logic_radar import load_radar_data

# Scores strictly above this on both axes grant flight authorization
AUTHORIZATION_THRESHOLD = 7

# Logs beyond this count no longer raise the impact score
LOG_SATURATION = 10

MARKER_MIN = 5
MARKER_MAX = 95


def external_noise(radar: Dict[str, Any]) -> float:
    """Mean of the four outside influences, in [0, 100]."""
    return (radar["peers"] + radar["media"] + radar["family"] + radar["professors"]) / 4


def mastery_score(radar: Dict[str, Any]) -> float:
    noise = external_noise(radar)
    return (
        (radar["inner"] * 0.5)
        + ((100 - radar["fog"]) * 0.3)
        + ((100 - noise) * 0.2)
    ) / 10


def impact_score(goal: Dict[str, Any], log_count: int) -> float:
    carb_count = sum(1 for field, _, _ in CARB_FIELDS if len(goal[field].strip()) > 2)
    goal_set = 1 if len(goal["title"]) > 2 else 0
    return (
        ((carb_count / 3) * 10 * 0.4)
        + (goal_set * 10 * 0.2)
        + (min(log_count, LOG_SATURATION) / LOG_SATURATION * 10 * 0.4)
    )


def compute_matrix(
    radar: Dict[str, Any], goal: Dict[str, Any], log_count: int
) -> Tuple[float, float]:
    """Return (x, y) = (mastery, impact)."""
    return mastery_score(radar), impact_score(goal, log_count)


def is_authorized(x: float, y: float) -> bool:
    return x > AUTHORIZATION_THRESHOLD and y > AUTHORIZATION_THRESHOLD


def marker_position(score: float) -> float:
    """Percent offset of the matrix marker, kept off the edges."""
    return min(max(score * 10, MARKER_MIN), MARKER_MAX)


def mission_frame(x: float, y: float) -> pd.DataFrame:
    """Single marker on a 0-100 grid, positioned like the matrix dot."""
    return pd.DataFrame(
        {
            "maitrise": [marker_position(x)],
            "impact": [marker_position(y)],
            "point": ["Moi"],
        }
    )


# ================== Gradio callbacks ==================


def load_mission_for_ui():
    """
    Returns:
        matrix:        DataFrame with the single (x, y) point
        mastery_text:  str (markdown)
        impact_text:   str (markdown)
        authorization: str (markdown, empty unless both scores clear the threshold)
    """
    radar = load_radar_data()
    goal = load_goal_data()
    log_count = len(load_logs_data())
    x, y = compute_matrix(radar, goal, log_count)

    mastery_text = f"### MAÎTRISE (X)\n# {x:.1f} <small>/10</small>"
    impact_text = f"### IMPACT (Y)\n# {y:.1f} <small>/10</small>"
    authorization = "✅ **Autorisation de Vol Validée**" if is_authorized(x, y) else ""
    return mission_frame(x, y), mastery_text, impact_text, authorization
