from typing import Any, Dict, Tuple

import pandas as pd

from storage import load_slice, save_slice

RADAR_KEY = "pilot_radar"

FOG_OPTIMAL = "OPTIMAL"
FOG_INTERMEDIATE = "INTERMEDIATE"
FOG_CRITICAL = "CRITICAL"

# (field, chart label) for the five influence sources, in chart order
INFLUENCE_SOURCES = [
    ("inner", "Voix Int."),
    ("peers", "Pairs/Amis"),
    ("family", "Famille"),
    ("media", "Médias"),
    ("professors", "Profs"),
]

RADAR_FIELDS = tuple(field for field, _ in INFLUENCE_SOURCES) + ("fog",)

SIGNAL_ANALYSIS = {
    FOG_OPTIMAL: {
        "label": "OPTIMAL",
        "message": "Visibilité excellente. Conditions de vol idéales.",
        "color": "#34d399",
    },
    FOG_INTERMEDIATE: {
        "label": "INTERMÉDIAIRE",
        "message": "Visibilité réduite. Soyez vigilant aux interférences.",
        "color": "#fb923c",
    },
    FOG_CRITICAL: {
        "label": "CRITIQUE",
        "message": "Visibilité nulle. Arrêt immédiat conseillé.",
        "color": "#ef4444",
    },
}


def default_radar() -> Dict[str, int]:
    return {
        "inner": 30,
        "peers": 90,
        "family": 50,
        "media": 70,
        "professors": 60,
        "fog": 75,
    }


def load_radar_data() -> Dict[str, Any]:
    return load_slice(RADAR_KEY, default_radar())


def save_radar_data(data: Dict[str, Any]) -> None:
    save_slice(RADAR_KEY, data)


def update_radar_field(key: str, value) -> Dict[str, Any]:
    """Set one radar field and persist the slice. Raises KeyError on an unknown field."""
    if key not in RADAR_FIELDS:
        raise KeyError(key)
    data = load_radar_data()
    data[key] = int(round(float(value)))
    save_radar_data(data)
    return data


def classify_fog(fog: int) -> str:
    """
    Map a fog level in [0, 100] to its band.

    30 is still OPTIMAL and 70 is still INTERMEDIATE.
    """
    if fog <= 30:
        return FOG_OPTIMAL
    if fog <= 70:
        return FOG_INTERMEDIATE
    return FOG_CRITICAL


def analyze_signal(fog: int) -> Dict[str, str]:
    """Return the band plus its display label, message and color."""
    band = classify_fog(fog)
    analysis = {"band": band}
    analysis.update(SIGNAL_ANALYSIS[band])
    return analysis


def radar_chart_frame(radar: Dict[str, Any]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "source": [label for _, label in INFLUENCE_SOURCES],
            "level": [radar[field] for field, _ in INFLUENCE_SOURCES],
        }
    )


def format_signal_markdown(fog: int) -> Tuple[str, str]:
    """Return (status line, system analysis block) for the radar page."""
    analysis = analyze_signal(fog)
    status = (
        f"**DENSITÉ BROUILLARD** : {fog}% · "
        f"<span style='color:{analysis['color']}'>**{analysis['label']}**</span>"
    )
    block = (
        f"#### <span style='color:{analysis['color']}'>ANALYSE SYSTÈME</span>\n"
        f"{analysis['message']}"
    )
    return status, block


# ================== Gradio callbacks ==================


def load_radar_for_ui():
    """
    Returns:
        inner, peers, family, media, professors, fog: slider values
        fog_status:  str (markdown)
        analysis:    str (markdown)
        chart:       DataFrame for the influence bar plot
    """
    data = load_radar_data()
    fog_status, analysis = format_signal_markdown(data["fog"])
    return (
        data["inner"],
        data["peers"],
        data["family"],
        data["media"],
        data["professors"],
        data["fog"],
        fog_status,
        analysis,
        radar_chart_frame(data),
    )


def update_radar_action(key: str, value):
    """Gradio callback: persist one slider, then refresh the analysis and chart."""
    data = update_radar_field(key, value)
    fog_status, analysis = format_signal_markdown(data["fog"])
    return fog_status, analysis, radar_chart_frame(data)
