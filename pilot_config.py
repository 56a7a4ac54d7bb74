# pilot_config.py
"""
Central configuration for the pilot dashboard.

- DATA_DIR: directory holding one JSON file per persisted slice.
- LOG_LEVEL / LOG_FILE: logging setup (see logging_config.py).
- DATE_LOCALE: weekday table used to label log entries ("fr" or "en").
- SERVER_NAME / SERVER_PORT / SHARE: Gradio launch options.
"""

import os


def _bool_env(name: str, default: str = "false") -> bool:
    value = os.getenv(name, default).strip().lower()
    return value in {"1", "true", "yes", "y"}


# Where slices are stored on disk
DATA_DIR: str = os.getenv("PILOT_DATA_DIR", "user_data")

LOG_LEVEL: str = os.getenv("PILOT_LOG_LEVEL", "INFO").strip().upper()
LOG_FILE: str | None = os.getenv("PILOT_LOG_FILE", None)

# Locale of the short weekday names shown in the log ("Lun 1")
DATE_LOCALE: str = os.getenv("PILOT_DATE_LOCALE", "fr").strip().lower()

SERVER_NAME: str = os.getenv("PILOT_SERVER_NAME", "127.0.0.1")

try:
    SERVER_PORT: int = int(os.getenv("PILOT_SERVER_PORT", "7860"))
except ValueError:
    SERVER_PORT = 7860

SHARE: bool = _bool_env("PILOT_SHARE", "false")
