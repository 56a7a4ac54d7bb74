import copy
import json
import logging
import os
import tempfile
from typing import Any, Optional

from pilot_config import DATA_DIR

logger = logging.getLogger("pilot.storage")

BASE_DIR = DATA_DIR


def ensure_base_dir() -> None:
    """Ensure that the base data directory exists."""
    os.makedirs(BASE_DIR, exist_ok=True)


def get_key_path(key: str) -> str:
    """Return the file backing a storage key."""
    return os.path.join(BASE_DIR, f"{key}.json")


def kv_get(key: str) -> Optional[str]:
    """Return the raw text stored under key, or None if nothing was ever written."""
    path = get_key_path(key)
    if not os.path.exists(path):
        return None
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def kv_set(key: str, text: str) -> None:
    """Durably replace the text stored under key (temp file + os.replace)."""
    path = get_key_path(key)
    parent = os.path.dirname(path)
    os.makedirs(parent, exist_ok=True)

    fd, tmp = tempfile.mkstemp(prefix=".tmp_slice_", dir=parent, text=True)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise


def load_slice(key: str, default: Any) -> Any:
    """
    Load a persisted slice, returning a copy of default when the key is
    missing, unreadable, not valid JSON, or holds a value of the wrong type.

    Dict slices are merged over their default so records written before a
    field existed still come back complete.
    """
    try:
        text = kv_get(key)
    except (OSError, UnicodeDecodeError):
        logger.warning("Could not read slice %r, using default", key, exc_info=True)
        return copy.deepcopy(default)

    if text is None:
        logger.debug("Slice %r not stored yet, using default", key)
        return copy.deepcopy(default)

    try:
        value = json.loads(text)
    except ValueError:
        logger.warning("Slice %r is corrupt, using default", key)
        return copy.deepcopy(default)

    if not isinstance(value, type(default)):
        logger.warning(
            "Slice %r holds %s, expected %s; using default",
            key,
            type(value).__name__,
            type(default).__name__,
        )
        return copy.deepcopy(default)

    if isinstance(default, dict):
        merged = copy.deepcopy(default)
        for field, field_value in value.items():
            if field in default and not _same_kind(field_value, default[field]):
                logger.warning(
                    "Slice %r field %r holds %s, using default",
                    key,
                    field,
                    type(field_value).__name__,
                )
                continue
            merged[field] = field_value
        return merged
    return value


def _same_kind(value: Any, default: Any) -> bool:
    """Type check for one stored field; ints and floats are interchangeable, bools are not."""
    if isinstance(default, bool) or isinstance(value, bool):
        return type(value) is type(default)
    if isinstance(default, (int, float)):
        return isinstance(value, (int, float))
    return isinstance(value, type(default))


def save_slice(key: str, value: Any) -> None:
    """Serialize and persist a slice. Failures are logged, never raised."""
    try:
        text = json.dumps(value, ensure_ascii=False, indent=2)
        kv_set(key, text)
    except (OSError, TypeError, ValueError):
        logger.exception("Failed to save slice %r", key)
        return
    logger.debug("Saved slice %r", key)

