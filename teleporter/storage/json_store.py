"""Atomic JSON file helpers shared by the settings and history stores.

Side effects:
    Writes `<path>.tmp` then atomically replaces `path`; creates the parent
    directory on first write.

Failure behavior:
    Reads never raise: missing or unreadable files yield the caller's default
    and are logged.
"""

import os
import json
import logging


logger = logging.getLogger(__name__)


def atomic_json_save(path, data):
    """Persist JSON data atomically via temporary file replacement.

    Args:
        path: Destination JSON path.
        data: JSON-serializable payload.
    """
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    tmp = path + ".tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    os.replace(tmp, path)


def load_json(path, default):
    """Load JSON from disk.

    Args:
        path: JSON file path.
        default: Value returned when the file is missing or unreadable.

    Returns:
        Parsed payload, or `default`.
    """
    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except Exception:
            logger.exception("Failed to load JSON from %s", path)
    return default
