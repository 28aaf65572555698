"""Application-level runtime configuration.

Architectural role:
    Resolves storage locations, ingestion limits and logging/debug switches for
    the stores, the ingestion layer and the API adapters. Provider endpoints and
    defaults live in `teleporter.providers.provider_config`.

Determinism:
    Values are resolved once at import time from the process environment
    (after `load_dotenv()`).
"""

import os
import logging
from dotenv import load_dotenv

load_dotenv()

DATA_DIR = os.getenv("TELEPORTER_DATA_DIR", os.path.join(os.getcwd(), "data"))
SETTINGS_PATH = os.getenv("SETTINGS_PATH", os.path.join(DATA_DIR, "settings.json"))
HISTORY_PATH = os.getenv("HISTORY_PATH", os.path.join(DATA_DIR, "history.json"))

MAX_FILE_SIZE_MB = float(os.getenv("MAX_FILE_SIZE_MB", "10"))

# Sensitive request/response debug logging is opt-in.
DEBUG = os.getenv("DEBUG") == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def configure_logging():
    """Install a root handler for entrypoints (HTTP server, CLI)."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
