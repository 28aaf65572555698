"""Persisted user settings: provider credentials and logical model choices.

Purpose of this abstraction:
    Keep the credential slots and the analyzer/generator model selections in one
    JSON document (`settings.json`) that survives restarts, and hand the strategy
    resolver a read-only credential mapping.

Credential resolution:
    Stored value first; when a slot is empty, the matching environment variable
    or key file (`config/<provider>.key`, via `load_key`) seeds it.

Concurrency:
    Writes are "last write wins"; a lock serializes read-modify-write cycles
    issued from API worker threads.
"""

import threading
import logging
from dataclasses import asdict, dataclass, fields
from types import MappingProxyType
from typing import Mapping

from teleporter.config import SETTINGS_PATH
from teleporter.providers.provider_config import load_key
from teleporter.storage.json_store import atomic_json_save, load_json


logger = logging.getLogger(__name__)

DEFAULT_ANALYZER_MODEL = "google/gemini-flash-1.5"
DEFAULT_GENERATOR_MODEL = "openai/dall-e-3"

# Settings field -> (provider id, key file consulted when the field is empty).
CREDENTIAL_FIELDS = {
    "openrouter_key": ("openrouter", "config/openrouter.key"),
    "openai_key": ("openai", "config/openai.key"),
    "google_key": ("google", "config/google.key"),
    "xai_key": ("xai", "config/xai.key"),
}


@dataclass
class AppSettings:
    """Snapshot of the persisted settings document."""

    openrouter_key: str = ""
    openai_key: str = ""
    google_key: str = ""
    xai_key: str = ""
    analyzer_model: str = DEFAULT_ANALYZER_MODEL
    generator_model: str = DEFAULT_GENERATOR_MODEL

    @classmethod
    def from_dict(cls, data) -> "AppSettings":
        """Build settings from stored JSON, ignoring unknown/invalid fields."""
        if not isinstance(data, dict):
            return cls()
        known = {f.name for f in fields(cls)}
        values = {
            k: v for k, v in data.items()
            if k in known and isinstance(v, str)
        }
        return cls(**values)

    def to_dict(self) -> dict:
        return asdict(self)

    def credentials(self) -> Mapping[str, str]:
        """Return a read-only provider id -> secret mapping.

        Empty slots are filled from the environment/key files when available.
        """
        creds = {}
        for field_name, (provider, key_file) in CREDENTIAL_FIELDS.items():
            value = getattr(self, field_name).strip()
            if not value:
                value = (load_key(key_file) or "").strip()
            creds[provider] = value
        return MappingProxyType(creds)

    def masked(self) -> dict:
        """Return settings with secrets reduced to a presence hint."""
        data = self.to_dict()
        for field_name in CREDENTIAL_FIELDS:
            value = data[field_name]
            data[field_name] = f"...{value[-4:]}" if len(value) > 8 else ("***" if value else "")
        return data


class SettingsStore:
    """JSON-file backed settings store."""

    def __init__(self, path: str = SETTINGS_PATH):
        self.path = path
        self._lock = threading.Lock()

    def load(self) -> AppSettings:
        """Read current settings; missing or corrupt files yield defaults."""
        return AppSettings.from_dict(load_json(self.path, {}))

    def update(self, **changes) -> AppSettings:
        """Replace any subset of fields and persist the result.

        Unknown fields and non-string values are ignored.
        """
        with self._lock:
            current = self.load().to_dict()
            for key, value in changes.items():
                if key in current and isinstance(value, str):
                    current[key] = value
                else:
                    logger.debug("Ignoring settings field %s", key)
            updated = AppSettings.from_dict(current)
            atomic_json_save(self.path, updated.to_dict())
            return updated
