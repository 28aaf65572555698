import json

from teleporter.storage.history_store import HistoryRecord, HistoryStore
from teleporter.storage.settings_store import (
    DEFAULT_ANALYZER_MODEL,
    DEFAULT_GENERATOR_MODEL,
    AppSettings,
    SettingsStore,
)


# --- History ---

def test_history_is_most_recent_first(history_store):
    first = history_store.append(HistoryRecord.create("image/png", None, "one", "u1"))
    second = history_store.append(HistoryRecord.create("text/plain", None, "two", "u2"))

    assert [r.id for r in history_store.list_all()] == [second.id, first.id]


def test_history_persists_across_instances(tmp_path):
    path = str(tmp_path / "history.json")
    record = HistoryStore(path).append(HistoryRecord.create("image/png", "data:image/png;base64,AA", "bp", "u"))

    assert HistoryStore(path).list_all() == [record]
    assert HistoryStore(path).get(record.id) == record


def test_history_remove_and_clear(history_store):
    a = history_store.append(HistoryRecord.create("image/png", None, "a", "u"))
    b = history_store.append(HistoryRecord.create("image/png", None, "b", "u"))

    assert history_store.remove(a.id) is True
    assert history_store.remove("missing") is False
    assert history_store.list_all() == [b]

    history_store.clear()
    assert history_store.list_all() == []


def test_corrupt_history_is_empty(tmp_path):
    path = tmp_path / "history.json"
    path.write_text("{not json", encoding="utf-8")

    assert HistoryStore(str(path)).list_all() == []


def test_non_list_history_is_empty(tmp_path):
    path = tmp_path / "history.json"
    path.write_text(json.dumps({"id": "x"}), encoding="utf-8")

    assert HistoryStore(str(path)).list_all() == []


def test_malformed_entries_are_skipped(tmp_path):
    path = tmp_path / "history.json"
    good = HistoryRecord.create("image/png", None, "bp", "u")
    path.write_text(json.dumps([{"prompt": "no id"}, good.to_dict(), "junk"]), encoding="utf-8")

    assert HistoryStore(str(path)).list_all() == [good]


def test_record_create_sets_id_and_timestamp():
    a = HistoryRecord.create("image/png", None, "bp", "u")
    b = HistoryRecord.create("image/png", None, "bp", "u")

    assert a.id != b.id
    assert a.timestamp > 0
    assert a.status == "completed"


# --- Settings ---

def test_settings_defaults(settings_store):
    settings = settings_store.load()

    assert settings.analyzer_model == DEFAULT_ANALYZER_MODEL
    assert settings.generator_model == DEFAULT_GENERATOR_MODEL
    assert dict(settings.credentials()) == {"openrouter": "", "openai": "", "google": "", "xai": ""}


def test_settings_partial_update_persists(tmp_path):
    path = str(tmp_path / "settings.json")
    SettingsStore(path).update(openai_key="sk-123", analyzer_model="gpt-4o", bogus="x")

    settings = SettingsStore(path).load()
    assert settings.openai_key == "sk-123"
    assert settings.analyzer_model == "gpt-4o"
    assert settings.generator_model == DEFAULT_GENERATOR_MODEL
    assert "bogus" not in settings.to_dict()


def test_corrupt_settings_fall_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("[]", encoding="utf-8")

    assert SettingsStore(str(path)).load() == AppSettings()


def test_environment_seeds_empty_credentials(settings_store, monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "env-google")
    settings_store.update(openai_key="stored-openai")

    creds = settings_store.load().credentials()

    assert creds["google"] == "env-google"
    assert creds["openai"] == "stored-openai"


def test_key_file_seeds_credentials(settings_store, tmp_path):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "openrouter.key").write_text("file-key\n", encoding="utf-8")

    assert settings_store.load().credentials()["openrouter"] == "file-key"


def test_masked_hides_secrets():
    masked = AppSettings(openai_key="sk-abcdefghijkl", google_key="short").masked()

    assert masked["openai_key"] == "...ijkl"
    assert masked["google_key"] == "***"
    assert masked["openrouter_key"] == ""
