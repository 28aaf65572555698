import pytest

from teleporter.providers.types import (
    AnalysisResult,
    ProviderError,
    ReconstructionResult,
    SourceFile,
)
from teleporter.storage.history_store import HistoryStore
from teleporter.storage.settings_store import SettingsStore


CREDENTIAL_ENV_VARS = ("OPENROUTER_API_KEY", "OPENAI_API_KEY", "GOOGLE_API_KEY", "XAI_API_KEY")


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep real credentials and key files out of every test."""
    for name in CREDENTIAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings_store(tmp_path):
    return SettingsStore(str(tmp_path / "settings.json"))


@pytest.fixture
def history_store(tmp_path):
    return HistoryStore(str(tmp_path / "history.json"))


@pytest.fixture
def image_file():
    return SourceFile(name="bird.png", mime_type="image/png", data=b"\x89PNG\r\n\x1a\nfake")


@pytest.fixture
def text_file():
    return SourceFile(name="notes.txt", mime_type="text/plain", data=b"# Title\n\nBody text")


class FakeAdapter:
    """Adapter double whose behavior is keyed by provider id.

    `behaviors[provider]` is either an exception instance (raised on every call)
    or a string used as the blueprint / output URL.
    """

    def __init__(self, provider, model, behavior, calls):
        self.provider = provider
        self.model = model
        self.behavior = behavior
        self.calls = calls

    def _run(self, capability, argument):
        self.calls.append((self.provider, self.model, capability, argument))
        if isinstance(self.behavior, Exception):
            raise self.behavior
        return self.behavior

    def analyze_image(self, file, instruction=None):
        return AnalysisResult(prompt=self._run("analyze_image", file))

    def analyze_text(self, text, instruction=None):
        return AnalysisResult(prompt=self._run("analyze_text", text))

    def generate_image(self, prompt):
        return ReconstructionResult(output_url=self._run("generate_image", prompt))

    def generate_text(self, prompt):
        return ReconstructionResult(output_url=self._run("generate_text", prompt))


class FakeRegistry:
    """Callable adapter factory recording every construction and call."""

    def __init__(self, behaviors=None):
        self.behaviors = dict(behaviors or {})
        self.built = []
        self.calls = []

    def __call__(self, provider, api_key, model):
        self.built.append((provider, api_key, model))
        behavior = self.behaviors.get(provider, ProviderError(f"{provider} down", provider))
        return FakeAdapter(provider, model, behavior, self.calls)


@pytest.fixture
def fake_registry():
    return FakeRegistry
