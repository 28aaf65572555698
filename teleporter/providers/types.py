"""Capability contract shared by every provider adapter.

Architectural role:
    Defines the result shapes, the source-file wrapper, the adapter protocol and
    the error taxonomy consumed by `teleporter.strategy` and `teleporter.core`.

Result shapes:
    - `AnalysisResult`: blueprint text plus optional opaque metadata.
    - `ReconstructionResult`: locator (URL or data URL) of the produced artifact.

Error taxonomy:
    - `ProviderError`: one adapter call failed (transport, auth, quota, parsing).
    - `UnsupportedCapability`: the provider cannot perform the requested call.
    - `UnsupportedProvider`: the registry has no adapter for the id.
    - `NoCredentials`: no strategy could be built for the selected model.
    - `AllStrategiesFailed`: every strategy in a fallback chain failed.

Determinism:
    Pure data definitions; no side effects at import time.
"""

import base64
from dataclasses import dataclass, field
from typing import Any, Protocol


# ============================================================
# RESULTS
# ============================================================

@dataclass(frozen=True)
class AnalysisResult:
    """Blueprint text produced by an analyze capability."""

    prompt: str
    metadata: dict[str, Any] | None = None


@dataclass(frozen=True)
class ReconstructionResult:
    """Reference to an artifact produced by a generate capability."""

    output_url: str


def text_output_url(content: str) -> str:
    """Encode generated text as a `data:text/plain` locator."""
    encoded = base64.b64encode(content.encode("utf-8")).decode("ascii")
    return f"data:text/plain;charset=utf-8;base64,{encoded}"


# ============================================================
# SOURCE FILE
# ============================================================

@dataclass(frozen=True)
class SourceFile:
    """In-memory uploaded file handed to analysis adapters.

    Attributes:
        name: Original file name (display only).
        mime_type: Detected MIME type, for example `image/png`.
        data: Raw file bytes.
        text: Pre-extracted text for document kinds (PDF/DOCX/CSV); `None` when
            the raw bytes are the text.
    """

    name: str
    mime_type: str
    data: bytes = field(repr=False)
    text: str | None = field(default=None, repr=False)

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    def as_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def as_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.as_base64()}"

    def as_text(self) -> str:
        if self.text is not None:
            return self.text
        return self.data.decode("utf-8", errors="ignore")


# ============================================================
# ADAPTER CONTRACT
# ============================================================

class ProviderAdapter(Protocol):
    """Uniform capability interface implemented by each provider adapter.

    All methods are blocking and are executed off the event loop by the
    fallback executor. Every failure is raised as `ProviderError` (or its
    `UnsupportedCapability` subclass).
    """

    provider: str
    model: str

    def analyze_image(self, file: SourceFile, instruction: str | None = None) -> AnalysisResult:
        ...

    def analyze_text(self, text: str, instruction: str | None = None) -> AnalysisResult:
        ...

    def generate_image(self, prompt: str) -> ReconstructionResult:
        ...

    def generate_text(self, prompt: str) -> ReconstructionResult:
        ...


# ============================================================
# ERRORS
# ============================================================

class TeleporterError(Exception):
    """Base class for all errors raised by the teleporter package."""


class ProviderError(TeleporterError):
    """A single provider call failed.

    Attributes:
        provider: Provider id that raised the error.
        status_code: HTTP status when the failure came from an HTTP response.
    """

    def __init__(self, message: str, provider: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class UnsupportedCapability(ProviderError):
    """The provider/model pair cannot perform the requested capability."""


class UnsupportedProvider(TeleporterError):
    """The registry has no adapter for the requested provider id."""

    def __init__(self, provider: str):
        super().__init__(f"Unsupported provider: {provider}")
        self.provider = provider


class NoCredentials(TeleporterError):
    """No execution strategy is available for the selected model chain."""

    def __init__(self, message: str = "No valid API keys found for the selected model chain. Please check Settings."):
        super().__init__(message)


class AllStrategiesFailed(TeleporterError):
    """Every strategy in the fallback chain failed.

    Attributes:
        attempts: Number of strategies that were tried.
        last_error: Exception raised by the final strategy.
        failures: `(label, error)` pairs in attempt order.
    """

    def __init__(self, attempts: int, last_error: Exception, failures: list[tuple[str, Exception]] | None = None):
        super().__init__(
            f"All {attempts} execution strategies failed. Last error: {last_error}"
        )
        self.attempts = attempts
        self.last_error = last_error
        self.failures = list(failures or [])
