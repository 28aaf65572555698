"""Google AI Studio (Gemini) adapter.

Provider handling:
    - Model ids are normalized: a `google/` prefix is stripped and OpenRouter
      aliases are mapped to AI Studio ids (`GOOGLE_MODEL_ALIASES`).
    - Requests go to `models/{model}:generateContent` with `x-goog-api-key`.
    - Image analysis sends the file inline (base64 + MIME type).

Capability limits:
    Gemini keys here accept multimodal input only; `generate_image` always
    raises `UnsupportedCapability`.
"""

from teleporter.providers.provider_config import (
    GEMINI_URL_TEMPLATE,
    GOOGLE_MODEL_ALIASES,
    PHOTOGRAPHIC_ANALYSIS_INSTRUCTION,
    RECONSTRUCTION_TEMPLATE,
    TEXT_ANALYSIS_INSTRUCTION,
)
from teleporter.providers.transport import post_json
from teleporter.providers.types import (
    AnalysisResult,
    ProviderError,
    ReconstructionResult,
    SourceFile,
    UnsupportedCapability,
    text_output_url,
)


def normalize_model(model: str) -> str:
    """Map a logical/OpenRouter model name to an AI Studio model id."""
    model_id = model.replace("google/", "")
    return GOOGLE_MODEL_ALIASES.get(model_id, model_id)


class GoogleAdapter:
    """Gemini `generateContent` adapter."""

    provider = "google"

    def __init__(self, api_key: str, model: str):
        self.api_key = api_key
        self.model = normalize_model(model)

    def _generate_content(self, parts: list[dict]) -> str:
        data = post_json(
            self.provider,
            GEMINI_URL_TEMPLATE.format(model=self.model),
            {"x-goog-api-key": self.api_key},
            {"contents": [{"role": "user", "parts": parts}]},
        )

        try:
            candidate_parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as err:
            raise ProviderError("GOOGLE RESPONSE MISSING CANDIDATES", self.provider) from err

        return "".join(
            str(part.get("text", "")) for part in candidate_parts if isinstance(part, dict)
        )

    def analyze_image(self, file: SourceFile, instruction: str | None = None) -> AnalysisResult:
        text = self._generate_content([
            {"text": instruction or PHOTOGRAPHIC_ANALYSIS_INSTRUCTION},
            {"inline_data": {"mime_type": file.mime_type, "data": file.as_base64()}},
        ])
        return AnalysisResult(prompt=text)

    def analyze_text(self, text: str, instruction: str | None = None) -> AnalysisResult:
        result = self._generate_content([
            {"text": instruction or TEXT_ANALYSIS_INSTRUCTION},
            {"text": text},
        ])
        return AnalysisResult(prompt=result)

    def generate_image(self, prompt: str) -> ReconstructionResult:
        raise UnsupportedCapability(
            "Image Generation is not supported directly via Google AI Studio keys. "
            "Please use OpenAI/DALL-E.",
            self.provider,
        )

    def generate_text(self, prompt: str) -> ReconstructionResult:
        content = self._generate_content([
            {"text": RECONSTRUCTION_TEMPLATE.format(prompt=prompt)},
        ])
        return ReconstructionResult(output_url=text_output_url(content))
