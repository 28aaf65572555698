"""OpenRouter adapter (OpenAI-compatible routing service).

Provider handling:
    - Model ids are forwarded unchanged (OpenRouter expects `vendor/model`).
    - Image analysis uses `OPENROUTER_VISION_MODEL` regardless of the
      configured model.
    - Image generation is only available for `dall-e` models; every other model
      raises `UnsupportedCapability`.
"""

from teleporter.providers.provider_config import (
    EMPTY_ANALYSIS_TEXT,
    IMAGE_ANALYSIS_INSTRUCTION,
    IMAGE_SIZE,
    OPENAI_IMAGE_MODEL,
    OPENROUTER_BASE_URL,
    OPENROUTER_VISION_MODEL,
    RECONSTRUCTION_TEMPLATE,
    ROUTED_DOCUMENT_ANALYZER_SYSTEM_MESSAGE,
    TEXT_ANALYSIS_INSTRUCTION,
)
from teleporter.providers.transport import (
    bearer_headers,
    chat_message_content,
    openai_image_request,
    post_json,
)
from teleporter.providers.types import (
    AnalysisResult,
    ReconstructionResult,
    SourceFile,
    UnsupportedCapability,
    text_output_url,
)


class OpenRouterAdapter:

    provider = "openrouter"

    def __init__(self, api_key: str, model: str):
        self.api_key = api_key
        self.model = model

    def _chat(self, model: str, messages: list[dict]) -> str | None:
        data = post_json(
            self.provider,
            f"{OPENROUTER_BASE_URL}/chat/completions",
            bearer_headers(self.api_key),
            {"model": model, "messages": messages},
        )
        return chat_message_content(self.provider, data)

    def analyze_image(self, file: SourceFile, instruction: str | None = None) -> AnalysisResult:
        content = self._chat(OPENROUTER_VISION_MODEL, [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": instruction or IMAGE_ANALYSIS_INSTRUCTION},
                    {"type": "image_url", "image_url": {"url": file.as_data_url()}},
                ],
            }
        ])
        return AnalysisResult(prompt=content or EMPTY_ANALYSIS_TEXT)

    def analyze_text(self, text: str, instruction: str | None = None) -> AnalysisResult:
        content = self._chat(self.model, [
            {"role": "system", "content": ROUTED_DOCUMENT_ANALYZER_SYSTEM_MESSAGE},
            {
                "role": "user",
                "content": f"{instruction or TEXT_ANALYSIS_INSTRUCTION}\n\n---\n{text}",
            },
        ])
        return AnalysisResult(prompt=content or EMPTY_ANALYSIS_TEXT)

    def generate_image(self, prompt: str) -> ReconstructionResult:
        if "dall-e" not in self.model:
            raise UnsupportedCapability(
                "Image generation is not implemented for generic OpenRouter models.",
                self.provider,
            )

        output_url = openai_image_request(
            self.provider,
            OPENROUTER_BASE_URL,
            self.api_key,
            prompt,
            OPENAI_IMAGE_MODEL,
            IMAGE_SIZE,
        )
        return ReconstructionResult(output_url=output_url)

    def generate_text(self, prompt: str) -> ReconstructionResult:
        content = self._chat(self.model, [
            {"role": "user", "content": RECONSTRUCTION_TEMPLATE.format(prompt=prompt)},
        ])
        return ReconstructionResult(output_url=text_output_url(content or ""))
