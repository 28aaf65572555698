"""Offline mock adapter.

Returns canned blueprints and a placeholder image after an optional delay
(`MOCK_DELAY_SECONDS`). Reachable through the registry for demos and tests;
never selected by the strategy resolver.
"""

import time

from teleporter.providers.provider_config import MOCK_DELAY_SECONDS, MOCK_IMAGE_URL
from teleporter.providers.types import (
    AnalysisResult,
    ReconstructionResult,
    SourceFile,
    text_output_url,
)


MOCK_IMAGE_BLUEPRINT = (
    "A high-quality, photorealistic image of a futuristic teleportation device "
    "composed of shimmering glass and neon lights. Cyberpunk aesthetic, 8k "
    "resolution, cinematic lighting, blue and purple color palette."
)

MOCK_TEXT_BLUEPRINT = (
    "Document Structure:\n"
    "- Header: Main Title (Bold, 24px)\n"
    "- Paragraph: Introduction text\n"
    "- List: 3 bullet points\n\n"
    "Content:\n"
    "1. Introduction to Teleportation\n"
    "2. Safety Protocols\n"
    "3. User Manual"
)


class MockAdapter:

    provider = "mock"

    def __init__(self, api_key: str = "", model: str = "mock", delay: float | None = None):
        self.api_key = api_key
        self.model = model
        self.delay = MOCK_DELAY_SECONDS if delay is None else delay

    def _wait(self, factor: float = 1.0):
        if self.delay > 0:
            time.sleep(self.delay * factor)

    def analyze_image(self, file: SourceFile, instruction: str | None = None) -> AnalysisResult:
        self._wait(1.5)
        return AnalysisResult(prompt=MOCK_IMAGE_BLUEPRINT, metadata={"mock": True})

    def analyze_text(self, text: str, instruction: str | None = None) -> AnalysisResult:
        self._wait()
        return AnalysisResult(prompt=MOCK_TEXT_BLUEPRINT, metadata={"mock": True})

    def generate_image(self, prompt: str) -> ReconstructionResult:
        self._wait(2.0)
        return ReconstructionResult(output_url=MOCK_IMAGE_URL)

    def generate_text(self, prompt: str) -> ReconstructionResult:
        self._wait(1.5)
        content = (
            "[MOCK RECONSTRUCTION]\n\n"
            f"Based on blueprint:\n{prompt}\n\n"
            "Here is the reconstructed content..."
        )
        return ReconstructionResult(output_url=text_output_url(content))
