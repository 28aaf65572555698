"""Provider/runtime configuration for the adapter layer.

Architectural role:
    Centralizes endpoints, default models, shared instructions and credential
    lookup for `teleporter.providers` adapters.

Determinism:
    Deterministic for a fixed process environment and key files. Values are
    resolved at import time (plus runtime key-file reads in `load_key`).

Failure behavior:
    Missing key material is represented as `None`; callers decide whether that
    is an error.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Single-attempt HTTP timeout applied by every adapter.
PROVIDER_TIMEOUT_SECONDS = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "120"))

# Artificial latency for the mock adapter (seconds).
MOCK_DELAY_SECONDS = float(os.getenv("MOCK_DELAY_SECONDS", "0"))

OPENAI_BASE_URL = "https://api.openai.com/v1"
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

GEMINI_URL_TEMPLATE = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "{model}:generateContent"
)

# Provider-side defaults used where the adapter ignores the configured model.
OPENAI_VISION_MODEL = "gpt-4o"
OPENAI_IMAGE_MODEL = "dall-e-3"
OPENROUTER_VISION_MODEL = "google/gemini-flash-1.5"
IMAGE_SIZE = "1024x1024"

# OpenRouter aliases -> Google AI Studio model ids.
GOOGLE_MODEL_ALIASES = {
    "gemini-flash-1.5": "gemini-1.5-flash",
    "gemini-pro-1.5": "gemini-1.5-pro",
}

MOCK_IMAGE_URL = "https://placehold.co/1024x1024/1a1a1a/FFF?text=Teleported+Image"


# Shared instructions sent with analysis/reconstruction requests.
IMAGE_ANALYSIS_INSTRUCTION = (
    "Analyze this image and provide a detailed text prompt that describes it "
    "perfectly for an image generation model. Include details about style, "
    "lighting, composition, and subjects. Output ONLY the prompt text."
)

PHOTOGRAPHIC_ANALYSIS_INSTRUCTION = (
    "Analyze this image as a professional director of photography and prompt "
    "engineer. Your goal is to reverse-engineer a text prompt that would "
    "generate an EXACT visual replica of this image.\n\n"
    "Focus heavily on:\n"
    "1. **Technical Meta-data**: Camera lens (e.g., 85mm f/1.8), Film stock "
    "(e.g., Kodak Portra 400), Shutter speed context (motion blur vs frozen).\n"
    "2. **Lighting Physics**: Exact direction, hardness/softness, color "
    "temperature (e.g., \"Golden Hour 2500K backlighting\"), and volumetric "
    "effects.\n"
    "3. **Texture & Quality**: Use keywords like \"8k resolution\", "
    "\"photorealistic\", \"octane render\", \"unreal engine 5\", "
    "\"hyper-detailed\".\n"
    "4. **Composition**: Rule of thirds, depth of field, foreground focus, "
    "background bokeh intensity.\n"
    "5. **Subject Specifics**: If a bird/insect, describe the EXACT "
    "feather/wing pattern, iridescence, and posture.\n\n"
    "Output ONLY the raw prompt text, no introductions or explanations."
)

TEXT_ANALYSIS_INSTRUCTION = (
    "Analyze the following text and reconstruct its formatting structure "
    "(headers, fonts, layout) and content into a structured textual blueprint."
)

DOCUMENT_ANALYZER_SYSTEM_MESSAGE = "You are an expert document analyzer."

ROUTED_DOCUMENT_ANALYZER_SYSTEM_MESSAGE = (
    "You are an expert document analyzer. Your goal is to extract the structure "
    "and content of a document into a standardized blueprint format."
)

RECONSTRUCTION_TEMPLATE = "Reconstruct the valid file content based on this blueprint:\n\n{prompt}"

# Placeholder returned when a chat response carries no content.
EMPTY_ANALYSIS_TEXT = "Analysis failed."


def load_key(path):
    """Load API key from environment override or key file.

    Resolution order:
        1. Environment variable inferred from file stem (for example
           `config/openai.key` -> `OPENAI_API_KEY`).
        2. Raw file contents at `path`.

    Args:
        path: Configured key file path or `None`.

    Returns:
        Key string or `None` when not available.

    Edge cases:
        - `None` path returns `None`.
        - Missing file returns `None`.
    """
    if not path:
        return None
    key_name = os.path.splitext(os.path.basename(path))[0].upper() + "_API_KEY"
    env_value = os.getenv(key_name)
    if env_value:
        return env_value
    if not os.path.exists(path):
        return None
    with open(path, "r", encoding="utf-8") as f:
        return f.read().strip()
