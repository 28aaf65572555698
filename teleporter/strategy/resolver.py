"""Logical model -> ordered execution strategies.

Architectural role:
    Turns the user's logical model choice plus the configured credentials into
    the ordered list of `(provider, credential, model)` attempts consumed by
    `teleporter.strategy.executor.execute`.

Classification (first match wins, plain substring tests):
    1. `gemini` in model   -> google, openrouter, openai (`gpt-4o`).
    2. `gpt` / `dall-e`    -> openai, openrouter, google (`gemini-1.5-flash`),
                              the google step is skipped for `dall-e` models.
    3. anything else       -> openrouter.
    4. empty result + openrouter credential -> one openrouter catch-all.

Determinism:
    Pure function of its inputs. No I/O, no clock, no randomness. Identical
    inputs always produce equal lists in identical order.

Edge cases:
    - Providers with missing or blank credentials are skipped silently.
    - An empty list is a valid result; callers decide how to surface it.
"""

from dataclasses import dataclass
from typing import Mapping


GEMINI_CROSS_FAMILY_MODEL = "gpt-4o"
GPT_CROSS_FAMILY_MODEL = "gemini-1.5-flash"

LABEL_NATIVE_GOOGLE = "Native A"
LABEL_ROUTED_GEMINI = "Routed A"
LABEL_NATIVE_OPENAI = "Native B"
LABEL_ROUTED_OPENAI = "Routed B"
LABEL_ROUTED_GENERIC = "Routed Generic"
LABEL_CATCH_ALL = "Default Catch-All"
LABEL_CROSS_FAMILY = "Fallback Cross-Family"


@dataclass(frozen=True)
class ExecutionStrategy:
    """One concrete attempt plan.

    Attributes:
        provider: Registry provider id.
        credential: Non-empty secret for that provider.
        model: Model id requested from the provider.
        label: Human-readable name for diagnostics and progress messages.
    """

    provider: str
    credential: str
    model: str
    label: str

    def describe(self) -> dict:
        """Return a credential-free view for logs and API responses."""
        return {"provider": self.provider, "model": self.model, "label": self.label}


def _credential(credentials: Mapping[str, str | None], provider: str) -> str:
    value = credentials.get(provider) or ""
    return value.strip()


def is_image_generation_model(logical_model: str) -> bool:
    return "dall-e" in logical_model


def resolve(logical_model: str, credentials: Mapping[str, str | None]) -> list[ExecutionStrategy]:
    """Build the ordered strategy list for `logical_model`.

    Args:
        logical_model: User-selected model name; classified by substring.
        credentials: Provider id -> secret. Blank values mean "not configured".

    Returns:
        Ordered strategies, never containing an empty credential. May be empty.
    """
    strategies: list[ExecutionStrategy] = []

    def add(provider: str, model: str, label: str):
        key = _credential(credentials, provider)
        if key:
            strategies.append(ExecutionStrategy(provider, key, model, label))

    if "gemini" in logical_model:
        add("google", logical_model, LABEL_NATIVE_GOOGLE)
        add("openrouter", logical_model, LABEL_ROUTED_GEMINI)
        add("openai", GEMINI_CROSS_FAMILY_MODEL, LABEL_CROSS_FAMILY)

    elif "gpt" in logical_model or "dall-e" in logical_model:
        add("openai", logical_model, LABEL_NATIVE_OPENAI)
        add("openrouter", logical_model, LABEL_ROUTED_OPENAI)
        # No google image output, so no cross-family step for image models.
        if not is_image_generation_model(logical_model):
            add("google", GPT_CROSS_FAMILY_MODEL, LABEL_CROSS_FAMILY)

    else:
        add("openrouter", logical_model, LABEL_ROUTED_GENERIC)

    if not strategies:
        add("openrouter", logical_model, LABEL_CATCH_ALL)

    return strategies
