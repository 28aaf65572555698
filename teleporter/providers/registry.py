"""Provider id -> adapter factory.

The table is closed: only ids in `ADAPTERS` resolve. Adapters are built
fresh per call and hold no shared state.
"""

from teleporter.providers.google import GoogleAdapter
from teleporter.providers.mock import MockAdapter
from teleporter.providers.openai import OpenAIAdapter
from teleporter.providers.openrouter import OpenRouterAdapter
from teleporter.providers.types import ProviderAdapter, UnsupportedProvider


ADAPTERS = {
    "google": GoogleAdapter,
    "openai": OpenAIAdapter,
    "openrouter": OpenRouterAdapter,
    "mock": MockAdapter,
}


def get_adapter(provider: str, api_key: str, model: str) -> ProviderAdapter:
    """Construct the adapter for `provider`.

    Raises:
        UnsupportedProvider: `provider` is not in the registry.
    """
    adapter_cls = ADAPTERS.get(provider)
    if adapter_cls is None:
        raise UnsupportedProvider(provider)
    return adapter_cls(api_key, model)
