import pytest

from teleporter.strategy.resolver import (
    GEMINI_CROSS_FAMILY_MODEL,
    GPT_CROSS_FAMILY_MODEL,
    ExecutionStrategy,
    resolve,
)

ALL_KEYS = {"google": "g-key", "openrouter": "or-key", "openai": "oa-key"}
NO_KEYS = {"google": "", "openrouter": "", "openai": "", "xai": ""}


@pytest.mark.parametrize("model", ["gemini-1.5-flash", "google/gemini-flash-1.5", "my-gemini-variant"])
def test_gemini_with_only_google_key(model):
    strategies = resolve(model, {"google": "g-key"})

    assert strategies == [ExecutionStrategy("google", "g-key", model, "Native A")]


def test_gemini_full_chain_order():
    model = "google/gemini-flash-1.5"
    strategies = resolve(model, ALL_KEYS)

    assert [s.provider for s in strategies] == ["google", "openrouter", "openai"]
    assert [s.label for s in strategies] == ["Native A", "Routed A", "Fallback Cross-Family"]
    assert strategies[0].model == model
    assert strategies[1].model == model
    assert strategies[2].model == GEMINI_CROSS_FAMILY_MODEL
    assert strategies[2].model != model


def test_gpt_full_chain_order():
    model = "openai/gpt-4o-mini"
    strategies = resolve(model, ALL_KEYS)

    assert [(s.provider, s.model, s.label) for s in strategies] == [
        ("openai", model, "Native B"),
        ("openrouter", model, "Routed B"),
        ("google", GPT_CROSS_FAMILY_MODEL, "Fallback Cross-Family"),
    ]


def test_dall_e_with_only_google_key_is_empty():
    assert resolve("openai/dall-e-3", {"google": "g-key"}) == []


def test_dall_e_skips_google_cross_family():
    strategies = resolve("openai/dall-e-3", ALL_KEYS)

    assert [s.provider for s in strategies] == ["openai", "openrouter"]


def test_unrecognized_model_with_openrouter_key():
    model = "anthropic/claude-3.5-sonnet"
    strategies = resolve(model, {"openrouter": "or-key"})

    assert strategies == [ExecutionStrategy("openrouter", "or-key", model, "Routed Generic")]


def test_unrecognized_model_ignores_native_keys():
    assert resolve("mistral-large", {"google": "g-key", "openai": "oa-key"}) == []


@pytest.mark.parametrize("model", ["gemini-pro", "gpt-4o", "dall-e-3", "llama-3", ""])
def test_no_credentials_yields_empty_list(model):
    assert resolve(model, NO_KEYS) == []
    assert resolve(model, {}) == []


def test_blank_credentials_are_skipped():
    strategies = resolve("gemini-pro", {"google": "   ", "openrouter": "or-key", "openai": None})

    assert [s.provider for s in strategies] == ["openrouter"]
    assert all(s.credential for s in strategies)


def test_first_matching_family_wins():
    strategies = resolve("gpt-gemini-hybrid", ALL_KEYS)

    assert strategies[0].provider == "google"
    assert strategies[0].label == "Native A"


def test_openai_only_serves_gemini_through_cross_family():
    strategies = resolve("gemini-1.5-pro", {"openai": "oa-key"})

    assert strategies == [
        ExecutionStrategy("openai", "oa-key", GEMINI_CROSS_FAMILY_MODEL, "Fallback Cross-Family")
    ]


def test_resolve_is_deterministic():
    first = resolve("google/gemini-flash-1.5", ALL_KEYS)
    second = resolve("google/gemini-flash-1.5", ALL_KEYS)

    assert first == second
    assert first is not second


def test_describe_omits_credential():
    strategy = resolve("gpt-4o", {"openai": "secret-key"})[0]

    assert strategy.describe() == {"provider": "openai", "model": "gpt-4o", "label": "Native B"}
