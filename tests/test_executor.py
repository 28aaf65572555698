import pytest
from unittest.mock import MagicMock

from teleporter.providers.types import (
    AllStrategiesFailed,
    AnalysisResult,
    NoCredentials,
    ProviderError,
    ReconstructionResult,
    SourceFile,
    UnsupportedCapability,
    UnsupportedProvider,
)
from teleporter.strategy.executor import CapabilitySelector, execute
from teleporter.strategy.resolver import ExecutionStrategy


STRATEGIES = [
    ExecutionStrategy("google", "g-key", "gemini-pro", "Native A"),
    ExecutionStrategy("openrouter", "or-key", "gemini-pro", "Routed A"),
    ExecutionStrategy("openai", "oa-key", "gpt-4o", "Fallback Cross-Family"),
]


@pytest.mark.asyncio
async def test_first_two_fail_third_succeeds(fake_registry):
    registry = fake_registry({"openai": "blueprint from openai"})
    observer = MagicMock()

    result = await execute(
        STRATEGIES,
        CapabilitySelector("analyze_text", "some text"),
        on_failure=observer,
        adapter_factory=registry,
    )

    assert result == AnalysisResult(prompt="blueprint from openai")
    assert observer.call_count == 2
    assert [c.args[0].label for c in observer.call_args_list] == ["Native A", "Routed A"]
    assert [b[0] for b in registry.built] == ["google", "openrouter", "openai"]


@pytest.mark.asyncio
async def test_first_success_stops_the_chain(fake_registry):
    registry = fake_registry({"google": "native blueprint", "openrouter": "unused"})
    observer = MagicMock()

    result = await execute(
        STRATEGIES,
        CapabilitySelector("analyze_text", "text"),
        on_failure=observer,
        adapter_factory=registry,
    )

    assert result.prompt == "native blueprint"
    assert observer.call_count == 0
    assert len(registry.built) == 1


@pytest.mark.asyncio
async def test_all_fail_raises_aggregate(fake_registry):
    last = ProviderError("OPENAI HTTP ERROR (429)", "openai", 429)
    registry = fake_registry({
        "google": ProviderError("google down", "google"),
        "openrouter": UnsupportedCapability("nope", "openrouter"),
        "openai": last,
    })
    observer = MagicMock()

    with pytest.raises(AllStrategiesFailed) as exc_info:
        await execute(
            STRATEGIES,
            CapabilitySelector("generate_image", "a prompt"),
            on_failure=observer,
            adapter_factory=registry,
        )

    err = exc_info.value
    assert err.attempts == 3
    assert err.last_error is last
    assert [label for label, _ in err.failures] == ["Native A", "Routed A", "Fallback Cross-Family"]
    assert "429" in str(err)
    assert observer.call_count == 3


@pytest.mark.asyncio
async def test_empty_list_raises_no_credentials_without_registry():
    factory = MagicMock()

    with pytest.raises(NoCredentials):
        await execute([], CapabilitySelector("generate_text", "p"), adapter_factory=factory)

    factory.assert_not_called()


@pytest.mark.asyncio
async def test_registry_errors_count_as_failures(fake_registry):
    output_url = "data:text/plain;base64,aGk="
    registry = fake_registry({"openai": output_url})

    def factory(provider, key, model):
        if provider == "google":
            raise UnsupportedProvider(provider)
        return registry(provider, key, model)

    result = await execute(
        [STRATEGIES[0], STRATEGIES[2]],
        CapabilitySelector("generate_text", "blueprint"),
        adapter_factory=factory,
    )

    assert result == ReconstructionResult(output_url=output_url)


@pytest.mark.asyncio
async def test_observer_errors_do_not_break_the_chain(fake_registry):
    registry = fake_registry({"openai": "ok"})
    observer = MagicMock(side_effect=RuntimeError("ui gone"))

    result = await execute(
        STRATEGIES,
        CapabilitySelector("analyze_text", "t"),
        on_failure=observer,
        adapter_factory=registry,
    )

    assert result.prompt == "ok"
    assert observer.call_count == 2


@pytest.mark.asyncio
async def test_attempts_are_sequential(fake_registry):
    registry = fake_registry({"openai": "done"})

    await execute(STRATEGIES, CapabilitySelector("analyze_text", "t"), adapter_factory=registry)

    assert [c[0] for c in registry.calls] == ["google", "openrouter", "openai"]


def test_selector_picks_capability_by_file_kind(image_file, text_file):
    assert CapabilitySelector.for_analysis(image_file).capability == "analyze_image"
    assert CapabilitySelector.for_analysis(image_file).argument is image_file

    text_selector = CapabilitySelector.for_analysis(text_file)
    assert text_selector.capability == "analyze_text"
    assert text_selector.argument == "# Title\n\nBody text"

    assert CapabilitySelector.for_reconstruction(image_file, "bp").capability == "generate_image"
    assert CapabilitySelector.for_reconstruction(text_file, "bp").capability == "generate_text"


def test_selector_uses_extracted_document_text():
    pdf = SourceFile(name="a.pdf", mime_type="application/pdf", data=b"%PDF", text="page one")

    assert CapabilitySelector.for_analysis(pdf).argument == "page one"


def test_selector_rejects_unknown_capability():
    with pytest.raises(ValueError):
        CapabilitySelector("summarize", "x")


def test_selector_passes_instruction_to_analysis():
    adapter = MagicMock()
    adapter.analyze_text.return_value = AnalysisResult(prompt="p")

    CapabilitySelector("analyze_text", "body", "be brief").invoke(adapter)

    adapter.analyze_text.assert_called_once_with("body", "be brief")
