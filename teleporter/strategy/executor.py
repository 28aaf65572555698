"""Sequential fallback execution over resolved strategies.

Architectural role:
    Runs one capability (analyze/generate) against each strategy in order and
    returns the first success. Used by `teleporter.core.console` for both stages.

Control flow:
    for each strategy:
        adapter = registry(provider, credential, model)
        result = await to_thread(adapter.<capability>(argument))
        success -> return immediately
        failure -> record, notify observer, continue

Concurrency:
    Attempts are strictly sequential. The blocking adapter call runs in a worker
    thread (`asyncio.to_thread`) and is fully awaited before the next attempt.
    No speculative or parallel attempts are issued.

Retry behavior:
    One pass over the list. No backoff, no repeated attempts per strategy.

Failure handling model:
    - Empty strategy list -> `NoCredentials` before touching the registry.
    - Any exception from the registry or adapter is recorded and skipped.
    - Exhausted list -> `AllStrategiesFailed(attempts, last_error, failures)`.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from teleporter.providers.registry import get_adapter
from teleporter.providers.types import (
    AllStrategiesFailed,
    AnalysisResult,
    NoCredentials,
    ProviderAdapter,
    ReconstructionResult,
    SourceFile,
)
from teleporter.strategy.resolver import ExecutionStrategy


logger = logging.getLogger(__name__)

ANALYZE_IMAGE = "analyze_image"
ANALYZE_TEXT = "analyze_text"
GENERATE_IMAGE = "generate_image"
GENERATE_TEXT = "generate_text"

CAPABILITIES = (ANALYZE_IMAGE, ANALYZE_TEXT, GENERATE_IMAGE, GENERATE_TEXT)

AdapterFactory = Callable[[str, str, str], ProviderAdapter]
FailureObserver = Callable[[ExecutionStrategy, Exception], None]


@dataclass(frozen=True)
class CapabilitySelector:
    """Which adapter capability to call and with what argument.

    Attributes:
        capability: One of `CAPABILITIES`.
        argument: `SourceFile` for image analysis, text otherwise.
        instruction: Optional instruction override for analyze capabilities.
    """

    capability: str
    argument: Any
    instruction: str | None = None

    def __post_init__(self):
        if self.capability not in CAPABILITIES:
            raise ValueError(f"Unknown capability: {self.capability}")

    @classmethod
    def for_analysis(cls, file: SourceFile, instruction: str | None = None) -> "CapabilitySelector":
        """Pick image or text analysis from the file kind."""
        if file.is_image:
            return cls(ANALYZE_IMAGE, file, instruction)
        return cls(ANALYZE_TEXT, file.as_text(), instruction)

    @classmethod
    def for_reconstruction(cls, file: SourceFile, blueprint: str) -> "CapabilitySelector":
        """Pick image or text generation from the original file kind."""
        if file.is_image:
            return cls(GENERATE_IMAGE, blueprint)
        return cls(GENERATE_TEXT, blueprint)

    def invoke(self, adapter: ProviderAdapter) -> AnalysisResult | ReconstructionResult:
        method = getattr(adapter, self.capability)
        if self.capability in (ANALYZE_IMAGE, ANALYZE_TEXT):
            return method(self.argument, self.instruction)
        return method(self.argument)


def _notify(on_failure: FailureObserver | None, strategy: ExecutionStrategy, error: Exception):
    if on_failure is None:
        return
    try:
        on_failure(strategy, error)
    except Exception:
        logger.exception("Fallback observer raised for strategy %s", strategy.label)


async def execute(
    strategies: Sequence[ExecutionStrategy],
    selector: CapabilitySelector,
    on_failure: FailureObserver | None = None,
    adapter_factory: AdapterFactory = get_adapter,
) -> AnalysisResult | ReconstructionResult:
    """Try `strategies` in order and return the first successful result.

    Args:
        strategies: Ordered candidates from `resolve`.
        selector: Capability and argument to run on each adapter.
        on_failure: Observer called once per failed attempt.
        adapter_factory: Registry lookup, `get_adapter` by default.

    Returns:
        Result of the first strategy that succeeds.

    Raises:
        NoCredentials: `strategies` is empty.
        AllStrategiesFailed: every strategy failed.
    """
    if not strategies:
        raise NoCredentials()

    failures: list[tuple[str, Exception]] = []
    last_error: Exception | None = None

    for strategy in strategies:
        try:
            adapter = adapter_factory(strategy.provider, strategy.credential, strategy.model)
            result = await asyncio.to_thread(selector.invoke, adapter)
        except Exception as err:
            logger.warning(
                "Strategy %s (%s/%s) failed for %s: %s",
                strategy.label,
                strategy.provider,
                strategy.model,
                selector.capability,
                err,
            )
            failures.append((strategy.label, err))
            last_error = err
            _notify(on_failure, strategy, err)
            continue

        logger.info("Strategy %s succeeded for %s", strategy.label, selector.capability)
        return result

    logger.error(
        "All %d strategies failed for %s. Last error: %s",
        len(failures),
        selector.capability,
        last_error,
    )
    raise AllStrategiesFailed(len(failures), last_error, failures)
