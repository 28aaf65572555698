"""Console controller: the analyze -> edit -> reconstruct stage machine.

Architectural role:
    Holds the current source file, blueprint and output for one console session
    and drives both stages through the strategy resolver and fallback executor.
    Used by the HTTP API and the CLI adapters.

Control-flow model:
    1. `select_file` -> `Idle(file)`.
    2. `analyze` resolves strategies for the analyzer model and runs image or
       text analysis; success -> `Editing`, failure -> back to `Idle(file)`.
    3. `edit_blueprint` replaces the blueprint while `Editing`.
    4. `reconstruct` resolves strategies for the generator model; success ->
       `Done` plus one history record, failure -> `Editing` with the blueprint
       untouched.
    5. `back_to_blueprint` (`Done -> Editing`) drops only the output.
    6. `reset` -> `Idle()` from any stage.

Stale results:
    Every state-changing action advances an epoch counter. Each provider run
    captures the epoch it started under; a result (or failure) arriving after
    the epoch moved on is discarded and never applied or persisted.

Error handling strategy:
    `NoCredentials` and `AllStrategiesFailed` become a single user-facing
    `error` string. Illegal actions raise `InvalidTransition`. History write
    failures are logged and do not affect the stage.
"""

import base64
import binascii
import logging
from typing import Callable, Mapping

from teleporter.core.stages import (
    Analyzing,
    Done,
    Editing,
    Idle,
    InvalidTransition,
    Reconstructing,
    Stage,
)
from teleporter.ingestion.file_input import MIME_EXTENSIONS, FileInputError, build_source_file
from teleporter.providers.registry import get_adapter
from teleporter.providers.types import AllStrategiesFailed, NoCredentials, SourceFile
from teleporter.storage.history_store import HistoryRecord, HistoryStore
from teleporter.storage.settings_store import SettingsStore
from teleporter.strategy.executor import AdapterFactory, CapabilitySelector, execute
from teleporter.strategy.resolver import ExecutionStrategy, resolve


logger = logging.getLogger(__name__)

RESTORED_FILE_NAME = "restored_file"


def _failure_message(stage_label: str, err: Exception) -> str:
    if isinstance(err, AllStrategiesFailed):
        return (
            f"{stage_label} failed after trying {err.attempts} methods. "
            f"Last error: {err.last_error}"
        )
    return str(err)


def _restore_file(record: HistoryRecord) -> SourceFile:
    """Rebuild the source file from a history record's preview data URL."""
    mime_type = record.original_file_type or "application/octet-stream"
    name = RESTORED_FILE_NAME + MIME_EXTENSIONS.get(mime_type, "")
    preview = record.original_file_preview or ""

    if preview.startswith("data:") and "," in preview:
        try:
            data = base64.b64decode(preview.split(",", 1)[1])
            return build_source_file(name, mime_type, data)
        except (binascii.Error, ValueError, FileInputError):
            logger.warning("History record %s has an unreadable preview", record.id)

    return SourceFile(name=name, mime_type=mime_type, data=b"")


class ConsoleController:
    """One console session.

    Attributes:
        stage: Current stage variant.
        error: Last user-facing error message, or `None`.
        progress: Fallback progress messages for the current action.
    """

    def __init__(
        self,
        settings_store: SettingsStore,
        history_store: HistoryStore,
        adapter_factory: AdapterFactory = get_adapter,
        credentials: Callable[[], Mapping[str, str]] | None = None,
    ):
        self.settings_store = settings_store
        self.history_store = history_store
        self.adapter_factory = adapter_factory
        self._credentials = credentials
        self.stage: Stage = Idle()
        self.error: str | None = None
        self.progress: list[str] = []
        self._epoch = 0

    # ---------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------

    def _advance(self) -> int:
        self._epoch += 1
        return self._epoch

    def _is_current(self, epoch: int) -> bool:
        return epoch == self._epoch

    def _resolve(self, model_field: str) -> list[ExecutionStrategy]:
        settings = self.settings_store.load()
        credentials = self._credentials() if self._credentials else settings.credentials()
        return resolve(getattr(settings, model_field), credentials)

    def _observer(self, epoch: int):
        def on_failure(strategy: ExecutionStrategy, err: Exception):
            if self._is_current(epoch):
                self.progress.append(f"{strategy.label} failed. Trying next...")
        return on_failure

    # ---------------------------------------------------------
    # Stage actions
    # ---------------------------------------------------------

    def select_file(self, file: SourceFile) -> Stage:
        """Start over with a new source file."""
        self._advance()
        self.stage = Idle(file)
        self.error = None
        self.progress = []
        return self.stage

    def reset(self) -> Stage:
        """Discard file, blueprint and output from any stage."""
        self._advance()
        self.stage = Idle()
        self.error = None
        self.progress = []
        return self.stage

    def dismiss_error(self):
        self.error = None

    async def analyze(self, instruction: str | None = None) -> Stage:
        """Run the analysis stage for the selected file.

        Returns:
            The resulting stage. On missing credentials the stage is unchanged
            and `error` is set.

        Raises:
            InvalidTransition: no file selected, or not in `Idle`.
        """
        stage = self.stage
        if not isinstance(stage, Idle) or stage.file is None:
            raise InvalidTransition(f"Cannot analyze from {stage.name} without a file")

        file = stage.file
        strategies = self._resolve("analyzer_model")
        if not strategies:
            self.error = str(NoCredentials())
            return self.stage

        epoch = self._advance()
        self.stage = Analyzing(file)
        self.error = None
        self.progress = []

        try:
            result = await execute(
                strategies,
                CapabilitySelector.for_analysis(file, instruction),
                on_failure=self._observer(epoch),
                adapter_factory=self.adapter_factory,
            )
        except (AllStrategiesFailed, NoCredentials) as err:
            if not self._is_current(epoch):
                logger.info("Discarding stale analysis failure")
                return self.stage
            self.stage = Idle(file)
            self.error = _failure_message("Analysis", err)
            return self.stage

        if not self._is_current(epoch):
            logger.info("Discarding stale analysis result")
            return self.stage

        self.stage = Editing(file, result.prompt)
        return self.stage

    def edit_blueprint(self, blueprint: str) -> Stage:
        stage = self.stage
        if not isinstance(stage, Editing):
            raise InvalidTransition(f"Cannot edit blueprint from {stage.name}")
        self.stage = Editing(stage.file, blueprint)
        return self.stage

    async def reconstruct(self) -> Stage:
        """Run the reconstruction stage from the current blueprint.

        Raises:
            InvalidTransition: not in `Editing`, or the blueprint is empty.
        """
        stage = self.stage
        if not isinstance(stage, Editing):
            raise InvalidTransition(f"Cannot reconstruct from {stage.name}")
        if not stage.blueprint.strip():
            raise InvalidTransition("Cannot reconstruct from an empty blueprint")

        file, blueprint = stage.file, stage.blueprint
        strategies = self._resolve("generator_model")
        if not strategies:
            self.error = str(NoCredentials())
            return self.stage

        epoch = self._advance()
        self.stage = Reconstructing(file, blueprint)
        self.error = None
        self.progress = []

        try:
            result = await execute(
                strategies,
                CapabilitySelector.for_reconstruction(file, blueprint),
                on_failure=self._observer(epoch),
                adapter_factory=self.adapter_factory,
            )
        except (AllStrategiesFailed, NoCredentials) as err:
            if not self._is_current(epoch):
                logger.info("Discarding stale reconstruction failure")
                return self.stage
            self.stage = Editing(file, blueprint)
            self.error = _failure_message("Reconstruction", err)
            return self.stage

        if not self._is_current(epoch):
            logger.info("Discarding stale reconstruction result")
            return self.stage

        self.stage = Done(file, blueprint, result.output_url)
        self._record_history(file, blueprint, result.output_url)
        return self.stage

    def back_to_blueprint(self) -> Stage:
        stage = self.stage
        if not isinstance(stage, Done):
            raise InvalidTransition(f"Cannot return to blueprint from {stage.name}")
        self._advance()
        self.stage = Editing(stage.file, stage.blueprint)
        return self.stage

    def load_project(self, record: HistoryRecord) -> Stage:
        """Reopen a history record in the console."""
        self._advance()
        file = _restore_file(record)
        self.error = None
        self.progress = []
        if record.output_url:
            self.stage = Done(file, record.prompt, record.output_url)
        else:
            self.stage = Editing(file, record.prompt)
        return self.stage

    # ---------------------------------------------------------
    # Persistence and views
    # ---------------------------------------------------------

    def _record_history(self, file: SourceFile, blueprint: str, output_url: str):
        try:
            self.history_store.append(HistoryRecord.create(
                original_file_type=file.mime_type,
                original_file_preview=file.as_data_url(),
                prompt=blueprint,
                output_url=output_url,
            ))
        except Exception:
            logger.exception("Failed to save history record")

    def snapshot(self) -> dict:
        """Return a JSON-serializable view of the session."""
        stage = self.stage
        file = getattr(stage, "file", None)
        return {
            "stage": stage.name,
            "file_name": file.name if file else None,
            "file_type": file.mime_type if file else None,
            "blueprint": getattr(stage, "blueprint", None),
            "output_url": getattr(stage, "output_url", None),
            "error": self.error,
            "progress": list(self.progress),
        }
