"""Console stage variants.

Architectural role:
    Models the console lifecycle as a closed set of frozen dataclasses, each
    carrying exactly the data valid in that stage:

        Idle(file?) -> Analyzing(file) -> Editing(file, blueprint)
            -> Reconstructing(file, blueprint) -> Done(file, blueprint, output_url)

    `Done -> Editing` (back to blueprint) and `* -> Idle` (reset / new file)
    complete the graph. Combinations like "done without output" cannot be built.

Determinism:
    Pure data; transitions are enforced by `teleporter.core.console`.
"""

from dataclasses import dataclass

from teleporter.providers.types import SourceFile, TeleporterError


class InvalidTransition(TeleporterError):
    """A console action was requested from a stage that does not allow it."""


@dataclass(frozen=True)
class Idle:
    file: SourceFile | None = None
    name = "IDLE"


@dataclass(frozen=True)
class Analyzing:
    file: SourceFile
    name = "ANALYZING"


@dataclass(frozen=True)
class Editing:
    file: SourceFile
    blueprint: str
    name = "EDITING"


@dataclass(frozen=True)
class Reconstructing:
    file: SourceFile
    blueprint: str
    name = "RECONSTRUCTING"


@dataclass(frozen=True)
class Done:
    file: SourceFile
    blueprint: str
    output_url: str
    name = "DONE"


Stage = Idle | Analyzing | Editing | Reconstructing | Done
