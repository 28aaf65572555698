"""Matter Stream teleporter package.

Architectural role:
    Turns an uploaded file into a textual blueprint (analysis) and rebuilds an
    output artifact from that blueprint (reconstruction), using whichever AI
    providers the user has credentials for.

Package split:
    - `providers`: provider adapters, shared transport helpers, registry.
    - `strategy`: candidate-strategy resolution and sequential fallback execution.
    - `core`: console stage machine orchestrating the two stages.
    - `storage`: JSON-backed settings and history persistence.
    - `ingestion`: source-file loading and text extraction.
    - `api`: HTTP and CLI adapters.
"""

__version__ = "0.1.0"
