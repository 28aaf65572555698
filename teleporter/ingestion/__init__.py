"""Source-file ingestion package.

Architectural role:
- Loads uploaded files into `SourceFile` objects for the analysis stage.
- Applies size/type constraints and pre-extracts document text.

Scope:
- Content preprocessing only; no provider calls and no HTTP endpoints.
"""
