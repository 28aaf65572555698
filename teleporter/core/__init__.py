"""Console orchestration package.

Composition:
    - `stages`: tagged stage variants and the transition error.
    - `console`: `ConsoleController`, which drives analyze/reconstruct through
      the strategy resolver and fallback executor.
"""
