"""AI provider access package.

Architectural role:
    Provides the uniform capability contract, the concrete provider adapters and
    the registry used by the fallback executor to construct them.

Module split:
    - `provider_config`: environment-driven endpoints, defaults and key lookup.
    - `types`: results, source-file wrapper, adapter protocol and error taxonomy.
    - `transport`: shared HTTP request/response helpers.
    - `google`, `openai`, `openrouter`, `mock`: concrete adapters.
    - `registry`: provider id -> adapter factory.
"""
