"""Shared HTTP transport helpers for provider adapters.

Architectural role:
    Executes one JSON POST against a provider endpoint and converts every
    transport/HTTP/parse failure into a sanitized `ProviderError`.

Retry behavior:
    No retry loop is implemented. Each HTTP call is attempted once with the
    configured timeout; fallback across providers is the executor's concern.

Security considerations:
    Error messages carry the provider label and status code only. Response
    bodies and credentials are never copied into exceptions or logs.
"""

import logging

import requests

from teleporter.providers.provider_config import PROVIDER_TIMEOUT_SECONDS
from teleporter.providers.types import ProviderError


logger = logging.getLogger(__name__)


def _build_sanitized_http_error(provider_name: str, err: requests.exceptions.RequestException) -> ProviderError:
    """Build a provider-labeled HTTP error without exposing raw internals.

    Args:
        provider_name: Provider id used as label.
        err: Request exception instance.

    Returns:
        `ProviderError` with optional status code.
    """
    status_code = None
    if getattr(err, "response", None) is not None:
        status_code = getattr(err.response, "status_code", None)

    label = str(provider_name or "provider").upper()
    if status_code:
        return ProviderError(f"{label} HTTP ERROR ({status_code})", provider_name, status_code)
    return ProviderError(f"{label} HTTP ERROR", provider_name)


def post_json(provider_name: str, url: str, headers: dict, payload: dict) -> dict:
    """POST a JSON payload and return the decoded JSON body.

    Args:
        provider_name: Provider id used for error labels.
        url: Endpoint URL.
        headers: Request headers (auth included by caller).
        payload: JSON-serializable request body.

    Returns:
        Parsed JSON response as dict.

    Failure scenarios:
        - Connection/timeout/HTTP status failures -> `ProviderError`.
        - Non-JSON or non-object body -> `ProviderError`.
    """
    try:
        response = requests.post(
            url,
            headers={"Content-Type": "application/json", **headers},
            json=payload,
            timeout=PROVIDER_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.RequestException as err:
        raise _build_sanitized_http_error(provider_name, err) from err
    except ValueError as err:
        raise ProviderError(f"{provider_name.upper()} RETURNED INVALID JSON", provider_name) from err

    if not isinstance(data, dict):
        raise ProviderError(f"{provider_name.upper()} RETURNED UNEXPECTED PAYLOAD", provider_name)

    return data


def bearer_headers(api_key: str) -> dict:
    return {"Authorization": f"Bearer {api_key}"}


def chat_message_content(provider_name: str, data: dict) -> str | None:
    """Extract `choices[0].message.content` from an OpenAI-compatible reply.

    Returns:
        Message text, or `None` when the reply carries no content.

    Failure scenarios:
        Structurally malformed replies (no `choices`) -> `ProviderError`.
    """
    try:
        choice = data["choices"][0]
    except (KeyError, IndexError, TypeError) as err:
        raise ProviderError(f"{provider_name.upper()} RESPONSE MISSING CHOICES", provider_name) from err

    message = choice.get("message") or {}
    content = message.get("content")
    if isinstance(content, str) and content:
        return content
    return None


def openai_image_request(provider_name: str, base_url: str, api_key: str, prompt: str, model: str, size: str) -> str:
    """Run an Images API generation and return a PNG data URL.

    Used by OpenAI and by OpenRouter for `dall-e` models.

    Failure scenarios:
        - HTTP failures -> `ProviderError`.
        - Missing `b64_json` payload -> `ProviderError`.
    """
    data = post_json(
        provider_name,
        f"{base_url}/images/generations",
        bearer_headers(api_key),
        {
            "model": model,
            "prompt": prompt,
            "n": 1,
            "size": size,
            "response_format": "b64_json",
        },
    )

    try:
        b64 = (data.get("data") or [])[0].get("b64_json")
    except (KeyError, IndexError, TypeError, AttributeError):
        b64 = None
    if not b64:
        raise ProviderError("Image generation failed: No data returned.", provider_name)

    return f"data:image/png;base64,{b64}"
