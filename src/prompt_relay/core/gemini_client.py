"""Generative client for Gemini models served through the Vertex AI API.

`GenerativeClient` is the capability the relay depends on; `VertexGeminiClient`
implements it over httpx. In streaming mode only the first server-sent event is
decoded and returned, then the stream is closed.
"""
from __future__ import annotations
import json
import logging
from typing import Any, Iterable, Protocol, Sequence

import httpx

from prompt_relay.common.schema import CompletionResult, GenerationConfig, Turn
from prompt_relay.core.errors import (
    AuthenticationError,
    BackendError,
    ConfigurationError,
)

LOGGER = logging.getLogger("prompt_relay.core.gemini_client")

VERTEX_URL = (
    "https://{region}-aiplatform.googleapis.com/v1/projects/{project_id}"
    "/locations/{region}/publishers/google/models/{model}:{method}"
)


class GenerativeClient(Protocol):
    def generate(self, config: GenerationConfig, turns: Sequence[Turn]) -> CompletionResult:
        ...


def build_payload(turns: Sequence[Turn]) -> dict[str, Any]:
    """
    Map role/content turns onto Gemini `contents`.

    Args:
        turns: Ordered conversation turns. "assistant" becomes "model".
    """
    contents = []
    for turn in turns:
        role = "model" if turn.role == "assistant" else turn.role
        contents.append({"role": role, "parts": [{"text": turn.content}]})
    return {"contents": contents}


def build_url(config: GenerationConfig) -> str:
    creds = config.provider_credentials
    method = "streamGenerateContent" if config.streaming else "generateContent"
    return VERTEX_URL.format(
        region=creds.region,
        project_id=creds.project_id,
        model=config.model,
        method=method,
    )


def _first_event(lines: Iterable[str]) -> CompletionResult:
    """Return the first decodable `data:` payload of an SSE stream, or {}."""
    for line in lines:
        if not line or not line.startswith("data:"):
            continue
        try:
            data = json.loads(line[5:].strip())
        except ValueError:
            continue
        if isinstance(data, dict):
            return data
    return {}


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_error:
        response.read()
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        detail = e.response.text[:200]
        if status in (401, 403):
            raise AuthenticationError(f"Vertex AI rejected credentials ({status}): {detail}", status) from e
        raise BackendError(f"Vertex AI returned {status}: {detail}", status) from e


class VertexGeminiClient:
    def __init__(self, timeout: float = 120.0, transport: httpx.BaseTransport | None = None) -> None:
        self.timeout = timeout
        self._transport = transport

    def generate(self, config: GenerationConfig, turns: Sequence[Turn]) -> CompletionResult:
        """
        Run one generation call.

        Raises:
            ConfigurationError: project id or access token missing.
            AuthenticationError: backend answered 401/403.
            BackendError: any other failed status, request error or non-JSON body.
        """
        creds = config.provider_credentials
        if not creds.project_id:
            raise ConfigurationError("Vertex AI project id is not configured")
        if not creds.access_token:
            raise ConfigurationError("Vertex AI access token is not configured")

        url = build_url(config)
        headers = {"Authorization": f"Bearer {creds.access_token}"}
        payload = build_payload(turns)
        LOGGER.debug("POST %s (stream=%s)", url, config.streaming)

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                if config.streaming:
                    with client.stream("POST", url, params={"alt": "sse"}, headers=headers, json=payload) as r:
                        _raise_for_status(r)
                        return _first_event(r.iter_lines())
                r = client.post(url, headers=headers, json=payload)
                _raise_for_status(r)
                data = r.json()
        except httpx.RequestError as e:
            raise BackendError(f"Vertex AI request failed: {e}") from e
        except ValueError as e:
            raise BackendError("Vertex AI returned a non-JSON body") from e
        return data if isinstance(data, dict) else {}
