from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from prompt_relay.common.schema import GenerationConfig, ProviderCredentials, Turn
from prompt_relay.core.errors import (
    AuthenticationError,
    BackendError,
    ConfigurationError,
)
from prompt_relay.core.gemini_client import VertexGeminiClient, build_payload


def _config(streaming: bool = False, project_id: str | None = "proj-1", token: str | None = "tok") -> GenerationConfig:
    return GenerationConfig(
        provider_credentials=ProviderCredentials(
            service="vertex-ai-api",
            region="us-central1",
            project_id=project_id,
            access_token=token,
        ),
        model="gemini-2.5-flash",
        streaming=streaming,
    )


def _reply(text: str) -> dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


TURNS = (Turn(role="user", content="Say hello"),)


def test_generate_content_request_shape() -> None:
    seen: dict[str, Any] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200, json=_reply("Hello!"))

    client = VertexGeminiClient(transport=httpx.MockTransport(handler))
    result = client.generate(_config(streaming=False), TURNS)

    assert result == _reply("Hello!")
    req = seen["request"]
    assert req.method == "POST"
    assert req.url.host == "us-central1-aiplatform.googleapis.com"
    assert req.url.path == (
        "/v1/projects/proj-1/locations/us-central1/publishers/google/models/gemini-2.5-flash:generateContent"
    )
    assert req.headers["Authorization"] == "Bearer tok"
    assert json.loads(req.content) == {"contents": [{"role": "user", "parts": [{"text": "Say hello"}]}]}


def test_streaming_returns_first_event() -> None:
    seen: dict[str, Any] = {}
    body = (
        "data: " + json.dumps(_reply("Hel")) + "\r\n\r\n"
        + "data: " + json.dumps(_reply("lo!")) + "\r\n\r\n"
    )

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200, content=body.encode("utf-8"), headers={"content-type": "text/event-stream"})

    client = VertexGeminiClient(transport=httpx.MockTransport(handler))
    result = client.generate(_config(streaming=True), TURNS)

    assert result == _reply("Hel")
    req = seen["request"]
    assert req.url.path.endswith("gemini-2.5-flash:streamGenerateContent")
    assert req.url.params["alt"] == "sse"


def test_streaming_without_events_returns_empty() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b": keep-alive\n\n")

    client = VertexGeminiClient(transport=httpx.MockTransport(handler))
    assert client.generate(_config(streaming=True), TURNS) == {}


@pytest.mark.parametrize("status", [401, 403])
def test_auth_failure_raises(status: int) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"error": {"message": "denied"}})

    client = VertexGeminiClient(transport=httpx.MockTransport(handler))
    with pytest.raises(AuthenticationError) as exc_info:
        client.generate(_config(), TURNS)
    assert exc_info.value.status_code == status


def test_streaming_server_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="internal")

    client = VertexGeminiClient(transport=httpx.MockTransport(handler))
    with pytest.raises(BackendError) as exc_info:
        client.generate(_config(streaming=True), TURNS)
    assert exc_info.value.status_code == 500
    assert "internal" in str(exc_info.value)


def test_transport_error_raises_backend_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = VertexGeminiClient(transport=httpx.MockTransport(handler))
    with pytest.raises(BackendError):
        client.generate(_config(), TURNS)


@pytest.mark.parametrize("project_id,token", [(None, "tok"), ("proj-1", None)])
def test_missing_credentials_raise_before_request(project_id: str | None, token: str | None) -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover
        raise AssertionError("no request expected")

    client = VertexGeminiClient(transport=httpx.MockTransport(handler))
    with pytest.raises(ConfigurationError):
        client.generate(_config(project_id=project_id, token=token), TURNS)


def test_build_payload_maps_assistant_to_model() -> None:
    turns = (Turn("user", "hi"), Turn("assistant", "hello"), Turn("user", "again"))
    payload = build_payload(turns)
    assert [c["role"] for c in payload["contents"]] == ["user", "model", "user"]
    assert payload["contents"][1]["parts"] == [{"text": "hello"}]


def test_undecodable_body_raises_backend_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"not gzip", headers={"content-encoding": "gzip"})

    client = VertexGeminiClient(transport=httpx.MockTransport(handler))
    with pytest.raises(BackendError) as exc_info:
        client.generate(_config(), TURNS)
    assert isinstance(exc_info.value.__cause__, httpx.DecodingError)


@pytest.mark.parametrize(
    "status,body,status_code",
    [
        (503, "unavailable", 503),
        (200, "<html>not json</html>", None),
    ],
)
def test_generate_content_failures_raise_backend_error(status: int, body: str, status_code: int | None) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, text=body)

    client = VertexGeminiClient(transport=httpx.MockTransport(handler))
    with pytest.raises(BackendError) as exc_info:
        client.generate(_config(streaming=False), TURNS)
    assert exc_info.value.status_code == status_code
