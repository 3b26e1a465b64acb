"""
Tests for the HTTP remote tool capability.
"""

import json

import httpx
import pytest

from toolcall_core import (
    AgentFunction,
    FunctionCall,
    FunctionRegistry,
    HttpRemoteToolCapability,
    RemoteToolCapability,
    RemoteToolError,
    dispatch_function_calls,
)
from toolcall_core.config import RemoteToolConfig


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_invoke_posts_call_and_returns_result():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"result": {"hits": 3}})

    async with _client(handler) as http_client:
        remote = HttpRemoteToolCapability("https://tools.example.com/", api_key="secret", http_client=http_client)
        result = await remote.invoke("search", {"q": "python"})

    assert result == {"hits": 3}
    assert seen["url"] == "https://tools.example.com/tools/call"
    assert seen["auth"] == "Bearer secret"
    assert seen["body"] == {"name": "search", "arguments": {"q": "python"}}


@pytest.mark.asyncio
async def test_payload_without_result_key_is_returned_whole():
    async with _client(lambda request: httpx.Response(200, json=["a", "b"])) as http_client:
        remote = HttpRemoteToolCapability("http://tools.local", http_client=http_client)
        assert await remote.invoke("list", {}) == ["a", "b"]


@pytest.mark.asyncio
async def test_error_payload_raises():
    async with _client(lambda request: httpx.Response(200, json={"error": "unknown tool"})) as http_client:
        remote = HttpRemoteToolCapability("http://tools.local", http_client=http_client)
        with pytest.raises(RemoteToolError, match="unknown tool"):
            await remote.invoke("nope", {})


@pytest.mark.asyncio
async def test_http_error_status_raises():
    async with _client(lambda request: httpx.Response(503, text="unavailable")) as http_client:
        remote = HttpRemoteToolCapability("http://tools.local", http_client=http_client)
        with pytest.raises(RemoteToolError) as exc_info:
            await remote.invoke("search", {})
    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_transport_error_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as http_client:
        remote = HttpRemoteToolCapability("http://tools.local", http_client=http_client)
        with pytest.raises(RemoteToolError, match="connection refused"):
            await remote.invoke("search", {})


@pytest.mark.asyncio
async def test_dispatch_through_http_remote():
    def handler(request):
        body = json.loads(request.content)
        if body["name"] == "broken":
            return httpx.Response(500, text="boom")
        return httpx.Response(200, json={"result": f"ran {body['name']}"})

    registry = FunctionRegistry([AgentFunction.remote("search"), AgentFunction.remote("broken")])
    async with _client(handler) as http_client:
        remote = HttpRemoteToolCapability("http://tools.local", http_client=http_client)
        results = await dispatch_function_calls(
            [FunctionCall(name="broken"), FunctionCall(name="search")], registry, remote_tool=remote,
        )

    assert results[0].error.startswith("Remote tool 'broken' returned HTTP 500")
    assert results[1].result == "ran search"


def test_is_a_remote_tool_capability():
    remote = HttpRemoteToolCapability("http://tools.local", http_client=httpx.AsyncClient())
    assert isinstance(remote, RemoteToolCapability)


def test_from_config():
    config = RemoteToolConfig(base_url="https://tools.example.com/", api_key="k", timeout=5)
    remote = HttpRemoteToolCapability.from_config(config, http_client=httpx.AsyncClient())
    assert remote.base_url == "https://tools.example.com"
    assert remote.api_key == "k"
    assert remote.timeout == 5


def test_from_config_requires_base_url():
    with pytest.raises(ValueError):
        HttpRemoteToolCapability.from_config(RemoteToolConfig())
