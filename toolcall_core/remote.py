# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolcall: Text-based function calling for any LLM.
# Copyright (C) 2025 FunnyCups (https://github.com/funnycups)

"""
Remote tool execution for functions without a local implementation.
"""

import logging
from typing import Any, Dict, Optional, Protocol, runtime_checkable

import httpx

from .config import RemoteToolConfig
from .exceptions import RemoteToolError

logger = logging.getLogger(__name__)


@runtime_checkable
class RemoteToolCapability(Protocol):
    """Executes a call on a remote tool host. Raises on failure."""

    async def invoke(self, name: str, arguments: Any) -> Any:
        ...


class HttpRemoteToolCapability:
    """
    RemoteToolCapability over HTTP.

    Sends ``POST {base_url}/tools/call`` with ``{"name", "arguments"}``.
    A ``{"result": ...}`` payload returns the result; a payload carrying
    ``error`` raises RemoteToolError.
    """

    def __init__(self, base_url: str, api_key: Optional[str] = None, timeout: float = 30,
                 http_client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient()

    @classmethod
    def from_config(cls, config: RemoteToolConfig, http_client: Optional[httpx.AsyncClient] = None) -> "HttpRemoteToolCapability":
        if not config.base_url:
            raise ValueError("remote_tool.base_url is not configured")
        return cls(config.base_url, api_key=config.api_key, timeout=config.timeout, http_client=http_client)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def invoke(self, name: str, arguments: Any) -> Any:
        url = f"{self.base_url}/tools/call"
        logger.debug(f"🔧 Calling remote tool '{name}' at {url}")
        try:
            response = await self.http_client.post(
                url,
                json={"name": name, "arguments": arguments},
                headers=self._headers(),
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.error(f"❌ Remote tool request failed for '{name}': {type(e).__name__}: {e}")
            raise RemoteToolError(f"Remote tool request failed: {e}") from e

        if response.status_code >= 400:
            logger.error(f"❌ Remote tool '{name}' returned HTTP {response.status_code}")
            raise RemoteToolError(
                f"Remote tool '{name}' returned HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteToolError(f"Remote tool '{name}' returned invalid JSON") from e

        if isinstance(data, dict):
            if data.get("error"):
                raise RemoteToolError(str(data["error"]), status_code=response.status_code)
            if "result" in data:
                return data["result"]
        return data

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> "HttpRemoteToolCapability":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
