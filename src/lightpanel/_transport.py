"""HTTP pull fallback used when the MQTT push channel is unavailable."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from lightpanel._constants import USER_AGENT
from lightpanel.config import PanelConfig
from lightpanel.exceptions import PanelTransportError

_logger = logging.getLogger(__name__)


class PullTransport(Protocol):
    """Structural interface of the pull fallback.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`FallbackTransport`) concrete.
    """

    async def pull(self) -> None:
        ...

    async def send(self, topic: str, payload: Mapping[str, Any]) -> None:
        ...


class FallbackTransport:
    """Fire-and-forget requests against the panel's fallback CGI.

    A pull is the same request with an empty topic and payload. Response
    bodies are not interpreted.
    """

    def __init__(self, config: PanelConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    async def pull(self) -> None:
        await self._request("", "")

    async def send(self, topic: str, payload: Mapping[str, Any]) -> None:
        await self._request(topic, json.dumps(payload, separators=(",", ":")))

    async def _request(self, topic: str, payload: str) -> None:
        url = self._config.fallback_url
        endpoint = self._config.fallback_path
        headers = {"user-agent": USER_AGENT}

        _logger.debug("GET %s topic=%s", url, topic or "<pull>")

        try:
            async with self._http.get(
                url,
                params={"topic": topic, "payload": payload},
                headers=headers,
            ) as resp:
                if resp.status != 200:
                    text = await resp.text()
                    raise PanelTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
                await resp.read()
        except PanelTransportError:
            raise
        except aiohttp.ClientError as exc:
            raise PanelTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
