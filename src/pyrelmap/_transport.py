"""HTTP transport for the entity store REST API."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from pyrelmap._constants import NOT_FOUND_STATUSES, USER_AGENT
from pyrelmap._redact import redact_for_log
from pyrelmap.config import RelMapConfig
from pyrelmap.exceptions import EntityNotFoundError, RelMapTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str) -> Any:
        ...


class HttpTransport:
    """Read-only JSON transport over a shared :class:`aiohttp.ClientSession`."""

    def __init__(
        self,
        config: RelMapConfig,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def get_json(self, endpoint: str) -> Any:
        """GET ``{base_url}{endpoint}`` and return the decoded JSON body.

        Raises
        ------
        EntityNotFoundError
            On 404/410.
        RelMapTransportError
            On network failures, other non-2xx statuses or a non-JSON body.
        """
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        url = f"{self._config.base_url}{endpoint}"

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status in NOT_FOUND_STATUSES:
                    raise EntityNotFoundError(f"{endpoint} not found", endpoint=endpoint)
                if not 200 <= resp.status < 300:
                    raise RelMapTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except (EntityNotFoundError, RelMapTransportError):
            raise
        except TimeoutError as exc:
            raise RelMapTransportError(f"Request to {endpoint} timed out", endpoint=endpoint) from exc
        except aiohttp.ClientError as exc:
            raise RelMapTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            body = json.loads(text) if text.strip() else None
        except json.JSONDecodeError as exc:
            raise RelMapTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if self._config.api_trace_enabled:
            _logger.debug("Response %s: %s", endpoint, redact_for_log(body))
        return body
