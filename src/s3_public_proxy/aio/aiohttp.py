#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Final

import aiohttp
from yarl import URL

from .._http import SignedRequest
from ..interfaces.http import HTTPClient, HTTPResponse

logger: Final = logging.getLogger(__name__)


@dataclass(kw_only=True)
class AIOHTTPClientConfig:
    chunk_size: int = 64 * 1024
    """Maximum number of bytes yielded per body chunk."""

    timeout: aiohttp.ClientTimeout = field(
        default_factory=lambda: aiohttp.ClientTimeout(total=None)
    )
    """Timeouts for origin requests. There is no total limit, so long downloads
    are never cut off mid-body."""


class AIOHTTPResponse(HTTPResponse):
    """Origin response backed by an open ``aiohttp.ClientResponse``."""

    def __init__(self, response: aiohttp.ClientResponse, *, chunk_size: int) -> None:
        self._response = response
        self._chunk_size = chunk_size

    @property
    def status(self) -> int:
        return self._response.status

    @property
    def reason(self) -> str | None:
        return self._response.reason

    @property
    def headers(self) -> list[tuple[str, str]]:
        return list(self._response.headers.items())

    @property
    def body(self) -> AsyncIterator[bytes]:
        return self._response.content.iter_chunked(self._chunk_size)

    async def close(self) -> None:
        # A fully read response has already returned its connection to the pool,
        # so this only drops connections abandoned mid-body.
        self._response.close()


class AIOHTTPClient(HTTPClient):
    """Implementation of :py:class:`.interfaces.http.HTTPClient` using aiohttp."""

    def __init__(
        self,
        *,
        client_config: AIOHTTPClientConfig | None = None,
        _session: aiohttp.ClientSession | None = None,
    ) -> None:
        """
        :param client_config: Configuration that applies to all requests made with this
        client.
        """
        self._config = client_config or AIOHTTPClientConfig()
        self._session = _session

    def _get_session(self) -> aiohttp.ClientSession:
        # Sessions bind to the running event loop, so creation waits for the
        # first request.
        if self._session is None:
            self._session = aiohttp.ClientSession(
                auto_decompress=False, timeout=self._config.timeout
            )
        return self._session

    async def send(self, *, request: SignedRequest) -> HTTPResponse:
        """Send the signed request using aiohttp.

        The URL is sent exactly as signed and payloads are left compressed, so the
        body reaches the caller byte for byte.

        :param request: The signed request including destination URI and headers.
        """
        logger.debug("Sending %s request to %s", request.method, request.url)
        response = await self._get_session().request(
            request.method,
            URL(request.url, encoded=True),
            headers=dict(request.fields),
            allow_redirects=False,
        )
        logger.debug(
            "Received %s response from %s", response.status, request.destination.netloc
        )
        return AIOHTTPResponse(response, chunk_size=self._config.chunk_size)

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None
