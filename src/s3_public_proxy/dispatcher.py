# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import logging
from enum import Enum
from typing import Final

from aiohttp import web

from .config import ProxyConfig
from .exceptions import MethodNotAllowedError
from .interfaces.http import HTTPClient, HTTPResponse
from .signers import S3SigV4Signer
from .translator import translate

logger: Final = logging.getLogger(__name__)

ALLOWED_METHODS: frozenset[str] = frozenset({"GET", "HEAD"})

# Connection-level headers describe the origin hop only; the gateway frames its
# own response to the client.
HOP_BY_HOP_HEADERS: frozenset[str] = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "proxy-connection",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
    }
)

RESPONSE_HEADER_OVERRIDES: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Cache-Control": "public, max-age=86400",
}


class DispatchState(Enum):
    """Stages of a single pass through :py:class:`ProxyDispatcher`."""

    RECEIVED = "received"
    METHOD_CHECKED = "method_checked"
    TRANSLATED = "translated"
    SIGNED = "signed"
    ORIGIN_FETCHED = "origin_fetched"
    RESPONSE_SHAPED = "response_shaped"
    SENT = "sent"
    ERRORED = "errored"


class ProxyDispatcher:
    """Relays anonymous GET/HEAD requests to the origin as signed requests.

    Each request makes one pass through :py:class:`DispatchState`, without retries.
    Wrong methods end in a 405; any failure while translating, signing or fetching
    ends in a 500 whose body carries the error message.
    """

    def __init__(
        self,
        *,
        config: ProxyConfig,
        client: HTTPClient,
        signer: S3SigV4Signer | None = None,
    ) -> None:
        """
        :param config: Read-only origin endpoint, bucket and credentials.
        :param client: The HTTP client used to reach the origin.
        :param signer: The signer for origin requests.
        """
        self._config = config
        self._client = client
        self._signer = signer or S3SigV4Signer()

    async def handle(self, request: web.Request) -> web.StreamResponse:
        """Proxy one inbound request. Usable directly as an aiohttp handler."""
        state = self._transition(request, DispatchState.RECEIVED)
        try:
            self._check_method(request.method)
        except MethodNotAllowedError as e:
            self._transition(request, DispatchState.ERRORED)
            logger.info("Rejected request: %s", e)
            return web.Response(
                status=405,
                text="Method not allowed",
                headers={"Allow": ", ".join(sorted(ALLOWED_METHODS))},
            )
        state = self._transition(request, DispatchState.METHOD_CHECKED)

        # raw_path keeps the client's percent-encoding intact.
        path, _, query = request.raw_path.partition("?")
        try:
            url = translate(path, query, self._config.endpoint, self._config.bucket)
            state = self._transition(request, DispatchState.TRANSLATED)
            signed = await self._signer.sign(
                url=url, method=request.method, credentials=self._config.credentials
            )
            state = self._transition(request, DispatchState.SIGNED)
            origin = await self._client.send(request=signed)
        except Exception as e:
            return self._error_response(request, path, state, e)

        state = self._transition(request, DispatchState.ORIGIN_FETCHED)
        try:
            response = self._shape_response(origin)
            state = self._transition(request, DispatchState.RESPONSE_SHAPED)
            await response.prepare(request)
        except Exception as e:
            await origin.close()
            return self._error_response(request, path, state, e)

        # Headers are on the wire from here, so failures abort the connection.
        try:
            if request.method != "HEAD":
                async for chunk in origin.body:
                    await response.write(chunk)
            await response.write_eof()
        finally:
            await origin.close()

        self._transition(request, DispatchState.SENT)
        return response

    def _check_method(self, method: str) -> None:
        if method not in ALLOWED_METHODS:
            raise MethodNotAllowedError(method)

    def _error_response(
        self,
        request: web.Request,
        path: str,
        state: DispatchState,
        error: Exception,
    ) -> web.Response:
        self._transition(request, DispatchState.ERRORED)
        message = str(error) or type(error).__name__
        logger.warning(
            "Failed to proxy %s %s after %s: %s",
            request.method,
            path,
            state.value,
            message,
        )
        return web.Response(status=500, text=f"Error: {message}")

    def _shape_response(self, origin: HTTPResponse) -> web.StreamResponse:
        response = web.StreamResponse(status=origin.status, reason=origin.reason)
        dropped = HOP_BY_HOP_HEADERS | _connection_options(origin.headers)
        for name, value in origin.headers:
            if name.lower() not in dropped:
                response.headers.add(name, value)
        for name, value in RESPONSE_HEADER_OVERRIDES.items():
            response.headers[name] = value
        return response

    def _transition(
        self, request: web.Request, state: DispatchState
    ) -> DispatchState:
        logger.debug("%s %s: %s", request.method, request.path, state.value)
        return state


def _connection_options(headers: list[tuple[str, str]]) -> frozenset[str]:
    """Lowercased header names listed in ``Connection``, which only apply to the
    origin hop."""
    return frozenset(
        option.strip().lower()
        for name, value in headers
        if name.lower() == "connection"
        for option in value.split(",")
        if option.strip()
    )
