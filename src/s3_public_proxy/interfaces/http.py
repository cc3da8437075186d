# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections.abc import AsyncIterable
from typing import Protocol

from .._http import SignedRequest


class HTTPResponse(Protocol):
    """An origin response whose body is still attached to the connection."""

    @property
    def status(self) -> int:
        """The 3 digit response status code (1xx, 2xx, 3xx, 4xx, 5xx)."""
        ...

    @property
    def reason(self) -> str | None:
        """Optional string provided by the server explaining the status."""
        ...

    @property
    def headers(self) -> list[tuple[str, str]]:
        """Response headers as ``(name, value)`` pairs, repeated names included."""
        ...

    @property
    def body(self) -> AsyncIterable[bytes]:
        """The response payload, yielded in chunks as it arrives."""
        ...

    async def close(self) -> None:
        """Release the underlying connection. Safe to call more than once."""
        ...


class HTTPClient(Protocol):
    """An asynchronous HTTP client able to send signed origin requests."""

    async def send(self, *, request: SignedRequest) -> HTTPResponse:
        """Send the request and return as soon as the response head is received.

        The caller must ``close()`` the returned response.

        :param request: The signed request, including destination URI and headers.
        """
        ...

    async def close(self) -> None:
        """Close the client and any pooled connections."""
        ...
