# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from urllib.parse import urlsplit, urlunsplit

from .exceptions import SigningError

DEFAULT_PORTS: dict[str, int] = {"http": 80, "https": 443}


@dataclass(kw_only=True, frozen=True)
class URI:
    """Target location of an origin request."""

    scheme: str = "https"
    """For example ``http`` or ``https``."""

    host: str
    """The hostname, for example ``s3.amazonaws.com``."""

    port: int | None = None
    """An explicit port number."""

    path: str | None = None
    """Path component of the URI, still percent-encoded."""

    query: str | None = None
    """Raw query component of the URI, without the leading ``?``."""

    @property
    def netloc(self) -> str:
        """Construct netloc string in format ``{host}:{port}``.

        The port is only included when it is set and isn't the default for the
        scheme, which makes this the value of the ``Host`` header.
        """
        return self._netloc

    # cached_property does NOT behave like property, it actually allows for setting.
    # Therefore we need a layer of indirection.
    @cached_property
    def _netloc(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.port is None or DEFAULT_PORTS.get(self.scheme) == self.port:
            return host
        return f"{host}:{self.port}"

    def build(self) -> str:
        """Construct URI string representation.

        Returns a string of the form ``{scheme}://{host}:{port}{path}?{query}``
        """
        return urlunsplit(
            (self.scheme, self.netloc, self.path or "", self.query or "", "")
        )


def parse_uri(url: str) -> URI:
    """Parse an absolute ``http`` or ``https`` URL.

    :raises SigningError: If the URL has no usable scheme or host, or an invalid
        port.
    """
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as e:
        raise SigningError(f"Malformed origin URL: {e}") from e

    if parts.scheme not in DEFAULT_PORTS:
        raise SigningError(
            f"Malformed origin URL: unsupported scheme {parts.scheme!r}"
        )
    if not parts.hostname:
        raise SigningError("Malformed origin URL: missing host")

    return URI(
        scheme=parts.scheme,
        host=parts.hostname,
        port=port,
        path=parts.path or None,
        query=parts.query or None,
    )


@dataclass(kw_only=True, frozen=True)
class SignedRequest:
    """A fully signed origin request, ready to hand to an HTTP client."""

    method: str
    destination: URI
    fields: Mapping[str, str] = field(default_factory=dict)
    """Header names mapped to values, in the order they are sent."""

    def __post_init__(self) -> None:
        # frozen=True only guards attributes, so the headers get a read-only view
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def url(self) -> str:
        return self.destination.build()
