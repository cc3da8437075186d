# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Mapping of inbound gateway paths onto path-style origin URLs."""

from dataclasses import dataclass


@dataclass(kw_only=True, frozen=True)
class TargetDescriptor:
    """Where an inbound request lands on the origin."""

    endpoint: str
    """Origin host, optionally with a port, for example ``s3.amazonaws.com``."""

    bucket: str

    path: str = ""
    """Object path with a leading ``/``, or empty to address the bucket root."""

    raw_query: str = ""
    """Inbound query string without the leading ``?``, passed through untouched."""

    @classmethod
    def from_request(
        cls, *, path: str, query: str, endpoint: str, bucket: str
    ) -> "TargetDescriptor":
        return cls(
            endpoint=endpoint,
            bucket=bucket,
            path="" if path == "/" else path,
            raw_query=query.removeprefix("?"),
        )

    @property
    def url(self) -> str:
        query = f"?{self.raw_query}" if self.raw_query else ""
        return f"https://{self.endpoint}/{self.bucket}{self.path}{query}"


def translate(path: str, query: str, endpoint: str, bucket: str) -> str:
    """Build the origin URL for an inbound path and query string.

    The root path addresses the bucket itself (``https://endpoint/bucket``) rather
    than ``bucket/``. Bucket and path legality aren't validated; illegal characters
    pass through and surface as origin-side errors.
    """
    return TargetDescriptor.from_request(
        path=path, query=query, endpoint=endpoint, bucket=bucket
    ).url
