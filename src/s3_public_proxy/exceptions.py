# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0


class ProxyError(Exception):
    """Top-level exception to capture gateway-related errors."""


class MethodNotAllowedError(ProxyError):
    """Only GET and HEAD requests can be proxied to the origin."""

    def __init__(self, method: str) -> None:
        super().__init__(f"Method not allowed: {method}")
        self.method = method


class UpstreamFailure(ProxyError):
    """The origin request could not be built, signed, or sent."""


class SigningError(UpstreamFailure, ValueError):
    """A request could not be signed, for example due to a malformed URL or
    missing credentials."""


class ConfigurationError(ProxyError, ValueError):
    """Required gateway configuration is missing or invalid."""
