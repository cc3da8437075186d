# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

"""Shared utilities for s3-public-proxy tests."""

from .mockhttp import MockHTTPClient, MockHTTPClientError, MockHTTPResponse

__all__ = (
    "MockHTTPClient",
    "MockHTTPClientError",
    "MockHTTPResponse",
)
