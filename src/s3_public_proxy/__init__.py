# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""A read-only HTTP gateway that signs requests to a private S3-compatible bucket
with AWS Signature Version 4."""

from ._http import URI, SignedRequest
from ._identity import S3Credentials
from .app import create_app
from .config import ProxyConfig
from .dispatcher import ProxyDispatcher
from .signers import CanonicalRequest, S3SigV4Signer, SigningContext
from .translator import TargetDescriptor, translate

__license__ = "Apache-2.0"
__version__ = "0.1.0"

__all__ = (
    "URI",
    "CanonicalRequest",
    "ProxyConfig",
    "ProxyDispatcher",
    "S3Credentials",
    "S3SigV4Signer",
    "SignedRequest",
    "SigningContext",
    "TargetDescriptor",
    "create_app",
    "translate",
)
