# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Hashing primitives used by the SigV4 signer."""

import hmac
from hashlib import sha256


def sha256_hex(message: str | bytes) -> str:
    """Lowercase hex SHA-256 digest of ``message``.

    Strings are encoded as UTF-8 before hashing.
    """
    if isinstance(message, str):
        message = message.encode("utf-8")
    return sha256(message).hexdigest()


def hmac_sha256(key: bytes | str, message: str) -> bytes:
    """Raw HMAC-SHA256 of ``message``.

    :param key: Either raw bytes from a previous derivation step or a UTF-8 string,
        such as the initial ``AWS4``-prefixed secret.
    :param message: The value to authenticate, encoded as UTF-8.
    """
    if isinstance(key, str):
        key = key.encode("utf-8")
    return hmac.new(key=key, msg=message.encode("utf-8"), digestmod=sha256).digest()


def hmac_hex(key: bytes | str, message: str) -> str:
    """Lowercase hex encoding of :func:`hmac_sha256`."""
    return hmac_sha256(key, message).hex()


def derive_signing_key(
    secret_key: str, date_stamp: str, region: str, service: str
) -> bytes:
    """Derive a SigV4 signing key scoped to a single day, region and service."""
    # Components of Signing Key Calculation
    #
    # DateKey              = HMAC-SHA256("AWS4"+"<SecretAccessKey>", "<YYYYMMDD>")
    # DateRegionKey        = HMAC-SHA256(<DateKey>, "<aws-region>")
    # DateRegionServiceKey = HMAC-SHA256(<DateRegionKey>, "<aws-service>")
    # SigningKey = HMAC-SHA256(<DateRegionServiceKey>, "aws4_request")
    k_date = hmac_sha256(f"AWS4{secret_key}", date_stamp)
    k_region = hmac_sha256(k_date, region)
    k_service = hmac_sha256(k_region, service)
    return hmac_sha256(k_service, "aws4_request")
