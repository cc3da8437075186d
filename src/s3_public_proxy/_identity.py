# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from dataclasses import dataclass, field

DEFAULT_REGION = "us-east-1"
S3_SERVICE = "s3"


@dataclass(kw_only=True, frozen=True)
class S3Credentials:
    """Credentials and signing scope used to authenticate against the origin."""

    access_key_id: str
    """A unique identifier for the user or role with read access to the bucket."""

    secret_access_key: str = field(repr=False)
    """The secret paired with ``access_key_id``. Never logged or echoed."""

    region: str = DEFAULT_REGION
    """The region component of the credential scope."""

    service: str = S3_SERVICE
    """The service component of the credential scope."""
