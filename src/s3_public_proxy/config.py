# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

from ._identity import DEFAULT_REGION, S3Credentials
from .exceptions import ConfigurationError

logger: Final = logging.getLogger(__name__)

ENV_ENDPOINT = "S3_ENDPOINT"
ENV_BUCKET = "S3_BUCKET"
ENV_ACCESS_KEY = "S3_ACCESS_KEY"
ENV_SECRET_KEY = "S3_SECRET_KEY"
ENV_REGION = "S3_REGION"

REQUIRED_VARIABLES: tuple[str, ...] = (
    ENV_ENDPOINT,
    ENV_BUCKET,
    ENV_ACCESS_KEY,
    ENV_SECRET_KEY,
)


@dataclass(kw_only=True, frozen=True)
class ProxyConfig:
    """Static origin configuration, passed explicitly to the dispatcher."""

    endpoint: str
    """Host of the S3-compatible service, optionally with a port."""

    bucket: str
    """Name of the private bucket being exposed."""

    credentials: S3Credentials

    @classmethod
    def from_environment(
        cls, environ: Mapping[str, str] | None = None
    ) -> "ProxyConfig":
        """Resolve configuration from ``S3_*`` environment variables.

        :param environ: Mapping to read from instead of ``os.environ``.
        :raises ConfigurationError: If a required variable is unset or empty. Only
            the variable names are reported, never their values.
        """
        if environ is None:
            environ = os.environ

        missing = [name for name in REQUIRED_VARIABLES if not environ.get(name)]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )

        region = environ.get(ENV_REGION) or DEFAULT_REGION
        config = cls(
            endpoint=environ[ENV_ENDPOINT],
            bucket=environ[ENV_BUCKET],
            credentials=S3Credentials(
                access_key_id=environ[ENV_ACCESS_KEY],
                secret_access_key=environ[ENV_SECRET_KEY],
                region=region,
            ),
        )
        logger.debug(
            "Resolved origin %s/%s in region %s from environment.",
            config.endpoint,
            config.bucket,
            region,
        )
        return config
