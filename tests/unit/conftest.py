# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from collections.abc import AsyncIterator
from datetime import UTC, datetime

import pytest
from aiohttp.test_utils import TestClient, TestServer
from s3_public_proxy import ProxyConfig, S3Credentials, S3SigV4Signer, create_app
from s3_public_proxy.testing import MockHTTPClient

FROZEN_TIME = datetime(2015, 8, 30, 12, 36, 0, tzinfo=UTC)


@pytest.fixture
def credentials() -> S3Credentials:
    return S3Credentials(
        access_key_id="AKIDEXAMPLE",
        secret_access_key="wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY",
    )


@pytest.fixture
def config(credentials: S3Credentials) -> ProxyConfig:
    return ProxyConfig(
        endpoint="s3.example.com", bucket="assets", credentials=credentials
    )


@pytest.fixture
def mock_client() -> MockHTTPClient:
    return MockHTTPClient()


@pytest.fixture
def signer() -> S3SigV4Signer:
    return S3SigV4Signer(clock=lambda: FROZEN_TIME)


@pytest.fixture
async def proxy(
    config: ProxyConfig, mock_client: MockHTTPClient, signer: S3SigV4Signer
) -> AsyncIterator[TestClient]:
    app = create_app(config, client=mock_client, signer=signer)
    async with TestClient(TestServer(app)) as client:
        yield client
