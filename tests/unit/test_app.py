# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer
from s3_public_proxy import ProxyConfig, S3Credentials, create_app
from s3_public_proxy.app import DEFAULT_HOST, DEFAULT_PORT, run
from s3_public_proxy.testing import MockHTTPClient


async def test_routes_every_path_to_the_dispatcher(
    proxy: TestClient, mock_client: MockHTTPClient
) -> None:
    mock_client.add_response(body=b"a")
    mock_client.add_response(body=b"b")

    nested = await proxy.get("/a/b/c/d.txt")
    root = await proxy.get("/")

    assert (nested.status, await nested.read()) == (200, b"a")
    assert (root.status, await root.read()) == (200, b"b")


async def test_cleanup_closes_origin_client(config: ProxyConfig) -> None:
    mock_client = MockHTTPClient()
    app = create_app(config, client=mock_client)

    async with TestClient(TestServer(app)):
        assert not mock_client.closed

    assert mock_client.closed


async def test_unreachable_origin_returns_500(credentials: S3Credentials) -> None:
    # Nothing listens on port 1, so the default client fails to connect.
    config = ProxyConfig(
        endpoint="127.0.0.1:1", bucket="assets", credentials=credentials
    )

    async with TestClient(TestServer(create_app(config))) as client:
        resp = await client.get("/file.txt")
        text = await resp.text()

    assert resp.status == 500
    assert text.startswith("Error: ")
    assert len(text) > len("Error: ")


def test_run_enables_handler_cancellation(
    config: ProxyConfig, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls: list[dict[str, Any]] = []

    def fake_run_app(app: web.Application, **kwargs: Any) -> None:
        calls.append({"app": app, **kwargs})

    monkeypatch.setattr(web, "run_app", fake_run_app)

    run(config, host="127.0.0.1", port=9000)

    (call,) = calls
    assert isinstance(call["app"], web.Application)
    assert call["host"] == "127.0.0.1"
    assert call["port"] == 9000
    assert call["handler_cancellation"] is True


def test_run_defaults(config: ProxyConfig, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(web, "run_app", lambda app, **kwargs: calls.append(kwargs))

    run(config)

    assert calls[0]["host"] == DEFAULT_HOST
    assert calls[0]["port"] == DEFAULT_PORT == 8080
