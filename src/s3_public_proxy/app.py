# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import logging
from typing import Final

from aiohttp import web

from .aio.aiohttp import AIOHTTPClient
from .config import ProxyConfig
from .dispatcher import ProxyDispatcher
from .interfaces.http import HTTPClient
from .signers import S3SigV4Signer

logger: Final = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"  # noqa: S104
DEFAULT_PORT = 8080


def create_app(
    config: ProxyConfig,
    *,
    client: HTTPClient | None = None,
    signer: S3SigV4Signer | None = None,
) -> web.Application:
    """Build the gateway application.

    Every method on every path is routed to the dispatcher, which decides what is
    allowed. The origin client is closed when the application shuts down.

    :param config: Origin endpoint, bucket and credentials.
    :param client: Client for origin requests. Defaults to :py:class:`AIOHTTPClient`.
    :param signer: Signer for origin requests.
    """
    origin_client = client or AIOHTTPClient()
    dispatcher = ProxyDispatcher(config=config, client=origin_client, signer=signer)

    async def close_client(app: web.Application) -> None:
        await origin_client.close()

    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", dispatcher.handle)
    app.on_cleanup.append(close_client)
    return app


def run(
    config: ProxyConfig, *, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT
) -> None:
    """Serve the gateway until interrupted.

    Handler cancellation is enabled so a client disconnecting mid-request cancels
    the in-flight origin fetch.
    """
    logger.info(
        "Proxying http://%s:%s to https://%s/%s",
        host,
        port,
        config.endpoint,
        config.bucket,
    )
    web.run_app(
        create_app(config),
        host=host,
        port=port,
        handler_cancellation=True,
        print=None,
    )
