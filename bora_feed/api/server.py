"""
HTTP API server.

Serves the transfer feed as JSON with permissive CORS headers.
"""

import asyncio

from aiohttp import web
from loguru import logger

from bora_feed.services.transfer_feed.service import TransferFeedService


SERVICE_KEY = web.AppKey("transfer_feed_service", TransferFeedService)
EXPOSE_DIAGNOSTICS_KEY = web.AppKey("expose_diagnostics", bool)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

TRUTHY = {"1", "true", "yes"}


@web.middleware
async def cors_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Attach CORS headers to every response."""
    response = await handler(request)
    response.headers.update(CORS_HEADERS)
    return response


async def preflight_handler(request: web.Request) -> web.Response:
    """Answer CORS pre-flight requests."""
    return web.Response(status=200)


async def transactions_handler(request: web.Request) -> web.Response:
    """
    Transfer feed endpoint.

    Query params:
        refresh: "1"/"true" forces a fresh scan

    Returns:
        JSON scan result; 500 on pipeline failure
    """
    service = request.app[SERVICE_KEY]
    force_refresh = request.query.get("refresh", "").lower() in TRUTHY

    result = await service.scan(force_refresh=force_refresh)
    body = result.to_dict(expose_diagnostics=request.app[EXPOSE_DIAGNOSTICS_KEY])

    if not result.success:
        return web.json_response(body, status=500)
    return web.json_response(body)


async def health_handler(request: web.Request) -> web.Response:
    """
    Liveness endpoint.

    Returns:
        JSON with cache state of the feed
    """
    service = request.app[SERVICE_KEY]
    entry = service.cache.peek()
    return web.json_response(
        {
            "status": "alive",
            "cached_transactions": len(entry.data) if entry else None,
        }
    )


def create_app(
    service: TransferFeedService,
    expose_diagnostics: bool = False,
) -> web.Application:
    """
    Build the aiohttp application.

    Args:
        service: Transfer feed service
        expose_diagnostics: Include dropped chunk/log counts in responses

    Returns:
        Configured web.Application
    """
    app = web.Application(middlewares=[cors_middleware])
    app[SERVICE_KEY] = service
    app[EXPOSE_DIAGNOSTICS_KEY] = expose_diagnostics
    app.router.add_get("/api/transactions", transactions_handler)
    app.router.add_route("OPTIONS", "/api/transactions", preflight_handler)
    app.router.add_get("/health", health_handler)
    return app


async def start_api_server(
    app: web.Application,
    host: str = "0.0.0.0",
    port: int = 8080,
) -> tuple[web.AppRunner, web.TCPSite]:
    """
    Start the API server.

    Args:
        app: Application from create_app
        host: Host to bind to
        port: Port to bind to

    Returns:
        Tuple of (AppRunner, TCPSite) for cleanup
    """
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()

    logger.info(f"API server started on {host}:{port}")
    logger.info(f"  - Transactions: http://{host}:{port}/api/transactions")
    logger.info(f"  - Health: http://{host}:{port}/health")

    return runner, site


async def stop_api_server(
    runner: web.AppRunner,
    timeout: int = 5,
) -> None:
    """
    Stop the API server gracefully.

    Args:
        runner: AppRunner to cleanup
        timeout: Maximum time to wait for cleanup in seconds
    """
    logger.info("Stopping API server...")
    try:
        await asyncio.wait_for(runner.cleanup(), timeout=timeout)
        logger.info("API server stopped successfully")
    except TimeoutError:
        logger.warning(f"API server cleanup timed out after {timeout}s")
    except Exception as e:
        logger.error(f"Error stopping API server: {e}")
