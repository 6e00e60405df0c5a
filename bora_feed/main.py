"""
Service entry point.

Configures logging, builds the transfer feed from settings and serves it
over HTTP until interrupted.
"""

import asyncio
import signal

from loguru import logger

from bora_feed.api.server import create_app, start_api_server, stop_api_server
from bora_feed.config.settings import settings
from bora_feed.services.transfer_feed.service import TransferFeedService
from bora_feed.utils.logging import setup_logging


async def main() -> None:
    """Run the API server until SIGINT/SIGTERM."""
    setup_logging(settings.log_level, settings.log_file)

    service = TransferFeedService.from_settings(settings)
    app = create_app(service, expose_diagnostics=settings.expose_diagnostics)
    runner, _ = await start_api_server(app, settings.host, settings.port)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            logger.warning(f"Signal handler for {sig.name} not supported on this platform")

    try:
        await stop_event.wait()
    finally:
        await stop_api_server(runner)
        logger.info("BORA transfer feed stopped")


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
