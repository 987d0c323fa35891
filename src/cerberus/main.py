"""Main entry point - runs the API server."""

import asyncio
import logging
import signal

import uvicorn

from cerberus.api.app import create_app
from cerberus.config import get_settings

logger = logging.getLogger(__name__)


class Application:
    """Runs the proxy API until a shutdown signal arrives."""

    def __init__(self):
        self.settings = get_settings()
        self.server = None
        self._shutdown_event = asyncio.Event()

    async def start(self):
        """Start all services."""
        # Configure logging
        log_level = logging.DEBUG if self.settings.debug else logging.INFO
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
        logging.getLogger("httpx").setLevel(logging.WARNING)

        logger.info("Starting Cerberus...")
        logger.info(f"Environment: {self.settings.environment}")
        for index, backend in enumerate(self.settings.backend_list, start=1):
            logger.info(f"Quote backend #{index}: {backend}")
        logger.info(f"Build endpoint: {self.settings.build_url}")
        logger.info(f"API key present: {bool(self.settings.jup_api_key)}")
        if not self.settings.shield_base:
            logger.info("Risk signal disabled (SHIELD_BASE not set)")

        api_task = asyncio.create_task(self._run_api())
        logger.info("API task created")

        # Wait for shutdown signal or for the server to exit on its own
        shutdown_task = asyncio.create_task(self._shutdown_event.wait())
        await asyncio.wait({api_task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED)

        if self.server is not None:
            self.server.should_exit = True
        shutdown_task.cancel()
        await asyncio.gather(api_task, shutdown_task, return_exceptions=True)
        logger.info("Shutdown complete")

    async def _run_api(self):
        """Run the FastAPI server."""
        try:
            app = create_app(self.settings)
            config = uvicorn.Config(
                app,
                host=self.settings.api_host,
                port=self.settings.api_port,
                log_level="debug" if self.settings.debug else "info",
            )
            self.server = uvicorn.Server(config)
            logger.info(f"Starting API server on {self.settings.api_host}:{self.settings.api_port}")
            await self.server.serve()
        except asyncio.CancelledError:
            logger.info("API server cancelled")
        except Exception as e:
            logger.error(f"API error: {e}")
            raise

    def shutdown(self):
        """Signal shutdown."""
        logger.info("Shutdown requested")
        self._shutdown_event.set()


def main():
    """Main entry point."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    app = Application()

    # Setup signal handlers
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, app.shutdown)

    try:
        loop.run_until_complete(app.start())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    finally:
        loop.close()


if __name__ == "__main__":
    main()
