# broker_sim/app/main.py

import asyncio
import sys
from typing import Optional

from core.logging import configure_logging, get_logger
from core.config.settings import Settings
from core.config.validator import validate_startup_configuration
from app.bootstrap import seed_default_state
from app.containers import AppContainer


class BrokerageApplication:
    """Owns the container and the startup/shutdown sequence."""

    def __init__(self, settings: Optional[Settings] = None):
        self.container = AppContainer()
        if settings is not None:
            self.container.settings.override(settings)

        self._shutdown_event = asyncio.Event()
        self._started = False

        self.settings = self.container.settings()
        configure_logging(self.settings)
        self.logger = get_logger("broker_sim.main", component="application")

    async def startup(self, seed: bool = True, start_clock: bool = True):
        """Validate configuration, seed default state and start the market clock."""
        if self._started:
            self.logger.warning("Brokerage simulation already started")
            return

        self.logger.info("Initializing brokerage simulation",
                         environment=self.settings.environment.value,
                         mode=self.settings.market.mode.value)

        if not validate_startup_configuration(self.settings):
            self.logger.error("Configuration validation failed - cannot proceed with startup")
            sys.exit(1)

        if seed:
            seed_default_state(
                self.container.asset_registry(),
                self.container.account_store(),
                self.container.portfolio_ledger(),
            )

        if start_clock:
            for service in self.container.lifespan_services():
                await service.start()

        self._started = True
        self.logger.info("Brokerage simulation started")

    async def shutdown(self):
        """Stop every lifespan service; safe to call more than once."""
        if not self._started:
            return

        self.logger.info("Shutting down brokerage simulation")
        for service in reversed(self.container.lifespan_services()):
            try:
                await service.stop()
            except Exception as e:
                self.logger.error("Error stopping service", service=type(service).__name__,
                                  error=str(e))

        self._started = False
        self.logger.info("Brokerage simulation shutdown complete")

    def request_shutdown(self):
        self._shutdown_event.set()

    async def run(self, duration: Optional[float] = None):
        """Run until shutdown is requested or ``duration`` seconds elapse."""
        try:
            await self.startup()
            self.logger.info("Application is now running. Press Ctrl+C to exit.")
            if duration is None:
                await self._shutdown_event.wait()
            else:
                try:
                    await asyncio.wait_for(self._shutdown_event.wait(), timeout=duration)
                except asyncio.TimeoutError:
                    pass
        finally:
            await self.shutdown()


async def main():
    """Application entry point"""
    app = BrokerageApplication()
    await app.run()


if __name__ == "__main__":
    asyncio.run(main())
