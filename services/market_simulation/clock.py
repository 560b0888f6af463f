import asyncio
import random
import threading
from datetime import datetime
from typing import List, Optional

from core.config.settings import MarketSimulationSettings
from core.logging import get_error_logger_safe, get_market_data_logger_safe
from core.trading.models import AssetQuote, SimulationState, SimulationStatus, utc_now
from core.utils.exceptions import (
    BrokerSimException,
    UnsupportedMovementError,
    create_error_context,
)
from services.asset_registry import AssetRegistry
from services.portfolio_manager import PortfolioLedger
from .movements import MOVEMENT_CONFIGS, PriceMovement, next_price, resolve_movement


class MarketSimulationClock:
    """
    Periodically perturbs every quote, then revalues all portfolios.

    The loop runs as an asyncio task. Each pass runs synchronously under the
    shared state lock, so an order never observes half-updated prices and
    cancellation can only land on the sleep between passes.
    """

    def __init__(self, settings: MarketSimulationSettings, registry: AssetRegistry,
                 ledger: PortfolioLedger, lock: threading.RLock, rng: random.Random):
        self.settings = settings
        self.registry = registry
        self.ledger = ledger
        self._lock = lock
        self._rng = rng

        self.movement = resolve_movement(settings.default_movement)
        self.interval_ms = settings.effective_interval_ms
        self.volatility_factor = settings.effective_volatility_factor

        self._running = False
        self._task: Optional[asyncio.Task] = None
        self.tick_count = 0
        self.last_tick_at: Optional[datetime] = None

        self.logger = get_market_data_logger_safe("market_simulation")
        self.error_logger = get_error_logger_safe("market_simulation")

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        if self._running:
            self.logger.debug("Market simulation already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._run())
        self.logger.info("Market simulation started", interval_ms=self.interval_ms,
                         movement=self.movement.value,
                         volatility_factor=self.volatility_factor)

    async def stop(self) -> None:
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        self.logger.info("Market simulation stopped", ticks=self.tick_count)

    def set_movement(self, movement) -> PriceMovement:
        """Change the strategy applied by subsequent clock ticks."""
        self.movement = resolve_movement(movement)
        self.logger.info("Market movement changed", movement=self.movement.value)
        return self.movement

    def tick(self) -> int:
        """Run one clock pass with the current movement; returns assets updated."""
        with self._lock:
            updated = self._price_pass(self.movement)
            self.tick_count += 1
            self.last_tick_at = utc_now()

        self.logger.debug("Market tick complete", tick=self.tick_count,
                          movement=self.movement.value, assets_updated=updated)
        return updated

    def run_event(self, movement) -> List[AssetQuote]:
        """
        Apply one immediate market event.

        Independent of the clock: works while stopped and leaves the clock
        state, movement and tick counter untouched.

        Only the discrete movements are events; the random walk belongs to
        the clock.
        """
        movement = resolve_movement(movement)
        if movement not in MOVEMENT_CONFIGS:
            raise UnsupportedMovementError(movement)
        with self._lock:
            updated = self._price_pass(movement)
            quotes = self.registry.all()

        self.logger.info("Market event applied", movement=movement.value, assets_updated=updated)
        return quotes

    def status(self) -> SimulationStatus:
        return SimulationStatus(
            state=SimulationState.RUNNING if self._running else SimulationState.STOPPED,
            movement=self.movement.value,
            interval_ms=self.interval_ms,
            tick_count=self.tick_count,
            last_tick_at=self.last_tick_at,
        )

    def _price_pass(self, movement: PriceMovement) -> int:
        updated = 0
        for symbol in self.registry.symbols():
            try:
                quote = self.registry.get(symbol)
                price = next_price(movement, quote.price, self._rng, self.volatility_factor)
                volume_increment = 0
                if movement == PriceMovement.RANDOM:
                    volume_increment = self._rng.randint(0, self.settings.max_volume_increment)
                self.registry.apply_price_change(symbol, price, volume_increment)
                updated += 1
            except (BrokerSimException, ValueError) as e:
                self.logger.warning(
                    "Skipping asset in market pass",
                    **create_error_context(e, "market_price_pass", {"symbol": symbol}),
                )

        self.ledger.revalue_all()
        return updated

    async def _run(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self.interval_ms / 1000)
                if not self._running:
                    break
                self.tick()
            except asyncio.CancelledError:
                break
            except Exception as e:
                self.error_logger.error("Unhandled exception in market simulation loop",
                                        **create_error_context(e, "market_tick"), exc_info=True)
