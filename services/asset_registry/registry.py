"""
In-memory asset registry holding the latest simulated quote per symbol.
"""

import random
import threading
from collections import deque
from typing import Deque, Dict, List, Optional

from core.config.settings import MarketSimulationSettings
from core.logging import get_market_data_logger_safe
from core.trading.models import AssetQuote, utc_now
from core.trading.utils import clamp_price, percent_of
from core.utils.exceptions import AssetNotFoundError, InvalidAmountError
from .csv_loader import AssetCSVLoader

logger = get_market_data_logger_safe("asset_registry")


class AssetRegistry:
    """
    Catalog of tradable assets.

    Quotes are only mutated through ``apply_price_change`` so the price floor
    and change bookkeeping stay in one place. Readers get snapshot copies.
    """

    def __init__(self, settings: MarketSimulationSettings, lock: threading.RLock,
                 rng: random.Random):
        self.settings = settings
        self._lock = lock
        self._rng = rng
        self._quotes: Dict[str, AssetQuote] = {}
        self._history: Dict[str, Deque[float]] = {}

    def list_asset(self, symbol: str, name: str, sector: str, price: float,
                   volume: Optional[int] = None) -> AssetQuote:
        """Add an asset to the catalog, replacing any existing listing."""
        if price <= 0:
            raise InvalidAmountError("price", price)
        if volume is None:
            volume = self._rng.randint(0, self.settings.initial_volume_max)

        quote = AssetQuote(symbol=symbol, name=name, sector=sector, price=price, volume=volume)
        with self._lock:
            self._quotes[symbol] = quote
            self._history[symbol] = deque([price], maxlen=self.settings.price_history_length)

        logger.debug("Asset listed", symbol=symbol, sector=sector, price=price)
        return quote.model_copy()

    def load_from_csv(self, loader: Optional[AssetCSVLoader] = None) -> int:
        """List every asset from a CSV file (the bundled universe by default)."""
        loader = loader or AssetCSVLoader()
        count = 0
        for row in loader.iter_assets():
            self.list_asset(row["symbol"], row["name"], row["sector"], row["price"])
            count += 1
        logger.info("Asset universe loaded", assets=count)
        return count

    def delist(self, symbol: str) -> None:
        with self._lock:
            if symbol not in self._quotes:
                raise AssetNotFoundError(symbol)
            del self._quotes[symbol]
            self._history.pop(symbol, None)
        logger.info("Asset delisted", symbol=symbol)

    def get(self, symbol: str) -> AssetQuote:
        with self._lock:
            quote = self._quotes.get(symbol)
            if quote is None:
                raise AssetNotFoundError(symbol)
            return quote.model_copy()

    def all(self) -> List[AssetQuote]:
        """All quotes in listing order."""
        with self._lock:
            return [quote.model_copy() for quote in self._quotes.values()]

    def symbols(self) -> List[str]:
        with self._lock:
            return list(self._quotes.keys())

    def sector_of(self, symbol: str) -> str:
        return self.get(symbol).sector

    def price_history(self, symbol: str) -> List[float]:
        """Retained prices for ``symbol``, oldest first, latest last."""
        with self._lock:
            if symbol not in self._history:
                raise AssetNotFoundError(symbol)
            return list(self._history[symbol])

    def apply_price_change(self, symbol: str, new_price: float,
                           volume_increment: int = 0) -> AssetQuote:
        """
        Move an asset to ``new_price``.

        The price is clamped to the configured floor and the change fields are
        computed against the prior price. ``volume_increment`` is only passed
        by the market clock.

        Returns:
            Snapshot of the updated quote
        """
        if volume_increment < 0:
            raise InvalidAmountError("volume_increment", volume_increment)

        with self._lock:
            quote = self._quotes.get(symbol)
            if quote is None:
                raise AssetNotFoundError(symbol)

            previous = quote.price
            price = clamp_price(new_price, self.settings.price_floor)
            change = price - previous

            quote.price = price
            quote.last_change = change
            quote.last_change_percent = percent_of(change, previous)
            quote.volume += volume_increment
            quote.updated_at = utc_now()
            self._history[symbol].append(price)

            return quote.model_copy()
