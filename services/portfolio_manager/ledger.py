import threading
from typing import Dict, List, Optional

from core.logging import get_trading_logger_safe
from core.trading.portfolio_models import Holding, Portfolio, PortfolioPerformance
from core.utils.exceptions import (
    AssetNotFoundError,
    InsufficientHoldingsError,
    InvalidAmountError,
    PortfolioNotFoundError,
)
from services.asset_registry import AssetRegistry


class PortfolioLedger:
    """Holdings at weighted-average cost, valued from the asset registry."""

    def __init__(self, registry: AssetRegistry, lock: threading.RLock):
        self.registry = registry
        self._lock = lock
        self.portfolios: Dict[str, Portfolio] = {}
        self.logger = get_trading_logger_safe("portfolio_ledger")

    def open_portfolio(self, account_id: str) -> Portfolio:
        """Create the (empty) portfolio for a new account; idempotent."""
        with self._lock:
            portfolio = self.portfolios.get(account_id)
            if portfolio is None:
                portfolio = Portfolio(account_id=account_id)
                self.portfolios[account_id] = portfolio
                self.logger.info("Opened portfolio", account_id=account_id)
            return portfolio.model_copy(deep=True)

    def get(self, account_id: str) -> Portfolio:
        with self._lock:
            return self._require(account_id).model_copy(deep=True)

    def holding(self, account_id: str, symbol: str) -> Optional[Holding]:
        with self._lock:
            holding = self._require(account_id).holdings.get(symbol)
            return holding.model_copy() if holding else None

    def held_quantity(self, account_id: str, symbol: str) -> int:
        with self._lock:
            holding = self._require(account_id).holdings.get(symbol)
            return holding.quantity if holding else 0

    def apply_buy(self, account_id: str, symbol: str, quantity: int, price: float) -> Holding:
        """Fold a buy lot into the holding's average cost, then revalue."""
        if quantity <= 0:
            raise InvalidAmountError("quantity", quantity)
        if price <= 0:
            raise InvalidAmountError("price", price)

        with self._lock:
            portfolio = self._require(account_id)
            holding = portfolio.holdings.get(symbol)
            if holding is None:
                holding = Holding(symbol=symbol, quantity=quantity, average_cost=price)
                portfolio.holdings[symbol] = holding
            else:
                holding.add_units(quantity, price)

            self.revalue(account_id)
            return holding.model_copy()

    def apply_decrease(self, account_id: str, symbol: str, quantity: int) -> bool:
        """
        Remove ``quantity`` units of ``symbol``.

        The holding is deleted when it reaches exactly zero. Average cost of
        the remaining units is unchanged.

        Raises:
            InsufficientHoldingsError: no holding, or fewer units than requested
        """
        if quantity <= 0:
            raise InvalidAmountError("quantity", quantity)

        with self._lock:
            portfolio = self._require(account_id)
            holding = portfolio.holdings.get(symbol)
            held = holding.quantity if holding else 0
            if holding is None or held < quantity:
                raise InsufficientHoldingsError(
                    account_id=account_id,
                    symbol=symbol,
                    requested_quantity=quantity,
                    held_quantity=held,
                )

            holding.remove_units(quantity)
            if holding.quantity == 0:
                del portfolio.holdings[symbol]

            self.revalue(account_id)
            return True

    def revalue(self, account_id: str) -> Portfolio:
        """Recompute every holding from current quotes, then the totals."""
        with self._lock:
            portfolio = self._require(account_id)
            for symbol, holding in portfolio.holdings.items():
                try:
                    quote = self.registry.get(symbol)
                except AssetNotFoundError:
                    # Delisted asset: the last known value stands
                    self.logger.warning("No quote for held asset, keeping last value",
                                        account_id=account_id, symbol=symbol)
                    continue
                holding.revalue(quote.price)

            portfolio.update_totals()
            return portfolio.model_copy(deep=True)

    def revalue_all(self) -> int:
        """Revalue every portfolio with at least one holding."""
        with self._lock:
            count = 0
            for account_id, portfolio in self.portfolios.items():
                if portfolio.holdings:
                    self.revalue(account_id)
                    count += 1
            return count

    def revalue_holders(self, symbol: str) -> int:
        """Revalue only the portfolios holding ``symbol``."""
        with self._lock:
            holders = [
                account_id for account_id, portfolio in self.portfolios.items()
                if symbol in portfolio.holdings
            ]
            for account_id in holders:
                self.revalue(account_id)
            return len(holders)

    def performance(self, account_id: str) -> PortfolioPerformance:
        """Totals plus best/worst holding by return percentage and sector spread."""
        with self._lock:
            portfolio = self._require(account_id)
            holdings: List[Holding] = list(portfolio.holdings.values())

            sectors: List[str] = []
            for holding in holdings:
                try:
                    sector = self.registry.sector_of(holding.symbol)
                except AssetNotFoundError:
                    continue
                if sector not in sectors:
                    sectors.append(sector)

            best = max(holdings, key=lambda h: h.unrealized_return_pct, default=None)
            worst = min(holdings, key=lambda h: h.unrealized_return_pct, default=None)

            return PortfolioPerformance(
                account_id=account_id,
                total_value=portfolio.total_value,
                total_invested=portfolio.total_invested,
                total_return=portfolio.total_return,
                total_return_pct=portfolio.total_return_pct,
                holdings_count=len(holdings),
                sectors=sectors,
                best_performer=best.model_copy() if best else None,
                worst_performer=worst.model_copy() if worst else None,
            )

    def _require(self, account_id: str) -> Portfolio:
        portfolio = self.portfolios.get(account_id)
        if portfolio is None:
            raise PortfolioNotFoundError(account_id)
        return portfolio
