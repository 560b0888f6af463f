"""
Order execution against account cash and portfolio holdings.

Buys and sells share one code path; an ``OrderProfile`` per ``OrderKind``
supplies the cash and price direction and the fee rate.
"""

import threading
from dataclasses import dataclass
from typing import Dict, List

from core.config.settings import Settings
from core.logging import get_audit_logger_safe, get_trading_logger_safe
from core.trading.models import OrderKind, OrderQuote, Transaction
from core.utils.exceptions import (
    InsufficientFundsError,
    InsufficientHoldingsError,
    InvalidAmountError,
    UnsupportedOrderKindError,
)
from services.accounts import AccountStore
from services.asset_registry import AssetRegistry
from services.portfolio_manager import PortfolioLedger
from .journal import TransactionJournal


@dataclass(frozen=True)
class OrderProfile:
    # +1 buys: cash out, units in, price nudged up. -1 sells: the reverse.
    direction: int
    fee_rate_setting: str


ORDER_PROFILES: Dict[OrderKind, OrderProfile] = {
    OrderKind.BUY: OrderProfile(direction=1, fee_rate_setting="buy_fee_rate"),
    OrderKind.SELL: OrderProfile(direction=-1, fee_rate_setting="sell_fee_rate"),
}


def resolve_order_kind(kind) -> OrderKind:
    try:
        return OrderKind(kind)
    except ValueError:
        raise UnsupportedOrderKindError(kind) from None


class OrderExecutionEngine:
    """
    Validates and executes orders atomically.

    All validation happens before the first write; a rejected order leaves
    balances, holdings, quotes and the journal untouched.
    """

    def __init__(self, settings: Settings, accounts: AccountStore, registry: AssetRegistry,
                 ledger: PortfolioLedger, journal: TransactionJournal, lock: threading.RLock):
        self.settings = settings
        self.accounts = accounts
        self.registry = registry
        self.ledger = ledger
        self.journal = journal
        self._lock = lock
        self.logger = get_trading_logger_safe("order_execution")
        self.audit_logger = get_audit_logger_safe("order_execution")

    def calculate_fee(self, gross_amount: float, kind) -> float:
        profile = ORDER_PROFILES[resolve_order_kind(kind)]
        rate = getattr(self.settings.fees, profile.fee_rate_setting)
        return max(gross_amount * rate, self.settings.fees.minimum_fee)

    def quote_order(self, kind, account_id: str, symbol: str, quantity: int) -> OrderQuote:
        """Price an order without executing it."""
        kind = resolve_order_kind(kind)
        self._validate_quantity(quantity)

        with self._lock:
            account = self.accounts.get(account_id)
            quote = self.registry.get(symbol)
            held = self.ledger.held_quantity(account_id, symbol)

            gross = quantity * quote.price
            fee = self.calculate_fee(gross, kind)
            net_cash_change = self._cash_delta(kind, gross, fee)
            affordable = account.cash_balance + net_cash_change >= 0
            if kind == OrderKind.SELL:
                affordable = affordable and held >= quantity

            return OrderQuote(
                kind=kind,
                account_id=account_id,
                symbol=symbol,
                quantity=quantity,
                price=quote.price,
                gross_amount=gross,
                fee=fee,
                net_cash_change=net_cash_change,
                affordable=affordable,
            )

    def execute(self, kind, account_id: str, symbol: str, quantity: int) -> Transaction:
        """
        Execute a buy or sell at the current quote.

        Raises:
            UnsupportedOrderKindError: kind is neither buy nor sell
            InvalidAmountError: quantity is not a positive integer
            AccountNotFoundError / AssetNotFoundError / PortfolioNotFoundError
            InsufficientFundsError: cash would go negative
            InsufficientHoldingsError: selling more units than held
        """
        kind = resolve_order_kind(kind)
        self._validate_quantity(quantity)

        with self._lock:
            account = self.accounts.get(account_id)
            quote = self.registry.get(symbol)
            held = self.ledger.held_quantity(account_id, symbol)

            price = quote.price
            gross = quantity * price
            fee = self.calculate_fee(gross, kind)
            cash_delta = self._cash_delta(kind, gross, fee)

            if kind == OrderKind.SELL and held < quantity:
                raise InsufficientHoldingsError(
                    account_id=account_id,
                    symbol=symbol,
                    requested_quantity=quantity,
                    held_quantity=held,
                )
            if account.cash_balance + cash_delta < 0:
                raise InsufficientFundsError(
                    account_id=account_id,
                    required_amount=-cash_delta,
                    available_amount=account.cash_balance,
                )

            transaction = Transaction(
                id=self.journal.next_id(),
                account_id=account_id,
                kind=kind,
                symbol=symbol,
                quantity=quantity,
                execution_price=price,
                fee=fee,
            )

            if kind == OrderKind.BUY:
                self.accounts.debit(account_id, -cash_delta)
                self.ledger.apply_buy(account_id, symbol, quantity, price)
            else:
                self.ledger.apply_decrease(account_id, symbol, quantity)
                if cash_delta >= 0:
                    self.accounts.credit(account_id, cash_delta)
                else:
                    # Minimum fee larger than the proceeds
                    self.accounts.debit(account_id, -cash_delta)

            transaction = self.journal.append(transaction.complete())
            new_price = self._apply_market_impact(kind, symbol, quantity, price)

        self.logger.info(
            "Order executed",
            transaction_id=transaction.id,
            account_id=account_id,
            kind=kind.value,
            symbol=symbol,
            quantity=quantity,
            execution_price=price,
            fee=fee,
            net_cash_change=cash_delta,
            post_impact_price=new_price,
        )
        self.audit_logger.info(
            "Transaction recorded",
            transaction_id=transaction.id,
            account_id=account_id,
            kind=kind.value,
            symbol=symbol,
            quantity=quantity,
        )
        return transaction

    def transaction_history(self, account_id: str) -> List[Transaction]:
        """Completed transactions of an existing account, newest first."""
        self.accounts.get(account_id)
        return self.journal.for_account(account_id)

    def _apply_market_impact(self, kind: OrderKind, symbol: str, quantity: int,
                             price: float) -> float:
        market = self.settings.market
        impact_factor = quantity / market.impact_divisor
        price_impact = price * impact_factor * market.impact_coefficient
        new_price = price + ORDER_PROFILES[kind].direction * price_impact

        updated = self.registry.apply_price_change(symbol, new_price)
        self.ledger.revalue_holders(symbol)
        return updated.price

    @staticmethod
    def _cash_delta(kind: OrderKind, gross: float, fee: float) -> float:
        # Fees always reduce cash, whichever way the units move
        return -ORDER_PROFILES[kind].direction * gross - fee

    @staticmethod
    def _validate_quantity(quantity) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidAmountError("quantity", quantity)
