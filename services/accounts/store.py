import threading
from typing import Dict, List, Optional

from core.logging import get_logger
from core.trading.models import Account, RiskTolerance
from core.utils.exceptions import (
    AccountExistsError,
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
)

logger = get_logger(__name__, component="accounts")


class AccountStore:
    """
    Owns every Account.

    Balances change only through ``debit`` and ``credit``; both reject
    negative amounts and ``debit`` never takes a balance below zero.
    """

    def __init__(self, lock: threading.RLock):
        self._lock = lock
        self._accounts: Dict[str, Account] = {}

    def create(self, account_id: str, username: str, cash_balance: float,
               risk_tolerance: RiskTolerance = RiskTolerance.MEDIUM,
               email: Optional[str] = None) -> Account:
        if cash_balance < 0:
            raise InvalidAmountError("cash_balance", cash_balance)

        account = Account(
            id=account_id,
            username=username,
            email=email,
            cash_balance=cash_balance,
            risk_tolerance=risk_tolerance,
        )
        with self._lock:
            if account_id in self._accounts:
                raise AccountExistsError(account_id)
            self._accounts[account_id] = account

        logger.info("Account created", account_id=account_id, cash_balance=cash_balance,
                    risk_tolerance=account.risk_tolerance.value)
        return account.model_copy()

    def get(self, account_id: str) -> Account:
        with self._lock:
            return self._require(account_id).model_copy()

    def ids(self) -> List[str]:
        with self._lock:
            return list(self._accounts.keys())

    def debit(self, account_id: str, amount: float) -> float:
        """Lower the balance by ``amount``; returns the new balance."""
        if amount < 0:
            raise InvalidAmountError("amount", amount)

        with self._lock:
            account = self._require(account_id)
            if amount > account.cash_balance:
                raise InsufficientFundsError(
                    account_id=account_id,
                    required_amount=amount,
                    available_amount=account.cash_balance,
                )
            account.cash_balance -= amount
            return account.cash_balance

    def credit(self, account_id: str, amount: float) -> float:
        """Raise the balance by ``amount``; returns the new balance."""
        if amount < 0:
            raise InvalidAmountError("amount", amount)

        with self._lock:
            account = self._require(account_id)
            account.cash_balance += amount
            return account.cash_balance

    def update_risk_tolerance(self, account_id: str, risk_tolerance: RiskTolerance) -> Account:
        risk_tolerance = RiskTolerance(risk_tolerance)
        with self._lock:
            account = self._require(account_id)
            account.risk_tolerance = risk_tolerance
            logger.info("Risk tolerance updated", account_id=account_id,
                        risk_tolerance=risk_tolerance.value)
            return account.model_copy()

    def _require(self, account_id: str) -> Account:
        account = self._accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account
