import random
import threading
from typing import Dict, List

from core.trading.models import Transaction, TransactionStatus
from core.utils.ids import generate_transaction_id


class TransactionJournal:
    """Append-only record of completed transactions."""

    def __init__(self, lock: threading.RLock, rng: random.Random):
        self._lock = lock
        self._rng = rng
        self._entries: List[Transaction] = []
        self._by_id: Dict[str, Transaction] = {}

    def next_id(self) -> str:
        """Draw a transaction ID not yet present in the journal."""
        with self._lock:
            txn_id = generate_transaction_id(self._rng)
            while txn_id in self._by_id:
                txn_id = generate_transaction_id(self._rng)
            return txn_id

    def append(self, transaction: Transaction) -> Transaction:
        if transaction.status != TransactionStatus.COMPLETED:
            raise ValueError(f"Only completed transactions are journaled, got {transaction.status.value}")

        with self._lock:
            if transaction.id in self._by_id:
                raise ValueError(f"Duplicate transaction id: {transaction.id}")
            self._entries.append(transaction)
            self._by_id[transaction.id] = transaction
            return transaction

    def get(self, transaction_id: str) -> Transaction:
        with self._lock:
            return self._by_id[transaction_id]

    def for_account(self, account_id: str) -> List[Transaction]:
        """Transactions of one account, newest first."""
        with self._lock:
            return [t for t in reversed(self._entries) if t.account_id == account_id]

    def all(self) -> List[Transaction]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
