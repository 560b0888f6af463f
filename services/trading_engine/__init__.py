"""
Trading Engine Service

Executes buy and sell orders through a single profile-driven path and keeps
the append-only transaction journal.
"""

from .engine import ORDER_PROFILES, OrderExecutionEngine, OrderProfile, resolve_order_kind
from .journal import TransactionJournal

__all__ = [
    "OrderExecutionEngine",
    "OrderProfile",
    "ORDER_PROFILES",
    "TransactionJournal",
    "resolve_order_kind",
]
