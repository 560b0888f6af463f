"""
Account Store

Cash balances and risk-tolerance profiles of brokerage accounts.
"""

from .store import AccountStore

__all__ = ["AccountStore"]
