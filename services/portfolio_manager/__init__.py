"""
Portfolio Manager

Average-cost holdings per account and their revaluation from live quotes.
"""

from .ledger import PortfolioLedger

__all__ = ["PortfolioLedger"]
