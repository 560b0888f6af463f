from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime

from .models import utc_now
from .utils import percent_of


class Holding(BaseModel):
    """Units of one asset held by an account, at average-cost basis."""
    symbol: str
    quantity: int = Field(gt=0)
    average_cost: float = Field(gt=0)
    current_value: float = 0.0
    unrealized_return: float = 0.0
    unrealized_return_pct: float = 0.0

    @property
    def invested(self) -> float:
        return self.quantity * self.average_cost

    def add_units(self, quantity: int, price: float):
        """Fold a new buy lot into the quantity-weighted average cost."""
        total_cost = self.invested + quantity * price
        self.quantity += quantity
        self.average_cost = total_cost / self.quantity

    def remove_units(self, quantity: int):
        # Sells never touch average_cost
        self.quantity -= quantity

    def revalue(self, price: float):
        self.current_value = self.quantity * price
        self.unrealized_return = self.current_value - self.invested
        self.unrealized_return_pct = percent_of(self.unrealized_return, self.invested)


class Portfolio(BaseModel):
    """
    Holdings of a single account plus aggregate valuation.

    Holdings are keyed by symbol and keep insertion order.
    """
    account_id: str
    holdings: Dict[str, Holding] = Field(default_factory=dict)
    total_value: float = 0.0
    total_invested: float = 0.0
    total_return: float = 0.0
    total_return_pct: float = 0.0
    last_valued_at: datetime = Field(default_factory=utc_now)

    def update_totals(self):
        """Recalculates aggregates from the holdings' current values."""
        self.total_value = sum(h.current_value for h in self.holdings.values())
        self.total_invested = sum(h.invested for h in self.holdings.values())
        self.total_return = self.total_value - self.total_invested
        self.total_return_pct = percent_of(self.total_return, self.total_invested)
        self.last_valued_at = utc_now()


class PortfolioPerformance(BaseModel):
    """Performance summary of a portfolio"""
    account_id: str
    total_value: float
    total_invested: float
    total_return: float
    total_return_pct: float
    holdings_count: int
    sectors: List[str]
    best_performer: Optional[Holding] = None
    worst_performer: Optional[Holding] = None
