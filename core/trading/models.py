from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OrderKind(str, Enum):
    BUY = "buy"
    SELL = "sell"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class RiskTolerance(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Account(BaseModel):
    """A brokerage account: cash balance plus the owner's risk profile."""
    id: str
    username: str
    email: Optional[str] = None
    cash_balance: float = Field(default=0.0, ge=0)
    risk_tolerance: RiskTolerance = RiskTolerance.MEDIUM
    created_at: datetime = Field(default_factory=utc_now)


class AssetQuote(BaseModel):
    """Latest simulated market quote for a tradable asset."""
    symbol: str
    name: str
    sector: str
    price: float = Field(gt=0)
    last_change: float = 0.0
    last_change_percent: float = 0.0
    volume: int = Field(default=0, ge=0)
    updated_at: datetime = Field(default_factory=utc_now)


class Transaction(BaseModel):
    """
    Record of an executed order.

    Frozen: once a transaction leaves ``pending`` it is never modified, and the
    journal only ever appends.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    account_id: str
    kind: OrderKind
    symbol: str
    quantity: int = Field(gt=0)
    execution_price: float = Field(gt=0)
    fee: float = Field(default=0.0, ge=0)
    status: TransactionStatus = TransactionStatus.PENDING
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def gross_amount(self) -> float:
        return self.quantity * self.execution_price

    @property
    def net_cash_change(self) -> float:
        """Signed effect on the account's cash balance."""
        if self.kind == OrderKind.BUY:
            return -(self.gross_amount + self.fee)
        return self.gross_amount - self.fee

    def complete(self) -> "Transaction":
        if self.status != TransactionStatus.PENDING:
            raise ValueError(f"Transaction {self.id} already {self.status.value}")
        return self.model_copy(update={"status": TransactionStatus.COMPLETED})

    def fail(self) -> "Transaction":
        if self.status != TransactionStatus.PENDING:
            raise ValueError(f"Transaction {self.id} already {self.status.value}")
        return self.model_copy(update={"status": TransactionStatus.FAILED})


class OrderQuote(BaseModel):
    """Pre-trade cost preview; nothing is mutated to produce it."""
    kind: OrderKind
    account_id: str
    symbol: str
    quantity: int
    price: float
    gross_amount: float
    fee: float
    net_cash_change: float
    affordable: bool


class SimulationState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class SimulationStatus(BaseModel):
    state: SimulationState
    movement: str
    interval_ms: int
    tick_count: int = 0
    last_tick_at: Optional[datetime] = None

    @property
    def is_running(self) -> bool:
        return self.state == SimulationState.RUNNING
