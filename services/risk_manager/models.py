# Risk Manager Service Models
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from enum import Enum

from core.trading.models import RiskTier, utc_now


class TechnicalAction(str, Enum):
    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


class RiskProfile(BaseModel):
    """Risk assessment of one portfolio. Recomputed on every request."""
    account_id: str
    tier: RiskTier
    diversification_score: float = Field(ge=0, le=100)
    volatility_score: float = Field(ge=0, le=100)
    advisories: List[str] = Field(default_factory=list)
    computed_at: datetime = Field(default_factory=utc_now)


class Recommendation(BaseModel):
    """An unheld asset suggested for the account's risk tolerance"""
    symbol: str
    name: str
    sector: str
    current_price: float
    recommendation: str
    priority: int = Field(ge=1, le=2)
    risk_level: RiskTier


class TechnicalSignal(BaseModel):
    """Moving-average and RSI reading over the retained price history"""
    symbol: str
    current_price: float
    sma_20: float
    sma_50: float
    rsi: float
    signal: TechnicalAction
    samples: int
    reason: Optional[str] = None
    computed_at: datetime = Field(default_factory=utc_now)
