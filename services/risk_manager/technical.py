"""
Moving-average and RSI signal over the asset registry's price history.
"""

import statistics
from typing import List

from core.logging import get_market_data_logger_safe
from services.asset_registry import AssetRegistry
from .models import TechnicalAction, TechnicalSignal

logger = get_market_data_logger_safe("technical_analysis")


def simple_moving_average(prices: List[float], period: int) -> float:
    """Mean of the last ``period`` prices, or of all of them when fewer exist."""
    if not prices:
        raise ValueError("No prices to average")
    return statistics.mean(prices[-period:])


def relative_strength_index(prices: List[float], period: int = 14) -> float:
    """
    RSI from simple averages of the last ``period`` gains and losses.

    Neutral 50 until ``period`` changes are available; 100 when there were no
    losses.
    """
    changes = [current - previous for previous, current in zip(prices, prices[1:])]
    if len(changes) < period:
        return 50.0

    recent = changes[-period:]
    avg_gain = statistics.mean(max(c, 0) for c in recent)
    avg_loss = statistics.mean(max(-c, 0) for c in recent)

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


class TechnicalAnalyzer:
    def __init__(self, registry: AssetRegistry, short_period: int = 20,
                 long_period: int = 50, rsi_period: int = 14,
                 rsi_overbought: float = 70, rsi_oversold: float = 30):
        self.registry = registry
        self.short_period = short_period
        self.long_period = long_period
        self.rsi_period = rsi_period
        self.rsi_overbought = rsi_overbought
        self.rsi_oversold = rsi_oversold

    def analyze(self, symbol: str) -> TechnicalSignal:
        quote = self.registry.get(symbol)
        prices = self.registry.price_history(symbol) or [quote.price]

        price = quote.price
        sma_20 = simple_moving_average(prices, self.short_period)
        sma_50 = simple_moving_average(prices, self.long_period)
        rsi = relative_strength_index(prices, self.rsi_period)

        if price > sma_20 > sma_50 and rsi < self.rsi_overbought:
            signal = TechnicalAction.BUY
            reason = f"Uptrend: price above SMA20 above SMA50, RSI {rsi:.1f}"
        elif price < sma_20 < sma_50 and rsi > self.rsi_oversold:
            signal = TechnicalAction.SELL
            reason = f"Downtrend: price below SMA20 below SMA50, RSI {rsi:.1f}"
        else:
            signal = TechnicalAction.HOLD
            reason = "No aligned trend"

        logger.debug("Technical signal", symbol=symbol, signal=signal.value,
                     sma_20=sma_20, sma_50=sma_50, rsi=rsi, samples=len(prices))

        return TechnicalSignal(
            symbol=symbol,
            current_price=price,
            sma_20=sma_20,
            sma_50=sma_50,
            rsi=rsi,
            signal=signal,
            samples=len(prices),
            reason=reason,
        )
