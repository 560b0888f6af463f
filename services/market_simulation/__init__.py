"""
Market Simulation

Recurring price simulation clock and the price-movement strategies it applies.
"""

from .movements import MOVEMENT_CONFIGS, MovementConfig, PriceMovement, next_price, resolve_movement
from .clock import MarketSimulationClock

__all__ = [
    "MarketSimulationClock",
    "PriceMovement",
    "MovementConfig",
    "MOVEMENT_CONFIGS",
    "next_price",
    "resolve_movement",
]
