"""Price movement strategies for the market simulation.

- random: symmetric random walk scaled by the mode's volatility factor
- bull / bear: broad rally or sell-off
- crash: sharp sell-off
- recovery: sharp rebound
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict

from core.utils.exceptions import UnsupportedMovementError


class PriceMovement(str, Enum):
    RANDOM = "random"
    BULL = "bull"
    BEAR = "bear"
    CRASH = "crash"
    RECOVERY = "recovery"


@dataclass(frozen=True)
class MovementConfig:
    """Multiplicative band: price *= 1 + direction * U(low, high)."""
    movement: PriceMovement
    low: float
    high: float
    direction: int
    description: str = ""


MOVEMENT_CONFIGS: Dict[PriceMovement, MovementConfig] = {
    PriceMovement.BULL: MovementConfig(
        movement=PriceMovement.BULL, low=0.05, high=0.15, direction=1,
        description="Bull market: every asset rallies 5-15%",
    ),
    PriceMovement.BEAR: MovementConfig(
        movement=PriceMovement.BEAR, low=0.05, high=0.15, direction=-1,
        description="Bear market: every asset drops 5-15%",
    ),
    PriceMovement.CRASH: MovementConfig(
        movement=PriceMovement.CRASH, low=0.15, high=0.35, direction=-1,
        description="Market crash: every asset drops 15-35%",
    ),
    PriceMovement.RECOVERY: MovementConfig(
        movement=PriceMovement.RECOVERY, low=0.10, high=0.25, direction=1,
        description="Market recovery: every asset rebounds 10-25%",
    ),
}


def resolve_movement(movement) -> PriceMovement:
    try:
        return PriceMovement(movement)
    except ValueError:
        raise UnsupportedMovementError(movement) from None


def next_price(movement: PriceMovement, price: float, rng: random.Random,
               volatility_factor: float) -> float:
    """
    Draw the next (unclamped) price for one asset.

    The asset registry applies the price floor.
    """
    movement = resolve_movement(movement)
    if movement == PriceMovement.RANDOM:
        change = price * rng.uniform(-1, 1) * volatility_factor
        return price + change

    config = MOVEMENT_CONFIGS[movement]
    return price * (1 + config.direction * rng.uniform(config.low, config.high))
