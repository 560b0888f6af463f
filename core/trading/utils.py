from __future__ import annotations


def percent_of(part: float, whole: float) -> float:
    """Return ``part`` as a percentage of ``whole``; 0 when ``whole`` is not positive."""
    if whole <= 0:
        return 0.0
    return (part / whole) * 100


def clamp_price(price: float, floor: float = 0.01) -> float:
    """Keep simulated prices strictly positive."""
    return max(price, floor)
