from typing import Callable, Dict, List, Optional, Tuple

from core.config.settings import RiskSettings
from core.trading.models import RiskTier, RiskTolerance
from services.accounts import AccountStore
from services.asset_registry import AssetRegistry
from services.portfolio_manager import PortfolioLedger
from .models import Recommendation

LOW_VOLATILITY_CEILING = 50
HIGH_VOLATILITY_FLOOR = 60

# risk tolerance -> (accepts asset volatility, recommendation text, priority)
TOLERANCE_RULES: Dict[RiskTolerance, Tuple[Callable[[float], bool], str, int]] = {
    RiskTolerance.LOW: (
        lambda volatility: volatility < LOW_VOLATILITY_CEILING,
        "Low-risk asset recommended for conservative profile",
        1,
    ),
    RiskTolerance.HIGH: (
        lambda volatility: volatility > HIGH_VOLATILITY_FLOOR,
        "High-growth potential asset for aggressive profile",
        2,
    ),
    RiskTolerance.MEDIUM: (
        lambda volatility: True,
        "Balanced asset recommended for moderate profile",
        1,
    ),
}


def volatility_tier(volatility: float) -> RiskTier:
    """
    Recommendation risk level from sector volatility.

    Three levels: low below 50, high above 60, medium from 50 to 60
    inclusive. Low tolerance only sees low-level assets.
    """
    if volatility < LOW_VOLATILITY_CEILING:
        return RiskTier.LOW
    if volatility > HIGH_VOLATILITY_FLOOR:
        return RiskTier.HIGH
    return RiskTier.MEDIUM


class RecommendationAnalyzer:
    """Suggests unheld assets matching the account's risk tolerance."""

    def __init__(self, settings: RiskSettings, accounts: AccountStore,
                 registry: AssetRegistry, ledger: PortfolioLedger):
        self.settings = settings
        self.accounts = accounts
        self.registry = registry
        self.ledger = ledger

    def generate(self, account_id: str, limit: Optional[int] = None) -> List[Recommendation]:
        account = self.accounts.get(account_id)
        portfolio = self.ledger.get(account_id)
        accepts, text, priority = TOLERANCE_RULES[account.risk_tolerance]

        recommendations: List[Recommendation] = []
        for quote in self.registry.all():
            if quote.symbol in portfolio.holdings:
                continue

            volatility = self.settings.sector_volatility.get(
                quote.sector, self.settings.default_volatility
            )
            if not accepts(volatility):
                continue

            recommendations.append(Recommendation(
                symbol=quote.symbol,
                name=quote.name,
                sector=quote.sector,
                current_price=quote.price,
                recommendation=text,
                priority=priority,
                risk_level=volatility_tier(volatility),
            ))

        # Stable sort keeps listing order within a priority
        recommendations.sort(key=lambda r: r.priority, reverse=True)
        return recommendations[:limit or self.settings.max_recommendations]
