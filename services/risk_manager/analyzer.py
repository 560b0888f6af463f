from typing import Dict

from core.config.settings import RiskSettings
from core.logging import get_logger
from core.trading.models import RiskTier
from core.trading.portfolio_models import Portfolio
from core.utils.exceptions import AssetNotFoundError
from services.asset_registry import AssetRegistry
from .models import RiskProfile
from .rules import AdvisoryRuleEngine, RiskMetrics

logger = get_logger(__name__, component="risk_manager")


def classify_tier(volatility_score: float, diversification_score: float) -> RiskTier:
    if volatility_score < 30 and diversification_score > 70:
        return RiskTier.LOW
    if volatility_score < 60 and diversification_score > 40:
        return RiskTier.MEDIUM
    return RiskTier.HIGH


class RiskAnalyzer:
    """Diversification and volatility scoring of a valued portfolio."""

    def __init__(self, settings: RiskSettings, registry: AssetRegistry):
        self.settings = settings
        self.registry = registry
        self.rule_engine = AdvisoryRuleEngine()

    def sector_volatility(self, sector: str) -> float:
        return self.settings.sector_volatility.get(sector, self.settings.default_volatility)

    def asset_volatility(self, symbol: str) -> float:
        try:
            sector = self.registry.sector_of(symbol)
        except AssetNotFoundError:
            return self.settings.default_volatility
        return self.sector_volatility(sector)

    def holding_weights(self, portfolio: Portfolio) -> Dict[str, float]:
        """Share of total value per held symbol."""
        total = portfolio.total_value
        if total <= 0:
            return {symbol: 0.0 for symbol in portfolio.holdings}
        return {symbol: h.current_value / total for symbol, h in portfolio.holdings.items()}

    def diversification_score(self, portfolio: Portfolio) -> float:
        """
        Sector spread (up to 50) plus distribution (up to 50).

        Distribution loses 100 points per unit of weight above the
        concentration threshold, summed across holdings.
        """
        if not portfolio.holdings:
            return 0.0

        sectors = set()
        for symbol in portfolio.holdings:
            try:
                sectors.add(self.registry.sector_of(symbol))
            except AssetNotFoundError:
                continue

        sector_score = min(len(sectors) / self.settings.max_sectors, 1) * 50

        threshold = self.settings.concentration_threshold
        penalty = sum(
            max(weight - threshold, 0) * 100
            for weight in self.holding_weights(portfolio).values()
        )
        distribution_score = max(50 - penalty, 0)

        return min(sector_score + distribution_score, 100)

    def volatility_score(self, portfolio: Portfolio) -> float:
        if not portfolio.holdings:
            return 0.0

        weighted = sum(
            weight * self.asset_volatility(symbol)
            for symbol, weight in self.holding_weights(portfolio).items()
        )
        return min(weighted, 100)

    def analyze(self, portfolio: Portfolio) -> RiskProfile:
        diversification = self.diversification_score(portfolio)
        volatility = self.volatility_score(portfolio)
        tier = classify_tier(volatility, diversification)
        advisories = self.rule_engine.evaluate(RiskMetrics(
            diversification_score=diversification,
            volatility_score=volatility,
            tier=tier,
        ))

        logger.debug("Risk analyzed", account_id=portfolio.account_id, tier=tier.value,
                     diversification=round(diversification, 2), volatility=round(volatility, 2))

        return RiskProfile(
            account_id=portfolio.account_id,
            tier=tier,
            diversification_score=diversification,
            volatility_score=volatility,
            advisories=advisories,
        )
