# Portfolio advisory rules
from dataclasses import dataclass
from typing import List

from core.trading.models import RiskTier

DEFAULT_ADVISORY = "Portfolio looks balanced, keep monitoring"


@dataclass(frozen=True)
class RiskMetrics:
    diversification_score: float
    volatility_score: float
    tier: RiskTier


class AdvisoryRule:
    """Base class for advisory rules"""

    def __init__(self, name: str, message: str):
        self.name = name
        self.message = message

    def applies(self, metrics: RiskMetrics) -> bool:
        raise NotImplementedError


class LowDiversificationRule(AdvisoryRule):
    """Too few sectors or too concentrated"""

    def __init__(self, threshold: float = 40):
        super().__init__("LowDiversification", "Consider diversifying into more sectors")
        self.threshold = threshold

    def applies(self, metrics: RiskMetrics) -> bool:
        return metrics.diversification_score < self.threshold


class HighVolatilityRule(AdvisoryRule):
    def __init__(self, threshold: float = 70):
        super().__init__("HighVolatility", "Reduce volatile assets, add more stable ones")
        self.threshold = threshold

    def applies(self, metrics: RiskMetrics) -> bool:
        return metrics.volatility_score > self.threshold


class HighRiskTierRule(AdvisoryRule):
    def __init__(self):
        super().__init__("HighRiskTier", "High risk detected, review your investment strategy")

    def applies(self, metrics: RiskMetrics) -> bool:
        return metrics.tier == RiskTier.HIGH


class WellBalancedRule(AdvisoryRule):
    """Broadly diversified and calm"""

    def __init__(self, min_diversification: float = 80, max_volatility: float = 30):
        super().__init__("WellBalanced", "Excellent diversification and low risk, keep this strategy")
        self.min_diversification = min_diversification
        self.max_volatility = max_volatility

    def applies(self, metrics: RiskMetrics) -> bool:
        return (metrics.diversification_score > self.min_diversification
                and metrics.volatility_score < self.max_volatility)


class AdvisoryRuleEngine:
    """Evaluates the advisory rules in order"""

    def __init__(self):
        self.rules: List[AdvisoryRule] = [
            LowDiversificationRule(),
            HighVolatilityRule(),
            HighRiskTierRule(),
            WellBalancedRule(),
        ]

    def evaluate(self, metrics: RiskMetrics) -> List[str]:
        """
        Collect the message of every rule that applies.

        Returns:
            Advisories in rule order; the default advisory when none apply
        """
        advisories = [rule.message for rule in self.rules if rule.applies(metrics)]
        return advisories or [DEFAULT_ADVISORY]
