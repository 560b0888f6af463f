# Risk Manager Service - facade over risk, recommendation and technical analysis
import threading
from typing import List, Optional

from core.config.settings import RiskSettings
from core.logging import get_logger
from services.accounts import AccountStore
from services.asset_registry import AssetRegistry
from services.portfolio_manager import PortfolioLedger
from .analyzer import RiskAnalyzer
from .models import Recommendation, RiskProfile, TechnicalSignal
from .recommender import RecommendationAnalyzer
from .technical import TechnicalAnalyzer


class RiskAnalysisEngine:
    """Read-only analysis of accounts, portfolios and quotes."""

    def __init__(self, settings: RiskSettings, accounts: AccountStore,
                 registry: AssetRegistry, ledger: PortfolioLedger, lock: threading.RLock):
        self.settings = settings
        self.accounts = accounts
        self.ledger = ledger
        self._lock = lock
        self.logger = get_logger(__name__, component="risk_manager")

        self.risk_analyzer = RiskAnalyzer(settings, registry)
        self.recommendation_analyzer = RecommendationAnalyzer(settings, accounts, registry, ledger)
        self.technical_analyzer = TechnicalAnalyzer(registry)

    def analyze_risk(self, account_id: str) -> RiskProfile:
        """
        Score the account's current portfolio.

        The portfolio is revalued first so the weights reflect the latest
        quotes. Profiles are never cached.
        """
        with self._lock:
            self.accounts.get(account_id)
            portfolio = self.ledger.revalue(account_id)
            profile = self.risk_analyzer.analyze(portfolio)

        self.logger.info("Risk profile computed", account_id=account_id,
                         tier=profile.tier.value, advisories=len(profile.advisories))
        return profile

    def recommend(self, account_id: str, limit: Optional[int] = None) -> List[Recommendation]:
        with self._lock:
            return self.recommendation_analyzer.generate(account_id, limit)

    def analyze_technical(self, symbol: str) -> TechnicalSignal:
        with self._lock:
            return self.technical_analyzer.analyze(symbol)
