"""
Risk Manager

Diversification and volatility scoring, recommendations and technical
signals over portfolio and market state.
"""

from .models import Recommendation, RiskProfile, TechnicalAction, TechnicalSignal
from .service import RiskAnalysisEngine

__all__ = [
    "RiskAnalysisEngine",
    "RiskProfile",
    "Recommendation",
    "TechnicalSignal",
    "TechnicalAction",
]
