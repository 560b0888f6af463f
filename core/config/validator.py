"""
Startup checks over the loaded settings.

Field validators on the settings models reject values that are never
meaningful; the checks here cover combinations that are legal but broken or
suspicious for a simulation run.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from core.logging import get_logger
from .settings import LOG_LEVELS, Environment, Settings, SimulationMode

logger = get_logger(__name__, component="application")

# SMA-50 needs this many retained prices
MIN_PRICE_HISTORY = 50
MIN_TICK_INTERVAL_MS = 500


@dataclass
class ConfigIssue:
    component: str
    message: str
    severity: str = "error"  # or "warning"


class ConfigurationValidator:
    """Collects every issue first so one run reports everything to fix."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.issues: List[ConfigIssue] = []

    @property
    def errors(self) -> List[ConfigIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> List[ConfigIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    def _error(self, component: str, message: str) -> None:
        self.issues.append(ConfigIssue(component, message))

    def _warn(self, component: str, message: str) -> None:
        self.issues.append(ConfigIssue(component, message, severity="warning"))

    def validate_all(self) -> bool:
        """Run every check; True when no errors were found."""
        self.issues = []
        self._check_fees()
        self._check_order_limits()
        self._check_market()
        self._check_risk()
        self._check_logging()

        for issue in self.errors:
            logger.error("Configuration error", component_name=issue.component, detail=issue.message)
        for issue in self.warnings:
            logger.warning("Configuration warning", component_name=issue.component, detail=issue.message)

        if not self.errors:
            logger.info("Configuration validation passed", warnings=len(self.warnings))
        return not self.errors

    def _check_fees(self):
        fees = self.settings.fees
        for name in ("buy_fee_rate", "sell_fee_rate"):
            rate = getattr(fees, name)
            if rate >= 1:
                self._error("Fees", f"{name}={rate} would consume the whole order value")
            elif rate > 0.05:
                self._warn("Fees", f"{name}={rate} is above 5%")

    def _check_order_limits(self):
        if self.settings.order_limits.min_order_size < 1:
            self._error("Order Limits", "min_order_size must be at least 1")

    def _check_market(self):
        market = self.settings.market
        if market.price_floor <= 0:
            self._error("Market", "price_floor must be strictly positive")
        if market.effective_interval_ms < MIN_TICK_INTERVAL_MS:
            self._warn("Market", f"Tick interval {market.effective_interval_ms}ms may starve order execution")
        if market.price_history_length < MIN_PRICE_HISTORY:
            self._warn("Market", f"price_history_length below {MIN_PRICE_HISTORY} limits SMA-50 accuracy")
        if (self.settings.environment == Environment.PRODUCTION
                and market.mode == SimulationMode.FAST):
            self._warn("Market", "Fast simulation mode is intended for development")

    def _check_risk(self):
        risk = self.settings.risk
        out_of_range = {s: v for s, v in risk.sector_volatility.items() if not 0 <= v <= 100}
        if out_of_range:
            self._error("Risk", f"Sector volatility outside [0, 100]: {out_of_range}")
        if risk.max_sectors < 1:
            self._error("Risk", "max_sectors must be at least 1")

    def _check_logging(self):
        log_settings = self.settings.logging
        for name in ("level", "trading_level", "market_data_level"):
            value = getattr(log_settings, name)
            if value.upper() not in LOG_LEVELS:
                self._error("Logging", f"Invalid {name}: {value}")

        if log_settings.file_enabled:
            parent = Path(self.settings.logs_dir).resolve().parent
            if not parent.exists():
                self._error("File System", f"Parent directory for logs does not exist: {parent}")

    def get_validation_summary(self) -> Dict[str, Any]:
        return {
            "total_checks": len(self.issues),
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "is_valid": not self.errors,
            "error_details": [{"component": i.component, "message": i.message} for i in self.errors],
            "warning_details": [{"component": i.component, "message": i.message} for i in self.warnings],
        }


def validate_startup_configuration(settings: Settings) -> bool:
    return ConfigurationValidator(settings).validate_all()
