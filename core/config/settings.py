# Complete settings for the brokerage simulation
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field, field_validator
from enum import Enum
from typing import Dict, Optional
from pathlib import Path


class Environment(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class SimulationMode(str, Enum):
    STANDARD = "standard"
    FAST = "fast"


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Tick interval (ms) and random-walk volatility per simulation mode
MODE_DEFAULTS: Dict[SimulationMode, Dict[str, float]] = {
    SimulationMode.STANDARD: {"interval_ms": 5000, "volatility_factor": 0.02},
    SimulationMode.FAST: {"interval_ms": 3000, "volatility_factor": 0.15},
}


class TradingFeeSettings(BaseModel):
    buy_fee_rate: float = 0.001  # 0.1%
    sell_fee_rate: float = 0.001
    minimum_fee: float = 1.0

    @field_validator("buy_fee_rate", "sell_fee_rate", "minimum_fee")
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("Fee settings must be non-negative")
        return v


class OrderLimitSettings(BaseModel):
    """Order-size bounds. Enforced by the request layer, not the engine."""
    min_order_size: int = 1
    max_order_size: int = 10000
    daily_trade_limit: int = 100

    @field_validator("max_order_size")
    @classmethod
    def validate_bounds(cls, v, info):
        min_size = info.data.get("min_order_size", 1)
        if v < min_size:
            raise ValueError("max_order_size must be >= min_order_size")
        return v


class MarketSimulationSettings(BaseModel):
    mode: SimulationMode = SimulationMode.STANDARD
    # Explicit overrides; when unset the mode defaults apply
    interval_ms: Optional[int] = None
    volatility_factor: Optional[float] = None
    default_movement: str = "random"

    # Market impact: price * (quantity / impact_divisor) * impact_coefficient
    impact_divisor: float = 1_000_000
    impact_coefficient: float = 0.001

    price_floor: float = 0.01
    max_volume_increment: int = 10000
    initial_volume_max: int = 1_000_000
    price_history_length: int = 100

    @field_validator("interval_ms")
    @classmethod
    def validate_interval(cls, v):
        if v is not None and v <= 0:
            raise ValueError("interval_ms must be positive")
        return v

    @field_validator("volatility_factor")
    @classmethod
    def validate_volatility(cls, v):
        if v is not None and v < 0:
            raise ValueError("volatility_factor must be non-negative")
        return v

    @property
    def effective_interval_ms(self) -> int:
        if self.interval_ms is not None:
            return self.interval_ms
        return int(MODE_DEFAULTS[self.mode]["interval_ms"])

    @property
    def effective_volatility_factor(self) -> float:
        if self.volatility_factor is not None:
            return self.volatility_factor
        return MODE_DEFAULTS[self.mode]["volatility_factor"]


class RiskSettings(BaseModel):
    sector_volatility: Dict[str, float] = Field(
        default_factory=lambda: {
            "Technology": 65,
            "Healthcare": 45,
            "Financial": 55,
            "Automotive": 70,
            "E-commerce": 60,
        }
    )
    default_volatility: float = 50
    max_sectors: int = 5
    concentration_threshold: float = 0.3
    max_recommendations: int = 5


class LoggingSettings(BaseModel):
    level: str = "INFO"
    json_format: bool = True

    # Console logging
    console_enabled: bool = True
    console_json_format: bool = False  # Plain text for console by default

    # File logging
    file_enabled: bool = False
    logs_dir: str = "logs"
    file_max_size: str = "50MB"

    # Channel-specific levels
    trading_level: str = "INFO"
    market_data_level: str = "INFO"

    @field_validator("level", "trading_level", "market_data_level")
    @classmethod
    def validate_level(cls, v):
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of {LOG_LEVELS}")
        return level


class Settings(BaseSettings):
    """Main application settings, loaded from environment variables"""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore"
    )

    app_name: str = "Broker Sim"
    version: str = "1.0.0"
    environment: Environment = Environment.DEVELOPMENT

    # Seeds the shared random generator; None draws entropy from the OS
    simulation_seed: Optional[int] = None

    fees: TradingFeeSettings = TradingFeeSettings()
    order_limits: OrderLimitSettings = OrderLimitSettings()
    market: MarketSimulationSettings = MarketSimulationSettings()
    risk: RiskSettings = RiskSettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def logs_dir(self) -> str:
        """Get logs directory"""
        return self.logging.logs_dir

    @property
    def base_dir(self) -> str:
        """Get base application directory dynamically"""
        # Go up 2 levels from core/config/settings.py to reach project root
        return str(Path(__file__).resolve().parents[2])


# No global settings instance - use dependency injection instead
