import pytest
from pydantic import ValidationError

from core.config.settings import (
    Environment,
    LoggingSettings,
    MarketSimulationSettings,
    OrderLimitSettings,
    Settings,
    SimulationMode,
    TradingFeeSettings,
)
from core.config.validator import ConfigurationValidator, validate_startup_configuration


def test_defaults(test_settings):
    assert test_settings.fees.buy_fee_rate == 0.001
    assert test_settings.fees.sell_fee_rate == 0.001
    assert test_settings.fees.minimum_fee == 1.0
    assert test_settings.order_limits.max_order_size == 10000
    assert test_settings.order_limits.min_order_size == 1
    assert test_settings.market.mode == SimulationMode.STANDARD
    assert test_settings.risk.sector_volatility["Automotive"] == 70


def test_nested_environment_overrides(monkeypatch):
    monkeypatch.setenv("MARKET__MODE", "fast")
    monkeypatch.setenv("FEES__MINIMUM_FEE", "2.5")
    monkeypatch.setenv("SIMULATION_SEED", "99")

    settings = Settings()
    assert settings.market.mode == SimulationMode.FAST
    assert settings.market.effective_interval_ms == 3000
    assert settings.fees.minimum_fee == 2.5
    assert settings.simulation_seed == 99


def test_field_validators():
    with pytest.raises(ValidationError):
        TradingFeeSettings(buy_fee_rate=-0.1)
    with pytest.raises(ValidationError):
        MarketSimulationSettings(interval_ms=0)
    with pytest.raises(ValidationError):
        OrderLimitSettings(min_order_size=10, max_order_size=5)


def test_default_configuration_is_valid(test_settings):
    assert validate_startup_configuration(test_settings) is True


def test_validator_reports_errors_and_warnings(test_settings):
    settings = test_settings.model_copy(update={
        "fees": TradingFeeSettings(buy_fee_rate=1.5, sell_fee_rate=0.1),
        "market": MarketSimulationSettings(price_floor=0, interval_ms=100, price_history_length=10),
    })

    validator = ConfigurationValidator(settings)
    assert validator.validate_all() is False

    summary = validator.get_validation_summary()
    assert summary["errors"] == 2
    assert summary["warnings"] == 3
    assert {d["component"] for d in summary["error_details"]} == {"Fees", "Market"}


def test_fast_mode_in_production_warns(test_settings):
    settings = test_settings.model_copy(update={
        "environment": Environment.PRODUCTION,
        "market": MarketSimulationSettings(mode=SimulationMode.FAST),
    })

    validator = ConfigurationValidator(settings)
    assert validator.validate_all() is True
    assert validator.get_validation_summary()["warnings"] == 1


def test_log_levels_validated_and_normalised():
    assert LoggingSettings(level="debug", trading_level="warning").level == "DEBUG"
    with pytest.raises(ValidationError):
        LoggingSettings(level="VERBOSE")
    with pytest.raises(ValidationError):
        LoggingSettings(market_data_level="chatty")


def test_validator_reports_unknown_log_level(test_settings):
    # model_copy skips field validation
    settings = test_settings.model_copy(update={
        "logging": test_settings.logging.model_copy(update={"level": "VERBOSE"}),
    })

    validator = ConfigurationValidator(settings)
    assert validator.validate_all() is False
    assert validator.get_validation_summary()["error_details"] == [
        {"component": "Logging", "message": "Invalid level: VERBOSE"},
    ]
