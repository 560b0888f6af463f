import pytest

from core.utils.exceptions import AssetNotFoundError
from services.risk_manager import TechnicalAction
from services.risk_manager.technical import relative_strength_index, simple_moving_average


def _walk(registry, symbol, steps):
    price = registry.get(symbol).price
    for step in steps:
        price += step
        registry.apply_price_change(symbol, price)


def test_fresh_asset_holds(risk_engine):
    signal = risk_engine.analyze_technical("AAPL")

    assert signal.signal == TechnicalAction.HOLD
    assert signal.sma_20 == signal.sma_50 == signal.current_price == 150.0
    assert signal.rsi == 50.0
    assert signal.samples == 1


def test_choppy_uptrend_is_buy(risk_engine, registry):
    # net +0.5 per step, last step up
    _walk(registry, "JNJ", [-2, 3] * 30)

    signal = risk_engine.analyze_technical("JNJ")
    assert signal.current_price == pytest.approx(190.0)
    assert signal.sma_20 == pytest.approx(184.0)
    assert signal.sma_50 == pytest.approx(176.5)
    assert signal.rsi == pytest.approx(60.0)
    assert signal.signal == TechnicalAction.BUY


def test_choppy_downtrend_is_sell(risk_engine, registry):
    _walk(registry, "JNJ", [2, -3] * 30)

    signal = risk_engine.analyze_technical("JNJ")
    assert signal.rsi == pytest.approx(40.0)
    assert signal.signal == TechnicalAction.SELL


def test_straight_rally_is_overbought(risk_engine, registry):
    _walk(registry, "JPM", [1] * 60)

    signal = risk_engine.analyze_technical("JPM")
    assert signal.rsi == 100.0
    assert signal.signal == TechnicalAction.HOLD


def test_unknown_symbol(risk_engine):
    with pytest.raises(AssetNotFoundError):
        risk_engine.analyze_technical("NOPE")


def test_simple_moving_average_uses_available_prices():
    assert simple_moving_average([1.0, 2.0, 3.0], 20) == 2.0
    assert simple_moving_average([1.0, 2.0, 3.0, 4.0], 2) == 3.5


def test_rsi_needs_full_period():
    assert relative_strength_index([1.0, 2.0, 3.0], period=14) == 50.0
