import asyncio
import random

import pytest

from core.config.settings import MarketSimulationSettings, SimulationMode
from core.trading.models import SimulationState
from core.utils.exceptions import UnsupportedMovementError
from services.market_simulation import PriceMovement, next_price


@pytest.mark.parametrize("movement, low, high", [
    (PriceMovement.BULL, 1.05, 1.15),
    (PriceMovement.BEAR, 0.85, 0.95),
    (PriceMovement.CRASH, 0.65, 0.85),
    (PriceMovement.RECOVERY, 1.10, 1.25),
])
def test_event_bands(movement, low, high):
    rng = random.Random(1)
    for _ in range(200):
        price = next_price(movement, 100.0, rng, 0.02)
        assert 100.0 * low <= price <= 100.0 * high


def test_random_walk_bounded_by_volatility():
    rng = random.Random(2)
    for _ in range(200):
        assert 98.0 <= next_price(PriceMovement.RANDOM, 100.0, rng, 0.02) <= 102.0
        assert 85.0 <= next_price("random", 100.0, rng, 0.15) <= 115.0


def test_unknown_movement():
    with pytest.raises(UnsupportedMovementError):
        next_price("sideways", 100.0, random.Random(), 0.02)


def test_mode_defaults():
    assert MarketSimulationSettings().effective_interval_ms == 5000
    assert MarketSimulationSettings().effective_volatility_factor == 0.02
    fast = MarketSimulationSettings(mode=SimulationMode.FAST)
    assert fast.effective_interval_ms == 3000
    assert fast.effective_volatility_factor == 0.15
    assert MarketSimulationSettings(interval_ms=10).effective_interval_ms == 10


def test_tick_moves_every_quote_within_two_percent(clock, registry):
    before = {q.symbol: q for q in registry.all()}

    assert clock.tick() == len(before)

    for quote in registry.all():
        prior = before[quote.symbol]
        assert abs(quote.price - prior.price) <= prior.price * 0.02 + 1e-9
        assert quote.volume >= prior.volume
        assert quote.last_change == pytest.approx(quote.price - prior.price)
    assert clock.tick_count == 1
    assert clock.last_tick_at is not None


def test_crash_event_drops_prices(clock, registry):
    quotes = clock.run_event("crash")

    aapl = next(q for q in quotes if q.symbol == "AAPL")
    assert 150.0 * 0.65 <= aapl.price <= 150.0 * 0.85
    assert aapl.last_change_percent < 0


def test_event_leaves_clock_state_alone(clock):
    status = clock.status()
    clock.run_event(PriceMovement.BULL)

    after = clock.status()
    assert after.state == SimulationState.STOPPED
    assert after.tick_count == status.tick_count == 0
    assert after.movement == "random"


def test_random_walk_is_not_an_event(clock, registry):
    before = [q.price for q in registry.all()]

    with pytest.raises(UnsupportedMovementError):
        clock.run_event(PriceMovement.RANDOM)

    assert [q.price for q in registry.all()] == before


def test_events_never_take_price_below_floor(clock, registry):
    for _ in range(60):
        clock.run_event("crash")
    assert all(q.price >= 0.01 for q in registry.all())


def test_tick_revalues_portfolios(clock, engine, ledger, registry):
    engine.execute("buy", "demo_user", "TSLA", 2)
    clock.run_event("bull")

    assert ledger.get("demo_user").total_value == pytest.approx(2 * registry.get("TSLA").price)


def test_tick_skips_failing_asset(clock, registry, monkeypatch):
    original = registry.apply_price_change

    def flaky(symbol, new_price, volume_increment=0):
        if symbol == "TSLA":
            raise ValueError("feed glitch")
        return original(symbol, new_price, volume_increment)

    monkeypatch.setattr(registry, "apply_price_change", flaky)

    assert clock.tick() == len(registry.symbols()) - 1
    assert registry.get("TSLA").price == 800.0


def test_set_movement(clock):
    clock.set_movement("bear")
    assert clock.status().movement == "bear"
    with pytest.raises(UnsupportedMovementError):
        clock.set_movement("moon")


@pytest.mark.asyncio
async def test_start_and_stop(clock):
    clock.interval_ms = 10

    await clock.start()
    assert clock.status().is_running
    task = clock._task

    # Second start is a no-op
    await clock.start()
    assert clock._task is task

    await asyncio.sleep(0.1)
    await clock.stop()

    status = clock.status()
    assert status.state == SimulationState.STOPPED
    assert status.tick_count >= 1
    assert clock._task is None


@pytest.mark.asyncio
async def test_stop_when_stopped_is_noop(clock):
    await clock.stop()
    assert not clock.is_running


@pytest.mark.asyncio
async def test_stop_prevents_further_ticks(clock):
    clock.interval_ms = 10
    await clock.start()
    await asyncio.sleep(0.05)
    await clock.stop()

    ticks = clock.tick_count
    await asyncio.sleep(0.05)
    assert clock.tick_count == ticks
