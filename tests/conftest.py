"""
Pytest configuration and shared fixtures for Broker Sim tests.
"""
import random
import threading

import pytest

from app.bootstrap import open_account, seed_default_state
from app.containers import AppContainer
from core.config.settings import LoggingSettings, Settings
from core.trading.models import RiskTolerance
from services.accounts import AccountStore
from services.asset_registry import AssetRegistry
from services.portfolio_manager import PortfolioLedger


@pytest.fixture
def test_settings():
    """Test settings configuration."""
    return Settings(
        environment="testing",
        simulation_seed=42,
        logging=LoggingSettings(console_enabled=False, file_enabled=False),
    )


@pytest.fixture
def container(test_settings):
    """Fully wired container with the default universe and accounts seeded."""
    container = AppContainer()
    container.settings.override(test_settings)
    seed_default_state(
        container.asset_registry(),
        container.account_store(),
        container.portfolio_ledger(),
    )
    return container


@pytest.fixture
def registry(container) -> AssetRegistry:
    return container.asset_registry()


@pytest.fixture
def accounts(container) -> AccountStore:
    return container.account_store()


@pytest.fixture
def ledger(container) -> PortfolioLedger:
    return container.portfolio_ledger()


@pytest.fixture
def journal(container):
    return container.transaction_journal()


@pytest.fixture
def engine(container):
    return container.order_engine()


@pytest.fixture
def clock(container):
    return container.market_clock()


@pytest.fixture
def risk_engine(container):
    return container.risk_engine()


@pytest.fixture
def empty_registry(test_settings):
    """Registry with nothing listed, for isolated tests."""
    return AssetRegistry(test_settings.market, threading.RLock(), random.Random(7))


@pytest.fixture
def funded_account(accounts, ledger):
    """Fresh account with 1,000,000 cash and no holdings."""
    return open_account(accounts, ledger, "whale", "whale", 1_000_000.0,
                        risk_tolerance=RiskTolerance.HIGH)
