# Application DI container
import random
import threading

from dependency_injector import containers, providers

from core.config.settings import Settings
from services.accounts import AccountStore
from services.asset_registry import AssetRegistry
from services.market_simulation import MarketSimulationClock
from services.portfolio_manager import PortfolioLedger
from services.risk_manager import RiskAnalysisEngine
from services.trading_engine import OrderExecutionEngine, TransactionJournal


class AppContainer(containers.DeclarativeContainer):
    """Application dependency injection container"""

    # Configuration
    settings = providers.Singleton(Settings)

    # One lock guards every store; engines hold it for a whole order or tick
    state_lock = providers.Singleton(threading.RLock)

    # Shared seedable randomness
    rng = providers.Singleton(random.Random, settings.provided.simulation_seed)

    # --- Stores ---
    asset_registry = providers.Singleton(
        AssetRegistry,
        settings=settings.provided.market,
        lock=state_lock,
        rng=rng,
    )

    account_store = providers.Singleton(
        AccountStore,
        lock=state_lock,
    )

    portfolio_ledger = providers.Singleton(
        PortfolioLedger,
        registry=asset_registry,
        lock=state_lock,
    )

    transaction_journal = providers.Singleton(
        TransactionJournal,
        lock=state_lock,
        rng=rng,
    )

    # --- Engines ---
    order_engine = providers.Singleton(
        OrderExecutionEngine,
        settings=settings,
        accounts=account_store,
        registry=asset_registry,
        ledger=portfolio_ledger,
        journal=transaction_journal,
        lock=state_lock,
    )

    market_clock = providers.Singleton(
        MarketSimulationClock,
        settings=settings.provided.market,
        registry=asset_registry,
        ledger=portfolio_ledger,
        lock=state_lock,
        rng=rng,
    )

    risk_engine = providers.Singleton(
        RiskAnalysisEngine,
        settings=settings.provided.risk,
        accounts=account_store,
        registry=asset_registry,
        ledger=portfolio_ledger,
        lock=state_lock,
    )

    # Services with an async start/stop lifecycle
    lifespan_services = providers.List(
        market_clock,
    )
