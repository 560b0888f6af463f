"""
Explicit seeding of the in-memory brokerage state.
"""

from typing import Dict, List, Optional

from core.logging import get_logger
from core.trading.models import Account, RiskTolerance
from services.accounts import AccountStore
from services.asset_registry import AssetCSVLoader, AssetRegistry
from services.portfolio_manager import PortfolioLedger

logger = get_logger(__name__, component="application")

DEFAULT_ACCOUNTS: List[Dict] = [
    {
        "account_id": "demo_user",
        "username": "demo_user",
        "email": "demo@example.com",
        "cash_balance": 10000.0,
        "risk_tolerance": RiskTolerance.MEDIUM,
    },
    {
        "account_id": "admin_user",
        "username": "admin",
        "email": "admin@example.com",
        "cash_balance": 50000.0,
        "risk_tolerance": RiskTolerance.HIGH,
    },
    {
        "account_id": "trader_user",
        "username": "trader",
        "email": "trader@example.com",
        "cash_balance": 25000.0,
        "risk_tolerance": RiskTolerance.LOW,
    },
]


def open_account(accounts: AccountStore, ledger: PortfolioLedger, account_id: str,
                 username: str, cash_balance: float,
                 risk_tolerance: RiskTolerance = RiskTolerance.MEDIUM,
                 email: Optional[str] = None) -> Account:
    """Create an account together with its (empty) portfolio."""
    account = accounts.create(account_id, username, cash_balance,
                              risk_tolerance=risk_tolerance, email=email)
    ledger.open_portfolio(account_id)
    return account


def seed_default_state(registry: AssetRegistry, accounts: AccountStore,
                       ledger: PortfolioLedger,
                       loader: Optional[AssetCSVLoader] = None) -> Dict[str, int]:
    """List the default asset universe and open the default accounts."""
    asset_count = registry.load_from_csv(loader)
    for account in DEFAULT_ACCOUNTS:
        open_account(accounts, ledger, **account)

    logger.info("Default state seeded", assets=asset_count, accounts=len(DEFAULT_ACCOUNTS))
    return {"assets": asset_count, "accounts": len(DEFAULT_ACCOUNTS)}
