import threading

import pytest

from app.bootstrap import open_account
from core.trading.models import OrderKind, RiskTolerance
from core.utils.exceptions import (
    AccountExistsError,
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
)
from services.accounts import AccountStore


@pytest.fixture
def store():
    store = AccountStore(threading.RLock())
    store.create("acct", "alice", 100.0, email="alice@example.com")
    return store


def test_default_accounts_seeded(accounts):
    assert accounts.ids() == ["demo_user", "admin_user", "trader_user"]
    demo = accounts.get("demo_user")
    assert demo.cash_balance == 10000.0
    assert demo.risk_tolerance == RiskTolerance.MEDIUM
    assert accounts.get("admin_user").risk_tolerance == RiskTolerance.HIGH
    assert accounts.get("trader_user").risk_tolerance == RiskTolerance.LOW


def test_debit_and_credit(store):
    assert store.debit("acct", 40.0) == 60.0
    assert store.credit("acct", 15.5) == 75.5
    assert store.get("acct").cash_balance == 75.5


def test_debit_entire_balance(store):
    assert store.debit("acct", 100.0) == 0.0


def test_debit_more_than_balance_leaves_balance(store):
    with pytest.raises(InsufficientFundsError) as exc_info:
        store.debit("acct", 100.01)

    assert exc_info.value.required_amount == 100.01
    assert exc_info.value.available_amount == 100.0
    assert store.get("acct").cash_balance == 100.0


@pytest.mark.parametrize("method", ["debit", "credit"])
def test_negative_amounts_rejected(store, method):
    with pytest.raises(InvalidAmountError):
        getattr(store, method)("acct", -1.0)
    assert store.get("acct").cash_balance == 100.0


def test_unknown_account(store):
    with pytest.raises(AccountNotFoundError):
        store.get("ghost")
    with pytest.raises(AccountNotFoundError):
        store.credit("ghost", 1.0)


def test_update_risk_tolerance(store):
    updated = store.update_risk_tolerance("acct", "high")
    assert updated.risk_tolerance == RiskTolerance.HIGH
    assert store.get("acct").risk_tolerance == RiskTolerance.HIGH


def test_create_rejects_negative_balance(store):
    with pytest.raises(InvalidAmountError):
        store.create("broke", "bob", -5.0)


def test_create_rejects_duplicate_id(store):
    store.debit("acct", 30.0)

    with pytest.raises(AccountExistsError) as exc_info:
        store.create("acct", "alice", 500.0)

    assert exc_info.value.account_id == "acct"
    assert store.get("acct").cash_balance == 70.0


def test_reopening_seeded_account_keeps_cash_and_holdings(engine, accounts, ledger):
    engine.execute(OrderKind.BUY, "demo_user", "AAPL", 10)
    cash = accounts.get("demo_user").cash_balance

    with pytest.raises(AccountExistsError):
        open_account(accounts, ledger, "demo_user", "demo_user", 10000.0)

    assert accounts.get("demo_user").cash_balance == cash
    assert ledger.held_quantity("demo_user", "AAPL") == 10
