import random
import re

from core.utils.exceptions import (
    AccountNotFoundError,
    BrokerSimException,
    InsufficientFundsError,
    PermanentError,
    create_error_context,
)
from core.utils.ids import generate_transaction_id


def test_domain_errors_are_permanent():
    error = InsufficientFundsError("acct", required_amount=10.0, available_amount=2.5)

    assert isinstance(error, PermanentError)
    assert isinstance(error, BrokerSimException)
    assert error.message == "Insufficient funds: required 10.00, available 2.50"
    assert error.timestamp is not None


def test_error_context_carries_identifiers():
    context = create_error_context(AccountNotFoundError("acct"), "execute_order", {"symbol": "AAPL"})

    assert context["error_type"] == "AccountNotFoundError"
    assert context["operation"] == "execute_order"
    assert context["account_id"] == "acct"
    assert context["symbol"] == "AAPL"


def test_error_context_for_builtin_errors():
    context = create_error_context(ValueError("boom"), "tick")
    assert context["error_message"] == "boom"
    assert "account_id" not in context


def test_transaction_id_format():
    txn_id = generate_transaction_id(random.Random(1), now_ms=1700000000000)
    assert re.match(r"^txn_1700000000000_[0-9a-z]{9}$", txn_id)


def test_transaction_ids_reproducible_with_seed():
    first = generate_transaction_id(random.Random(5), now_ms=1)
    second = generate_transaction_id(random.Random(5), now_ms=1)
    assert first == second
