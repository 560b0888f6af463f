# Structured exception hierarchy for the brokerage simulation

from typing import Dict, Any, Optional
from datetime import datetime, timezone


class BrokerSimException(Exception):
    """Base exception for all Broker Sim specific errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)


class PermanentError(BrokerSimException):
    """Base class for errors that are terminal for the operation that raised them"""
    pass


# Lookup Errors
class AccountNotFoundError(PermanentError):
    """Account lookup failures"""

    def __init__(self, account_id: str, **kwargs):
        super().__init__(f"Account not found: {account_id}", **kwargs)
        self.account_id = account_id


class AccountExistsError(PermanentError):
    """Creating an account under an id already in use"""

    def __init__(self, account_id: str, **kwargs):
        super().__init__(f"Account already exists: {account_id}", **kwargs)
        self.account_id = account_id


class AssetNotFoundError(PermanentError):
    """Asset lookup failures"""

    def __init__(self, symbol: str, **kwargs):
        super().__init__(f"Asset not found: {symbol}", **kwargs)
        self.symbol = symbol


class PortfolioNotFoundError(PermanentError):
    """Portfolio lookup failures"""

    def __init__(self, account_id: str, **kwargs):
        super().__init__(f"Portfolio not found for account: {account_id}", **kwargs)
        self.account_id = account_id


# Order Validation Errors
class InsufficientFundsError(PermanentError):
    """Insufficient funds for trade execution"""

    def __init__(self, account_id: str, required_amount: float, available_amount: float,
                 **kwargs):
        super().__init__(
            f"Insufficient funds: required {required_amount:.2f}, available {available_amount:.2f}",
            **kwargs
        )
        self.required_amount = required_amount
        self.available_amount = available_amount
        self.account_id = account_id


class InsufficientHoldingsError(PermanentError):
    """Selling more units than the account holds"""

    def __init__(self, account_id: str, symbol: str, requested_quantity: int,
                 held_quantity: int, **kwargs):
        super().__init__(
            f"Insufficient holdings of {symbol}: requested {requested_quantity}, held {held_quantity}",
            **kwargs
        )
        self.account_id = account_id
        self.symbol = symbol
        self.requested_quantity = requested_quantity
        self.held_quantity = held_quantity


class InvalidAmountError(PermanentError):
    """Negative cash amounts or non-positive quantities"""

    def __init__(self, field: str, value: Any, **kwargs):
        super().__init__(f"Invalid {field}: {value}", **kwargs)
        self.field = field
        self.value = value


class UnsupportedOrderKindError(PermanentError):
    """Order kind outside buy/sell"""

    def __init__(self, kind: Any, **kwargs):
        super().__init__(f"Unsupported order kind: {kind}", **kwargs)
        self.kind = kind


class UnsupportedMovementError(PermanentError):
    """Price movement outside the known simulation strategies"""

    def __init__(self, movement: Any, **kwargs):
        super().__init__(f"Unsupported price movement: {movement}", **kwargs)
        self.movement = movement


def create_error_context(error: Exception, operation: str,
                         additional_context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Create structured error context for logging

    Args:
        error: The exception that occurred
        operation: The operation that failed
        additional_context: Additional context information

    Returns:
        Structured error context dictionary
    """
    context = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        "operation": operation,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    if isinstance(error, BrokerSimException):
        if error.details:
            context["error_details"] = error.details

        for attr in ("account_id", "symbol"):
            value = getattr(error, attr, None)
            if value is not None:
                context[attr] = value

    if additional_context:
        context.update(additional_context)

    return context
