# Structured logging with multi-channel support
from typing import Any, Dict, Optional

import structlog

from core.config.settings import Settings
from .channels import LogChannel
from . import manager


def configure_logging(settings: Settings) -> None:
    """Configure the logging system once per process."""
    manager.configure(settings)


def reset_logging() -> None:
    manager.reset()


def get_logger(name: str, component: Optional[str] = None) -> structlog.BoundLogger:
    """Get a structured logger, routed by component to its channel."""
    return manager.component_logger(name, component)


def get_channel_logger(name: str, channel: LogChannel) -> structlog.BoundLogger:
    return manager.channel_logger(name, channel)


def get_statistics() -> Dict[str, Any]:
    """Get logging system statistics."""
    return manager.statistics()


def get_trading_logger_safe(name: str) -> structlog.BoundLogger:
    """Logger on the trading channel."""
    return get_channel_logger(name, LogChannel.TRADING)


def get_market_data_logger_safe(name: str) -> structlog.BoundLogger:
    return get_channel_logger(name, LogChannel.MARKET_DATA)


def get_audit_logger_safe(name: str) -> structlog.BoundLogger:
    return get_channel_logger(name, LogChannel.AUDIT)


def get_error_logger_safe(name: str) -> structlog.BoundLogger:
    """Logger on the error channel; its file also collects ERROR records from every channel."""
    return get_channel_logger(name, LogChannel.ERROR)


__all__ = [
    "LogChannel",
    "configure_logging",
    "reset_logging",
    "get_logger",
    "get_channel_logger",
    "get_statistics",
    "get_trading_logger_safe",
    "get_market_data_logger_safe",
    "get_audit_logger_safe",
    "get_error_logger_safe",
]
