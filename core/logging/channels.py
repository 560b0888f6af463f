"""
Log channels for the brokerage simulation.

Each channel can be routed to its own rotating file; records carry their
channel as a bound ``channel`` key.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, NamedTuple


class LogChannel(str, Enum):
    APPLICATION = "application"  # Startup, seeding, configuration
    TRADING = "trading"          # Order execution and portfolio accounting
    MARKET_DATA = "market_data"  # Simulation ticks and quotes
    AUDIT = "audit"              # Completed transactions
    ERROR = "error"              # ERROR and above from every channel


class ChannelFile(NamedTuple):
    filename: str
    level: str
    backups: int


CHANNEL_FILES: Dict[LogChannel, ChannelFile] = {
    LogChannel.APPLICATION: ChannelFile("application.log", "INFO", 10),
    LogChannel.TRADING: ChannelFile("trading.log", "INFO", 20),
    # One record per tick, so the level is usually raised via settings
    LogChannel.MARKET_DATA: ChannelFile("market_data.log", "INFO", 5),
    LogChannel.AUDIT: ChannelFile("audit.log", "INFO", 50),
    LogChannel.ERROR: ChannelFile("error.log", "ERROR", 20),
}

COMPONENT_CHANNELS: Dict[str, LogChannel] = {
    "trading_engine": LogChannel.TRADING,
    "portfolio_manager": LogChannel.TRADING,
    "accounts": LogChannel.TRADING,
    "risk_manager": LogChannel.TRADING,
    "market_simulation": LogChannel.MARKET_DATA,
    "asset_registry": LogChannel.MARKET_DATA,
    "audit": LogChannel.AUDIT,
}


def get_channel_for_component(component: str) -> LogChannel:
    """Unknown components log to the application channel."""
    return COMPONENT_CHANNELS.get(component, LogChannel.APPLICATION)


def channel_log_path(logs_dir: str, channel: LogChannel) -> Path:
    return Path(logs_dir) / CHANNEL_FILES[channel].filename


def describe_channels() -> Dict[str, Any]:
    return {
        "total_channels": len(LogChannel),
        "channels": {
            channel.value: CHANNEL_FILES[channel]._asdict() for channel in LogChannel
        },
    }
