# structlog on top of stdlib logging, with one optional file per channel
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog

from core.config.settings import Settings
from .channels import (
    CHANNEL_FILES,
    LogChannel,
    channel_log_path,
    describe_channels,
    get_channel_for_component,
)

_manager: Optional["LoggingManager"] = None

_SIZE_UNITS = {"K": 1024, "M": 1024 ** 2, "G": 1024 ** 3}


def parse_size(size: str) -> int:
    """'50MB' -> bytes."""
    size = size.upper().rstrip("B")
    unit = _SIZE_UNITS.get(size[-1:]) if size else None
    if unit:
        return int(float(size[:-1]) * unit)
    return int(size)


def _proxy(name: str, channel: Optional[LogChannel] = None,
           component: Optional[str] = None) -> structlog.BoundLogger:
    # Initial values keep the proxy lazy, so module-level loggers pick up
    # the configuration applied later by configure_logging()
    context: Dict[str, str] = {}
    if component:
        context["component"] = component
        channel = channel or get_channel_for_component(component)
    if channel:
        context["channel"] = channel.value
    return structlog.get_logger(name, **context)


class ChannelFilter(logging.Filter):
    """Passes only records bound to one channel."""

    def __init__(self, channel: LogChannel):
        super().__init__()
        self.channel = channel.value

    def filter(self, record: logging.LogRecord) -> bool:
        event = record.msg if isinstance(record.msg, dict) else {}
        return event.get("channel") == self.channel


class LoggingManager:
    """Installs handlers on the root logger and configures structlog."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.handlers: List[logging.Handler] = []
        self.channel_handlers: Dict[LogChannel, logging.Handler] = {}
        self.loggers: Dict[str, structlog.BoundLogger] = {}

        root = logging.getLogger()
        root.setLevel(self._level(settings.logging.level))

        if settings.logging.console_enabled:
            self._attach(root, self._console_handler())

        if settings.logging.file_enabled:
            Path(settings.logs_dir).mkdir(parents=True, exist_ok=True)
            for channel in LogChannel:
                handler = self._channel_handler(channel)
                self.channel_handlers[channel] = handler
                self._attach(root, handler)

        self._configure_structlog()

    @staticmethod
    def _level(name: str) -> int:
        # Unknown names fall back to INFO; startup validation rejects them
        level = logging.getLevelName(name.upper())
        return level if isinstance(level, int) else logging.INFO

    def _attach(self, root: logging.Logger, handler: logging.Handler) -> None:
        root.addHandler(handler)
        self.handlers.append(handler)

    def _formatter(self, as_json: bool) -> logging.Formatter:
        renderer = structlog.processors.JSONRenderer() if as_json else structlog.dev.ConsoleRenderer()
        return structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            # Records from plain stdlib loggers
            foreign_pre_chain=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso"),
            ],
        )

    def _console_handler(self) -> logging.Handler:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(self._level(self.settings.logging.level))
        handler.setFormatter(self._formatter(self.settings.logging.console_json_format))
        return handler

    def _channel_handler(self, channel: LogChannel) -> logging.Handler:
        spec = CHANNEL_FILES[channel]
        level = {
            LogChannel.TRADING: self.settings.logging.trading_level,
            LogChannel.MARKET_DATA: self.settings.logging.market_data_level,
        }.get(channel, spec.level)

        handler = logging.handlers.RotatingFileHandler(
            filename=channel_log_path(self.settings.logs_dir, channel),
            maxBytes=parse_size(self.settings.logging.file_max_size),
            backupCount=spec.backups,
            encoding="utf-8",
        )
        handler.setLevel(self._level(level))
        handler.setFormatter(self._formatter(self.settings.logging.json_format))
        if channel != LogChannel.ERROR:
            handler.addFilter(ChannelFilter(channel))
        return handler

    def _configure_structlog(self) -> None:
        app = {
            "env": self.settings.environment.value,
            "service": self.settings.app_name,
            "version": self.settings.version,
        }

        def add_app_context(logger, method_name, event_dict):
            for key, value in app.items():
                event_dict.setdefault(key, value)
            return event_dict

        structlog.configure(
            processors=[
                add_app_context,
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),
                # Rendering happens in the handlers' ProcessorFormatter
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def get_logger(self, name: str, component: Optional[str] = None) -> structlog.BoundLogger:
        key = f"{name}:{component}"
        if key not in self.loggers:
            self.loggers[key] = _proxy(name, component=component)
        return self.loggers[key]

    def close(self) -> None:
        root = logging.getLogger()
        for handler in self.handlers:
            root.removeHandler(handler)
            handler.close()
        self.handlers.clear()
        self.channel_handlers.clear()

    def statistics(self) -> Dict[str, Any]:
        stats = {
            "total_loggers": len(self.loggers),
            "file_logging_enabled": self.settings.logging.file_enabled,
            "console_logging_enabled": self.settings.logging.console_enabled,
            "json_format": self.settings.logging.json_format,
            "logs_directory": self.settings.logs_dir,
            "attached_channels": [channel.value for channel in self.channel_handlers],
        }
        stats.update(describe_channels())
        return stats


def configure(settings: Settings) -> None:
    """Set up logging once per process; later calls are no-ops."""
    global _manager
    if _manager is None:
        _manager = LoggingManager(settings)


def reset() -> None:
    """Detach installed handlers so the next configure call starts fresh."""
    global _manager
    if _manager is not None:
        _manager.close()
    _manager = None
    structlog.reset_defaults()


def component_logger(name: str, component: Optional[str] = None) -> structlog.BoundLogger:
    if _manager is None:
        return _proxy(name, component=component)
    return _manager.get_logger(name, component)


def channel_logger(name: str, channel: LogChannel) -> structlog.BoundLogger:
    return _proxy(name, channel=channel)


def statistics() -> Dict[str, Any]:
    if _manager is None:
        return {"error": "Logging not configured"}
    return _manager.statistics()
