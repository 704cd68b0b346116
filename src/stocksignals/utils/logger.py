"""
Structured logging for stocksignals.

This module provides structlog-based logging with support for both console and
file output, JSON and pretty formatting, and contextual information tracking.

Example Usage:
    ```python
    from stocksignals.utils.logger import setup_logging, get_logger, add_context, LogConfig

    # Setup logging
    config = LogConfig(level="DEBUG", format="pretty", file_path="logs/stocksignals.log")
    setup_logging(config)

    # Get logger instance
    logger = get_logger(__name__)

    logger.info("indicators_computed", bars=250, groups=["sma", "rsi"])

    # Context-aware logging
    with add_context(symbol="AAPL"):
        logger.info("signals_generated", trend="bullish")
    ```
"""

from contextlib import contextmanager
from dataclasses import dataclass
import logging
from pathlib import Path
import sys
from typing import TYPE_CHECKING, Any, Literal

import structlog
from structlog.types import EventDict, Processor

if TYPE_CHECKING:
    from stocksignals.config.settings import LoggingSettings

# Context bound through add_context()
_context_vars: dict[str, Any] = {}

# Handlers attached by setup_logging(), replaced on reconfiguration
_installed_handlers: list[logging.Handler] = []


@dataclass
class LogConfig:
    """Configuration for the logging system.

    Attributes:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format - "json" for production, "pretty" for development
        file_path: Optional path to log file. If None, only logs to console
        include_timestamp: Whether to include timestamps in logs
        include_caller_info: Whether to include caller file/line information
        console_output: Whether to output to console (default: True)
        max_string_length: Maximum length for string values before truncation
        environment: Environment name (dev, staging, prod)
        app_version: Application version string
    """

    level: str = "INFO"
    format: Literal["json", "pretty"] = "pretty"
    file_path: str | None = None
    include_timestamp: bool = True
    include_caller_info: bool = False
    console_output: bool = True
    max_string_length: int = 1000
    environment: str = "dev"
    app_version: str = "0.1.0"

    @classmethod
    def from_settings(cls, settings: "LoggingSettings", **overrides: Any) -> "LogConfig":
        """Build a LogConfig from the LOG_* settings block."""
        values: dict[str, Any] = {
            "level": settings.level,
            "format": settings.format,
            "file_path": settings.file_path,
        }
        values.update(overrides)
        return cls(**values)


def add_app_info(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add application-level information to log entries."""
    event_dict["app"] = "stocksignals"
    event_dict["environment"] = getattr(add_app_info, "environment", "unknown")
    event_dict["version"] = getattr(add_app_info, "version", "unknown")
    return event_dict


def add_bound_context(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add context set through add_context() without overriding explicit keys."""
    for key, value in _context_vars.items():
        if key not in event_dict:
            event_dict[key] = value
    return event_dict


def truncate_strings(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Truncate long string values to prevent log bloat.

    Signal event lists can carry long human-readable messages, so nested
    lists and dicts are walked as well.
    """
    max_length = getattr(truncate_strings, "max_length", 1000)

    def truncate_value(value: Any) -> Any:
        if isinstance(value, str) and len(value) > max_length:
            return f"{value[:max_length]}... [truncated]"
        if isinstance(value, dict):
            return {k: truncate_value(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return type(value)(truncate_value(item) for item in value)
        return value

    return {key: truncate_value(value) for key, value in event_dict.items()}


def _build_processors(config: LogConfig) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        add_app_info,
        add_bound_context,
        truncate_strings,
    ]

    if config.include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if config.include_caller_info:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            )
        )

    processors.append(structlog.processors.StackInfoRenderer())
    processors.append(structlog.processors.format_exc_info)
    return processors


def setup_logging(config: LogConfig) -> None:
    """Setup the logging system with the given configuration.

    Console output is rendered according to ``config.format``. When a file
    path is given, a JSON-formatted file handler is attached to the root
    logger as well.

    Args:
        config: LogConfig instance with logging configuration
    """
    add_app_info.environment = config.environment
    add_app_info.version = config.app_version
    truncate_strings.max_length = config.max_string_length

    level = getattr(logging, config.level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    if config.console_output:
        console_renderer: Processor = (
            structlog.processors.JSONRenderer()
            if config.format == "json"
            else structlog.dev.ConsoleRenderer(colors=False)
        )
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    console_renderer,
                ],
                foreign_pre_chain=_build_processors(config),
            )
        )
        root_logger.addHandler(console_handler)
        _installed_handlers.append(console_handler)

    if config.file_path:
        file_path = Path(config.file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(file_path)
        file_handler.setLevel(level)
        # File output is always JSON regardless of the console format
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.processors.JSONRenderer(),
                ],
                foreign_pre_chain=_build_processors(config),
            )
        )
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    structlog.configure(
        processors=[
            *_build_processors(config),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance for the given name.

    Args:
        name: Logger name, typically __name__ of the calling module

    Returns:
        Configured structlog BoundLogger instance
    """
    return structlog.get_logger(name)


@contextmanager
def add_context(**kwargs: Any):
    """Context manager to add contextual information to all log entries.

    Any key-value pairs provided will be automatically added to all log entries
    made within the context. The previous context is restored on exit.

    Example:
        ```python
        with add_context(symbol="MSFT"):
            logger.info("signals_generated")  # includes symbol
        ```
    """
    previous_context = _context_vars.copy()
    _context_vars.update(kwargs)

    try:
        yield
    finally:
        _context_vars.clear()
        _context_vars.update(previous_context)


def set_log_level(level: str) -> None:
    """Change the logging level at runtime, including attached handlers."""
    numeric_level = getattr(logging, level.upper())
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers:
        handler.setLevel(numeric_level)


def clear_context() -> None:
    """Clear all contextual variables."""
    _context_vars.clear()
