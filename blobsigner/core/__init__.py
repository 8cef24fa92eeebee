"""Core module initialization."""

from .config_manager import ConfigManager, SignerConfig, LoggingConfig, DEFAULT_EXPIRY_SECONDS
from .date_service import DateService, SystemTimestampProvider
from .logging_config import setup_logging, apply_logging_config, log_with_context

__all__ = [
    "ConfigManager",
    "SignerConfig",
    "LoggingConfig",
    "DEFAULT_EXPIRY_SECONDS",
    "DateService",
    "SystemTimestampProvider",
    "setup_logging",
    "apply_logging_config",
    "log_with_context",
]
