"""
Configuration management for blobsigner.

Handles loading, validation, and access to signer settings.
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from enum import Enum

import yaml
from pydantic import BaseModel, Field, field_validator, ValidationError, ConfigDict

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_SECONDS = 15 * 60


class LogLevel(str, Enum):
    """Valid log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: LogLevel = LogLevel.INFO
    format: str = "json"
    file: Optional[str] = None
    rotation_size: str = "10MB"
    rotation_count: int = 5
    module_levels: Optional[Dict[str, str]] = Field(
        default=None,
        description="Per-module log levels, e.g., {'blobsigner.blob.signer': 'DEBUG'}"
    )

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Only json and text formatters exist."""
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    model_config = ConfigDict(use_enum_values=True)


class SignerConfig(BaseModel):
    """Main blobsigner configuration schema."""
    
    account_name: str = Field(description="Storage account name")
    
    account_key: str = Field(description="Base64-encoded storage account key")
    
    default_ttl_seconds: int = Field(
        default=DEFAULT_EXPIRY_SECONDS,
        ge=0,
        description="Signature lifetime used when a call gives no TTL"
    )
    
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    
    @field_validator("account_name")
    @classmethod
    def validate_account_name(cls, v: str) -> str:
        """Storage account names are 3-24 lowercase letters and digits."""
        if not 3 <= len(v) <= 24:
            raise ValueError("Account name must be 3-24 characters")
        if not (v.isascii() and v.isalnum() and v.lower() == v):
            raise ValueError("Account name must contain only lowercase letters and numbers")
        return v
    
    @field_validator("account_key")
    @classmethod
    def validate_account_key(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Account key cannot be empty")
        return v.strip()
    
    model_config = ConfigDict(use_enum_values=True)


class ConfigManager:
    """
    Manages blobsigner configuration loading and validation.
    
    Configuration precedence (highest to lowest):
    1. CLI arguments
    2. Environment variables (BLOBSIGNER_*)
    3. Configuration file (YAML/JSON)
    4. Defaults
    """
    
    def __init__(self):
        self._config: Optional[SignerConfig] = None
        self._config_file: Optional[Path] = None
    
    def load(
        self,
        config_file: Optional[str] = None,
        cli_overrides: Optional[Dict[str, Any]] = None
    ) -> SignerConfig:
        """
        Load and validate configuration from multiple sources.
        
        Args:
            config_file: Path to configuration file (YAML or JSON)
            cli_overrides: Dictionary of CLI argument overrides
        
        Returns:
            Validated SignerConfig instance
        
        Raises:
            ValidationError: If configuration is invalid
            FileNotFoundError: If specified config file doesn't exist
        """
        logger.info("Loading blobsigner configuration")
        
        config_dict: Dict[str, Any] = {}
        
        if config_file:
            config_dict = self._load_from_file(config_file)
            self._config_file = Path(config_file)
            logger.info(f"Loaded configuration from file: {config_file}")
        
        env_config = self._load_from_env()
        config_dict = self._merge_configs(config_dict, env_config)
        if env_config:
            logger.info(f"Applied {len(env_config)} environment variable overrides")
        
        if cli_overrides:
            config_dict = self._merge_configs(config_dict, cli_overrides)
            logger.info(f"Applied {len(cli_overrides)} CLI argument overrides")
        
        try:
            self._config = SignerConfig(**config_dict)
            logger.info("Configuration validated successfully")
            self._log_configuration()
            return self._config
        except ValidationError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise
    
    def _load_from_file(self, file_path: str) -> Dict[str, Any]:
        """Load configuration from YAML or JSON file."""
        path = Path(file_path)
        
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")
        
        with open(path, 'r') as f:
            if path.suffix in ['.yaml', '.yml']:
                return yaml.safe_load(f) or {}
            elif path.suffix == '.json':
                return json.load(f)
            else:
                raise ValueError(f"Unsupported config file format: {path.suffix}")
    
    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}
        
        if account_name := os.getenv("BLOBSIGNER_ACCOUNT_NAME"):
            config["account_name"] = account_name
        if account_key := os.getenv("BLOBSIGNER_ACCOUNT_KEY"):
            config["account_key"] = account_key
        if default_ttl := os.getenv("BLOBSIGNER_DEFAULT_TTL"):
            config["default_ttl_seconds"] = int(default_ttl)
        
        if log_level := os.getenv("BLOBSIGNER_LOG_LEVEL"):
            config.setdefault("logging", {})["level"] = log_level.upper()
        if log_format := os.getenv("BLOBSIGNER_LOG_FORMAT"):
            config.setdefault("logging", {})["format"] = log_format.lower()
        
        return config
    
    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two configuration dictionaries."""
        result = base.copy()
        
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value
        
        return result
    
    def _log_configuration(self) -> None:
        """Log the loaded configuration (with the account key redacted)."""
        if not self._config:
            return
        
        config_dict = self._config.model_dump()
        config_dict["account_key"] = "***REDACTED***"
        
        logger.info(f"Active configuration: {json.dumps(config_dict, indent=2)}")
    
    def get_config(self) -> SignerConfig:
        """
        Get the loaded configuration.
        
        Returns:
            SignerConfig instance
        
        Raises:
            RuntimeError: If configuration hasn't been loaded
        """
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call load() first.")
        return self._config
    
    def reload(self) -> SignerConfig:
        """
        Reload configuration from the same sources.
        
        Returns:
            Reloaded SignerConfig instance
        """
        config_file = str(self._config_file) if self._config_file else None
        return self.load(config_file=config_file)
