"""
Configuration loader from environment variables and .env files.

Example .env file:
    NETWORK_KIT_REQUEST_TIMEOUT=15
    NETWORK_KIT_VERIFY_SSL=true
    NETWORK_KIT_LOG_ENABLED=true
    NETWORK_KIT_LOG_LEVEL=DEBUG
    NETWORK_KIT_LOG_FORMAT=json
"""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import NetworkConfig, DEFAULT_REQUEST_TIMEOUT
from .logging.config import LoggingConfig


class NetworkSettings(BaseSettings):
    """
    Settings read from NETWORK_KIT_* variables, then .env, then defaults.

    Usage:
        >>> settings = NetworkSettings()
        >>> settings.request_timeout
        30
    """

    model_config = SettingsConfigDict(
        env_prefix='NETWORK_KIT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    request_timeout: int = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    max_workers: int = Field(default=4, ge=1)
    verify_ssl: bool = Field(default=True)

    log_enabled: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text"] = Field(default="text")
    log_enable_console: bool = Field(default=True)
    log_enable_file: bool = Field(default=False)
    log_file_path: Optional[str] = Field(default=None, validate_default=True)

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator('log_file_path')
    @classmethod
    def validate_file_path(cls, v: Optional[str], info) -> Optional[str]:
        """file_path is required when file logging is on."""
        if info.data.get('log_enable_file') and not v:
            raise ValueError("log_file_path is required when log_enable_file=True")
        return v

    def to_logging_config(self) -> Optional[LoggingConfig]:
        if not self.log_enabled:
            return None
        return LoggingConfig.create(
            level=self.log_level,
            format=self.log_format,
            enable_console=self.log_enable_console,
            enable_file=self.log_enable_file,
            file_path=self.log_file_path,
        )


def load_from_env(env_file: Optional[str] = None, **overrides) -> NetworkConfig:
    """
    Load NetworkConfig from the environment.

    Priority (highest to lowest):
    1. **overrides
    2. Environment variables (NETWORK_KIT_*)
    3. .env file
    4. Defaults

    Example:
        >>> config = load_from_env(request_timeout=10)
    """
    if env_file is not None:
        settings = NetworkSettings(_env_file=env_file)
    else:
        settings = NetworkSettings()

    return NetworkConfig.create(
        request_timeout=overrides.get('request_timeout', settings.request_timeout),
        headers=overrides.get('headers'),
        max_workers=overrides.get('max_workers', settings.max_workers),
        verify_ssl=overrides.get('verify_ssl', settings.verify_ssl),
        logging=overrides.get('logging', settings.to_logging_config()),
    )
