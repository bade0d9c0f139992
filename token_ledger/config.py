"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import Optional


ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class TokenLedgerConfig(BaseSettings):
    """Token ledger configuration"""

    # Token economics
    token_decimals: int = 18
    initial_supply_tokens: int = 1_000_000  # Whole tokens minted to the owner
    burn_percent: int = 5  # Integer percent of every transfer sent to the burn sink
    burn_sink_account: str = ZERO_ADDRESS

    # Storage configuration
    database_url: str = "memory://"  # memory:// or sqlite:///path/to/ledger.db

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stderr
    manage_logging: bool = False  # create_ledger installs the token_ledger handler from the settings above

    # Feature flags
    enable_audit_logging: bool = True
    enable_event_log: bool = True  # Persist notifications in the token_events table

    @field_validator("burn_percent")
    @classmethod
    def _check_burn_percent(cls, value: int) -> int:
        if value < 0 or value > 100:
            raise ValueError("burn_percent must be between 0 and 100")
        return value

    @field_validator("token_decimals")
    @classmethod
    def _check_decimals(cls, value: int) -> int:
        if value < 0 or value > 77:
            raise ValueError("token_decimals must be between 0 and 77")
        return value

    @field_validator("burn_sink_account")
    @classmethod
    def _check_burn_sink(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("burn_sink_account must not be empty")
        return value

    @property
    def initial_supply(self) -> int:
        """Initial supply in base units"""
        return self.initial_supply_tokens * 10 ** self.token_decimals

    class Config:
        env_prefix = "TOKEN_LEDGER_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = TokenLedgerConfig()


def get_config() -> TokenLedgerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> TokenLedgerConfig:
    """Reload configuration from environment"""
    global config
    config = TokenLedgerConfig()
    return config
