"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class TokenConfig(BaseSettings):
    """Token ledger configuration"""

    # Token metadata used by deploy_token()
    token_name: str = "Token"
    token_symbol: str = "TKN"
    token_decimals: int = 18
    initial_supply_units: int = 1_000_000

    # Supply control
    mint_policy: str = "owner"  # owner or open

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stdout

    # Event log
    enable_event_hashing: bool = True

    class Config:
        env_prefix = "TOKEN_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = TokenConfig()


def get_config() -> TokenConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> TokenConfig:
    """Reload configuration from environment"""
    global config
    config = TokenConfig()
    return config
