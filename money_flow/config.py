"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from decimal import Decimal
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .locales import CurrencyLocale


class MoneyFlowConfig(BaseSettings):
    """Money Flow bank configuration"""

    model_config = SettingsConfigDict(
        env_prefix="MONEY_FLOW_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Business rules configuration
    checking_withdrawal_fee: Decimal = Decimal("0.50")
    monthly_interest_rate: Decimal = Decimal("0.005")  # 0.5% per month

    # Display configuration
    currency_locale: CurrencyLocale = CurrencyLocale.EN_ZA  # Set by name, e.g. EN_ZA

    # Demo data
    seed_demo_accounts: bool = True

    # API configuration
    api_host: str = "127.0.0.1"
    api_port: int = 8090

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stderr

    @field_validator("currency_locale", mode="before")
    @classmethod
    def parse_currency_locale(cls, value):
        return CurrencyLocale.parse(value)


# Global configuration instance
config = MoneyFlowConfig()


def get_config() -> MoneyFlowConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> MoneyFlowConfig:
    """Reload configuration from environment"""
    global config
    config = MoneyFlowConfig()
    return config
