"""
Library configuration.

All configuration is loaded from environment variables.
Never hardcode connection strings or rounding rules in code.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Accounting Core"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Database (only used by SqlStorage and the HTTP surface)
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./accounting_core.db"
    )

    # Money display. Calculations are exact; these only apply
    # when a value is rounded for presentation.
    MONEY_DECIMAL_PLACES: int = int(os.getenv("MONEY_DECIMAL_PLACES", "2"))
    MONEY_ROUNDING: str = os.getenv("MONEY_ROUNDING", "ROUND_HALF_UP")

    # GST
    GST_INTER_STATE: bool = os.getenv("GST_INTER_STATE", "false").lower() == "true"

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Using lru_cache means the Settings object is created once
    and reused for all subsequent calls.
    """
    return Settings()
