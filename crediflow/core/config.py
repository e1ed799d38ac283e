"""
Centralized application configuration implementing the 12-Factor App methodology.
Values are read from environment variables or a local .env file.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Immutable configuration schema backed by environment variables."""

    APP_NAME: str = "CrediFlow"
    VERSION: str = "1.0.0"
    DEBUG: bool = False

    # SQLite for local development; any SQLAlchemy URL (PostgreSQL, etc.) works in production
    DATABASE_URL: str = "sqlite:///./crediflow.db"

    LOG_LEVEL: str = "INFO"

    # Nominal annual rate applied to every new quote and repayment schedule
    ANNUAL_INTEREST_RATE_PERCENT: float = 15.0

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


settings = Settings()
