"""Centralised application settings loaded from environment / .env file."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Pricing
    base_fare: float = 50.0  # INR
    fare_precision: int = 2  # decimal places kept on final fares
    currency: str = "INR"

    # Surge state at startup
    surge_active: bool = False
    surge_multiplier: float = 1.0

    # Matching engine
    matching_policy: str = "nearest"  # nearest | best_rated

    # API
    seed_demo_fleet: bool = False
    rate_limit: str = "100/minute"
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
