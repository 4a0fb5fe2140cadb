"""
Application configuration using Pydantic Settings.
All environment-specific values are centralized here.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings

from groupbuy_engine.models.enums import PercentConvention


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── App ──────────────────────────────────────────────
    app_name: str = "Group Buy Engine"
    debug: bool = True

    # ── Discounts & Pricing ──────────────────────────────
    # How Discount values are stored: "fraction" (0.10) | "percent" (10) | "auto"
    discount_convention: PercentConvention = PercentConvention.FRACTION
    currency_code: str = "USD"
    currency_places: int = 2

    # ── Rules ────────────────────────────────────────────
    rules_config_path: str = ""  # empty = built-in defaults

    # ── Server ───────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8000

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
