"""Runtime settings, read from ``STOREFRONT_*`` environment variables or ``.env``."""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="STOREFRONT_", extra="ignore")

    data_dir: Path = _DEFAULT_DATA_DIR
    currency: str = "EUR"

    tax_rate: Decimal = Field(default=Decimal("0.21"), ge=0, lt=1)

    # Shipping
    baltic_rate: Decimal = Decimal("4.00")
    international_rate: Decimal = Decimal("4.00")
    carrier_rate: Decimal = Decimal("20.00")
    free_shipping_threshold: Decimal = Decimal("50.00")
    free_shipping_country: str = "LT"

    # Largest accepted difference between a submitted and a computed total
    price_tolerance: Decimal = Field(default=Decimal("0.01"), ge=0)

    log_level: str = "INFO"
    log_json: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
