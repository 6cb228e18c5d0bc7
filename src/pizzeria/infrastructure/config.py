"""Runtime configuration, read from ``PIZZERIA_*`` environment variables
or a local ``.env`` file."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PIZZERIA_",
        env_file=".env",
        extra="ignore",
    )

    data_dir: Path = Path("data")  # orders.json lives here
    log_level: str = "WARNING"
    order_code_prefix: str = "ORD"
