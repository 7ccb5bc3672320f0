"""
Dashboard query-layer configuration
"""
import logging
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from IPO_* environment variables or a .env file"""

    model_config = SettingsConfigDict(env_prefix="IPO_", env_file=".env", case_sensitive=False)

    # Year bounds of the dataset
    dataset_min_year: int = 2010
    dataset_max_year: int = 2025

    # Suggestions
    suggestion_limit: int = 10
    suggestion_min_chars: int = 1

    # Data
    data_file: Optional[Path] = None

    log_level: str = "info"


settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
