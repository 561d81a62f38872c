"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting overridable through environment variables or .env
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Data paths default to the seed documents shipped inside the package
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from stockswap.core.maintenance_plan import DEFAULT_TOPICS_TO_CLEAN

DATA_DIR = Path(__file__).parent / "data"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Data documents
    trading_data_path: Path = DATA_DIR / "stocks.json"
    user_data_path: Path = DATA_DIR / "users.json"

    # Serving
    host: str = "0.0.0.0"
    trading_port: int = 3001
    user_port: int = 3000
    cors_origins: list[str] = ["http://localhost:5173"]

    # Maintenance
    maintenance_delay_scale: float = 1.0
    deadlock_probability: float = 1 / 3
    kafka_topics_to_clean: list[str] = list(DEFAULT_TOPICS_TO_CLEAN)

    @field_validator("deadlock_probability")
    @classmethod
    def check_probability(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("deadlock_probability must be between 0 and 1")
        return v

    @field_validator("maintenance_delay_scale")
    @classmethod
    def check_delay_scale(cls, v: float) -> float:
        if v < 0:
            raise ValueError("maintenance_delay_scale cannot be negative")
        return v

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
