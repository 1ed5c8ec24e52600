# landcost/config.py
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_POLICY_PATH = str(
    Path(__file__).resolve().parent / "costing" / "policies" / "default.yaml"
)


class Settings(BaseSettings):
    # === General ===
    app_env: str = "local"  # local | development | production
    app_name: str = "landcost"

    # === Database ===
    database_url: str = "sqlite:///./landcost.db"

    # === Logging ===
    log_level: str = "INFO"

    # === Metrics ===
    metrics_enabled: bool = True

    # === Costing ===
    costing_policy_path: str = Field(
        DEFAULT_POLICY_PATH, description="YAML file with surcharge/fallback constants"
    )
    recompute_debounce_ms: int = 100

    # Optional override; when unset the policy file decides
    express_surcharge_multiplier: Optional[float] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton Settings instance with simple env overrides."""
    s = Settings()

    env = os.getenv("ENVIRONMENT", s.app_env).lower()
    if env == "production":
        s.log_level = "WARNING"
    elif env == "development":
        s.log_level = "DEBUG"

    return s


# Module-level export: from landcost.config import settings
settings = get_settings()
