import logging
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Aggregation defaults
    default_aggregation: Literal["none", "avg", "sum"] = Field(
        "avg", description="Aggregation applied when a series does not name one."
    )
    unknown_date_bucket: str = Field(
        "unknown",
        description="Group key used for records whose x-axis date is missing or unparseable.",
    )

    # Deduplication
    merge_tie_policy: Literal["first", "last"] = Field(
        "first",
        description="Which value wins when two differing values come from equally normalized keys.",
    )

    # Opponent filter
    opponent_match_threshold: float = Field(
        0.7,
        ge=0.0,
        le=1.0,
        description="Minimum name similarity (0-1) for an opponent filter to match a record.",
    )

    # Supabase Configuration (optional, only needed for the storage adapter)
    supabase_url: Optional[str] = Field(None, description="URL for the Supabase project.")
    supabase_key: Optional[str] = Field(None, description="Anon key for the Supabase project.")
    matches_table: str = Field("matches", description="Table holding match rows.")

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()
