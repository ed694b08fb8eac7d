"""
Application configuration loaded from environment variables.

These are the run-level defaults used when a caller does not pass a value
explicitly: which billing document to read, where output goes and how a
default invoice number is built.
"""

from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from billforge.services.dates import MONTH_ABBREVIATIONS


class Settings(BaseSettings):
    """
    Billing run settings with validation.

    Each setting is read from an environment variable of the same name
    prefixed with BILLFORGE_, e.g. BILLFORGE_OUTPUT_DIR.
    Use .env file for local development.
    """

    model_config = SettingsConfigDict(
        env_prefix="BILLFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    config_file: Path = Field(
        default=Path("billing.yaml"),
        description="YAML billing document to read"
    )

    output_dir: Path = Field(
        default=Path("."),
        description="Output directory when the document does not set app_config.output_dir"
    )

    invoice_number_format: str = Field(
        default="{month}{day}{year}",
        description="Template for default invoice numbers; fields: month, day, year"
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level for the billforge loggers"
    )

    def default_billing_date(self, today: date | None = None) -> str:
        """Return today's date in the canonical YYYY-MM-DD layout."""
        return (today or date.today()).isoformat()

    def default_invoice_number(self, today: date | None = None) -> str:
        """
        Build an invoice number from a date.

        With the default format, 2 January 2006 becomes "Jan22006".
        """
        day = today or date.today()
        return self.invoice_number_format.format(
            month=MONTH_ABBREVIATIONS[day.month - 1],
            day=day.day,
            year=day.year,
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once and cached for subsequent calls.
    Call get_settings.cache_clear() after changing the environment.
    """
    return Settings()
