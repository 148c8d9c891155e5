"""LedgerQL settings.

Read from the environment (and an optional ``.env`` file).  ``DATABASE_URL``
is accepted unprefixed so the same variable serves the web framework and
the shim; every other setting uses the ``LEDGERQL_`` prefix.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for LedgerQL clients."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGERQL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("LEDGERQL_DATABASE_URL", "DATABASE_URL"),
    )
    api_base_url: str = "http://localhost:3000"
    sql_dialect: str = "postgres"

    # Fail compilation when bulk-insert rows do not share the first row's keys.
    strict_insert_columns: bool = False

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"


@lru_cache
def get_settings() -> Settings:
    """Get cached Settings instance."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Attach a console handler to the ``ledgerql`` logger.

    Libraries should not configure logging; call this from application
    entry points and scripts only.

    Args:
        level: Override log level (default: ``Settings.log_level``).
    """
    if level is None:
        level = get_settings().log_level

    pkg_logger = logging.getLogger("ledgerql")
    pkg_logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    if not any(isinstance(h, logging.StreamHandler) for h in pkg_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        pkg_logger.addHandler(handler)
