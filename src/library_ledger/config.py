"""Configuration management for the library ledger.

Settings come from, in order of precedence:
1. Keyword arguments to LedgerConfig
2. LIBRARY_LEDGER_* environment variables
3. A .env file in the working directory
4. The defaults below
"""

import logging
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerConfig(BaseSettings):
    """Library ledger configuration.

    Covers where the world state lives, how the host database engine is
    set up and how verbose logging is.
    """

    model_config = SettingsConfigDict(
        # Use LIBRARY_LEDGER_ prefix for all env vars
        env_prefix="LIBRARY_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Ledger Metadata ===

    ledger_name: str = Field(
        default="library-ledger",
        description="Name used to identify this ledger in logs",
        pattern=r"^[a-z0-9-]+$",
    )

    # === World State Storage ===

    database_path: Path = Field(
        default=Path("data/ledger.db"),
        description="SQLite file backing the world state",
    )

    database_url: str | None = Field(
        default=None,
        description="SQLAlchemy URL; overrides database_path when set",
    )

    echo_sql: bool = Field(
        default=False,
        description="Log every SQL statement issued against the world state",
    )

    # === Catalog ===

    seed_catalog: bool = Field(
        default=False,
        description="Seed the starter catalog when the ledger boots",
    )

    # === Development Configuration ===

    debug: bool = Field(
        default=False,
        description="Enable debug logging",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
    )

    # === Validation Methods ===

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @field_validator("database_path")
    @classmethod
    def validate_database_path(cls, v: Path) -> Path:
        """Resolve the database path against the working directory."""
        return v.absolute()

    @field_validator("ledger_name")
    @classmethod
    def validate_ledger_name(cls, v: str) -> str:
        if len(v) < 3:
            raise ValueError("Ledger name must be at least 3 characters")
        if len(v) > 50:
            raise ValueError("Ledger name must not exceed 50 characters")
        return v

    # === Computed Properties ===

    @property
    def is_development(self) -> bool:
        return self.debug or self.log_level == "DEBUG"

    @property
    def effective_log_level(self) -> int:
        """Numeric level for the root logger; debug mode forces DEBUG."""
        return logging.DEBUG if self.debug else logging.getLevelNamesMapping()[self.log_level]

    def get_database_url(self) -> str:
        """Get the SQLAlchemy URL of the world-state database."""
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.database_path}"


# === Global Configuration Instance ===


class _ConfigStore:
    """Internal storage for configuration singleton."""

    _instance: LedgerConfig | None = None


def get_config() -> LedgerConfig:
    """Get or create the global configuration instance."""
    if _ConfigStore._instance is None:  # type: ignore[reportPrivateUsage]
        _ConfigStore._instance = LedgerConfig()  # type: ignore[reportPrivateUsage]
    return _ConfigStore._instance  # type: ignore[reportPrivateUsage]


def reset_config() -> None:
    """Reset configuration (useful for testing)."""
    _ConfigStore._instance = None  # type: ignore[reportPrivateUsage]


def configure_logging(config: LedgerConfig | None = None) -> None:
    """Send ledger logs to stderr at the configured level."""
    config = config or get_config()
    logging.basicConfig(
        level=config.effective_log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    # SQLAlchemy has its own engine logger; echo_sql only turns it up
    if config.echo_sql:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
