"""Tests for ledger configuration.

These tests demonstrate:
1. Default value behavior
2. Environment variable loading
3. Configuration validation
4. Logging setup driven by configuration
"""

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from library_ledger.config import LedgerConfig, configure_logging, get_config, reset_config


class TestLedgerConfig:
    """Test ledger configuration behavior."""

    def test_default_configuration(self):
        config = LedgerConfig()

        assert config.ledger_name == "library-ledger"
        assert config.database_path == Path("data/ledger.db").absolute()
        assert config.database_url is None
        assert config.echo_sql is False
        assert config.seed_catalog is False
        assert config.debug is False
        assert config.log_level == "INFO"

    def test_environment_variable_loading(self):
        env_vars = {
            "LIBRARY_LEDGER_LEDGER_NAME": "branch-ledger",
            "LIBRARY_LEDGER_DATABASE_PATH": "/tmp/branch.db",
            "LIBRARY_LEDGER_SEED_CATALOG": "true",
            "LIBRARY_LEDGER_ECHO_SQL": "1",
            "LIBRARY_LEDGER_LOG_LEVEL": "warning",
        }

        with patch.dict(os.environ, env_vars):
            config = LedgerConfig()

            assert config.ledger_name == "branch-ledger"
            assert config.database_path == Path("/tmp/branch.db")
            assert config.seed_catalog is True
            assert config.echo_sql is True
            # Levels are case-insensitive
            assert config.log_level == "WARNING"

    def test_ledger_name_validation(self):
        for name in ["library", "branch-42", "main-ledger"]:
            assert LedgerConfig(ledger_name=name).ledger_name == name

        invalid_names = [
            "Library",  # Uppercase not allowed
            "main ledger",  # Spaces not allowed
            "main_ledger",  # Underscores not allowed
            "ab",  # Too short
            "a" * 51,  # Too long
        ]
        for name in invalid_names:
            with pytest.raises(ValidationError):
                LedgerConfig(ledger_name=name)

    def test_log_level_validation(self):
        with pytest.raises(ValidationError):
            LedgerConfig(log_level="VERBOSE")

    def test_database_url(self, tmp_path):
        db_path = tmp_path / "ledger.db"

        config = LedgerConfig(database_path=db_path)
        assert config.get_database_url() == f"sqlite:///{db_path}"

        config = LedgerConfig(database_path=db_path, database_url="sqlite:///:memory:")
        assert config.get_database_url() == "sqlite:///:memory:"

    def test_effective_log_level(self):
        assert LedgerConfig().effective_log_level == logging.INFO
        assert LedgerConfig(log_level="ERROR").effective_log_level == logging.ERROR
        # Debug mode wins over the configured level
        config = LedgerConfig(log_level="ERROR", debug=True)
        assert config.effective_log_level == logging.DEBUG
        assert config.is_development is True

    def test_singleton_pattern(self):
        reset_config()

        config1 = get_config()
        config2 = get_config()
        assert config1 is config2

        reset_config()
        assert get_config() is not config1

    def test_config_immutability_through_singleton(self):
        with patch.dict(os.environ, {"LIBRARY_LEDGER_LEDGER_NAME": "first-ledger"}):
            assert get_config().ledger_name == "first-ledger"

        # Environment changes after first use are not picked up
        with patch.dict(os.environ, {"LIBRARY_LEDGER_LEDGER_NAME": "second-ledger"}):
            assert get_config().ledger_name == "first-ledger"


@pytest.mark.usefixtures("restore_logging")
class TestConfigureLogging:
    """Test logging setup."""

    def test_root_level_follows_config(self):
        configure_logging(LedgerConfig(log_level="WARNING"))
        assert logging.getLogger().level == logging.WARNING

        configure_logging(LedgerConfig(debug=True))
        assert logging.getLogger().level == logging.DEBUG

    def test_echo_sql_enables_engine_logger(self):
        configure_logging(LedgerConfig(echo_sql=True))
        assert logging.getLogger("sqlalchemy.engine").level == logging.INFO

    def test_uses_global_config_by_default(self):
        with patch.dict(os.environ, {"LIBRARY_LEDGER_LOG_LEVEL": "ERROR"}):
            configure_logging()
        assert logging.getLogger().level == logging.ERROR
