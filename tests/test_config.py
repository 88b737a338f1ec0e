"""Tests for configuration management."""

import pytest
import toml

from wager.config import Config
from wager.models import InvoicingService


def test_load_config(temp_dir):
    """Test loading configuration from TOML file."""
    config_data = {
        "rates": {
            "normal_rate": 17000,
            "drs_rate": 11000,
            "mileage_rate": 2000,
            "invoicing_service": "Verso-Basic"
        },
        "calendar": {
            "seed_year": 2024
        },
        "deposits": {
            "payment_lag_weeks": 3
        },
        "output": {
            "log_level": "DEBUG",
            "json_indent": 4,
            "console_summary": False
        }
    }

    config_path = temp_dir / "test_config.toml"
    with open(config_path, 'w') as f:
        toml.dump(config_data, f)

    config = Config.load(str(config_path))

    assert config.rates.normal_rate == 17000
    assert config.rates.invoicing_service == "Verso-Basic"
    assert config.calendar.seed_year == 2024
    assert config.deposits.payment_lag_weeks == 3
    assert config.output.log_level == "DEBUG"
    assert config.output.json_indent == 4
    assert config.output.log_file is None


def test_load_partial_config(temp_dir):
    """Test missing sections fall back to defaults."""
    config_path = temp_dir / "partial.toml"
    with open(config_path, 'w') as f:
        toml.dump({"rates": {"normal_rate": 15000}}, f)

    config = Config.load(str(config_path))

    assert config.rates.normal_rate == 15000
    assert config.rates.drs_rate == 10000
    assert config.calendar.seed_year == 2024
    assert config.deposits.payment_lag_weeks == 2


def test_load_nonexistent_config():
    """Test loading non-existent configuration file."""
    with pytest.raises(FileNotFoundError):
        Config.load("nonexistent.toml")


def test_default_config():
    config = Config.default()
    assert config.rates.normal_rate == 16000
    assert config.rates.mileage_rate == 1988
    assert config.output.json_indent == 2


def test_settings_from_config(sample_config):
    """Test building the driver settings record."""
    settings = sample_config.settings()

    assert settings.normal_rate == 16000
    assert settings.drs_rate == 10000
    assert settings.mileage_rate == 1988
    assert settings.invoicing_service == InvoicingService.SELF_INVOICING


def test_settings_rejects_unknown_invoicing_service(sample_config):
    sample_config.rates.invoicing_service = "Paper"
    with pytest.raises(ValueError):
        sample_config.settings()


def test_settings_rejects_negative_rate(sample_config):
    sample_config.rates.drs_rate = -1
    with pytest.raises(ValueError):
        sample_config.settings()
