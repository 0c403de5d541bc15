"""
Unit tests for settings and logging setup.
"""

import json
import logging

import pytest
from pydantic import ValidationError

from pmr.config import Settings, get_settings
from pmr.logging_config import JsonFormatter, configure_logging
from pmr.rating.adjuster import AdjustmentParams
from pmr.rating.constants import ADJUSTMENT_DEFAULTS


class TestSettings:
    """Tests for Settings loading."""

    def test_defaults_match_constants(self, monkeypatch):
        monkeypatch.delenv("PMR_K_FACTOR", raising=False)
        settings = Settings(_env_file=None)

        for name, value in ADJUSTMENT_DEFAULTS.items():
            assert getattr(settings, name) == value
        assert settings.log_level == "INFO"
        assert settings.log_format == "console"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PMR_K_FACTOR", "0.4")
        monkeypatch.setenv("PMR_LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.k_factor == 0.4
        assert settings.log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="LOUD")

    def test_invalid_log_format(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_format="xml")

    def test_coefficients_validated(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, k_factor=0)
        with pytest.raises(ValidationError):
            Settings(_env_file=None, margin_min=1.5)

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()


class TestAdjustmentParamsFromSettings:
    """Tests for AdjustmentParams.from_settings()."""

    def test_from_explicit_settings(self):
        params = AdjustmentParams.from_settings(Settings(_env_file=None, k_factor=0.3, v_max=2.0))

        assert params.k_factor == 0.3
        assert params.v_max == 2.0
        assert params.elo_scale == ADJUSTMENT_DEFAULTS["elo_scale"]

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("PMR_ELO_SCALE", "2.5")

        params = AdjustmentParams.from_settings()

        assert params.elo_scale == 2.5

    def test_defaults(self):
        assert AdjustmentParams().to_dict() == dict(ADJUSTMENT_DEFAULTS)


class TestLogging:
    """Tests for configure_logging()."""

    def test_configures_level_and_single_handler(self):
        settings = Settings(_env_file=None, log_level="WARNING")

        configure_logging(settings)
        logger = configure_logging(settings)

        assert logger.name == "pmr"
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1

    def test_json_format(self):
        logger = configure_logging(Settings(_env_file=None, log_format="json"))

        assert isinstance(logger.handlers[0].formatter, JsonFormatter)

    def test_json_formatter_output(self):
        record = logging.LogRecord(
            name="pmr.rating.estimator",
            level=logging.WARNING,
            pathname=__file__,
            lineno=1,
            msg="fallback to %.1f",
            args=(4.0,),
            exc_info=None,
        )

        payload = json.loads(JsonFormatter().format(record))

        assert payload["level"] == "WARNING"
        assert payload["logger"] == "pmr.rating.estimator"
        assert payload["message"] == "fallback to 4.0"
