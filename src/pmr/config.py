"""
Configuration management for the PMR engine.

Uses Pydantic Settings to load configuration from environment variables
(prefixed with PMR_) or a .env file. Every setting has a default, so the
engine runs with no configuration at all.

Usage:
    from pmr.config import get_settings
    print(get_settings().k_factor)
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pmr.rating.constants import ADJUSTMENT_DEFAULTS


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.

    Environment variables can be set directly (PMR_LOG_LEVEL=DEBUG) or via a
    .env file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="PMR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Post-match adjustment coefficients
    # ==========================================================================

    k_factor: float = Field(
        default=ADJUSTMENT_DEFAULTS["k_factor"],
        gt=0,
        description="Base rating step on the PMR scale",
    )
    elo_scale: float = Field(
        default=ADJUSTMENT_DEFAULTS["elo_scale"],
        gt=0,
        description="PMR difference that gives 10:1 odds",
    )
    margin_min: float = Field(
        default=ADJUSTMENT_DEFAULTS["margin_min"],
        ge=0,
        le=1,
        description="Margin factor for a level game count",
    )
    margin_gamma: float = Field(
        default=ADJUSTMENT_DEFAULTS["margin_gamma"],
        gt=0,
        description="Curvature of the margin factor",
    )
    upset_beta: float = Field(
        default=ADJUSTMENT_DEFAULTS["upset_beta"],
        ge=0,
        description="Maximum extra movement for an upset",
    )
    upset_gamma: float = Field(
        default=ADJUSTMENT_DEFAULTS["upset_gamma"],
        gt=0,
        description="Curvature of the upset factor",
    )
    v_max: float = Field(
        default=ADJUSTMENT_DEFAULTS["v_max"],
        ge=1,
        description="Volatility multiplier at reliability 0",
    )
    v_gamma: float = Field(
        default=ADJUSTMENT_DEFAULTS["v_gamma"],
        gt=0,
        description="Curvature of the volatility multiplier",
    )
    rel_tau: float = Field(
        default=ADJUSTMENT_DEFAULTS["rel_tau"],
        gt=0,
        description="Time constant (in matches) of the reliability curve",
    )
    rel_curve_gamma: float = Field(
        default=ADJUSTMENT_DEFAULTS["rel_curve_gamma"],
        gt=0,
        description="Exponent of the reliability curve",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_format: str = Field(
        default="console",
        description="Log format: 'json' for production, 'console' for dev",
    )

    # ==========================================================================
    # Validators
    # ==========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Ensure log format is 'json' or 'console'."""
        lower_v = v.lower()
        if lower_v not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return lower_v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Loaded once per process; call get_settings.cache_clear() to reload.
    """
    return Settings()
