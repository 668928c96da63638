"""Configuration management for the SW5E derived-stats engine.

This module provides centralized configuration using pydantic-settings,
supporting environment variables, .env files, and runtime overrides. The
rule toggles here correspond to the world settings a game master flips in
the host application (coin weight, metric units, simplified forcecasting).

Example:
    >>> from sw5e_engine.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.rules.currency_weight
    True

Environment Variables:
    SW5E_ENGINE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    SW5E_ENGINE_DEBUG: Enable debug mode
    SW5E_ENGINE_RULES_CURRENCY_WEIGHT: Count carried credits toward encumbrance
    SW5E_ENGINE_RULES_METRIC_WEIGHT_UNITS: Use metric encumbrance constants
    SW5E_ENGINE_RULES_SIMPLIFIED_FORCECASTING: Use one force DC for all schools
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sw5e_engine.core.exceptions import ConfigurationError


class RulesSettings(BaseSettings):
    """Optional rules that change how derived stats are computed.

    Attributes:
        currency_weight: Add the weight of carried coins to encumbrance.
        metric_weight_units: Use metric encumbrance constants.
        simplified_forcecasting: Light and dark side DCs both use the
            universal force DC.
    """

    model_config = SettingsConfigDict(
        env_prefix="SW5E_ENGINE_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    currency_weight: bool = Field(
        default=True,
        description="Count carried currency toward encumbrance",
    )
    metric_weight_units: bool = Field(
        default=False,
        description="Use metric weight units for encumbrance",
    )
    simplified_forcecasting: bool = Field(
        default=False,
        description="Use the universal force DC for light and dark powers",
    )


class Settings(BaseSettings):
    """Main engine settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Engine logging level.
        rules: Optional rule toggles.
    """

    model_config = SettingsConfigDict(
        env_prefix="SW5E_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="SW5E Derived Stats Engine",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    rules: RulesSettings = Field(default_factory=RulesSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode.

        Returns:
            True if not in debug mode.
        """
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the engine settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load engine settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    Example:
        >>> clear_settings_cache()
        >>> settings = get_settings()  # Reloads from environment
    """
    get_settings.cache_clear()


__all__ = [
    "RulesSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
