"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        Sw5eEngineError: Base exception for all engine errors.
        ConfigurationError: Configuration-related errors.
        RuleTableError: Malformed rule tables.
        ValidationError: Data validation errors.
        SnapshotValidationError: Rejected raw actor data.
        ComputationError: Unexpected failure inside a pipeline stage.

    Configuration:
        Settings: Main engine settings class.
        RulesSettings: Optional rule toggles.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up engine logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from sw5e_engine.core.config import (
    RulesSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from sw5e_engine.core.exceptions import (
    ComputationError,
    ConfigurationError,
    RuleTableError,
    SnapshotValidationError,
    Sw5eEngineError,
    ValidationError,
)
from sw5e_engine.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "Sw5eEngineError",
    # Configuration exceptions
    "ConfigurationError",
    "RuleTableError",
    # Validation exceptions
    "ValidationError",
    "SnapshotValidationError",
    # Computation exceptions
    "ComputationError",
    # Configuration
    "Settings",
    "RulesSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
