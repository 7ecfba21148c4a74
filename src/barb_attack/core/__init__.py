"""Core infrastructure: configuration, exceptions and logging."""

from __future__ import annotations

from barb_attack.core.config import RulesSettings, Settings, clear_settings_cache, get_settings
from barb_attack.core.exceptions import (
    BarbAttackError,
    ConfigurationError,
    DiceRollError,
    GameEngineError,
    InvalidGameStateError,
    PersistenceError,
    PromptInterruptedError,
    TurnManagementError,
    UIError,
)
from barb_attack.core.logging import bind_context, clear_context, configure_logging, get_logger


__all__ = [
    # Configuration
    "RulesSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Exceptions
    "BarbAttackError",
    "ConfigurationError",
    "PersistenceError",
    "GameEngineError",
    "InvalidGameStateError",
    "DiceRollError",
    "TurnManagementError",
    "UIError",
    "PromptInterruptedError",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
