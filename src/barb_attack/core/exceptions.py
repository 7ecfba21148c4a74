"""Custom exception hierarchy for the barbarian combat assistant.

All exceptions inherit from BarbAttackError so the application boundary
(the terminal menu) can catch one type while each domain keeps its own
context.

Example:
    >>> from barb_attack.core.exceptions import ConfigurationError
    >>> raise ConfigurationError("Missing character file", config_key="character_file")
"""

from __future__ import annotations

from typing import Any


class BarbAttackError(Exception):
    """Base exception for all combat assistant errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Persistence
# =============================================================================


class ConfigurationError(BarbAttackError):
    """Raised when persisted configuration is missing or malformed.

    A configuration fault at startup is fatal: there is no partial-start
    mode.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key or file that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class PersistenceError(BarbAttackError):
    """Raised when saving state to disk fails.

    Non-fatal: callers log it and keep the in-memory state authoritative.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if path:
            combined_details["path"] = path
        super().__init__(message, details=combined_details)


# =============================================================================
# Game Engine Domain Exceptions
# =============================================================================


class GameEngineError(BarbAttackError):
    """Base exception for rules engine errors."""


class InvalidGameStateError(GameEngineError):
    """Raised when a state transition would violate a session invariant."""

    def __init__(
        self,
        message: str,
        *,
        current_state: str | None = None,
        expected_states: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid game state error with state context.

        Args:
            message: Human-readable error description.
            current_state: The current invalid state identifier.
            expected_states: List of valid states that were expected.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if current_state:
            combined_details["current_state"] = current_state
        if expected_states:
            combined_details["expected_states"] = expected_states
        super().__init__(message, details=combined_details)


class DiceRollError(GameEngineError):
    """Raised when the dice library rejects a roll."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if expression:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


class TurnManagementError(GameEngineError):
    """Raised when a turn step is requested out of sequence.

    This includes attacking past the attack budget, taking a second bonus
    action, or acting before the turn has started.
    """

    def __init__(
        self,
        message: str,
        *,
        turn_number: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if turn_number is not None:
            combined_details["turn_number"] = turn_number
        super().__init__(message, details=combined_details)


# =============================================================================
# UI Exceptions
# =============================================================================


class UIError(BarbAttackError):
    """Base exception for terminal interface errors."""


class PromptInterruptedError(UIError):
    """Raised when the user aborts a prompt (Ctrl-C or end of input).

    Yes/no prompts inside the resolvers treat this as "no"; required choice
    prompts let it propagate to the menu loop.
    """


__all__ = [
    "BarbAttackError",
    "ConfigurationError",
    "PersistenceError",
    "GameEngineError",
    "InvalidGameStateError",
    "DiceRollError",
    "TurnManagementError",
    "UIError",
    "PromptInterruptedError",
]
