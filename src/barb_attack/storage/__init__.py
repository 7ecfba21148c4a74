"""Persistence layer for the barbarian combat assistant."""

from __future__ import annotations

from barb_attack.storage.repositories import (
    CharacterRepository,
    JsonRepository,
    Repository,
    SessionRepository,
    SettingsRepository,
)


__all__ = [
    "Repository",
    "JsonRepository",
    "CharacterRepository",
    "SessionRepository",
    "SettingsRepository",
]
