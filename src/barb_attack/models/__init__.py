"""Pydantic V2 schemas for the barbarian combat assistant.

Submodules:
    enums: Enumeration types (AttackMode, Feature, ActionType, ...)
    progression: Level-derived numbers (rages, rage damage, attacks)
    character: The read-only player character
    session: Persisted per-session resource state
    settings: Persisted play settings
    results: Attack and damage roll results

Example:
    >>> from barb_attack.models import Character, SessionState
    >>> state = SessionState(rages_remaining=3)
    >>> state.rage_active
    False
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from barb_attack.models.enums import (
    ActionType,
    AttackMode,
    Feature,
    SurgeCategory,
    TurnPhase,
)

# =============================================================================
# Progression
# =============================================================================
from barb_attack.models.progression import (
    UNLIMITED_RAGES,
    get_barbarian_features,
    get_max_attacks,
    get_proficiency_bonus,
    get_rage_damage,
    get_rages,
)

# =============================================================================
# Character
# =============================================================================
from barb_attack.models.character import (
    AttackModifiers,
    BaseStats,
    Character,
    CharacterFeatures,
    ClassLevel,
    FeatureFlag,
    SupplementalDie,
    Weapon,
)

# =============================================================================
# Session & Settings
# =============================================================================
from barb_attack.models.session import SessionState, SurgeEffect, TempEffect
from barb_attack.models.settings import PlaySettings, TestingMode

# =============================================================================
# Results
# =============================================================================
from barb_attack.models.results import (
    AttackRollResult,
    DamageFlags,
    DamageRollResult,
    HeroicInspirationUse,
    SupplementalDamage,
)


__all__ = [
    # Enumerations
    "ActionType",
    "AttackMode",
    "Feature",
    "SurgeCategory",
    "TurnPhase",
    # Progression
    "UNLIMITED_RAGES",
    "get_barbarian_features",
    "get_max_attacks",
    "get_proficiency_bonus",
    "get_rage_damage",
    "get_rages",
    # Character
    "AttackModifiers",
    "BaseStats",
    "Character",
    "CharacterFeatures",
    "ClassLevel",
    "FeatureFlag",
    "SupplementalDie",
    "Weapon",
    # Session & Settings
    "SessionState",
    "SurgeEffect",
    "TempEffect",
    "PlaySettings",
    "TestingMode",
    # Results
    "AttackRollResult",
    "DamageFlags",
    "DamageRollResult",
    "HeroicInspirationUse",
    "SupplementalDamage",
]
