"""Level progression data for the barbarian/fighter character.

Static tables for everything the rules engine derives from class levels:
proficiency bonus, rage uses, rage damage, extra attacks and the feature
list shown on the character sheet.
"""

from __future__ import annotations

from typing import Any

# A level 20 barbarian rages without limit; stored as a large count so the
# session counter stays a plain non-negative integer.
UNLIMITED_RAGES = 999

# =============================================================================
# Proficiency Bonus (PHB p.15)
# =============================================================================

PROFICIENCY_BONUS: dict[int, int] = {
    1: 2, 2: 2, 3: 2, 4: 2,
    5: 3, 6: 3, 7: 3, 8: 3,
    9: 4, 10: 4, 11: 4, 12: 4,
    13: 5, 14: 5, 15: 5, 16: 5,
    17: 6, 18: 6, 19: 6, 20: 6,
}


def get_proficiency_bonus(level: int) -> int:
    """Get proficiency bonus for a total character level (clamped to 1-20)."""
    return PROFICIENCY_BONUS[max(1, min(20, level))]


# =============================================================================
# Barbarian Progression
# =============================================================================

BARBARIAN_PROGRESSION: dict[int, dict[str, Any]] = {
    1: {"rages": 2, "rage_damage": 2, "features": ["Rage", "Unarmored Defense"]},
    2: {"rages": 2, "rage_damage": 2, "features": ["Reckless Attack", "Danger Sense"]},
    3: {"rages": 3, "rage_damage": 2, "features": ["Primal Path"]},
    4: {"rages": 3, "rage_damage": 2, "features": ["Ability Score Improvement"]},
    5: {"rages": 3, "rage_damage": 2, "features": ["Extra Attack", "Fast Movement"]},
    6: {"rages": 4, "rage_damage": 2, "features": ["Path feature"]},
    7: {"rages": 4, "rage_damage": 2, "features": ["Feral Instinct"]},
    8: {"rages": 4, "rage_damage": 2, "features": ["Ability Score Improvement"]},
    9: {"rages": 4, "rage_damage": 3, "features": ["Brutal Strike"]},
    10: {"rages": 4, "rage_damage": 3, "features": ["Path feature"]},
    11: {"rages": 4, "rage_damage": 3, "features": ["Relentless Rage"]},
    12: {"rages": 5, "rage_damage": 3, "features": ["Ability Score Improvement"]},
    13: {"rages": 5, "rage_damage": 3, "features": ["Improved Brutal Strike"]},
    14: {"rages": 5, "rage_damage": 3, "features": ["Path feature"]},
    15: {"rages": 5, "rage_damage": 3, "features": ["Persistent Rage"]},
    16: {"rages": 5, "rage_damage": 4, "features": ["Ability Score Improvement"]},
    17: {"rages": 6, "rage_damage": 4, "features": ["Improved Brutal Strike (2 effects)"]},
    18: {"rages": 6, "rage_damage": 4, "features": ["Indomitable Might"]},
    19: {"rages": 6, "rage_damage": 4, "features": ["Epic Boon"]},
    20: {"rages": UNLIMITED_RAGES, "rage_damage": 4, "features": ["Primal Champion"]},
}


def get_rages(barbarian_level: int) -> int:
    """Get rage uses per long rest. Zero without barbarian levels."""
    if barbarian_level <= 0:
        return 0
    return BARBARIAN_PROGRESSION[min(20, barbarian_level)]["rages"]


def get_rage_damage(barbarian_level: int) -> int:
    """Get the rage damage bonus. Zero without barbarian levels."""
    if barbarian_level <= 0:
        return 0
    return BARBARIAN_PROGRESSION[min(20, barbarian_level)]["rage_damage"]


def get_barbarian_features(barbarian_level: int) -> list[str]:
    """Get every barbarian feature gained up to and including a level."""
    features: list[str] = []
    for level in range(1, min(20, barbarian_level) + 1):
        features.extend(BARBARIAN_PROGRESSION[level]["features"])
    return features


# =============================================================================
# Extra Attack
# =============================================================================

FIGHTER_ATTACKS: dict[int, int] = {5: 2, 11: 3, 20: 4}
BARBARIAN_ATTACKS: dict[int, int] = {5: 2}


def _attacks_from(table: dict[int, int], class_level: int) -> int:
    attacks = 1
    for threshold, count in table.items():
        if class_level >= threshold:
            attacks = max(attacks, count)
    return attacks


def get_max_attacks(barbarian_level: int, fighter_level: int) -> int:
    """Get attacks per Attack action.

    Extra Attack does not stack between classes; the best source applies.
    """
    return max(
        _attacks_from(BARBARIAN_ATTACKS, barbarian_level),
        _attacks_from(FIGHTER_ATTACKS, fighter_level),
    )


__all__ = [
    "UNLIMITED_RAGES",
    "PROFICIENCY_BONUS",
    "BARBARIAN_PROGRESSION",
    "FIGHTER_ATTACKS",
    "BARBARIAN_ATTACKS",
    "get_proficiency_bonus",
    "get_rages",
    "get_rage_damage",
    "get_barbarian_features",
    "get_max_attacks",
]
