"""Enumeration types shared by the models and the rules engine."""

from __future__ import annotations

from enum import StrEnum


class AttackMode(StrEnum):
    """How the attack die is rolled.

    FORGO_ADVANTAGE is Brutal Strike: a single d20 in exchange for a bonus
    damage die on a hit.
    """

    NORMAL = "normal"
    ADVANTAGE = "advantage"
    FORGO_ADVANTAGE = "forgo_advantage"

    @property
    def label(self) -> str:
        return _ATTACK_MODE_LABELS[self]


_ATTACK_MODE_LABELS = {
    AttackMode.NORMAL: "Normal Attack",
    AttackMode.ADVANTAGE: "Reckless Attack (Advantage)",
    AttackMode.FORGO_ADVANTAGE: "Brutal Strike (forgo advantage for extra damage)",
}


class Feature(StrEnum):
    """Optional character features read from the character file."""

    BRUTAL_STRIKE = "brutal_strike"
    SAVAGE_ATTACKS = "savage_attacks"
    GREAT_WEAPON_FIGHTING = "great_weapon_fighting"
    GREAT_WEAPON_MASTER = "great_weapon_master"


class ActionType(StrEnum):
    """Kinds of entries recorded in the turn history."""

    ATTACK = "attack"
    DAMAGE = "damage"
    BONUS_ACTION = "bonus_action"


class TurnPhase(StrEnum):
    """Turn lifecycle states."""

    NOT_STARTED = "not_started"
    IN_TURN = "in_turn"
    ENDED = "ended"


class SurgeCategory(StrEnum):
    """Broad category of a wild magic surge effect."""

    OFFENSIVE = "offensive"
    DEFENSIVE = "defensive"
    UTILITY = "utility"


__all__ = [
    "AttackMode",
    "Feature",
    "ActionType",
    "TurnPhase",
    "SurgeCategory",
]
