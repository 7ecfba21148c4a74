"""Rules engine for the barbarian combat assistant.

This module provides the combat rules: dice, session resources, attack and
damage resolution, rage and wild magic, bonus actions and the turn
lifecycle.

Submodules:
    dice: Single-die rolls with reroll and override policies (d20 library)
    resources: Session resource state with validated, persisted transitions
    attack: Attack rolls and the hit/miss flow
    damage: Damage rolls with critical, Savage Attacks, Brutal Strike and
        Heroic Inspiration
    turn_manager: Turn lifecycle and turn menu loop
    service: Wiring for one character's session

Example:
    >>> from barb_attack.engine import build_service
    >>>
    >>> service = build_service(get_settings(), oracle)
    >>> service.turns.run()
"""

from __future__ import annotations

# =============================================================================
# Dice Rolling
# =============================================================================
from barb_attack.engine.dice import ATTACK_DIE, DiceRoller, DieOutcome

# =============================================================================
# Oracle & History
# =============================================================================
from barb_attack.engine.history import TurnAction, TurnHistory, TurnSummary
from barb_attack.engine.oracle import MenuChoice, Notice, Oracle, Rolling, ask_yes_no

# =============================================================================
# State
# =============================================================================
from barb_attack.engine.preferences import Preferences
from barb_attack.engine.resources import ResourceState, new_session

# =============================================================================
# Rules
# =============================================================================
from barb_attack.engine.attack import AttackOutcome, AttackResolver
from barb_attack.engine.bonus_actions import (
    BonusActionDispatcher,
    BonusActionKind,
    BonusActionOption,
    BonusActionResult,
)
from barb_attack.engine.damage import DamageResolver
from barb_attack.engine.rage import RageManager
from barb_attack.engine.wild_magic import SURGE_TABLE, SurgeTrigger, roll_surge, trigger_surge

# =============================================================================
# Turn Lifecycle & Service
# =============================================================================
from barb_attack.engine.service import CombatService, build_service
from barb_attack.engine.turn_manager import TurnManager, TurnMenuAction, TurnState, TurnStatus


__all__ = [
    # Dice
    "ATTACK_DIE",
    "DiceRoller",
    "DieOutcome",
    # Oracle & History
    "MenuChoice",
    "Notice",
    "Oracle",
    "Rolling",
    "ask_yes_no",
    "TurnAction",
    "TurnHistory",
    "TurnSummary",
    # State
    "Preferences",
    "ResourceState",
    "new_session",
    # Rules
    "AttackOutcome",
    "AttackResolver",
    "BonusActionDispatcher",
    "BonusActionKind",
    "BonusActionOption",
    "BonusActionResult",
    "DamageResolver",
    "RageManager",
    "SURGE_TABLE",
    "SurgeTrigger",
    "roll_surge",
    "trigger_surge",
    # Turn Lifecycle & Service
    "CombatService",
    "build_service",
    "TurnManager",
    "TurnMenuAction",
    "TurnState",
    "TurnStatus",
]
