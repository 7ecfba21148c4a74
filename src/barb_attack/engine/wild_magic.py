"""Path of Wild Magic surge table.

A wild magic barbarian rolls on this table every time they rage. Some
effects roll a die when they trigger (temporary hit points or damage), and
some can be triggered again as a bonus action while the rage lasts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from barb_attack.core.logging import get_logger
from barb_attack.engine.dice import DiceRoller
from barb_attack.models.character import Character
from barb_attack.models.enums import SurgeCategory
from barb_attack.models.session import SurgeEffect

logger = get_logger(__name__)


SURGE_TABLE: tuple[SurgeEffect, ...] = (
    SurgeEffect(
        roll=1,
        description=(
            "Each creature of your choice within 30 feet must make a Constitution save "
            "or take 1d12 necrotic damage. You gain 1d12 temporary hit points."
        ),
        category=SurgeCategory.OFFENSIVE,
        duration="instant",
        requires_save=True,
        save_type="Constitution",
        damage_type="necrotic",
        damage_die=12,
    ),
    SurgeEffect(
        roll=2,
        description=(
            "You teleport up to 30 feet. Until rage ends, you can use this as a bonus "
            "action each turn."
        ),
        category=SurgeCategory.UTILITY,
        bonus_action_repeatable=True,
        damage_type="teleport",
    ),
    SurgeEffect(
        roll=3,
        description=(
            "A spirit appears within 5 feet of a creature within 30 feet. At turn end, "
            "creatures within 5 feet make Dex save or take 1d6 force damage. "
            "Repeatable as bonus action."
        ),
        category=SurgeCategory.OFFENSIVE,
        bonus_action_repeatable=True,
        requires_save=True,
        save_type="Dexterity",
        damage_type="force",
        damage_die=6,
    ),
    SurgeEffect(
        roll=4,
        description=(
            "One weapon becomes force damage with light and thrown properties "
            "(20/60 ft). Returns to hand at turn end."
        ),
        category=SurgeCategory.OFFENSIVE,
        damage_type="force",
    ),
    SurgeEffect(
        roll=5,
        description="When hit by an attack, attacker takes 1d6 force damage.",
        category=SurgeCategory.DEFENSIVE,
        damage_type="force",
    ),
    SurgeEffect(
        roll=6,
        description="You and allies within 10 feet gain +1 AC.",
        category=SurgeCategory.DEFENSIVE,
        damage_type="protective",
    ),
    SurgeEffect(
        roll=7,
        description="Ground within 15 feet becomes difficult terrain for enemies.",
        category=SurgeCategory.UTILITY,
        damage_type="terrain",
    ),
    SurgeEffect(
        roll=8,
        description=(
            "Creature within 30 feet makes Con save or takes 1d6 radiant damage and is "
            "blinded until start of your next turn. Repeatable as bonus action."
        ),
        category=SurgeCategory.OFFENSIVE,
        bonus_action_repeatable=True,
        requires_save=True,
        save_type="Constitution",
        damage_type="radiant",
        damage_die=6,
    ),
)

# What the triggered die means for each effect that rolls one.
_TRIGGER_TEXT: dict[int, str] = {
    1: "You gain {amount} temporary hit points!",
    3: "Spirit explosion: {amount} force damage!",
    8: "Radiant bolt: {amount} radiant damage + blinded!",
}

# Short menu names for the repeatable effects.
BONUS_ACTION_NAMES: dict[str, str] = {
    "teleport": "Wild Magic Teleport",
    "force": "Summon Spirit",
    "radiant": "Radiant Bolt",
}

SurgeOccasion = Literal["surge", "current", "bonus_action"]


@dataclass(frozen=True)
class SurgeTrigger:
    """A surge effect taking place, ready for display.

    Attributes:
        effect: The surge effect.
        save_dc: DC for the effect's saving throw, if it has one.
        amount: Result of the effect's die, if it rolls one.
        text: What the rolled amount means.
        occasion: Rolled on the table, shown as the current effect, or
            repeated as a bonus action.
    """

    effect: SurgeEffect
    save_dc: int | None = None
    amount: int | None = None
    text: str | None = None
    occasion: SurgeOccasion = "surge"


def surge_for_roll(roll: int) -> SurgeEffect:
    """Look up a table entry by its roll (1-8)."""
    if not 1 <= roll <= len(SURGE_TABLE):
        raise ValueError(f"Surge roll out of range: {roll}")
    return SURGE_TABLE[roll - 1]


def roll_surge(roller: DiceRoller, table_size: int = len(SURGE_TABLE)) -> SurgeEffect:
    """Roll on the surge table.

    Args:
        roller: Die roller.
        table_size: Number of table entries rolled over.

    Returns:
        The rolled effect.
    """
    roll = roller.roll(min(table_size, len(SURGE_TABLE)))
    effect = surge_for_roll(roll)
    logger.info("Wild magic surge", roll=roll, damage_type=effect.damage_type)
    return effect


def trigger_surge(
    effect: SurgeEffect,
    roller: DiceRoller,
    character: Character,
    *,
    occasion: SurgeOccasion = "surge",
) -> SurgeTrigger:
    """Resolve one occurrence of an effect: save DC and its die, if any."""
    save_dc = character.surge_save_dc if effect.requires_save else None
    amount: int | None = None
    text: str | None = None
    if effect.damage_die is not None:
        amount = roller.roll(effect.damage_die)
        template = _TRIGGER_TEXT.get(effect.roll)
        text = template.format(amount=amount) if template else f"{amount} {effect.damage_type} damage"
        logger.debug("Surge die rolled", roll=effect.roll, amount=amount)
    return SurgeTrigger(effect=effect, save_dc=save_dc, amount=amount, text=text, occasion=occasion)


def describe_surge(effect: SurgeEffect, character: Character) -> SurgeTrigger:
    """The active effect for display, without rolling anything."""
    save_dc = character.surge_save_dc if effect.requires_save else None
    return SurgeTrigger(effect=effect, save_dc=save_dc, occasion="current")


def bonus_action_name(effect: SurgeEffect) -> str:
    return BONUS_ACTION_NAMES.get(effect.damage_type, "Wild Magic Effect")


__all__ = [
    "SURGE_TABLE",
    "BONUS_ACTION_NAMES",
    "SurgeOccasion",
    "SurgeTrigger",
    "surge_for_roll",
    "roll_surge",
    "trigger_surge",
    "describe_surge",
    "bonus_action_name",
]
