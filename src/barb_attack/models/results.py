"""Result models produced by the attack and damage resolvers.

These are never persisted; they are handed to the oracle for display and
summarized into the turn history.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from barb_attack.models.enums import AttackMode


class AttackRollResult(BaseModel):
    """One attack roll.

    Attributes:
        rolls: Every d20 rolled (two with advantage).
        d20_roll: The kept d20.
        modifier: Attack modifier added to the kept die.
        total: ``d20_roll + modifier``.
        is_critical: Kept die is a natural 20.
        is_fumble: Kept die is a natural 1.
        mode: How the attack was rolled.
        breakdown: Arithmetic summary, e.g. ``17 + 9 = 26``.
        explanation: Dice trace, e.g. ``d20(17, 4) + 9 [Advantage]``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    rolls: list[int] = Field(min_length=1, description="Raw d20 rolls")
    d20_roll: Annotated[int, Field(ge=1, le=20, description="Kept d20")]
    modifier: int = Field(description="Attack modifier")
    total: int = Field(description="Attack total")
    is_critical: bool = Field(default=False, description="Natural 20")
    is_fumble: bool = Field(default=False, description="Natural 1")
    mode: AttackMode = Field(default=AttackMode.NORMAL, description="Attack mode")
    breakdown: str = Field(default="", description="Arithmetic summary")
    explanation: str = Field(default="", description="Dice trace")

    @property
    def uses_bonus_die(self) -> bool:
        """Brutal Strike attacks add a bonus damage die on a hit."""
        return self.mode is AttackMode.FORGO_ADVANTAGE


class SupplementalDamage(BaseModel):
    """Damage from one supplemental die, reported separately from the weapon."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: str = Field(description="Damage label")
    amount: Annotated[int, Field(ge=0)]
    die: int = Field(ge=2, description="Die size")


class HeroicInspirationUse(BaseModel):
    """Record of a Heroic Inspiration reroll."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    original_roll: int
    new_roll: int
    source: str = Field(description="Label of the rerolled die")

    @property
    def delta(self) -> int:
        return self.new_roll - self.original_roll


class DamageFlags(BaseModel):
    """Which optional modifiers shaped a damage roll."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    bonus_die: bool = False
    reroll_keep_higher: bool = False
    reroll_low: bool = False
    rage: bool = False


class DamageRollResult(BaseModel):
    """One damage roll.

    Attributes:
        weapon_total: Weapon dice, bonus die and flat bonuses, after any
            Heroic Inspiration delta.
        additional_damage: Supplemental dice, one entry each.
        breakdown: Kept dice and flat sum, e.g. ``d10(6) + d10(8) + 5``.
        explanation: Prose trace of every term.
        heroic_used: Heroic Inspiration reroll, if one happened.
        critical: Rolled as a critical hit.
        flags: Optional modifiers applied.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    weapon_total: Annotated[int, Field(ge=0, description="Weapon damage total")]
    additional_damage: list[SupplementalDamage] = Field(default_factory=list)
    breakdown: str = Field(default="", description="Dice summary")
    explanation: str = Field(default="", description="Prose trace")
    heroic_used: HeroicInspirationUse | None = None
    critical: bool = False
    flags: DamageFlags = Field(default_factory=DamageFlags)

    @property
    def supplemental_total(self) -> int:
        return sum(extra.amount for extra in self.additional_damage)

    @property
    def total(self) -> int:
        """Everything dealt, weapon and supplemental."""
        return self.weapon_total + self.supplemental_total


__all__ = [
    "AttackRollResult",
    "SupplementalDamage",
    "HeroicInspirationUse",
    "DamageFlags",
    "DamageRollResult",
]
