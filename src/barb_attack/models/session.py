"""Pydantic V2 schemas for the persisted session state.

The session is the mutable half of the data model: turn counter, rage,
heroic inspiration, once-per-turn feature availability and the active wild
magic surge. It is validated on load and on every transition.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from barb_attack.models.enums import SurgeCategory


class SurgeEffect(BaseModel):
    """One entry of the wild magic surge table.

    Attributes:
        roll: Table roll that produced this effect.
        description: Rules text shown to the player.
        category: Offensive, defensive or utility.
        duration: ``instant`` or ``rage`` (lasts until rage ends).
        bonus_action_repeatable: Can be re-triggered as a bonus action.
        requires_save: Whether targets make a saving throw.
        save_type: Ability used for the save.
        damage_type: Flavour key used for decoration (necrotic, force, ...).
        damage_die: Die rolled when the effect is (re)triggered, if any.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    roll: Annotated[int, Field(ge=1, le=8, description="Surge table roll")]
    description: str = Field(min_length=1, description="Effect text")
    category: SurgeCategory = Field(alias="effect_type", description="Effect category")
    duration: Literal["instant", "rage"] = Field(default="rage", description="Duration")
    bonus_action_repeatable: bool = Field(default=False, description="Repeatable as bonus action")
    requires_save: bool = Field(default=False, description="Targets make a save")
    save_type: str | None = Field(default=None, description="Save ability")
    damage_type: str = Field(default="force", description="Damage/flavour type")
    damage_die: int | None = Field(default=None, description="Die rolled on trigger")


class TempEffect(BaseModel):
    """A temporary effect noted by the player; persisted, not applied by the engine."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="")
    duration: int | Literal["encounter", "manual"] = Field(default="manual")
    effect_type: Literal["damage_bonus", "damage_die", "modifier"] = Field(default="modifier")
    value: int | str = Field(default=0)


class SessionState(BaseModel):
    """Mutable per-session resource state.

    Attributes:
        current_turn: Turn counter, starts at 1.
        heroic_inspiration: Heroic Inspiration is available.
        rage_active: Rage is currently active.
        rages_remaining: Rage uses left until the next long rest.
        brutal_strike_available: Brutal Strike not yet used this turn.
        savage_attacks_available: Savage Attacks not yet used this turn.
        current_surge: Active wild magic surge effect (only while raging).
        temp_effects: Player-tracked temporary effects.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
    )

    current_turn: Annotated[int, Field(ge=1, description="Current turn")] = 1
    heroic_inspiration: bool = Field(default=True, description="Heroic Inspiration available")
    rage_active: bool = Field(default=False, description="Rage active")
    rages_remaining: Annotated[int, Field(ge=0, description="Rages remaining")] = 0
    brutal_strike_available: bool = Field(default=True, description="Brutal Strike available")
    savage_attacks_available: bool = Field(default=True, description="Savage Attacks available")
    current_surge: SurgeEffect | None = Field(
        default=None,
        validation_alias="current_wild_magic",
        serialization_alias="current_wild_magic",
        description="Active surge effect",
    )
    temp_effects: list[TempEffect] = Field(default_factory=list, description="Temporary effects")

    @model_validator(mode="after")
    def validate_surge_requires_rage(self) -> "SessionState":
        """A surge effect only exists while raging."""
        if self.current_surge is not None and not self.rage_active:
            raise ValueError("current_wild_magic is set but rage is not active")
        return self


__all__ = [
    "SurgeEffect",
    "TempEffect",
    "SessionState",
]
