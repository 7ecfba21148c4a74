"""Pydantic V2 schema for the player character.

The character is loaded once at startup and is read-only for the rest of
the session. Optional features are resolved to explicit flags at load time
so the rules engine never has to null-check nested configuration.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from barb_attack.models.enums import Feature
from barb_attack.models.progression import (
    get_barbarian_features,
    get_max_attacks,
    get_proficiency_bonus,
    get_rage_damage,
    get_rages,
)


class ClassLevel(BaseModel):
    """Levels held in one class.

    Attributes:
        name: Class name (case-insensitive when looked up).
        level: Levels in this class.
        subclass: Optional subclass identifier, e.g. ``wild_magic``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1, max_length=50, description="Class name")
    level: Annotated[int, Field(ge=1, le=20, description="Class level")]
    subclass: str | None = Field(default=None, description="Subclass identifier")


class Weapon(BaseModel):
    """The wielded weapon."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1, max_length=100, description="Weapon name")
    die: Annotated[int, Field(ge=2, le=20, description="Damage die size")]


class AttackModifiers(BaseModel):
    """Components summed into the attack roll modifier."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    strength: int = Field(default=0, description="Strength modifier")
    proficiency: int = Field(default=0, description="Proficiency bonus")
    magic_weapon: int = Field(default=0, description="Magic weapon bonus")


class BaseStats(BaseModel):
    """Ability modifiers the engine needs outside the attack roll."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    constitution_modifier: int = Field(default=0, description="CON modifier")


class FeatureFlag(BaseModel):
    """An optional feature as written in the character file.

    Keys left out read as false: a feature must say ``"enabled": true`` to
    be used and ``"once_per_turn": true`` to be limited to once per turn.
    The legacy ``available`` key is runtime state and lives in the session
    now, so it is ignored here.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    enabled: bool = False
    once_per_turn: bool = False


class CharacterFeatures(BaseModel):
    """All optional features, each resolved to an explicit flag."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    brutal_strike: FeatureFlag = Field(default_factory=FeatureFlag)
    savage_attacks: FeatureFlag = Field(default_factory=FeatureFlag)
    great_weapon_fighting: FeatureFlag = Field(default_factory=FeatureFlag)
    great_weapon_master: FeatureFlag = Field(
        default_factory=FeatureFlag,
        validation_alias=AliasChoices("great_weapon_master", "gwm"),
    )

    def get(self, feature: Feature) -> FeatureFlag:
        return getattr(self, feature.value)


class SupplementalDie(BaseModel):
    """Extra damage die rolled separately from the weapon (e.g. a flame tongue)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    die: Annotated[int, Field(ge=2, le=20, description="Die size")]
    description: str = Field(min_length=1, max_length=100, description="Damage label")


class Character(BaseModel):
    """The player character.

    Attributes:
        name: Character name.
        classes: Class levels (at least one).
        primary_class: Class shown in menus; defaults to the first class.
        weapon: Wielded weapon.
        attack_modifiers: Attack roll modifier components.
        base_stats: Other ability modifiers.
        features: Optional feature flags.
        damage_bonuses: Named flat damage bonuses, summed.
        additional_damage_dice: Named supplemental damage dice.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1, max_length=100, description="Character name")
    classes: list[ClassLevel] = Field(min_length=1, description="Class levels")
    primary_class: str | None = Field(default=None, description="Primary class name")
    weapon: Weapon
    attack_modifiers: AttackModifiers = Field(default_factory=AttackModifiers)
    base_stats: BaseStats = Field(default_factory=BaseStats)
    features: CharacterFeatures = Field(default_factory=CharacterFeatures)
    damage_bonuses: dict[str, int] = Field(default_factory=dict)
    additional_damage_dice: dict[str, SupplementalDie] = Field(default_factory=dict)

    @field_validator("classes")
    @classmethod
    def validate_unique_classes(cls, value: list[ClassLevel]) -> list[ClassLevel]:
        """Reject the same class listed twice."""
        names = [c.name.lower() for c in value]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate class entries: {names}")
        return value

    @model_validator(mode="before")
    @classmethod
    def default_primary_class(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("primary_class"):
            classes = data.get("classes") or []
            if classes:
                first = classes[0]
                name = first.get("name") if isinstance(first, dict) else getattr(first, "name", None)
                data = {**data, "primary_class": name}
        return data

    # -------------------------------------------------------------------------
    # Class lookups
    # -------------------------------------------------------------------------

    def class_level(self, class_name: str) -> int:
        """Levels held in a class, zero if the character has none."""
        wanted = class_name.lower()
        return next((c.level for c in self.classes if c.name.lower() == wanted), 0)

    def subclass(self, class_name: str) -> str | None:
        wanted = class_name.lower()
        return next((c.subclass for c in self.classes if c.name.lower() == wanted), None)

    def has_class(self, class_name: str) -> bool:
        return self.class_level(class_name) > 0

    @property
    def level(self) -> int:
        return sum(c.level for c in self.classes)

    @property
    def barbarian_level(self) -> int:
        return self.class_level("barbarian")

    @property
    def fighter_level(self) -> int:
        return self.class_level("fighter")

    @property
    def primary_subclass(self) -> str | None:
        return self.subclass(self.primary_class) if self.primary_class else None

    @property
    def is_wild_magic(self) -> bool:
        """Path of Wild Magic barbarians surge when they rage (from level 3)."""
        subclass = self.subclass("barbarian")
        return (
            subclass is not None
            and subclass.lower() == "wild_magic"
            and self.barbarian_level >= 3
        )

    # -------------------------------------------------------------------------
    # Derived numbers
    # -------------------------------------------------------------------------

    @property
    def attack_modifier(self) -> int:
        mods = self.attack_modifiers
        return mods.strength + mods.proficiency + mods.magic_weapon

    @property
    def proficiency_bonus(self) -> int:
        return get_proficiency_bonus(self.level)

    @property
    def max_attacks(self) -> int:
        return get_max_attacks(self.barbarian_level, self.fighter_level)

    @property
    def rage_damage(self) -> int:
        return get_rage_damage(self.barbarian_level)

    @property
    def max_rages(self) -> int:
        return get_rages(self.barbarian_level)

    @property
    def can_rage(self) -> bool:
        return self.barbarian_level >= 1

    @property
    def surge_save_dc(self) -> int:
        """Save DC for wild magic surge effects (8 + proficiency + CON)."""
        return 8 + self.proficiency_bonus + self.base_stats.constitution_modifier

    @property
    def class_features(self) -> list[str]:
        return get_barbarian_features(self.barbarian_level)

    def has_feature(self, feature: Feature) -> bool:
        return self.features.get(feature).enabled

    def is_once_per_turn(self, feature: Feature) -> bool:
        flag = self.features.get(feature)
        return flag.enabled and flag.once_per_turn

    @property
    def flat_damage_bonus(self) -> int:
        return sum(self.damage_bonuses.values())


__all__ = [
    "ClassLevel",
    "Weapon",
    "AttackModifiers",
    "BaseStats",
    "FeatureFlag",
    "CharacterFeatures",
    "SupplementalDie",
    "Character",
]
