"""Damage resolution.

Computes weapon damage for one hit in a fixed order:

1. Weapon dice (two on a critical), each with the Great Weapon Fighting
   reroll when the character has it.
2. Savage Attacks: reroll and keep the higher die, or the higher pair on a
   critical.
3. Brutal Strike bonus die.
4. Heroic Inspiration: offer to reroll the lowest kept die.
5. Flat bonuses, plus rage damage while raging when the rules enable it.
6. Supplemental dice, reported separately.

The lowest-die check has to see the final set of kept dice, so the order
matters.
"""

from __future__ import annotations

from dataclasses import dataclass

from barb_attack.core.config import RulesSettings
from barb_attack.core.logging import get_logger
from barb_attack.engine.dice import DiceRoller
from barb_attack.engine.history import TurnHistory
from barb_attack.engine.oracle import Notice, Oracle, Rolling, ask_yes_no
from barb_attack.engine.resources import ResourceState
from barb_attack.models.character import Character
from barb_attack.models.enums import AttackMode, Feature
from barb_attack.models.results import (
    AttackRollResult,
    DamageFlags,
    DamageRollResult,
    HeroicInspirationUse,
    SupplementalDamage,
)

logger = get_logger(__name__)


@dataclass
class DieTerm:
    """A kept damage die and where it came from."""

    value: int
    die: int
    source: str

    @property
    def notation(self) -> str:
        return f"d{self.die}({self.value})"


class DamageResolver:
    """Roll damage for the character.

    Attributes:
        character: The character dealing damage.
        resources: Session resources (heroic inspiration, feature availability).
    """

    def __init__(
        self,
        character: Character,
        resources: ResourceState,
        roller: DiceRoller,
        oracle: Oracle,
        history: TurnHistory,
        rules: RulesSettings | None = None,
    ) -> None:
        self.character = character
        self.resources = resources
        self._roller = roller
        self._oracle = oracle
        self._history = history
        self._rules = rules or RulesSettings()

    # -------------------------------------------------------------------------
    # Computation
    # -------------------------------------------------------------------------

    def compute_damage(
        self,
        *,
        critical: bool = False,
        use_bonus_die: bool = False,
        use_reroll_keep_higher: bool = False,
    ) -> DamageRollResult:
        """Roll damage for one hit.

        Args:
            critical: Roll the weapon dice twice.
            use_bonus_die: Add the Brutal Strike die.
            use_reroll_keep_higher: Apply Savage Attacks.

        Returns:
            DamageRollResult with totals, breakdown and explanation.
        """
        character = self.character
        reroll_low = character.has_feature(Feature.GREAT_WEAPON_FIGHTING)

        terms, explanations = self._roll_weapon_dice(critical, use_reroll_keep_higher, reroll_low)

        if use_bonus_die:
            bonus_die = self._rules.brutal_strike_die
            value = self._roller.roll(bonus_die, reroll_low=reroll_low)
            terms.append(DieTerm(value=value, die=bonus_die, source="Brutal Strike"))
            explanations.append(f"1d{bonus_die} Brutal Strike")

        heroic = self._offer_heroic_inspiration(terms)

        flat_terms = dict(character.damage_bonuses)
        rage_bonus = self.resources.rage_damage_bonus(character) if self._rules.add_rage_damage else 0
        if rage_bonus:
            flat_terms["rage"] = rage_bonus
        flat_total = sum(flat_terms.values())
        explanations.extend(
            f"{value} {source.replace('_', ' ')}" for source, value in flat_terms.items()
        )

        additional = [
            SupplementalDamage(
                type=extra.description,
                amount=self._roller.roll(extra.die),
                die=extra.die,
            )
            for extra in character.additional_damage_dice.values()
        ]

        dice_total = sum(term.value for term in terms)
        breakdown = " + ".join(term.notation for term in terms)
        if flat_total > 0:
            breakdown += f" + {flat_total}"
        elif flat_total < 0:
            breakdown += f" - {-flat_total}"

        explanation = " + ".join(explanations)
        if heroic is not None:
            explanation += (
                f" [Heroic Inspiration: {heroic.source} {heroic.original_roll}→{heroic.new_roll}]"
            )

        if use_bonus_die:
            self.resources.use_feature(character, Feature.BRUTAL_STRIKE)
        if use_reroll_keep_higher:
            self.resources.use_feature(character, Feature.SAVAGE_ATTACKS)

        result = DamageRollResult(
            weapon_total=max(0, dice_total + flat_total),
            additional_damage=additional,
            breakdown=breakdown,
            explanation=explanation,
            heroic_used=heroic,
            critical=critical,
            flags=DamageFlags(
                bonus_die=use_bonus_die,
                reroll_keep_higher=use_reroll_keep_higher,
                reroll_low=reroll_low,
                rage=bool(rage_bonus),
            ),
        )
        logger.debug(
            "Damage rolled",
            weapon_total=result.weapon_total,
            breakdown=breakdown,
            critical=critical,
            heroic=heroic is not None,
        )
        return result

    def _roll_weapon_dice(
        self,
        critical: bool,
        keep_higher: bool,
        reroll_low: bool,
    ) -> tuple[list[DieTerm], list[str]]:
        die = self.character.weapon.die
        name = self.character.weapon.name

        if not critical:
            first = self._roller.roll(die, reroll_low=reroll_low)
            term = DieTerm(value=first, die=die, source=f"{name} damage")
            if not keep_higher:
                return [term], [f"1d{die} {name} damage"]
            second = self._roller.roll(die, reroll_low=reroll_low)
            if second > first:
                return (
                    [DieTerm(value=second, die=die, source=f"{name} savage")],
                    [f"1d{die} {name} + Savage Attacks ({second} > {first})"],
                )
            return [term], [f"1d{die} {name} + Savage Attacks didn't help ({second} ≤ {first})"]

        originals = [self._roller.roll(die, reroll_low=reroll_low) for _ in range(2)]
        terms = [
            DieTerm(value=value, die=die, source=f"{name} crit die {index}")
            for index, value in enumerate(originals, start=1)
        ]
        if not keep_higher:
            return terms, [f"2d{die} {name} critical"]

        rerolls = [self._roller.roll(die, reroll_low=reroll_low) for _ in range(2)]
        original_sum, reroll_sum = sum(originals), sum(rerolls)
        comparison = (
            f"{rerolls[0]}+{rerolls[1]}={reroll_sum}"
            f" {{}} {originals[0]}+{originals[1]}={original_sum}"
        )
        if reroll_sum > original_sum:
            savage_terms = [
                DieTerm(value=value, die=die, source=f"{name} savage die {index}")
                for index, value in enumerate(rerolls, start=1)
            ]
            return savage_terms, [
                f"2d{die} {name} critical + Savage Attacks ({comparison.format('>')})"
            ]
        return terms, [
            f"2d{die} {name} critical + Savage Attacks didn't help ({comparison.format('≤')})"
        ]

    def _offer_heroic_inspiration(self, terms: list[DieTerm]) -> HeroicInspirationUse | None:
        """Offer to reroll the lowest kept die, updating ``terms`` in place."""
        if not self.resources.heroic_inspiration or not terms:
            return None

        lowest = min(terms, key=lambda term: term.value)
        if lowest.value > self._rules.heroic_inspiration_max_roll:
            return None

        self._oracle.show(Notice(f"You rolled a {lowest.value} on your {lowest.source}."))
        if not ask_yes_no(
            self._oracle,
            f"Use Heroic Inspiration to reroll the {lowest.value}?",
            default=True,
        ):
            return None

        original = lowest.value
        lowest.value = self._roller.roll(lowest.die)
        self.resources.use_heroic_inspiration()
        self._oracle.show(
            Notice(f"Heroic Inspiration: {original} -> {lowest.value}", level="magic")
        )
        logger.info("Heroic inspiration used", source=lowest.source, original=original, new=lowest.value)
        return HeroicInspirationUse(original_roll=original, new_roll=lowest.value, source=lowest.source)

    # -------------------------------------------------------------------------
    # Interactive wrappers
    # -------------------------------------------------------------------------

    def roll_after_hit(self, attack: AttackRollResult) -> DamageRollResult:
        """Roll damage for a hit, offering the modifiers the attack left open.

        Brutal Strike is offered unless the hit already carries the bonus die
        or came from an advantage roll. Savage Attacks is offered whenever it
        is available.
        """
        critical = attack.is_critical
        use_bonus_die = attack.uses_bonus_die

        if critical:
            self._oracle.show(Notice("CRITICAL HIT - Double weapon dice!", level="danger"))
        if use_bonus_die:
            self._oracle.show(
                Notice(f"BRUTAL STRIKE - Extra 1d{self._rules.brutal_strike_die} damage!", level="danger")
            )

        if (
            not use_bonus_die
            and attack.mode is not AttackMode.ADVANTAGE
            and self.resources.is_feature_available(self.character, Feature.BRUTAL_STRIKE)
        ):
            use_bonus_die = ask_yes_no(
                self._oracle,
                f"Brutal Strike (1d{self._rules.brutal_strike_die} extra damage, once per turn)?",
            )

        use_keep_higher = self._ask_savage_attacks()
        return self._roll_and_record(critical, use_bonus_die, use_keep_higher)

    def roll_standalone(self) -> DamageRollResult:
        """Quick damage roll, asking which modifiers apply."""
        self._oracle.show(Notice(self.heroic_status()))
        critical = ask_yes_no(self._oracle, "Critical Hit (double weapon dice)?")

        use_bonus_die = False
        if self.resources.is_feature_available(self.character, Feature.BRUTAL_STRIKE):
            use_bonus_die = ask_yes_no(
                self._oracle,
                f"Brutal Strike (1d{self._rules.brutal_strike_die} extra damage, once per turn)?",
            )

        use_keep_higher = self._ask_savage_attacks()
        return self._roll_and_record(critical, use_bonus_die, use_keep_higher)

    def heroic_status(self) -> str:
        available = "Available" if self.resources.heroic_inspiration else "Used"
        return f"Heroic Inspiration: {available}"

    def _ask_savage_attacks(self) -> bool:
        if not self.resources.is_feature_available(self.character, Feature.SAVAGE_ATTACKS):
            return False
        return ask_yes_no(
            self._oracle,
            "Savage Attacks (reroll weapon dice, keep higher, once per turn)?",
        )

    def _roll_and_record(self, critical: bool, use_bonus_die: bool, use_keep_higher: bool) -> DamageRollResult:
        self._oracle.show(Rolling("Rolling damage dice..."))
        result = self.compute_damage(
            critical=critical,
            use_bonus_die=use_bonus_die,
            use_reroll_keep_higher=use_keep_higher,
        )
        self._oracle.show(result)
        self._history.record_damage(
            result.total,
            result.breakdown,
            modifier_labels(result),
            additional=result.additional_damage,
            heroic=result.heroic_used,
            turn_number=self.resources.current_turn,
        )
        return result


def modifier_labels(result: DamageRollResult) -> str:
    """Comma-separated names of the modifiers behind a damage roll."""
    labels = []
    if result.critical:
        labels.append("critical")
    if result.flags.bonus_die:
        labels.append("brutal")
    if result.flags.reroll_keep_higher:
        labels.append("savage")
    if result.flags.rage:
        labels.append("rage")
    return ", ".join(labels)


__all__ = [
    "DieTerm",
    "DamageResolver",
    "modifier_labels",
]
