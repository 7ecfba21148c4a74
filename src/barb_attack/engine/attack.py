"""Attack resolution: roll to hit, ask whether it connected, roll damage."""

from __future__ import annotations

from dataclasses import dataclass

from barb_attack.core.config import RulesSettings
from barb_attack.core.logging import get_logger
from barb_attack.engine.damage import DamageResolver
from barb_attack.engine.dice import ATTACK_DIE, DiceRoller
from barb_attack.engine.history import TurnHistory
from barb_attack.engine.oracle import MenuChoice, Notice, Oracle, ask_yes_no
from barb_attack.engine.preferences import Preferences
from barb_attack.engine.resources import ResourceState
from barb_attack.models.character import Character
from barb_attack.models.enums import AttackMode, Feature
from barb_attack.models.results import AttackRollResult, DamageRollResult

logger = get_logger(__name__)

_HISTORY_LABELS = {
    AttackMode.NORMAL: "Normal",
    AttackMode.ADVANTAGE: "Reckless",
    AttackMode.FORGO_ADVANTAGE: "Brutal Strike",
}


@dataclass(frozen=True)
class AttackOutcome:
    """What happened when the character attacked.

    Attributes:
        attempts: Every attack roll made, including a house-rule reroll.
        hit: The final attempt connected.
        critical: A critical roll connected.
        damage: Damage rolled for the hit, if any.
    """

    attempts: tuple[AttackRollResult, ...]
    hit: bool
    critical: bool = False
    damage: DamageRollResult | None = None

    @property
    def final(self) -> AttackRollResult:
        return self.attempts[-1]


class AttackResolver:
    """Roll attacks for the character."""

    def __init__(
        self,
        character: Character,
        resources: ResourceState,
        roller: DiceRoller,
        oracle: Oracle,
        history: TurnHistory,
        damage: DamageResolver,
        *,
        rules: RulesSettings | None = None,
        preferences: Preferences | None = None,
    ) -> None:
        self.character = character
        self.resources = resources
        self._roller = roller
        self._oracle = oracle
        self._history = history
        self._damage = damage
        self._rules = rules or RulesSettings()
        self._preferences = preferences

    @property
    def always_crit(self) -> bool:
        """Testing override: every attack die comes up 20."""
        return self._preferences.always_crit if self._preferences else False

    def available_modes(self) -> list[AttackMode]:
        """Attack modes the player may pick right now."""
        modes = [AttackMode.NORMAL, AttackMode.ADVANTAGE]
        if self.resources.is_feature_available(self.character, Feature.BRUTAL_STRIKE):
            modes.append(AttackMode.FORGO_ADVANTAGE)
        return modes

    def roll_attack(self, mode: AttackMode = AttackMode.NORMAL) -> AttackRollResult:
        """Roll the attack die for a mode.

        Args:
            mode: Normal, advantage (two d20s, keep higher) or forgo advantage.

        Returns:
            AttackRollResult for the roll.
        """
        modifier = self.character.attack_modifier
        rolls = [self._roller.roll(ATTACK_DIE, force_max=self.always_crit)]
        if mode is AttackMode.ADVANTAGE:
            rolls.append(self._roller.roll(ATTACK_DIE, force_max=self.always_crit))
        kept = max(rolls)
        total = kept + modifier

        sign = "+" if modifier >= 0 else "-"
        dice = ", ".join(str(roll) for roll in rolls)
        explanation = f"d20({dice}) {sign} {abs(modifier)}"
        if mode is AttackMode.ADVANTAGE:
            explanation += " [Advantage]"
        elif mode is AttackMode.FORGO_ADVANTAGE:
            explanation += " [Brutal Strike - no advantage]"

        result = AttackRollResult(
            rolls=rolls,
            d20_roll=kept,
            modifier=modifier,
            total=total,
            is_critical=kept == ATTACK_DIE,
            is_fumble=kept == 1,
            mode=mode,
            breakdown=f"{kept} {sign} {abs(modifier)} = {total}",
            explanation=explanation,
        )
        logger.debug("Attack rolled", mode=mode.value, rolls=rolls, total=total)
        return result

    def resolve(self, *, auto_damage: bool = True, label: str = "Attack") -> AttackOutcome:
        """Run one attack interactively.

        Args:
            auto_damage: Roll damage straight away on a hit.
            label: Heading shown before the attack, e.g. ``Attack 2 of 2``.

        Returns:
            AttackOutcome for the attack.

        Raises:
            PromptInterruptedError: If the attack mode prompt is aborted.
        """
        self._oracle.show(Notice(label, level="info"))
        mode = self._oracle.choose(
            "Choose attack type:",
            [MenuChoice(mode.label, mode) for mode in self.available_modes()],
        )
        if mode is AttackMode.ADVANTAGE:
            self._oracle.show(
                Notice("Enemies have advantage on attacks against you until your next turn.", level="warning")
            )

        attempts = [self.roll_attack(mode)]
        hit = self._ask_hit(attempts[-1])

        if not hit and mode is AttackMode.NORMAL and self._rules.house_rule_reckless_reroll:
            if ask_yes_no(self._oracle, "Missed! Reroll with Reckless Attack (advantage)?"):
                attempts.append(self.roll_attack(AttackMode.ADVANTAGE))
                hit = self._ask_hit(attempts[-1])

        final = attempts[-1]
        damage = self._damage.roll_after_hit(final) if hit and auto_damage else None
        outcome = AttackOutcome(
            attempts=tuple(attempts),
            hit=hit,
            critical=hit and final.is_critical,
            damage=damage,
        )
        logger.info(
            "Attack resolved",
            mode=final.mode.value,
            total=final.total,
            hit=hit,
            critical=outcome.critical,
        )
        return outcome

    def _ask_hit(self, result: AttackRollResult) -> bool:
        self._oracle.show(result)
        hit = ask_yes_no(self._oracle, f"Did {result.total} hit?", default=True)
        self._history.record_attack(
            _HISTORY_LABELS[result.mode],
            result.d20_roll,
            hit,
            turn_number=self.resources.current_turn,
        )
        return hit


__all__ = [
    "AttackOutcome",
    "AttackResolver",
]
