"""Bonus actions available during a turn.

Only one bonus action can be taken per turn. Which ones are offered depends
on rage state, the active surge effect and whether a critical hit has
unlocked the Great Weapon Master hew attack.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from barb_attack.core.logging import get_logger
from barb_attack.engine.attack import AttackOutcome, AttackResolver
from barb_attack.engine.dice import DiceRoller
from barb_attack.engine.history import TurnHistory
from barb_attack.engine.oracle import Notice, Oracle
from barb_attack.engine.rage import RageManager
from barb_attack.engine.resources import ResourceState
from barb_attack.engine.wild_magic import bonus_action_name, trigger_surge
from barb_attack.models.character import Character
from barb_attack.models.enums import Feature

logger = get_logger(__name__)


class BonusActionKind(StrEnum):
    """Bonus actions the dispatcher knows how to run."""

    ACTIVATE_RAGE = "activate_rage"
    END_RAGE = "end_rage"
    GWM_HEW = "gwm_hew"
    WILD_MAGIC = "wild_magic"


@dataclass(frozen=True)
class BonusActionOption:
    """An offered bonus action."""

    kind: BonusActionKind
    name: str
    description: str


@dataclass(frozen=True)
class BonusActionResult:
    """Outcome of a bonus action.

    Attributes:
        kind: Which bonus action ran.
        used: The bonus action was spent.
        attack: Attack made by a hew, if any.
    """

    kind: BonusActionKind
    used: bool
    attack: AttackOutcome | None = None


class BonusActionDispatcher:
    """List and run bonus actions."""

    def __init__(
        self,
        character: Character,
        resources: ResourceState,
        rage: RageManager,
        attack: AttackResolver,
        roller: DiceRoller,
        oracle: Oracle,
        history: TurnHistory,
    ) -> None:
        self.character = character
        self.resources = resources
        self._rage = rage
        self._attack = attack
        self._roller = roller
        self._oracle = oracle
        self._history = history

    def options(self, *, hew_unlocked: bool = False) -> list[BonusActionOption]:
        """Bonus actions available right now.

        Args:
            hew_unlocked: A critical hit this turn unlocked the hew attack.
        """
        options: list[BonusActionOption] = []

        if self._rage.can_activate():
            options.append(
                BonusActionOption(
                    BonusActionKind.ACTIVATE_RAGE,
                    "Activate Rage",
                    f"Start raging ({self.resources.rages_remaining} uses remaining)",
                )
            )

        if self.resources.rage_active:
            options.append(
                BonusActionOption(
                    BonusActionKind.END_RAGE,
                    "End Rage Early",
                    "Voluntarily end your rage before 10 rounds",
                )
            )

        if hew_unlocked and self.character.has_feature(Feature.GREAT_WEAPON_MASTER):
            options.append(
                BonusActionOption(
                    BonusActionKind.GWM_HEW,
                    "GWM Hew Attack",
                    "Extra attack after a critical hit (Great Weapon Master)",
                )
            )

        surge = self.resources.current_surge
        if surge is not None and surge.bonus_action_repeatable:
            options.append(
                BonusActionOption(
                    BonusActionKind.WILD_MAGIC,
                    bonus_action_name(surge),
                    surge.description[:60] + "...",
                )
            )

        return options

    def execute(self, kind: BonusActionKind) -> BonusActionResult:
        """Run a bonus action.

        Returns:
            BonusActionResult; ``used`` is False when nothing happened.
        """
        logger.info("Bonus action", kind=kind.value)

        if kind is BonusActionKind.ACTIVATE_RAGE:
            if not self._rage.can_activate():
                return BonusActionResult(kind, used=False)
            self._rage.activate()
            self._history.record_bonus_action("Activate Rage", "Rage active")
            return BonusActionResult(kind, used=True)

        if kind is BonusActionKind.END_RAGE:
            if not self.resources.rage_active:
                return BonusActionResult(kind, used=False)
            self._rage.end()
            self._history.record_bonus_action("End Rage", "Rage ended")
            return BonusActionResult(kind, used=True)

        if kind is BonusActionKind.GWM_HEW:
            self._oracle.show(Notice("GWM HEW ATTACK!", level="danger"))
            outcome = self._attack.resolve(auto_damage=True, label="GWM Hew Attack")
            self._history.record_bonus_action("GWM Hew", "HIT" if outcome.hit else "MISS")
            return BonusActionResult(kind, used=True, attack=outcome)

        return BonusActionResult(kind, used=self.use_surge())

    def use_surge(self) -> bool:
        """Repeat the active surge effect as a bonus action.

        Returns:
            True if the effect was repeatable and was used.
        """
        surge = self.resources.current_surge
        if surge is None or not surge.bonus_action_repeatable:
            return False
        self._oracle.show(Notice("Using Wild Magic Bonus Action!", level="magic"))
        trigger = trigger_surge(surge, self._roller, self.character, occasion="bonus_action")
        self._oracle.show(trigger)
        self._history.record_bonus_action(bonus_action_name(surge), trigger.text or "Effect repeated")
        return True


__all__ = [
    "BonusActionKind",
    "BonusActionOption",
    "BonusActionResult",
    "BonusActionDispatcher",
]
