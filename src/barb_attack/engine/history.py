"""Turn history: what happened on each turn and how much damage it dealt.

History lives in memory only. It is opened by the turn lifecycle, appended
to by the resolvers and shown from the main menu. Quick rolls made from the
main menu, outside any turn, are kept in a separate list so they still show
up in the history view.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from barb_attack.core.logging import get_logger
from barb_attack.models.enums import ActionType
from barb_attack.models.results import HeroicInspirationUse, SupplementalDamage

logger = get_logger(__name__)


@dataclass(frozen=True)
class TurnAction:
    """One entry in a turn's log.

    Attributes:
        type: Attack, damage or bonus action.
        details: What was done, e.g. ``Reckless attack (17)``.
        result: Outcome text, e.g. ``HIT`` or ``14 damage``.
        damage: Damage dealt by this action (0 for non-damage actions).
        turn_number: Combat turn counter when the action happened, if known.
        additional_damage: Supplemental dice rolled with a damage action.
        heroic_used: Heroic Inspiration reroll made during a damage action.
        timestamp: When the action was recorded.
    """

    type: ActionType
    details: str
    result: str
    damage: int = 0
    turn_number: int | None = None
    additional_damage: tuple[SupplementalDamage, ...] = ()
    heroic_used: HeroicInspirationUse | None = None
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class TurnSummary:
    """All actions recorded during one turn."""

    turn_number: int
    started_at: datetime = field(default_factory=datetime.now)
    actions: list[TurnAction] = field(default_factory=list)

    @property
    def total_damage(self) -> int:
        return sum(action.damage for action in self.actions)


class TurnHistory:
    """Accumulate actions per turn and keep the closed turns.

    Example:
        >>> history = TurnHistory()
        >>> history.start_turn(1)
        >>> history.record_damage(14, "d10(6) + d10(8)")
        >>> history.end_turn()
        >>> history.turns[0].total_damage
        14
    """

    def __init__(self) -> None:
        self._turns: list[TurnSummary] = []
        self._current: TurnSummary | None = None
        self._out_of_turn: list[TurnAction] = []

    @property
    def turns(self) -> list[TurnSummary]:
        """Closed turns, oldest first."""
        return list(self._turns)

    @property
    def out_of_turn(self) -> list[TurnAction]:
        """Actions recorded while no turn was open, oldest first."""
        return list(self._out_of_turn)

    @property
    def current(self) -> TurnSummary | None:
        return self._current

    @property
    def is_open(self) -> bool:
        return self._current is not None

    def start_turn(self, turn_number: int) -> None:
        """Open a new turn, closing any turn left open by an earlier exit."""
        if self._current is not None:
            logger.debug("Closing dangling turn", turn=self._current.turn_number)
            self.end_turn()
        self._current = TurnSummary(turn_number=turn_number)

    def record(self, action: TurnAction) -> None:
        """Append an action to the open turn, or to the out-of-turn list."""
        if self._current is None:
            logger.debug("Recorded outside a turn", action_type=action.type.value, turn=action.turn_number)
            self._out_of_turn.append(action)
            return
        self._current.actions.append(action)

    def record_attack(self, label: str, roll: int, hit: bool, *, turn_number: int | None = None) -> None:
        self.record(
            TurnAction(
                type=ActionType.ATTACK,
                details=f"{label} attack ({roll})",
                result="HIT" if hit else "MISS",
                turn_number=turn_number,
            )
        )

    def record_damage(
        self,
        amount: int,
        breakdown: str,
        modifiers: str = "",
        *,
        additional: tuple[SupplementalDamage, ...] | list[SupplementalDamage] = (),
        heroic: HeroicInspirationUse | None = None,
        turn_number: int | None = None,
    ) -> None:
        """Record one damage roll.

        Args:
            amount: Everything dealt, weapon and supplemental.
            breakdown: Dice notation of the weapon damage.
            modifiers: Comma-separated modifier names, shown in parentheses.
            additional: Supplemental dice rolled alongside the weapon.
            heroic: Heroic Inspiration reroll, if one was made.
            turn_number: Combat turn counter at the time of the roll.
        """
        details = f"{breakdown} ({modifiers})" if modifiers else breakdown
        self.record(
            TurnAction(
                type=ActionType.DAMAGE,
                details=details,
                result=f"{amount} damage",
                damage=amount,
                turn_number=turn_number,
                additional_damage=tuple(additional),
                heroic_used=heroic,
            )
        )

    def record_bonus_action(self, name: str, result: str) -> None:
        self.record(TurnAction(type=ActionType.BONUS_ACTION, details=name, result=result))

    def end_turn(self) -> None:
        """Close the open turn, if any."""
        if self._current is None:
            return
        self._turns.append(self._current)
        logger.debug(
            "Turn history closed",
            turn=self._current.turn_number,
            actions=len(self._current.actions),
            total_damage=self._current.total_damage,
        )
        self._current = None

    def count(self) -> int:
        """Number of closed turns."""
        return len(self._turns)

    def is_empty(self) -> bool:
        return not self._turns and not self._out_of_turn

    def clear(self) -> None:
        self._turns = []
        self._current = None
        self._out_of_turn = []

    def current_total_damage(self) -> int:
        """Damage recorded so far in the open turn."""
        return self._current.total_damage if self._current else 0


__all__ = [
    "TurnAction",
    "TurnSummary",
    "TurnHistory",
]
