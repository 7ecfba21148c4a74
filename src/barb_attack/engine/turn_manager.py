"""Turn lifecycle for the character's combat turns.

A turn moves ``NOT_STARTED -> IN_TURN -> ENDED``. Starting it offers rage
and opens the turn history; inside it the character may attack up to their
attack count and take one bonus action; ending it closes the history,
advances the turn counter and makes once-per-turn features available again.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from barb_attack.core.exceptions import TurnManagementError
from barb_attack.core.logging import bind_context, get_logger
from barb_attack.engine.attack import AttackOutcome, AttackResolver
from barb_attack.engine.bonus_actions import (
    BonusActionDispatcher,
    BonusActionKind,
    BonusActionOption,
    BonusActionResult,
)
from barb_attack.engine.history import TurnHistory
from barb_attack.engine.oracle import MenuChoice, Notice, Oracle
from barb_attack.engine.rage import RageManager
from barb_attack.engine.resources import ResourceState
from barb_attack.engine.wild_magic import describe_surge
from barb_attack.models.character import Character
from barb_attack.models.enums import Feature, TurnPhase

logger = get_logger(__name__)


class TurnMenuAction(StrEnum):
    """Choices on the turn menu."""

    ATTACK = "attack"
    BONUS_ACTION = "bonus_action"
    CHECK_SURGE = "check_wild_magic"
    SURGE_BONUS_ACTION = "wild_magic_bonus"
    END_TURN = "end_turn"
    EXIT = "exit"


@dataclass
class TurnState:
    """Budget and bookkeeping for the turn in progress.

    Attributes:
        turn_number: Turn counter when the turn started.
        max_attacks: Attacks allowed this turn.
        attacks_used: Attacks made so far.
        bonus_action_used: The bonus action has been spent.
        critical_hit_this_turn: An attack this turn was a critical hit.
        hew_available: The Great Weapon Master hew attack is unlocked.
        phase: Lifecycle phase.
    """

    turn_number: int
    max_attacks: int
    attacks_used: int = 0
    bonus_action_used: bool = False
    critical_hit_this_turn: bool = False
    hew_available: bool = False
    phase: TurnPhase = TurnPhase.NOT_STARTED

    @property
    def attacks_remaining(self) -> int:
        return max(0, self.max_attacks - self.attacks_used)


@dataclass(frozen=True)
class TurnStatus:
    """Snapshot of the turn shown above the turn menu."""

    character_name: str
    turn_number: int
    attacks_used: int
    max_attacks: int
    bonus_action_used: bool
    rage: str
    hew: str | None
    surge_active: bool


class TurnManager:
    """Sequence one turn at a time.

    Example:
        >>> manager.start_turn()
        >>> manager.attack()
        >>> manager.end_turn()
    """

    def __init__(
        self,
        character: Character,
        resources: ResourceState,
        attack: AttackResolver,
        bonus_actions: BonusActionDispatcher,
        rage: RageManager,
        history: TurnHistory,
        oracle: Oracle,
    ) -> None:
        self.character = character
        self.resources = resources
        self._attack = attack
        self._bonus_actions = bonus_actions
        self._rage = rage
        self._history = history
        self._oracle = oracle
        self._state = TurnState(turn_number=resources.current_turn, max_attacks=character.max_attacks)

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def phase(self) -> TurnPhase:
        return self._state.phase

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start_turn(self) -> TurnState:
        """Begin a turn: offer rage, open the history, reset the budget."""
        turn_number = self.resources.current_turn
        bind_context(turn=turn_number)
        self._oracle.show(Notice(f"Starting Turn {turn_number}", level="success"))

        self._rage.offer()

        self._history.start_turn(turn_number)
        self._state = TurnState(
            turn_number=turn_number,
            max_attacks=self.character.max_attacks,
            phase=TurnPhase.IN_TURN,
        )
        logger.info("Turn started", turn=turn_number, max_attacks=self._state.max_attacks)
        return self._state

    def attack(self) -> AttackOutcome:
        """Make one of the turn's attacks.

        Raises:
            TurnManagementError: If no turn is in progress or no attacks remain.
        """
        self._require_in_turn("attack")
        if self._state.attacks_remaining == 0:
            raise TurnManagementError("No more attacks available this turn", turn_number=self._state.turn_number)

        number = self._state.attacks_used + 1
        outcome = self._attack.resolve(
            auto_damage=True,
            label=f"Attack {number} of {self._state.max_attacks}",
        )
        self._state.attacks_used = number

        if outcome.critical:
            self._state.critical_hit_this_turn = True
            if self.character.has_feature(Feature.GREAT_WEAPON_MASTER) and not self._state.bonus_action_used:
                self._state.hew_available = True
                self._oracle.show(
                    Notice("GWM HEW AVAILABLE! You can make a bonus action attack!", level="warning")
                )
        return outcome

    def bonus_action_options(self) -> list[BonusActionOption]:
        return self._bonus_actions.options(hew_unlocked=self._state.hew_available)

    def bonus_action(self, kind: BonusActionKind) -> BonusActionResult:
        """Take the turn's bonus action.

        Raises:
            TurnManagementError: If no turn is in progress or the bonus action
                is already spent.
        """
        self._require_in_turn("bonus_action")
        if self._state.bonus_action_used:
            raise TurnManagementError("Bonus action already used this turn", turn_number=self._state.turn_number)
        if kind is BonusActionKind.GWM_HEW and not self._state.hew_available:
            raise TurnManagementError("No critical hit has unlocked a hew attack", turn_number=self._state.turn_number)

        result = self._bonus_actions.execute(kind)
        if result.used:
            self._state.bonus_action_used = True
            if kind is BonusActionKind.GWM_HEW:
                self._state.hew_available = False
            self._oracle.show(Notice("Bonus action used!", level="success"))
        return result

    def end_turn(self) -> int:
        """Close the turn and advance the counter.

        Returns:
            The new turn number.

        Raises:
            TurnManagementError: If no turn is in progress.
        """
        self._require_in_turn("end_turn")
        self._history.end_turn()
        new_turn = self.resources.end_turn()
        self._state.phase = TurnPhase.ENDED
        self._oracle.show(Notice("Turn-based features reset!", level="warning"))
        self._oracle.show(Notice(f"Advanced to Turn {new_turn}", level="success"))
        logger.info("Turn ended", turn=self._state.turn_number, next_turn=new_turn)
        return new_turn

    def _require_in_turn(self, step: str) -> None:
        if self._state.phase is not TurnPhase.IN_TURN:
            raise TurnManagementError(
                f"Cannot {step.replace('_', ' ')} outside a turn",
                turn_number=self._state.turn_number,
                details={"phase": self._state.phase.value},
            )

    # -------------------------------------------------------------------------
    # Menu loop
    # -------------------------------------------------------------------------

    def status(self) -> TurnStatus:
        state = self._state
        hew: str | None = None
        if state.hew_available and not state.bonus_action_used:
            hew = "AVAILABLE!"
        elif self.character.has_feature(Feature.GREAT_WEAPON_MASTER):
            hew = "Used" if state.critical_hit_this_turn else "Waiting for crit"
        return TurnStatus(
            character_name=self.character.name,
            turn_number=self.resources.current_turn,
            attacks_used=state.attacks_used,
            max_attacks=state.max_attacks,
            bonus_action_used=state.bonus_action_used,
            rage=self._rage.status(),
            hew=hew,
            surge_active=self.resources.current_surge is not None,
        )

    def menu_options(self) -> list[MenuChoice[TurnMenuAction]]:
        """Turn menu entries valid right now."""
        state = self._state
        options: list[MenuChoice[TurnMenuAction]] = []
        if state.attacks_remaining > 0:
            options.append(MenuChoice(f"Attack ({state.attacks_remaining} left)", TurnMenuAction.ATTACK))
        if not state.bonus_action_used:
            options.append(MenuChoice("Bonus Action", TurnMenuAction.BONUS_ACTION))

        surge = self.resources.current_surge
        if surge is not None:
            options.append(MenuChoice("Check Wild Magic Effect", TurnMenuAction.CHECK_SURGE))
            if surge.bonus_action_repeatable and not state.bonus_action_used:
                options.append(MenuChoice("Use Wild Magic Bonus Action", TurnMenuAction.SURGE_BONUS_ACTION))

        options.append(MenuChoice("End Turn", TurnMenuAction.END_TURN))
        options.append(MenuChoice("Exit to Main Menu", TurnMenuAction.EXIT))
        return options

    def run(self) -> TurnPhase:
        """Run a whole turn from the turn menu.

        Exiting to the main menu leaves the turn open; the next
        :meth:`start_turn` closes its history.

        Returns:
            ``ENDED`` if the turn was ended, ``IN_TURN`` if the player exited.

        Raises:
            PromptInterruptedError: If the turn menu prompt is aborted.
        """
        self.start_turn()
        while True:
            self._oracle.show(self.status())
            action = self._oracle.choose("What would you like to do?", self.menu_options())

            if action is TurnMenuAction.ATTACK:
                self.attack()
            elif action is TurnMenuAction.BONUS_ACTION:
                self._run_bonus_action_menu()
            elif action is TurnMenuAction.CHECK_SURGE:
                surge = self.resources.current_surge
                if surge is not None:
                    self._oracle.show(describe_surge(surge, self.character))
            elif action is TurnMenuAction.SURGE_BONUS_ACTION:
                self.bonus_action(BonusActionKind.WILD_MAGIC)
            elif action is TurnMenuAction.END_TURN:
                self.end_turn()
                return TurnPhase.ENDED
            else:
                logger.info("Exited turn menu", turn=self._state.turn_number)
                return self._state.phase

    def _run_bonus_action_menu(self) -> None:
        options = self.bonus_action_options()
        if not options:
            self._oracle.show(Notice("No bonus actions available this turn.", level="info"))
            return
        choices: list[MenuChoice[BonusActionKind | None]] = [
            MenuChoice(f"{option.name} - {option.description}", option.kind) for option in options
        ]
        choices.append(MenuChoice("Back to Turn Menu", None))
        kind = self._oracle.choose("Choose a bonus action:", choices)
        if kind is not None:
            self.bonus_action(kind)


__all__ = [
    "TurnMenuAction",
    "TurnState",
    "TurnStatus",
    "TurnManager",
]
