"""Rage activation and the wild magic surge that comes with it."""

from __future__ import annotations

from barb_attack.core.config import RulesSettings
from barb_attack.core.logging import get_logger
from barb_attack.engine.dice import DiceRoller
from barb_attack.engine.oracle import Notice, Oracle, ask_yes_no
from barb_attack.engine.resources import ResourceState
from barb_attack.engine.wild_magic import roll_surge, trigger_surge
from barb_attack.models.character import Character

logger = get_logger(__name__)


class RageManager:
    """Offer, activate and end rage."""

    def __init__(
        self,
        character: Character,
        resources: ResourceState,
        roller: DiceRoller,
        oracle: Oracle,
        rules: RulesSettings | None = None,
    ) -> None:
        self.character = character
        self.resources = resources
        self._roller = roller
        self._oracle = oracle
        self._rules = rules or RulesSettings()

    def can_activate(self) -> bool:
        return self.resources.can_activate_rage(self.character)

    def offer(self) -> bool:
        """Ask whether to rage, activating it on yes.

        Enter accepts; an aborted prompt declines.

        Returns:
            True if rage was activated.
        """
        if not self.can_activate():
            return False
        prompt = f"Activate Rage? ({self.resources.rages_remaining} remaining)"
        if not ask_yes_no(self._oracle, prompt, default=True):
            return False
        self.activate()
        return True

    def activate(self) -> None:
        """Spend a rage, rolling the surge table for wild magic characters.

        The rage and its surge are committed together.
        """
        surge = None
        if self.character.is_wild_magic:
            surge = roll_surge(self._roller, self._rules.surge_table_size)

        self.resources.activate_rage(surge)
        self._oracle.show(Notice("RAGE ACTIVATED!", level="danger"))
        self._oracle.show(Notice(f"Rages remaining: {self.resources.rages_remaining}", level="warning"))
        logger.info(
            "Rage activated",
            rages_remaining=self.resources.rages_remaining,
            surge=surge.roll if surge else None,
        )

        if surge is not None:
            self._oracle.show(Notice("Wild Magic surge!", level="magic"))
            self._oracle.show(trigger_surge(surge, self._roller, self.character))

    def end(self) -> None:
        """End rage voluntarily."""
        had_surge = self.resources.current_surge is not None
        self.resources.end_rage()
        self._oracle.show(Notice("Rage ended voluntarily.", level="info"))
        if had_surge:
            self._oracle.show(Notice("Wild Magic effects fade away...", level="magic"))
        logger.info("Rage ended")

    def status(self) -> str:
        """One-line rage status for menus."""
        if self.resources.rage_active:
            return "ACTIVE"
        if self.resources.rages_remaining > 0:
            return f"Available ({self.resources.rages_remaining} left)"
        return "No rages remaining"


__all__ = ["RageManager"]
