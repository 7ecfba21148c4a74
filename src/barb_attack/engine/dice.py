"""Dice rolling for the combat assistant.

Single-die rolls on top of the d20 library, with the two policies the rules
engine needs: Great Weapon Fighting's one-shot reroll of a 1 or 2, and the
testing override that forces a natural 20 on the attack die.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any

import d20

from barb_attack.core.exceptions import DiceRollError
from barb_attack.core.logging import get_logger


logger = get_logger(__name__)

ATTACK_DIE = 20

# Great Weapon Fighting rerolls results at or below this value, once.
REROLL_LOW_MAX = 2


@dataclass(frozen=True)
class DieOutcome:
    """Result of rolling one die.

    Attributes:
        value: The kept result.
        draws: Every underlying draw, in order (two when a reroll happened).
        sides: Die size.
        forced: True when the testing override produced the value.
    """

    value: int
    draws: tuple[int, ...]
    sides: int
    forced: bool = False

    @property
    def rerolled(self) -> bool:
        return len(self.draws) > 1


class DiceRoller:
    """Roll single dice with optional reroll and override policies.

    Example:
        >>> roller = DiceRoller()
        >>> roller.roll(10, reroll_low=True)
        7
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible rolls.
        """
        self._seed = seed
        if seed is not None:
            random.seed(seed)
        logger.debug("DiceRoller initialized", seed=seed)

    def roll(self, sides: int, *, reroll_low: bool = False, force_max: bool = False) -> int:
        """Roll one die and return the kept value.

        Args:
            sides: Number of faces.
            reroll_low: Reroll a result of 1 or 2 once, keeping the second draw.
            force_max: Return 20 without rolling when ``sides`` is 20.

        Returns:
            The die result.
        """
        return self.roll_detailed(sides, reroll_low=reroll_low, force_max=force_max).value

    def roll_detailed(
        self,
        sides: int,
        *,
        reroll_low: bool = False,
        force_max: bool = False,
    ) -> DieOutcome:
        """Roll one die and report every underlying draw.

        Args:
            sides: Number of faces.
            reroll_low: Reroll a result of 1 or 2 once, keeping the second draw.
            force_max: Return 20 without rolling when ``sides`` is 20. The
                override only applies to the attack die.

        Returns:
            DieOutcome with the kept value and the draws.

        Raises:
            DiceRollError: If the dice library rejects the roll.
        """
        if force_max and sides == ATTACK_DIE:
            logger.debug("Forced maximum roll", sides=sides)
            return DieOutcome(value=sides, draws=(sides,), sides=sides, forced=True)

        expression = f"1d{sides}"
        if reroll_low:
            expression += f"ro<{REROLL_LOW_MAX + 1}"

        try:
            result: d20.RollResult = d20.roll(expression)
        except d20.RollError as exc:
            raise DiceRollError(
                f"Invalid die: {exc}",
                expression=expression,
            ) from exc

        draws = tuple(self._extract_draws(result.expr))
        outcome = DieOutcome(value=result.total, draws=draws or (result.total,), sides=sides)
        logger.debug("Die rolled", expression=expression, value=outcome.value, draws=outcome.draws)
        return outcome

    def _extract_draws(self, expr: Any) -> list[int]:
        """Extract every draw, kept or rerolled away, from a d20 expression tree.

        Args:
            expr: The d20 expression tree.

        Returns:
            List of individual draws in roll order.
        """
        draws: list[int] = []

        def traverse(node: Any) -> None:
            if isinstance(node, d20.Dice):
                for die in node.values:
                    for literal in die.values:
                        draws.append(literal.number)
            elif hasattr(node, "children"):
                for child in node.children:
                    traverse(child)

        traverse(expr)
        return draws

    def roll_many(self, count: int, sides: int, *, reroll_low: bool = False) -> list[int]:
        """Roll ``count`` independent dice of the same size."""
        return [self.roll(sides, reroll_low=reroll_low) for _ in range(count)]


__all__ = [
    "ATTACK_DIE",
    "REROLL_LOW_MAX",
    "DieOutcome",
    "DiceRoller",
]
