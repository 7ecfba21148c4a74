"""Interactive decision contract between the rules engine and the UI.

The resolvers never talk to the terminal directly. Every question they ask
(which attack mode, did it hit, use Heroic Inspiration) and every result they
report goes through an :class:`Oracle`. The terminal implementation lives in
``barb_attack.ui.console``; tests use a scripted one.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Generic, Literal, Protocol, TypeVar, runtime_checkable

from barb_attack.core.exceptions import PromptInterruptedError
from barb_attack.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

NoticeLevel = Literal["info", "success", "warning", "danger", "magic"]


@dataclass(frozen=True)
class MenuChoice(Generic[T]):
    """One selectable option.

    Attributes:
        label: Text shown to the player.
        value: Value returned when the option is picked.
    """

    label: str
    value: T


@dataclass(frozen=True)
class Notice:
    """A short message for the player, styled by level."""

    text: str
    level: NoticeLevel = "info"


@dataclass(frozen=True)
class Rolling:
    """Dice are about to be rolled; the UI may animate this."""

    text: str = "Rolling dice..."


@runtime_checkable
class Oracle(Protocol):
    """Source of player decisions and sink for displayed results."""

    def choose(self, prompt: str, options: Sequence[MenuChoice[T]]) -> T:
        """Ask the player to pick one option.

        Raises:
            PromptInterruptedError: If the player aborts the prompt.
        """
        ...

    def confirm(self, prompt: str, default: bool = False) -> bool:
        """Ask a yes/no question.

        Raises:
            PromptInterruptedError: If the player aborts the prompt.
        """
        ...

    def show(self, item: Any) -> None:
        """Display a result model, a :class:`Notice` or plain text."""
        ...


def ask_yes_no(oracle: Oracle, prompt: str, *, default: bool = False) -> bool:
    """Ask a yes/no question, treating an aborted prompt as "no".

    Args:
        oracle: Oracle to ask.
        prompt: Question text.
        default: Answer used when the player just presses Enter.

    Returns:
        The answer, or False if the prompt was interrupted.
    """
    try:
        return oracle.confirm(prompt, default)
    except PromptInterruptedError:
        logger.debug("Prompt interrupted, treating as no", prompt=prompt)
        return False


__all__ = [
    "MenuChoice",
    "Notice",
    "Rolling",
    "NoticeLevel",
    "Oracle",
    "ask_yes_no",
]
