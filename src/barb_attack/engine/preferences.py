"""Holder for the persisted play settings and their menu toggles."""

from __future__ import annotations

from typing import Any

from barb_attack.core.exceptions import PersistenceError
from barb_attack.core.logging import get_logger
from barb_attack.models.settings import PlaySettings, TestingMode
from barb_attack.storage.repositories import Repository

logger = get_logger(__name__)


class Preferences:
    """Read and toggle play settings, saving after every change."""

    def __init__(self, repository: Repository[PlaySettings], settings: PlaySettings | None = None) -> None:
        self._repository = repository
        self._settings = settings if settings is not None else repository.load()

    @property
    def settings(self) -> PlaySettings:
        return self._settings

    @property
    def animations(self) -> bool:
        return self._settings.enable_crit_animations

    @property
    def always_crit(self) -> bool:
        return self._settings.always_crit

    @property
    def force_heroic_inspiration(self) -> bool:
        return self._settings.force_heroic_inspiration

    def toggle_animations(self) -> bool:
        self._update(enable_crit_animations=not self._settings.enable_crit_animations)
        return self._settings.enable_crit_animations

    def set_always_crit(self, enabled: bool) -> None:
        self._update_testing(always_crit=enabled)

    def set_force_heroic_inspiration(self, enabled: bool) -> None:
        self._update_testing(force_heroic_inspiration=enabled)

    def _update_testing(self, **changes: Any) -> None:
        testing = self._settings.testing_mode or TestingMode()
        self._update(testing_mode=testing.model_copy(update=changes))

    def _update(self, **changes: Any) -> None:
        self._settings = PlaySettings.model_validate({**self._settings.model_dump(), **changes})
        logger.info("Play settings changed", **{k: str(v) for k, v in changes.items()})
        try:
            self._repository.save(self._settings)
        except PersistenceError as exc:
            logger.error("Failed to save settings", error=exc.message, **exc.details)


__all__ = ["Preferences"]
