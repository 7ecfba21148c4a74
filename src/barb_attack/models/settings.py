"""Pydantic V2 schema for the persisted play settings (``settings.json``)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TestingMode(BaseModel):
    """Overrides for demonstrating or testing the tool at the table.

    Attributes:
        always_crit: Every attack die comes up 20.
        force_heroic_inspiration: Declared for the heroic inspiration prompt;
            not read by damage resolution.
    """

    __test__ = False  # not a pytest test class

    model_config = ConfigDict(frozen=True, extra="forbid")

    always_crit: bool = False
    force_heroic_inspiration: bool = False


class PlaySettings(BaseModel):
    """Player-facing settings toggled from the settings menu.

    Attributes:
        enable_crit_animations: Show animations and pauses. Cosmetic only.
        testing_mode: Optional testing overrides; absent means normal play.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    enable_crit_animations: bool = Field(default=True, description="Enable animations")
    testing_mode: TestingMode | None = Field(default=None, description="Testing overrides")

    @property
    def always_crit(self) -> bool:
        return self.testing_mode.always_crit if self.testing_mode else False

    @property
    def force_heroic_inspiration(self) -> bool:
        return self.testing_mode.force_heroic_inspiration if self.testing_mode else False


__all__ = [
    "TestingMode",
    "PlaySettings",
]
