"""Application configuration using pydantic-settings.

Settings come from environment variables (prefix ``BARB_ATTACK_``), an
optional ``.env`` file, and runtime overrides from the command line. They
describe *where* the persisted character, session and play settings live
and how the rules engine is tuned; the persisted files themselves are
handled by :mod:`barb_attack.storage.repositories`.

Environment Variables:
    BARB_ATTACK_DATA_DIR: Directory holding the JSON files
    BARB_ATTACK_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    BARB_ATTACK_LOG_JSON: Emit JSON log lines
    BARB_ATTACK_RULES_BRUTAL_STRIKE_DIE: Size of the Brutal Strike bonus die
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from barb_attack.core.exceptions import ConfigurationError


class RulesSettings(BaseSettings):
    """Tunable constants of the rules engine.

    Attributes:
        brutal_strike_die: Size of the bonus die added by Brutal Strike.
        heroic_inspiration_max_roll: Highest die result for which Heroic
            Inspiration is offered.
        surge_table_size: Number of entries rolled on the wild magic table.
        house_rule_reckless_reroll: Offer a reckless reroll after a normal miss.
        add_rage_damage: Add rage damage on top of the character's flat
            bonuses while raging. Off by default; character files list rage
            under ``damage_bonuses`` themselves.
    """

    model_config = SettingsConfigDict(
        env_prefix="BARB_ATTACK_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    brutal_strike_die: int = Field(
        default=10,
        ge=2,
        le=20,
        description="Brutal Strike bonus die size",
    )
    heroic_inspiration_max_roll: int = Field(
        default=4,
        ge=1,
        le=20,
        description="Offer Heroic Inspiration at or below this roll",
    )
    surge_table_size: int = Field(
        default=8,
        ge=1,
        le=8,
        description="Wild magic surge table size",
    )
    house_rule_reckless_reroll: bool = Field(
        default=True,
        description="Offer a reckless reroll after a missed normal attack",
    )
    add_rage_damage: bool = Field(
        default=False,
        description="Add the rage damage bonus to flat damage while raging",
    )


class Settings(BaseSettings):
    """Main application settings.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        data_dir: Directory holding the persisted JSON files.
        character_file: Character definition file name.
        session_file: Session state file name.
        settings_file: Play settings file name.
        log_level: Application logging level.
        log_json: Emit JSON log lines instead of console output.
        log_file: Optional log file path.
        rules: Rules engine settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="BARB_ATTACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="Barbarian Combat Assistant", description="Application name")
    app_version: str = Field(default="2.0.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")

    data_dir: Path = Field(default=Path("config"), description="Data directory")
    character_file: str = Field(default="character-config.json", description="Character file")
    session_file: str = Field(default="session-data.json", description="Session file")
    settings_file: str = Field(default="settings.json", description="Play settings file")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Logging level",
    )
    log_json: bool = Field(default=False, description="Emit JSON log lines")
    log_file: Path | None = Field(default=None, description="Optional log file")

    rules: RulesSettings = Field(default_factory=RulesSettings)

    @model_validator(mode="after")
    def validate_distinct_files(self) -> "Settings":
        """Ensure the three persisted files do not overwrite each other.

        Raises:
            ConfigurationError: If two file names collide.
        """
        names = [self.character_file, self.session_file, self.settings_file]
        if len(set(names)) != len(names):
            raise ConfigurationError(
                "character_file, session_file and settings_file must be distinct",
                config_key="data_files",
                details={"files": names},
            )
        return self

    @property
    def character_path(self) -> Path:
        return self.data_dir / self.character_file

    @property
    def session_path(self) -> Path:
        return self.data_dir / self.session_file

    @property
    def settings_path(self) -> Path:
        return self.data_dir / self.settings_file


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "RulesSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
