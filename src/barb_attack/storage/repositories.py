"""JSON file persistence for the character, session and play settings.

Each file maps to one pydantic model. Storage location is the configured
data directory (``config/`` by default):

- ``character-config.json``: the character definition, read-only at runtime
- ``session-data.json``: resource state, rewritten on every transition
- ``settings.json``: play settings, rewritten when a toggle changes
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Generic, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from barb_attack.core.exceptions import ConfigurationError, PersistenceError
from barb_attack.core.logging import get_logger
from barb_attack.models.character import Character
from barb_attack.models.session import SessionState
from barb_attack.models.settings import PlaySettings

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


# =============================================================================
# Repository Contract
# =============================================================================


class Repository(Protocol[ModelT]):
    """Load/save contract the state holders depend on."""

    def load(self) -> ModelT: ...

    def save(self, data: ModelT) -> None: ...


# =============================================================================
# JSON Repository
# =============================================================================


class JsonRepository(Generic[ModelT]):
    """Persist one pydantic model as a pretty-printed JSON file.

    Example:
        >>> repo = JsonRepository(Path("config/settings.json"), PlaySettings)
        >>> settings = repo.load()
        >>> repo.save(settings.model_copy(update={"enable_crit_animations": False}))
    """

    model: type[ModelT]

    def __init__(self, path: Path, model: type[ModelT] | None = None) -> None:
        """Initialize the repository.

        Args:
            path: JSON file backing this repository.
            model: Model class to validate against. Subclasses set it as a
                class attribute instead.
        """
        self.path = Path(path)
        if model is not None:
            self.model = model

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> ModelT:
        """Read and validate the file.

        Returns:
            The validated model.

        Raises:
            ConfigurationError: If the file is missing, unreadable, not JSON
                or does not match the schema.
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ConfigurationError(
                f"Missing file: {self.path}",
                config_key=str(self.path),
            ) from exc
        except OSError as exc:
            raise ConfigurationError(
                f"Could not read {self.path}: {exc}",
                config_key=str(self.path),
            ) from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(
                f"Malformed JSON in {self.path}: {exc}",
                config_key=str(self.path),
            ) from exc

        try:
            instance = self.model.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid contents in {self.path}",
                config_key=str(self.path),
                details={"errors": exc.errors(include_url=False)},
            ) from exc

        logger.debug("Loaded file", path=str(self.path), model=self.model.__name__)
        return instance

    def save(self, data: ModelT) -> None:
        """Write the model, replacing the file atomically.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        payload = data.model_dump_json(by_alias=True, indent=2)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload + "\n", encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise PersistenceError(
                f"Could not save {self.path}: {exc}",
                path=str(self.path),
            ) from exc

        logger.debug("Saved file", path=str(self.path), model=self.model.__name__)


class CharacterRepository(JsonRepository[Character]):
    """Repository for ``character-config.json``."""

    model = Character


class SessionRepository(JsonRepository[SessionState]):
    """Repository for ``session-data.json``."""

    model = SessionState


class SettingsRepository(JsonRepository[PlaySettings]):
    """Repository for ``settings.json``."""

    model = PlaySettings


__all__ = [
    "Repository",
    "JsonRepository",
    "CharacterRepository",
    "SessionRepository",
    "SettingsRepository",
]
