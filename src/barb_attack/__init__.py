"""Barbarian Combat Assistant.

A terminal combat assistant for a single barbarian character: attack and
damage rolls with the character's features, rage and wild magic tracking,
turn history and persisted session state.
"""

from __future__ import annotations

__version__ = "2.0.0"

__all__ = ["__version__"]
