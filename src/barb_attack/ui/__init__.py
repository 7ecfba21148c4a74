"""Terminal user interface (rich)."""

from __future__ import annotations

from barb_attack.ui.console import RichOracle


__all__ = ["RichOracle"]
