"""Barbarian Combat Assistant - command line entry point.

Loads the character, session and play settings from the data directory,
prints the welcome banner and hands over to the main menu.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from rich.console import Console

from barb_attack import __version__
from barb_attack.core.config import Settings, get_settings
from barb_attack.core.exceptions import ConfigurationError, PromptInterruptedError
from barb_attack.core.logging import configure_logging, get_logger
from barb_attack.engine.service import build_service
from barb_attack.ui.console import RichOracle, render_welcome
from barb_attack.ui.menus import run_main_menu

logger = get_logger(__name__)


# =============================================================================
# Argument Parsing
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="barb-attack",
        description="D&D Combat Assistant",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory holding character-config.json, session-data.json and settings.json",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Logging level (logs go to stderr)",
    )
    parser.add_argument(
        "--new-session",
        action="store_true",
        help="Start a fresh session: turn 1, heroic inspiration, full rages",
    )
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Application settings with command line overrides applied.

    Raises:
        ConfigurationError: If the settings are invalid.
    """
    overrides: dict[str, Any] = {}
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if not overrides:
        return get_settings()
    try:
        return Settings(**overrides)
    except ConfigurationError:
        raise
    except ValueError as exc:
        raise ConfigurationError(f"Invalid command line settings: {exc}") from exc


# =============================================================================
# Main
# =============================================================================


def main(argv: Sequence[str] | None = None, *, console: Console | None = None) -> int:
    """Run the assistant.

    Returns:
        Process exit status: 0 on a normal exit, 1 on a configuration fault.
    """
    args = build_parser().parse_args(argv)
    console = console or Console()

    try:
        settings = load_settings(args)
    except ConfigurationError as exc:
        console.print(f"[bold red]Failed to start application:[/bold red] {exc}")
        return 1

    configure_logging(
        level=settings.log_level,
        json_format=settings.log_json,
        log_file=str(settings.log_file) if settings.log_file else None,
    )

    oracle = RichOracle(console)
    console.print("Loading character, session, and settings...")
    try:
        service = build_service(settings, oracle, fresh_session=args.new_session)
    except ConfigurationError as exc:
        logger.error("Startup failed", error=exc.message, **exc.details)
        console.print(f"[bold red]Failed to start application:[/bold red] {exc.message}")
        console.print("Make sure all config files exist:")
        for path in (settings.character_path, settings.session_path, settings.settings_path):
            console.print(f"- {path}")
        if not args.new_session:
            console.print("Run with --new-session to create a fresh session file.")
        return 1

    oracle.preferences = service.preferences
    console.print(render_welcome(service.character, service.resources.current_turn))

    try:
        run_main_menu(service, oracle)
    except PromptInterruptedError:
        logger.info("Prompt interrupted, exiting")

    console.print("\nFarewell, mighty warrior!", style="bold yellow")
    return 0


__all__ = [
    "build_parser",
    "load_settings",
    "main",
]
