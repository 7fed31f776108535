"""lazy-zsh CLI - interactive zsh setup wizard and backup tools.

Entry point: ``lazyzsh`` (or ``python -m lazyzsh``)

Subcommands:
    lazyzsh          - Interactive setup wizard (default)
    lazyzsh backup   - Snapshot ~/.zshrc into the backup folder
    lazyzsh backups  - List existing snapshots

Exit codes: 0 completed, 1 cancelled, 2 fatal error.
"""

from __future__ import annotations

import argparse
import sys


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazyzsh",
        description="Set up zsh and Oh My Zsh: theme, plugins, aliases, functions and .zshrc backups",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log commands instead of running them and print the .zshrc instead of writing it",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show INFO-level logs on stderr")

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("backup", help="Snapshot the current .zshrc")
    sub.add_parser("backups", help="List .zshrc snapshots")
    return parser


def run(argv: list[str] | None = None) -> int:
    """Parse *argv*, configure logging and dispatch. Returns the exit code."""
    args = build_parser().parse_args(argv)

    from lazyzsh.cli._helpers import EXIT_FATAL
    from lazyzsh.output import err
    from lazyzsh.config import Settings
    from lazyzsh.log import setup_logging

    try:
        settings = Settings()
    except ValueError as e:
        err(f"Invalid configuration: {e}")
        return EXIT_FATAL

    overrides: dict[str, object] = {}
    if args.dry_run:
        overrides["dry_run"] = True
    if args.verbose and settings.log_level not in ("DEBUG", "INFO"):
        overrides["log_level"] = "INFO"
    if overrides:
        settings = settings.model_copy(update=overrides)

    setup_logging(settings.log_level)

    if args.command == "backup":
        from lazyzsh.cli.backups import run_backup

        return run_backup(settings)
    if args.command == "backups":
        from lazyzsh.cli.backups import run_list_backups

        return run_list_backups(settings)

    from lazyzsh.cli.setup import run_setup

    return run_setup(settings)


def main() -> None:
    """Console-script entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
