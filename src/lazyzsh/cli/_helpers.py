"""Shared CLI helpers - used by the wizard and the backup subcommands.

Holds the exit-code contract, prerequisite checks, and the wiring that
turns ``Settings`` into concrete collaborators.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass

from lazyzsh.backup import BackupStore
from lazyzsh.config import Settings
from lazyzsh.installer import ComponentInstaller
from lazyzsh.output import info, ok, warn
from lazyzsh.registry import ComponentRegistry, load_registry
from lazyzsh.runner import CommandRunner, SubprocessRunner

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_OK: int = 0
EXIT_CANCELLED: int = 1
EXIT_FATAL: int = 2


@dataclass(frozen=True)
class Components:
    registry: ComponentRegistry
    runner: CommandRunner
    store: BackupStore
    installer: ComponentInstaller


def build_store(settings: Settings) -> BackupStore:
    return BackupStore(settings.zshrc_path, settings.backup_dir, settings.backup_prefix)


def build_components(settings: Settings, *, runner: CommandRunner | None = None) -> Components:
    """Wire registry, runner, store and installer from *settings*."""
    registry = load_registry(settings.registry_file)
    runner = runner or SubprocessRunner(timeout=settings.command_timeout, dry_run=settings.dry_run)
    installer = ComponentInstaller(
        registry,
        runner,
        settings.components_root,
        install_fonts=settings.install_fonts,
        dry_run=settings.dry_run,
    )
    return Components(registry=registry, runner=runner, store=build_store(settings), installer=installer)


# ---------------------------------------------------------------------------
# Prerequisites
# ---------------------------------------------------------------------------


def check_prereqs(settings: Settings) -> bool:
    """Report whether git and Oh My Zsh are present. Missing pieces are warnings only."""
    all_ok = True
    if shutil.which("git"):
        ok("Git found")
    else:
        warn("Git not found; custom plugins and themes cannot be cloned")
        all_ok = False

    if settings.oh_my_zsh_path.is_dir():
        ok(f"Oh My Zsh found at {settings.oh_my_zsh_path}")
    else:
        warn(f"Oh My Zsh not found at {settings.oh_my_zsh_path}")
        info("Install it from https://ohmyz.sh before starting a new shell")
        all_ok = False
    return all_ok
