"""Component installer - clones custom plugins/themes and installs fonts."""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

import structlog

from lazyzsh.errors import CommandError, InstallError
from lazyzsh.registry import ComponentKind, ComponentRegistry
from lazyzsh.runner import CommandRunner

logger = structlog.get_logger()


class InstallStatus(StrEnum):
    ALREADY_INSTALLED = "already_installed"
    INSTALLED = "installed"
    BUILTIN = "builtin"
    FAILED = "failed"
    SKIPPED = "skipped"
    UNMANAGED = "unmanaged"


@dataclass(frozen=True)
class InstallOutcome:
    identifier: str
    kind: str
    status: InstallStatus
    path: Path | None = None
    known: bool = True
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status is not InstallStatus.FAILED


def is_complete_install(path: Path) -> bool:
    """A clone counts as installed once git wrote HEAD and checked out at least one file."""
    if not path.is_dir():
        return False
    if not (path / ".git" / "HEAD").is_file():
        return False
    return any(child.name != ".git" for child in path.iterdir())


def is_failed_clone(path: Path) -> bool:
    """An empty directory, or a ``.git`` checkout that never finished. Anything else is user content."""
    if not path.is_dir() or path.is_symlink():
        return False
    children = list(path.iterdir())
    if not children:
        return True
    return (path / ".git").exists() and not is_complete_install(path)


class ComponentInstaller:
    """Ensures plugins and themes are present under the custom components root.

    Directories the installer did not clone are never modified; with
    ``dry_run`` nothing on disk is touched at all.

    Usage:
        installer = ComponentInstaller(registry, runner, Path("~/.oh-my-zsh/custom"))
        installer.ensure_installed("zsh-autosuggestions", ComponentKind.PLUGIN)
        outcomes = installer.install_all(["git", "fzf"], ComponentKind.PLUGIN)
    """

    def __init__(
        self,
        registry: ComponentRegistry,
        runner: CommandRunner,
        components_root: Path,
        *,
        install_fonts: bool = True,
        dry_run: bool = False,
    ) -> None:
        self._registry = registry
        self._runner = runner
        self._root = Path(components_root)
        self._install_fonts = install_fonts
        self._dry_run = dry_run

    def component_path(self, identifier: str, kind: ComponentKind) -> Path:
        if identifier in ("", ".", "..") or "/" in identifier:
            msg = f"Invalid component name: {identifier!r}"
            raise ValueError(msg)
        return self._root / kind.dirname / identifier

    def ensure_installed(self, identifier: str, kind: ComponentKind) -> InstallOutcome:
        """Clone *identifier* unless it is already present or built in.

        Raises ``InstallError`` if the name is unusable, the clone command
        fails, or the target directory cannot be prepared.
        """
        try:
            path = self.component_path(identifier, kind)
        except ValueError as e:
            raise InstallError(identifier, e) from e

        try:
            complete = is_complete_install(path)
            present = path.exists() or path.is_symlink()
            failed_clone = present and is_failed_clone(path)
        except OSError as e:
            raise InstallError(identifier, e) from e

        if complete:
            logger.info("component_already_installed", identifier=identifier, kind=kind.value)
            return InstallOutcome(identifier, kind.value, InstallStatus.ALREADY_INSTALLED, path)

        url = self._registry.resolve(identifier, kind)
        known = self._registry.is_known(identifier, kind)

        if present:
            if not url or not failed_clone:
                logger.warning("component_unmanaged", identifier=identifier, kind=kind.value, path=str(path))
                return InstallOutcome(identifier, kind.value, InstallStatus.UNMANAGED, path, known=known)
            self._remove_failed_clone(identifier, path)

        if not url:
            return InstallOutcome(identifier, kind.value, InstallStatus.BUILTIN, None, known=known)

        try:
            if not self._dry_run:
                path.parent.mkdir(parents=True, exist_ok=True)
            self._runner.run(["git", "clone", "--depth=1", url, str(path)])
        except (CommandError, OSError) as e:
            logger.error("component_install_failed", identifier=identifier, kind=kind.value, error=str(e))
            raise InstallError(identifier, e) from e

        logger.info("component_installed", identifier=identifier, kind=kind.value, path=str(path))
        return InstallOutcome(identifier, kind.value, InstallStatus.INSTALLED, path)

    def _remove_failed_clone(self, identifier: str, path: Path) -> None:
        # git refuses a non-empty target, so leftovers of an interrupted clone go first.
        if self._dry_run:
            logger.info("component_partial_kept_dry_run", identifier=identifier, path=str(path))
            return
        logger.warning("component_partial_removed", identifier=identifier, path=str(path))
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise InstallError(identifier, e) from e

    def install_all(self, identifiers: Iterable[str], kind: ComponentKind) -> list[InstallOutcome]:
        """Install each component in order; a failure is recorded and the rest continue."""
        outcomes: list[InstallOutcome] = []
        for identifier in identifiers:
            try:
                outcomes.append(self.ensure_installed(identifier, kind))
            except InstallError as e:
                outcomes.append(
                    InstallOutcome(identifier, kind.value, InstallStatus.FAILED, known=True, error=str(e.cause)),
                )
        return outcomes

    def ensure_font(self, theme: str) -> InstallOutcome:
        """Install the Nerd Font a theme needs via Homebrew, when possible."""
        font = self._registry.font_for(theme)
        if not font or not self._install_fonts:
            return InstallOutcome(font or theme, "font", InstallStatus.SKIPPED)
        if shutil.which("brew") is None:
            logger.info("font_skipped_no_brew", font=font)
            return InstallOutcome(font, "font", InstallStatus.SKIPPED, error="brew not found")

        try:
            self._runner.run(["brew", "install", "--cask", font])
        except CommandError as e:
            logger.error("font_install_failed", font=font, error=str(e))
            return InstallOutcome(font, "font", InstallStatus.FAILED, error=str(e))
        return InstallOutcome(font, "font", InstallStatus.INSTALLED)
