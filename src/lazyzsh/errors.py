"""Exception hierarchy for lazy-zsh.

Per-component failures (``CommandError``, ``InstallError``) are caught and
reported where they happen so one bad plugin never aborts the run.
``FilesystemError`` subclasses ``OSError`` so callers catching I/O errors
generically still see them.
"""

from __future__ import annotations

from collections.abc import Sequence


class LazyZshError(Exception):
    """Base class for all lazy-zsh errors."""


class PromptError(LazyZshError):
    """No valid selection was made at a prompt (treated as cancellation)."""


class SelectionError(LazyZshError, ValueError):
    """A component identifier is unsafe to write into the generated config."""


class CommandError(LazyZshError):
    """An external command exited non-zero or could not be started."""

    def __init__(self, argv: Sequence[str], returncode: int | None, detail: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.detail = detail
        cmd = " ".join(self.argv)
        msg = f"Command failed ({returncode}): {cmd}" if returncode is not None else f"Command failed: {cmd}"
        if detail:
            msg = f"{msg}\n{detail}"
        super().__init__(msg)


class CommandTimeoutError(CommandError):
    """An external command did not finish within the configured timeout."""

    def __init__(self, argv: Sequence[str], timeout: float) -> None:
        self.timeout = timeout
        super().__init__(argv, None, f"timed out after {timeout:g}s")


class InstallError(LazyZshError):
    """Fetching a plugin or theme failed."""

    def __init__(self, identifier: str, cause: Exception) -> None:
        self.identifier = identifier
        self.cause = cause
        super().__init__(f"Failed to install {identifier}: {cause}")


class FilesystemError(LazyZshError, OSError):
    """Backup, restore or config write failed on disk."""


class NotFoundError(FilesystemError):
    """A snapshot path does not exist or is not a snapshot of this store."""


class ConfigWriteError(FilesystemError):
    """Writing the generated ``.zshrc`` failed. Fatal for the run."""
