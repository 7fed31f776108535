"""Backup store - timestamped snapshots of the live ``.zshrc``.

Snapshots are plain copies named ``<prefix><epoch-millis>`` inside a single
directory. They are never pruned automatically.
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import structlog

from lazyzsh.errors import FilesystemError, NotFoundError
from lazyzsh.fsutil import atomic_copy

logger = structlog.get_logger()

DEFAULT_PREFIX = ".zshrc.backup."


@dataclass(frozen=True)
class Snapshot:
    path: Path
    timestamp_ms: int

    @property
    def created_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp_ms / 1000, tz=timezone.utc)

    @property
    def name(self) -> str:
        return self.path.name


class BackupStore:
    """Creates, lists and restores snapshots of one live config file.

    Usage:
        store = BackupStore(Path("~/.zshrc"), Path("~/.awesome-lazy-zsh_backup"))
        snap = store.create_snapshot()   # None when there is no .zshrc yet
        store.restore_snapshot(store.list_snapshots()[-1])
    """

    def __init__(self, live_path: Path, backup_dir: Path, prefix: str = DEFAULT_PREFIX) -> None:
        self.live_path = Path(live_path)
        self.backup_dir = Path(backup_dir)
        self.prefix = prefix

    # -- store directory ---------------------------------------------------

    def ensure_store_exists(self) -> Path:
        """Create the backup directory (and parents) if needed."""
        if self.backup_dir.exists() and not self.backup_dir.is_dir():
            raise FilesystemError(f"Backup path exists but is not a directory: {self.backup_dir}")
        try:
            created = not self.backup_dir.exists()
            self.backup_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"Cannot create backup folder {self.backup_dir}: {e}") from e
        if not os.access(self.backup_dir, os.W_OK | os.X_OK):
            raise FilesystemError(f"Backup folder is not writable: {self.backup_dir}")
        if created:
            logger.info("backup_folder_created", path=str(self.backup_dir))
        return self.backup_dir

    # -- naming --------------------------------------------------------------

    def _parse(self, path: Path) -> Snapshot | None:
        name = path.name
        if not name.startswith(self.prefix):
            return None
        stamp = name[len(self.prefix):]
        if not stamp.isdigit():
            return None
        return Snapshot(path=path, timestamp_ms=int(stamp))

    def _next_free_path(self) -> Path:
        stamp = time.time_ns() // 1_000_000
        candidate = self.backup_dir / f"{self.prefix}{stamp}"
        while candidate.exists():
            stamp += 1
            candidate = self.backup_dir / f"{self.prefix}{stamp}"
        return candidate

    # -- operations ------------------------------------------------------------

    def create_snapshot(self) -> Path | None:
        """Copy the live file into the store. Returns ``None`` if there is nothing to back up."""
        if not self.live_path.is_file():
            logger.info("backup_nothing_to_snapshot", live_path=str(self.live_path))
            return None

        self.ensure_store_exists()
        target = self._next_free_path()
        try:
            atomic_copy(self.live_path, target)
        except OSError as e:
            raise FilesystemError(f"Error during backup of {self.live_path}: {e}") from e
        logger.info("backup_created", path=str(target))
        return target

    def snapshots(self) -> list[Snapshot]:
        """All snapshots in the store, oldest first."""
        if not self.backup_dir.is_dir():
            return []
        try:
            entries = list(self.backup_dir.iterdir())
        except OSError as e:
            raise FilesystemError(f"Cannot read backup folder {self.backup_dir}: {e}") from e
        found = [snap for p in entries if p.is_file() and (snap := self._parse(p)) is not None]
        return sorted(found, key=lambda s: (s.timestamp_ms, s.name))

    def list_snapshots(self) -> list[Path]:
        return [s.path for s in self.snapshots()]

    def restore_snapshot(self, path: Path | str) -> Path:
        """Overwrite the live file with *path*. The current live file is not backed up."""
        src = Path(path)
        if not src.is_file():
            raise NotFoundError(f"Backup not found: {src}")
        if self._parse(src) is None or src.resolve().parent != self.backup_dir.resolve():
            raise NotFoundError(f"Not a snapshot of {self.backup_dir}: {src}")

        try:
            atomic_copy(src, self.live_path)
        except OSError as e:
            raise FilesystemError(f"Error during restoration from {src}: {e}") from e
        logger.info("backup_restored", source=str(src), live_path=str(self.live_path))
        return self.live_path
