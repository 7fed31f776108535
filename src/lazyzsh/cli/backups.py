"""Non-interactive backup commands - ``lazyzsh backup`` and ``lazyzsh backups``."""

from __future__ import annotations

from lazyzsh.cli._helpers import EXIT_FATAL, EXIT_OK, build_store
from lazyzsh.config import Settings
from lazyzsh.errors import FilesystemError
from lazyzsh.output import err, header, info, ok, warn


def run_backup(settings: Settings) -> int:
    """Snapshot the live ``.zshrc``."""
    store = build_store(settings)
    try:
        snapshot = store.create_snapshot()
    except FilesystemError as e:
        err(str(e))
        return EXIT_FATAL

    if snapshot is None:
        warn(f"No {store.live_path.name} file found to back up.")
    else:
        ok(f"Backup created at: {snapshot}")
    return EXIT_OK


def run_list_backups(settings: Settings) -> int:
    """Print every snapshot, newest first."""
    store = build_store(settings)
    try:
        snapshots = store.snapshots()
    except FilesystemError as e:
        err(str(e))
        return EXIT_FATAL

    header(f"Backups in {store.backup_dir}")
    if not snapshots:
        info("No backups found.")
        return EXIT_OK
    for snap in reversed(snapshots):
        print(f"    {snap.created_at.astimezone():%Y-%m-%d %H:%M:%S}  {snap.path}")
    return EXIT_OK
