"""Atomic file replacement helpers shared by backup/restore and config writes.

Symlinked destinations are written through: the link target is replaced, the
link itself stays. A replaced file keeps its permission bits.
"""

from __future__ import annotations

import os
import shutil
import stat
import tempfile
from pathlib import Path


def _umask_mode() -> int:
    """Mode a plain ``open(..., "w")`` would give a new file."""
    current = os.umask(0)
    os.umask(current)
    return 0o666 & ~current


def _replace_via_temp(dest: Path, fill, new_file_mode: int | None) -> None:
    """Create a temp file beside *dest*, let *fill* populate it, then rename it over *dest*."""
    dest = Path(dest).resolve()
    dest.parent.mkdir(parents=True, exist_ok=True)
    try:
        mode: int | None = stat.S_IMODE(dest.stat().st_mode)
    except FileNotFoundError:
        mode = new_file_mode

    fd, tmp_name = tempfile.mkstemp(prefix=f".{dest.name}.", suffix=".tmp", dir=dest.parent)
    os.close(fd)
    tmp = Path(tmp_name)
    try:
        fill(tmp)
        if mode is not None:
            os.chmod(tmp, mode)
        os.replace(tmp, dest)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def atomic_copy(src: Path, dest: Path) -> None:
    """Copy *src* over *dest* so readers see either the old or the new file.

    A new *dest* takes the mode of *src*; an existing one keeps its own.
    """
    _replace_via_temp(dest, lambda tmp: shutil.copy2(src, tmp), None)


def atomic_write_text(dest: Path, text: str) -> None:
    """Write *text* to *dest* atomically (UTF-8)."""
    _replace_via_temp(dest, lambda tmp: tmp.write_text(text, encoding="utf-8"), _umask_mode())
