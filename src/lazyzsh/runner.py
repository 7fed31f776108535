"""Command runner - synchronous external commands with consistent logging.

Components receive a ``CommandRunner`` instead of calling ``subprocess``
directly so tests can substitute a recording fake.
"""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

import structlog

from lazyzsh.errors import CommandError, CommandTimeoutError

logger = structlog.get_logger()


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""


class CommandRunner(Protocol):
    """Run a command to completion; raise ``CommandError`` on failure."""

    def run(self, argv: Sequence[str]) -> CmdResult:
        ...


def format_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


class SubprocessRunner:
    """Runs commands with ``subprocess.run``.

    By default the child inherits stdout/stderr so users see ``git clone`` and
    ``brew`` progress live. ``capture=True`` collects the output instead.
    """

    def __init__(
        self,
        *,
        timeout: float | None = 600,
        capture: bool = False,
        dry_run: bool = False,
    ) -> None:
        self._timeout = timeout
        self._capture = capture
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def run(self, argv: Sequence[str]) -> CmdResult:
        argv_list = list(argv)
        logger.info("command_run", command=format_argv(argv_list), dry_run=self._dry_run)

        if self._dry_run:
            return CmdResult(argv=argv_list, returncode=0)

        try:
            proc = subprocess.run(
                argv_list,
                capture_output=self._capture,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            logger.error("command_timeout", command=format_argv(argv_list), timeout=self._timeout)
            raise CommandTimeoutError(argv_list, self._timeout or 0) from e
        except FileNotFoundError as e:
            logger.error("command_not_found", command=argv_list[0])
            raise CommandError(argv_list, None, f"executable not found: {argv_list[0]}") from e
        except OSError as e:
            logger.error("command_os_error", command=format_argv(argv_list), error=str(e))
            raise CommandError(argv_list, None, str(e)) from e

        stdout = proc.stdout or ""
        stderr = proc.stderr or ""
        if proc.returncode != 0:
            logger.warning("command_failed", command=format_argv(argv_list), returncode=proc.returncode)
            raise CommandError(argv_list, proc.returncode, stderr.strip()[:500])

        logger.info("command_ok", command=format_argv(argv_list))
        return CmdResult(argv=argv_list, returncode=proc.returncode, stdout=stdout, stderr=stderr)
