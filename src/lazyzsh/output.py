"""Terminal output - ANSI colors and status lines for the wizard and the backup commands.

Status goes to stdout; structured logs go to stderr (see ``lazyzsh.log``).
"""

from __future__ import annotations

import os
import sys

# ---------------------------------------------------------------------------
# ANSI helpers (off when stdout is not a TTY or NO_COLOR is set)
# ---------------------------------------------------------------------------
SUPPORTS_COLOR = hasattr(sys.stdout, "isatty") and sys.stdout.isatty() and "NO_COLOR" not in os.environ

GREEN = "\033[92m" if SUPPORTS_COLOR else ""
YELLOW = "\033[93m" if SUPPORTS_COLOR else ""
RED = "\033[91m" if SUPPORTS_COLOR else ""
BLUE = "\033[94m" if SUPPORTS_COLOR else ""
MAGENTA = "\033[95m" if SUPPORTS_COLOR else ""
CYAN = "\033[96m" if SUPPORTS_COLOR else ""
BOLD = "\033[1m" if SUPPORTS_COLOR else ""
RESET = "\033[0m" if SUPPORTS_COLOR else ""


def ok(msg: str) -> None:
    """Report a step that succeeded."""
    print(f"  {GREEN}✓{RESET} {msg}")


def warn(msg: str) -> None:
    """Report something the user should notice; the run continues."""
    print(f"  {YELLOW}⚠{RESET} {msg}")


def err(msg: str) -> None:
    """Report a failure or a cancelled prompt."""
    print(f"  {RED}✗{RESET} {msg}")


def info(msg: str) -> None:
    """Report progress."""
    print(f"  {CYAN}ℹ{RESET} {msg}")


def separator() -> None:
    """Divide wizard phases with a short magenta rule."""
    print(f"\n  {MAGENTA}{'-' * 25}{RESET}\n")


def header(title: str) -> None:
    """Frame *title* between two full-width rules."""
    rule = "─" * 60
    print()
    print(f"  {BOLD}{rule}{RESET}")
    print(f"  {BOLD}{BLUE}{title}{RESET}")
    print(f"  {BOLD}{rule}{RESET}")
    print()
