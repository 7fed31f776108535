"""Interactive prompts - numbered menus on top of ``input()``.

The wizard only depends on the ``Prompter`` protocol: ``ask(spec)`` returns
the chosen value, or ``None`` when the user made no selection.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol

from lazyzsh.output import GREEN, RESET, err


class PromptMode(StrEnum):
    SINGLE = "single"
    MULTIPLE = "multiple"
    CONFIRM = "confirm"


@dataclass(frozen=True)
class Choice:
    label: str
    value: Any


@dataclass(frozen=True)
class PromptSpec:
    name: str
    message: str
    mode: PromptMode = PromptMode.SINGLE
    choices: Sequence[Choice] = field(default_factory=tuple)
    default: Any = None


class Prompter(Protocol):
    """Returns the chosen value, or ``None`` to cancel. May raise ``PromptError`` instead."""

    def ask(self, spec: PromptSpec) -> Any:
        ...


def choices_from(values: Sequence[str]) -> list[Choice]:
    """Choices whose label is the value itself."""
    return [Choice(v, v) for v in values]


def _parse_indices(raw: str, count: int) -> list[int] | None:
    """Parse ``"1,3 5-7"`` into zero-based indices, or ``None`` if anything is out of range."""
    picked: list[int] = []
    for token in raw.replace(",", " ").split():
        start, sep, end = token.partition("-")
        try:
            lo = int(start)
            hi = int(end) if sep else lo
        except ValueError:
            return None
        if not (1 <= lo <= hi <= count):
            return None
        for idx in range(lo - 1, hi):
            if idx not in picked:
                picked.append(idx)
    return picked


class ConsolePrompter:
    """Asks questions on the terminal. Empty input, EOF and Ctrl-C cancel."""

    def __init__(self, input_fn: Callable[[str], str] = input) -> None:
        self._input = input_fn

    def _read(self, label: str) -> str | None:
        try:
            return self._input(label).strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return None

    def ask(self, spec: PromptSpec) -> Any:
        if spec.mode is PromptMode.CONFIRM:
            return self._confirm(spec)
        if not spec.choices:
            return None
        if spec.mode is PromptMode.MULTIPLE:
            return self._multiple(spec)
        return self._single(spec)

    def _confirm(self, spec: PromptSpec) -> bool | None:
        default = bool(spec.default) if spec.default is not None else True
        hint = "Y/n" if default else "y/N"
        raw = self._read(f"  {spec.message} [{hint}]: ")
        if raw is None:
            return None
        if not raw:
            return default
        return raw.lower() in ("y", "yes")

    def _print_menu(self, spec: PromptSpec) -> None:
        print(f"  {spec.message}")
        defaults = spec.default if isinstance(spec.default, (list, tuple)) else [spec.default]
        for i, choice in enumerate(spec.choices, 1):
            marker = f" {GREEN}(default){RESET}" if spec.default is not None and choice.value in defaults else ""
            print(f"    {i}) {choice.label}{marker}")

    def _single(self, spec: PromptSpec) -> Any:
        self._print_menu(spec)
        count = len(spec.choices)
        while True:
            raw = self._read(f"  Choose [1-{count}]: ")
            if raw is None:
                return None
            if not raw:
                return spec.default
            indices = _parse_indices(raw, count)
            if indices is not None and len(indices) == 1:
                return spec.choices[indices[0]].value
            err(f"Please enter a number between 1 and {count}.")

    def _multiple(self, spec: PromptSpec) -> list[Any] | None:
        self._print_menu(spec)
        count = len(spec.choices)
        while True:
            raw = self._read(f"  Choose one or more [e.g. 1,3 5-{count}]: ")
            if raw is None:
                return None
            if not raw:
                return list(spec.default) if spec.default else None
            indices = _parse_indices(raw, count)
            if indices:
                return [spec.choices[i].value for i in indices]
            err(f"Please enter numbers between 1 and {count}, separated by commas or spaces.")
