"""Shared fakes for the command runner and the interactive prompter."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from lazyzsh.config import Settings
from lazyzsh.errors import CommandError
from lazyzsh.prompts import PromptSpec
from lazyzsh.runner import CmdResult


class RecordingRunner:
    """Records every argv. ``git clone`` creates a minimal checkout unless the URL is marked to fail."""

    def __init__(self, fail_on: Sequence[str] = ()) -> None:
        self.calls: list[list[str]] = []
        self._fail_on = set(fail_on)

    def run(self, argv: Sequence[str]) -> CmdResult:
        argv = list(argv)
        self.calls.append(argv)
        if any(token in self._fail_on for token in argv):
            raise CommandError(argv, 128, "fatal: repository not found")
        if argv[:2] == ["git", "clone"]:
            target = Path(argv[-1])
            (target / ".git").mkdir(parents=True)
            (target / ".git" / "HEAD").write_text("ref: refs/heads/master\n")
            (target / "README.md").write_text("fake checkout\n")
        return CmdResult(argv=argv, returncode=0)


class ScriptedPrompter:
    """Answers prompts from a queue; records every question asked."""

    def __init__(self, answers: Sequence[Any]) -> None:
        self._answers = list(answers)
        self.asked: list[PromptSpec] = []

    def ask(self, spec: PromptSpec) -> Any:
        self.asked.append(spec)
        if not self._answers:
            msg = f"Unexpected prompt: {spec.name}"
            raise AssertionError(msg)
        return self._answers.pop(0)

    @property
    def names(self) -> list[str]:
        return [s.name for s in self.asked]


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings rooted in a temporary home with Oh My Zsh present."""
    monkeypatch.chdir(tmp_path)
    home = tmp_path / "home"
    (home / ".oh-my-zsh" / "custom").mkdir(parents=True)
    return Settings(home=home, install_fonts=False, discovery_enabled=False)


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def make_runner() -> type[RecordingRunner]:
    return RecordingRunner


@pytest.fixture
def make_prompter() -> type[ScriptedPrompter]:
    return ScriptedPrompter
