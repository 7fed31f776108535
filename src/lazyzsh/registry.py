"""Component registry - plugin/theme identifiers to their git source URLs.

An empty URL marks a component that ships with Oh My Zsh itself and needs
no fetch. Identifiers missing from the table are *unknown*; ``resolve``
treats both as "no URL" but callers can tell them apart via ``lookup``.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from types import MappingProxyType

import structlog

logger = structlog.get_logger()


class ComponentKind(StrEnum):
    PLUGIN = "plugin"
    THEME = "theme"

    @property
    def dirname(self) -> str:
        """Subdirectory under the custom components root (``plugins`` / ``themes``)."""
        return f"{self.value}s"


@dataclass(frozen=True)
class RegistryEntry:
    identifier: str
    kind: ComponentKind
    source_url: str = ""
    font: str = ""  # Homebrew cask, themes only

    @property
    def builtin(self) -> bool:
        return not self.source_url


_BUILTIN_PLUGINS: dict[str, str] = {
    "git": "",
    "git-flow": "https://github.com/nvie/gitflow.git",
    "npm": "",
    "nvm": "https://github.com/nvm-sh/nvm.git",
    "docker": "",
    "docker-compose": "",
    "kubectl": "",
    "terraform": "https://github.com/hashicorp/terraform.git",
    "vscode": "",
    "fzf": "https://github.com/junegunn/fzf.git",
    "z": "https://github.com/agkozak/zsh-z.git",
    "thefuck": "https://github.com/nvbn/thefuck.git",
    "zsh-autocomplete": "https://github.com/marlonrichert/zsh-autocomplete.git",
    "zsh-autosuggestions": "https://github.com/zsh-users/zsh-autosuggestions.git",
    "zsh-syntax-highlighting": "https://github.com/zsh-users/zsh-syntax-highlighting.git",
}

_BUILTIN_THEMES: dict[str, tuple[str, str]] = {
    "robbyrussell": ("", ""),
    "agnoster": ("", "font-meslo-lg-nerd-font"),
    "powerlevel10k": ("https://github.com/romkatv/powerlevel10k.git", "font-hack-nerd-font"),
    "spaceship": ("https://github.com/spaceship-prompt/spaceship-prompt.git", "font-fira-code-nerd-font"),
    "starship": ("https://github.com/starship/starship.git", "font-fira-code-nerd-font"),
}


class ComponentRegistry:
    """Read-only lookup table, loaded once and passed to whoever needs it."""

    def __init__(self, entries: Iterable[RegistryEntry]) -> None:
        table: dict[tuple[ComponentKind, str], RegistryEntry] = {}
        for entry in entries:
            table[(entry.kind, entry.identifier)] = entry
        self._entries = MappingProxyType(table)

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, identifier: str, kind: ComponentKind) -> RegistryEntry | None:
        return self._entries.get((kind, identifier))

    def is_known(self, identifier: str, kind: ComponentKind) -> bool:
        return (kind, identifier) in self._entries

    def resolve(self, identifier: str, kind: ComponentKind) -> str | None:
        """Return the clone URL, or ``None`` when no fetch is needed or possible."""
        entry = self.lookup(identifier, kind)
        if entry is None:
            logger.warning("registry_identifier_unknown", identifier=identifier, kind=kind.value)
            return None
        if entry.builtin:
            logger.debug("registry_identifier_builtin", identifier=identifier, kind=kind.value)
            return None
        return entry.source_url

    def identifiers(self, kind: ComponentKind) -> list[str]:
        """All identifiers of *kind*, in table order."""
        return [ident for (k, ident) in self._entries if k is kind]

    def font_for(self, theme: str) -> str | None:
        entry = self.lookup(theme, ComponentKind.THEME)
        return entry.font if entry and entry.font else None

    def with_overrides(self, overrides: Mapping[str, Mapping[str, object]]) -> ComponentRegistry:
        """Return a new registry with entries added or replaced.

        *overrides* has the shape ``{"plugins": {id: url}, "themes": {id: url | {"url", "font"}}}``.
        """
        merged = dict(self._entries)
        for section, kind in (("plugins", ComponentKind.PLUGIN), ("themes", ComponentKind.THEME)):
            for ident, value in (overrides.get(section) or {}).items():
                if isinstance(value, Mapping):
                    url = str(value.get("url", "") or "")
                    font = str(value.get("font", "") or "")
                else:
                    url, font = str(value or ""), ""
                merged[(kind, ident)] = RegistryEntry(ident, kind, url, font)
        return ComponentRegistry(merged.values())


def default_registry() -> ComponentRegistry:
    """The built-in plugin/theme table."""
    entries = [RegistryEntry(ident, ComponentKind.PLUGIN, url) for ident, url in _BUILTIN_PLUGINS.items()]
    entries += [
        RegistryEntry(ident, ComponentKind.THEME, url, font) for ident, (url, font) in _BUILTIN_THEMES.items()
    ]
    return ComponentRegistry(entries)


def load_registry(registry_file: str = "") -> ComponentRegistry:
    """Built-in registry, extended by a JSON override file when one is configured."""
    registry = default_registry()
    if not registry_file:
        return registry

    path = Path(registry_file).expanduser()
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        msg = f"Registry file must contain a JSON object, got {type(data).__name__}"
        raise ValueError(msg)
    logger.info("registry_overrides_loaded", path=str(path))
    return registry.with_overrides(data)
