"""Configuration synthesizer - renders ``.zshrc`` text from a ``Selection``.

``render`` is a pure function: the same selection always yields the same
bytes. Only the ``plugins=(...)`` line depends on plugin order; every
conditional block depends on set membership alone and is emitted in a fixed
order.
"""

from __future__ import annotations

import re
import textwrap
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum

from lazyzsh.errors import SelectionError

_IDENTIFIER = re.compile(r"^[A-Za-z0-9._+-]+$")


class AliasMode(StrEnum):
    DEFAULT = "default"
    CUSTOM = "custom"


class FunctionMode(StrEnum):
    DEFAULT = "default"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Selection:
    """Everything the user chose for one run."""

    theme: str
    plugins: tuple[str, ...] = field(default_factory=tuple)
    alias_mode: AliasMode = AliasMode.DEFAULT
    function_mode: FunctionMode = FunctionMode.DEFAULT

    def __post_init__(self) -> None:
        # Accept any sequence (lists from prompts) but keep the instance hashable.
        object.__setattr__(self, "plugins", tuple(self.plugins))
        object.__setattr__(self, "alias_mode", AliasMode(self.alias_mode))
        object.__setattr__(self, "function_mode", FunctionMode(self.function_mode))


def validate_identifier(name: str) -> str:
    """Reject names that would break the quoted config lines or point outside a component directory."""
    if not _IDENTIFIER.match(name) or name in (".", ".."):
        raise SelectionError(f"Invalid component name: {name!r}")
    return name


def dedupe(plugins: Iterable[str]) -> list[str]:
    """Drop repeated identifiers, keeping the first occurrence's position."""
    return list(dict.fromkeys(plugins))


def duplicates(plugins: Sequence[str]) -> list[str]:
    """Identifiers that ``dedupe`` would drop, in order of first repetition."""
    seen: set[str] = set()
    dups: list[str] = []
    for p in plugins:
        if p in seen and p not in dups:
            dups.append(p)
        seen.add(p)
    return dups


# ---------------------------------------------------------------------------
# Fixed text fragments
# ---------------------------------------------------------------------------

PREAMBLE = textwrap.dedent("""\
    # ==============================
    #   Oh-My-Zsh Configuration
    #   Generated by: lazyzsh
    # ==============================

    export ZSH="$HOME/.oh-my-zsh"

    export PATH="$HOME/bin:/usr/local/bin:$PATH"
    if [[ $(uname -m) == 'arm64' ]]; then
        export PATH="/opt/homebrew/bin:$PATH"
    else
        export PATH="/usr/local/bin:$PATH"
    fi
    export PATH="$PATH:/Applications/Visual Studio Code.app/Contents/Resources/app/bin"
    export PATH="$PATH:/Applications/Docker.app/Contents/Resources/bin/"
    export PATH="$PATH:/usr/local/mysql/bin"
""")

SOURCE_OH_MY_ZSH = "source $ZSH/oh-my-zsh.sh"

DOCKER_BLOCK = textwrap.dedent("""\
    # --- Docker ---
    alias dps='docker ps'
    alias dstop='docker stop $(docker ps -a -q)'
    alias drm='docker rm $(docker ps -a -q)'
    alias dimages='docker images'
    alias dbuild='docker build -t'
    alias dcup='docker compose up -d'
    alias dcdown='docker compose down'
""")

KUBERNETES_BLOCK = textwrap.dedent("""\
    # --- Kubernetes ---
    alias k='kubectl'
    alias kgp='kubectl get pods'
    alias kgs='kubectl get services'
    alias kctx='kubectl config current-context'
""")

NVM_BLOCK = textwrap.dedent("""\
    # --- NVM ---
    export NVM_DIR="$HOME/.nvm"
    [ -s "$NVM_DIR/nvm.sh" ] && \\. "$NVM_DIR/nvm.sh"
    [ -s "$NVM_DIR/bash_completion" ] && \\. "$NVM_DIR/bash_completion"
""")

FZF_BLOCK = textwrap.dedent("""\
    # --- fzf ---
    [ -f ~/.fzf.zsh ] && source ~/.fzf.zsh
""")

THEFUCK_BLOCK = textwrap.dedent("""\
    # --- thefuck ---
    eval $(thefuck --alias)
""")

POWERLEVEL10K_BLOCK = textwrap.dedent("""\
    # --- Powerlevel10k ---
    [[ ! -f ~/.p10k.zsh ]] || source ~/.p10k.zsh
""")

STARSHIP_BLOCK = textwrap.dedent("""\
    # --- Starship ---
    eval "$(starship init zsh)"
""")

DEFAULT_ALIASES = textwrap.dedent("""\
    # --- Aliases ---
    alias ll='ls -la'
    alias gs='git status'
    alias ..='cd ..'
    alias la='ls -A'
    alias h='history'
    alias reload='source ~/.zshrc'
""")

CUSTOM_ALIASES = DEFAULT_ALIASES + textwrap.dedent("""\

    alias ga='git add'
    alias gc='git commit'
    alias gp='git push'
    alias gco='git checkout'
    alias gb='git branch'
""")

DEFAULT_FUNCTIONS = textwrap.dedent("""\
    # --- Functions ---
    cl() { cd "$1" && ls }
    mkcd() { mkdir -p "$1" && cd "$1" }
""")

CUSTOM_FUNCTIONS = DEFAULT_FUNCTIONS + textwrap.dedent("""\
    duf() { du -sh "$1" 2>/dev/null }
""")


@dataclass(frozen=True)
class ConditionalBlock:
    name: str
    applies: Callable[[str, frozenset[str]], bool]
    text: str


# Emission order is this tuple's order, never the plugin order.
CONDITIONAL_BLOCKS: tuple[ConditionalBlock, ...] = (
    ConditionalBlock("docker", lambda theme, plugins: bool({"docker", "docker-compose"} & plugins), DOCKER_BLOCK),
    ConditionalBlock("kubernetes", lambda theme, plugins: "kubectl" in plugins, KUBERNETES_BLOCK),
    ConditionalBlock("nvm", lambda theme, plugins: "nvm" in plugins, NVM_BLOCK),
    ConditionalBlock("fzf", lambda theme, plugins: "fzf" in plugins, FZF_BLOCK),
    ConditionalBlock("thefuck", lambda theme, plugins: "thefuck" in plugins, THEFUCK_BLOCK),
    ConditionalBlock("powerlevel10k", lambda theme, plugins: theme == "powerlevel10k", POWERLEVEL10K_BLOCK),
    ConditionalBlock("starship", lambda theme, plugins: theme == "starship", STARSHIP_BLOCK),
)


def active_blocks(selection: Selection) -> list[str]:
    """Names of the conditional blocks ``render`` will emit for *selection*."""
    present = frozenset(selection.plugins)
    return [b.name for b in CONDITIONAL_BLOCKS if b.applies(selection.theme, present)]


def plugins_line(plugins: Iterable[str]) -> str:
    return f"plugins=({' '.join(dedupe(plugins))})"


def theme_line(theme: str) -> str:
    return f'ZSH_THEME="{theme}"'


def render(selection: Selection) -> str:
    """Render the full ``.zshrc`` text for *selection*."""
    present = frozenset(selection.plugins)

    sections: list[str] = [
        PREAMBLE,
        plugins_line(selection.plugins),
        theme_line(selection.theme),
        SOURCE_OH_MY_ZSH,
    ]
    sections.extend(b.text for b in CONDITIONAL_BLOCKS if b.applies(selection.theme, present))
    sections.append(CUSTOM_ALIASES if selection.alias_mode is AliasMode.CUSTOM else DEFAULT_ALIASES)
    sections.append(CUSTOM_FUNCTIONS if selection.function_mode is FunctionMode.CUSTOM else DEFAULT_FUNCTIONS)

    return "\n\n".join(s.strip("\n") for s in sections).strip()
