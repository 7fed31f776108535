"""Tests for the .zshrc synthesizer."""

import pytest

from lazyzsh.errors import SelectionError
from lazyzsh.synthesizer import (
    AliasMode,
    FunctionMode,
    Selection,
    active_blocks,
    dedupe,
    duplicates,
    render,
    validate_identifier,
)

DOCKER_MARKER = "# --- Docker ---"
K8S_MARKER = "# --- Kubernetes ---"
STARSHIP_MARKER = 'eval "$(starship init zsh)"'


def _lines_starting(text: str, prefix: str) -> list[str]:
    return [line for line in text.splitlines() if line.startswith(prefix)]


# ---------------------------------------------------------------------------
# End-to-end scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_git_and_docker(self) -> None:
        text = render(Selection(theme="robbyrussell", plugins=("git", "docker")))
        assert _lines_starting(text, "plugins=") == ["plugins=(git docker)"]
        assert _lines_starting(text, "ZSH_THEME=") == ['ZSH_THEME="robbyrussell"']
        assert DOCKER_MARKER in text
        assert K8S_MARKER not in text
        assert STARSHIP_MARKER not in text

    def test_empty_plugins(self) -> None:
        selection = Selection(theme="robbyrussell", plugins=())
        text = render(selection)
        assert _lines_starting(text, "plugins=") == ["plugins=()"]
        assert active_blocks(selection) == []
        for marker in (DOCKER_MARKER, K8S_MARKER, "# --- NVM ---", STARSHIP_MARKER):
            assert marker not in text


# ---------------------------------------------------------------------------
# Plugin line
# ---------------------------------------------------------------------------


class TestPluginLine:
    def test_order_preserved(self) -> None:
        text = render(Selection(theme="agnoster", plugins=("z", "git", "fzf")))
        assert "plugins=(z git fzf)" in text

    def test_duplicates_dropped_first_position_kept(self) -> None:
        text = render(Selection(theme="agnoster", plugins=("git", "z", "git", "docker", "z")))
        assert _lines_starting(text, "plugins=") == ["plugins=(git z docker)"]

    def test_accepts_list(self) -> None:
        selection = Selection(theme="agnoster", plugins=["git"])  # type: ignore[arg-type]
        assert selection.plugins == ("git",)


class TestDeterminism:
    def test_identical_input_identical_output(self) -> None:
        a = Selection(theme="spaceship", plugins=("git", "nvm", "kubectl"), alias_mode=AliasMode.CUSTOM)
        b = Selection(theme="spaceship", plugins=("git", "nvm", "kubectl"), alias_mode=AliasMode.CUSTOM)
        assert render(a).encode() == render(b).encode()

    def test_blocks_independent_of_plugin_order(self) -> None:
        a = render(Selection(theme="x", plugins=("kubectl", "docker", "nvm")))
        b = render(Selection(theme="x", plugins=("nvm", "docker", "kubectl")))
        strip = lambda t: [line for line in t.splitlines() if not line.startswith("plugins=")]  # noqa: E731
        assert strip(a) == strip(b)

    def test_trimmed(self) -> None:
        text = render(Selection(theme="robbyrussell"))
        assert text == text.strip()


# ---------------------------------------------------------------------------
# Conditional blocks
# ---------------------------------------------------------------------------


class TestConditionalBlocks:
    @pytest.mark.parametrize(
        ("plugins", "expected"),
        [
            (("docker",), True),
            (("docker-compose",), True),
            (("docker", "docker-compose"), True),
            (("git",), False),
            ((), False),
        ],
    )
    def test_docker_block(self, plugins: tuple[str, ...], expected: bool) -> None:
        text = render(Selection(theme="robbyrussell", plugins=plugins))
        assert (DOCKER_MARKER in text) is expected

    def test_docker_block_emitted_once(self) -> None:
        text = render(Selection(theme="robbyrussell", plugins=("docker", "docker-compose")))
        assert text.count(DOCKER_MARKER) == 1

    @pytest.mark.parametrize(("theme", "expected"), [("starship", True), ("spaceship", False), ("robbyrussell", False)])
    def test_starship_block(self, theme: str, expected: bool) -> None:
        text = render(Selection(theme=theme, plugins=("git",)))
        assert (STARSHIP_MARKER in text) is expected

    def test_kubernetes_block(self) -> None:
        assert K8S_MARKER in render(Selection(theme="x", plugins=("kubectl",)))

    def test_nvm_block(self) -> None:
        text = render(Selection(theme="x", plugins=("nvm",)))
        assert 'export NVM_DIR="$HOME/.nvm"' in text
        assert '\\. "$NVM_DIR/nvm.sh"' in text

    def test_fixed_block_order(self) -> None:
        selection = Selection(theme="starship", plugins=("thefuck", "nvm", "kubectl", "docker", "fzf"))
        assert active_blocks(selection) == ["docker", "kubernetes", "nvm", "fzf", "thefuck", "starship"]

    def test_powerlevel10k_block(self) -> None:
        assert "source ~/.p10k.zsh" in render(Selection(theme="powerlevel10k"))


# ---------------------------------------------------------------------------
# Layout, aliases and functions
# ---------------------------------------------------------------------------


class TestLayout:
    def test_plugins_and_theme_before_source(self) -> None:
        text = render(Selection(theme="robbyrussell", plugins=("git",)))
        assert text.index("plugins=(git)") < text.index("source $ZSH/oh-my-zsh.sh")
        assert text.index('ZSH_THEME="robbyrussell"') < text.index("source $ZSH/oh-my-zsh.sh")

    def test_preamble_first(self) -> None:
        text = render(Selection(theme="robbyrussell"))
        assert text.startswith("# ==============================")
        assert 'export ZSH="$HOME/.oh-my-zsh"' in text

    def test_default_aliases(self) -> None:
        text = render(Selection(theme="x"))
        assert "alias ll='ls -la'" in text
        assert "alias ga='git add'" not in text

    def test_custom_aliases(self) -> None:
        text = render(Selection(theme="x", alias_mode=AliasMode.CUSTOM))
        assert "alias ll='ls -la'" in text
        assert "alias ga='git add'" in text

    def test_custom_functions(self) -> None:
        default = render(Selection(theme="x"))
        custom = render(Selection(theme="x", function_mode=FunctionMode.CUSTOM))
        assert 'mkcd() { mkdir -p "$1" && cd "$1" }' in default
        assert "duf()" not in default
        assert "duf()" in custom

    def test_modes_accept_strings(self) -> None:
        selection = Selection(theme="x", alias_mode="custom", function_mode="custom")  # type: ignore[arg-type]
        assert selection.alias_mode is AliasMode.CUSTOM
        assert selection.function_mode is FunctionMode.CUSTOM


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_dedupe(self) -> None:
        assert dedupe(["a", "b", "a", "c", "b"]) == ["a", "b", "c"]

    def test_duplicates(self) -> None:
        assert duplicates(["a", "b", "a", "a", "b"]) == ["a", "b"]
        assert duplicates(["a", "b"]) == []

    @pytest.mark.parametrize("name", ["git", "zsh-autosuggestions", "git-flow", "powerlevel10k", "1password", "c++"])
    def test_valid_identifiers(self, name: str) -> None:
        assert validate_identifier(name) == name

    @pytest.mark.parametrize("name", ["", ".", "..", 'evil"theme', "a b", "x;rm -rf ~", "$(whoami)"])
    def test_invalid_identifiers(self, name: str) -> None:
        with pytest.raises(SelectionError):
            validate_identifier(name)
