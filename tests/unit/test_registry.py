"""Tests for the plugin/theme registry."""

import json
from pathlib import Path

import pytest

from lazyzsh.registry import ComponentKind, ComponentRegistry, RegistryEntry, default_registry, load_registry


@pytest.fixture
def registry() -> ComponentRegistry:
    return ComponentRegistry(
        [
            RegistryEntry("git", ComponentKind.PLUGIN),
            RegistryEntry("zsh-z", ComponentKind.PLUGIN, "https://example.test/zsh-z.git"),
            RegistryEntry("spaceship", ComponentKind.THEME, "https://example.test/spaceship.git", "font-x"),
        ],
    )


class TestResolve:
    def test_url(self, registry: ComponentRegistry) -> None:
        assert registry.resolve("zsh-z", ComponentKind.PLUGIN) == "https://example.test/zsh-z.git"

    def test_builtin_has_no_url(self, registry: ComponentRegistry) -> None:
        assert registry.resolve("git", ComponentKind.PLUGIN) is None
        assert registry.is_known("git", ComponentKind.PLUGIN) is True

    def test_unknown_has_no_url(self, registry: ComponentRegistry) -> None:
        assert registry.resolve("nonexistent-plugin", ComponentKind.PLUGIN) is None
        assert registry.is_known("nonexistent-plugin", ComponentKind.PLUGIN) is False
        assert registry.lookup("nonexistent-plugin", ComponentKind.PLUGIN) is None

    def test_kinds_are_separate(self, registry: ComponentRegistry) -> None:
        assert registry.resolve("spaceship", ComponentKind.PLUGIN) is None
        assert registry.resolve("spaceship", ComponentKind.THEME) == "https://example.test/spaceship.git"


class TestRegistryTable:
    def test_identifiers_in_order(self, registry: ComponentRegistry) -> None:
        assert registry.identifiers(ComponentKind.PLUGIN) == ["git", "zsh-z"]
        assert registry.identifiers(ComponentKind.THEME) == ["spaceship"]

    def test_font_for(self, registry: ComponentRegistry) -> None:
        assert registry.font_for("spaceship") == "font-x"
        assert registry.font_for("robbyrussell") is None

    def test_read_only(self, registry: ComponentRegistry) -> None:
        with pytest.raises(TypeError):
            registry._entries[(ComponentKind.PLUGIN, "x")] = RegistryEntry("x", ComponentKind.PLUGIN)  # type: ignore[index]

    def test_overrides_return_new_registry(self, registry: ComponentRegistry) -> None:
        extended = registry.with_overrides(
            {
                "plugins": {"git": "https://mirror.test/git.git", "fast-syntax": "https://example.test/fs.git"},
                "themes": {"pure": {"url": "https://example.test/pure.git", "font": "font-y"}},
            },
        )
        assert extended.resolve("git", ComponentKind.PLUGIN) == "https://mirror.test/git.git"
        assert extended.resolve("fast-syntax", ComponentKind.PLUGIN) == "https://example.test/fs.git"
        assert extended.font_for("pure") == "font-y"
        assert registry.resolve("git", ComponentKind.PLUGIN) is None


class TestDefaultRegistry:
    def test_contains_builtin_tables(self) -> None:
        registry = default_registry()
        assert "zsh-autosuggestions" in registry.identifiers(ComponentKind.PLUGIN)
        assert registry.identifiers(ComponentKind.THEME) == [
            "robbyrussell",
            "agnoster",
            "powerlevel10k",
            "spaceship",
            "starship",
        ]

    def test_oh_my_zsh_plugins_are_builtin(self) -> None:
        registry = default_registry()
        for name in ("git", "docker", "docker-compose", "kubectl", "npm", "vscode"):
            assert registry.is_known(name, ComponentKind.PLUGIN)
            assert registry.resolve(name, ComponentKind.PLUGIN) is None

    def test_external_plugins_have_urls(self) -> None:
        url = default_registry().resolve("zsh-syntax-highlighting", ComponentKind.PLUGIN)
        assert url == "https://github.com/zsh-users/zsh-syntax-highlighting.git"

    def test_theme_fonts(self) -> None:
        registry = default_registry()
        assert registry.font_for("powerlevel10k") == "font-hack-nerd-font"
        assert registry.font_for("robbyrussell") is None


class TestLoadRegistry:
    def test_no_file(self) -> None:
        assert len(load_registry("")) == len(default_registry())

    def test_json_overrides(self, tmp_path: Path) -> None:
        path = tmp_path / "registry.json"
        path.write_text(json.dumps({"plugins": {"you-should-use": "https://example.test/ysu.git"}}))
        registry = load_registry(str(path))
        assert registry.resolve("you-should-use", ComponentKind.PLUGIN) == "https://example.test/ysu.git"

    def test_rejects_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "registry.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError, match="JSON object"):
            load_registry(str(path))

    def test_kind_dirname(self) -> None:
        assert ComponentKind.PLUGIN.dirname == "plugins"
        assert ComponentKind.THEME.dirname == "themes"
