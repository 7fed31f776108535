"""Application configuration via environment variables."""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PLUGINS: list[str] = [
    "git",
    "git-flow",
    "npm",
    "nvm",
    "docker",
    "docker-compose",
    "kubectl",
    "terraform",
    "vscode",
    "fzf",
    "z",
    "zsh-autocomplete",
    "zsh-autosuggestions",
    "zsh-syntax-highlighting",
]


class Settings(BaseSettings):
    """lazy-zsh configuration, loaded from ``LAZYZSH_*`` variables or .env."""

    model_config = SettingsConfigDict(
        env_prefix="LAZYZSH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Filesystem layout (relative to home) ---
    home: Path = Field(default_factory=Path.home)
    zshrc_name: str = ".zshrc"
    backup_dir_name: str = ".awesome-lazy-zsh_backup"
    backup_prefix: str = ".zshrc.backup."
    oh_my_zsh_dir: str = ".oh-my-zsh"

    # --- External commands ---
    command_timeout: int = Field(default=600, ge=1, le=3600)
    install_fonts: bool = True
    dry_run: bool = False

    # --- Discovery ("Find more...") ---
    discovery_enabled: bool = True
    discovery_timeout: float = Field(default=15.0, gt=0)

    # --- Default installation ---
    default_theme: str = "spaceship"
    default_plugins: list[str] = Field(default_factory=lambda: list(DEFAULT_PLUGINS))

    # --- Registry / logging ---
    registry_file: str = ""
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    @field_validator("backup_prefix")
    @classmethod
    def validate_backup_prefix(cls, v: str) -> str:
        """Snapshots are recognised by prefix, so it must be a plain filename part."""
        if not v or "/" in v:
            msg = "backup_prefix must be a non-empty filename prefix"
            raise ValueError(msg)
        return v

    @property
    def zshrc_path(self) -> Path:
        return self.home / self.zshrc_name

    @property
    def backup_dir(self) -> Path:
        return self.home / self.backup_dir_name

    @property
    def oh_my_zsh_path(self) -> Path:
        return self.home / self.oh_my_zsh_dir

    @property
    def components_root(self) -> Path:
        return self.oh_my_zsh_path / "custom"
