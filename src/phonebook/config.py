"""Configuration management for Phonebook."""

import os
from pathlib import Path
from typing import Optional, Dict, Any, List
import toml
from pydantic import BaseModel, Field, ConfigDict


DEFAULT_CONFIG_DIR = Path.home() / ".config" / "projects"


class AppConfig(BaseModel):
    """Configuration stored in <config dir>/config.toml."""

    model_config = ConfigDict(
        extra="allow"
    )  # Allow additional fields for extensibility

    projects_file: Optional[Path] = Field(
        default=None, description="Catalogue file (default: <config dir>/projects.json)"
    )
    editor: str = Field(default="nvim", description="Editor executable")
    editor_args: List[str] = Field(
        default_factory=lambda: ["."], description="Arguments passed to the editor"
    )
    path_weight_divisor: int = Field(
        default=2, ge=1, description="Divisor applied to path match scores"
    )
    log_level: str = Field(default="WARNING", description="Logging level")

    @property
    def editor_command(self) -> List[str]:
        """Full editor command line."""
        return [self.editor, *self.editor_args]


class Config:
    """Manages Phonebook configuration."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize config manager.

        Args:
            config_dir: Configuration directory. If None, uses PHONEBOOK_CONFIG_DIR env var or ~/.config/projects.
        """
        if config_dir is None:
            env_dir = os.environ.get("PHONEBOOK_CONFIG_DIR")
            if env_dir:
                config_dir = Path(env_dir).expanduser()

        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self.config_path = self.config_dir / "config.toml"
        self._config: Optional[AppConfig] = None

    @property
    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()

    @property
    def projects_path(self) -> Path:
        """Resolve the catalogue file location."""
        config = self._config or self.load()
        if config.projects_file:
            return Path(config.projects_file).expanduser()
        return self.config_dir / "projects.json"

    @property
    def log_path(self) -> Path:
        """Log file used while the interactive screen owns the terminal."""
        return self.config_dir / "phonebook.log"

    def load(self) -> AppConfig:
        """Load configuration from disk, with environment variable overrides.

        A missing config file is not an error: defaults are used.
        """
        data: Dict[str, Any] = {}
        if self.exists:
            with open(self.config_path, "r") as f:
                data = toml.load(f)

        self._apply_env_overrides(data)

        self._config = AppConfig(**data)
        return self._config

    def _apply_env_overrides(self, data: Dict[str, Any]) -> None:
        """Apply environment variable overrides to configuration data."""
        if env_file := os.environ.get("PHONEBOOK_PROJECTS_FILE"):
            data["projects_file"] = env_file

        if env_editor := os.environ.get("PHONEBOOK_EDITOR"):
            data["editor"] = env_editor

        if env_level := os.environ.get("PHONEBOOK_LOG_LEVEL"):
            data["log_level"] = env_level.upper()

    def save(self, config: Optional[AppConfig] = None) -> None:
        """Save configuration to disk.

        Args:
            config: Configuration to save. If None, saves current config.
        """
        if config:
            self._config = config

        if not self._config:
            raise ValueError("No configuration to save")

        self.config_dir.mkdir(parents=True, exist_ok=True)

        # TOML has no null, so unset optional values are left out
        config_dict = self._config.model_dump(mode="json", exclude_none=True)

        with open(self.config_path, "w") as f:
            toml.dump(config_dict, f)

    def init_config(self) -> AppConfig:
        """Write a default configuration file.

        Raises:
            FileExistsError: If the config file already exists
        """
        if self.exists:
            raise FileExistsError(f"Config file already exists at {self.config_path}")

        config = AppConfig()
        self.save(config)
        return config
