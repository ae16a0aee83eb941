"""Persisted launcher configuration."""

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigValidationError, StorageError

logger = logging.getLogger(__name__)

APP_NAME = "satellite-launcher"


def get_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME", "").strip()
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_default_config_path() -> Path:
    return get_config_dir() / "config.json"


class LauncherConfig(BaseModel):
    game_directory: str = Field(default_factory=lambda: str(Path.home() / ".minecraft"))
    java_executable: Optional[str] = None

    min_memory: int = 1024
    max_memory: int = 4096
    jvm_args: List[str] = Field(default_factory=list)

    player_name: str = "Player"
    player_uuid: Optional[str] = None

    download_timeout: int = 30
    max_retries: int = 3
    concurrent_downloads: int = 8

    show_snapshots: bool = False
    show_beta_versions: bool = False

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "LauncherConfig":
        """Load the config file, writing defaults when it does not exist yet."""
        path = path or get_default_config_path()
        if not path.exists():
            config = cls()
            config.save(path)
            return config

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise StorageError(path, str(e)) from e
        except ValueError as e:
            raise ConfigValidationError("config", f"{path} is not valid JSON: {e}") from e

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(p) for p in first["loc"]) or "config"
            raise ConfigValidationError(field, first["msg"]) from e

    def save(self, path: Optional[Path] = None):
        path = path or get_default_config_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            raise StorageError(path, str(e)) from e
        logger.debug("Saved config to %s", path)

    def validate_config(self):
        if self.min_memory > self.max_memory:
            raise ConfigValidationError("memory", "Min memory cannot be greater than max memory")
        if self.max_memory < 512:
            raise ConfigValidationError("max_memory", "Max memory must be at least 512MB")
        if not self.game_directory.strip():
            raise ConfigValidationError("game_directory", "Game directory cannot be empty")
        if not self.player_name.strip():
            raise ConfigValidationError("player_name", "Player name cannot be empty")
        if len(self.player_name) > 16:
            raise ConfigValidationError("player_name", "Player name cannot be longer than 16 characters")
        if self.concurrent_downloads < 1:
            raise ConfigValidationError("concurrent_downloads", "At least one concurrent download is required")

    @property
    def game_dir(self) -> Path:
        return Path(self.game_directory).expanduser()

    def get_jvm_args(self) -> List[str]:
        return [f"-Xms{self.min_memory}M", f"-Xmx{self.max_memory}M", *self.jvm_args]

    def get_java_executable(self) -> str:
        if self.java_executable:
            return self.java_executable
        java_home = os.environ.get("JAVA_HOME")
        if java_home:
            name = "java.exe" if os.name == "nt" else "java"
            return str(Path(java_home) / "bin" / name)
        return "java"
