"""Configuration and on-disk layout for emacs-profiles."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from emacs_profiles.errors import ProfileError

APP_NAME = "emacs-profiles"

PROFILES_DIRNAME = "profiles"
INIT_MARKER_NAME = "init_done"
LAST_USE_NAME = "last_use"
INIT_FILE_NAME = "init.el"
LEGACY_PROFILE_NAME = "main"
LAUNCHERS = ("exec", "subprocess")


def xdg_config_dir() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def xdg_data_dir() -> Path:
    base = os.environ.get("XDG_DATA_HOME")
    if base:
        return Path(base) / APP_NAME
    return Path.home() / ".local" / "share" / APP_NAME


def default_config_file() -> Path:
    return xdg_config_dir() / "config.json"


@dataclass
class Settings:
    """User settings loaded from config.json."""

    data_dir: str | None = None
    activation_path: str = "~/.emacs.d"
    editor: str = "emacs"
    override_flag: str = "--init-directory"
    list_command: list[str] = field(default_factory=lambda: ["ls"])
    launcher: str = "exec"

    @property
    def data_path(self) -> Path:
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return xdg_data_dir()

    @property
    def activation_link(self) -> Path:
        return Path(self.activation_path).expanduser()


def load_config(path: Path | None = None) -> Settings:
    """Load settings from disk. Returns default Settings if file doesn't exist."""
    path = path or default_config_file()
    settings = Settings()

    if path.exists():
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise ProfileError(f"Failed to parse config file: {path}") from exc
        if not isinstance(data, dict):
            raise ProfileError(f"Config file must contain a JSON object: {path}")
        list_command = data.get("list_command", settings.list_command)
        if isinstance(list_command, str):
            list_command = list_command.split()
        settings = Settings(
            data_dir=data.get("data_dir"),
            activation_path=data.get("activation_path", settings.activation_path),
            editor=data.get("editor", settings.editor),
            override_flag=data.get("override_flag", settings.override_flag),
            list_command=list(list_command),
            launcher=data.get("launcher", settings.launcher),
        )
        if settings.launcher not in LAUNCHERS:
            raise ProfileError(
                f"Unknown launcher '{settings.launcher}' in {path} "
                f"(expected one of: {', '.join(LAUNCHERS)})"
            )

    editor = os.environ.get("EMACS_PROFILES_EDITOR")
    if editor:
        settings.editor = editor
    return settings


@dataclass(frozen=True)
class StoreContext:
    """Paths of the profile store and the activation link.

    Built once per invocation and handed to every component.
    """

    root: Path
    activation_path: Path

    @classmethod
    def from_settings(
        cls, settings: Settings, root: Path | None = None
    ) -> StoreContext:
        return cls(
            root=Path(root).expanduser() if root else settings.data_path,
            activation_path=settings.activation_link,
        )

    @property
    def profiles_dir(self) -> Path:
        return self.root / PROFILES_DIRNAME

    @property
    def init_marker(self) -> Path:
        return self.root / INIT_MARKER_NAME

    @property
    def last_use_file(self) -> Path:
        return self.root / LAST_USE_NAME

    def profile_path(self, name: str) -> Path:
        return self.profiles_dir / name
