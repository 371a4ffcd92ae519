"""Launchers that start the editor against a profile directory."""

from emacs_profiles.launchers.base import Launcher
from emacs_profiles.launchers.exec import ExecLauncher
from emacs_profiles.launchers.spawn import SubprocessLauncher


def create_launcher(kind: str = "exec") -> Launcher:
    """Factory: create the launcher named in the settings."""
    if kind == "exec":
        return ExecLauncher()
    elif kind == "subprocess":
        return SubprocessLauncher()
    else:
        raise ValueError(f"Unknown launcher type: {kind}")
