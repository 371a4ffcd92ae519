"""Launcher that runs the editor as a child process."""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import NoReturn

from emacs_profiles.errors import LaunchError
from emacs_profiles.launchers.base import Launcher

log = logging.getLogger(__name__)


class SubprocessLauncher(Launcher):
    """For platforms without exec: wait for the editor, then exit with its status."""

    def exec(self, program: str, argv: list[str]) -> NoReturn:
        log.debug("spawn %s %s", program, argv)
        try:
            result = subprocess.run([program] + argv[1:])
        except OSError as e:
            raise LaunchError(f"Cannot launch {program}: {e}") from e
        sys.exit(result.returncode)

    @property
    def display_name(self) -> str:
        return "subprocess"
