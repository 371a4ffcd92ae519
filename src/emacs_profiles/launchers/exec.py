"""Launcher that replaces the current process image."""

from __future__ import annotations

import logging
import os
import sys
from typing import NoReturn

from emacs_profiles.errors import LaunchError
from emacs_profiles.launchers.base import Launcher

log = logging.getLogger(__name__)


class ExecLauncher(Launcher):
    """Adapter over os.execvp; stdin, stdout and stderr are inherited."""

    def exec(self, program: str, argv: list[str]) -> NoReturn:
        log.debug("exec %s %s", program, argv)
        sys.stdout.flush()
        sys.stderr.flush()
        try:
            os.execvp(program, argv)
        except OSError as e:
            raise LaunchError(f"Cannot launch {program}: {e}") from e

    @property
    def display_name(self) -> str:
        return "exec"
