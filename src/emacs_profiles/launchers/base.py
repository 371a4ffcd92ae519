"""Abstract base class for launchers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import NoReturn


class Launcher(ABC):
    """Hands control to an external program."""

    @abstractmethod
    def exec(self, program: str, argv: list[str]) -> NoReturn:
        """Run ``program`` with ``argv`` (argv[0] included).

        Never returns on success; raises LaunchError on failure.
        """

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable name for log messages."""
