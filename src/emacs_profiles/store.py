"""Profile store: create, copy, remove and list profile directories."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from emacs_profiles.config import INIT_FILE_NAME, StoreContext
from emacs_profiles.errors import (
    AlreadyExists,
    ListingFailed,
    NotFound,
    SourceMissing,
    StoreIOError,
)
from emacs_profiles.names import check_name, validate_name

log = logging.getLogger(__name__)


class ProfileStore:
    """CRUD over the profile directories under ``ctx.profiles_dir``."""

    def __init__(self, ctx: StoreContext, list_command: list[str] | None = None):
        self.ctx = ctx
        self.list_command = list(list_command or ["ls"])

    def profile_path(self, name: str) -> Path:
        return self.ctx.profile_path(name)

    def exists(self, name: str) -> bool:
        if not validate_name(name):
            return False
        return self.profile_path(name).is_dir()

    def names(self) -> list[str]:
        if not self.ctx.profiles_dir.is_dir():
            return []
        return sorted(p.name for p in self.ctx.profiles_dir.iterdir() if p.is_dir())

    def list(self, extra_args: list[str] | tuple[str, ...] = ()) -> str:
        """Run the listing command over the profiles directory.

        ``extra_args`` go to the listing command verbatim; its stdout is
        returned unchanged.
        """
        cmd = self.list_command + list(extra_args) + [str(self.ctx.profiles_dir)]
        log.debug("Listing profiles: %s", cmd)
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise ListingFailed(f"Cannot run {self.list_command[0]}: {e}") from e
        if result.returncode != 0:
            raise ListingFailed(
                result.stderr.strip()
                or f"{self.list_command[0]} exited with status {result.returncode}"
            )
        return result.stdout

    def _check_new(self, name: str) -> Path:
        check_name(name)
        if self.exists(name):
            raise AlreadyExists(name)
        return self.profile_path(name)

    def create_empty(self, name: str) -> Path:
        """Create a profile holding a single empty init file."""
        dst = self._check_new(name)
        try:
            dst.mkdir(parents=True)
            (dst / INIT_FILE_NAME).touch()
        except OSError as e:
            raise StoreIOError("create profile", dst, e) from e
        log.info("Created empty profile %s", name)
        return dst

    def create_copy(self, name: str, source: Path) -> Path:
        """Copy ``source`` into a new profile, dereferencing symlinks.

        An interrupted copy leaves the partial profile in place.
        """
        dst = self._check_new(name)
        source = Path(source)
        if not source.is_dir():
            raise SourceMissing(source)
        log.info("Copying %s to profile %s", source, name)
        try:
            shutil.copytree(source, dst, symlinks=False)
        except OSError as e:
            if dst.exists():
                log.warning("Partial copy left at %s", dst)
            raise StoreIOError(f"copy {source} into profile", dst, e) from e
        return dst

    def remove(self, name: str) -> None:
        check_name(name)
        if not self.exists(name):
            raise NotFound(name)
        path = self.profile_path(name)
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise StoreIOError("remove profile", path, e) from e
        log.info("Removed profile %s, remaining: %s", name, ", ".join(self.names()) or "(none)")
