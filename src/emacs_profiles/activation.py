"""Active profile symlink, last-use record, and launching."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from emacs_profiles.config import StoreContext
from emacs_profiles.errors import NotFound, StoreIOError
from emacs_profiles.launchers import ExecLauncher, Launcher
from emacs_profiles.store import ProfileStore

log = logging.getLogger(__name__)


def _write_atomic(path: Path, data: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(prefix=path.name + ".", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)


def _replace_with_symlink(link: Path, target: Path) -> None:
    """Point ``link`` at ``target``, whatever currently sits at ``link``."""
    link.parent.mkdir(parents=True, exist_ok=True)

    if link.is_dir() and not link.is_symlink():
        log.warning("Removing directory at %s to make room for the link", link)
        shutil.rmtree(link)

    if not link.is_symlink() and not link.exists():
        link.symlink_to(target, target_is_directory=True)
        return

    # Swap in a fresh link so the path is never missing
    tmp = link.with_name(f".{link.name}.{os.getpid()}.tmp")
    if tmp.is_symlink() or tmp.exists():
        tmp.unlink()
    tmp.symlink_to(target, target_is_directory=True)
    os.replace(tmp, link)


class ActivationManager:
    """Owns the activation symlink and the last-use record.

    ``activate`` updates the two one after the other; a crash in between
    leaves ``last_use`` naming a different profile than the link. ``status``
    reports the record only, and flags the mismatch.
    """

    def __init__(
        self,
        ctx: StoreContext,
        store: ProfileStore,
        launcher: Launcher | None = None,
        editor: str = "emacs",
        override_flag: str = "--init-directory",
    ):
        self.ctx = ctx
        self.store = store
        self.launcher = launcher or ExecLauncher()
        self.editor = editor
        self.override_flag = override_flag

    def activate(self, name: str) -> None:
        if not self.store.exists(name):
            raise NotFound(name)
        target = self.store.profile_path(name).absolute()
        try:
            _replace_with_symlink(self.ctx.activation_path, target)
        except OSError as e:
            raise StoreIOError("link", self.ctx.activation_path, e) from e
        log.info("Linked %s -> %s", self.ctx.activation_path, target)
        try:
            _write_atomic(self.ctx.last_use_file, name + "\n")
        except OSError as e:
            raise StoreIOError("record last use in", self.ctx.last_use_file, e) from e

    def current_record(self) -> str:
        """Raw last-use record; the named profile may no longer exist."""
        try:
            return self.ctx.last_use_file.read_text().rstrip("\n")
        except FileNotFoundError:
            return ""

    def active_target(self) -> str | None:
        """Name of the profile the activation link points at, if any."""
        link = self.ctx.activation_path
        if not link.is_symlink():
            return None
        target = Path(os.readlink(link))
        if not target.is_absolute():
            target = link.parent / target
        if target.parent.resolve() != self.ctx.profiles_dir.resolve():
            return None
        return target.name

    def launch(self, name: str, extra_args: list[str] | tuple[str, ...] = ()):
        """Start the editor on a profile without switching to it.

        Does not return when the launcher replaces the process.
        """
        if not self.store.exists(name):
            raise NotFound(name)
        path = self.store.profile_path(name).absolute()
        argv = [self.editor, self.override_flag, str(path)] + list(extra_args)
        log.info("Launching %s via %s", argv, self.launcher.display_name)
        return self.launcher.exec(self.editor, argv)
