"""One-time migration of an existing config directory into the store."""

from __future__ import annotations

import enum
import logging

from emacs_profiles.config import LEGACY_PROFILE_NAME, StoreContext
from emacs_profiles.errors import AlreadyExists, StoreIOError

log = logging.getLogger(__name__)


class InitState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    AWAITING_EXPLICIT_INIT = "awaiting-explicit-init"
    INITIALIZED = "initialized"


class LifecycleInitializer:
    """Sets up the store and absorbs a legacy config directory as ``main``.

    States:
      UNINITIALIZED           marker absent, no legacy directory; healed
                              automatically by ``is_initialized``.
      AWAITING_EXPLICIT_INIT  marker absent, legacy directory present; only
                              an explicit ``ensure_initialized`` moves it.
      INITIALIZED             marker present. Never reverts.
    """

    def __init__(self, ctx: StoreContext):
        self.ctx = ctx

    def has_legacy_dir(self) -> bool:
        path = self.ctx.activation_path
        return path.is_dir() and not path.is_symlink()

    def state(self) -> InitState:
        if self.ctx.init_marker.exists():
            return InitState.INITIALIZED
        if self.has_legacy_dir():
            return InitState.AWAITING_EXPLICIT_INIT
        return InitState.UNINITIALIZED

    def ensure_initialized(self) -> None:
        try:
            self.ctx.profiles_dir.mkdir(parents=True, exist_ok=True)
            self.ctx.last_use_file.touch(exist_ok=True)
        except OSError as e:
            raise StoreIOError("set up profile store in", self.ctx.root, e) from e

        if self.state() is InitState.AWAITING_EXPLICIT_INIT:
            dst = self.ctx.profile_path(LEGACY_PROFILE_NAME)
            if dst.exists():
                raise AlreadyExists(LEGACY_PROFILE_NAME)
            log.info("Moving %s to %s", self.ctx.activation_path, dst)
            try:
                self.ctx.activation_path.rename(dst)
            except OSError as e:
                raise StoreIOError(
                    f"move {self.ctx.activation_path} to", dst, e
                ) from e

        try:
            self.ctx.init_marker.touch(exist_ok=True)
        except OSError as e:
            raise StoreIOError("mark initialized", self.ctx.init_marker, e) from e

    def is_initialized(self) -> bool:
        state = self.state()
        if state is InitState.UNINITIALIZED:
            log.debug("No legacy directory at %s, initializing", self.ctx.activation_path)
            self.ensure_initialized()
            return True
        return state is InitState.INITIALIZED
