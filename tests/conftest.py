"""Shared test fixtures."""

import json
import logging

import pytest

from emacs_profiles.activation import ActivationManager
from emacs_profiles.config import StoreContext
from emacs_profiles.launchers.base import Launcher
from emacs_profiles.lifecycle import LifecycleInitializer
from emacs_profiles.store import ProfileStore


class RecordingLauncher(Launcher):
    """Records exec calls instead of replacing the process."""

    def __init__(self):
        self.calls = []

    def exec(self, program, argv):
        self.calls.append((program, list(argv)))

    @property
    def display_name(self) -> str:
        return "recording"


@pytest.fixture
def store_ctx(tmp_path):
    """A store rooted in tmp_path with the activation link in a fake home."""
    home = tmp_path / "home"
    home.mkdir()
    return StoreContext(root=tmp_path / "data", activation_path=home / ".emacs.d")


@pytest.fixture
def store(store_ctx):
    LifecycleInitializer(store_ctx).ensure_initialized()
    return ProfileStore(store_ctx)


@pytest.fixture
def launcher():
    return RecordingLauncher()


@pytest.fixture
def activation(store_ctx, store, launcher):
    return ActivationManager(store_ctx, store, launcher=launcher)


@pytest.fixture
def legacy_dir(store_ctx):
    """An ordinary config directory at the activation path."""
    legacy = store_ctx.activation_path
    legacy.mkdir()
    (legacy / "init.el").write_text("(setq inhibit-startup-screen t)\n")
    (legacy / "lisp").mkdir()
    (legacy / "lisp" / "extra.el").write_text(";; extra\n")
    return legacy


@pytest.fixture
def mock_source_dir(tmp_path):
    """Create a config tree with files, a subdirectory and symlinks."""
    source = tmp_path / "source"
    source.mkdir()

    (source / "init.el").write_text("(load \"lisp/extra\")\n")
    (source / "custom.el").write_bytes(b"\x00\x01binary\xff")

    lisp = source / "lisp"
    lisp.mkdir()
    (lisp / "extra.el").write_text(";; extra\n")

    external = tmp_path / "external"
    external.mkdir()
    (external / "snippet.el").write_text(";; external snippet\n")
    (source / "snippets").symlink_to(external)
    (source / "early-init.el").symlink_to(external / "snippet.el")

    return source


@pytest.fixture
def cli_env(tmp_path):
    """Environment pointing the CLI at a temporary store and link."""
    home = tmp_path / "home"
    home.mkdir(exist_ok=True)
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps(
            {
                "data_dir": str(tmp_path / "data"),
                "activation_path": str(home / ".emacs.d"),
            }
        )
    )
    return {
        "EMACS_PROFILES_CONFIG": str(config_path),
        "EMACS_PROFILES_HOME": None,
        "EMACS_PROFILES_EDITOR": None,
        "EMACS_PROFILES_LOG_LEVEL": None,
    }


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers bound to CliRunner streams between tests."""
    yield
    logger = logging.getLogger("emacs_profiles")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
