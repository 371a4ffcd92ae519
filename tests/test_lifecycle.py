"""Tests for first-run initialization."""

import errno
from pathlib import Path
from unittest.mock import patch

import pytest

from emacs_profiles.errors import AlreadyExists, StoreIOError
from emacs_profiles.lifecycle import InitState, LifecycleInitializer
from emacs_profiles.store import ProfileStore


class TestState:
    def test_uninitialized(self, store_ctx):
        assert LifecycleInitializer(store_ctx).state() is InitState.UNINITIALIZED

    def test_awaiting_explicit_init(self, store_ctx, legacy_dir):
        assert (
            LifecycleInitializer(store_ctx).state()
            is InitState.AWAITING_EXPLICIT_INIT
        )

    def test_link_is_not_legacy(self, store_ctx, tmp_path):
        (tmp_path / "target").mkdir()
        store_ctx.activation_path.symlink_to(tmp_path / "target")
        assert LifecycleInitializer(store_ctx).state() is InitState.UNINITIALIZED

    def test_initialized(self, store_ctx):
        lifecycle = LifecycleInitializer(store_ctx)
        lifecycle.ensure_initialized()
        assert lifecycle.state() is InitState.INITIALIZED


class TestIsInitialized:
    def test_auto_heals_empty_state(self, store_ctx):
        lifecycle = LifecycleInitializer(store_ctx)
        assert lifecycle.is_initialized() is True
        assert store_ctx.init_marker.exists()
        assert store_ctx.last_use_file.exists()
        assert ProfileStore(store_ctx).names() == []
        assert ProfileStore(store_ctx).list() == ""

    def test_legacy_dir_requires_explicit_init(self, store_ctx, legacy_dir):
        lifecycle = LifecycleInitializer(store_ctx)
        assert lifecycle.is_initialized() is False
        assert not store_ctx.init_marker.exists()
        assert legacy_dir.is_dir() and not legacy_dir.is_symlink()

    def test_marker_wins_over_legacy_dir(self, store_ctx, legacy_dir):
        store_ctx.root.mkdir(parents=True)
        store_ctx.init_marker.touch()
        assert LifecycleInitializer(store_ctx).is_initialized() is True
        assert legacy_dir.is_dir()


class TestEnsureInitialized:
    def test_moves_legacy_dir_to_main(self, store_ctx, legacy_dir):
        lifecycle = LifecycleInitializer(store_ctx)
        lifecycle.ensure_initialized()

        store = ProfileStore(store_ctx)
        assert store.exists("main")
        assert (store.profile_path("main") / "lisp" / "extra.el").read_text() == ";; extra\n"
        assert not legacy_dir.exists()
        assert store_ctx.init_marker.exists()
        assert lifecycle.is_initialized() is True

    def test_idempotent(self, store_ctx, legacy_dir):
        lifecycle = LifecycleInitializer(store_ctx)
        lifecycle.ensure_initialized()
        lifecycle.ensure_initialized()
        assert ProfileStore(store_ctx).names() == ["main"]

    def test_keeps_existing_last_use(self, store_ctx):
        store_ctx.root.mkdir(parents=True)
        store_ctx.last_use_file.write_text("x\n")
        LifecycleInitializer(store_ctx).ensure_initialized()
        assert store_ctx.last_use_file.read_text() == "x\n"

    def test_marker_never_reverts(self, store_ctx, legacy_dir):
        lifecycle = LifecycleInitializer(store_ctx)
        lifecycle.ensure_initialized()
        # A new legacy dir appearing later is left alone
        store_ctx.activation_path.mkdir()
        assert lifecycle.state() is InitState.INITIALIZED
        lifecycle.ensure_initialized()
        assert store_ctx.activation_path.is_dir()

    def test_main_already_present(self, store_ctx, legacy_dir):
        store_ctx.profile_path("main").mkdir(parents=True)
        lifecycle = LifecycleInitializer(store_ctx)
        with pytest.raises(AlreadyExists):
            lifecycle.ensure_initialized()
        assert legacy_dir.is_dir()
        assert not store_ctx.init_marker.exists()

    def test_rename_failure_is_reported(self, store_ctx, legacy_dir):
        lifecycle = LifecycleInitializer(store_ctx)
        with patch.object(
            Path, "rename", side_effect=OSError(errno.EXDEV, "Invalid cross-device link")
        ):
            with pytest.raises(StoreIOError, match="cross-device"):
                lifecycle.ensure_initialized()
        assert legacy_dir.is_dir()
        assert not store_ctx.init_marker.exists()
        assert lifecycle.state() is InitState.AWAITING_EXPLICIT_INIT
