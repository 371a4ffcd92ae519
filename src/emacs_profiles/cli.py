"""CLI interface for emacs-profiles."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from emacs_profiles import __version__
from emacs_profiles.activation import ActivationManager
from emacs_profiles.config import (
    LEGACY_PROFILE_NAME,
    Settings,
    StoreContext,
    load_config,
)
from emacs_profiles.errors import (
    NotFound,
    NotInitialized,
    ProfileError,
    describe_os_error,
)
from emacs_profiles.launchers import create_launcher
from emacs_profiles.lifecycle import InitState, LifecycleInitializer
from emacs_profiles.logging_setup import setup_logging
from emacs_profiles.store import ProfileStore

log = logging.getLogger(__name__)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

NOT_INITIALIZED_HELP = """\
emacs-profiles has not been initialized yet.

An existing configuration directory was found at:

    {link}

Initializing moves that directory into the profile store as the profile
'{main}' and replaces it with a link managed by emacs-profiles:

    {link} -> {profiles}/{main}

Nothing else is touched. To continue, run:

    emacs-profiles init
"""


def styled(text: str, **kwargs) -> str:
    return click.style(text, **kwargs)


def info(msg: str) -> None:
    click.echo(f"  {msg}")


def success(msg: str) -> None:
    click.echo(f"  {styled(msg, fg='green')}")


def warn(msg: str) -> None:
    click.echo(f"  {styled(msg, fg='yellow')}", err=True)


def error(msg: str) -> None:
    click.echo(f"  {styled(msg, fg='red')}", err=True)


class ProfilesGroup(click.Group):
    """Command group that reports every failure with exit status 1."""

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = 1
            raise

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = 1
            raise
        except NotInitialized as e:
            click.echo(str(e), err=True)
            ctx.exit(1)
        except ProfileError as e:
            error(str(e))
            ctx.exit(1)
        except OSError as e:
            error(f"{e.filename or 'Error'}: {describe_os_error(e)}")
            ctx.exit(1)


def _settings(obj: dict) -> Settings:
    """Settings are read on first use, so --help never touches config.json."""
    if "settings" not in obj:
        obj["settings"] = load_config(obj["config_file"])
    return obj["settings"]


def _store_ctx(obj: dict) -> StoreContext:
    if "store_ctx" not in obj:
        store_ctx = StoreContext.from_settings(_settings(obj), root=obj["data_dir"])
        log.debug("Store at %s, link at %s", store_ctx.root, store_ctx.activation_path)
        obj["store_ctx"] = store_ctx
    return obj["store_ctx"]


def _store(obj: dict) -> ProfileStore:
    settings = _settings(obj)
    return ProfileStore(_store_ctx(obj), list_command=settings.list_command)


def _activation(obj: dict, launcher=None) -> ActivationManager:
    settings = _settings(obj)
    return ActivationManager(
        _store_ctx(obj),
        _store(obj),
        launcher=launcher,
        editor=settings.editor,
        override_flag=settings.override_flag,
    )


def _require_init(obj: dict) -> None:
    store_ctx = _store_ctx(obj)
    if not LifecycleInitializer(store_ctx).is_initialized():
        raise NotInitialized(
            NOT_INITIALIZED_HELP.format(
                link=store_ctx.activation_path,
                profiles=store_ctx.profiles_dir,
                main=LEGACY_PROFILE_NAME,
            )
        )


@click.group(cls=ProfilesGroup, context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__, prog_name="emacs-profiles")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="EMACS_PROFILES_HOME",
    default=None,
    help="Directory holding the profile store.",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="EMACS_PROFILES_CONFIG",
    default=None,
    help="Path to config.json.",
)
@click.pass_context
def cli(
    ctx: click.Context, verbose: bool, data_dir: Path | None, config_file: Path | None
) -> None:
    """Switch between named Emacs configuration profiles."""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["verbose"] = verbose
    ctx.obj["data_dir"] = data_dir
    ctx.obj["config_file"] = config_file


@cli.command()
@click.pass_obj
def init(obj: dict) -> None:
    """Set up the profile store, adopting an existing config directory as 'main'."""
    lifecycle = LifecycleInitializer(_store_ctx(obj))
    state = lifecycle.state()
    lifecycle.ensure_initialized()

    if state is InitState.AWAITING_EXPLICIT_INIT:
        success(
            f"Moved {_store_ctx(obj).activation_path} into the store as '{LEGACY_PROFILE_NAME}'."
        )
        info(f"Activate it with: emacs-profiles use {LEGACY_PROFILE_NAME}")
    elif state is InitState.INITIALIZED:
        info("Already initialized.")
    else:
        success(f"Initialized profile store at {_store_ctx(obj).root}")


@cli.command()
@click.pass_obj
def status(obj: dict) -> None:
    """Show the last used profile."""
    _require_init(obj)
    activation = _activation(obj)
    record = activation.current_record()
    click.echo(f"last use: {record}")

    linked = activation.active_target()
    if linked is not None and linked != record:
        warn(f"The active link points at '{linked}', not '{record}'.")


@cli.command("ls")
@click.argument("ls_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def ls_cmd(obj: dict, ls_args: tuple[str, ...]) -> None:
    """List profiles. Options after -- go to ls."""
    _require_init(obj)
    click.echo(_store(obj).list(ls_args), nl=False)


@cli.command()
@click.argument("name")
@click.pass_obj
def use(obj: dict, name: str) -> None:
    """Make NAME the active profile."""
    _require_init(obj)
    _activation(obj).activate(name)
    success(f"Now using '{name}'.")


@cli.command()
@click.option(
    "--from",
    "-f",
    "source",
    default=None,
    metavar="NAME",
    help="Profile to copy (default: the active one).",
)
@click.option("--use", "-u", "use_it", is_flag=True, help="Activate the new profile.")
@click.argument("name")
@click.pass_obj
def fork(obj: dict, source: str | None, use_it: bool, name: str) -> None:
    """Copy the active profile (or --from NAME) into a new profile NAME."""
    _require_init(obj)
    store = _store(obj)

    if source is not None:
        if not store.exists(source):
            raise NotFound(source)
        source_path = store.profile_path(source)
    else:
        source_path = _store_ctx(obj).activation_path

    store.create_copy(name, source_path)
    success(f"Forked '{name}' from {source or source_path}.")

    if use_it:
        _activation(obj).activate(name)
        success(f"Now using '{name}'.")


@cli.command()
@click.option("--use", "-u", "use_it", is_flag=True, help="Activate the new profile.")
@click.argument("name")
@click.pass_obj
def new(obj: dict, use_it: bool, name: str) -> None:
    """Create an empty profile NAME."""
    _require_init(obj)
    _store(obj).create_empty(name)
    success(f"Created '{name}'.")

    if use_it:
        _activation(obj).activate(name)
        success(f"Now using '{name}'.")


@cli.command()
@click.argument("name")
@click.pass_obj
def rm(obj: dict, name: str) -> None:
    """Delete profile NAME. This cannot be undone."""
    _require_init(obj)
    if _activation(obj).active_target() == name:
        warn(f"'{name}' is the active profile; the active link will be left dangling.")
    _store(obj).remove(name)
    success(f"Removed '{name}'.")


@cli.command("with")
@click.argument("name")
@click.argument("editor_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def with_cmd(obj: dict, name: str, editor_args: tuple[str, ...]) -> None:
    """Run the editor on NAME without switching. Options after -- go to the editor."""
    _require_init(obj)
    launcher = create_launcher(_settings(obj).launcher)
    _activation(obj, launcher=launcher).launch(name, editor_args)


def main() -> None:
    cli(prog_name="emacs-profiles")
