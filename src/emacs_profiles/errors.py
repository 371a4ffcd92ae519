"""Error kinds raised by profile operations."""

import shutil


class ProfileError(RuntimeError):
    """Raised when a profile operation fails."""


class NameInvalid(ProfileError):
    def __init__(self, name: str):
        super().__init__(
            f"Invalid profile name '{name}' "
            "(must be non-empty and contain no '.', '/' or spaces)."
        )
        self.name = name


class AlreadyExists(ProfileError):
    def __init__(self, name: str):
        super().__init__(f"Profile '{name}' already exists.")
        self.name = name


class NotFound(ProfileError):
    def __init__(self, name: str):
        super().__init__(f"Profile '{name}' not found.")
        self.name = name


class SourceMissing(ProfileError):
    def __init__(self, source):
        super().__init__(f"Source directory not found: {source}")
        self.source = source


class NotInitialized(ProfileError):
    """The store has not been migrated yet and a legacy directory is present."""


class ListingFailed(ProfileError):
    pass


def describe_os_error(exc: OSError) -> str:
    """One-line reason for an OSError; shutil.Error carries a list of failures."""
    if isinstance(exc, shutil.Error) and exc.args and isinstance(exc.args[0], list):
        failures = exc.args[0]
        src, _dst, why = failures[0]
        more = f" (and {len(failures) - 1} more)" if len(failures) > 1 else ""
        return f"{src}: {why}{more}"
    return exc.strerror or str(exc)


class StoreIOError(ProfileError):
    """A filesystem operation on the store or the active link failed."""

    def __init__(self, action: str, path, exc: OSError):
        super().__init__(f"Cannot {action} {path}: {describe_os_error(exc)}")
        self.path = path


class LaunchError(ProfileError):
    pass
