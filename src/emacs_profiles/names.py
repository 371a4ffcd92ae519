"""Profile name validation."""

from __future__ import annotations

from emacs_profiles.errors import NameInvalid

FORBIDDEN_CHARS = "./ "


def validate_name(name: str) -> bool:
    """True if name is usable verbatim as a profile directory name."""
    if not name:
        return False
    return not any(c in FORBIDDEN_CHARS for c in name)


def check_name(name: str) -> str:
    if not validate_name(name):
        raise NameInvalid(name)
    return name
