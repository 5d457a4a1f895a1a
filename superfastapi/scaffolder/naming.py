"""Project name validation."""

from __future__ import annotations

import re

from .errors import InvalidNameError

_VALID_NAME = re.compile(r"^[A-Za-z0-9_-]+$")
_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def validate_project_name(name: str) -> str:
    """Return *name* unchanged if it is a valid project name.

    A valid name is non-empty and made only of ASCII letters, digits, hyphens
    and underscores, so it can be used verbatim as a directory name.

    Raises:
        InvalidNameError: If the name is empty or has any other character.
    """
    if not name:
        raise InvalidNameError("Project name cannot be empty")
    if not _VALID_NAME.fullmatch(name):
        raise InvalidNameError(
            "Project name can only contain letters, numbers, hyphens, and underscores"
        )
    return name


def sanitize_identifier(name: str) -> str:
    """Replace every non-alphanumeric character with ``_``.

    E.g. ``'my-api'`` -> ``'my_api'``.
    """
    return _NON_ALNUM.sub("_", name)
