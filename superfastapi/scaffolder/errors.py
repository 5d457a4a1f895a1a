"""Exception hierarchy for the scaffolder.

Every failure raised by the scaffolding core derives from ``ScaffoldError`` so
that the CLI can catch a single type, print the message, and exit non-zero.
"""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for all scaffolding failures."""


class InvalidNameError(ScaffoldError):
    """Raised when a project name is empty or contains disallowed characters."""


class ConfigurationError(ScaffoldError):
    """Raised when the raw feature flags are structurally invalid."""


class DirectoryExistsError(ScaffoldError):
    """Raised when the target project directory is already present."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Directory '{path}' already exists")


class MissingVariableError(ScaffoldError):
    """Raised when a template references a variable that was not bound."""

    def __init__(self, template: str, detail: str) -> None:
        self.template = template
        super().__init__(f"Template '{template}': {detail}")


class TemplateNotFoundError(ScaffoldError):
    """Raised when the manifest names a template that does not exist."""


class InvalidTemplateError(ScaffoldError):
    """Raised when a template cannot be decoded or parsed."""

    def __init__(self, template: str, detail: str) -> None:
        self.template = template
        super().__init__(f"Template '{template}' is invalid: {detail}")


class FilesystemError(ScaffoldError):
    """Wraps an ``OSError`` raised while writing the project tree."""
