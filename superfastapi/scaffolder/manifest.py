"""Declarative project manifest.

The generated project is described as a table of ``ManifestGroup`` entries:
one always-present base group plus one group per optional feature.  Each group
has a guard over ``CanonicalConfig`` and lists the directories and files it
contributes.  ``build_manifest`` takes the union of every group whose guard is
true and orders it so that every directory precedes the files nested under
it.

Shared templates (``example.env``, ``app/core/config.py``, ``pyproject.toml``,
``README.md``, ...) are always present; their flag-gated fragments are resolved
at render time from the flags each file declares in ``flags``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from .naming import sanitize_identifier
from .resolver import CanonicalConfig


class EntryKind(str, Enum):
    DIRECTORY = "directory"
    FILE = "file"


# ---------------------------------------------------------------------------
# Manifest types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ManifestEntry:
    """A single filesystem operation: create a directory or render a file.

    ``variables`` is stored as a read-only mapping.
    """

    kind: EntryKind
    path: str
    template: str | None = None
    variables: Mapping[str, Any] = field(default_factory=dict)
    executable: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "variables", MappingProxyType(dict(self.variables)))

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


@dataclass(frozen=True)
class Manifest:
    """Ordered, immutable sequence of ``ManifestEntry`` objects."""

    entries: tuple[ManifestEntry, ...]

    def __iter__(self) -> Iterator[ManifestEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, path: object) -> bool:
        return any(entry.path == path for entry in self.entries)

    def get(self, path: str) -> ManifestEntry | None:
        """Return the entry for *path*, or ``None`` if absent."""
        for entry in self.entries:
            if entry.path == path:
                return entry
        return None

    def paths(self) -> list[str]:
        return [entry.path for entry in self.entries]

    def directories(self) -> list[str]:
        return [entry.path for entry in self.entries if entry.is_directory]

    def files(self) -> list[str]:
        return [entry.path for entry in self.entries if not entry.is_directory]


# ---------------------------------------------------------------------------
# Group table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FileSpec:
    """A file to render: output path, template id, and the flags it reads."""

    path: str
    template: str
    flags: tuple[str, ...] = ()
    executable: bool = False


@dataclass(frozen=True)
class ManifestGroup:
    name: str
    guard: Callable[[CanonicalConfig], bool]
    directories: tuple[str, ...] = ()
    files: tuple[FileSpec, ...] = ()


_PACKAGE_INIT = "package_init.py.j2"

_DB_FLAGS = ("supabase_database", "supabase_auth", "postgres_database")
_ALL_FLAGS = ("supabase_database", "supabase_auth", "postgres_database", "include_docker")

MANIFEST_GROUPS: tuple[ManifestGroup, ...] = (
    ManifestGroup(
        name="base",
        guard=lambda c: True,
        directories=(
            "app",
            "app/core",
            "app/api",
            "app/api/routes",
            "app/api/schemas",
            "app/services",
            "app/models",
            "app/db",
            "app/utils",
            "tests",
        ),
        files=(
            FileSpec("pyproject.toml", "pyproject.toml.j2", _DB_FLAGS),
            FileSpec("README.md", "README.md.j2", _ALL_FLAGS),
            FileSpec(".gitignore", "gitignore.j2"),
            FileSpec("example.env", "example.env.j2", _DB_FLAGS),
            FileSpec("start.sh", "start.sh.j2", ("postgres_database",), executable=True),
            FileSpec("app/__init__.py", _PACKAGE_INIT),
            FileSpec("app/main.py", "app/main.py.j2", ("supabase_auth",)),
            FileSpec("app/core/__init__.py", _PACKAGE_INIT),
            FileSpec("app/core/config.py", "app/core/config.py.j2", _DB_FLAGS),
            FileSpec("app/api/__init__.py", _PACKAGE_INIT),
            FileSpec("app/api/routes/__init__.py", _PACKAGE_INIT),
            FileSpec("app/api/schemas/__init__.py", _PACKAGE_INIT),
            FileSpec("app/services/__init__.py", _PACKAGE_INIT),
            FileSpec("app/models/__init__.py", _PACKAGE_INIT),
            FileSpec("app/db/__init__.py", _PACKAGE_INIT),
            FileSpec("app/utils/__init__.py", _PACKAGE_INIT),
            FileSpec("tests/__init__.py", _PACKAGE_INIT),
        ),
    ),
    ManifestGroup(
        name="supabase_database",
        guard=lambda c: c.supabase_database,
        files=(FileSpec("app/db/supabase.py", "app/db/supabase.py.j2"),),
    ),
    ManifestGroup(
        name="supabase_auth",
        guard=lambda c: c.supabase_auth,
        directories=("app/api/middleware",),
        files=(
            FileSpec("app/api/middleware/__init__.py", _PACKAGE_INIT),
            FileSpec("app/api/middleware/auth.py", "app/api/middleware/auth.py.j2"),
            FileSpec("app/services/auth.py", "app/services/auth.py.j2"),
            FileSpec("app/api/routes/auth.py", "app/api/routes/auth.py.j2"),
            FileSpec("app/models/user.py", "app/models/user.py.j2"),
        ),
    ),
    ManifestGroup(
        name="postgres",
        guard=lambda c: c.postgres_database,
        directories=("alembic", "alembic/versions"),
        files=(
            FileSpec("app/db/postgres.py", "app/db/postgres.py.j2"),
            FileSpec("alembic.ini", "alembic.ini.j2"),
            FileSpec("alembic/env.py", "alembic/env.py.j2"),
            FileSpec("alembic/script.py.mako", "alembic/script.py.mako.j2"),
            FileSpec("alembic/versions/.gitkeep", "gitkeep.j2"),
            FileSpec("init.sql", "init.sql.j2"),
        ),
    ),
    ManifestGroup(
        name="docker",
        guard=lambda c: c.include_docker,
        files=(
            FileSpec("Dockerfile", "Dockerfile.j2"),
            FileSpec("docker-compose.yml", "docker-compose.yml.j2", ("postgres_database",)),
            FileSpec(".dockerignore", "dockerignore.j2"),
        ),
    ),
)


# Variables listed in example.env, in file order, keyed by guard.
ENV_VARIABLE_GROUPS: tuple[tuple[Callable[[CanonicalConfig], bool], tuple[str, ...]], ...] = (
    (lambda c: True, ("ENVIRONMENT", "DEBUG")),
    (lambda c: c.uses_supabase, ("SUPABASE_URL", "SUPABASE_ANON_KEY")),
    (lambda c: c.supabase_auth, ("SUPABASE_SERVICE_ROLE_KEY",)),
    (
        lambda c: c.postgres_database,
        ("DATABASE_URL", "POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_DB"),
    ),
)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def active_groups(config: CanonicalConfig) -> list[ManifestGroup]:
    """Return the groups whose guard holds for *config*, in table order."""
    return [group for group in MANIFEST_GROUPS if group.guard(config)]


def build_bindings(config: CanonicalConfig, flags: tuple[str, ...] = ()) -> dict[str, Any]:
    """Build the template variables for a file that reads *flags*."""
    bindings: dict[str, Any] = {
        "project_name": config.project_name,
        "sanitized_project_name": sanitize_identifier(config.project_name),
    }
    all_flags = config.flags()
    for flag in flags:
        bindings[flag] = all_flags[flag]
    return bindings


def build_manifest(config: CanonicalConfig) -> Manifest:
    """Compute the ordered manifest for *config*.

    Directories come first (deduplicated, in group order, each group listing
    parents before children), followed by files in group order.  The result
    depends only on *config*.
    """
    groups = active_groups(config)

    directories: list[ManifestEntry] = []
    seen: set[str] = set()
    for group in groups:
        for path in group.directories:
            if path in seen:
                continue
            seen.add(path)
            directories.append(ManifestEntry(kind=EntryKind.DIRECTORY, path=path))

    files = [
        ManifestEntry(
            kind=EntryKind.FILE,
            path=spec.path,
            template=spec.template,
            variables=build_bindings(config, spec.flags),
            executable=spec.executable,
        )
        for group in groups
        for spec in group.files
    ]
    return Manifest(entries=tuple(directories + files))


def expected_env_variables(config: CanonicalConfig) -> list[str]:
    """Return the variable names ``example.env`` must list for *config*."""
    names: list[str] = []
    for guard, variables in ENV_VARIABLE_GROUPS:
        if guard(config):
            names.extend(variables)
    return names
