"""superfastapi scaffolder -- generates FastAPI project structures.

This package turns a project name and a set of feature flags (database
provider, Supabase auth, Docker) into a rendered project directory.

Quick usage::

    from superfastapi.scaffolder import create_project

    result = await create_project(
        "my-api",
        {"database_choice": "postgres", "include_docker": False},
        output_dir="/tmp/output",
    )
    result.docker_was_forced  # True: PostgreSQL always ships with Docker
"""

from superfastapi.scaffolder.errors import (
    ConfigurationError,
    DirectoryExistsError,
    FilesystemError,
    InvalidNameError,
    InvalidTemplateError,
    MissingVariableError,
    ScaffoldError,
    TemplateNotFoundError,
)
from superfastapi.scaffolder.generator import (
    GenerationResult,
    ProjectGenerator,
    create_project,
)
from superfastapi.scaffolder.manifest import (
    EntryKind,
    Manifest,
    ManifestEntry,
    build_manifest,
    expected_env_variables,
)
from superfastapi.scaffolder.materializer import materialize
from superfastapi.scaffolder.naming import sanitize_identifier, validate_project_name
from superfastapi.scaffolder.resolver import (
    CanonicalConfig,
    DatabaseChoice,
    FeatureFlags,
    Resolution,
    resolve_configuration,
)
from superfastapi.scaffolder.templates import TemplateRenderer

__all__ = [
    "CanonicalConfig",
    "ConfigurationError",
    "DatabaseChoice",
    "DirectoryExistsError",
    "EntryKind",
    "FeatureFlags",
    "FilesystemError",
    "GenerationResult",
    "InvalidNameError",
    "InvalidTemplateError",
    "Manifest",
    "ManifestEntry",
    "MissingVariableError",
    "ProjectGenerator",
    "Resolution",
    "ScaffoldError",
    "TemplateNotFoundError",
    "TemplateRenderer",
    "build_manifest",
    "create_project",
    "expected_env_variables",
    "materialize",
    "resolve_configuration",
    "sanitize_identifier",
    "validate_project_name",
]
