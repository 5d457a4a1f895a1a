"""Main scaffolding orchestrator.

Takes a ``CanonicalConfig`` and generates a FastAPI project directory:
validates the name, builds the manifest, and hands it to the materializer.
``create_project`` is the single-call entry point that also validates and
resolves the raw feature flags.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .manifest import Manifest, build_manifest
from .materializer import EntryCallback, materialize
from .naming import validate_project_name
from .resolver import CanonicalConfig, FeatureFlags, resolve_configuration
from .templates import TemplateRenderer


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a successful ``create_project`` call."""

    project_root: Path
    config: CanonicalConfig
    docker_was_forced: bool
    manifest: Manifest


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Main scaffolding orchestrator.

    Given a ``CanonicalConfig``, generates a directory tree containing:
    - FastAPI application skeleton (core, api, services, models, db, utils)
    - Poetry ``pyproject.toml``, README, ``.gitignore``, ``example.env``
    - Supabase client and/or Supabase auth service, middleware and routes
    - PostgreSQL client, Alembic configuration and ``init.sql``
    - Dockerfile and Docker Compose file
    """

    def __init__(
        self, config: CanonicalConfig, renderer: TemplateRenderer | None = None
    ) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer()

    def manifest(self) -> Manifest:
        """Return the manifest for this generator's config."""
        return build_manifest(self.config)

    async def generate(
        self,
        output_dir: str | Path = ".",
        *,
        atomic: bool = False,
        on_entry: EntryCallback | None = None,
    ) -> Path:
        """Generate the project structure.

        Args:
            output_dir: Parent directory where the project folder will be
                created.  A subdirectory named after the project is created
                inside it and must not exist yet.
            atomic: Stage the tree and rename it into place on success.
            on_entry: Progress callback invoked after each manifest entry.

        Returns:
            Path to the generated project root.
        """
        name = validate_project_name(self.config.project_name)
        project_root = Path(output_dir) / name
        return await materialize(
            project_root,
            self.manifest(),
            self.renderer,
            atomic=atomic,
            on_entry=on_entry,
        )


async def create_project(
    project_name: str,
    flags: FeatureFlags | Mapping[str, Any],
    output_dir: str | Path = ".",
    *,
    atomic: bool = False,
    renderer: TemplateRenderer | None = None,
    on_entry: EntryCallback | None = None,
) -> GenerationResult:
    """Validate, resolve, and generate a project in one call.

    Raises the first ``ScaffoldError`` encountered; nothing is rolled back
    unless *atomic* is set.
    """
    name = validate_project_name(project_name)
    resolution = resolve_configuration(name, flags)
    generator = ProjectGenerator(resolution.config, renderer)
    manifest = generator.manifest()
    project_root = await materialize(
        Path(output_dir) / name,
        manifest,
        generator.renderer,
        atomic=atomic,
        on_entry=on_entry,
    )
    return GenerationResult(
        project_root=project_root,
        config=resolution.config,
        docker_was_forced=resolution.docker_was_forced,
        manifest=manifest,
    )
