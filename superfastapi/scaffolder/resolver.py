"""Feature flag normalisation.

Turns the raw user choices (database provider, Supabase auth, Docker) into a
frozen ``CanonicalConfig`` that the rest of the scaffolder consumes.  The
resolver is pure: it never touches the filesystem or the console.  When it has
to override a choice (PostgreSQL needs Docker) it reports that through
``Resolution.docker_was_forced`` so the caller can tell the user.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError


class DatabaseChoice(str, Enum):
    NONE = "none"
    SUPABASE = "supabase"
    POSTGRES = "postgres"


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class FeatureFlags(BaseModel):
    """Raw feature choices, as collected by a prompt or passed directly."""

    model_config = ConfigDict(extra="forbid")

    database_choice: DatabaseChoice = Field(
        default=DatabaseChoice.NONE, description="Database provider for the project"
    )
    supabase_auth: bool = Field(default=False, description="Include Supabase authentication")
    include_docker: bool = Field(default=False, description="Include Dockerfile and Compose file")


class CanonicalConfig(BaseModel):
    """Normalised, immutable project configuration."""

    model_config = ConfigDict(frozen=True)

    project_name: str
    supabase_database: bool = False
    supabase_auth: bool = False
    postgres_database: bool = False
    include_docker: bool = False

    @property
    def uses_supabase(self) -> bool:
        """True when any Supabase feature (database or auth) is enabled."""
        return self.supabase_database or self.supabase_auth

    def flags(self) -> dict[str, bool]:
        """Return the boolean feature flags keyed by template variable name."""
        return {
            "supabase_database": self.supabase_database,
            "supabase_auth": self.supabase_auth,
            "postgres_database": self.postgres_database,
            "include_docker": self.include_docker,
        }


class Resolution(BaseModel):
    """Resolver output: the config plus any override notices."""

    model_config = ConfigDict(frozen=True)

    config: CanonicalConfig
    docker_was_forced: bool = False


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


def resolve_configuration(
    project_name: str, flags: FeatureFlags | Mapping[str, Any]
) -> Resolution:
    """Resolve raw *flags* into a ``CanonicalConfig``.

    Rules:
    - ``database_choice`` maps onto the mutually exclusive
      ``supabase_database`` / ``postgres_database`` booleans.
    - PostgreSQL runs in Docker, so ``include_docker`` is forced on; the
      override is reported via ``docker_was_forced``.
    - ``supabase_auth`` is kept as given even without a Supabase database.

    Args:
        project_name: An already validated project name.
        flags: A ``FeatureFlags`` instance or a mapping with the same keys.

    Raises:
        ConfigurationError: If *flags* cannot be parsed (unknown database
            choice, unknown keys, non-boolean values).
    """
    if not isinstance(flags, FeatureFlags):
        try:
            flags = FeatureFlags.model_validate(dict(flags))
        except (ValidationError, TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid feature flags: {exc}") from exc

    postgres = flags.database_choice is DatabaseChoice.POSTGRES
    docker_was_forced = postgres and not flags.include_docker

    config = CanonicalConfig(
        project_name=project_name,
        supabase_database=flags.database_choice is DatabaseChoice.SUPABASE,
        supabase_auth=flags.supabase_auth,
        postgres_database=postgres,
        include_docker=flags.include_docker or postgres,
    )
    return Resolution(config=config, docker_was_forced=docker_was_forced)
