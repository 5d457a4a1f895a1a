"""Shared pytest fixtures for the superfastapi test suite.

Provides reusable fixtures for:
- Canonical configurations covering every feature combination
- A real TemplateRenderer over the bundled templates
- Helpers to render a single manifest entry and parse ``example.env``
- Isolation from ``SUPERFASTAPI_*`` environment variables
"""

from __future__ import annotations

import itertools
from collections.abc import Callable

import pytest

from superfastapi.scaffolder import (
    CanonicalConfig,
    Manifest,
    TemplateRenderer,
    build_manifest,
)


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clean_superfastapi_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure no developer environment leaks into Config.from_env()."""
    for name in (
        "SUPERFASTAPI_OUTPUT_DIR",
        "SUPERFASTAPI_TEMPLATE_DIR",
        "SUPERFASTAPI_ATOMIC",
        "SUPERFASTAPI_ASSUME_YES",
    ):
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# Configurations
# ---------------------------------------------------------------------------

def _all_configs() -> list[CanonicalConfig]:
    """Every valid (database, auth, docker) combination after resolution."""
    configs = []
    for database, auth, docker in itertools.product(
        ("none", "supabase", "postgres"), (False, True), (False, True)
    ):
        if database == "postgres" and not docker:
            continue  # resolver always turns Docker on for PostgreSQL
        configs.append(
            CanonicalConfig(
                project_name="test-project",
                supabase_database=database == "supabase",
                supabase_auth=auth,
                postgres_database=database == "postgres",
                include_docker=docker,
            )
        )
    return configs


ALL_CONFIGS = _all_configs()


@pytest.fixture
def make_config() -> Callable[..., CanonicalConfig]:
    """Factory for CanonicalConfig with every flag defaulting to False."""

    def _make(project_name: str = "test-project", **flags: bool) -> CanonicalConfig:
        return CanonicalConfig(project_name=project_name, **flags)

    return _make


@pytest.fixture
def bare_config(make_config) -> CanonicalConfig:
    """No database, no auth, no Docker."""
    return make_config()


@pytest.fixture
def full_supabase_config(make_config) -> CanonicalConfig:
    return make_config(supabase_database=True, supabase_auth=True)


@pytest.fixture
def postgres_config(make_config) -> CanonicalConfig:
    return make_config(postgres_database=True, include_docker=True)


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def renderer() -> TemplateRenderer:
    """A TemplateRenderer over the bundled templates."""
    return TemplateRenderer()


@pytest.fixture
def render_file(renderer) -> Callable[[CanonicalConfig, str], str]:
    """Render the manifest entry at *path* for *config*."""

    def _render(config: CanonicalConfig, path: str) -> str:
        manifest: Manifest = build_manifest(config)
        entry = manifest.get(path)
        assert entry is not None, f"{path} is not in the manifest"
        return renderer.render(entry.template, entry.variables)

    return _render


def env_variable_names(text: str) -> list[str]:
    """Return the variable names assigned in an env file, in order."""
    names = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        names.append(stripped.split("=", 1)[0])
    return names


@pytest.fixture
def parse_env() -> Callable[[str], list[str]]:
    return env_variable_names


# ---------------------------------------------------------------------------
# Parametrisation
# ---------------------------------------------------------------------------

def _config_id(config: CanonicalConfig) -> str:
    enabled = [name for name, value in config.flags().items() if value]
    return "+".join(enabled) or "bare"


def pytest_generate_tests(metafunc: pytest.Metafunc) -> None:
    """Run any test asking for ``any_config`` once per feature combination."""
    if "any_config" in metafunc.fixturenames:
        metafunc.parametrize("any_config", ALL_CONFIGS, ids=[_config_id(c) for c in ALL_CONFIGS])
