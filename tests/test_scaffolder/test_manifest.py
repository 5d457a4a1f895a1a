"""Tests for the declarative project manifest.

Covers:
- Base skeleton directories and files
- Whole-file inclusion per feature group
- Directory-before-file ordering
- Determinism across repeated builds
- Per-file variable bindings
- expected_env_variables
"""

from __future__ import annotations

from pathlib import PurePosixPath

import pytest

from superfastapi.scaffolder.manifest import (
    MANIFEST_GROUPS,
    EntryKind,
    Manifest,
    ManifestEntry,
    active_groups,
    build_bindings,
    build_manifest,
    expected_env_variables,
)

pytestmark = pytest.mark.unit


BASE_DIRECTORIES = [
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
]

BASE_FILES = [
    "pyproject.toml",
    "README.md",
    ".gitignore",
    "example.env",
    "start.sh",
    "app/__init__.py",
    "app/main.py",
    "app/core/__init__.py",
    "app/core/config.py",
    "app/api/__init__.py",
    "app/api/routes/__init__.py",
    "app/api/schemas/__init__.py",
    "app/services/__init__.py",
    "app/models/__init__.py",
    "app/db/__init__.py",
    "app/utils/__init__.py",
    "tests/__init__.py",
]

AUTH_FILES = [
    "app/services/auth.py",
    "app/api/middleware/auth.py",
    "app/api/routes/auth.py",
    "app/models/user.py",
]

POSTGRES_FILES = [
    "app/db/postgres.py",
    "alembic.ini",
    "alembic/env.py",
    "alembic/script.py.mako",
    "init.sql",
]

DOCKER_FILES = ["Dockerfile", "docker-compose.yml", ".dockerignore"]


# ---------------------------------------------------------------------------
# Base group
# ---------------------------------------------------------------------------


class TestBaseManifest:
    def test_bare_manifest_is_exactly_the_base_group(self, bare_config):
        manifest = build_manifest(bare_config)
        assert manifest.directories() == BASE_DIRECTORIES
        assert manifest.files() == BASE_FILES

    def test_base_entries_always_present(self, any_config):
        manifest = build_manifest(any_config)
        for path in BASE_DIRECTORIES + BASE_FILES:
            assert path in manifest

    def test_start_script_is_executable(self, bare_config):
        entry = build_manifest(bare_config).get("start.sh")
        assert entry is not None
        assert entry.executable is True

    def test_only_start_script_is_executable(self, any_config):
        executables = [e.path for e in build_manifest(any_config) if e.executable]
        assert executables == ["start.sh"]

    def test_directory_entries_have_no_template(self, any_config):
        for entry in build_manifest(any_config):
            if entry.kind is EntryKind.DIRECTORY:
                assert entry.template is None
                assert entry.variables == {}
            else:
                assert entry.template is not None


# ---------------------------------------------------------------------------
# Conditional groups
# ---------------------------------------------------------------------------


class TestConditionalFiles:
    def test_bare_excludes_every_optional_file(self, bare_config):
        manifest = build_manifest(bare_config)
        for path in [
            "app/db/supabase.py",
            "app/db/postgres.py",
            "app/api/middleware",
            *AUTH_FILES,
            *POSTGRES_FILES,
            *DOCKER_FILES,
        ]:
            assert path not in manifest

    def test_supabase_database_only(self, make_config):
        manifest = build_manifest(make_config(supabase_database=True))
        assert "app/db/supabase.py" in manifest
        for path in AUTH_FILES + POSTGRES_FILES + DOCKER_FILES:
            assert path not in manifest

    def test_auth_only_includes_auth_files_but_not_supabase_client(self, make_config):
        manifest = build_manifest(make_config(supabase_auth=True))
        for path in AUTH_FILES:
            assert path in manifest
        assert "app/api/middleware" in manifest.directories()
        assert "app/api/middleware/__init__.py" in manifest
        assert "app/db/supabase.py" not in manifest

    def test_full_supabase(self, full_supabase_config):
        manifest = build_manifest(full_supabase_config)
        for path in ["app/db/supabase.py", *AUTH_FILES]:
            assert path in manifest
        assert "app/db/postgres.py" not in manifest

    def test_postgres(self, postgres_config):
        manifest = build_manifest(postgres_config)
        for path in POSTGRES_FILES + DOCKER_FILES:
            assert path in manifest
        assert "alembic" in manifest.directories()
        assert "alembic/versions" in manifest.directories()
        assert "alembic/versions/.gitkeep" in manifest.files()
        assert "app/db/supabase.py" not in manifest

    def test_docker_only(self, make_config):
        manifest = build_manifest(make_config(include_docker=True))
        for path in DOCKER_FILES:
            assert path in manifest
        for path in POSTGRES_FILES:
            assert path not in manifest

    def test_groups_compose_as_a_union(self, make_config):
        config = make_config(supabase_auth=True, postgres_database=True, include_docker=True)
        names = [group.name for group in active_groups(config)]
        assert names == ["base", "supabase_auth", "postgres", "docker"]
        manifest = build_manifest(config)
        for path in AUTH_FILES + POSTGRES_FILES + DOCKER_FILES:
            assert path in manifest


# ---------------------------------------------------------------------------
# Ordering and determinism
# ---------------------------------------------------------------------------


class TestOrdering:
    def test_every_directory_precedes_nested_files(self, any_config):
        manifest = build_manifest(any_config)
        position = {entry.path: i for i, entry in enumerate(manifest)}
        for entry in manifest:
            for parent in PurePosixPath(entry.path).parents:
                if str(parent) == ".":
                    continue
                assert str(parent) in position, f"{parent} missing for {entry.path}"
                assert position[str(parent)] < position[entry.path]

    def test_directories_come_before_files(self, any_config):
        kinds = [entry.kind for entry in build_manifest(any_config)]
        first_file = kinds.index(EntryKind.FILE)
        assert EntryKind.DIRECTORY not in kinds[first_file:]

    def test_no_duplicate_paths(self, any_config):
        paths = build_manifest(any_config).paths()
        assert len(paths) == len(set(paths))

    def test_repeated_builds_are_identical(self, any_config):
        first = build_manifest(any_config)
        second = build_manifest(any_config)
        assert first == second
        assert first.paths() == second.paths()
        assert [e.variables for e in first] == [e.variables for e in second]

    def test_manifest_is_immutable(self, bare_config):
        manifest = build_manifest(bare_config)
        assert isinstance(manifest.entries, tuple)
        with pytest.raises(AttributeError):
            manifest.entries = ()  # type: ignore[misc]

    def test_entry_variables_are_read_only(self, bare_config):
        manifest = build_manifest(bare_config)
        entry = manifest.get("README.md")
        with pytest.raises(TypeError):
            entry.variables["project_name"] = "other"  # type: ignore[index]
        assert manifest.get("README.md").variables["project_name"] == "test-project"

    def test_entry_copies_caller_bindings(self):
        bindings = {"project_name": "a"}
        entry = ManifestEntry(kind=EntryKind.FILE, path="x", template="x.j2", variables=bindings)
        bindings["project_name"] = "b"
        assert entry.variables["project_name"] == "a"


# ---------------------------------------------------------------------------
# Bindings
# ---------------------------------------------------------------------------


class TestBindings:
    def test_every_file_gets_name_variables(self, make_config):
        manifest = build_manifest(make_config(project_name="my-api", supabase_auth=True))
        for entry in manifest:
            if entry.kind is EntryKind.FILE:
                assert entry.variables["project_name"] == "my-api"
                assert entry.variables["sanitized_project_name"] == "my_api"

    def test_feature_flags_bound_only_where_declared(self, full_supabase_config):
        manifest = build_manifest(full_supabase_config)
        env_entry = manifest.get("example.env")
        assert env_entry.variables["supabase_database"] is True
        assert env_entry.variables["supabase_auth"] is True
        assert env_entry.variables["postgres_database"] is False
        assert "include_docker" not in env_entry.variables

        gitignore = manifest.get(".gitignore")
        assert set(gitignore.variables) == {"project_name", "sanitized_project_name"}

    def test_build_bindings(self, make_config):
        config = make_config(project_name="x-y", include_docker=True)
        assert build_bindings(config, ("include_docker",)) == {
            "project_name": "x-y",
            "sanitized_project_name": "x_y",
            "include_docker": True,
        }

    def test_group_table_declares_only_known_flags(self, bare_config):
        known = set(bare_config.flags())
        for group in MANIFEST_GROUPS:
            for spec in group.files:
                assert set(spec.flags) <= known, spec.path


# ---------------------------------------------------------------------------
# Environment variables
# ---------------------------------------------------------------------------


class TestExpectedEnvVariables:
    def test_bare(self, bare_config):
        assert expected_env_variables(bare_config) == ["ENVIRONMENT", "DEBUG"]

    def test_supabase_database(self, make_config):
        assert expected_env_variables(make_config(supabase_database=True)) == [
            "ENVIRONMENT",
            "DEBUG",
            "SUPABASE_URL",
            "SUPABASE_ANON_KEY",
        ]

    def test_auth_adds_service_role_key(self, make_config):
        names = expected_env_variables(make_config(supabase_auth=True))
        assert names[-3:] == ["SUPABASE_URL", "SUPABASE_ANON_KEY", "SUPABASE_SERVICE_ROLE_KEY"]

    def test_postgres(self, postgres_config):
        assert expected_env_variables(postgres_config) == [
            "ENVIRONMENT",
            "DEBUG",
            "DATABASE_URL",
            "POSTGRES_USER",
            "POSTGRES_PASSWORD",
            "POSTGRES_DB",
        ]


def test_empty_manifest_helpers():
    manifest = Manifest(entries=())
    assert len(manifest) == 0
    assert manifest.paths() == []
    assert manifest.get("anything") is None
    assert "anything" not in manifest
