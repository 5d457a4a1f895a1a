"""Command-line interface for superfastapi.

Collects the project name and feature choices (from arguments, falling back
to interactive prompts), runs the scaffolder, and prints next steps.

Usage::

    superfastapi my-api
    superfastapi my-api --database postgres --yes
    python -m superfastapi user_service --database supabase --auth --docker
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from rich.prompt import Confirm, Prompt

from superfastapi import __version__
from superfastapi.config import Config
from superfastapi.scaffolder import (
    CanonicalConfig,
    DatabaseChoice,
    FeatureFlags,
    ProjectGenerator,
    ScaffoldError,
    TemplateRenderer,
    resolve_configuration,
    validate_project_name,
)
from superfastapi.utils import (
    console,
    create_progress,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
)

DOCKER_FORCED_MESSAGE = (
    "PostgreSQL setup requires Docker. Docker setup will be included automatically."
)


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


def prompt_database_choice() -> DatabaseChoice:
    """Ask which database setup to include (default: none)."""
    answer = Prompt.ask(
        "Choose your database setup",
        choices=[choice.value for choice in DatabaseChoice],
        default=DatabaseChoice.NONE.value,
        console=console,
    )
    return DatabaseChoice(answer)


def prompt_supabase_auth() -> bool:
    return Confirm.ask(
        "Do you want to include Supabase authentication?", default=False, console=console
    )


def prompt_docker_setup() -> bool:
    return Confirm.ask(
        "Do you want to include Docker setup (Dockerfile + docker-compose.yml)?",
        default=False,
        console=console,
    )


def collect_flags(args: argparse.Namespace, assume_yes: bool) -> FeatureFlags:
    """Build ``FeatureFlags`` from *args*, prompting for anything missing.

    The prompt order follows the implication rules: authentication is only
    offered when Supabase is the chosen database.  With *assume_yes* nothing
    is prompted and unspecified choices take their defaults.
    """
    if args.database is not None:
        database = DatabaseChoice(args.database)
    elif assume_yes:
        database = DatabaseChoice.NONE
    else:
        database = prompt_database_choice()

    if args.auth is not None:
        auth = args.auth
    elif database is DatabaseChoice.SUPABASE and not assume_yes:
        auth = prompt_supabase_auth()
    else:
        auth = False

    if args.docker is not None:
        docker = args.docker
    elif assume_yes:
        docker = False
    else:
        docker = prompt_docker_setup()

    return FeatureFlags(database_choice=database, supabase_auth=auth, include_docker=docker)


# ---------------------------------------------------------------------------
# Completion messages
# ---------------------------------------------------------------------------


def next_steps(config: CanonicalConfig) -> list[str]:
    """Return the next-step instructions for a freshly generated project."""
    lines = [
        "📋 Next steps:",
        f"  cd {config.project_name}",
        "  cp example.env .env",
        "  poetry install",
        "  poetry run uvicorn app.main:app --reload",
    ]

    if config.supabase_database:
        lines += [
            "",
            "🗄️  Supabase Database Setup:",
            "  1. Create a new Supabase project at https://supabase.com",
            "  2. Set SUPABASE_URL and SUPABASE_ANON_KEY in .env",
            "  3. Use the client in app/db/supabase.py to query your tables",
        ]

    if config.supabase_auth:
        step = 1
        lines += ["", "🔐 Supabase Authentication Setup:"]
        if not config.supabase_database:
            lines.append(f"  {step}. Create a new Supabase project at https://supabase.com")
            step += 1
            lines.append(f"  {step}. Set SUPABASE_URL and SUPABASE_ANON_KEY in .env")
            step += 1
        lines += [
            f"  {step}. Set SUPABASE_SERVICE_ROLE_KEY in .env (keep it secret)",
            f"  {step + 1}. Enable email sign-in under Authentication -> Providers",
            f"  {step + 2}. Auth endpoints live in app/api/routes/auth.py",
        ]

    if config.uses_supabase:
        lines += ["", "  Supabase docs: https://supabase.com/docs"]

    if config.postgres_database:
        lines += [
            "",
            "🐘 PostgreSQL Setup:",
            "  docker compose up -d db",
            "  poetry run alembic upgrade head",
        ]

    if config.include_docker:
        lines += ["", "🐳 Docker:", "  docker compose up --build"]

    return lines


def display_next_steps(config: CanonicalConfig) -> None:
    console.print()
    for line in next_steps(config):
        console.print(line, markup=False, highlight=False)


def _config_summary(config: CanonicalConfig) -> dict[str, str]:
    def yes_no(value: bool) -> str:
        return "yes" if value else "no"

    if config.supabase_database:
        database = "Supabase"
    elif config.postgres_database:
        database = "PostgreSQL"
    else:
        database = "none"
    return {
        "Project": config.project_name,
        "Database": database,
        "Supabase auth": yes_no(config.supabase_auth),
        "Docker": yes_no(config.include_docker),
    }


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="superfastapi",
        description="A minimal command-line tool to quickly scaffold FastAPI projects "
        "with Poetry configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  superfastapi my-api\n"
            "  superfastapi awesome-project --database postgres --yes\n"
            "  superfastapi user_service --database supabase --auth --no-docker\n"
        ),
    )
    parser.add_argument("project_name", help="Name of the FastAPI project to create")
    parser.add_argument(
        "--database",
        choices=[choice.value for choice in DatabaseChoice],
        default=None,
        help="Database setup (prompted if omitted)",
    )
    parser.add_argument(
        "--auth",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Include Supabase authentication",
    )
    parser.add_argument(
        "--docker",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Include Dockerfile and docker-compose.yml (always on for PostgreSQL)",
    )
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Do not prompt; use defaults for anything not given",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Parent directory for the project (default: current directory)",
    )
    parser.add_argument(
        "--atomic",
        action="store_true",
        help="Build in a temporary directory and move it into place on success",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def run(args: argparse.Namespace, config: Config) -> Path:
    """Validate, resolve, and generate the project described by *args*."""
    name = validate_project_name(args.project_name)
    print_info(f"🚀 Creating FastAPI project: {name}")

    flags = collect_flags(args, config.assume_yes)
    resolution = resolve_configuration(name, flags)
    if resolution.docker_was_forced:
        print_warning(f"⚠️  {DOCKER_FORCED_MESSAGE}")

    generator = ProjectGenerator(resolution.config, TemplateRenderer(config.template_dir))
    total = len(generator.manifest())

    with create_progress() as progress:
        task = progress.add_task("Writing files", total=total)

        def on_entry(entry) -> None:
            progress.update(task, advance=1, description=entry.path)

        project_root = await generator.generate(
            config.output_dir, atomic=config.atomic, on_entry=on_entry
        )

    print_success(f"✅ Successfully created {name}!")
    print_summary_table(_config_summary(resolution.config), title="Project configuration")
    display_next_steps(resolution.config)
    return project_root


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``superfastapi`` and ``python -m superfastapi``."""
    args = build_parser().parse_args(argv)

    config = Config.from_env()
    updates: dict[str, object] = {}
    if args.output is not None:
        updates["output_dir"] = Path(args.output)
    if args.atomic:
        updates["atomic"] = True
    if args.yes:
        updates["assume_yes"] = True
    if updates:
        config = config.model_copy(update=updates)

    try:
        asyncio.run(run(args, config))
    except ScaffoldError as exc:
        print_error(f"❌ Error creating project: {exc}")
        sys.exit(1)
    except KeyboardInterrupt:
        print_warning("Aborted.")
        sys.exit(130)


if __name__ == "__main__":
    main()
