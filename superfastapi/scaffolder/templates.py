"""Jinja2 template rendering for project scaffolding.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``superfastapi/scaffolder/templates/`` directory and renders them with the
bindings computed by the manifest.  Templates only use ``{{ variable }}``
substitution and ``{% if flag %}`` blocks; any variable a template reads but
was not given raises ``MissingVariableError`` instead of rendering blank.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateError,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
)

from .errors import InvalidTemplateError, MissingVariableError, TemplateNotFoundError


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    The renderer discovers ``.j2`` template files under a configurable
    template directory.  Rendering is pure: it returns text and never writes
    to disk (see ``materializer`` for that).
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: Mapping[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"app/main.py.j2"``).
            context: Mapping of variables available inside the template.

        Returns:
            The rendered template content as a string.

        Raises:
            TemplateNotFoundError: If no such template exists.
            InvalidTemplateError: If the template is not valid UTF-8 or
                not valid Jinja2.
            MissingVariableError: If the template reads an unbound variable.
        """
        try:
            template = self.env.get_template(template_path)
        except TemplateNotFound as exc:
            raise TemplateNotFoundError(
                f"Template not found: {template_path}"
            ) from exc
        except (TemplateError, UnicodeDecodeError) as exc:
            raise InvalidTemplateError(template_path, _describe(exc)) from exc
        return _render(template, template_path, context)

    def render_string(self, template_string: str, context: Mapping[str, Any]) -> str:
        """Render an inline template string with the provided context.

        Uses the same environment (and therefore the same strictness and
        whitespace handling) as file templates.
        """
        try:
            template = self.env.from_string(template_string)
        except TemplateError as exc:
            raise InvalidTemplateError("<string>", _describe(exc)) from exc
        return _render(template, "<string>", context)

    # -- Utility -----------------------------------------------------------

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of all ``.j2`` template paths under *prefix*.

        Paths are relative to the template root directory and use forward
        slashes.
        """
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in search_dir.rglob("*.j2")
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _render(template: Template, name: str, context: Mapping[str, Any]) -> str:
    try:
        return template.render(**context)
    except UndefinedError as exc:
        raise MissingVariableError(name, exc.message or str(exc)) from exc
    except TemplateError as exc:
        raise InvalidTemplateError(name, _describe(exc)) from exc


def _describe(exc: Exception) -> str:
    if isinstance(exc, TemplateSyntaxError):
        return f"{exc.message} (line {exc.lineno})"
    if isinstance(exc, UnicodeDecodeError):
        return "not valid UTF-8"
    return str(exc)
