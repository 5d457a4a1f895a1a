"""superfastapi tool configuration.

Settings that control *how* a project is generated (where it goes, which
templates are used, whether to stage atomically), as opposed to the feature
flags that control *what* is generated.  Values come from defaults, then
``SUPERFASTAPI_*`` environment variables, then CLI arguments.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool | None:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip().lower() in _TRUTHY


class Config(BaseModel):
    """Global superfastapi configuration."""

    output_dir: Path = Field(default=Path("."), description="Parent directory of the new project")
    template_dir: Path | None = Field(
        default=None, description="Override for the bundled Jinja2 template directory"
    )
    atomic: bool = Field(
        default=False, description="Stage the project and rename it into place on success"
    )
    assume_yes: bool = Field(
        default=False, description="Never prompt; use defaults for unspecified choices"
    )

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            SUPERFASTAPI_OUTPUT_DIR, SUPERFASTAPI_TEMPLATE_DIR,
            SUPERFASTAPI_ATOMIC, SUPERFASTAPI_ASSUME_YES.
        """
        kwargs: dict[str, object] = {}
        if os.environ.get("SUPERFASTAPI_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["SUPERFASTAPI_OUTPUT_DIR"])
        if os.environ.get("SUPERFASTAPI_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["SUPERFASTAPI_TEMPLATE_DIR"])

        atomic = _env_flag("SUPERFASTAPI_ATOMIC")
        if atomic is not None:
            kwargs["atomic"] = atomic
        assume_yes = _env_flag("SUPERFASTAPI_ASSUME_YES")
        if assume_yes is not None:
            kwargs["assume_yes"] = assume_yes

        return cls(**kwargs)
