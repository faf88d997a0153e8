"""create-projex configuration.

Centralised, typed configuration for the scaffolder.  Settings use a Pydantic
v2 model so they are validated at construction time and can be read from a
JSON file or from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

_BUNDLED_TEMPLATES_DIR = Path(__file__).parent / "templates"

DEFAULT_GITIGNORE_ENTRIES: list[str] = [
    "node_modules",
    "dist",
    ".env*",
    ".DS_Store",
]

# Templates whose source tree assumes Tailwind unless the user says otherwise.
DEFAULT_TAILWIND_TEMPLATES: list[str] = [
    "portfolio-react",
    "personal-blog",
    "landing-page",
]

_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Global create-projex configuration.

    Instances are created once by the CLI entry point and then passed
    through the rest of the system.
    """

    templates_dir: Path = Field(
        default=_BUNDLED_TEMPLATES_DIR,
        description="Directory holding one sub-directory per template",
    )
    debug: bool = Field(default=False, description="Print debug diagnostics")
    gitignore_entries: list[str] = Field(
        default_factory=lambda: list(DEFAULT_GITIGNORE_ENTRIES),
        description="Lines unioned into the generated project's .gitignore",
    )
    tailwind_default_templates: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TAILWIND_TEMPLATES),
        description="Template ids for which an unset 'tailwind' variable means enabled",
    )
    manifest_name: str = Field(default="myproj.json", min_length=1)
    hooks_name: str = Field(default="hooks.yaml", min_length=1)
    source_dir_name: str = Field(default="template", min_length=1)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a configuration from a JSON file."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            PROJEX_TEMPLATES_DIR, PROJEX_DEBUG, PROJEX_GITIGNORE_ENTRIES.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("PROJEX_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["PROJEX_TEMPLATES_DIR"])
        if os.environ.get("PROJEX_DEBUG"):
            kwargs["debug"] = os.environ["PROJEX_DEBUG"].strip().lower() in _TRUTHY
        if os.environ.get("PROJEX_GITIGNORE_ENTRIES"):
            entries = os.environ["PROJEX_GITIGNORE_ENTRIES"].split(",")
            kwargs["gitignore_entries"] = [e.strip() for e in entries if e.strip()]
        return cls(**kwargs)
