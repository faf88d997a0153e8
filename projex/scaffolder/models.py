"""Pydantic v2 models for templates, manifests and rendering contexts.

Defines the manifest schema read from ``myproj.json``, the hook schema read
from ``hooks.yaml``, and the two context mappings that drive rendering.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Contexts
# ---------------------------------------------------------------------------

# Resolved variables: text from the manifest pipeline, booleans for derived
# flags.  Insertion order follows declaration order.
ContextValue = Union[str, bool]
VariableContext = dict[str, ContextValue]

# Feature flags consumed by the conditional processors.  Read-only while
# rendering.
FeatureContext = dict[str, bool]

PROJECT_NAME_VAR = "projectName"

_FLAG_WORDS = {"yes", "true", "y", "on", "1"}


def to_text(value: ContextValue) -> str:
    """Text form of a context value, used for substitution and validation."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def to_flag(value: Optional[ContextValue]) -> bool:
    """Boolean form of a context value, used for conditional evaluation."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _FLAG_WORDS


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


class VariableType(str, Enum):
    """How a variable is prompted for."""
    TEXT = "text"
    CHOICE = "choice"


class VariableDeclaration(BaseModel):
    """A named, typed, optionally-defaulted input slot defined by a template."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Unique key in the context")
    prompt: Optional[str] = Field(default=None, description="Question shown to the user")
    type: VariableType = Field(default=VariableType.TEXT)
    choices: Optional[list[str]] = Field(default=None)
    default: Optional[str] = Field(default=None)
    pattern: Optional[str] = Field(default=None, description="Regex the value must match")
    when: Optional[str] = Field(
        default=None, description="Condition of the form 'otherVar == value'"
    )

    @field_validator("pattern")
    @classmethod
    def _check_pattern(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"invalid regular expression: {exc}") from exc
        return value

    @property
    def prompt_text(self) -> str:
        return self.prompt or f"Enter {self.name}:"


class Requirements(BaseModel):
    node: Optional[str] = None


class PostCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    safe: list[str] = Field(default_factory=list)
    package_manager: Optional[str] = Field(default=None, alias="packageManager")


class TemplateManifest(BaseModel):
    """Contents of a template's ``myproj.json``."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    display_name: str = Field(..., alias="displayName")
    version: str = Field(...)
    vars: list[VariableDeclaration] = Field(default_factory=list)
    requires: Optional[Requirements] = None
    post_create: Optional[PostCreate] = Field(default=None, alias="postCreate")


class TemplateEntry(BaseModel):
    """A template discovered on disk."""

    id: str
    display_name: str
    version: str
    path: Path = Field(..., description="Directory holding the manifest")
    manifest: TemplateManifest


# ---------------------------------------------------------------------------
# Hooks
# ---------------------------------------------------------------------------


class Hook(BaseModel):
    """One entry of ``hooks.yaml``: a command to run or a text to print."""
    run: Optional[str] = None
    text: Optional[str] = None
    when: Optional[str] = None


class HooksConfig(BaseModel):
    """Contents of a template's ``hooks.yaml``."""
    install: list[Hook] = Field(default_factory=list)
    git: list[Hook] = Field(default_factory=list)
    notes: list[Hook] = Field(default_factory=list)
    deploy: list[Hook] = Field(default_factory=list)
