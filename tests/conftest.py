"""Shared pytest fixtures for the create-projex test suite.

Provides reusable fixtures for:
- A logger that records everything it prints
- Scripted prompters and process runners (no terminal, no subprocesses)
- On-disk template directories built inside ``tmp_path``
"""

from __future__ import annotations

import io
import json
import textwrap
from pathlib import Path
from typing import Any, Optional
from unittest.mock import AsyncMock

import pytest
from rich.console import Console

from projex.utils import Logger

BUNDLED_TEMPLATES = Path(__file__).resolve().parent.parent / "projex" / "templates"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.fixture
def logger() -> Logger:
    """Debug-enabled logger writing to an in-memory buffer.

    Read what was printed with ``logger.console.file.getvalue()``.
    """
    console = Console(file=io.StringIO(), width=200, force_terminal=False, color_system=None)
    return Logger(console=console, debug=True)


# ---------------------------------------------------------------------------
# Prompter & runner fakes
# ---------------------------------------------------------------------------


class ScriptedPrompter:
    """Prompter answering from per-method queues and recording questions.

    An exhausted queue answers with the prompt's default, like pressing
    Enter at a real terminal.
    """

    def __init__(
        self,
        text: Optional[list[Optional[str]]] = None,
        select: Optional[list[Optional[str]]] = None,
        confirm: Optional[list[bool]] = None,
    ) -> None:
        self.text_answers = list(text or [])
        self.select_answers = list(select or [])
        self.confirm_answers = list(confirm or [])
        self.asked: list[tuple[str, str]] = []

    async def text(self, message: str, default: Optional[str] = None) -> Optional[str]:
        self.asked.append(("text", message))
        return self.text_answers.pop(0) if self.text_answers else default

    async def select(
        self, message: str, choices: list[str], default: Optional[str] = None
    ) -> Optional[str]:
        self.asked.append(("select", message))
        return self.select_answers.pop(0) if self.select_answers else default

    async def confirm(self, message: str, default: bool = False) -> bool:
        self.asked.append(("confirm", message))
        return self.confirm_answers.pop(0) if self.confirm_answers else default


@pytest.fixture
def prompter() -> ScriptedPrompter:
    """Prompter that accepts every default."""
    return ScriptedPrompter()


@pytest.fixture
def make_prompter() -> type[ScriptedPrompter]:
    """Build a prompter with scripted answers: ``make_prompter(select=["no"])``."""
    return ScriptedPrompter


@pytest.fixture
def fake_runner() -> AsyncMock:
    """Process runner that succeeds without spawning anything.

    Usage::

        async def test_hooks(fake_runner):
            ...
            fake_runner.assert_any_await("npm install", target)
    """
    return AsyncMock(return_value=(0, "", ""))


# ---------------------------------------------------------------------------
# Templates on disk
# ---------------------------------------------------------------------------


def write_template(
    templates_dir: Path,
    template_id: str,
    files: dict[str, str | bytes],
    vars: Optional[list[dict[str, Any]]] = None,
    hooks: Optional[str] = None,
    display_name: Optional[str] = None,
    version: str = "1.0.0",
    **manifest_extra: Any,
) -> Path:
    """Create ``templates_dir/<template_id>`` with a manifest and source tree.

    Returns:
        The template's directory.
    """
    template_path = templates_dir / template_id
    source = template_path / "template"
    source.mkdir(parents=True)

    manifest = {
        "id": template_id,
        "displayName": display_name or template_id.replace("-", " ").title(),
        "version": version,
        "vars": vars if vars is not None else [{"name": "projectName", "prompt": "Project name:"}],
        **manifest_extra,
    }
    (template_path / "myproj.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")

    for relative, content in files.items():
        dest = source / relative
        dest.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            dest.write_bytes(content)
        else:
            dest.write_text(textwrap.dedent(content), encoding="utf-8")

    if hooks is not None:
        (template_path / "hooks.yaml").write_text(textwrap.dedent(hooks), encoding="utf-8")

    return template_path


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """Empty templates directory."""
    path = tmp_path / "templates"
    path.mkdir()
    return path


@pytest.fixture
def bundled_templates_dir() -> Path:
    """The templates shipped inside the package."""
    assert BUNDLED_TEMPLATES.is_dir(), f"Bundled templates not found at {BUNDLED_TEMPLATES}"
    return BUNDLED_TEMPLATES


@pytest.fixture
def make_template(templates_dir: Path):
    """Factory writing templates into the ``templates_dir`` fixture.

    Usage::

        def test_x(make_template, templates_dir):
            make_template("demo", {"README.md": "# {{projectName}}"})
    """

    def factory(template_id: str, files: dict[str, str | bytes], **kwargs: Any) -> Path:
        return write_template(templates_dir, template_id, files, **kwargs)

    return factory
