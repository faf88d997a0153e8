"""Template materialization.

Takes a template source tree plus a resolved variable context and writes
the new project.  For every source file the destination path is rendered,
the inclusion policy is consulted, and text files pass through the
handlebars processor (structured config files only), the comment
conditional processor and the placeholder renderer, in that order.

Quick usage::

    features = build_feature_context(context, entry.id)
    materializer = TemplateMaterializer(logger)
    await prepare_target_dir(target)
    result = await materializer.materialize(source, target, context, features)
    await ensure_gitignore(target, config.gitignore_entries)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from projex.config import DEFAULT_GITIGNORE_ENTRIES, DEFAULT_TAILWIND_TEMPLATES
from projex.utils import Logger, quiet_logger

from . import fs
from .conditionals import (
    process_conditionals,
    process_handlebars_conditionals,
    process_variable_handlebars_conditionals,
    should_write_file,
)
from .errors import TargetNotEmptyError
from .models import FeatureContext, VariableContext
from .variables import render_path, render_variables

# Variables whose "yes"/"no" answer becomes a feature flag.
FEATURE_FLAGS: tuple[str, ...] = (
    "router",
    "tailwind",
    "testing",
    "darkMode",
    "blog",
    "animations",
    "analytics",
)

# Structured files whose blocks are resolved against feature flags.
FEATURE_HANDLEBARS_FILES: frozenset[str] = frozenset({"package.json"})

# Config files whose blocks are resolved against raw variable values.
VARIABLE_HANDLEBARS_FILES: frozenset[str] = frozenset({
    "tailwind.config.cjs",
    "tailwind.config.js",
})


def build_feature_context(
    context: VariableContext,
    template_id: str,
    tailwind_default_templates: Sequence[str] = DEFAULT_TAILWIND_TEMPLATES,
) -> FeatureContext:
    """Derive the boolean feature flags from collected variables.

    A flag is on when its variable is exactly ``"yes"``.  An unresolved
    ``tailwind`` variable defaults to on for Tailwind-first templates.
    """
    features: FeatureContext = {name: context.get(name) == "yes" for name in FEATURE_FLAGS}
    if "tailwind" not in context and template_id in tailwind_default_templates:
        features["tailwind"] = True
    return features


@dataclass
class MaterializeResult:
    """What :meth:`TemplateMaterializer.materialize` did, as relative paths."""

    written: list[str] = field(default_factory=list)
    copied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.written) + len(self.copied)


class TemplateMaterializer:
    """Renders a template source tree into a destination directory.

    Files are processed one at a time.  The first I/O failure aborts the run
    and whatever was already written stays on disk.
    """

    def __init__(self, logger: Logger | None = None) -> None:
        self.logger = logger or quiet_logger()

    def render_text(
        self,
        file_name: str,
        content: str,
        context: VariableContext,
        features: FeatureContext,
    ) -> str:
        """Apply the full text pipeline to one file's content."""
        if file_name in FEATURE_HANDLEBARS_FILES:
            content = process_handlebars_conditionals(content, features)
        if file_name in VARIABLE_HANDLEBARS_FILES:
            content = process_variable_handlebars_conditionals(content, context)
        content = process_conditionals(content, features)
        return render_variables(content, context)

    async def materialize(
        self,
        source_root: str | Path,
        target_dir: str | Path,
        context: VariableContext,
        features: FeatureContext,
    ) -> MaterializeResult:
        """Copy and render every file under *source_root* into *target_dir*.

        Raises:
            TemplateIOError: On the first read, write, copy or mkdir failure.
        """
        source_root = Path(source_root)
        target_dir = Path(target_dir)
        result = MaterializeResult()

        self.logger.info("Copying template files...")

        for src_file in await fs.walk_dir(source_root, self.logger):
            relative = src_file.relative_to(source_root).as_posix()
            dest_relative = render_path(relative, context)

            if not should_write_file(dest_relative, features):
                self.logger.debug(f"Skipping conditional file: {dest_relative}")
                result.skipped.append(dest_relative)
                continue

            dest_file = target_dir / dest_relative

            if fs.is_binary_file(src_file):
                self.logger.debug(f"Copying binary file: {relative}")
                await fs.copy_file(src_file, dest_file)
                result.copied.append(dest_relative)
                continue

            self.logger.debug(f"Processing text file: {relative}")
            content = await fs.read_text_file(src_file)
            rendered = self.render_text(src_file.name, content, context, features)
            await fs.write_text_file(dest_file, rendered)
            result.written.append(dest_relative)

        return result


async def prepare_target_dir(target_dir: str | Path) -> Path:
    """Create *target_dir*, refusing to reuse a non-empty one.

    Raises:
        TargetNotEmptyError: If the directory exists and has entries.
    """
    target = Path(target_dir)
    if await fs.path_exists(target):
        if not await fs.is_dir_empty(target):
            raise TargetNotEmptyError(target)
    else:
        await fs.ensure_dir(target)
    return target


async def ensure_gitignore(
    target_dir: str | Path,
    entries: Sequence[str] = DEFAULT_GITIGNORE_ENTRIES,
) -> bool:
    """Union *entries* into ``<target_dir>/.gitignore``.

    Existing lines are kept and nothing is duplicated, so running this twice
    changes nothing the second time.

    Returns:
        ``True`` if the file was created or modified.
    """
    gitignore = Path(target_dir) / ".gitignore"

    content = ""
    if await fs.path_exists(gitignore):
        content = await fs.read_text_file(gitignore)

    lines = content.splitlines()
    present = {line.strip() for line in lines}
    missing = [entry for entry in entries if entry not in present]
    if not missing:
        return False

    lines.extend(missing)
    await fs.write_text_file(gitignore, "\n".join(lines) + "\n")
    return True
