"""Template discovery.

A templates directory holds one sub-directory per template::

    templates/
      react-vite-starter/
        myproj.json      # manifest (id, displayName, version, vars, ...)
        hooks.yaml       # optional post-create hooks
        template/        # source tree copied into the new project
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from projex.utils import Logger, load_json, quiet_logger

from . import fs
from .models import TemplateEntry, TemplateManifest


class TemplateCatalog:
    """Finds and validates templates under a templates directory."""

    def __init__(
        self,
        templates_dir: str | Path,
        logger: Logger | None = None,
        manifest_name: str = "myproj.json",
        source_dir_name: str = "template",
    ) -> None:
        self.templates_dir = Path(templates_dir)
        self.logger = logger or quiet_logger()
        self.manifest_name = manifest_name
        self.source_dir_name = source_dir_name

    async def discover(self) -> list[TemplateEntry]:
        """Return every template with a readable manifest, sorted by directory name.

        Invalid manifests are reported and skipped.
        """
        self.logger.debug(f"Looking for templates in: {self.templates_dir}")

        if not await fs.is_directory(self.templates_dir):
            self.logger.warn(f"Templates directory not found: {self.templates_dir}")
            return []

        try:
            children = await asyncio.to_thread(
                lambda: sorted(p for p in self.templates_dir.iterdir() if p.is_dir())
            )
        except OSError as exc:
            self.logger.warn(f"Failed to read templates directory: {exc}")
            return []

        catalog: list[TemplateEntry] = []
        for template_path in children:
            manifest_path = template_path / self.manifest_name
            if not await fs.path_exists(manifest_path):
                continue

            try:
                raw = await asyncio.to_thread(load_json, manifest_path)
                manifest = TemplateManifest.model_validate(raw)
            except (OSError, ValueError, ValidationError) as exc:
                self.logger.warn(f"Invalid template manifest at {manifest_path}: {exc}")
                continue

            catalog.append(
                TemplateEntry(
                    id=manifest.id,
                    display_name=manifest.display_name,
                    version=manifest.version,
                    path=template_path,
                    manifest=manifest,
                )
            )
            self.logger.debug(f"Found template: {manifest.id} ({manifest.display_name})")

        return catalog

    async def find(self, template_id: str) -> Optional[TemplateEntry]:
        for entry in await self.discover():
            if entry.id == template_id:
                return entry
        return None

    def source_dir(self, entry: TemplateEntry) -> Path:
        """The directory whose contents are copied into new projects."""
        return entry.path / self.source_dir_name

    async def validate(self, entry: TemplateEntry) -> bool:
        """Check that the template's source tree exists and is a directory."""
        source = self.source_dir(entry)

        if not await fs.path_exists(source):
            self.logger.error(f"Template directory not found: {source}")
            return False

        if not await fs.is_directory(source):
            self.logger.error(f"Template path is not a directory: {source}")
            return False

        return True

    async def list_files(self, entry: TemplateEntry) -> list[str]:
        """Relative paths of every file in the template's source tree."""
        source = self.source_dir(entry)
        files = await fs.walk_dir(source, self.logger)
        return [path.relative_to(source).as_posix() for path in files]
