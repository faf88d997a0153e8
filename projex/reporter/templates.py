"""``templates list`` and ``templates info`` output."""

from __future__ import annotations

from rich.markup import escape
from rich.table import Table

from projex.scaffolder.catalog import TemplateCatalog
from projex.scaffolder.errors import TemplateNotFoundError
from projex.scaffolder.models import TemplateEntry
from projex.scaffolder.variables import has_variables
from projex.utils import Logger


async def list_templates(catalog: TemplateCatalog, logger: Logger) -> list[TemplateEntry]:
    """Print every available template and return them."""
    templates = await catalog.discover()

    if not templates:
        logger.warn("No templates found")
        return templates

    table = Table(title="Available Templates", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="bold", no_wrap=True)
    table.add_column("Name")
    table.add_column("Version", style="dim")
    for entry in templates:
        table.add_row(escape(entry.id), escape(entry.display_name), escape(f"v{entry.version}"))

    logger.console.print(table)
    return templates


async def show_template_info(
    catalog: TemplateCatalog, template_id: str, logger: Logger
) -> TemplateEntry:
    """Print a template's metadata, variables, files and post-create commands.

    Raises:
        TemplateNotFoundError: If *template_id* is unknown.
    """
    entry = await catalog.find(template_id)
    if entry is None:
        raise TemplateNotFoundError(template_id)

    manifest = entry.manifest
    logger.title(f"Template: {entry.display_name}")
    logger.nl()

    summary = {"ID": entry.id, "Version": entry.version, "Path": str(entry.path)}
    if manifest.requires and manifest.requires.node:
        summary["Node requirement"] = manifest.requires.node
    logger.summary_table(summary, title="Template")

    if manifest.vars:
        table = Table(title="Variables", show_header=True, header_style="bold cyan")
        for column in ("Name", "Prompt", "Type", "Default", "Choices", "Pattern", "When"):
            table.add_column(column)
        for var in manifest.vars:
            cells = (
                var.name,
                var.prompt or var.name,
                var.type.value,
                var.default or "(none)",
                ", ".join(var.choices or []),
                var.pattern or "",
                var.when or "",
            )
            table.add_row(*(escape(cell) for cell in cells))
        logger.console.print(table)
        logger.nl()

    files = await catalog.list_files(entry)
    if files:
        logger.title(f"Files ({len(files)}):")
        for relative in files:
            suffix = " (templated name)" if has_variables(relative) else ""
            logger.step(f"{relative}{suffix}")
        logger.nl()

    if manifest.post_create and manifest.post_create.safe:
        logger.title("Post-create hooks:")
        for command in manifest.post_create.safe:
            logger.step(command)
        logger.nl()

    return entry
