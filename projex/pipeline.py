"""create-projex command pipeline.

Implements the ``init`` flow end to end:

1. Discover templates and resolve the one to use.
2. Collect variables from arguments, options, defaults or prompts.
3. Prepare the target directory (refusing non-empty ones).
4. Materialize the template, then union the required ``.gitignore`` lines.
5. Run the template's safe hooks and print its notes.
6. Offer the optional post-creation steps.

Usage::

    create-projex my-app --template react-vite-starter --yes
    create-projex templates list
    create-projex templates info react-vite-starter
    create-projex doctor
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from projex import __version__
from projex.config import Config
from projex.hooks.executor import CommandRunner, run_hooks
from projex.hooks.post_create import PostCreateFlow
from projex.reporter.doctor import Doctor, has_blocking_issues
from projex.reporter.templates import list_templates, show_template_info
from projex.scaffolder.catalog import TemplateCatalog
from projex.scaffolder.collector import (
    Prompter,
    RichPrompter,
    VariableCollector,
    finalize_project_name,
)
from projex.scaffolder.errors import (
    InvalidTemplateError,
    MissingVariableError,
    ProjexError,
    TemplateNotFoundError,
)
from projex.scaffolder.generator import (
    TemplateMaterializer,
    build_feature_context,
    ensure_gitignore,
    prepare_target_dir,
)
from projex.scaffolder.models import PROJECT_NAME_VAR, TemplateEntry, to_text
from projex.utils import Logger

# (flag, metavar, help) for variables that have a dedicated option.
NAMED_VARIABLE_OPTIONS: list[tuple[str, str, str]] = [
    ("router", "yes|no", "Include React Router"),
    ("tailwind", "yes|no", "Include Tailwind CSS"),
    ("testing", "yes|no", "Include testing setup"),
    ("deploy", "none|vercel|netlify|cloudflare", "Deployment target"),
    ("fullName", "NAME", "Your full name"),
    ("title", "TITLE", "Your professional title"),
    ("email", "EMAIL", "Your email address"),
    ("github", "USERNAME", "GitHub username"),
    ("linkedin", "USERNAME", "LinkedIn username"),
    ("darkMode", "yes|no", "Include dark mode toggle"),
    ("blog", "yes|no", "Include blog section"),
    ("animations", "yes|no", "Include scroll animations"),
    ("analytics", "yes|no", "Include Google Analytics"),
]


@dataclass
class InitOptions:
    """Everything the ``init`` flow needs from the command line."""

    project_name: Optional[str] = None
    template: Optional[str] = None
    name: Optional[str] = None
    dir: Optional[str] = None
    yes: bool = False
    non_interactive: bool = False
    open_vscode: bool = False
    variables: dict[str, str] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Init pipeline
# ---------------------------------------------------------------------------


class InitPipeline:
    """Creates a project from a template.

    Attributes:
        config: Global configuration.
        logger: Shared logger.
        prompter: Source of interactive answers.
        runner: Optional process runner for hooks and post-create steps.
    """

    def __init__(
        self,
        config: Config,
        logger: Logger,
        prompter: Prompter,
        runner: CommandRunner | None = None,
    ) -> None:
        self.config = config
        self.logger = logger
        self.prompter = prompter
        self.runner = runner
        self.catalog = TemplateCatalog(
            config.templates_dir,
            logger,
            manifest_name=config.manifest_name,
            source_dir_name=config.source_dir_name,
        )

    async def resolve_template(self, options: InitOptions) -> TemplateEntry:
        """Pick the template from the option, the sole candidate, or a prompt."""
        templates = await self.catalog.discover()
        if not templates:
            raise ProjexError("No templates found. Make sure the templates directory exists.")

        if options.template:
            template_id = options.template
        elif len(templates) == 1:
            template_id = templates[0].id
        elif options.non_interactive:
            raise ProjexError("Template must be specified in non-interactive mode")
        else:
            labels = {f"{t.display_name} (v{t.version})": t.id for t in templates}
            picked = await self.prompter.select("Select a template:", list(labels), None)
            if not picked:
                raise ProjexError("Template selection cancelled")
            template_id = labels[picked]

        entry = next((t for t in templates if t.id == template_id), None)
        if entry is None:
            raise TemplateNotFoundError(template_id)

        if not await self.catalog.validate(entry):
            raise InvalidTemplateError(f"Invalid template: {template_id}")

        return entry

    async def run(self, options: InitOptions) -> Path:
        """Execute the full init flow and return the project directory.

        Raises:
            ProjexError: On any validation, configuration or I/O failure.
        """
        log = self.logger
        log.title("🚀 create-projex")
        log.nl()

        entry = await self.resolve_template(options)
        log.info(f"Using template: {entry.display_name}")

        collector = VariableCollector(self.prompter, log)
        context = await collector.collect(
            entry.manifest.vars,
            project_name_arg=options.project_name,
            options=options.variables,
            name_option=options.name,
            yes=options.yes,
            non_interactive=options.non_interactive,
        )
        finalize_project_name(context, log)

        if options.dir:
            target = Path(options.dir).resolve()
        elif context.get(PROJECT_NAME_VAR):
            target = Path(to_text(context[PROJECT_NAME_VAR])).resolve()
        else:
            raise MissingVariableError(PROJECT_NAME_VAR)

        await prepare_target_dir(target)
        log.info(f"Creating project in: {target}")

        features = build_feature_context(
            context, entry.id, self.config.tailwind_default_templates
        )
        log.debug(f"Conditional context: {features}")

        result = await TemplateMaterializer(log).materialize(
            self.catalog.source_dir(entry), target, context, features
        )
        log.debug(
            f"Wrote {len(result.written)} file(s), copied {len(result.copied)}, "
            f"skipped {len(result.skipped)}"
        )
        await ensure_gitignore(target, self.config.gitignore_entries)

        await run_hooks(
            entry.path,
            context,
            target,
            runner=self.runner,
            logger=log,
            hooks_name=self.config.hooks_name,
        )

        project_name = to_text(context.get(PROJECT_NAME_VAR, target.name))
        log.nl()
        log.success(f'🎉 Your project "{project_name}" is ready!')

        interactive = not (options.yes or options.non_interactive)
        await PostCreateFlow(self.prompter, self.runner, log).run(
            target, interactive=interactive, open_editor=options.open_vscode
        )
        return target


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _parse_var(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {raw!r}")
    return key.strip(), value


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--config", default=None, help="Path to a JSON configuration file"
    )


def build_init_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-projex",
        description="Scaffold projects from local templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Other commands:\n"
            "  create-projex templates list\n"
            "  create-projex templates info <template-id>\n"
            "  create-projex doctor\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("project_name", nargs="?", help="Name of the project to create")
    parser.add_argument("-t", "--template", help="Template ID to use")
    parser.add_argument("-n", "--name", help="Project name")
    parser.add_argument("-d", "--dir", help="Output directory")
    parser.add_argument("-y", "--yes", action="store_true", help="Skip all prompts and use defaults")
    parser.add_argument(
        "--non-interactive", action="store_true", help="Fail if any required input is missing"
    )
    parser.add_argument("--list", action="store_true", help="List available templates")
    parser.add_argument("--info", metavar="ID", help="Show template information")
    parser.add_argument(
        "--open-vscode", action="store_true", help="Open the created project in VS Code"
    )
    parser.add_argument(
        "--var",
        dest="extra_vars",
        action="append",
        type=_parse_var,
        default=[],
        metavar="KEY=VALUE",
        help="Set any template variable (repeatable)",
    )
    for name, metavar, help_text in NAMED_VARIABLE_OPTIONS:
        parser.add_argument(f"--{name}", dest=name, metavar=metavar, help=help_text)
    _add_common_options(parser)
    return parser


def build_templates_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="create-projex templates", description="Manage templates")
    _add_common_options(parser)
    sub = parser.add_subparsers(dest="action", required=True)
    sub.add_parser("list", help="List all available templates")
    info = sub.add_parser("info", help="Show detailed information about a template")
    info.add_argument("template_id", help="Template ID to show info for")
    return parser


def build_doctor_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-projex doctor", description="Check system requirements and setup"
    )
    _add_common_options(parser)
    return parser


def init_options_from_args(args: argparse.Namespace) -> InitOptions:
    variables: dict[str, str] = {}
    for name, _metavar, _help in NAMED_VARIABLE_OPTIONS:
        value = getattr(args, name, None)
        if value:
            variables[name] = value
    variables.update(dict(args.extra_vars))

    return InitOptions(
        project_name=args.project_name,
        template=args.template,
        name=args.name,
        dir=args.dir,
        yes=args.yes,
        non_interactive=args.non_interactive,
        open_vscode=args.open_vscode,
        variables=variables,
    )


def load_config(args: argparse.Namespace) -> Config:
    config = Config.load(Path(args.config)) if args.config else Config.from_env()
    if args.debug:
        config.debug = True
    return config


async def dispatch(
    argv: list[str],
    *,
    logger: Logger | None = None,
    prompter: Prompter | None = None,
    runner: CommandRunner | None = None,
) -> int:
    """Parse *argv*, run the selected command and return the exit status."""
    if argv and argv[0] == "templates":
        args = build_templates_parser().parse_args(argv[1:])
    elif argv and argv[0] == "doctor":
        args = build_doctor_parser().parse_args(argv[1:])
    else:
        args = build_init_parser().parse_args(argv)

    log = logger or Logger()
    try:
        config = load_config(args)
    except (OSError, ValueError, ValidationError) as exc:
        log.error(f"Invalid configuration: {exc}")
        return 1
    log.set_debug(config.debug)

    catalog = TemplateCatalog(
        config.templates_dir,
        log,
        manifest_name=config.manifest_name,
        source_dir_name=config.source_dir_name,
    )

    try:
        if argv and argv[0] == "templates":
            if args.action == "list":
                await list_templates(catalog, log)
            else:
                await show_template_info(catalog, args.template_id, log)
            return 0

        if argv and argv[0] == "doctor":
            results = await Doctor(catalog, log, runner).run()
            return 1 if has_blocking_issues(results) else 0

        if args.list:
            await list_templates(catalog, log)
            return 0
        if args.info:
            await show_template_info(catalog, args.info, log)
            return 0

        pipeline = InitPipeline(config, log, prompter or RichPrompter(log.console), runner)
        await pipeline.run(init_options_from_args(args))
        return 0
    except ProjexError as exc:
        log.nl()
        log.error(str(exc))
        if config.debug:
            log.debug(traceback.format_exc())
        return 1


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``create-projex`` and ``python -m projex``."""
    args: list[str] = list(sys.argv[1:] if argv is None else argv)
    try:
        status = asyncio.run(dispatch(args))
    except KeyboardInterrupt:
        status = 130
    sys.exit(status)
