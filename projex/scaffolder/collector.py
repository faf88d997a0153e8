"""Manifest-driven variable collection.

Walks a template's ordered variable declarations and resolves each one from,
in priority order: the positional project-name argument, a same-named
option, the ``--name`` option, the declared default (``--yes``), and
finally an interactive prompt.  The resulting context feeds every renderer.

Quick usage::

    collector = VariableCollector(RichPrompter(), logger)
    context = await collector.collect(manifest.vars, project_name_arg="my-app", yes=True)
    finalize_project_name(context, logger)
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Protocol

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt, Prompt

from projex.utils import Logger, quiet_logger

from .errors import InputCancelledError, MissingVariableError, PatternValidationError
from .models import PROJECT_NAME_VAR, VariableContext, VariableDeclaration, VariableType, to_text
from .variables import (
    PROJECT_NAME_PATTERN,
    pattern_error_message,
    sanitize_project_name,
    validate_project_name,
)

_WHEN_RE = re.compile(r"^(\w+)\s*==\s*(.+)$")


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------


class Prompter(Protocol):
    """Interactive input source.  Implementations may block indefinitely."""

    async def text(self, message: str, default: Optional[str] = None) -> Optional[str]: ...

    async def select(
        self, message: str, choices: Sequence[str], default: Optional[str] = None
    ) -> Optional[str]: ...

    async def confirm(self, message: str, default: bool = False) -> bool: ...


class RichPrompter:
    """Terminal prompts built on ``rich.prompt``.

    Rich prompts block on the calling thread, which must be the main thread
    so that Ctrl+C reaches ``input()``.  Ctrl+C or end-of-input raises
    :class:`InputCancelledError`.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    async def _ask(self, func: Any, *args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, console=self.console, **kwargs)
        except (KeyboardInterrupt, EOFError) as exc:
            raise InputCancelledError() from exc

    async def text(self, message: str, default: Optional[str] = None) -> Optional[str]:
        if default is None:
            return await self._ask(Prompt.ask, message)
        return await self._ask(Prompt.ask, message, default=default)

    async def select(
        self, message: str, choices: Sequence[str], default: Optional[str] = None
    ) -> Optional[str]:
        """Numbered single-select; the default choice is pre-selected."""
        self.console.print(f"[bold]{escape(message)}[/bold]")
        for index, choice in enumerate(choices, start=1):
            marker = "›" if choice == default else " "
            self.console.print(f" {marker} {index}. {escape(choice)}")

        initial = choices.index(default) + 1 if default in choices else 1
        while True:
            picked = await self._ask(IntPrompt.ask, "Choice", default=initial)
            if 1 <= picked <= len(choices):
                return choices[picked - 1]
            self.console.print(f"[red]Please enter a number between 1 and {len(choices)}[/red]")

    async def confirm(self, message: str, default: bool = False) -> bool:
        return await self._ask(Confirm.ask, message, default=default)


# ---------------------------------------------------------------------------
# Conditions
# ---------------------------------------------------------------------------


def evaluate_when_condition(
    condition: str, context: VariableContext, logger: Logger | None = None
) -> bool:
    """Evaluate a ``when`` clause of the form ``variable == value``.

    Only exact text equality against variables resolved so far is
    supported.  Any other syntax (``!=``, ``&&``, ...) counts as satisfied.
    """
    match = _WHEN_RE.match(condition.strip())
    if match:
        name, expected = match.groups()
        actual = context.get(name)
        return isinstance(actual, str) and actual == expected.strip()

    (logger or quiet_logger()).debug(f"Unrecognized when condition format: {condition}")
    return True


# ---------------------------------------------------------------------------
# Collector
# ---------------------------------------------------------------------------


class VariableCollector:
    """Resolves a template's variable declarations into a context.

    Args:
        prompter: Source of interactive answers.
        logger: Where diagnostics go.
        project_name_var: Name of the variable fed by the positional
            argument and ``--name``.
    """

    def __init__(
        self,
        prompter: Prompter,
        logger: Logger | None = None,
        project_name_var: str = PROJECT_NAME_VAR,
    ) -> None:
        self.prompter = prompter
        self.logger = logger or quiet_logger()
        self.project_name_var = project_name_var

    async def collect(
        self,
        declarations: Sequence[VariableDeclaration],
        *,
        project_name_arg: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
        name_option: Optional[str] = None,
        yes: bool = False,
        non_interactive: bool = False,
    ) -> VariableContext:
        """Resolve every declaration in order.

        Raises:
            MissingVariableError: A value is missing and prompting is disabled.
            PatternValidationError: A value does not match its pattern.
            InputCancelledError: The user aborted a prompt.
        """
        options = options or {}
        context: VariableContext = {}

        for decl in declarations:
            if decl.when and not evaluate_when_condition(decl.when, context, self.logger):
                self.logger.debug(f"Skipping {decl.name}: condition '{decl.when}' not met")
                continue

            value = await self._resolve(
                decl,
                project_name_arg=project_name_arg,
                options=options,
                name_option=name_option,
                yes=yes,
                non_interactive=non_interactive,
            )

            if value and decl.pattern and decl.name != self.project_name_var:
                self._validate_pattern(decl, value)

            context[decl.name] = value or decl.default or ""

        return context

    async def _resolve(
        self,
        decl: VariableDeclaration,
        *,
        project_name_arg: Optional[str],
        options: Mapping[str, Any],
        name_option: Optional[str],
        yes: bool,
        non_interactive: bool,
    ) -> Optional[str]:
        is_project_name = decl.name == self.project_name_var

        if is_project_name and project_name_arg:
            return project_name_arg

        option_value = options.get(decl.name)
        if option_value:
            return to_text(option_value)

        if is_project_name and name_option:
            return name_option

        if yes and decl.default:
            return decl.default

        if non_interactive:
            raise MissingVariableError(decl.name)

        if decl.type is VariableType.CHOICE and decl.choices:
            answer = await self.prompter.select(decl.prompt_text, decl.choices, decl.default)
        else:
            answer = await self.prompter.text(decl.prompt_text, decl.default)

        self.logger.debug(f"Prompt response for {decl.name}: {answer!r}")
        return answer if answer not in (None, "") else decl.default

    def _validate_pattern(self, decl: VariableDeclaration, value: str) -> None:
        assert decl.pattern is not None
        if re.search(decl.pattern, value) is None:
            raise PatternValidationError(
                decl.name,
                value,
                decl.pattern,
                pattern_error_message(value, decl.pattern, decl.name),
            )


def finalize_project_name(
    context: VariableContext,
    logger: Logger | None = None,
    project_name_var: str = PROJECT_NAME_VAR,
) -> VariableContext:
    """Replace an invalid project name with its sanitized form, warning once.

    This is the only place collection self-corrects instead of failing.
    """
    if project_name_var not in context:
        return context

    name = to_text(context[project_name_var])
    if not validate_project_name(name):
        sanitized = sanitize_project_name(name)
        if not sanitized:
            raise PatternValidationError(
                project_name_var,
                name,
                PROJECT_NAME_PATTERN,
                pattern_error_message(name, PROJECT_NAME_PATTERN, project_name_var),
            )
        (logger or quiet_logger()).warn(
            f'Project name "{name}" is invalid. Using "{sanitized}" instead.'
        )
        context[project_name_var] = sanitized
    return context
