"""Template hooks: post-create commands and messages from ``hooks.yaml``.

Only commands on a fixed allow-list are ever executed; anything else is
skipped with a warning.  Each command belongs to a class (install, git,
generic) that declares the messages shown around it and what counts as
success, so nothing depends on sniffing the child's output.  The process
runner is injected, which keeps tests free of real subprocesses.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from projex.scaffolder import fs
from projex.scaffolder.errors import TemplateIOError
from projex.scaffolder.models import Hook, HooksConfig, VariableContext, to_text
from projex.scaffolder.variables import render_variables
from projex.utils import Logger, quiet_logger, run_command

# (shell command or argv, cwd) -> (returncode, stdout, stderr)
CommandRunner = Callable[[str | list[str], Path], Awaitable[tuple[int, str, str]]]

# Entries are compared against the lower-cased command.
SAFE_COMMANDS: frozenset[str] = frozenset({
    "npm install",
    "npm ci",
    "npm i",
    "yarn install",
    "yarn",
    "pnpm install",
    "pnpm i",
    "git init",
    "git add",
    "git add .",
    "git add -a",
    "git commit",
})


def is_safe_command(command: str) -> bool:
    """Return ``True`` if *command* is on the allow-list.

    Accepted: an exact allow-list entry, ``git commit -m <message>``, or a
    ``||`` chain in which every part is itself safe.
    """
    cmd = command.strip().lower()

    if cmd in SAFE_COMMANDS:
        return True

    if cmd.startswith("git commit -m "):
        return True

    if " || " in cmd:
        return all(is_safe_command(part) for part in cmd.split(" || "))

    return False


# ---------------------------------------------------------------------------
# Command classes
# ---------------------------------------------------------------------------


class CommandClass(str, Enum):
    INSTALL = "install"
    GIT = "git"
    GENERIC = "generic"


@dataclass(frozen=True)
class CommandProfile:
    """User-facing messages and the success rule for one command class."""

    start: str
    success: str
    failure: str
    skipped: str

    @staticmethod
    def succeeded(returncode: int) -> bool:
        return returncode == 0


PROFILES: dict[CommandClass, CommandProfile] = {
    CommandClass.INSTALL: CommandProfile(
        start="📦 Installing dependencies... (this may take a moment)",
        success="✅ Dependencies are ready!",
        failure="⚠️  Dependency installation had issues, but your project should still work.",
        skipped="⚠️  Skipped potentially unsafe command for your security",
    ),
    CommandClass.GIT: CommandProfile(
        start="🔧 Setting up git repository...",
        success="Git repository ready",
        failure="ℹ️  Git setup had issues, but you can set it up manually later.",
        skipped=(
            "ℹ️  Git repository setup skipped for security. "
            "You can run 'git init' manually if needed."
        ),
    ),
    CommandClass.GENERIC: CommandProfile(
        start="Running: {command}",
        success="Finished: {command}",
        failure="⚠️  Setup step had issues: {command}",
        skipped="⚠️  Skipped potentially unsafe command for your security",
    ),
}

_PACKAGE_MANAGERS = ("npm", "yarn", "pnpm")


def classify_command(command: str) -> CommandClass:
    words = command.strip().lower().split()
    if not words:
        return CommandClass.GENERIC
    if words[0] in _PACKAGE_MANAGERS:
        return CommandClass.INSTALL
    if words[0] == "git":
        return CommandClass.GIT
    return CommandClass.GENERIC


class HookStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class HookOutcome:
    """Result of one hook command."""

    command: str
    command_class: CommandClass
    status: HookStatus
    returncode: Optional[int] = None
    error: str = ""


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


async def load_hooks(
    template_path: str | Path,
    logger: Logger | None = None,
    hooks_name: str = "hooks.yaml",
) -> Optional[HooksConfig]:
    """Read ``hooks.yaml`` from a template directory.

    Returns ``None`` when the file is absent or cannot be parsed.
    """
    log = logger or quiet_logger()
    hooks_path = Path(template_path) / hooks_name

    if not await fs.path_exists(hooks_path):
        log.debug(f"No {hooks_name} found")
        return None

    try:
        content = await fs.read_text_file(hooks_path)
        raw = yaml.safe_load(content) or {}
        if not isinstance(raw, dict):
            raise ValueError("top level must be a mapping")
        hooks = HooksConfig.model_validate({k: v for k, v in raw.items() if v is not None})
    except (TemplateIOError, yaml.YAMLError, ValidationError, ValueError) as exc:
        log.warn(f"Failed to parse {hooks_name}: {exc}")
        return None

    log.debug(f"Loaded hooks from {hooks_path}")
    return hooks


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


async def _default_runner(command: str | list[str], cwd: Path) -> tuple[int, str, str]:
    # Installs can take arbitrarily long; no timeout.
    return await run_command(command, cwd=cwd, timeout=None)


class HookExecutor:
    """Runs the ``install`` and ``git`` hooks of a template, in order.

    Args:
        runner: Coroutine executing a shell command in a directory.
        logger: Where progress and warnings go.
    """

    def __init__(self, runner: CommandRunner | None = None, logger: Logger | None = None) -> None:
        self.runner = runner or _default_runner
        self.logger = logger or quiet_logger()

    async def execute(
        self, hooks: HooksConfig, context: VariableContext, target_dir: str | Path
    ) -> list[HookOutcome]:
        outcomes: list[HookOutcome] = []
        for group_name, group in (("installation", hooks.install), ("git", hooks.git)):
            commands = [hook for hook in group if hook.run]
            if not commands:
                continue
            self.logger.info(f"Running {group_name} hooks...")
            for hook in commands:
                outcomes.append(await self.run_hook(hook, context, Path(target_dir)))
        return outcomes

    async def run_hook(self, hook: Hook, context: VariableContext, cwd: Path) -> HookOutcome:
        assert hook.run is not None
        command = render_variables(hook.run, context)
        command_class = classify_command(command)
        profile = PROFILES[command_class]

        if not is_safe_command(command):
            if command_class is CommandClass.GIT:
                self.logger.info(profile.skipped)
            else:
                self.logger.warn(profile.skipped)
            return HookOutcome(command, command_class, HookStatus.SKIPPED)

        self.logger.step(profile.start.format(command=command))
        try:
            returncode, _stdout, stderr = await self.runner(command, cwd)
        except OSError as exc:
            self.logger.error(f"❌ Failed to run command: {exc}")
            self.logger.warn(profile.failure.format(command=command))
            return HookOutcome(command, command_class, HookStatus.FAILED, error=str(exc))

        if profile.succeeded(returncode):
            self.logger.success(profile.success.format(command=command))
            return HookOutcome(command, command_class, HookStatus.SUCCEEDED, returncode)

        self.logger.debug(f"Command failed ({returncode}): {command}: {stderr}")
        self.logger.warn(profile.failure.format(command=command))
        return HookOutcome(command, command_class, HookStatus.FAILED, returncode, stderr)


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


def print_hook_messages(
    hooks: HooksConfig, context: VariableContext, logger: Logger | None = None
) -> None:
    """Print rendered notes and the deploy instructions matching ``deploy``."""
    log = logger or quiet_logger()

    notes = [note.text for note in hooks.notes if note.text]
    if notes:
        log.nl()
        log.title("📝 Next Steps:")
        for text in notes:
            log.info(render_variables(text, context))

    deploy_target = to_text(context.get("deploy", ""))
    if not hooks.deploy or not deploy_target or deploy_target == "none":
        return

    log.nl()
    log.title("🚀 Deploy Instructions:")
    for hook in hooks.deploy:
        if not (hook.when and hook.text):
            continue
        condition = render_variables(hook.when, context)
        if condition == "true" or deploy_target in condition:
            log.info(render_variables(hook.text, context))


async def run_hooks(
    template_path: str | Path,
    context: VariableContext,
    target_dir: str | Path,
    *,
    runner: CommandRunner | None = None,
    logger: Logger | None = None,
    hooks_name: str = "hooks.yaml",
) -> list[HookOutcome]:
    """Load, execute and print a template's hooks in one call."""
    hooks = await load_hooks(template_path, logger, hooks_name)
    if hooks is None:
        return []
    outcomes = await HookExecutor(runner, logger).execute(hooks, context, target_dir)
    print_hook_messages(hooks, context, logger)
    return outcomes
