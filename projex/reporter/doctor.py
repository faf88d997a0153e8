"""``doctor`` -- check that the environment can create and run projects.

Checks the Python interpreter, git and Node.js availability, and the
templates directory.  Only a missing templates directory or an unsupported
interpreter are blocking; missing git or Node.js merely degrade hooks and
the post-create flow.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from projex.hooks.executor import CommandRunner
from projex.scaffolder import fs
from projex.scaffolder.catalog import TemplateCatalog
from projex.utils import Logger, run_command

MIN_PYTHON: tuple[int, int] = (3, 10)


@dataclass
class CheckResult:
    name: str
    ok: bool
    detail: str
    blocking: bool = True


async def _probe_runner(command: str, cwd: Path) -> tuple[int, str, str]:
    return await run_command(command, cwd=cwd, timeout=10)


class Doctor:
    """Runs the environment checks and prints a report."""

    def __init__(
        self,
        catalog: TemplateCatalog,
        logger: Logger,
        runner: CommandRunner | None = None,
    ) -> None:
        self.catalog = catalog
        self.logger = logger
        self.runner = runner or _probe_runner

    def check_python(self) -> CheckResult:
        version = ".".join(str(part) for part in sys.version_info[:3])
        ok = sys.version_info[:2] >= MIN_PYTHON
        detail = f"Found: {version}" if ok else (
            f"Python {version} is too old. Requires >={'.'.join(map(str, MIN_PYTHON))}"
        )
        return CheckResult("Python version", ok, detail)

    async def check_tool(self, name: str, command: str, hint: str) -> CheckResult:
        try:
            returncode, stdout, _stderr = await self.runner(command, Path.cwd())
        except OSError:
            returncode, stdout = -1, ""
        if returncode == 0 and stdout:
            return CheckResult(name, True, f"Found: {stdout.splitlines()[0]}", blocking=False)
        return CheckResult(name, False, hint, blocking=False)

    async def check_templates(self) -> CheckResult:
        templates_dir = self.catalog.templates_dir
        if not await fs.is_directory(templates_dir):
            return CheckResult("Templates directory", False, f"Not found: {templates_dir}")

        templates = await self.catalog.discover()
        if not templates:
            return CheckResult(
                "Templates directory", False, f"No valid templates in {templates_dir}"
            )
        names = ", ".join(entry.id for entry in templates)
        return CheckResult(
            "Templates directory", True, f"{len(templates)} template(s): {names}"
        )

    async def run(self) -> list[CheckResult]:
        """Run every check, print the report and return the results."""
        self.logger.title("🔍 System Check")
        self.logger.nl()

        results = [
            self.check_python(),
            await self.check_tool(
                "Git", "git --version",
                "Git is not available. Post-create hooks may fail. "
                "Install git: https://git-scm.com/downloads",
            ),
            await self.check_tool(
                "Node.js", "node --version",
                "Node.js is not available. Generated projects need it to install and run.",
            ),
            await self.check_templates(),
        ]

        for result in results:
            if result.ok:
                self.logger.success(f"{result.name}: {result.detail}")
            elif result.blocking:
                self.logger.error(f"{result.name}: {result.detail}")
            else:
                self.logger.warn(f"{result.name}: {result.detail}")

        self.logger.nl()
        if has_blocking_issues(results):
            self.logger.error("Some checks failed. Please fix the issues above.")
        else:
            self.logger.success("All essential checks passed!")
        return results


def has_blocking_issues(results: list[CheckResult]) -> bool:
    return any(not r.ok and r.blocking for r in results)
