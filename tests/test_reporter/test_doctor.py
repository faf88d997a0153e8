"""Tests for the ``doctor`` environment checks."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from projex.reporter import doctor as doctor_module
from projex.reporter.doctor import CheckResult, Doctor, has_blocking_issues
from projex.scaffolder.catalog import TemplateCatalog

pytestmark = pytest.mark.unit


def _doctor(templates_dir: Path, logger, runner=None) -> Doctor:
    runner = runner or AsyncMock(return_value=(0, "v20.11.0", ""))
    return Doctor(TemplateCatalog(templates_dir, logger), logger, runner)


class TestChecks:
    def test_python_version_ok(self, templates_dir, logger):
        result = _doctor(templates_dir, logger).check_python()
        assert result.ok
        assert result.detail.startswith("Found: 3.")

    def test_python_version_too_old(self, templates_dir, logger):
        with patch.object(doctor_module, "MIN_PYTHON", (99, 0)):
            result = _doctor(templates_dir, logger).check_python()
        assert not result.ok
        assert result.blocking
        assert "too old" in result.detail

    async def test_tool_found(self, templates_dir, logger):
        runner = AsyncMock(return_value=(0, "git version 2.44.0\nextra", ""))
        result = await _doctor(templates_dir, logger, runner).check_tool("Git", "git --version", "hint")
        assert result.ok
        assert result.detail == "Found: git version 2.44.0"
        runner.assert_awaited_once()
        assert runner.await_args.args[0] == "git --version"

    async def test_tool_missing_is_not_blocking(self, templates_dir, logger):
        runner = AsyncMock(return_value=(127, "", "not found"))
        result = await _doctor(templates_dir, logger, runner).check_tool("Node.js", "node --version", "Install node")
        assert not result.ok
        assert not result.blocking
        assert result.detail == "Install node"

    async def test_tool_spawn_error(self, templates_dir, logger):
        runner = AsyncMock(side_effect=OSError("nope"))
        result = await _doctor(templates_dir, logger, runner).check_tool("Git", "git --version", "hint")
        assert not result.ok

    async def test_templates_present(self, make_template, templates_dir, logger):
        make_template("one", {"a.txt": ""})
        result = await _doctor(templates_dir, logger).check_templates()
        assert result.ok
        assert "1 template(s): one" in result.detail

    async def test_templates_dir_missing(self, tmp_path: Path, logger):
        result = await _doctor(tmp_path / "missing", logger).check_templates()
        assert not result.ok
        assert result.blocking

    async def test_templates_dir_without_templates(self, templates_dir, logger):
        result = await _doctor(templates_dir, logger).check_templates()
        assert not result.ok
        assert "No valid templates" in result.detail


class TestRun:
    async def test_all_good(self, make_template, templates_dir, logger):
        make_template("one", {"a.txt": ""})
        results = await _doctor(templates_dir, logger).run()
        assert not has_blocking_issues(results)
        assert [r.name for r in results] == ["Python version", "Git", "Node.js", "Templates directory"]
        assert "All essential checks passed" in logger.console.file.getvalue()

    async def test_missing_tools_only_warn(self, make_template, templates_dir, logger):
        make_template("one", {"a.txt": ""})
        runner = AsyncMock(return_value=(1, "", ""))
        results = await _doctor(templates_dir, logger, runner).run()
        assert not has_blocking_issues(results)
        assert "Git is not available" in logger.console.file.getvalue()

    async def test_missing_templates_block(self, tmp_path: Path, logger):
        results = await _doctor(tmp_path / "missing", logger).run()
        assert has_blocking_issues(results)
        assert "Some checks failed" in logger.console.file.getvalue()


def test_has_blocking_issues():
    assert not has_blocking_issues([CheckResult("a", True, ""), CheckResult("b", False, "", blocking=False)])
    assert has_blocking_issues([CheckResult("c", False, "")])
