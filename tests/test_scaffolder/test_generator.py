"""Tests for the template materializer and its helpers.

Covers:
- build_feature_context (yes/no flags, tailwind default)
- TemplateMaterializer.render_text pipeline order
- materialize: paths, binaries, skipped files, conditional content
- prepare_target_dir and ensure_gitignore
"""

from __future__ import annotations

from pathlib import Path

import pytest

from projex.config import DEFAULT_GITIGNORE_ENTRIES
from projex.scaffolder.errors import TargetNotEmptyError, TemplateIOError
from projex.scaffolder.generator import (
    FEATURE_FLAGS,
    TemplateMaterializer,
    build_feature_context,
    ensure_gitignore,
    prepare_target_dir,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Feature context
# ---------------------------------------------------------------------------


class TestBuildFeatureContext:
    def test_yes_means_enabled(self):
        features = build_feature_context({"router": "yes", "testing": "no"}, "any")
        assert features["router"] is True
        assert features["testing"] is False

    def test_every_flag_present(self):
        features = build_feature_context({}, "any")
        assert set(features) == set(FEATURE_FLAGS)
        assert not any(features.values())

    def test_only_exact_yes_counts(self):
        features = build_feature_context({"router": "Yes", "blog": "true"}, "any")
        assert features["router"] is False
        assert features["blog"] is False

    def test_tailwind_defaults_on_for_listed_templates(self):
        assert build_feature_context({}, "landing-page")["tailwind"] is True
        assert build_feature_context({}, "react-vite-starter")["tailwind"] is False

    def test_explicit_tailwind_wins_over_template_default(self):
        features = build_feature_context({"tailwind": "no"}, "landing-page")
        assert features["tailwind"] is False

    def test_custom_default_list(self):
        features = build_feature_context({}, "mine", tailwind_default_templates=["mine"])
        assert features["tailwind"] is True


# ---------------------------------------------------------------------------
# render_text
# ---------------------------------------------------------------------------


class TestRenderText:
    def test_conditionals_then_variables(self):
        content = "// #if router\nimport {{projectName}}Router\n// #endif\nname={{projectName}}"
        out = TemplateMaterializer().render_text(
            "App.tsx", content, {"projectName": "demo"}, {"router": True}
        )
        assert out == "import demoRouter\nname=demo"

    def test_handlebars_only_in_package_json(self):
        content = '{{#if testing}}"vitest": "1",{{/if}}'
        materializer = TemplateMaterializer()
        assert materializer.render_text("package.json", content, {}, {"testing": False}) == ""
        assert materializer.render_text("notes.md", content, {}, {"testing": False}) == content

    def test_variable_handlebars_in_tailwind_config(self):
        content = "{{#if darkMode}}darkMode: 'class',{{/if}}"
        materializer = TemplateMaterializer()
        out = materializer.render_text("tailwind.config.cjs", content, {"darkMode": "yes"}, {})
        assert out == "darkMode: 'class',"
        out = materializer.render_text("tailwind.config.cjs", content, {"darkMode": "no"}, {})
        assert out == ""

    def test_unknown_placeholders_survive(self):
        out = TemplateMaterializer().render_text("a.txt", "{{unknown}}", {}, {})
        assert out == "{{unknown}}"


# ---------------------------------------------------------------------------
# materialize
# ---------------------------------------------------------------------------


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    root = tmp_path / "src-tree"
    files = {
        "README.md": "# {{projectName}}\n",
        "src/App.tsx": "// #if router\nrouted\n// #endif\n// #if !router\nplain\n// #endif\n",
        "src/{{projectName}}.ts": "export const name = '{{projectName}}';\n",
        "tests/App.test.tsx": "test('{{projectName}}')\n",
        "tailwind.config.cjs": "module.exports = {};\n",
        "postcss.config.cjs": "module.exports = {};\n",
    }
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    (root / "public").mkdir()
    (root / "public" / "logo.png").write_bytes(b"\x89PNG{{projectName}}\x00")
    return root


class TestMaterialize:
    async def test_writes_rendered_tree(self, source_tree: Path, tmp_path: Path, logger):
        target = tmp_path / "out"
        ctx = {"projectName": "demo"}
        features = {"router": False, "tailwind": True, "testing": False}

        result = await TemplateMaterializer(logger).materialize(source_tree, target, ctx, features)

        assert (target / "README.md").read_text(encoding="utf-8") == "# demo\n"
        assert (target / "src" / "App.tsx").read_text(encoding="utf-8") == "plain\n"
        assert (target / "src" / "demo.ts").read_text(encoding="utf-8") == "export const name = 'demo';\n"
        assert (target / "tailwind.config.cjs").exists()
        assert not (target / "tests").exists()
        assert result.skipped == ["tests/App.test.tsx"]
        assert result.copied == ["public/logo.png"]
        assert result.total == 6

    async def test_binary_copied_verbatim(self, source_tree: Path, tmp_path: Path):
        target = tmp_path / "out"
        await TemplateMaterializer().materialize(source_tree, target, {"projectName": "x"}, {})
        assert (target / "public" / "logo.png").read_bytes() == b"\x89PNG{{projectName}}\x00"

    async def test_style_configs_skipped_without_tailwind(self, source_tree: Path, tmp_path: Path):
        target = tmp_path / "out"
        result = await TemplateMaterializer().materialize(
            source_tree, target, {"projectName": "x"}, {"tailwind": False, "testing": True}
        )
        assert not (target / "tailwind.config.cjs").exists()
        assert not (target / "postcss.config.cjs").exists()
        assert (target / "tests" / "App.test.tsx").read_text(encoding="utf-8") == "test('x')\n"
        assert sorted(result.skipped) == ["postcss.config.cjs", "tailwind.config.cjs"]

    async def test_unresolved_path_placeholder_kept(self, source_tree: Path, tmp_path: Path):
        target = tmp_path / "out"
        await TemplateMaterializer().materialize(source_tree, target, {}, {})
        assert (target / "src" / "{{projectName}}.ts").exists()

    async def test_rerun_is_stable(self, source_tree: Path, tmp_path: Path):
        ctx = {"projectName": "demo"}
        features = {"router": True, "tailwind": True, "testing": True}
        first, second = tmp_path / "one", tmp_path / "two"
        await TemplateMaterializer().materialize(source_tree, first, ctx, features)
        await TemplateMaterializer().materialize(source_tree, second, ctx, features)
        for path in first.rglob("*"):
            if path.is_file():
                assert path.read_bytes() == (second / path.relative_to(first)).read_bytes()

    async def test_missing_source_produces_nothing(self, tmp_path: Path, logger):
        result = await TemplateMaterializer(logger).materialize(
            tmp_path / "missing", tmp_path / "out", {}, {}
        )
        assert result.total == 0
        assert "Failed to read directory" in logger.console.file.getvalue()

    async def test_undecodable_text_aborts(self, tmp_path: Path):
        src = tmp_path / "src-tree"
        src.mkdir()
        (src / "bad.txt").write_bytes(b"\xff\xfe")
        with pytest.raises(TemplateIOError):
            await TemplateMaterializer().materialize(src, tmp_path / "out", {}, {})


# ---------------------------------------------------------------------------
# Target directory & .gitignore
# ---------------------------------------------------------------------------


class TestPrepareTargetDir:
    async def test_creates_missing_directory(self, tmp_path: Path):
        target = await prepare_target_dir(tmp_path / "new" / "app")
        assert target.is_dir()

    async def test_accepts_existing_empty_directory(self, tmp_path: Path):
        (tmp_path / "empty").mkdir()
        assert await prepare_target_dir(tmp_path / "empty") == tmp_path / "empty"

    async def test_refuses_non_empty_directory(self, tmp_path: Path):
        (tmp_path / "full").mkdir()
        (tmp_path / "full" / "keep.txt").write_text("mine", encoding="utf-8")
        with pytest.raises(TargetNotEmptyError) as exc_info:
            await prepare_target_dir(tmp_path / "full")
        assert "Directory is not empty" in str(exc_info.value)
        assert (tmp_path / "full" / "keep.txt").read_text(encoding="utf-8") == "mine"


class TestEnsureGitignore:
    async def test_creates_file(self, tmp_path: Path):
        assert await ensure_gitignore(tmp_path)
        lines = (tmp_path / ".gitignore").read_text(encoding="utf-8").splitlines()
        assert lines == DEFAULT_GITIGNORE_ENTRIES

    async def test_appends_only_missing_entries(self, tmp_path: Path):
        (tmp_path / ".gitignore").write_text("node_modules\n*.log", encoding="utf-8")
        assert await ensure_gitignore(tmp_path)
        content = (tmp_path / ".gitignore").read_text(encoding="utf-8")
        assert content == "node_modules\n*.log\ndist\n.env*\n.DS_Store\n"

    async def test_second_run_changes_nothing(self, tmp_path: Path):
        await ensure_gitignore(tmp_path)
        before = (tmp_path / ".gitignore").read_text(encoding="utf-8")
        assert not await ensure_gitignore(tmp_path)
        assert (tmp_path / ".gitignore").read_text(encoding="utf-8") == before

    async def test_custom_entries(self, tmp_path: Path):
        await ensure_gitignore(tmp_path, ["build/"])
        assert (tmp_path / ".gitignore").read_text(encoding="utf-8") == "build/\n"
