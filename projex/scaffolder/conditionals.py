"""Conditional content processing.

Three independent pieces decide what ends up in a generated file:

* :func:`process_conditionals` -- line blocks delimited by comment markers
  such as ``// #if tailwind`` ... ``// #endif``.  Markers may also be written
  as ``/* #if name */`` or, inside JSX, ``{/* #if name */}``.  Blocks nest,
  and ``#if !name`` negates.
* :func:`process_handlebars_conditionals` -- single-level
  ``{{#if name}}...{{/if}}`` blocks for structured files like
  ``package.json`` where a comment would break the syntax.
* :func:`should_write_file` -- whether a file is written at all.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from pathlib import PurePath

from .models import ContextValue, FeatureContext, to_flag

_OPEN = r"(?://|\{\s*/\*|/\*)"
_CLOSE = r"(?:\s*\*/\s*\}|\s*\*/)?"

_IF_RE = re.compile(rf"^{_OPEN}\s*#if\s+(!?)([A-Za-z0-9_]+){_CLOSE}$")
_ENDIF_RE = re.compile(rf"^{_OPEN}\s*#endif{_CLOSE}$")

_HANDLEBARS_IF_RE = re.compile(r"\{\{#if\s+([A-Za-z0-9_]+)\}\}(.*?)\{\{/if\}\}", re.DOTALL)

# Files only meaningful with Tailwind enabled.
STYLE_CONFIG_MARKERS: tuple[str, ...] = ("postcss.config", "tailwind.config")

# Files only meaningful with the testing setup enabled.
TEST_FILE_MARKERS: tuple[str, ...] = (
    ".test.",
    ".spec.",
    "tests/",
    "__tests__/",
    "vitest.config",
    "setupTests",
)


def process_conditionals(content: str, context: FeatureContext) -> str:
    """Strip or keep comment-delimited blocks according to *context*.

    A line survives only when every enclosing ``#if`` evaluates true.  Marker
    lines are always removed.  An ``#endif`` without an open block is
    ignored, and blocks still open at end of input close silently.
    """
    lines = content.split("\n")
    result: list[str] = []
    stack: list[tuple[str, bool]] = []

    for line in lines:
        trimmed = line.strip()

        if_match = _IF_RE.match(trimmed)
        if if_match:
            negate, name = if_match.groups()
            keep = context.get(name, False) is True
            if negate:
                keep = not keep
            stack.append((name, keep))
            continue

        if _ENDIF_RE.match(trimmed):
            if stack:
                stack.pop()
            continue

        if all(keep for _, keep in stack):
            result.append(line)

    return "\n".join(result)


def _process_blocks(content: str, is_enabled: Callable[[str], bool]) -> str:
    def _replace(match: re.Match[str]) -> str:
        name, body = match.groups()
        return body if is_enabled(name) else ""

    return _HANDLEBARS_IF_RE.sub(_replace, content)


def process_handlebars_conditionals(content: str, context: FeatureContext) -> str:
    """Resolve ``{{#if name}}body{{/if}}`` blocks against feature flags.

    A truthy flag keeps *body* (markers removed); a false or missing flag
    removes the whole block.  Blocks do not nest and bodies are not
    processed again.

    Examples::

        process_handlebars_conditionals("A{{#if x}}B{{/if}}C", {"x": True})  -> "ABC"
        process_handlebars_conditionals("A{{#if x}}B{{/if}}C", {"x": False}) -> "AC"
    """
    return _process_blocks(content, lambda name: bool(context.get(name, False)))


def process_variable_handlebars_conditionals(
    content: str, context: dict[str, ContextValue]
) -> str:
    """Same as :func:`process_handlebars_conditionals`, against variables.

    Variable values such as ``"yes"`` or ``"no"`` are converted with
    :func:`~projex.scaffolder.models.to_flag`.
    """
    return _process_blocks(content, lambda name: to_flag(context.get(name)))


def should_write_file(file_path: str, context: FeatureContext) -> bool:
    """Decide whether the file at *file_path* belongs in the project.

    Matching is plain substring containment on the forward-slash form of
    the path.
    """
    path = PurePath(file_path).as_posix()

    if any(marker in path for marker in STYLE_CONFIG_MARKERS):
        return context.get("tailwind") is True

    if any(marker in path for marker in TEST_FILE_MARKERS):
        return context.get("testing") is True

    return True
