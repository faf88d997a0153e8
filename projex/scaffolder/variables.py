"""``{{name}}`` placeholder rendering and project-name helpers."""

from __future__ import annotations

import re

from .models import ContextValue, to_text

_PLACEHOLDER_RE = re.compile(r"\{\{([A-Za-z0-9_]+)\}\}")

PROJECT_NAME_PATTERN = "^[a-z0-9-]+$"
EMAIL_PATTERN = "^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\\.[a-zA-Z]{2,}$"
USERNAME_PATTERN = "^[a-zA-Z0-9_-]+$"
URL_PATTERN = "^https?://.*"

_PROJECT_NAME_RE = re.compile(r"[a-z0-9-]+")


def render_variables(text: str, context: dict[str, ContextValue]) -> str:
    """Substitute every ``{{identifier}}`` found in *context*.

    Tokens whose identifier is absent are left exactly as written.

    Examples::

        render_variables("Hello {{name}}!", {"name": "Ann"}) -> "Hello Ann!"
        render_variables("{{missing}}", {}) -> "{{missing}}"
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in context:
            return match.group(0)
        return to_text(context[name])

    return _PLACEHOLDER_RE.sub(_replace, text)


def render_path(path: str, context: dict[str, ContextValue]) -> str:
    """Render placeholders in a file path; separators are not special."""
    return render_variables(path, context)


def has_variables(text: str) -> bool:
    return _PLACEHOLDER_RE.search(text) is not None


# ---------------------------------------------------------------------------
# Project name
# ---------------------------------------------------------------------------


def validate_project_name(name: str) -> bool:
    return _PROJECT_NAME_RE.fullmatch(name) is not None


def sanitize_project_name(name: str) -> str:
    """Coerce *name* into the lowercase-alphanumeric-hyphen form.

    Examples::

        sanitize_project_name("My Cool App!") -> "my-cool-app"
        sanitize_project_name("--Hello__World--") -> "hello-world"
    """
    result = re.sub(r"[^a-z0-9-]", "-", name.lower())
    result = re.sub(r"-+", "-", result)
    return result.strip("-")


def pattern_error_message(value: str, pattern: str, field_name: str = "value") -> str:
    """Return a human-readable explanation of why *value* failed *pattern*."""
    if pattern == PROJECT_NAME_PATTERN:
        suggested = sanitize_project_name(value)
        return (
            f'Project name "{value}" is invalid. Please use only:\n'
            "  • Lowercase letters (a-z)\n"
            "  • Numbers (0-9)\n"
            "  • Hyphens (-)\n"
            "\n"
            f'💡 Suggestion: Try "{suggested}" instead\n'
            "\n"
            'Other examples: "my-portfolio", "awesome-app-2024", "portfolio123"'
        )
    if pattern == EMAIL_PATTERN:
        return (
            f'Email "{value}" is not valid. '
            "Please enter a valid email address like: user@example.com"
        )
    if pattern == USERNAME_PATTERN:
        return (
            f'Username "{value}" is invalid. '
            "Please use only letters, numbers, underscores, or hyphens."
        )
    if pattern == URL_PATTERN:
        return (
            f'URL "{value}" is invalid. '
            "Please enter a valid URL starting with http:// or https://"
        )
    return (
        f'{field_name} "{value}" is not in the correct format. '
        "Please check the requirements and try again."
    )
