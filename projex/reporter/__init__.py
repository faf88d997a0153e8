"""Read-only reporting commands: template listing/info and ``doctor``."""

from projex.reporter.doctor import CheckResult, Doctor, has_blocking_issues
from projex.reporter.templates import list_templates, show_template_info

__all__ = [
    "CheckResult",
    "Doctor",
    "has_blocking_issues",
    "list_templates",
    "show_template_info",
]
