"""Post-create hooks and the optional follow-up flow.

Quick usage::

    from projex.hooks import run_hooks, PostCreateFlow

    outcomes = await run_hooks(entry.path, context, target_dir, logger=logger)
    await PostCreateFlow(prompter, logger=logger).run(target_dir)
"""

from projex.hooks.executor import (
    CommandClass,
    HookExecutor,
    HookOutcome,
    HookStatus,
    classify_command,
    is_safe_command,
    load_hooks,
    print_hook_messages,
    run_hooks,
)
from projex.hooks.post_create import PostCreateFlow

__all__ = [
    "CommandClass",
    "HookExecutor",
    "HookOutcome",
    "HookStatus",
    "PostCreateFlow",
    "classify_command",
    "is_safe_command",
    "load_hooks",
    "print_hook_messages",
    "run_hooks",
]
