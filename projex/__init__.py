"""create-projex -- scaffold new projects from local templates.

A template is a directory holding a ``myproj.json`` manifest, an optional
``hooks.yaml`` and a ``template/`` source tree.  Files are copied into the
new project with ``{{name}}`` placeholders substituted, comment-style
``#if``/``#endif`` blocks resolved and whole files gated on feature flags.
"""

__version__ = "0.1.0"
