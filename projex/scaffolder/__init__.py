"""create-projex scaffolder -- turns a template into a new project.

Quick usage::

    from projex.scaffolder import (
        TemplateCatalog, TemplateMaterializer, VariableCollector, RichPrompter,
        build_feature_context, finalize_project_name,
    )

    catalog = TemplateCatalog(config.templates_dir)
    entry = await catalog.find("react-vite-starter")
    context = await VariableCollector(RichPrompter()).collect(entry.manifest.vars, yes=True)
    finalize_project_name(context)
    features = build_feature_context(context, entry.id)
    await TemplateMaterializer().materialize(catalog.source_dir(entry), target, context, features)
"""

from projex.scaffolder.catalog import TemplateCatalog
from projex.scaffolder.collector import (
    Prompter,
    RichPrompter,
    VariableCollector,
    evaluate_when_condition,
    finalize_project_name,
)
from projex.scaffolder.conditionals import (
    process_conditionals,
    process_handlebars_conditionals,
    process_variable_handlebars_conditionals,
    should_write_file,
)
from projex.scaffolder.errors import (
    InputCancelledError,
    InvalidTemplateError,
    MissingVariableError,
    PatternValidationError,
    ProjexError,
    TargetNotEmptyError,
    TemplateIOError,
    TemplateNotFoundError,
)
from projex.scaffolder.generator import (
    MaterializeResult,
    TemplateMaterializer,
    build_feature_context,
    ensure_gitignore,
    prepare_target_dir,
)
from projex.scaffolder.models import (
    FeatureContext,
    TemplateEntry,
    TemplateManifest,
    VariableContext,
    VariableDeclaration,
)
from projex.scaffolder.variables import (
    render_path,
    render_variables,
    sanitize_project_name,
    validate_project_name,
)

__all__ = [
    "FeatureContext",
    "InputCancelledError",
    "InvalidTemplateError",
    "MaterializeResult",
    "MissingVariableError",
    "PatternValidationError",
    "Prompter",
    "ProjexError",
    "RichPrompter",
    "TargetNotEmptyError",
    "TemplateCatalog",
    "TemplateEntry",
    "TemplateIOError",
    "TemplateManifest",
    "TemplateMaterializer",
    "TemplateNotFoundError",
    "VariableCollector",
    "VariableContext",
    "VariableDeclaration",
    "build_feature_context",
    "ensure_gitignore",
    "evaluate_when_condition",
    "finalize_project_name",
    "prepare_target_dir",
    "process_conditionals",
    "process_handlebars_conditionals",
    "process_variable_handlebars_conditionals",
    "render_path",
    "render_variables",
    "sanitize_project_name",
    "should_write_file",
    "validate_project_name",
]
