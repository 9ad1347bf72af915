"""
docsflow: API documentation pipeline for TypeScript packages.

Cleans the output directory, runs typedoc against the package's entry
points and optionally publishes the result to GitHub Pages.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from .errors import (
    DocsflowError,
    ConfigurationError,
    GenerationError,
    AuthError,
    PublishError,
)
from .entry_points import resolve_entry_points, rewrite_compiled_path
from .project import ProjectLayout, Preconditions, inspect_project
from .pipeline import Pipeline, PipelineContext, PipelineState, build_docs_pipeline

__all__ = [
    "DocsflowError",
    "ConfigurationError",
    "GenerationError",
    "AuthError",
    "PublishError",
    "resolve_entry_points",
    "rewrite_compiled_path",
    "ProjectLayout",
    "Preconditions",
    "inspect_project",
    "Pipeline",
    "PipelineContext",
    "PipelineState",
    "build_docs_pipeline",
]
