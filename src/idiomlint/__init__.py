"""
idiomlint - a rule-based static analyzer for resolved syntax trees.

idiomlint walks a tree produced by an external front-end (with names and
types already resolved) and reports code that has a more idiomatic
spelling, together with machine-applicable rewrites where one exists.
"""

from idiomlint.analysis.ast_nodes import BaseASTVisitor, Crate, TypeHandle
from idiomlint.analysis.context import LintContext
from idiomlint.analysis.diagnostics import (
    Applicability,
    CollectingReporter,
    Finding,
    LintConfiguration,
    LintLevel,
    Suggestion,
    apply_findings,
    render_all,
    render_finding,
)
from idiomlint.analysis.linter import Linter, lint_program
from idiomlint.analysis.paths import DEFAULT_PATHS, CanonicalPath, PathTable
from idiomlint.utils.errors import SourceFile, Span

__version__ = "0.1.0"
__all__ = [
    "Linter",
    "lint_program",
    "LintContext",
    "LintConfiguration",
    "LintLevel",
    "Finding",
    "Suggestion",
    "Applicability",
    "CollectingReporter",
    "apply_findings",
    "render_finding",
    "render_all",
    "BaseASTVisitor",
    "Crate",
    "TypeHandle",
    "CanonicalPath",
    "PathTable",
    "DEFAULT_PATHS",
    "SourceFile",
    "Span",
]
