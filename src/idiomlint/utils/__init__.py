"""
idiomlint Utilities Package.

Common utilities for error handling, spans and source files.
"""

from idiomlint.utils.errors import (
    DUMMY_SPAN,
    ROOT_CONTEXT,
    ExpansionContext,
    IdiomLintError,
    OverlappingEditsError,
    ScanLimitError,
    SourceFile,
    SourceLocation,
    Span,
)

__all__ = [
    # Errors
    "IdiomLintError",
    "ScanLimitError",
    "OverlappingEditsError",
    # Source tracking
    "SourceFile",
    "SourceLocation",
    "Span",
    "ExpansionContext",
    "ROOT_CONTEXT",
    "DUMMY_SPAN",
]
