"""
Lint context: the rules' only window onto the front-end.

Rules never inspect the front-end directly. They ask the context to
resolve a callee, look up a static type, cut a source snippet, or decide
whether a span comes from a macro expansion, and they hand findings back
to it for reporting. Everything the context knows is injected, so tests
can drive the rules with a hand-built tree and a stub table.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Mapping, Optional

from idiomlint.analysis.ast_nodes import ASTNode, Expression, Path, TypeHandle
from idiomlint.analysis.diagnostics import (
    Applicability,
    CollectingReporter,
    Finding,
    FindingReporter,
    LintConfiguration,
    LintLevel,
    LintRule,
    Suggestion,
)
from idiomlint.analysis.paths import DEFAULT_PATHS, CanonicalPath, PathTable
from idiomlint.utils.errors import SourceFile, Span

logger = logging.getLogger("idiomlint.context")


Resolver = Callable[[ASTNode], Optional[CanonicalPath]]


def annotation_resolver(node: ASTNode) -> Optional[CanonicalPath]:
    """Default resolver: read the resolution the front-end stored on a path."""
    if isinstance(node, Path):
        return node.resolution
    return None


class LintContext:
    """
    Read-only view of one source file plus its front-end annotations.

    Example:
        cx = LintContext(SourceFile(text), reporter=reporter)
        if cx.resolve(callee) == cx.paths.mem_replace:
            ...
    """

    def __init__(
        self,
        source: SourceFile,
        paths: PathTable = DEFAULT_PATHS,
        reporter: Optional[FindingReporter] = None,
        resolver: Optional[Resolver] = None,
        types: Optional[Mapping[ASTNode, TypeHandle]] = None,
        config: Optional[LintConfiguration] = None,
    ) -> None:
        """
        Initialize the context.

        Args:
            source: The source file the tree was parsed from
            paths: Catalogue of well-known canonical paths
            reporter: Sink for findings (a CollectingReporter by default)
            resolver: Callee resolver; defaults to reading ``Path.resolution``
            types: Extra type annotations keyed by node
            config: Rule level overrides
        """
        self.source = source
        self.paths = paths
        self.config = config or LintConfiguration()
        self.reporter: FindingReporter = reporter if reporter is not None else CollectingReporter()
        self._resolver = resolver or annotation_resolver
        self._types: Mapping[ASTNode, TypeHandle] = types or {}

    # =========================================================================
    # Symbol and type queries
    # =========================================================================

    def resolve(self, node: ASTNode) -> Optional[CanonicalPath]:
        """Canonical path ``node`` refers to, or None if it does not resolve."""
        return self._resolver(node)

    def type_of(self, node: ASTNode) -> Optional[TypeHandle]:
        if isinstance(node, Expression) and node.ty is not None:
            return node.ty
        return self._types.get(node)

    def is_primitive(self, ty: Optional[TypeHandle]) -> bool:
        return ty is not None and ty.primitive

    def is_copy(self, ty: Optional[TypeHandle]) -> bool:
        """Check if values of ``ty`` are trivially duplicable. Unknown types are not."""
        return ty is not None and ty.copy

    def match_type(self, ty: Optional[TypeHandle], path: CanonicalPath) -> bool:
        return ty is not None and ty.path == path

    # =========================================================================
    # Source text
    # =========================================================================

    def snippet(self, span: Span, default: str) -> str:
        text = self.source.snippet(span)
        return default if text is None else text

    def snippet_with_applicability(
        self,
        span: Span,
        default: str,
        applicability: Applicability,
    ) -> tuple[str, Applicability]:
        """
        Cut a snippet and weaken ``applicability`` if the snippet is unreliable.

        Text from a macro expansion may not be what the author typed, and a
        missing snippet leaves a placeholder in the suggestion.

        Returns:
            Tuple of (snippet, adjusted applicability)
        """
        text = self.source.snippet(span)
        if text is None:
            return default, Applicability.HAS_PLACEHOLDERS.weakest(applicability)
        if span.from_expansion:
            return text, Applicability.MAYBE_INCORRECT.weakest(applicability)
        return text, applicability

    # =========================================================================
    # Expansion contexts
    # =========================================================================

    def in_macro(self, span: Span) -> bool:
        """Check if ``span`` was produced by any macro expansion."""
        return span.from_expansion

    def in_external_macro(self, span: Span) -> bool:
        """Check if ``span`` comes from a macro defined outside this crate."""
        return span.from_expansion and span.ctxt.external

    def differing_macro_contexts(self, lhs: Span, rhs: Span) -> bool:
        return lhs.ctxt != rhs.ctxt

    # =========================================================================
    # Reporting
    # =========================================================================

    def span_lint(
        self,
        rule: LintRule,
        span: Span,
        message: str,
        help: Optional[str] = None,
        suggestion: Optional[Suggestion] = None,
        notes: Iterable[str] = (),
    ) -> Optional[Finding]:
        """
        Report a finding for ``rule`` unless the configuration allows it.

        Returns:
            The emitted finding, or None if the rule is set to ALLOW
        """
        level = self.config.get_level(rule)
        if level == LintLevel.ALLOW:
            logger.debug("suppressed %s at %s", rule.name, span)
            return None
        finding = Finding(
            rule=rule,
            span=span,
            message=message,
            level=level,
            help=help,
            suggestion=suggestion,
            notes=list(notes),
        )
        self.emit(finding)
        return finding

    def emit(self, finding: Finding) -> None:
        """Hand a finding to the reporter."""
        logger.debug("emitting %s at %s", finding.rule.name, finding.span)
        self.reporter.report(finding)


__all__ = [
    "LintContext",
    "Resolver",
    "annotation_resolver",
]
