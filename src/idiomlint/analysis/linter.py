"""
idiomlint Linter - drives the lint passes over an annotated tree.

The linter walks the tree once, pre-order. Every call and method-call
expression is offered to each pass's ``check_expr`` and every doc-comment
attribute to ``check_attribute``, always in ``LINT_PASSES`` order. A pass
that raises is logged and recorded; the remaining passes and nodes are
still checked. An ``IdiomLintError`` such as ``ScanLimitError`` is not a
pass bug and propagates to the caller.

Example:
    linter = Linter()
    findings = linter.lint(crate, SourceFile(text, "main.rs"))
    for finding in findings:
        print(render_finding(finding, linter.source))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Sequence

from idiomlint.analysis.ast_nodes import (
    ASTNode,
    BaseASTVisitor,
    Call,
    DocComment,
    MethodCall,
    TypeHandle,
)
from idiomlint.analysis.context import LintContext, Resolver
from idiomlint.analysis.diagnostics import (
    Finding,
    FindingReporter,
    LintConfiguration,
)
from idiomlint.analysis.paths import DEFAULT_PATHS, PathTable
from idiomlint.rules import LINT_PASSES, LintPass
from idiomlint.utils.errors import IdiomLintError, SourceFile, Span

logger = logging.getLogger("idiomlint")


@dataclass
class RuleFailure:
    """A pass that raised while checking one node."""

    pass_name: str
    span: Span
    error: Exception

    def __str__(self) -> str:
        return f"{self.pass_name} failed at {self.span}: {self.error!r}"


class Linter(BaseASTVisitor):
    """
    Runs every lint pass over a tree.

    Attributes:
        passes: Pass instances, in the order they see each node
        findings: Findings reported during the last ``lint`` call
        failures: Passes that raised during the last ``lint`` call
    """

    def __init__(
        self,
        config: Optional[LintConfiguration] = None,
        passes: Optional[Sequence[LintPass]] = None,
        paths: PathTable = DEFAULT_PATHS,
    ) -> None:
        """
        Initialize the linter.

        Args:
            config: Optional lint configuration for customizing rule levels
            passes: Passes to run; one instance of each ``LINT_PASSES`` entry by default
            paths: Canonical path catalogue handed to the passes
        """
        self.config = config or LintConfiguration()
        self.passes: list[LintPass] = (
            list(passes) if passes is not None else [cls() for cls in LINT_PASSES]
        )
        self.paths = paths
        self.findings: list[Finding] = []
        self.failures: list[RuleFailure] = []
        self.source: Optional[SourceFile] = None
        self._cx: Optional[LintContext] = None
        self._downstream: Optional[FindingReporter] = None

    def lint(
        self,
        root: ASTNode,
        source: SourceFile,
        reporter: Optional[FindingReporter] = None,
        resolver: Optional[Resolver] = None,
        types: Optional[Mapping[ASTNode, TypeHandle]] = None,
    ) -> list[Finding]:
        """
        Run all lint passes on a tree.

        Args:
            root: Root of the annotated tree (usually a ``Crate``)
            source: Source file the tree was parsed from
            reporter: Optional sink that also receives each finding as it is made
            resolver: Optional callee resolver (defaults to ``Path.resolution``)
            types: Optional extra type annotations keyed by node

        Returns:
            Findings in the order they were reported

        Raises:
            IdiomLintError: If a pass hits an operating limit, such as a
                doc comment too long to scan
        """
        self.findings = []
        self.failures = []
        self.source = source
        self._downstream = reporter
        self._cx = LintContext(
            source,
            paths=self.paths,
            reporter=self,
            resolver=resolver,
            types=types,
            config=self.config,
        )
        logger.debug("linting %s with %d passes", source.filename, len(self.passes))
        try:
            self.visit(root)
        finally:
            self._cx = None
            self._downstream = None
        if self.failures:
            logger.warning("%d lint pass failure(s) in %s", len(self.failures), source.filename)
        return self.findings

    # FindingReporter protocol
    def report(self, finding: Finding) -> None:
        self.findings.append(finding)
        if self._downstream is not None:
            self._downstream.report(finding)

    def _run(self, lint_pass: LintPass, check: Callable[[LintContext, ASTNode], None], node: ASTNode) -> None:
        """
        Run one pass hook on one node.

        A pass bug is recorded rather than propagated. An ``IdiomLintError``
        means the input broke an operating limit and stops the run.
        """
        assert self._cx is not None
        try:
            check(self._cx, node)
        except IdiomLintError:
            logger.error("lint pass %s hit an operating limit at %s", lint_pass.name, node.span)
            raise
        except Exception as exc:
            logger.exception("lint pass %s failed at %s", lint_pass.name, node.span)
            self.failures.append(RuleFailure(lint_pass.name, node.span, exc))

    def _check_expr(self, node: ASTNode) -> None:
        for lint_pass in self.passes:
            self._run(lint_pass, lint_pass.check_expr, node)

    # =========================================================================
    # Visitors
    # =========================================================================

    def visit_call(self, node: Call) -> None:
        self._check_expr(node)
        self.visit(node.callee)
        for arg in node.args:
            self.visit(arg)

    def visit_method_call(self, node: MethodCall) -> None:
        self._check_expr(node)
        self.visit(node.receiver)
        for arg in node.args:
            self.visit(arg)

    def visit_doc_comment(self, node: DocComment) -> None:
        for lint_pass in self.passes:
            self._run(lint_pass, lint_pass.check_attribute, node)


# =============================================================================
# Utility Functions
# =============================================================================


def lint_program(
    root: ASTNode,
    source: SourceFile,
    config: Optional[LintConfiguration] = None,
    reporter: Optional[FindingReporter] = None,
    resolver: Optional[Resolver] = None,
    types: Optional[Mapping[ASTNode, TypeHandle]] = None,
) -> list[Finding]:
    """
    Lint an already-parsed, annotated tree.

    Args:
        root: Parsed tree
        source: The source file it was parsed from
        config: Optional lint configuration
        reporter: Optional sink receiving findings as they are made
        resolver: Optional callee resolver
        types: Optional extra type annotations

    Returns:
        List of findings

    Raises:
        ScanLimitError: If a doc comment is too long to scan
    """
    linter = Linter(config)
    return linter.lint(root, source, reporter=reporter, resolver=resolver, types=types)


__all__ = [
    "Linter",
    "RuleFailure",
    "lint_program",
]
