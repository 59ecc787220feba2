"""
Base class for lint passes.

A pass groups the rules that inspect the same kind of node. The linter
offers every call and method-call expression to ``check_expr`` and every
doc-comment attribute to ``check_attribute``; a pass overrides whichever
hooks it needs and reports through the context.
"""

from __future__ import annotations

from typing import ClassVar

from idiomlint.analysis.ast_nodes import DocComment, Expression
from idiomlint.analysis.context import LintContext
from idiomlint.analysis.diagnostics import LintRule


class LintPass:
    """
    A stateless group of related lint rules.

    Attributes:
        name: Pass name used in logs
        lints: Rules this pass can report
    """

    name: ClassVar[str] = "lint-pass"
    lints: ClassVar[tuple[LintRule, ...]] = ()

    def check_expr(self, cx: LintContext, expr: Expression) -> None:
        """Inspect one call or method-call expression."""
        pass

    def check_attribute(self, cx: LintContext, attr: DocComment) -> None:
        """Inspect one doc-comment attribute."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(rule.name for rule in self.lints)})"


__all__ = ["LintPass"]
