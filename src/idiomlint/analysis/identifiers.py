"""
Identifier-set collection.

Collects the names referenced inside a subtree so that a rewrite which
moves one expression next to another can be refused when both mention the
same name. The analysis is purely syntactic: it records the last segment
of every path, callees included, and ignores scoping and shadowing. That
over-approximation can skip a safe rewrite but never lets an unsafe one
through.
"""

from __future__ import annotations

from typing import AbstractSet

from idiomlint.analysis.ast_nodes import ASTNode, BaseASTVisitor, Path


class IdentifierCollector(BaseASTVisitor):
    """Walks a subtree and records the last segment of every path."""

    def __init__(self) -> None:
        self.identifiers: set[str] = set()

    def visit_path(self, node: Path) -> None:
        self.identifiers.add(node.name)


class _IdentifierFound(Exception):
    pass


class IdentifierSearch(BaseASTVisitor):
    """Walks a subtree until a path whose last segment is in ``names`` turns up."""

    def __init__(self, names: AbstractSet[str]) -> None:
        self.names = names

    def visit_path(self, node: Path) -> None:
        if node.name in self.names:
            raise _IdentifierFound(node.name)

    def search(self, node: ASTNode) -> bool:
        if not self.names:
            return False
        try:
            self.visit(node)
        except _IdentifierFound:
            return True
        return False


def collect_identifiers(node: ASTNode) -> frozenset[str]:
    """
    Collect the identifier set of ``node``.

    Example:
        collect_identifiers(<tree of `foo(a.len(), b)`>) == {"foo", "a", "b"}
    """
    collector = IdentifierCollector()
    collector.visit(node)
    return frozenset(collector.identifiers)


def mentions_any(node: ASTNode, names: AbstractSet[str]) -> bool:
    """Check if any path inside ``node`` ends in one of ``names``."""
    return IdentifierSearch(names).search(node)


def shares_identifier(lhs: ASTNode, rhs: ASTNode) -> bool:
    """Check if ``lhs`` and ``rhs`` reference at least one common name."""
    return mentions_any(rhs, collect_identifiers(lhs))


__all__ = [
    "IdentifierCollector",
    "IdentifierSearch",
    "collect_identifiers",
    "mentions_any",
    "shares_identifier",
]
