"""
Structural matchers over tree fragments.

Every matcher is a total predicate plus extraction: it returns the
sub-nodes of interest when ``node`` has exactly the expected shape and
``None`` otherwise. A near miss is never patched up into a match.
"""

from __future__ import annotations

from typing import Optional, Sequence

from idiomlint.analysis.ast_nodes import AddrOf, ASTNode, Call, Expression, MethodCall, Path
from idiomlint.utils.errors import Span


def match_call(node: ASTNode) -> Optional[tuple[Expression, tuple[Expression, ...]]]:
    """
    Match a function call.

    Returns:
        Tuple of (callee, args) if ``node`` is a call expression
    """
    if isinstance(node, Call):
        return node.callee, node.args
    return None


def match_borrow_mut(node: ASTNode) -> Optional[Expression]:
    """Match ``&mut inner`` and return ``inner``. A shared borrow does not match."""
    if isinstance(node, AddrOf) and node.mutable:
        return node.expr
    return None


def match_simple_path(node: ASTNode) -> Optional[Path]:
    """
    Match a plain name reference.

    ``x`` and ``Option::None`` match; ``<T as Trait>::f``, ``self.x`` and
    ``v[i]`` do not.
    """
    if isinstance(node, Path) and node.qualified_self is None:
        return node
    return None


def match_method_call(node: ASTNode, name: str) -> Optional[MethodCall]:
    """Match a call of the method ``name``."""
    if isinstance(node, MethodCall) and node.method == name:
        return node
    return None


def match_method_chain(
    node: ASTNode,
    names: Sequence[str],
) -> Optional[list[tuple[tuple[Expression, ...], Span]]]:
    """
    Decompose a chain of method calls.

    ``names`` lists the methods inner-most first, so
    ``match_method_chain(e, ("map", "unwrap_or"))`` matches
    ``recv.map(f).unwrap_or(d)`` and returns::

        [((recv, f), <span of "map">), ((recv.map(f), d), <span of "unwrap_or">)]

    Each argument tuple starts with the method's receiver.

    Returns:
        One (args, method name span) pair per name, in the order of ``names``
    """
    matched: list[tuple[tuple[Expression, ...], Span]] = []
    current: ASTNode = node
    for name in reversed(names):
        call = match_method_call(current, name)
        if call is None:
            return None
        matched.append(((call.receiver, *call.args), call.method_span))
        current = call.receiver
    matched.reverse()
    return matched


__all__ = [
    "match_call",
    "match_borrow_mut",
    "match_simple_path",
    "match_method_call",
    "match_method_chain",
]
