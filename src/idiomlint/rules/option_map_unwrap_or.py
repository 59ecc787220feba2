"""
Check for ``opt.map(f).unwrap_or(a)`` on an ``Option``.

The chain is better written ``opt.map_or(a, f)``, or ``opt.and_then(f)``
when ``a`` is ``None``. The rewrite moves the default value in front of
the closure, so it is refused when that could change move semantics: if
the default is not a copy type and mentions a name the closure also
mentions.
"""

from __future__ import annotations

from typing import Sequence

from idiomlint.analysis.ast_nodes import Expression
from idiomlint.analysis.context import LintContext
from idiomlint.analysis.diagnostics import Applicability, LintCategory, LintRule, Suggestion
from idiomlint.analysis.identifiers import collect_identifiers, mentions_any
from idiomlint.analysis.matcher import match_method_chain
from idiomlint.rules.base import LintPass
from idiomlint.utils.errors import Span


OPTION_MAP_UNWRAP_OR = LintRule(
    code="W0104",
    name="option-map-unwrap-or",
    category=LintCategory.STYLE,
    description="using `Option.map(f).unwrap_or(a)`, which is more succinctly expressed as `map_or(a, f)`",
    explanation=(
        "Readability: `_.map_or(<a>, <f>)` says in one call what "
        "`_.map(<f>).unwrap_or(<a>)` says in two."
    ),
)


def lint_map_unwrap_or(
    cx: LintContext,
    expr: Expression,
    map_args: Sequence[Expression],
    unwrap_args: Sequence[Expression],
    map_span: Span,
) -> None:
    """
    Lint ``map().unwrap_or()`` on an ``Option``.

    Args:
        cx: Lint context
        expr: The whole ``recv.map(f).unwrap_or(a)`` expression
        map_args: ``(recv, f)``
        unwrap_args: ``(recv.map(f), a)``
        map_span: Span of the ``map`` method name
    """
    receiver, closure = map_args[0], map_args[1]
    map_call, default = unwrap_args[0], unwrap_args[1]

    if not cx.match_type(cx.type_of(receiver), cx.paths.option):
        return

    if not cx.is_copy(cx.type_of(default)):
        # Do not lint if the closure uses identifiers that are also used
        # in the `unwrap_or` argument
        if mentions_any(closure, collect_identifiers(default)):
            return

    if cx.differing_macro_contexts(default.span, map_span):
        return

    unwrap_snippet, applicability = cx.snippet_with_applicability(
        default.span, "..", Applicability.MACHINE_APPLICABLE
    )
    # Comparing the raw text against "None" is safe because the receiver's
    # type has already been checked.
    unwrap_snippet_none = unwrap_snippet == "None"
    arg = "None" if unwrap_snippet_none else "a"
    suggest = "and_then(f)" if unwrap_snippet_none else "map_or(a, f)"
    message = (
        f"called `map(f).unwrap_or({arg})` on an Option value. "
        f"This can be done more directly by calling `{suggest}` instead"
    )

    edits: list[tuple[Span, str]] = [
        (map_span, "and_then" if unwrap_snippet_none else "map_or"),
        (expr.span.with_lo(map_call.span.hi), ""),
    ]
    if not unwrap_snippet_none:
        edits.append((closure.span.shrink_to_lo(), f"{unwrap_snippet}, "))

    cx.span_lint(
        OPTION_MAP_UNWRAP_OR,
        expr.span,
        message,
        help=f"use `{suggest}` instead",
        suggestion=Suggestion.multipart(f"use `{suggest}` instead", edits, applicability),
    )


class OptionMapUnwrapOr(LintPass):
    """Finds ``map(f).unwrap_or(a)`` chains on ``Option`` values."""

    name = "option-map-unwrap-or"
    lints = (OPTION_MAP_UNWRAP_OR,)

    def check_expr(self, cx: LintContext, expr: Expression) -> None:
        chain = match_method_chain(expr, ("map", "unwrap_or"))
        if chain is None:
            return
        (map_args, map_span), (unwrap_args, _) = chain
        if len(map_args) != 2 or len(unwrap_args) != 2:
            return
        lint_map_unwrap_or(cx, expr, map_args, unwrap_args, map_span)


__all__ = [
    "OPTION_MAP_UNWRAP_OR",
    "OptionMapUnwrapOr",
    "lint_map_unwrap_or",
]
