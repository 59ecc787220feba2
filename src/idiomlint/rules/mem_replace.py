"""
Checks on calls to the generic value-swap function ``mem::replace``.

Three shapes of ``mem::replace(dest, src)`` have a better spelling:

- ``mem::replace(&mut opt, None)`` is ``opt.take()``
- ``mem::replace(&mut x, T::default())`` is ``mem::take(&mut x)``
- ``mem::replace(&mut x, mem::uninitialized())`` (or ``mem::zeroed()`` for
  a non-primitive type) is undefined behaviour if anything panics before
  the value is put back, and has no mechanical fix
"""

from __future__ import annotations

from idiomlint.analysis.ast_nodes import Expression, Path
from idiomlint.analysis.context import LintContext
from idiomlint.analysis.diagnostics import (
    Applicability,
    LintCategory,
    LintLevel,
    LintRule,
    Suggestion,
)
from idiomlint.analysis.matcher import match_borrow_mut, match_call, match_simple_path
from idiomlint.rules.base import LintPass
from idiomlint.utils.errors import Span


MEM_REPLACE_OPTION_WITH_NONE = LintRule(
    code="W0101",
    name="mem-replace-option-with-none",
    category=LintCategory.STYLE,
    description="replacing an `Option` with `None` instead of `take()`",
    explanation=(
        "`Option` already has the method `take()` for taking its current value "
        "(Some(..) or None) and replacing it with `None`."
    ),
)

MEM_REPLACE_WITH_UNINIT = LintRule(
    code="W0102",
    name="mem-replace-with-uninit",
    category=LintCategory.CORRECTNESS,
    description="`mem::replace(&mut _, mem::uninitialized())` or `mem::replace(&mut _, mem::zeroed())`",
    level=LintLevel.DENY,
    explanation=(
        "This leads to undefined behavior even if the value is overwritten later, "
        "because the uninitialized value may be observed in the case of a panic."
    ),
)

MEM_REPLACE_WITH_DEFAULT = LintRule(
    code="W0103",
    name="mem-replace-with-default",
    category=LintCategory.STYLE,
    description=(
        "replacing a value of type `T` with `T::default()` instead of using "
        "`std::mem::take`"
    ),
    explanation=(
        "`std::mem` already has the function `take` to take the current value "
        "and replace it with the default value of that type."
    ),
)


def check_replace_option_with_none(
    cx: LintContext,
    src: Expression,
    dest: Expression,
    expr_span: Span,
) -> None:
    """``mem::replace(&mut opt, None)`` -> ``opt.take()``."""
    replacement = match_simple_path(src)
    if replacement is None or cx.resolve(replacement) != cx.paths.option_none:
        return

    # The replacement already has the option type, so only the shape of
    # `dest` matters: a bare name, optionally behind one `&mut`.
    inner = match_borrow_mut(dest)
    replaced_path = match_simple_path(dest if inner is None else inner)
    if replaced_path is None:
        return

    snippet, applicability = cx.snippet_with_applicability(
        replaced_path.span, "", Applicability.MACHINE_APPLICABLE
    )
    cx.span_lint(
        MEM_REPLACE_OPTION_WITH_NONE,
        expr_span,
        "replacing an `Option` with `None`",
        help="consider `Option::take()` instead",
        suggestion=Suggestion.single(
            "consider `Option::take()` instead",
            expr_span,
            f"{snippet}.take()",
            applicability,
        ),
    )


def check_replace_with_uninit(cx: LintContext, src: Expression, expr_span: Span) -> None:
    """
    ``mem::replace(_, mem::uninitialized())`` and ``mem::replace(_, mem::zeroed())``.

    An uninitialized value is never valid, so that form is always reported.
    All-zero bits are a valid value of a primitive type, so the zeroed form
    is only reported for other types.
    """
    call = match_call(src)
    if call is None:
        return
    repl_func, repl_args = call
    if repl_args or not isinstance(repl_func, Path):
        return
    repl_def = cx.resolve(repl_func)
    if repl_def is None:
        return

    if repl_def == cx.paths.mem_uninitialized:
        cx.span_lint(
            MEM_REPLACE_WITH_UNINIT,
            expr_span,
            "replacing with `mem::uninitialized()`",
            help="consider using the `take_mut` crate instead",
        )
    elif repl_def == cx.paths.mem_zeroed and not cx.is_primitive(cx.type_of(src)):
        cx.span_lint(
            MEM_REPLACE_WITH_UNINIT,
            expr_span,
            "replacing with `mem::zeroed()`",
            help="consider using a default value or the `take_mut` crate instead",
        )


def check_replace_with_default(
    cx: LintContext,
    src: Expression,
    dest: Expression,
    expr_span: Span,
) -> None:
    """``mem::replace(&mut x, T::default())`` -> ``mem::take(&mut x)``."""
    call = match_call(src)
    if call is None or cx.in_external_macro(expr_span):
        return
    repl_func, _ = call
    if not isinstance(repl_func, Path) or cx.resolve(repl_func) != cx.paths.default_trait_method:
        return

    # Inside a local macro the call is reported without a fix
    suggestion = None
    if not cx.in_macro(expr_span):
        suggestion = Suggestion.single(
            "consider using",
            expr_span,
            f"{cx.paths.take_display}({cx.snippet(dest.span, '')})",
            Applicability.MACHINE_APPLICABLE,
        )
    cx.span_lint(
        MEM_REPLACE_WITH_DEFAULT,
        expr_span,
        "replacing a value of type `T` with `T::default()` is better expressed "
        "using `std::mem::take`",
        help="consider using" if suggestion is not None else None,
        suggestion=suggestion,
    )


class MemReplace(LintPass):
    """Checks ``mem::replace`` calls with a ``None``, default or uninitialized source."""

    name = "mem-replace"
    lints = (MEM_REPLACE_OPTION_WITH_NONE, MEM_REPLACE_WITH_UNINIT, MEM_REPLACE_WITH_DEFAULT)

    def check_expr(self, cx: LintContext, expr: Expression) -> None:
        call = match_call(expr)
        if call is None:
            return
        func, func_args = call
        if not isinstance(func, Path) or cx.resolve(func) != cx.paths.mem_replace:
            return
        if len(func_args) != 2:
            return
        dest, src = func_args

        check_replace_option_with_none(cx, src, dest, expr.span)
        check_replace_with_uninit(cx, src, expr.span)
        check_replace_with_default(cx, src, dest, expr.span)


__all__ = [
    "MEM_REPLACE_OPTION_WITH_NONE",
    "MEM_REPLACE_WITH_UNINIT",
    "MEM_REPLACE_WITH_DEFAULT",
    "MemReplace",
    "check_replace_option_with_none",
    "check_replace_with_uninit",
    "check_replace_with_default",
]
