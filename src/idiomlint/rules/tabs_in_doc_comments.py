"""
Check doc comments for tab characters.

Tabs render differently depending on the reader's settings, which breaks
alignment in doc comments (ASCII diagrams in particular). Each run of
tabs is reported separately with a suggestion of four spaces per tab.
"""

from __future__ import annotations

from idiomlint.analysis.ast_nodes import DocComment
from idiomlint.analysis.context import LintContext
from idiomlint.analysis.diagnostics import Applicability, LintCategory, LintRule, Suggestion
from idiomlint.analysis.text_scan import char_spans_to_byte_spans, get_chunks_of_tabs
from idiomlint.rules.base import LintPass
from idiomlint.utils.errors import Span


TABS_IN_DOC_COMMENTS = LintRule(
    code="W0105",
    name="tabs-in-doc-comments",
    category=LintCategory.STYLE,
    description="using tabs in doc comments is not recommended",
    explanation=(
        "Style guides promote spaces instead of tabs for indentation. To keep "
        "a consistent view on the source, doc comments should not have tabs "
        "either."
    ),
)

SPACES_PER_TAB = 4


def warn_if_tabs_in_doc(cx: LintContext, attr: DocComment) -> None:
    """Report every run of tabs inside ``attr``."""
    comment = attr.text
    chunks = get_chunks_of_tabs(comment)
    # Runs are character offsets into the comment; spans are bytes.
    byte_chunks = char_spans_to_byte_spans(comment, chunks)
    for (lo, hi), (byte_lo, byte_hi) in zip(chunks, byte_chunks):
        new_span = Span(attr.span.lo + byte_lo, attr.span.lo + byte_hi, attr.span.ctxt)
        cx.span_lint(
            TABS_IN_DOC_COMMENTS,
            new_span,
            "using tabs in doc comments is not recommended",
            help="consider using four spaces per tab",
            suggestion=Suggestion.single(
                "consider using four spaces per tab",
                new_span,
                " " * SPACES_PER_TAB * (hi - lo),
                Applicability.MAYBE_INCORRECT,
            ),
        )


class TabsInDocComments(LintPass):
    """Finds tab characters in doc comments."""

    name = "tabs-in-doc-comments"
    lints = (TABS_IN_DOC_COMMENTS,)

    def check_attribute(self, cx: LintContext, attr: DocComment) -> None:
        warn_if_tabs_in_doc(cx, attr)


__all__ = [
    "TABS_IN_DOC_COMMENTS",
    "TabsInDocComments",
    "warn_if_tabs_in_doc",
]
