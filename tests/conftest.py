"""
Pytest configuration and shared fixtures for idiomlint tests.

There is no front-end in this package, so tests build annotated trees by
hand. ``TreeBuilder`` locates each node's text in the source so that every
span is the real byte range of that text.
"""

from typing import Optional

import pytest

from idiomlint.analysis.ast_nodes import (
    AddrOf,
    Binary,
    Block,
    Call,
    Closure,
    Crate,
    DocComment,
    Expression,
    ExpressionStatement,
    FieldAccess,
    IndexExpression,
    Item,
    LetStatement,
    Literal,
    MethodCall,
    Param,
    Path,
    TypeHandle,
)
from idiomlint.analysis.context import LintContext
from idiomlint.analysis.diagnostics import CollectingReporter, Finding, LintConfiguration
from idiomlint.analysis.linter import Linter
from idiomlint.analysis.paths import DEFAULT_PATHS, CanonicalPath
from idiomlint.utils.errors import ROOT_CONTEXT, ExpansionContext, SourceFile, Span


I32 = TypeHandle(CanonicalPath.parse("i32"), primitive=True, copy=True)
STRING = TypeHandle(CanonicalPath.parse("alloc::string::String"))
VEC_I32 = TypeHandle(CanonicalPath.parse("alloc::vec::Vec"), args=(I32,))


def option_of(ty: TypeHandle) -> TypeHandle:
    return TypeHandle(DEFAULT_PATHS.option, args=(ty,), copy=ty.copy)


class TreeBuilder:
    """
    Builds tree nodes whose spans point at their text in ``text``.

    ``nth`` picks among repeated occurrences of the same text (0-based).
    """

    I32 = I32
    STRING = STRING
    VEC_I32 = VEC_I32

    def __init__(self, text: str, filename: str = "test.rs") -> None:
        self.text = text
        self.source = SourceFile(text, filename)
        self._data = text.encode("utf-8")

    @staticmethod
    def option_of(ty: TypeHandle) -> TypeHandle:
        return option_of(ty)

    def span(self, needle: str, nth: int = 0, ctxt: ExpansionContext = ROOT_CONTEXT) -> Span:
        encoded = needle.encode("utf-8")
        lo = -1
        for _ in range(nth + 1):
            lo = self._data.find(encoded, lo + 1)
            if lo < 0:
                raise ValueError(f"{needle!r} (occurrence {nth}) not found in source")
        return Span(lo, lo + len(encoded), ctxt)

    def path(
        self,
        needle: str,
        resolution: Optional[str] = None,
        ty: Optional[TypeHandle] = None,
        nth: int = 0,
        ctxt: ExpansionContext = ROOT_CONTEXT,
        qualified_self: Optional[TypeHandle] = None,
    ) -> Path:
        segments = tuple(segment for segment in needle.split("::") if segment)
        return Path(
            segments=segments,
            span=self.span(needle, nth, ctxt),
            ty=ty,
            resolution=CanonicalPath.parse(resolution) if resolution else None,
            qualified_self=qualified_self,
        )

    def call(
        self,
        needle: str,
        callee: Expression,
        *args: Expression,
        ty: Optional[TypeHandle] = None,
        nth: int = 0,
        ctxt: ExpansionContext = ROOT_CONTEXT,
    ) -> Call:
        return Call(callee, tuple(args), self.span(needle, nth, ctxt), ty)

    def method_call(
        self,
        needle: str,
        receiver: Expression,
        method: str,
        *args: Expression,
        ty: Optional[TypeHandle] = None,
        nth: int = 0,
        ctxt: ExpansionContext = ROOT_CONTEXT,
    ) -> MethodCall:
        span = self.span(needle, nth, ctxt)
        name_lo = self._data.find(f".{method}".encode("utf-8"), receiver.span.hi) + 1
        method_span = Span(name_lo, name_lo + len(method.encode("utf-8")), ctxt)
        return MethodCall(receiver, method, tuple(args), method_span, span, ty)

    def borrow_mut(self, needle: str, inner: Expression, nth: int = 0) -> AddrOf:
        return AddrOf(inner, True, self.span(needle, nth, inner.span.ctxt))

    def borrow(self, needle: str, inner: Expression, nth: int = 0) -> AddrOf:
        return AddrOf(inner, False, self.span(needle, nth, inner.span.ctxt))

    def literal(self, needle: str, value, ty: Optional[TypeHandle] = None, nth: int = 0,
                ctxt: ExpansionContext = ROOT_CONTEXT) -> Literal:
        return Literal(value, self.span(needle, nth, ctxt), ty)

    def field(self, needle: str, base: Expression, name: str, ty: Optional[TypeHandle] = None) -> FieldAccess:
        return FieldAccess(base, name, self.span(needle), ty)

    def index(self, needle: str, base: Expression, index: Expression,
              ty: Optional[TypeHandle] = None) -> IndexExpression:
        return IndexExpression(base, index, self.span(needle), ty)

    def binary(self, needle: str, op: str, left: Expression, right: Expression,
               ty: Optional[TypeHandle] = None) -> Binary:
        return Binary(op, left, right, self.span(needle), ty)

    def closure(self, needle: str, params: tuple[str, ...], body: Expression,
                nth: int = 0, ctxt: ExpansionContext = ROOT_CONTEXT) -> Closure:
        span = self.span(needle, nth, ctxt)
        bound = tuple(Param(name, Span(span.lo, span.lo, ctxt)) for name in params)
        return Closure(bound, body, span)

    def doc(self, needle: str, nth: int = 0, ctxt: ExpansionContext = ROOT_CONTEXT) -> DocComment:
        return DocComment(needle, self.span(needle, nth, ctxt))

    def let(self, needle: str, name: str, init: Expression, nth: int = 0) -> LetStatement:
        return LetStatement(name, init, self.span(needle, nth))

    def stmt(self, expr: Expression) -> ExpressionStatement:
        return ExpressionStatement(expr, expr.span)

    def function(self, name: str, *statements, attributes: tuple[DocComment, ...] = ()) -> Item:
        return Item(
            name,
            attributes=attributes,
            body=Block(tuple(statements), span=Span(0, len(self._data))),
            span=Span(0, len(self._data)),
        )

    def crate(self, *items: Item) -> Crate:
        return Crate(tuple(items), span=Span(0, len(self._data)))

    def context(self, config: Optional[LintConfiguration] = None, **kwargs) -> LintContext:
        return LintContext(self.source, reporter=CollectingReporter(), config=config, **kwargs)

    def lint(self, root, config: Optional[LintConfiguration] = None, **kwargs) -> list[Finding]:
        return Linter(config).lint(root, self.source, **kwargs)


@pytest.fixture
def tree_factory():
    """Factory fixture for creating tree builders over a source text."""

    def _create_builder(text: str, filename: str = "test.rs") -> TreeBuilder:
        return TreeBuilder(text, filename)

    return _create_builder


@pytest.fixture
def macro_context():
    """Expansion context of a macro defined in the linted crate."""
    return ExpansionContext(id=1, macro_name="local_macro")


@pytest.fixture
def external_macro_context():
    """Expansion context of a macro defined in another crate."""
    return ExpansionContext(id=2, macro_name="external_macro", external=True)


@pytest.fixture
def replace_option_tree(tree_factory):
    """
    Tree and builder for ``let taken = mem::replace(&mut opt, None);``.
    """
    b = tree_factory("fn main() {\n    let taken = mem::replace(&mut opt, None);\n}\n")
    opt = b.path("opt", ty=b.option_of(b.STRING))
    call = b.call(
        "mem::replace(&mut opt, None)",
        b.path("mem::replace", resolution="core::mem::replace"),
        b.borrow_mut("&mut opt", opt),
        b.path("None", resolution="core::option::Option::None", ty=b.option_of(b.STRING)),
    )
    crate = b.crate(b.function("main", b.let("let taken = mem::replace(&mut opt, None);", "taken", call)))
    return b, crate, call
