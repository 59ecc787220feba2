"""
Abstract Syntax Tree (AST) node definitions for idiomlint.

The tree is produced by an external front-end that has already resolved
names and types; these classes only describe its shape. Each node is
immutable, carries the byte span it was parsed from, and dispatches to
an ``ASTVisitor`` for traversal.

The set of node classes is closed: rules and matchers test for the exact
classes defined here and treat anything else as "no match".
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, ClassVar, Optional, Union

from idiomlint.analysis.paths import CanonicalPath
from idiomlint.utils.errors import DUMMY_SPAN, Span


class NodeKind(Enum):
    """Discriminant tag carried by every node class."""

    CRATE = auto()
    ITEM = auto()
    DOC_COMMENT = auto()
    BLOCK = auto()
    LET_STATEMENT = auto()
    EXPRESSION_STATEMENT = auto()
    PARAM = auto()
    PATH = auto()
    CALL = auto()
    METHOD_CALL = auto()
    ADDR_OF = auto()
    LITERAL = auto()
    FIELD_ACCESS = auto()
    INDEX = auto()
    BINARY = auto()
    UNARY = auto()
    CLOSURE = auto()


@dataclass(frozen=True, slots=True)
class TypeHandle:
    """
    A resolved static type, as reported by the front-end.

    Examples:
        TypeHandle(CanonicalPath.parse("core::option::Option"), args=(i32,))
        TypeHandle(CanonicalPath.parse("i32"), primitive=True, copy=True)

    Attributes:
        path: Canonical path of the type constructor
        args: Generic arguments
        primitive: True for numeric, bool, char and pointer-sized scalars
        copy: True when values can be duplicated without a move
    """

    path: CanonicalPath
    args: tuple["TypeHandle", ...] = ()
    primitive: bool = False
    copy: bool = False

    def __str__(self) -> str:
        if self.args:
            return f"{self.path}<{', '.join(str(arg) for arg in self.args)}>"
        return str(self.path)


class ASTNode(ABC):
    """Base class for all AST nodes."""

    kind: ClassVar[NodeKind]
    span: Span

    @abstractmethod
    def accept(self, visitor: "ASTVisitor") -> Any:
        """Accept a visitor for tree traversal."""
        pass


class ASTVisitor(ABC):
    """
    Visitor pattern base class for AST traversal.

    Implement this to create custom tree processors (linters, collectors).
    """

    def visit(self, node: ASTNode) -> Any:
        """Dispatch to the appropriate visit method."""
        return node.accept(self)


class Expression(ASTNode):
    """Base class for expressions. ``ty`` is the front-end's type annotation."""

    ty: Optional[TypeHandle]


class Statement(ASTNode):
    """Base class for statements."""

    pass


# -----------------------------------------------------------------------------
# Expressions
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Path(Expression):
    """
    A (possibly multi-segment) name reference.

    Examples:
        x, None, Option::None, String::default, <T as Default>::default

    Attributes:
        segments: Path segments as written
        qualified_self: The ``T`` of a ``<T as Trait>::`` prefix, if any
        resolution: Canonical path the front-end resolved this to, if any
    """

    kind: ClassVar[NodeKind] = NodeKind.PATH

    segments: tuple[str, ...]
    span: Span = DUMMY_SPAN
    ty: Optional[TypeHandle] = None
    resolution: Optional[CanonicalPath] = None
    qualified_self: Optional[TypeHandle] = None

    @property
    def name(self) -> str:
        """The last segment, i.e. the identifier actually being named."""
        return self.segments[-1]

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_path(self)


@dataclass(frozen=True, slots=True)
class Call(Expression):
    """
    A function call expression.

    Example:
        mem::replace(&mut x, None)
    """

    kind: ClassVar[NodeKind] = NodeKind.CALL

    callee: Expression
    args: tuple[Expression, ...] = ()
    span: Span = DUMMY_SPAN
    ty: Optional[TypeHandle] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_call(self)


@dataclass(frozen=True, slots=True)
class MethodCall(Expression):
    """
    A method call expression.

    Example:
        opt.map(|v| v + 1)

    Attributes:
        receiver: The expression before the dot
        method: Method name
        args: Arguments, excluding the receiver
        method_span: Span of the method name alone
    """

    kind: ClassVar[NodeKind] = NodeKind.METHOD_CALL

    receiver: Expression
    method: str
    args: tuple[Expression, ...] = ()
    method_span: Span = DUMMY_SPAN
    span: Span = DUMMY_SPAN
    ty: Optional[TypeHandle] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_method_call(self)


@dataclass(frozen=True, slots=True)
class AddrOf(Expression):
    """
    A borrow expression.

    Examples:
        &x, &mut x
    """

    kind: ClassVar[NodeKind] = NodeKind.ADDR_OF

    expr: Expression
    mutable: bool = False
    span: Span = DUMMY_SPAN
    ty: Optional[TypeHandle] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_addr_of(self)


@dataclass(frozen=True, slots=True)
class Literal(Expression):
    """A literal: integer, float, string, char or bool."""

    kind: ClassVar[NodeKind] = NodeKind.LITERAL

    value: Union[int, float, str, bool]
    span: Span = DUMMY_SPAN
    ty: Optional[TypeHandle] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_literal(self)


@dataclass(frozen=True, slots=True)
class FieldAccess(Expression):
    """
    A field access expression.

    Example:
        self.buffer
    """

    kind: ClassVar[NodeKind] = NodeKind.FIELD_ACCESS

    base: Expression
    name: str
    span: Span = DUMMY_SPAN
    ty: Optional[TypeHandle] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_field_access(self)


@dataclass(frozen=True, slots=True)
class IndexExpression(Expression):
    """
    An index expression.

    Example:
        v[i]
    """

    kind: ClassVar[NodeKind] = NodeKind.INDEX

    base: Expression
    index: Expression
    span: Span = DUMMY_SPAN
    ty: Optional[TypeHandle] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_index_expression(self)


@dataclass(frozen=True, slots=True)
class Binary(Expression):
    """A binary operation such as ``v + 1``."""

    kind: ClassVar[NodeKind] = NodeKind.BINARY

    op: str
    left: Expression
    right: Expression
    span: Span = DUMMY_SPAN
    ty: Optional[TypeHandle] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_binary(self)


@dataclass(frozen=True, slots=True)
class Unary(Expression):
    """A unary operation such as ``-x``, ``!x`` or ``*x``."""

    kind: ClassVar[NodeKind] = NodeKind.UNARY

    op: str
    operand: Expression
    span: Span = DUMMY_SPAN
    ty: Optional[TypeHandle] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_unary(self)


@dataclass(frozen=True, slots=True)
class Param(ASTNode):
    """A closure parameter binding. Bindings are not name references."""

    kind: ClassVar[NodeKind] = NodeKind.PARAM

    name: str
    span: Span = DUMMY_SPAN
    ty: Optional[TypeHandle] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_param(self)


@dataclass(frozen=True, slots=True)
class Closure(Expression):
    """
    A closure expression.

    Example:
        |v| v + 1
    """

    kind: ClassVar[NodeKind] = NodeKind.CLOSURE

    params: tuple[Param, ...]
    body: Expression
    span: Span = DUMMY_SPAN
    ty: Optional[TypeHandle] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_closure(self)


@dataclass(frozen=True, slots=True)
class Block(Expression):
    """A block of statements with an optional trailing expression."""

    kind: ClassVar[NodeKind] = NodeKind.BLOCK

    statements: tuple[Statement, ...] = ()
    expr: Optional[Expression] = None
    span: Span = DUMMY_SPAN
    ty: Optional[TypeHandle] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_block(self)


# -----------------------------------------------------------------------------
# Statements
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LetStatement(Statement):
    """
    A local binding.

    Example:
        let taken = mem::replace(&mut x, None);
    """

    kind: ClassVar[NodeKind] = NodeKind.LET_STATEMENT

    name: str
    init: Optional[Expression] = None
    span: Span = DUMMY_SPAN

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_let_statement(self)


@dataclass(frozen=True, slots=True)
class ExpressionStatement(Statement):
    """An expression used as a statement."""

    kind: ClassVar[NodeKind] = NodeKind.EXPRESSION_STATEMENT

    expr: Expression
    span: Span = DUMMY_SPAN

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_expression_statement(self)


# -----------------------------------------------------------------------------
# Items and attributes
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DocComment(ASTNode):
    """
    A documentation-comment attribute.

    ``text`` is the raw comment exactly as written in the source, starting
    at ``span.lo`` (for example ``"/// \\tindented"``), so offsets into
    ``text`` map directly onto source offsets.
    """

    kind: ClassVar[NodeKind] = NodeKind.DOC_COMMENT

    text: str
    span: Span = DUMMY_SPAN

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_doc_comment(self)


@dataclass(frozen=True, slots=True)
class Item(Statement):
    """
    A named item (function, struct, module...) with its attributes.

    Attributes:
        name: Item name
        attributes: Doc-comment attributes attached to the item
        body: Function body, if the item has one
        items: Nested items (module contents, struct fields)
    """

    kind: ClassVar[NodeKind] = NodeKind.ITEM

    name: str
    attributes: tuple[DocComment, ...] = ()
    body: Optional[Block] = None
    items: tuple["Item", ...] = ()
    span: Span = DUMMY_SPAN

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_item(self)


@dataclass(frozen=True, slots=True)
class Crate(ASTNode):
    """Root node: the items of one compilation unit."""

    kind: ClassVar[NodeKind] = NodeKind.CRATE

    items: tuple[Item, ...] = ()
    attributes: tuple[DocComment, ...] = ()
    span: Span = DUMMY_SPAN

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_crate(self)


# -----------------------------------------------------------------------------
# Default traversal
# -----------------------------------------------------------------------------


class BaseASTVisitor(ASTVisitor):
    """
    Base visitor with default implementations that traverse children.

    Children are visited in source order. Subclass this and override
    specific visit_* methods as needed.
    """

    def visit_crate(self, node: Crate) -> Any:
        for attr in node.attributes:
            self.visit(attr)
        for item in node.items:
            self.visit(item)

    def visit_item(self, node: Item) -> Any:
        for attr in node.attributes:
            self.visit(attr)
        if node.body is not None:
            self.visit(node.body)
        for item in node.items:
            self.visit(item)

    def visit_doc_comment(self, node: DocComment) -> Any:
        pass

    def visit_block(self, node: Block) -> Any:
        for stmt in node.statements:
            self.visit(stmt)
        if node.expr is not None:
            self.visit(node.expr)

    def visit_let_statement(self, node: LetStatement) -> Any:
        if node.init is not None:
            self.visit(node.init)

    def visit_expression_statement(self, node: ExpressionStatement) -> Any:
        self.visit(node.expr)

    def visit_param(self, node: Param) -> Any:
        pass

    def visit_path(self, node: Path) -> Any:
        pass

    def visit_call(self, node: Call) -> Any:
        self.visit(node.callee)
        for arg in node.args:
            self.visit(arg)

    def visit_method_call(self, node: MethodCall) -> Any:
        self.visit(node.receiver)
        for arg in node.args:
            self.visit(arg)

    def visit_addr_of(self, node: AddrOf) -> Any:
        self.visit(node.expr)

    def visit_literal(self, node: Literal) -> Any:
        pass

    def visit_field_access(self, node: FieldAccess) -> Any:
        self.visit(node.base)

    def visit_index_expression(self, node: IndexExpression) -> Any:
        self.visit(node.base)
        self.visit(node.index)

    def visit_binary(self, node: Binary) -> Any:
        self.visit(node.left)
        self.visit(node.right)

    def visit_unary(self, node: Unary) -> Any:
        self.visit(node.operand)

    def visit_closure(self, node: Closure) -> Any:
        for param in node.params:
            self.visit(param)
        self.visit(node.body)


__all__ = [
    "NodeKind",
    "TypeHandle",
    "ASTNode",
    "ASTVisitor",
    "BaseASTVisitor",
    "Expression",
    "Statement",
    "Path",
    "Call",
    "MethodCall",
    "AddrOf",
    "Literal",
    "FieldAccess",
    "IndexExpression",
    "Binary",
    "Unary",
    "Param",
    "Closure",
    "Block",
    "LetStatement",
    "ExpressionStatement",
    "DocComment",
    "Item",
    "Crate",
]
