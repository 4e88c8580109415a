"""
modlang AST (Abstract Syntax Tree) Definitions

Plain dataclasses so that parsed bodies and the function values that carry
them can be pickled and handed to another process unchanged.

Visitor Pattern Support:
- Every node has accept() for polymorphic dispatch to visit_* methods
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional, Tuple, TypeVar

from .source_location import SourceLocation

if TYPE_CHECKING:
    from .ast_visitor import ASTVisitor

T = TypeVar('T')


class BinaryOp(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "**"
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    AND = "and"
    OR = "or"


class UnaryOp(Enum):
    NEG = "-"
    NOT = "not"


@dataclass
class ASTNode:
    """Base class for all AST nodes."""

    def accept(self, visitor: 'ASTVisitor[T]') -> T:
        raise NotImplementedError(f"{type(self).__name__}.accept")


# ----------------------------------------------------------------------------
# Statements
# ----------------------------------------------------------------------------

@dataclass
class Statement(ASTNode):
    pass


@dataclass
class Program(ASTNode):
    """A sequence of statements: a module body, a script or a file."""
    statements: List[Statement]
    source_file: str = "<string>"
    source_code: Optional[str] = field(default=None, repr=False, compare=False)

    def accept(self, visitor):
        return visitor.visit_program(self)


@dataclass
class Assignment(Statement):
    """name = value;"""
    name: str
    value: Expression
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_assignment(self)


@dataclass
class Parameter(ASTNode):
    name: str
    default: Optional[Expression] = None


@dataclass
class FunctionDefinition(Statement):
    """fn name(params) { body }"""
    name: str
    params: List[Parameter]
    body: Block
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_function_definition(self)


@dataclass
class ExpressionStatement(Statement):
    expr: Expression
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_expression_statement(self)


@dataclass
class ImportDirective(Statement):
    """import(target, "name", ...);  names is None for "everything visible"."""
    target: Expression
    names: Optional[List[str]] = None
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_import_directive(self)


@dataclass
class ExportDirective(Statement):
    """export("name", "^pattern", ...);"""
    entries: List[str]
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_export_directive(self)


# ----------------------------------------------------------------------------
# Expressions
# ----------------------------------------------------------------------------

@dataclass
class Expression(ASTNode):
    pass


@dataclass
class Literal(Expression):
    value: Any
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_literal(self)


@dataclass
class Identifier(Expression):
    name: str
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_identifier(self)


@dataclass
class QualifiedName(Expression):
    """lib::name, or python::math::sqrt (target 'python::math', name 'sqrt')."""
    target: str
    name: str
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_qualified_name(self)


@dataclass
class ListLiteral(Expression):
    items: List[Expression]
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_list_literal(self)


@dataclass
class BinaryExpression(Expression):
    op: BinaryOp
    left: Expression
    right: Expression
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_binary_expression(self)


@dataclass
class UnaryExpression(Expression):
    op: UnaryOp
    operand: Expression
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_unary_expression(self)


@dataclass
class Call(Expression):
    callee: Expression
    args: List[Expression]
    kwargs: List[Tuple[str, Expression]] = field(default_factory=list)
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_call(self)


@dataclass
class MemberAccess(Expression):
    """m.name on a module value."""
    obj: Expression
    name: str
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_member_access(self)


@dataclass
class IndexAccess(Expression):
    obj: Expression
    index: Expression
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_index_access(self)


@dataclass
class Block(Expression):
    """{ statements; result }  -- value is result, or null when absent."""
    statements: List[Statement]
    result: Optional[Expression] = None
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_block(self)


@dataclass
class Lambda(Expression):
    params: List[Parameter]
    body: Block
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_lambda(self)


@dataclass
class IfExpression(Expression):
    condition: Expression
    then_block: Block
    else_branch: Optional[Expression] = None  # Block or nested IfExpression
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_if_expression(self)


@dataclass
class ModuleExpression(Expression):
    """module { body }"""
    body: Program
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_module_expression(self)


@dataclass
class UseExpression(Expression):
    """use(reference, attach=..., identifier=...)"""
    args: List[Expression]
    kwargs: List[Tuple[str, Expression]] = field(default_factory=list)
    location: Optional[SourceLocation] = None

    def accept(self, visitor):
        return visitor.visit_use_expression(self)
