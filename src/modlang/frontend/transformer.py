"""
modlang AST Transformer
Converts a Lark parse tree into the dataclass AST of shared/nodes.py
"""

import ast as _pyast
import logging
from typing import Any, List, Optional, Tuple

from lark import Transformer, v_args
from lark.lexer import Token

from ..shared.nodes import (
    Assignment, BinaryExpression, BinaryOp, Block, Call, ExportDirective,
    Expression, ExpressionStatement, FunctionDefinition, Identifier,
    IfExpression, ImportDirective, IndexAccess, Lambda, ListLiteral, Literal,
    MemberAccess, ModuleExpression, Parameter, Program, QualifiedName,
    Statement, UnaryExpression, UnaryOp, UseExpression,
)
from ..shared.source_location import SourceLocation
from ..utils.config import QUALIFIER_SEPARATOR

logger = logging.getLogger(__name__)


def _entry_text(token: Token) -> str:
    """Import/export entries may be written "quoted", bare or .private."""
    if token.type == "STRING":
        return _decode_string(token)
    return str(token)


def _decode_string(token: Token) -> str:
    return _pyast.literal_eval(str(token))


@v_args(inline=True, meta=True)
class ModlangTransformer(Transformer):
    """
    Lark tree -> AST.

    Every node records a SourceLocation built from the Lark meta (or token)
    so runtime errors can point back into the source text.
    """

    def __init__(self, source_file: str = "<string>") -> None:
        super().__init__()
        self.source_file = source_file

    def _loc(self, meta) -> Optional[SourceLocation]:
        if meta is None or getattr(meta, "empty", True):
            return None
        return SourceLocation(
            file=self.source_file,
            line=meta.line,
            column=meta.column,
            end_line=getattr(meta, "end_line", 0) or 0,
            end_column=getattr(meta, "end_column", 0) or 0,
        )

    def _token_loc(self, token: Token) -> SourceLocation:
        return SourceLocation(
            file=self.source_file,
            line=token.line,
            column=token.column,
            end_line=token.end_line or 0,
            end_column=token.end_column or 0,
        )

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def program(self, meta, *statements: Statement) -> Program:
        return Program(statements=list(statements), source_file=self.source_file)

    def assignment(self, meta, name: Token, value: Expression) -> Assignment:
        return Assignment(name=str(name), value=value, location=self._token_loc(name))

    def fn_def(self, meta, name: Token, params: List[Parameter], body: Block) -> FunctionDefinition:
        return FunctionDefinition(name=str(name), params=params, body=body, location=self._loc(meta))

    def params(self, meta, *params: Parameter) -> List[Parameter]:
        return list(params)

    def param(self, meta, name: Token, default: Optional[Expression] = None) -> Parameter:
        return Parameter(name=str(name), default=default)

    def expr_stmt(self, meta, expr: Expression) -> ExpressionStatement:
        return ExpressionStatement(expr=expr, location=self._loc(meta))

    def import_directive(self, meta, target: Expression, *names: Token) -> ImportDirective:
        return ImportDirective(
            target=target,
            names=[_entry_text(n) for n in names] if names else None,
            location=self._loc(meta),
        )

    def export_directive(self, meta, *entries: Token) -> ExportDirective:
        return ExportDirective(entries=[_entry_text(e) for e in entries], location=self._loc(meta))

    def block(self, meta, *children: Any) -> Block:
        statements = list(children)
        result = None
        if statements and not isinstance(statements[-1], Statement):
            result = statements.pop()
        return Block(statements=statements, result=result, location=self._loc(meta))

    # ------------------------------------------------------------------
    # Compound expressions
    # ------------------------------------------------------------------

    def lambda_expr(self, meta, params: List[Parameter], body: Block) -> Lambda:
        return Lambda(params=params, body=body, location=self._loc(meta))

    def if_expr(self, meta, condition: Expression, then_block: Block,
                else_branch: Optional[Expression] = None) -> IfExpression:
        return IfExpression(condition=condition, then_block=then_block,
                            else_branch=else_branch, location=self._loc(meta))

    def module_expr(self, meta, *statements: Statement) -> ModuleExpression:
        body = Program(statements=list(statements), source_file=self.source_file)
        return ModuleExpression(body=body, location=self._loc(meta))

    def use_expr(self, meta, arguments: Tuple[list, list]) -> UseExpression:
        args, kwargs = arguments
        return UseExpression(args=args, kwargs=kwargs, location=self._loc(meta))

    def call(self, meta, callee: Expression, arguments: Tuple[list, list]) -> Call:
        args, kwargs = arguments
        return Call(callee=callee, args=args, kwargs=kwargs, location=self._loc(meta))

    def arguments(self, meta, *items: Any) -> Tuple[list, list]:
        args: List[Expression] = []
        kwargs: List[Tuple[str, Expression]] = []
        for item in items:
            if isinstance(item, tuple):
                kwargs.append(item)
            else:
                args.append(item)
        return args, kwargs

    def kwarg(self, meta, name: Token, value: Expression) -> Tuple[str, Expression]:
        return (str(name), value)

    def index(self, meta, obj: Expression, index: Expression) -> IndexAccess:
        return IndexAccess(obj=obj, index=index, location=self._loc(meta))

    def member(self, meta, obj: Expression, name: Token) -> MemberAccess:
        # PRIVATE_NAME token carries the leading dot
        return MemberAccess(obj=obj, name=str(name)[1:], location=self._token_loc(name))

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def _binary(self, op: BinaryOp, meta, left: Expression, right: Expression) -> BinaryExpression:
        return BinaryExpression(op=op, left=left, right=right, location=self._loc(meta))

    def or_op(self, meta, left, right):
        return self._binary(BinaryOp.OR, meta, left, right)

    def and_op(self, meta, left, right):
        return self._binary(BinaryOp.AND, meta, left, right)

    def eq(self, meta, left, right):
        return self._binary(BinaryOp.EQ, meta, left, right)

    def ne(self, meta, left, right):
        return self._binary(BinaryOp.NE, meta, left, right)

    def lt(self, meta, left, right):
        return self._binary(BinaryOp.LT, meta, left, right)

    def le(self, meta, left, right):
        return self._binary(BinaryOp.LE, meta, left, right)

    def gt(self, meta, left, right):
        return self._binary(BinaryOp.GT, meta, left, right)

    def ge(self, meta, left, right):
        return self._binary(BinaryOp.GE, meta, left, right)

    def add(self, meta, left, right):
        return self._binary(BinaryOp.ADD, meta, left, right)

    def sub(self, meta, left, right):
        return self._binary(BinaryOp.SUB, meta, left, right)

    def mul(self, meta, left, right):
        return self._binary(BinaryOp.MUL, meta, left, right)

    def div(self, meta, left, right):
        return self._binary(BinaryOp.DIV, meta, left, right)

    def mod(self, meta, left, right):
        return self._binary(BinaryOp.MOD, meta, left, right)

    def pow(self, meta, left, right):
        return self._binary(BinaryOp.POW, meta, left, right)

    def neg(self, meta, operand):
        return UnaryExpression(op=UnaryOp.NEG, operand=operand, location=self._loc(meta))

    def not_op(self, meta, operand):
        return UnaryExpression(op=UnaryOp.NOT, operand=operand, location=self._loc(meta))

    # ------------------------------------------------------------------
    # Atoms
    # ------------------------------------------------------------------

    def number(self, meta, token: Token) -> Literal:
        text = str(token)
        value = float(text) if any(c in text for c in ".eE") else int(text)
        return Literal(value=value, location=self._token_loc(token))

    def string(self, meta, token: Token) -> Literal:
        return Literal(value=_decode_string(token), location=self._token_loc(token))

    def true(self, meta) -> Literal:
        return Literal(value=True, location=self._loc(meta))

    def false(self, meta) -> Literal:
        return Literal(value=False, location=self._loc(meta))

    def null(self, meta) -> Literal:
        return Literal(value=None, location=self._loc(meta))

    def var(self, meta, token: Token) -> Identifier:
        return Identifier(name=str(token), location=self._token_loc(token))

    def qualified(self, meta, *parts: Token) -> QualifiedName:
        names = [str(p) for p in parts]
        return QualifiedName(
            target=QUALIFIER_SEPARATOR.join(names[:-1]),
            name=names[-1],
            location=self._token_loc(parts[0]),
        )

    def list_literal(self, meta, *items: Expression) -> ListLiteral:
        return ListLiteral(items=list(items), location=self._loc(meta))

    def __default__(self, data, children, meta):
        raise ValueError(f"no transformer method for grammar rule '{data}'")
