"""
Statement Evaluator

Tree-walking interpreter for modlang statements and expressions. It knows
nothing about modules beyond delegating `module { }` and `use(...)` to the
module loader and `lib::name` to the library registry; the scope chain it
evaluates against is always passed in explicitly.
"""

import logging
import operator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, List, Optional, Tuple

from ..shared.ast_visitor import ASTVisitor
from ..shared.errors import (
    ModlangError, ModlangRuntimeError, ModlangSourceError,
    ModuleDirectiveError, UnresolvedImportError,
)
from ..shared.nodes import (
    Assignment, BinaryExpression, BinaryOp, Block, Call, ExportDirective,
    ExpressionStatement, FunctionDefinition, Identifier, IfExpression,
    ImportDirective, IndexAccess, Lambda, ListLiteral, Literal, MemberAccess,
    ModuleExpression, Program, QualifiedName, Statement, UnaryExpression,
    UnaryOp, UseExpression,
)
from ..shared.scope import BindingKind, Scope, ScopeKind
from ..shared.source_location import SourceLocation
from .values import FunctionValue, ModuleValue

if TYPE_CHECKING:
    from ..module_system.module_loader import ModuleLoader
    from ..module_system.registry import LibraryRegistry

logger = logging.getLogger(__name__)

_active_interpreter: ContextVar[Optional["Interpreter"]] = ContextVar("modlang_active_interpreter", default=None)


_BINARY_OP_MAP: Dict[BinaryOp, Callable[[Any, Any], Any]] = {
    BinaryOp.ADD: operator.add,
    BinaryOp.SUB: operator.sub,
    BinaryOp.MUL: operator.mul,
    BinaryOp.DIV: operator.truediv,
    BinaryOp.MOD: operator.mod,
    BinaryOp.POW: operator.pow,
    BinaryOp.EQ: operator.eq,
    BinaryOp.NE: operator.ne,
    BinaryOp.LT: operator.lt,
    BinaryOp.LE: operator.le,
    BinaryOp.GT: operator.gt,
    BinaryOp.GE: operator.ge,
}


@dataclass
class StatementResult:
    """What evaluating one statement produced: an optional top-level binding and a value."""
    binding: Optional[Tuple[str, Any]] = None
    value: Any = None


class Interpreter(ASTVisitor[Any]):
    """
    Evaluates statements against an explicit scope chain.

    - execute(stmt, scope): returns the top-level binding the statement produces;
      the caller decides where that binding goes
    - evaluate(expr, scope): value of an expression
    - call(fn, args, kwargs): call a FunctionValue or a Python callable
    """

    def __init__(self, registry: "LibraryRegistry", loader: Optional["ModuleLoader"] = None):
        self.registry = registry
        self.loader = loader
        self._scope_stack: List[Scope] = []

    # ------------------------------------------------------------------
    # Scope handling
    # ------------------------------------------------------------------

    @property
    def _scope(self) -> Scope:
        return self._scope_stack[-1]

    @contextmanager
    def active(self) -> Iterator["Interpreter"]:
        """Make this interpreter the one Python-side calls of function values run on."""
        token = _active_interpreter.set(self)
        try:
            yield self
        finally:
            _active_interpreter.reset(token)

    @contextmanager
    def reporting(self, program: Program) -> Iterator[None]:
        """Attach the program's source text to source errors raised while it runs."""
        try:
            yield
        except ModlangSourceError as e:
            loc = e.location
            if e.source_code is None and loc is not None and loc.file == program.source_file:
                e.source_code = program.source_code
            raise

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def execute(self, statement: Statement, scope: Scope) -> StatementResult:
        with self.active():
            self._scope_stack.append(scope)
            try:
                return statement.accept(self)
            finally:
                self._scope_stack.pop()

    def evaluate(self, expr, scope: Scope) -> Any:
        with self.active():
            self._scope_stack.append(scope)
            try:
                return expr.accept(self)
            finally:
                self._scope_stack.pop()

    def call(self, fn: Any, args: List[Any], kwargs: Dict[str, Any],
             location: Optional[SourceLocation] = None, name: Optional[str] = None) -> Any:
        if isinstance(fn, FunctionValue):
            return self.call_function(fn, args, kwargs, location)
        if not callable(fn):
            raise ModlangRuntimeError(f"value of type `{type(fn).__name__}` is not callable", location)
        try:
            return fn(*args, **kwargs)
        except ModlangError:
            raise
        except Exception as e:
            name = name or getattr(fn, "__name__", repr(fn))
            raise ModlangRuntimeError(f"call to `{name}` failed: {e}", location) from e

    def call_function(self, fn: FunctionValue, args: List[Any], kwargs: Dict[str, Any],
                      location: Optional[SourceLocation] = None) -> Any:
        """Bind arguments in a fresh scope whose parent is the closure, then run the body."""
        if len(args) > len(fn.params):
            raise ModlangRuntimeError(
                f"`{fn.name}` takes {len(fn.params)} argument(s) but {len(args)} were given", location)
        param_names = {p.name for p in fn.params}
        unknown = [k for k in kwargs if k not in param_names]
        if unknown:
            raise ModlangRuntimeError(f"`{fn.name}` got unexpected keyword argument `{unknown[0]}`", location)

        scope = Scope(parent=fn.closure, kind=ScopeKind.FUNCTION)
        self._scope_stack.append(scope)
        try:
            for i, param in enumerate(fn.params):
                if i < len(args):
                    if param.name in kwargs:
                        raise ModlangRuntimeError(
                            f"`{fn.name}` got multiple values for argument `{param.name}`", location)
                    value = args[i]
                elif param.name in kwargs:
                    value = kwargs[param.name]
                elif param.default is not None:
                    value = param.default.accept(self)
                else:
                    raise ModlangRuntimeError(f"`{fn.name}` missing argument `{param.name}`", location)
                scope.define(param.name, value, kind=BindingKind.PARAMETER)
            return self._run_block(fn.body)
        except RecursionError:
            raise ModlangRuntimeError(
                f"maximum recursion depth exceeded in `{fn.name}`", location) from None
        finally:
            self._scope_stack.pop()

    def _run_block(self, block: Block) -> Any:
        """Run block statements in the current scope; value is the trailing expression."""
        for stmt in block.statements:
            result = stmt.accept(self)
            if result.binding is not None:
                name, value = result.binding
                self._scope.define(name, value)
        if block.result is None:
            return None
        return block.result.accept(self)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def visit_assignment(self, node: Assignment) -> StatementResult:
        value = node.value.accept(self)
        if isinstance(node.value, Lambda):
            value.name = node.name
        return StatementResult(binding=(node.name, value), value=value)

    def visit_function_definition(self, node: FunctionDefinition) -> StatementResult:
        fn = FunctionValue(name=node.name, params=node.params, body=node.body,
                           closure=self._scope)
        return StatementResult(binding=(node.name, fn), value=fn)

    def visit_expression_statement(self, node: ExpressionStatement) -> StatementResult:
        return StatementResult(value=node.expr.accept(self))

    def visit_import_directive(self, node: ImportDirective) -> StatementResult:
        raise ModuleDirectiveError("import", node.location)

    def visit_export_directive(self, node: ExportDirective) -> StatementResult:
        raise ModuleDirectiveError("export", node.location)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def visit_literal(self, node: Literal) -> Any:
        return node.value

    def visit_identifier(self, node: Identifier) -> Any:
        return self._scope.resolve(node.name, node.location)

    def visit_qualified_name(self, node: QualifiedName) -> Any:
        try:
            return self.registry.lookup(node.target, node.name)
        except UnresolvedImportError as e:
            if e.location is None:
                e.location = node.location
            raise

    def visit_list_literal(self, node: ListLiteral) -> list:
        return [item.accept(self) for item in node.items]

    def visit_binary_expression(self, node: BinaryExpression) -> Any:
        left = node.left.accept(self)
        if node.op is BinaryOp.AND:
            return node.right.accept(self) if left else left
        if node.op is BinaryOp.OR:
            return left if left else node.right.accept(self)
        right = node.right.accept(self)
        try:
            return _BINARY_OP_MAP[node.op](left, right)
        except (TypeError, ZeroDivisionError, OverflowError, ValueError) as e:
            raise ModlangRuntimeError(f"`{node.op.value}` failed: {e}", node.location) from e

    def visit_unary_expression(self, node: UnaryExpression) -> Any:
        operand = node.operand.accept(self)
        if node.op is UnaryOp.NOT:
            return not operand
        try:
            return -operand
        except TypeError as e:
            raise ModlangRuntimeError(f"cannot negate: {e}", node.location) from e

    def visit_call(self, node: Call) -> Any:
        fn = node.callee.accept(self)
        args = [a.accept(self) for a in node.args]
        kwargs = {name: value.accept(self) for name, value in node.kwargs}
        name = node.callee.name if isinstance(node.callee, (Identifier, QualifiedName)) else None
        return self.call(fn, args, kwargs, node.location, name)

    def visit_member_access(self, node: MemberAccess) -> Any:
        obj = node.obj.accept(self)
        if not isinstance(obj, ModuleValue):
            raise ModlangRuntimeError(
                f"member access `.{node.name}` needs a module, got `{type(obj).__name__}`", node.location)
        if node.name not in obj:
            raise ModlangRuntimeError(
                f"module `{obj.name}` does not export `{node.name}`", node.location)
        return obj[node.name]

    def visit_index_access(self, node: IndexAccess) -> Any:
        obj = node.obj.accept(self)
        index = node.index.accept(self)
        try:
            return obj[index]
        except (IndexError, KeyError, TypeError) as e:
            raise ModlangRuntimeError(f"cannot index with {index!r}: {e}", node.location) from e

    def visit_block(self, node: Block) -> Any:
        self._scope_stack.append(Scope(parent=self._scope, kind=ScopeKind.BLOCK))
        try:
            return self._run_block(node)
        finally:
            self._scope_stack.pop()

    def visit_lambda(self, node: Lambda) -> FunctionValue:
        return FunctionValue(name="<lambda>", params=node.params, body=node.body,
                             closure=self._scope)

    def visit_if_expression(self, node: IfExpression) -> Any:
        if node.condition.accept(self):
            return node.then_block.accept(self)
        if node.else_branch is not None:
            return node.else_branch.accept(self)
        return None

    def visit_module_expression(self, node: ModuleExpression) -> ModuleValue:
        return self._require_loader(node.location).load(node.body)

    def visit_use_expression(self, node: UseExpression) -> ModuleValue:
        args = [a.accept(self) for a in node.args]
        kwargs = {name: value.accept(self) for name, value in node.kwargs}
        params = ("reference", "attach", "identifier")
        if len(args) > len(params):
            raise ModlangRuntimeError("use() takes at most 3 arguments", node.location)
        options = dict(zip(params, args))
        for name, value in kwargs.items():
            if name not in params or name in options:
                raise ModlangRuntimeError(f"use() got unexpected argument `{name}`", node.location)
            options[name] = value
        if "reference" not in options:
            raise ModlangRuntimeError("use() needs a module, code block or file reference", node.location)
        return self._require_loader(node.location).load(
            options["reference"],
            attach=bool(options.get("attach", False)),
            identifier=options.get("identifier"),
        )

    def _require_loader(self, location: Optional[SourceLocation]) -> "ModuleLoader":
        if self.loader is None:
            raise ModlangRuntimeError("no module loader is available in this interpreter", location)
        return self.loader


_standalone: Optional[Interpreter] = None


def standalone_interpreter() -> Interpreter:
    """
    Interpreter for function values called outside any session, e.g. after
    being unpickled in a worker process. Backed by a private, fresh session.
    """
    global _standalone
    if _standalone is None:
        from .session import Session
        _standalone = Session().interpreter
        logger.debug("Created standalone interpreter")
    return _standalone


def current_interpreter() -> Interpreter:
    """The interpreter currently executing on this thread/context, else the standalone one."""
    return _active_interpreter.get() or standalone_interpreter()
