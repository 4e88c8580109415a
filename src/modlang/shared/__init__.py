"""
Shared components: AST nodes, scopes, source locations and errors.
"""

from .source_location import SourceLocation
from .errors import (
    Diagnostic, format_diagnostic,
    ModlangError, ModlangSourceError, ModlangSyntaxError, ModlangRuntimeError,
    UnboundNameError, UnresolvedImportError, ModuleDirectiveError,
    InvalidExportPatternError, LoadError,
    ModlangImplementationError, ScopeFrozenError,
)
from .scope import Scope, SessionScope, ScopeKind, Binding, BindingKind
from .nodes import (
    ASTNode, Statement, Expression, Program, BinaryOp, UnaryOp,
    Assignment, Parameter, FunctionDefinition, ExpressionStatement,
    ImportDirective, ExportDirective,
    Literal, Identifier, QualifiedName, ListLiteral, BinaryExpression,
    UnaryExpression, Call, MemberAccess, IndexAccess, Block, Lambda,
    IfExpression, ModuleExpression, UseExpression,
)
from .ast_visitor import ASTVisitor
