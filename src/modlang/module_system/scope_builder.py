"""
Scope Builder

Evaluates a module body inside a fresh scope whose only parent is the root
scope, then hands the bindings to the export filter. Nothing from the
calling context is reachable from the new scope, so a module body can only
see primitives, what it defines, and what it imports.
"""

import logging
from typing import Any, Optional

from ..runtime.builtins import root_scope
from ..runtime.interpreter import Interpreter
from ..runtime.values import ModuleValue
from ..shared.nodes import ExportDirective, Expression, Identifier, ImportDirective, Program, QualifiedName
from ..shared.scope import Scope, ScopeKind
from ..utils.config import DEFAULT_MODULE_NAME, QUALIFIER_SEPARATOR
from .export_filter import ExportPolicy, filter_bindings
from .import_resolver import ImportResolver

logger = logging.getLogger(__name__)


class ScopeBuilder:
    """
    Builds module values from module bodies.

    Statement handling:
    - import(...) -> ImportResolver; bindings land in the module scope
    - export(...) -> accumulated into one ExportPolicy
    - anything else -> Interpreter.execute; its binding lands in the module scope
    """

    def __init__(self, interpreter: Interpreter, import_resolver: ImportResolver,
                 root: Optional[Scope] = None):
        self.interpreter = interpreter
        self.import_resolver = import_resolver
        self.root = root if root is not None else root_scope()

    def build(self, body: Program, export_policy: Any = None,
              name: Optional[str] = None) -> ModuleValue:
        """
        Evaluate body in isolation and return its module value.

        Args:
            body: parsed module body
            export_policy: extra export entries (None, a name/pattern, a list or
                an ExportPolicy), unioned with the body's export() directives
            name: module name; defaults to "<module>"
        """
        name = name or DEFAULT_MODULE_NAME
        scope = Scope(parent=self.root, kind=ScopeKind.MODULE)
        policy = ExportPolicy.coerce(export_policy)

        with self.interpreter.reporting(body):
            for stmt in body.statements:
                if isinstance(stmt, ImportDirective):
                    target = self._import_target(stmt.target, scope)
                    self.import_resolver.inject(scope, target, stmt.names, stmt.location)
                elif isinstance(stmt, ExportDirective):
                    policy = policy.merge(ExportPolicy.from_entries(stmt.entries, stmt.location))
                else:
                    result = self.interpreter.execute(stmt, scope)
                    if result.binding is not None:
                        bound_name, value = result.binding
                        scope.define(bound_name, value)

        scope.freeze()
        exported = filter_bindings(scope.bindings(), policy)
        logger.debug(f"Built module '{name}': {len(scope.names())} bindings, exports {list(exported)}")
        return ModuleValue(exported, name=name)

    def _import_target(self, target: Expression, scope: Scope) -> Any:
        """
        import(stats) names the library "stats" unless the module itself
        binds stats (root primitives do not count, so import(map) is a library);
        import(a::b) names the library "a::b"; anything else is evaluated.
        """
        if isinstance(target, Identifier) and not scope.defined_in_this_scope(target.name):
            return target.name
        if isinstance(target, QualifiedName):
            return f"{target.target}{QUALIFIER_SEPARATOR}{target.name}"
        return self.interpreter.evaluate(target, scope)
