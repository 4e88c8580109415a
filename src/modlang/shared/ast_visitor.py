"""
AST Visitor Pattern

Abstract base class with one visit_* method per node type in shared/nodes.py.
Nodes dispatch through accept(); subclasses override what they handle.
"""

from typing import Generic, TypeVar

T = TypeVar('T')


class ASTVisitor(Generic[T]):
    """Base visitor: every visit_* raises until a subclass implements it."""

    def _unsupported(self, node) -> T:
        raise NotImplementedError(f"{type(self).__name__} does not handle {type(node).__name__}")

    def visit_program(self, node) -> T:
        return self._unsupported(node)

    def visit_assignment(self, node) -> T:
        return self._unsupported(node)

    def visit_function_definition(self, node) -> T:
        return self._unsupported(node)

    def visit_expression_statement(self, node) -> T:
        return self._unsupported(node)

    def visit_import_directive(self, node) -> T:
        return self._unsupported(node)

    def visit_export_directive(self, node) -> T:
        return self._unsupported(node)

    def visit_literal(self, node) -> T:
        return self._unsupported(node)

    def visit_identifier(self, node) -> T:
        return self._unsupported(node)

    def visit_qualified_name(self, node) -> T:
        return self._unsupported(node)

    def visit_list_literal(self, node) -> T:
        return self._unsupported(node)

    def visit_binary_expression(self, node) -> T:
        return self._unsupported(node)

    def visit_unary_expression(self, node) -> T:
        return self._unsupported(node)

    def visit_call(self, node) -> T:
        return self._unsupported(node)

    def visit_member_access(self, node) -> T:
        return self._unsupported(node)

    def visit_index_access(self, node) -> T:
        return self._unsupported(node)

    def visit_block(self, node) -> T:
        return self._unsupported(node)

    def visit_lambda(self, node) -> T:
        return self._unsupported(node)

    def visit_if_expression(self, node) -> T:
        return self._unsupported(node)

    def visit_module_expression(self, node) -> T:
        return self._unsupported(node)

    def visit_use_expression(self, node) -> T:
        return self._unsupported(node)
