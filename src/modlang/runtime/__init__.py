"""
Runtime: values, root scope primitives and the interpreter.

Session lives in runtime.session; it depends on the module system, which in
turn depends on this package.
"""

from .values import FunctionValue, ModuleValue
from .builtins import PRIMITIVES, root_scope, format_value
from .interpreter import Interpreter, StatementResult

__all__ = [
    'FunctionValue',
    'ModuleValue',
    'PRIMITIVES',
    'root_scope',
    'format_value',
    'Interpreter',
    'StatementResult',
]
