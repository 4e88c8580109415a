"""
modlang: isolated module scopes with declarative import/export.

    >>> import modlang
    >>> m = modlang.module('a = 1; .b = 2; c = a + .b;')
    >>> dict(m)
    {'a': 1, 'c': 3}
"""

from .runtime.session import Session, default_session, module, use
from .runtime.values import FunctionValue, ModuleValue
from .frontend.parser import parse
from .module_system.export_filter import ExportPolicy
from .module_system.registry import LibraryRegistry
from .module_system.search_path import SearchPathRegistry
from .shared.errors import (
    ModlangError, ModlangSourceError, ModlangSyntaxError, ModlangRuntimeError,
    UnboundNameError, UnresolvedImportError, ModuleDirectiveError,
    InvalidExportPatternError, LoadError,
)

__version__ = "0.1.0"

__all__ = [
    'Session',
    'default_session',
    'module',
    'use',
    'parse',
    'FunctionValue',
    'ModuleValue',
    'ExportPolicy',
    'LibraryRegistry',
    'SearchPathRegistry',
    'ModlangError',
    'ModlangSourceError',
    'ModlangSyntaxError',
    'ModlangRuntimeError',
    'UnboundNameError',
    'UnresolvedImportError',
    'ModuleDirectiveError',
    'InvalidExportPatternError',
    'LoadError',
]
