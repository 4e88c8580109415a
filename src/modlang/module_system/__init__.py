"""
Module system: isolated module scopes, imports, exports and loading.
"""

from .export_filter import ExportPolicy, filter_bindings, is_pattern, is_private
from .import_resolver import ImportResolver
from .module_loader import ModuleLoader
from .registry import LibraryRegistry, python_module_bindings
from .scope_builder import ScopeBuilder
from .search_path import SearchPathEntry, SearchPathRegistry
from .source_loader import SourceFileLoader

__all__ = [
    'ExportPolicy',
    'filter_bindings',
    'is_pattern',
    'is_private',
    'ImportResolver',
    'ModuleLoader',
    'LibraryRegistry',
    'python_module_bindings',
    'ScopeBuilder',
    'SearchPathEntry',
    'SearchPathRegistry',
    'SourceFileLoader',
]
