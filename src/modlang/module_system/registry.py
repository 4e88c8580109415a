"""
Library Registry

Resolves a library identifier to the bindings it exports. This is the
external collaborator behind import(...) and qualified access (lib::name).

Identifier resolution order:
- explicitly registered libraries (mappings, module values, Python modules)
- python::pkg::mod -> the Python module pkg.mod (public names or __all__)
- a::b -> <root>/a/b.mdl or <root>/a/b/mod.mdl under the library search roots

Resolved libraries are cached per registry.
"""

import importlib
import logging
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..shared.errors import LoadError, UnresolvedImportError
from ..utils.config import (
    DIRECTORY_MODULE_FILE, MODULE_FILE_EXTENSION, PYTHON_LIBRARY_PREFIX, QUALIFIER_SEPARATOR,
)
from ..utils.io_utils import library_paths_from_env

if TYPE_CHECKING:
    from .module_loader import ModuleLoader

logger = logging.getLogger(__name__)


def python_module_bindings(module: ModuleType) -> Dict[str, Any]:
    """Visible bindings of a Python module: __all__ if declared, else public names."""
    names = getattr(module, "__all__", None)
    if names is None:
        names = [n for n in dir(module) if not n.startswith("_")]
    return {n: getattr(module, n) for n in names if hasattr(module, n)}


class LibraryRegistry:
    """
    Registry of named libraries.

    Args:
        library_paths: directories searched for modlang library files; the
            MODLANG_PATH environment variable is appended when use_env is True
        loader: ModuleLoader used to build file libraries (bound later by Session)
    """

    def __init__(self, library_paths: Optional[Iterable[Path]] = None,
                 loader: Optional["ModuleLoader"] = None, use_env: bool = True):
        self.library_paths: List[Path] = [Path(p) for p in (library_paths or [])]
        if use_env:
            self.library_paths.extend(library_paths_from_env())
        self.loader = loader
        self._registered: Dict[str, Dict[str, Any]] = {}
        self._cache: Dict[str, Dict[str, Any]] = {}

    def bind_loader(self, loader: "ModuleLoader") -> None:
        self.loader = loader

    def register(self, identifier: str, library: Any) -> None:
        """Register a library under identifier (mapping, module value or Python module)."""
        if isinstance(library, ModuleType):
            bindings = python_module_bindings(library)
        elif isinstance(library, Mapping):
            bindings = dict(library)
        else:
            raise TypeError(f"cannot register {type(library).__name__} as library '{identifier}'")
        self._registered[identifier] = bindings
        self._cache.pop(identifier, None)
        logger.debug(f"Registered library '{identifier}' ({len(bindings)} bindings)")

    def identifiers(self) -> List[str]:
        return sorted(set(self._registered) | set(self._cache))

    def __contains__(self, identifier: str) -> bool:
        try:
            self._visible(identifier)
        except LoadError:
            return False
        return True

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve_external(self, identifier: str, names: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        """
        Visible bindings of a library.

        Raises:
            LoadError: identifier cannot be resolved to a library
            UnresolvedImportError: a requested name is not visible in the library
        """
        visible = self._visible(identifier)
        if names is None:
            return dict(visible)
        selected: Dict[str, Any] = {}
        for name in names:
            if name not in visible:
                raise UnresolvedImportError(name, identifier)
            selected[name] = visible[name]
        return selected

    def lookup(self, identifier: str, name: str) -> Any:
        """Qualified access: identifier::name."""
        return self.resolve_external(identifier, [name])[name]

    def _visible(self, identifier: str) -> Dict[str, Any]:
        if identifier in self._registered:
            return self._registered[identifier]
        if identifier in self._cache:
            return self._cache[identifier]

        parts = identifier.split(QUALIFIER_SEPARATOR)
        if parts[0] == PYTHON_LIBRARY_PREFIX:
            bindings = self._load_python(identifier, parts[1:])
        else:
            bindings = self._load_file_library(identifier, parts)
        self._cache[identifier] = bindings
        return bindings

    def _load_python(self, identifier: str, parts: List[str]) -> Dict[str, Any]:
        if not parts:
            raise LoadError(identifier, "name a Python module, e.g. python::math")
        dotted = ".".join(parts)
        try:
            module = importlib.import_module(dotted)
        except ImportError as e:
            raise LoadError(identifier, f"Python module '{dotted}' not importable: {e}", e) from e
        logger.debug(f"Resolved library '{identifier}' to Python module {dotted}")
        return python_module_bindings(module)

    def find_library_file(self, parts: List[str]) -> Optional[Path]:
        """a::b -> first existing <root>/a/b.mdl or <root>/a/b/mod.mdl."""
        for root in self.library_paths:
            path_obj = root.joinpath(*parts)
            single_file = path_obj.with_name(path_obj.name + MODULE_FILE_EXTENSION)
            if single_file.is_file():
                return single_file
            dir_mod_file = path_obj / DIRECTORY_MODULE_FILE
            if dir_mod_file.is_file():
                return dir_mod_file
        return None

    def _load_file_library(self, identifier: str, parts: List[str]) -> Dict[str, Any]:
        path = self.find_library_file(parts)
        if path is None:
            searched = ", ".join(str(p) for p in self.library_paths) or "no library paths configured"
            raise LoadError(identifier, f"no registered library or library file found (searched: {searched})")
        if self.loader is None:
            raise LoadError(identifier, f"found {path} but no module loader is bound to the registry")
        logger.debug(f"Resolved library '{identifier}' to {path}")
        return dict(self.loader.load_file(path))
