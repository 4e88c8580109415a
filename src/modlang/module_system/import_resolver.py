"""
Import Resolver

Pulls bindings from an import target into the module scope under
construction. A target is either a library identifier (looked up in the
LibraryRegistry) or a module value that was already built.
"""

import logging
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence

from ..shared.errors import ModlangRuntimeError, UnresolvedImportError
from ..shared.scope import Binding, BindingKind, Scope
from ..shared.source_location import SourceLocation
from .registry import LibraryRegistry

logger = logging.getLogger(__name__)


def describe_target(target: Any) -> str:
    """Short human-readable name of an import target (for messages and binding origins)."""
    if isinstance(target, str):
        return target
    name = getattr(target, "name", None)
    return name if isinstance(name, str) else type(target).__name__


class ImportResolver:
    """Resolves import(...) directives to bindings."""

    def __init__(self, registry: LibraryRegistry):
        self.registry = registry

    def resolve(self, target: Any, names: Optional[Sequence[str]] = None,
                location: Optional[SourceLocation] = None) -> List[Binding]:
        """
        Bindings visible in target, restricted to names when given.

        Raises:
            UnresolvedImportError: a requested name is not visible in target
            LoadError: a library identifier cannot be resolved
            ModlangRuntimeError: target is neither an identifier nor a module
        """
        origin = describe_target(target)
        if isinstance(target, str):
            try:
                visible = self.registry.resolve_external(target, names)
            except UnresolvedImportError as e:
                if e.location is None:
                    e.location = location
                raise
        elif isinstance(target, Mapping):
            visible = {}
            for name in (names if names is not None else list(target)):
                if name not in target:
                    raise UnresolvedImportError(name, origin, location)
                visible[name] = target[name]
        else:
            raise ModlangRuntimeError(
                f"cannot import from a value of type `{type(target).__name__}`; "
                f"expected a library identifier or a module", location)

        logger.debug(f"Resolved import from '{origin}': {list(visible)}")
        return [Binding(name, value, kind=BindingKind.IMPORTED, origin=origin)
                for name, value in visible.items()]

    def inject(self, scope: Scope, target: Any, names: Optional[Sequence[str]] = None,
               location: Optional[SourceLocation] = None) -> List[Binding]:
        """Resolve and define the bindings in scope (never the root scope)."""
        bindings = self.resolve(target, names, location)
        for binding in bindings:
            scope.define(binding.name, binding.value, kind=binding.kind, origin=binding.origin)
        return bindings
