"""
Scope resolution: explicit scope chains.

A scope is an ordered map name -> Binding plus a single parent reference.
Lookup walks self -> parent -> ... -> root; a scope's own bindings shadow
anything reachable through the chain. Module scopes are frozen once their
module value has been produced, so closures that captured them see a
read-only environment from then on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

from .errors import ScopeFrozenError, UnboundNameError
from .source_location import SourceLocation

if TYPE_CHECKING:
    from ..module_system.search_path import SearchPathRegistry


# -----------------------------------------------------------------------------
# Scope kind (categorizes scope types)
# -----------------------------------------------------------------------------


class ScopeKind(Enum):
    ROOT = "root"
    MODULE = "module"
    SESSION = "session"
    FUNCTION = "function"
    BLOCK = "block"


# -----------------------------------------------------------------------------
# Binding kind
# -----------------------------------------------------------------------------


class BindingKind(Enum):
    PRIMITIVE = "primitive"
    DEFINED = "defined"
    IMPORTED = "imported"
    PARAMETER = "parameter"
    ATTACHED = "attached"


# -----------------------------------------------------------------------------
# Binding
# -----------------------------------------------------------------------------


@dataclass
class Binding:
    """One name binding (value in scope dict)."""
    name: str
    value: Any
    kind: BindingKind = BindingKind.DEFINED
    origin: Optional[str] = None  # import target / search path identifier


# -----------------------------------------------------------------------------
# Scope
# -----------------------------------------------------------------------------


@dataclass
class Scope:
    """
    One scope level.
    Single map: name -> Binding. define() overwrites (shadow); lookup() inner -> outer.
    """

    parent: Optional[Scope]
    kind: ScopeKind
    _bindings: Dict[str, Binding] = field(default_factory=dict)
    _frozen: bool = False

    def lookup(self, name: str) -> Optional[Binding]:
        """Binding for name along the scope chain, innermost first."""
        scope: Optional[Scope] = self
        while scope is not None:
            binding = scope._local_lookup(name)
            if binding is not None:
                return binding
            scope = scope.parent
        return None

    def _local_lookup(self, name: str) -> Optional[Binding]:
        return self._bindings.get(name)

    def resolve(self, name: str, location: Optional[SourceLocation] = None) -> Any:
        """Value bound to name; UnboundNameError if no scope on the chain binds it."""
        binding = self.lookup(name)
        if binding is None:
            raise UnboundNameError(name, location)
        return binding.value

    def defined_in_this_scope(self, name: str) -> bool:
        return name in self._bindings

    def define(self, name: str, value: Any, kind: BindingKind = BindingKind.DEFINED,
               origin: Optional[str] = None) -> Binding:
        """Bind name in this scope; overwrites (shadows) an existing binding."""
        if self._frozen:
            raise ScopeFrozenError(name)
        binding = Binding(name=name, value=value, kind=kind, origin=origin)
        self._bindings[name] = binding
        return binding

    def freeze(self) -> None:
        """Make this scope read-only."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def bindings(self) -> List[Binding]:
        """Own bindings in declaration order."""
        return list(self._bindings.values())

    def names(self) -> List[str]:
        return list(self._bindings)

    def chain(self) -> Iterator[Scope]:
        """Yield self, then every ancestor up to the root."""
        scope: Optional[Scope] = self
        while scope is not None:
            yield scope
            scope = scope.parent

    def __repr__(self) -> str:
        return f"Scope(kind={self.kind.value}, names={self.names()!r}, frozen={self._frozen})"


class SessionScope(Scope):
    """
    Top-level scope of an interactive session or script.

    Unqualified lookup order: own bindings -> search path (most recently
    attached first) -> parent chain (root scope).
    """

    def __init__(self, parent: Optional[Scope], search_path: "SearchPathRegistry") -> None:
        super().__init__(parent=parent, kind=ScopeKind.SESSION)
        self.search_path = search_path

    def _local_lookup(self, name: str) -> Optional[Binding]:
        binding = self._bindings.get(name)
        if binding is not None:
            return binding
        hit = self.search_path.lookup(name)
        if hit is None:
            return None
        entry, value = hit
        return Binding(name=name, value=value, kind=BindingKind.ATTACHED, origin=entry.identifier)
