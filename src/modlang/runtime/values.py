"""
Runtime values: functions and modules.

Both are plain data so they survive pickling. A FunctionValue closes over an
explicit Scope chain (its module scope and the root scope), never over the
session that built it. Calling one from Python runs it on the interpreter
that is currently active, or on a private standalone one.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List

from ..shared.nodes import Block, Parameter
from ..shared.scope import Scope
from ..utils.config import DEFAULT_MODULE_NAME


@dataclass(eq=False)
class FunctionValue:
    """First-class function value (parameters + body + closure scope)."""
    name: str
    params: List[Parameter]
    body: Block
    closure: Scope

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        from .interpreter import current_interpreter
        return current_interpreter().call_function(self, list(args), kwargs)

    def __repr__(self) -> str:
        params = ", ".join(p.name for p in self.params)
        return f"<fn {self.name}({params})>"


class ModuleValue(Mapping):
    """
    Immutable, ordered snapshot of a module's exported bindings.

    Read-only Mapping[str, Any]; it holds no reference to the scope it was
    derived from, so nothing can write through it.
    """

    def __init__(self, bindings: Mapping, name: str = DEFAULT_MODULE_NAME) -> None:
        self._bindings: Dict[str, Any] = dict(bindings)
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def __getitem__(self, key: str) -> Any:
        return self._bindings[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __contains__(self, key: object) -> bool:
        return key in self._bindings

    def __repr__(self) -> str:
        return f"ModuleValue(name={self._name!r}, exports={list(self._bindings)!r})"
