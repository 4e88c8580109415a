"""
Root scope primitives.

The root scope is the single ancestor of every module scope. It holds
baseline primitives only, nothing session specific. Every primitive is a
module-level function or a Python builtin so that closures which reach the
root scope still pickle by reference.
"""

from functools import reduce as _reduce
from typing import Any, Callable, Iterable, List, Optional

from ..shared.scope import BindingKind, Scope, ScopeKind


def builtin_range(*args: int) -> List[int]:
    return list(range(*args))


def builtin_map(fn: Callable, items: Iterable) -> list:
    return [fn(item) for item in items]


def builtin_filter(fn: Callable, items: Iterable) -> list:
    return [item for item in items if fn(item)]


def builtin_reduce(fn: Callable, items: Iterable, *initial: Any) -> Any:
    return _reduce(fn, items, *initial)


def builtin_append(items: Iterable, *values: Any) -> list:
    """New list; lists are never mutated in place."""
    return list(items) + list(values)


def builtin_paste(*parts: Any, sep: str = " ") -> str:
    return sep.join(format_value(p) for p in parts)


def builtin_print(*parts: Any, sep: str = " ") -> None:
    print(sep.join(format_value(p) for p in parts))


def builtin_keys(mapping: Any) -> List[str]:
    return list(mapping.keys())


def builtin_typeof(value: Any) -> str:
    from .values import FunctionValue, ModuleValue
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "list"
    if isinstance(value, ModuleValue):
        return "module"
    if isinstance(value, FunctionValue) or callable(value):
        return "function"
    return type(value).__name__


def builtin_assert(condition: Any, message: str = "assertion failed") -> bool:
    if not condition:
        raise AssertionError(message)
    return True


def builtin_error(message: str) -> None:
    raise RuntimeError(message)


def format_value(value: Any) -> str:
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, list):
        return "[" + ", ".join(format_value(v) for v in value) + "]"
    return str(value)


PRIMITIVES = {
    "abs": abs,
    "all": all,
    "any": any,
    "append": builtin_append,
    "assert": builtin_assert,
    "bool": bool,
    "error": builtin_error,
    "filter": builtin_filter,
    "float": float,
    "int": int,
    "keys": builtin_keys,
    "len": len,
    "list": list,
    "map": builtin_map,
    "max": max,
    "min": min,
    "paste": builtin_paste,
    "print": builtin_print,
    "range": builtin_range,
    "reduce": builtin_reduce,
    "round": round,
    "sorted": sorted,
    "str": format_value,
    "sum": sum,
    "typeof": builtin_typeof,
}


def make_root_scope() -> Scope:
    """Fresh, frozen root scope holding PRIMITIVES."""
    scope = Scope(parent=None, kind=ScopeKind.ROOT)
    for name, value in PRIMITIVES.items():
        scope.define(name, value, kind=BindingKind.PRIMITIVE)
    scope.freeze()
    return scope


_ROOT_SCOPE: Optional[Scope] = None


def root_scope() -> Scope:
    """The process-wide root scope shared by every module."""
    global _ROOT_SCOPE
    if _ROOT_SCOPE is None:
        _ROOT_SCOPE = make_root_scope()
    return _ROOT_SCOPE
