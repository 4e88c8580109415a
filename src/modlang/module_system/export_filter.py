"""
Export Filter

Turns a module scope's bindings into the externally visible mapping.

Policies:
- default: every name not starting with the private prefix ('.')
- literal names: only those names; a listed name that is not bound is
  ignored (the result simply lacks it)
- patterns: entries starting with '^' are regular expressions searched
  against every binding name; matches are added to the literal names

Several export() directives in one body accumulate (union).
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Pattern, Tuple, Union

from ..shared.errors import InvalidExportPatternError
from ..shared.scope import Binding
from ..shared.source_location import SourceLocation
from ..utils.config import EXPORT_PATTERN_SENTINEL, PRIVATE_NAME_PREFIX

logger = logging.getLogger(__name__)


def is_private(name: str) -> bool:
    return name.startswith(PRIVATE_NAME_PREFIX)


def is_pattern(entry: str) -> bool:
    # An exported name cannot itself start with '^'; see DESIGN.md.
    return entry.startswith(EXPORT_PATTERN_SENTINEL)


@dataclass(frozen=True)
class ExportPolicy:
    """Literal names plus regex patterns; both empty means the default policy."""
    names: Tuple[str, ...] = ()
    patterns: Tuple[str, ...] = ()

    @property
    def is_default(self) -> bool:
        return not self.names and not self.patterns

    @classmethod
    def from_entries(cls, entries: Iterable[str],
                     location: Optional[SourceLocation] = None) -> "ExportPolicy":
        names: List[str] = []
        patterns: List[str] = []
        for entry in entries:
            if is_pattern(entry):
                try:
                    re.compile(entry)
                except re.error as e:
                    raise InvalidExportPatternError(entry, str(e), location) from e
                patterns.append(entry)
            else:
                names.append(entry)
        return cls(names=tuple(names), patterns=tuple(patterns))

    @classmethod
    def coerce(cls, policy: Union[None, str, Iterable[str], "ExportPolicy"]) -> "ExportPolicy":
        """Accept None, a single entry, a list of entries or an ExportPolicy."""
        if policy is None:
            return cls()
        if isinstance(policy, ExportPolicy):
            return policy
        if isinstance(policy, str):
            return cls.from_entries([policy])
        return cls.from_entries(policy)

    def merge(self, other: "ExportPolicy") -> "ExportPolicy":
        """Union of both policies, first occurrence order kept."""
        return ExportPolicy(
            names=tuple(dict.fromkeys(self.names + other.names)),
            patterns=tuple(dict.fromkeys(self.patterns + other.patterns)),
        )

    def compiled_patterns(self) -> List[Pattern]:
        return [re.compile(p) for p in self.patterns]


def filter_bindings(bindings: Union[Iterable[Binding], Mapping[str, Any]],
                    policy: Optional[ExportPolicy] = None) -> Dict[str, Any]:
    """
    Apply an export policy.

    Args:
        bindings: scope bindings in declaration order (or a name -> value mapping)
        policy: ExportPolicy; None means the default policy

    Returns:
        Ordered dict of exported name -> value, in declaration order
    """
    policy = policy or ExportPolicy()
    if isinstance(bindings, Mapping):
        pairs = list(bindings.items())
    else:
        pairs = [(b.name, b.value) for b in bindings]

    if policy.is_default:
        return {name: value for name, value in pairs if not is_private(name)}

    literal = set(policy.names)
    patterns = policy.compiled_patterns()
    exported = {
        name: value for name, value in pairs
        if name in literal or any(p.search(name) for p in patterns)
    }
    missing = [n for n in policy.names if n not in exported]
    if missing:
        logger.warning(f"Export names not bound in module (ignored): {missing}")
    return exported
