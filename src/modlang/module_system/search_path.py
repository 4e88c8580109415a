"""
Search Path Registry

Process-wide, ordered, append-only list of attached module bindings that
unqualified lookups consult after the caller's own scope and before the
root scope. Later attaches take precedence; nothing is ever removed.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchPathEntry:
    """One attached module: its identifier and a frozen copy of its bindings."""
    identifier: str
    bindings: Mapping[str, Any] = field(repr=False)

    def __contains__(self, name: str) -> bool:
        return name in self.bindings


class SearchPathRegistry:
    """
    Append-only sequence of SearchPathEntry.

    Copy-on-append: attach() builds a new tuple under a lock and swaps the
    reference, so readers iterating entries() never observe a torn sequence.
    """

    def __init__(self) -> None:
        self._entries: Tuple[SearchPathEntry, ...] = ()
        self._lock = threading.Lock()

    def attach(self, identifier: str, bindings: Mapping[str, Any]) -> SearchPathEntry:
        entry = SearchPathEntry(identifier=identifier, bindings=dict(bindings))
        with self._lock:
            self._entries = self._entries + (entry,)
        logger.debug(f"Attached '{identifier}' to search path ({len(entry.bindings)} bindings, "
                     f"{len(self._entries)} entries)")
        return entry

    def entries(self) -> List[SearchPathEntry]:
        """Attached entries, most recently attached first."""
        return list(reversed(self._entries))

    def identifiers(self) -> List[str]:
        return [entry.identifier for entry in self.entries()]

    def lookup(self, name: str) -> Optional[Tuple[SearchPathEntry, Any]]:
        """First entry (most recent first) binding name, with the bound value."""
        for entry in reversed(self._entries):
            if name in entry.bindings:
                return entry, entry.bindings[name]
        return None

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"SearchPathRegistry({self.identifiers()!r})"
