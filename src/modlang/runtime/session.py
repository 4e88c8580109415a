"""
Session

Wires parser, interpreter and module system together and owns the session
(global) scope. A session scope looks names up in its own bindings, then in
the search path (most recently attached first), then in the root scope.
Module bodies never see the session scope.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

from ..frontend.parser import Parser
from ..module_system.import_resolver import ImportResolver
from ..module_system.module_loader import ModuleLoader
from ..module_system.registry import LibraryRegistry
from ..module_system.scope_builder import ScopeBuilder
from ..module_system.search_path import SearchPathRegistry
from ..module_system.source_loader import SourceFileLoader
from ..shared.nodes import Program
from ..shared.scope import SessionScope
from ..utils.config import SESSION_SOURCE_NAME
from .builtins import root_scope
from .interpreter import Interpreter
from .values import ModuleValue

logger = logging.getLogger(__name__)


class Session:
    """
    One modlang session.

    Args:
        library_paths: directories searched for library files (a::b -> a/b.mdl)
        registry: LibraryRegistry to share between sessions (library_paths is
            ignored when given)
        search_path: SearchPathRegistry to share between sessions
        parser: Parser instance (auto-created if None)
    """

    def __init__(self,
                 library_paths: Optional[Iterable[Union[str, Path]]] = None,
                 registry: Optional[LibraryRegistry] = None,
                 search_path: Optional[SearchPathRegistry] = None,
                 parser: Optional[Parser] = None):
        self.parser = parser or Parser()
        self.registry = registry if registry is not None else LibraryRegistry(library_paths)
        self.search_path = search_path if search_path is not None else SearchPathRegistry()
        self.root = root_scope()

        self.interpreter = Interpreter(self.registry)
        self.builder = ScopeBuilder(self.interpreter, ImportResolver(self.registry), self.root)
        self.source_loader = SourceFileLoader(self.parser)
        self.loader = ModuleLoader(self.builder, self.source_loader, self.search_path)
        self.interpreter.loader = self.loader
        if self.registry.loader is None:
            self.registry.bind_loader(self.loader)

        self.scope = SessionScope(self.root, self.search_path)

    # ------------------------------------------------------------------
    # Module surface
    # ------------------------------------------------------------------

    def parse(self, source: str, filename: str = SESSION_SOURCE_NAME) -> Program:
        return self.parser.parse(source, filename)

    def module(self, body: Union[str, Program], export_policy: Any = None,
               name: Optional[str] = None) -> ModuleValue:
        """
        Build a module value from a code block.

        Args:
            body: modlang source text or a parsed Program
            export_policy: export entries added to the body's export() directives
            name: module name (default "<module>")
        """
        program = self.parse(body) if isinstance(body, str) else body
        return self.builder.build(program, export_policy, name)

    def use(self, reference: Any, attach: bool = False,
            identifier: Optional[str] = None) -> ModuleValue:
        """
        Load a module: a Program is built, a ModuleValue passes through, a
        str/Path is a file locator. attach=True adds it to the search path.
        """
        return self.loader.load(reference, attach=attach, identifier=identifier)

    # ------------------------------------------------------------------
    # Scripts
    # ------------------------------------------------------------------

    def execute(self, program: Program) -> Any:
        """Run statements in the session scope; returns the last statement's value."""
        last = None
        with self.interpreter.reporting(program):
            for stmt in program.statements:
                result = self.interpreter.execute(stmt, self.scope)
                if result.binding is not None:
                    name, value = result.binding
                    self.scope.define(name, value)
                last = result.value
        return last

    def run(self, source: str, filename: str = SESSION_SOURCE_NAME) -> Any:
        return self.execute(self.parse(source, filename))

    def run_file(self, path: Union[str, Path]) -> Any:
        """Run a script file in the session scope; relative use() paths resolve next to it."""
        resolved = self.loader.resolve_path(path)
        with self.loader.loading(resolved):
            program = self.source_loader.load_file(resolved)
            logger.debug(f"Running script {resolved}")
            return self.execute(program)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup(self, name: str) -> Any:
        """Unqualified lookup: session bindings -> search path -> root scope."""
        return self.scope.resolve(name)

    def qualified(self, library: str, name: str) -> Any:
        return self.registry.lookup(library, name)

    def register_library(self, identifier: str, library: Any) -> None:
        self.registry.register(identifier, library)

    def call(self, fn: Any, *args: Any, **kwargs: Any) -> Any:
        """Call a function value from Python on this session (its loader, registry and search path)."""
        with self.interpreter.active():
            return self.interpreter.call(fn, list(args), kwargs)

    @property
    def bindings(self) -> Dict[str, Any]:
        """Session-scope bindings defined so far (not the search path)."""
        return {b.name: b.value for b in self.scope.bindings()}


_default_session: Optional[Session] = None
_default_session_lock = threading.Lock()


def default_session() -> Session:
    """Process-wide session behind the module-level module()/use() helpers."""
    global _default_session
    with _default_session_lock:
        if _default_session is None:
            _default_session = Session()
            logger.debug("Created default session")
        return _default_session


def module(body: Union[str, Program], export_policy: Any = None,
           name: Optional[str] = None) -> ModuleValue:
    return default_session().module(body, export_policy, name)


def use(reference: Any, attach: bool = False, identifier: Optional[str] = None) -> ModuleValue:
    return default_session().use(reference, attach=attach, identifier=identifier)
