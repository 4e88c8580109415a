"""
Module Loader

Turns a module reference into a module value and, on request, attaches it
to the search path.

References:
- a parsed code block (Program) -> built by the Scope Builder
- a module value -> returned unchanged, never re-evaluated
- a str / Path locator -> read by the Source File Loader, then built

Relative locators resolve against the directory of the file currently being
loaded, or the working directory at top level. A file that transitively
uses itself is reported as a LoadError naming the cycle.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator, List, Optional, Union

from ..runtime.values import ModuleValue
from ..shared.errors import LoadError
from ..shared.nodes import Program
from ..utils.config import MAX_LOAD_DEPTH, MODULE_FILE_EXTENSION
from .search_path import SearchPathRegistry
from .source_loader import SourceFileLoader

if TYPE_CHECKING:
    from .scope_builder import ScopeBuilder

logger = logging.getLogger(__name__)


class ModuleLoader:
    """
    Loads modules from code blocks, module values and files.

    loading_stack holds the resolved paths of files being built, outermost
    first; it drives both relative path resolution and cycle detection.
    """

    def __init__(self, builder: "ScopeBuilder", source_loader: SourceFileLoader,
                 search_path: SearchPathRegistry):
        self.builder = builder
        self.source_loader = source_loader
        self.search_path = search_path
        self.loading_stack: List[Path] = []

    def load(self, reference: Any, attach: bool = False,
             identifier: Optional[str] = None) -> ModuleValue:
        """
        Module value for reference; attach=True also appends its bindings to
        the search path under identifier (default: the module name).

        Raises:
            LoadError: reference cannot be located, read or parsed, or is not
                a supported kind of reference
        """
        if isinstance(reference, ModuleValue):
            module = reference
        elif isinstance(reference, Program):
            module = self.builder.build(reference)
        elif isinstance(reference, (str, Path)):
            module = self.load_file(reference)
        else:
            raise LoadError(
                repr(reference),
                f"unsupported module reference of type {type(reference).__name__}; "
                f"expected a code block, a module or a file path")

        if attach:
            entry = self.search_path.attach(identifier or module.name, module)
            logger.debug(f"Attached module '{module.name}' as '{entry.identifier}'")
        return module

    def resolve_path(self, reference: Union[str, Path]) -> Path:
        """Absolute path of a file locator; adds the .mdl extension when omitted."""
        path = Path(reference).expanduser()
        if not path.is_absolute():
            base = self.loading_stack[-1].parent if self.loading_stack else Path.cwd()
            path = base / path
        if not path.exists() and not path.suffix:
            path = path.with_name(path.name + MODULE_FILE_EXTENSION)
        return path.resolve()

    @contextmanager
    def loading(self, path: Path) -> Iterator[Path]:
        """Track path on the loading stack; cycles and runaway depth are LoadErrors."""
        if path in self.loading_stack:
            chain = " -> ".join(p.name for p in self.loading_stack + [path])
            raise LoadError(str(path), f"use cycle detected: {chain}")
        if len(self.loading_stack) >= MAX_LOAD_DEPTH:
            stack_str = " -> ".join(p.name for p in self.loading_stack[-5:])
            raise LoadError(str(path), f"nested loads exceed depth {MAX_LOAD_DEPTH}: ...{stack_str}")
        self.loading_stack.append(path)
        try:
            yield path
        finally:
            self.loading_stack.pop()

    def load_file(self, reference: Union[str, Path]) -> ModuleValue:
        path = self.resolve_path(reference)
        with self.loading(path):
            program = self.source_loader.load_file(path)
            module = self.builder.build(program, name=path.stem)
        logger.debug(f"Loaded module '{module.name}' from {path}: exports {list(module)}")
        return module
