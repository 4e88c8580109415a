"""
Source File Loader

Reads a modlang file and parses it as an implicit module body. Every
failure (missing file, unreadable file, syntax error) surfaces as LoadError
naming the path, with the underlying exception chained.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..frontend.parser import Parser
from ..shared.errors import LoadError, ModlangSyntaxError
from ..shared.nodes import Program
from ..utils.io_utils import read_source_file

logger = logging.getLogger(__name__)


class SourceFileLoader:

    def __init__(self, parser: Optional[Parser] = None):
        self.parser = parser or Parser()

    def load_file(self, path: Union[str, Path]) -> Program:
        path = Path(path)
        if not path.is_file():
            cause = FileNotFoundError(f"No such file: '{path}'")
            raise LoadError(str(path), "file not found", cause) from cause
        try:
            source = read_source_file(path)
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(str(path), f"cannot read file: {e}", e) from e
        try:
            program = self.parser.parse(source, str(path))
        except ModlangSyntaxError as e:
            where = f" at {e.location}" if e.location else ""
            raise LoadError(str(path), f"syntax error{where}: {e.message}", e) from e
        logger.debug(f"Parsed {path}: {len(program.statements)} statements")
        return program
