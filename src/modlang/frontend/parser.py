"""
Parser

Source text -> Program AST, using a Lark LALR parser built from grammar.lark.
"""

import logging
from functools import lru_cache
from pathlib import Path

from lark import Lark
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from ..shared.errors import ModlangSyntaxError
from ..shared.nodes import Program
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_PARSER_CACHE_FILE
from .transformer import ModlangTransformer

logger = logging.getLogger("modlang.frontend.parser")

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"


@lru_cache(maxsize=4)
def _build_lark(cache_file: str) -> Lark:
    """One Lark instance per cache file; construction is the expensive part."""
    logger.debug(f"Building LALR parser from {GRAMMAR_PATH}")
    return Lark.open(
        str(GRAMMAR_PATH),
        start='program',
        parser='lalr',              # Required for caching
        cache=cache_file,           # Built-in caching
        propagate_positions=True,   # Enable position tracking for error reporting
        maybe_placeholders=False,
    )


class Parser:
    """
    Parser for modlang source.

    - Takes source code, returns a Program AST
    - Preserves source locations on every node
    - Converts Lark parse errors to ModlangSyntaxError
    """

    def __init__(self, cache_file: str = DEFAULT_PARSER_CACHE_FILE):
        self.parser = _build_lark(cache_file)

    def parse(self, source: str, source_file: str = "<string>") -> Program:
        """Parse source code to AST (Program node)."""
        try:
            tree = self.parser.parse(source)
        except UnexpectedInput as e:
            raise self._syntax_error(e, source, source_file) from e
        program = ModlangTransformer(source_file).transform(tree)
        program.source_code = source
        return program

    @staticmethod
    def _syntax_error(e: UnexpectedInput, source: str, source_file: str) -> ModlangSyntaxError:
        location = None
        line = getattr(e, "line", -1)
        column = getattr(e, "column", -1)
        if isinstance(line, int) and line > 0:
            location = SourceLocation(file=source_file, line=line, column=max(column, 1))

        if isinstance(e, UnexpectedToken):
            expected = ", ".join(sorted(e.expected))
            message = f"unexpected token {e.token!r}"
            note = f"expected one of: {expected}" if expected else None
        elif isinstance(e, UnexpectedCharacters):
            message = f"unexpected character {e.char!r}"
            note = None
        elif isinstance(e, UnexpectedEOF):
            message = "unexpected end of input"
            note = "a statement may be missing its closing `;` or `}`"
        else:
            message = "invalid syntax"
            note = None

        return ModlangSyntaxError(
            message=message,
            location=location,
            source_code=source,
            note=note,
            help="statements end with `;` except `fn name(...) { ... }` definitions",
        )


_default_parser = None


def parse(source: str, source_file: str = "<string>") -> Program:
    """Parse with a shared Parser instance."""
    global _default_parser
    if _default_parser is None:
        _default_parser = Parser()
    return _default_parser.parse(source, source_file)
