"""
Source Location (Span)

Where a node came from, for diagnostics.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Source location of an AST node.

    - File, line, column (1-based), plus optional end position
    - Immutable (frozen) for hashability and safe sharing between modules
    - Code snippets are looked up from the source text when needed (not stored here)
    """
    file: str
    line: int
    column: int
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        """Format as file:line:column"""
        return f"{self.file}:{self.line}:{self.column}"
