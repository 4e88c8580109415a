"""
Frontend: grammar, parser and tree -> AST transformer.
"""

from .parser import Parser, parse

__all__ = ["Parser", "parse"]
