"""
modlang utilities package
"""

from .io_utils import read_source_file, library_paths_from_env

__all__ = ["read_source_file", "library_paths_from_env"]
