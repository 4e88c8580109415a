"""
Configuration constants to replace magic strings throughout modlang
"""

import os
import tempfile

# Module file constants
MODULE_FILE_EXTENSION = ".mdl"
DIRECTORY_MODULE_FILE = "mod" + MODULE_FILE_EXTENSION
DEFAULT_MODULE_NAME = "<module>"
SESSION_SOURCE_NAME = "<session>"

# Name conventions
PRIVATE_NAME_PREFIX = "."       # `.helper` is never exported by default
EXPORT_PATTERN_SENTINEL = "^"   # export("^fun") is a regex, export("fun") a literal

# Library resolution constants
QUALIFIER_SEPARATOR = "::"
PYTHON_LIBRARY_PREFIX = "python"
LIBRARY_PATH_ENV_VAR = "MODLANG_PATH"

# Loading limits (nested use() chains deeper than this are treated as runaway)
MAX_LOAD_DEPTH = 20

# Parser configuration constants (cache under temp dir to avoid cluttering project root)
DEFAULT_PARSER_CACHE_FILE = os.path.join(tempfile.gettempdir(), "modlang_parser.cache")

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"
