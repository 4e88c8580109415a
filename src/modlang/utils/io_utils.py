"""
Centralized file I/O utilities.

- Single place for encoding and library search path handling
- Use Path.read_text() consistently (no raw open/read)
"""

import os
from pathlib import Path
from typing import List, Optional, Union

from .config import DEFAULT_FILE_ENCODING, LIBRARY_PATH_ENV_VAR


def read_source_file(path: Union[Path, str]) -> str:
    """Read source file with standard encoding."""
    p = Path(path) if not isinstance(path, Path) else path
    return p.read_text(encoding=DEFAULT_FILE_ENCODING)


def library_paths_from_env(environ: Optional[dict] = None) -> List[Path]:
    """Library search roots listed in MODLANG_PATH (os.pathsep separated)."""
    env = os.environ if environ is None else environ
    raw = env.get(LIBRARY_PATH_ENV_VAR, "")
    return [Path(part) for part in raw.split(os.pathsep) if part.strip()]
