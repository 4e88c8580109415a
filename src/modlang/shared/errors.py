"""
Error Reporting

Exception taxonomy for module construction, import resolution and loading,
plus a rustc-style diagnostic renderer for errors attributable to source.
"""

import os
from dataclasses import dataclass
from typing import Any, List, Optional

from .source_location import SourceLocation


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set or MODLANG_COLOR says so)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    explicit = os.environ.get("MODLANG_COLOR", "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return True

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_CYAN   = "\033[36m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


# ---------------------------------------------------------------------------
# Diagnostic dataclass + formatting engine
# ---------------------------------------------------------------------------

@dataclass
class Diagnostic:
    """One renderable error: message, optional location and annotations."""
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None
    note: Optional[str] = None
    label: Optional[str] = None


def format_diagnostic(diag: Diagnostic, source: Optional[str] = None, color: bool = False) -> str:
    """
    Render a diagnostic in rustc style.

    Example output (plain, no color)::

        error[E0425]: cannot find value `y` in this scope
         --> lib.mdl:3:12
          |
        3 | total = x + y;
          |             ^ not found in this scope
          |
          = help: import it with import(...) or define it in the module body
    """
    out: List[str] = []
    code_str = f"[{diag.code}]" if diag.code else ""
    out.append(
        _style(f"error{code_str}", _BOLD, _RED, color=color)
        + _style(f": {diag.message}", _BOLD, color=color)
    )

    loc = diag.location
    if loc is None:
        _append_annotations(out, diag, 1, color)
        return "\n".join(out)

    src_lines = source.split("\n") if source is not None else []
    gw = max(len(str(loc.line)), 1)
    out.append(_style(" " * gw + "--> ", _BOLD, _BLUE, color=color) + str(loc))

    if 0 < loc.line <= len(src_lines):
        code_line = src_lines[loc.line - 1]
        col_start = max(loc.column, 1) - 1
        if loc.end_line == loc.line and loc.end_column > loc.column:
            span_len = loc.end_column - loc.column
        else:
            span_len = _guess_span(code_line, col_start)
        carets = " " * col_start + "^" * max(1, span_len)
        if diag.label:
            carets += f" {diag.label}"
        out.append(_style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color))
        out.append(_style(str(loc.line).rjust(gw) + " | ", _BOLD, _BLUE, color=color) + code_line)
        out.append(
            _style(" " * (gw + 1) + "| ", _BOLD, _BLUE, color=color)
            + _style(carets, _BOLD, _RED, color=color)
        )

    _append_annotations(out, diag, gw, color)
    return "\n".join(out)


def _guess_span(code_line: str, col_start: int) -> int:
    """Guess token length when end_column is unavailable."""
    if col_start >= len(code_line):
        return 1
    length = 0
    for ch in code_line[col_start:]:
        if ch in (" ", "\t", ";", ",", "(", ")", "[", "]", "{", "}"):
            break
        length += 1
    return max(1, length)


def _append_annotations(out: List[str], diag: Diagnostic, gw: int, color: bool) -> None:
    if not (diag.help or diag.note):
        return
    pad = " " * (gw + 1)
    out.append(_style(pad + "|", _BOLD, _BLUE, color=color))
    if diag.help:
        out.append(_style(f"{pad}= ", _BOLD, _CYAN, color=color) + _style("help: ", _BOLD, color=color) + diag.help)
    if diag.note:
        out.append(_style(f"{pad}= ", _BOLD, _CYAN, color=color) + _style("note: ", _BOLD, color=color) + diag.note)


# ============================================================================
# Exception Classes
# ============================================================================

class ModlangError(Exception):
    """Base exception for all modlang errors"""
    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self):
        if self.location:
            return f"{self.message}\n --> {self.location}"
        return self.message


class ModlangSourceError(ModlangError):
    """
    Error in modlang source code with rich rustc-style formatting.

    Use this for any error a module author can fix in their source:
    - syntax errors
    - unbound names and unresolved imports
    - runtime failures inside a module body
    """
    error_code = "E0001"
    category = "runtime"

    def __init__(self,
                 message: str,
                 location: Optional[SourceLocation] = None,
                 source_code: Optional[str] = None,
                 help: Optional[str] = None,
                 note: Optional[str] = None,
                 label: Optional[str] = None):
        super().__init__(message, location)
        self.source_code = source_code
        self.help_text = help
        self.note_text = note
        self.label_text = label

    def diagnostic(self) -> Diagnostic:
        return Diagnostic(
            message=self.message,
            location=self.location,
            code=self.error_code,
            help=self.help_text,
            note=self.note_text,
            label=self.label_text,
        )

    def format(self, color: Optional[bool] = None) -> str:
        use_color = _use_color() if color is None else color
        return format_diagnostic(self.diagnostic(), self.source_code, color=use_color)

    def __str__(self):
        return self.format(color=False)


class ModlangSyntaxError(ModlangSourceError):
    """Source text that does not parse."""
    error_code = "E0001"
    category = "syntax"


class UnboundNameError(ModlangSourceError):
    """A name was referenced that no scope on the lookup chain binds."""
    error_code = "E0425"
    category = "resolve"

    def __init__(self, name: str, location: Optional[SourceLocation] = None, **kwargs: Any):
        kwargs.setdefault("label", "not found in this scope")
        kwargs.setdefault("help", "import it with import(...) or define it in the module body")
        super().__init__(f"cannot find value `{name}` in this scope", location, **kwargs)
        self.name = name


class UnresolvedImportError(ModlangSourceError):
    """An import or qualified access asked for a name the target does not export."""
    error_code = "E0432"
    category = "resolve"

    def __init__(self, name: str, target: str, location: Optional[SourceLocation] = None, **kwargs: Any):
        kwargs.setdefault("label", f"no `{name}` in `{target}`")
        super().__init__(f"unresolved import `{name}` from `{target}`", location, **kwargs)
        self.name = name
        self.target = target


class ModuleDirectiveError(ModlangSourceError):
    """import()/export() used outside the top level of a module body."""
    error_code = "E0434"
    category = "resolve"

    def __init__(self, directive: str, location: Optional[SourceLocation] = None, **kwargs: Any):
        kwargs.setdefault("help", "wrap the code in `module { ... }` or load it with use(...)")
        super().__init__(f"`{directive}(...)` is only allowed at the top level of a module body", location, **kwargs)
        self.directive = directive


class InvalidExportPatternError(ModlangSourceError):
    """An export entry flagged as a pattern is not a valid regular expression."""
    error_code = "E0602"
    category = "resolve"

    def __init__(self, pattern: str, reason: str, location: Optional[SourceLocation] = None, **kwargs: Any):
        super().__init__(f"invalid export pattern `{pattern}`: {reason}", location, **kwargs)
        self.pattern = pattern


class ModlangRuntimeError(ModlangSourceError):
    """Operation failed while evaluating a module body or script."""
    error_code = "E0007"
    category = "runtime"


class LoadError(ModlangError):
    """
    A module reference could not be located, read or parsed.

    The underlying exception (if any) is available as ``cause`` and is also
    chained as ``__cause__`` by the raising code.
    """
    error_code = "E0583"

    def __init__(self, reference: Any, reason: str, cause: Optional[BaseException] = None):
        super().__init__(f"cannot load `{reference}`: {reason}")
        self.reference = reference
        self.reason = reason
        self.cause = cause


class ModlangImplementationError(Exception):
    """
    Error in Python implementation code (not user's modlang code).

    Never use this for errors in user's source - use ModlangSourceError instead.
    """
    def __init__(self, message: str, error_code: str = "E9999"):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self):
        return f"[{self.error_code}] {self.message}"


class ScopeFrozenError(ModlangImplementationError):
    """Raised when a binding is written into a scope that has been frozen."""

    def __init__(self, name: str) -> None:
        super().__init__(f"cannot bind '{name}': scope is frozen", error_code="E9001")
        self.name = name
