"""
Tests for error types and rustc-style diagnostic rendering.
"""

import re

import pytest
from modlang.shared.errors import (
    Diagnostic, LoadError, ModlangError, ModlangSourceError, ModuleDirectiveError,
    UnboundNameError, UnresolvedImportError, format_diagnostic,
)
from modlang.shared.source_location import SourceLocation

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")


class TestFormatDiagnostic:

    def test_location_none(self):
        out = format_diagnostic(Diagnostic(message="something failed", location=None, code="E0007"))
        assert out == "error[E0007]: something failed"

    def test_snippet_with_label_and_help(self):
        loc = SourceLocation(file="lib.mdl", line=2, column=9, end_line=2, end_column=10)
        diag = Diagnostic(message="cannot find value `y` in this scope", location=loc,
                          code="E0425", label="not found in this scope", help="define it")
        out = format_diagnostic(diag, "x = 1;\ntotal = y;\n")
        lines = out.split("\n")
        assert lines[0] == "error[E0425]: cannot find value `y` in this scope"
        assert lines[1] == " --> lib.mdl:2:9"
        assert "2 | total = y;" in out
        assert "        ^ not found in this scope" in out
        assert "= help: define it" in out

    def test_line_beyond_source(self):
        loc = SourceLocation(file="x.mdl", line=10, column=1)
        out = format_diagnostic(Diagnostic(message="bad", location=loc), "a = 1;\n")
        assert " --> x.mdl:10:1" in out
        assert "10 |" not in out

    def test_span_guess_without_end_column(self):
        loc = SourceLocation(file="f.mdl", line=1, column=5)
        out = format_diagnostic(Diagnostic(message="m", location=loc), "x = foo(1);")
        assert "    ^^^" in out

    def test_color_output(self):
        out = format_diagnostic(Diagnostic(message="m", location=None, code="E1"), color=True)
        assert "\x1b[" in out
        assert _ANSI_ESCAPE.sub("", out) == "error[E1]: m"


class TestErrorTypes:

    def test_hierarchy(self):
        assert issubclass(UnboundNameError, ModlangSourceError)
        assert issubclass(ModlangSourceError, ModlangError)
        assert issubclass(LoadError, ModlangError)
        assert not issubclass(LoadError, ModlangSourceError)

    def test_unbound_name_error(self):
        err = UnboundNameError("ghost", SourceLocation("m.mdl", 1, 5), source_code="a = ghost;")
        assert err.name == "ghost"
        text = str(err)
        assert "error[E0425]" in text
        assert "1 | a = ghost;" in text
        assert "not found in this scope" in text

    def test_unresolved_import_error(self):
        err = UnresolvedImportError("median", "stats")
        assert (err.name, err.target) == ("median", "stats")
        assert str(err) == "error[E0432]: unresolved import `median` from `stats`"

    def test_module_directive_error(self):
        err = ModuleDirectiveError("import")
        assert err.directive == "import"
        assert "= help:" in str(err)

    def test_load_error_carries_reference_and_cause(self):
        cause = FileNotFoundError("gone")
        err = LoadError("lib.mdl", "file not found", cause)
        assert err.reference == "lib.mdl"
        assert err.cause is cause
        assert str(err) == "cannot load `lib.mdl`: file not found"

    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        assert "\x1b[" not in UnboundNameError("x").format()

    def test_modlang_color_env_disables_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("MODLANG_COLOR", "never")
        assert "\x1b[" not in UnboundNameError("x").format()
