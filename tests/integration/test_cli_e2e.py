"""
End-to-end tests for the command line entry point.
"""

import pytest
from modlang.__main__ import main


class TestCli:

    def test_run_script(self, write_module, capsys):
        script = write_module("hello.mdl", 'print(paste("hello", "world"));')
        assert main([str(script)]) == 0
        assert capsys.readouterr().out == "hello world\n"

    def test_exports(self, write_module, capsys):
        path = write_module("lib.mdl", "a = 1; .b = 2; c = [1, true];")
        assert main(["--exports", str(path)]) == 0
        assert capsys.readouterr().out == "a = 1\nc = [1, true]\n"

    def test_library_path(self, write_module, tmp_path, capsys):
        write_module("libs/util.mdl", "fn inc(x) { x + 1 }")
        script = write_module("main.mdl", "print(util::inc(1));")
        assert main([str(script), "-L", str(tmp_path / "libs")]) == 0
        assert capsys.readouterr().out == "2\n"

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.mdl")]) == 1
        assert "file not found" in capsys.readouterr().err

    def test_not_a_file(self, tmp_path, capsys):
        assert main([str(tmp_path)]) == 1
        assert "not a file" in capsys.readouterr().err

    def test_source_error_is_rendered(self, write_module, monkeypatch, capsys):
        monkeypatch.setenv("NO_COLOR", "1")
        script = write_module("bad.mdl", "x = module { y = undefined_name; };")
        assert main([str(script)]) == 1
        err = capsys.readouterr().err
        assert "error[E0425]" in err
        assert "undefined_name" in err

    def test_syntax_error_is_rendered(self, write_module, monkeypatch, capsys):
        monkeypatch.setenv("NO_COLOR", "1")
        script = write_module("broken.mdl", "x = ;")
        assert main([str(script)]) == 1
        err = capsys.readouterr().err
        assert "error[E0001]" in err
        assert "cannot load" in err

    def test_invalid_log_level(self, write_module):
        script = write_module("ok.mdl", "x = 1;")
        with pytest.raises(SystemExit):
            main([str(script), "--log-level", "LOUD"])

    def test_runaway_recursion_is_reported(self, write_module, monkeypatch, capsys):
        monkeypatch.setenv("NO_COLOR", "1")
        script = write_module("deep.mdl", "fn down(n) { down(n + 1) }\ndown(0);")
        assert main([str(script)]) == 1
        err = capsys.readouterr().err
        assert "error[E0007]" in err
        assert "maximum recursion depth exceeded in `down`" in err
