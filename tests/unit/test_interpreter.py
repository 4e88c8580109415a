"""
Tests for statement evaluation: operators, functions, closures, control flow
and runtime errors. Scripts run in a session scope.
"""

import pytest
from modlang.runtime.values import FunctionValue, ModuleValue
from modlang.shared.errors import ModlangRuntimeError, ModuleDirectiveError, UnboundNameError


class TestOperators:

    @pytest.mark.parametrize("source,expected", [
        ("1 + 2 * 3;", 7),
        ("(1 + 2) * 3;", 9),
        ("7 % 3;", 1),
        ("2 ** 10;", 1024),
        ("-3 + 1;", -2),
        ("7 / 2;", 3.5),
        ('"ab" + "cd";', "abcd"),
        ("1 < 2 and 2 <= 2;", True),
        ("1 == 2 or 3 != 4;", True),
        ("not true;", False),
        ("[1, 2] + [3];", [1, 2, 3]),
    ])
    def test_expression_values(self, session, source, expected):
        assert session.run(source) == expected

    def test_and_or_short_circuit(self, session):
        assert session.run("false and missing;") is False
        assert session.run("true or missing;") is True

    def test_division_by_zero(self, session):
        with pytest.raises(ModlangRuntimeError) as exc_info:
            session.run("1 / 0;")
        assert isinstance(exc_info.value.__cause__, ZeroDivisionError)

    def test_bad_operand_types(self, session):
        with pytest.raises(ModlangRuntimeError):
            session.run('1 + "a";')

    def test_indexing(self, session):
        assert session.run("xs = [10, 20, 30]; xs[1];") == 20
        with pytest.raises(ModlangRuntimeError):
            session.run("xs[5];")


class TestFunctions:

    def test_named_function(self, session):
        assert session.run("fn add(a, b) { a + b } add(3, 5);") == 8

    def test_default_and_keyword_arguments(self, session):
        session.run("fn scale(x, by=2) { x * by }")
        assert session.run("scale(3);") == 6
        assert session.run("scale(3, by=10);") == 30
        assert session.run("scale(by=4, x=2);") == 8

    def test_argument_errors(self, session):
        session.run("fn one(x) { x }")
        with pytest.raises(ModlangRuntimeError, match="missing argument"):
            session.run("one();")
        with pytest.raises(ModlangRuntimeError, match="takes 1 argument"):
            session.run("one(1, 2);")
        with pytest.raises(ModlangRuntimeError, match="unexpected keyword"):
            session.run("one(y=1);")
        with pytest.raises(ModlangRuntimeError, match="multiple values"):
            session.run("one(1, x=2);")

    def test_lambda_passed_as_argument(self, session):
        assert session.run("map(fn(n) { n * 2 }, [1, 2, 3]);") == [2, 4, 6]

    def test_lambda_takes_assigned_name(self, session):
        session.run("double = fn(n) { n * 2 };")
        fn = session.lookup("double")
        assert isinstance(fn, FunctionValue)
        assert fn.name == "double"
        assert repr(fn) == "<fn double(n)>"

    def test_closure_captures_defining_scope(self, session):
        source = """
fn make_adder(n) {
    fn(x) { x + n }
}
add5 = make_adder(5);
add5(10);
"""
        assert session.run(source) == 15

    def test_recursion(self, session):
        source = """
fn fib(n) {
    if n < 2 { n } else { fib(n - 1) + fib(n - 2) }
}
fib(10);
"""
        assert session.run(source) == 55

    def test_block_statements_before_result(self, session):
        source = """
fn f(x) {
    y = x + 1;
    z = y * 2;
    z
}
f(1);
"""
        assert session.run(source) == 4
        with pytest.raises(UnboundNameError):
            session.lookup("y")

    def test_function_values_are_callable_from_python(self, session):
        session.run("fn add(a, b=1) { a + b }")
        add = session.lookup("add")
        assert add(2) == 3
        assert add(2, b=5) == 7

    def test_python_callables(self, session):
        session.register_library("py", {"twice": lambda x: x * 2})
        assert session.run("py::twice(21);") == 42

    def test_failing_python_callable_is_wrapped(self, session):
        with pytest.raises(ModlangRuntimeError, match="call to `int` failed") as exc_info:
            session.run('int("not a number");')
        assert isinstance(exc_info.value.__cause__, ValueError)
        assert exc_info.value.location.line == 1

    def test_calling_non_function(self, session):
        with pytest.raises(ModlangRuntimeError, match="not callable"):
            session.run("x = 1; x();")


class TestControlFlow:

    def test_if_else_if(self, session):
        session.run('fn sign(n) { if n < 0 { "neg" } else if n == 0 { "zero" } else { "pos" } }')
        assert [session.run(f"sign({n});") for n in (-1, 0, 1)] == ["neg", "zero", "pos"]

    def test_if_without_else_is_null(self, session):
        assert session.run("if false { 1 };") is None

    def test_if_block_has_own_scope(self, session):
        session.run("if true { inner = 1; inner };")
        with pytest.raises(UnboundNameError):
            session.lookup("inner")


class TestPrimitives:

    def test_paste_and_print(self, session, capsys):
        assert session.run('paste("a", 1, true, sep="-");') == "a-1-true"
        session.run('print("hello", [1, null]);')
        assert capsys.readouterr().out == "hello [1, null]\n"

    def test_reduce_filter_range(self, session):
        assert session.run("reduce(fn(a, b) { a + b }, filter(fn(x) { x % 2 == 0 }, range(10)));") == 20

    def test_typeof(self, session):
        assert session.run('[typeof(1), typeof("s"), typeof(null), typeof(len), typeof(module { })];') == [
            "number", "string", "null", "function", "module"]

    def test_assert_failure(self, session):
        with pytest.raises(ModlangRuntimeError, match="boom"):
            session.run('assert(1 == 2, "boom");')


class TestDirectivesOutsideModules:

    def test_import_in_session_is_rejected(self, session):
        with pytest.raises(ModuleDirectiveError) as exc_info:
            session.run('import("python::math");')
        assert exc_info.value.directive == "import"

    def test_export_in_function_body_is_rejected(self, session):
        session.run('fn f() { export("a"); 1 }')
        with pytest.raises(ModuleDirectiveError):
            session.run("f();")


class TestMemberAccess:

    def test_member_access_on_module(self, session):
        assert session.run("m = module { a = 41; }; m.a + 1;") == 42

    def test_member_access_on_missing_export(self, session):
        with pytest.raises(ModlangRuntimeError, match="does not export"):
            session.run("m = module { .hidden = 1; }; m.hidden;")

    def test_member_access_on_non_module(self, session):
        with pytest.raises(ModlangRuntimeError, match="needs a module"):
            session.run("x = 1; x.y;")

    def test_module_value_is_read_only_mapping(self, session):
        m = session.run("module { a = 1; };")
        assert isinstance(m, ModuleValue)
        with pytest.raises(TypeError):
            m["a"] = 2


class TestRecursionLimit:
    """Runaway recursion surfaces as a modlang error, not a Python RecursionError."""

    FACT = "fn fact(n) { if n <= 1 { 1 } else { n * fact(n - 1) } }"

    def test_deep_recursion_in_script(self, session):
        session.run(self.FACT)
        with pytest.raises(ModlangRuntimeError, match="maximum recursion depth exceeded in `fact`") as exc_info:
            session.run("fact(100000);")
        assert exc_info.value.location is not None
        assert exc_info.value.location.line == 1

    def test_deep_recursion_called_from_python(self, session):
        fact = session.module(self.FACT)["fact"]
        with pytest.raises(ModlangRuntimeError, match="maximum recursion depth"):
            fact(100000)

    def test_session_usable_after_recursion_error(self, session):
        session.run(self.FACT)
        with pytest.raises(ModlangRuntimeError):
            session.run("fact(100000);")
        assert session.run("fact(5);") == 120


class TestLambdaNaming:

    def test_reassigning_existing_lambda_does_not_rename_it(self, session):
        session.run("m = module { fns = [fn(x) { x }]; }; h = m.fns[0];")
        assert session.lookup("m")["fns"][0].name == "<lambda>"
        assert session.lookup("h").name == "<lambda>"

    def test_alias_of_named_function_keeps_its_name(self, session):
        session.run("fn original(x) { x } alias = original;")
        assert session.lookup("alias").name == "original"
