"""
End-to-end tests for self-containment: functions and module values extracted
from a module keep working after being pickled, in this process and in a
separate worker process, with no reference to the session that built them.
"""

import pickle
from concurrent.futures import ProcessPoolExecutor

import pytest
from modlang import FunctionValue, ModuleValue

SOURCE = """
import("python::math", "sqrt");
.k = 2;
fn scale(x) { x * .k }
fn hyp(a, b) { sqrt(a * a + b * b) }
fn fact(n) { if n <= 1 { 1 } else { n * fact(n - 1) } }
"""


@pytest.fixture
def lib(session):
    session.run("k = 1000; scale = null;")
    return session.module(SOURCE, name="lib")


class TestPickling:

    def test_function_round_trip(self, lib):
        scale = pickle.loads(pickle.dumps(lib["scale"]))
        assert isinstance(scale, FunctionValue)
        assert scale(21) == 42

    def test_recursive_function_round_trip(self, lib):
        fact = pickle.loads(pickle.dumps(lib["fact"]))
        assert fact(5) == 120

    def test_function_using_imported_python_callable(self, lib):
        hyp = pickle.loads(pickle.dumps(lib["hyp"]))
        assert hyp(3, 4) == 5.0

    def test_module_value_round_trip(self, lib):
        copy = pickle.loads(pickle.dumps(lib))
        assert isinstance(copy, ModuleValue)
        assert copy.name == "lib"
        assert list(copy) == list(lib) == ["sqrt", "scale", "hyp", "fact"]
        assert copy["scale"](5) == 10

    def test_function_value_holds_no_interpreter(self, lib):
        assert not hasattr(lib["scale"], "interpreter")
        pickle.dumps(lib["scale"])
        assert lib["scale"](1) == 2


def _apply(fn, *args):
    return fn(*args)


@pytest.mark.slow
class TestWorkerProcess:

    def test_function_runs_in_worker(self, lib):
        with ProcessPoolExecutor(max_workers=1) as executor:
            assert executor.submit(lib["scale"], 4).result(timeout=120) == 8
            assert executor.submit(_apply, lib["hyp"], 6, 8).result(timeout=120) == 10.0

    def test_module_value_runs_in_worker(self, lib):
        with ProcessPoolExecutor(max_workers=1) as executor:
            assert executor.submit(_apply, lib["fact"], 6).result(timeout=120) == 720
