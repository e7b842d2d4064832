"""Test the sandboxed Python interpreter."""
import io
import pytest
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from docscript.errors import ErrorKind, InterpreterException, ScriptSecurityError
from docscript.runtime.python_interpreter import PythonInterpreter, build_restricted_globals


def run(interpreter, source, description="test.svg:1\nInline <script> script"):
    return interpreter.evaluate(io.StringIO(source), description)


class TestPythonInterpreter:
    """Tests for PythonInterpreter."""

    def test_result_binding(self):
        """Test the value left in 'result' is returned."""
        assert run(PythonInterpreter(), "result = sum([1, 2, 3])") == 6

    def test_bound_objects_visible(self):
        """Test objects bound by name are visible to scripts."""
        interpreter = PythonInterpreter()
        items = []
        interpreter.bind_object("items", items)
        run(interpreter, "items.append('x')")
        assert items == ["x"]

    def test_globals_persist(self):
        """Test state survives across evaluations."""
        interpreter = PythonInterpreter()
        run(interpreter, "total = 1")
        run(interpreter, "total += 2")
        assert interpreter.get_binding("total") == 3

    def test_syntax_error(self):
        """Test a syntax error is an InterpreterException with the line."""
        with pytest.raises(InterpreterException) as exc_info:
            run(PythonInterpreter(), "x = (")
        assert isinstance(exc_info.value.exception, SyntaxError)
        assert exc_info.value.line == 1

    def test_runtime_error_wrapped(self):
        """Test runtime errors carry the original exception."""
        with pytest.raises(InterpreterException) as exc_info:
            run(PythonInterpreter(), "missing_name()")
        assert isinstance(exc_info.value.unwrap(), NameError)

    def test_import_blocked(self):
        """Test imports are a sandbox violation."""
        with pytest.raises(ScriptSecurityError) as exc_info:
            run(PythonInterpreter(), "import os")
        assert exc_info.value.kind == ErrorKind.SANDBOX_VIOLATION

    def test_underscore_access_blocked(self):
        """Test dunder access is rejected at compile time."""
        with pytest.raises(ScriptSecurityError) as exc_info:
            run(PythonInterpreter(), "x = ().__class__")
        assert exc_info.value.kind == ErrorKind.SANDBOX_VIOLATION

    def test_write_to_plain_object_blocked(self):
        """Test setting an attribute on an object without write permission."""

        class Plain:
            pass

        interpreter = PythonInterpreter({"target": Plain()})
        with pytest.raises(ScriptSecurityError) as exc_info:
            run(interpreter, "target.flag = 1")
        assert exc_info.value.kind == ErrorKind.SANDBOX_VIOLATION
        assert not hasattr(interpreter.get_binding("target"), "flag")

    def test_runtime_underscore_getattr_is_violation(self):
        """Test the attribute guard reports underscore names as sandbox faults."""
        guard = build_restricted_globals()["_getattr_"]
        with pytest.raises(ScriptSecurityError) as exc_info:
            guard(object(), "__class__")
        assert exc_info.value.kind == ErrorKind.SANDBOX_VIOLATION
        assert guard([], "append") is not None

    def test_write_to_guarded_object_allowed(self):
        """Test classes with _guarded_writes accept attribute writes."""

        class Writable:
            _guarded_writes = True

        target = Writable()
        run(PythonInterpreter({"target": target}), "target.flag = 1")
        assert target.flag == 1

    def test_open_unavailable(self):
        """Test open is not a builtin in the sandbox."""
        with pytest.raises(InterpreterException):
            run(PythonInterpreter(), "open('/etc/passwd')")

    def test_print_collected(self):
        """Test print does not fail inside the sandbox."""
        run(PythonInterpreter(), "print('hello')")

    def test_description_label(self):
        """Test the first description line labels errors."""
        with pytest.raises(InterpreterException) as exc_info:
            run(PythonInterpreter(), "1 / 0", "doc.svg:7\nEvent attribute onload")
        assert str(exc_info.value).startswith("doc.svg:7")

    def test_dispose(self):
        """Test dispose drops all bindings."""
        interpreter = PythonInterpreter({"a": 1})
        interpreter.dispose()
        assert interpreter.get_binding("a") is None
