"""
Sandboxed Python interpreter (RestrictedPython).

Allowed: safe builtins, guarded attribute/item/iteration access, in-place
operators, print (collected, not written to stdout) and whatever the
environment binds (document, window, event, evt).

Blocked: open, exec, eval, __import__, compile, underscore attributes, etc.
Objects are writable only when their class sets _guarded_writes (Event and
Window do), plus lists and dicts.

Policy rejections at compile time, and blocked imports, underscore attribute
access and denied writes at run time, raise
ScriptSecurityError(kind=SANDBOX_VIOLATION); everything else raised by the
script is wrapped in InterpreterException.
"""

from __future__ import annotations

import ast
import builtins
import operator
from typing import Any, Dict, Optional, TextIO

from RestrictedPython import compile_restricted_exec
from RestrictedPython.Eval import default_guarded_getitem, default_guarded_getiter
from RestrictedPython.Guards import (
    full_write_guard,
    guarded_iter_unpack_sequence,
    guarded_unpack_sequence,
    safe_builtins,
    safer_getattr,
)
from RestrictedPython.PrintCollector import PrintCollector

from docscript.errors import ErrorKind, InterpreterException, ScriptSecurityError

_INPLACE_OPS = {
    "+=": operator.iadd,
    "-=": operator.isub,
    "*=": operator.imul,
    "/=": operator.itruediv,
    "//=": operator.ifloordiv,
    "%=": operator.imod,
    "**=": operator.ipow,
    "<<=": operator.ilshift,
    ">>=": operator.irshift,
    "&=": operator.iand,
    "|=": operator.ior,
    "^=": operator.ixor,
}


def _inplacevar(op: str, x: Any, y: Any) -> Any:
    try:
        fn = _INPLACE_OPS[op]
    except KeyError:
        raise ScriptSecurityError(f"In-place operator {op} is not allowed",
                                  ErrorKind.SANDBOX_VIOLATION)
    return fn(x, y)


def _guarded_getattr(ob: Any, name: str, *args: Any) -> Any:
    if name.startswith("_"):
        raise ScriptSecurityError(f"Access to attribute '{name}' is not allowed",
                                  ErrorKind.SANDBOX_VIOLATION)
    return safer_getattr(ob, name, *args)


class _ReadOnly:
    """Stands in for an object scripts may not modify."""

    __slots__ = ("_ob",)

    def __init__(self, ob: Any):
        object.__setattr__(self, "_ob", ob)

    def _deny(self, *args: Any) -> None:
        raise ScriptSecurityError(
            f"Cannot modify {type(object.__getattribute__(self, '_ob')).__name__} objects",
            ErrorKind.SANDBOX_VIOLATION)

    __setattr__ = _deny
    __delattr__ = _deny
    __setitem__ = _deny
    __delitem__ = _deny


def _write_guard(ob: Any) -> Any:
    """Writable objects pass through; anything else becomes read-only."""
    if full_write_guard(ob) is ob:
        return ob
    return _ReadOnly(ob)


def _make_guard_globals() -> Dict[str, Any]:
    """Guards required by RestrictedPython's rewritten bytecode."""
    return {
        "_getattr_": _guarded_getattr,
        "_getiter_": default_guarded_getiter,
        "_getitem_": default_guarded_getitem,
        "_iter_unpack_sequence_": guarded_iter_unpack_sequence,
        "_unpack_sequence_": guarded_unpack_sequence,
        "_write_": _write_guard,
        "_inplacevar_": _inplacevar,
        "_print_": PrintCollector,
    }


def build_restricted_globals(bindings: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Globals for exec(): safe builtins, guards, then the given bindings."""
    g: Dict[str, Any] = {
        "__builtins__": dict(safe_builtins),
        "__name__": "script",
    }
    g.update(_make_guard_globals())
    for name in ("list", "dict", "set", "tuple", "len", "range", "min", "max", "sum", "abs", "sorted"):
        obj = safe_builtins.get(name)
        if obj is None:
            obj = getattr(builtins, name)
        g[name] = obj
    g.update(bindings or {})
    return g


class PythonInterpreter:
    """
    One sandboxed Python session.

    Globals persist across evaluate() calls, so state left by one script is
    visible to later scripts and handlers of the same document.
    """

    def __init__(self, bindings: Optional[Dict[str, Any]] = None):
        self._globals = build_restricted_globals(bindings)

    def bind_object(self, name: str, value: Any) -> None:
        self._globals[name] = value

    def get_binding(self, name: str, default: Any = None) -> Any:
        return self._globals.get(name, default)

    def evaluate(self, source: TextIO, description: Optional[str] = None) -> Any:
        """
        Compile and run the text read from source.

        Returns:
            The value the script left in 'result', if any
        """
        text = source.read()
        label = (description or "<script>").splitlines()[0]

        try:
            ast.parse(text, label, "exec")
        except SyntaxError as e:
            raise InterpreterException(f"{label}: {e.msg}", e, e.lineno) from e

        compiled = compile_restricted_exec(text, filename=label)
        if compiled.errors:
            raise ScriptSecurityError(f"{label}: " + "; ".join(compiled.errors),
                                      ErrorKind.SANDBOX_VIOLATION)

        try:
            exec(compiled.code, self._globals)
        except ImportError as e:
            raise ScriptSecurityError(f"{label}: import is not allowed ({e})",
                                      ErrorKind.SANDBOX_VIOLATION) from e
        except (ScriptSecurityError, InterpreterException):
            raise
        except Exception as e:
            raise InterpreterException(f"{label}: {type(e).__name__}: {e}", e) from e
        return self._globals.get("result")

    def dispose(self) -> None:
        self._globals.clear()
