"""
docscript Runtime

The scripting-activation core:
- classifier: Does a document need scripting at all
- ScriptingEnvironment: Per-document facade (load_scripts, lifecycle events)
- SessionRegistry: One interpreter session per language
- ScriptLoader: Discovery and execution of script elements
- NativeHandlerBundle: Python-archive handlers sharing one import namespace
- LifecycleDispatcher: Load, resize, scroll and zoom events
"""

from docscript.runtime.bundles import (
    BundleNamespace,
    EntryPointRole,
    NativeHandlerBundle,
    load_bundles,
    parse_manifest,
)
from docscript.runtime.classifier import is_dynamic_document, is_dynamic_element, load_extensions
from docscript.runtime.dispatch import InlineHandlerListener, LifecycleDispatcher, scoped_listener
from docscript.runtime.environment import ScriptingEnvironment
from docscript.runtime.interpreters import (
    Interpreter,
    InterpreterPool,
    ScriptEventWrapper,
    default_interpreter_pool,
)
from docscript.runtime.loader import (
    LoadReport,
    OutcomeStatus,
    ScriptDescriptor,
    ScriptLoader,
    ScriptOutcome,
)
from docscript.runtime.python_interpreter import PythonInterpreter
from docscript.runtime.sessions import Available, LanguageSession, SessionRegistry, Unavailable
from docscript.runtime.urls import URLOpener, resolve_url
from docscript.runtime.window import Window

__all__ = [
    "BundleNamespace",
    "EntryPointRole",
    "NativeHandlerBundle",
    "load_bundles",
    "parse_manifest",
    "is_dynamic_document",
    "is_dynamic_element",
    "load_extensions",
    "InlineHandlerListener",
    "LifecycleDispatcher",
    "scoped_listener",
    "ScriptingEnvironment",
    "Interpreter",
    "InterpreterPool",
    "ScriptEventWrapper",
    "default_interpreter_pool",
    "LoadReport",
    "OutcomeStatus",
    "ScriptDescriptor",
    "ScriptLoader",
    "ScriptOutcome",
    "PythonInterpreter",
    "Available",
    "LanguageSession",
    "SessionRegistry",
    "Unavailable",
    "URLOpener",
    "resolve_url",
    "Window",
]
