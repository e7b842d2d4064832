"""
docscript v1.1 - Scripting activation for SVG-like documents

Decides whether a document is dynamic, runs its script elements once in
document order, keeps one interpreter session per language and drives the
load, resize, scroll and zoom events through the scripting layer.

Exports:
- is_dynamic_document / is_dynamic_element: Classifier predicates
- ScriptingEnvironment: Per-document scripting facade
- ScriptingConfig / load_config: Configuration
- ScriptSecurityPolicy: Default origin-based security policy
"""

from docscript.config import ScriptingConfig, ScriptOrigin, load_config
from docscript.errors import (
    BundleMetadataError,
    ConfigError,
    DocScriptError,
    DocumentParseError,
    ErrorKind,
    InterpreterException,
    NativeHandlerError,
    ResourceUnavailableError,
    ScriptSecurityError,
)
from docscript.governance import LoggingErrorReporter, ScriptSecurityPolicy
from docscript.runtime import (
    LoadReport,
    ScriptingEnvironment,
    Window,
    is_dynamic_document,
    is_dynamic_element,
)

__version__ = "1.1.0"

__all__ = [
    "ScriptingConfig",
    "ScriptOrigin",
    "load_config",
    "BundleMetadataError",
    "ConfigError",
    "DocScriptError",
    "DocumentParseError",
    "ErrorKind",
    "InterpreterException",
    "NativeHandlerError",
    "ResourceUnavailableError",
    "ScriptSecurityError",
    "LoggingErrorReporter",
    "ScriptSecurityPolicy",
    "LoadReport",
    "ScriptingEnvironment",
    "Window",
    "is_dynamic_document",
    "is_dynamic_element",
    "__version__",
]
