"""
docscript error taxonomy

Key classes:
- ErrorKind: Classification used by the reporter and by load outcomes
- DocScriptError: Base exception
- ScriptSecurityError: Policy denial or sandbox fault
- InterpreterException: Interpreter-level evaluation failure
- ResourceUnavailableError: Script or bundle could not be opened/read
- BundleMetadataError: Missing or malformed bundle manifest
- NativeHandlerError: Native entry point could not be instantiated or run
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Error classes reported by the scripting environment."""
    POLICY_DENIED = "POLICY_DENIED"
    RESOURCE_UNAVAILABLE = "RESOURCE_UNAVAILABLE"
    EVALUATION_FAILED = "EVALUATION_FAILED"
    SANDBOX_VIOLATION = "SANDBOX_VIOLATION"
    UNSUPPORTED_LANGUAGE = "UNSUPPORTED_LANGUAGE"
    BUNDLE_METADATA_MALFORMED = "BUNDLE_METADATA_MALFORMED"
    HANDLER_FAILED = "HANDLER_FAILED"


class DocScriptError(Exception):
    """Base class for docscript errors."""
    kind: Optional[ErrorKind] = None


class ScriptSecurityError(DocScriptError):
    """
    Raised when a script may not be loaded or run.

    Security policies raise it from check_load_script (kind POLICY_DENIED);
    sandboxed interpreters raise it during evaluation with
    kind SANDBOX_VIOLATION.
    """
    kind = ErrorKind.POLICY_DENIED

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.POLICY_DENIED):
        super().__init__(message)
        self.kind = kind


class InterpreterException(DocScriptError):
    """Evaluation failure raised by an interpreter, wrapping the original error."""
    kind = ErrorKind.EVALUATION_FAILED

    def __init__(self, message: str, exception: Optional[BaseException] = None,
                 line: Optional[int] = None):
        super().__init__(message)
        self.exception = exception
        self.line = line

    def unwrap(self) -> BaseException:
        """Return the wrapped error if present, else self."""
        return self.exception if self.exception is not None else self


class ResourceUnavailableError(DocScriptError, OSError):
    """A script or bundle URL could not be opened or read."""
    kind = ErrorKind.RESOURCE_UNAVAILABLE

    def __init__(self, url: str, reason: str = ""):
        message = f"Cannot read {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.url = url


class BundleMetadataError(DocScriptError):
    """Bundle manifest is missing or malformed."""
    kind = ErrorKind.BUNDLE_METADATA_MALFORMED

    def __init__(self, bundle_url: str, reason: str):
        super().__init__(f"Bad bundle metadata in {bundle_url}: {reason}")
        self.bundle_url = bundle_url


class NativeHandlerError(DocScriptError):
    """A native entry point could not be loaded, instantiated or invoked."""
    kind = ErrorKind.HANDLER_FAILED

    def __init__(self, name: str, exception: Optional[BaseException] = None):
        detail = f": {exception}" if exception is not None else ""
        super().__init__(f"Native handler '{name}' failed{detail}")
        self.name = name
        self.exception = exception


class DocumentParseError(DocScriptError):
    """Markup could not be parsed into a document."""

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.line = line


class ConfigError(DocScriptError):
    """Configuration file is unreadable or invalid."""


def classify_error(exc: BaseException) -> ErrorKind:
    """Map an exception to its ErrorKind; unknown errors count as evaluation failures."""
    kind = getattr(exc, "kind", None)
    if isinstance(kind, ErrorKind):
        return kind
    if isinstance(exc, OSError):
        return ErrorKind.RESOURCE_UNAVAILABLE
    return ErrorKind.EVALUATION_FAILED
