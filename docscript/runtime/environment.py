"""
docscript Scripting Environment

The per-document facade. A host builds one ScriptingEnvironment for each
dynamic document, calls load_scripts() once, then dispatch_svg_load_event(),
and closes the environment when the document goes away.

Example:
    document = parse_file("chart.svg")
    if is_dynamic_document(document):
        with ScriptingEnvironment(document) as env:
            env.load_scripts()
            env.dispatch_svg_load_event()
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from docscript.config import ScriptingConfig
from docscript.constants import (
    CONTENT_SCRIPT_TYPE_ATTRIBUTE,
    SVG12_VERSION,
    VERSION_ATTRIBUTE,
    WINDOW_NAME,
)
from docscript.errors import InterpreterException, ScriptSecurityError
from docscript.governance.policy import ScriptSecurityPolicy, SecurityPolicy
from docscript.governance.reporting import ErrorReporter, LoggingErrorReporter
from docscript.runtime.classifier import DynamicElementExtension
from docscript.runtime.dispatch import LifecycleDispatcher
from docscript.runtime.interpreters import Interpreter, InterpreterPool, default_interpreter_pool
from docscript.runtime.loader import LoadReport, ScriptDescriptor, ScriptLoader
from docscript.runtime.sessions import SessionRegistry
from docscript.runtime.urls import URLOpener
from docscript.runtime.window import Window

logger = logging.getLogger(__name__)


class ScriptingEnvironment:
    """
    Scripting state of one document.

    Owns the language session registry, the shared window and the default
    interpreter; all of them live until close().
    """

    def __init__(self, document: Any, *,
                 config: Optional[ScriptingConfig] = None,
                 interpreter_pool: Optional[InterpreterPool] = None,
                 security: Optional[SecurityPolicy] = None,
                 reporter: Optional[ErrorReporter] = None,
                 extensions: Optional[Sequence[DynamicElementExtension]] = None,
                 opener: Optional[URLOpener] = None):
        self.document = document
        self.config = config or ScriptingConfig()
        self.interpreter_pool = interpreter_pool or default_interpreter_pool()
        self.security = security or ScriptSecurityPolicy(self.config)
        self.reporter = reporter or LoggingErrorReporter()
        self.extensions: List[DynamicElementExtension] = list(extensions or [])
        self.opener = opener or URLOpener(timeout=self.config.http_timeout)

        self.sessions = SessionRegistry(
            provider=lambda language: self.interpreter_pool.create_interpreter(document, language),
            initializer=self.initialize_environment,
        )
        self.dispatcher = LifecycleDispatcher(self)
        self._window: Optional[Window] = None
        self._default_interpreter: Optional[Interpreter] = None
        self._default_looked_up = False

    @property
    def doc_url(self) -> str:
        return getattr(self.document, "url", "") or ""

    @property
    def is_svg12(self) -> bool:
        if self.config.svg12 is not None:
            return self.config.svg12
        root = self.document.document_element
        if root is None:
            return False
        return root.get_attribute_ns(None, VERSION_ATTRIBUTE) == SVG12_VERSION

    @property
    def default_language(self) -> str:
        """Language of inline event attributes: the root's contentScriptType, else the configured default."""
        root = self.document.document_element
        if root is not None:
            language = root.get_attribute_ns(None, CONTENT_SCRIPT_TYPE_ATTRIBUTE)
            if language:
                return language
        return self.config.default_script_type

    def create_window(self, interpreter: Optional[Interpreter] = None,
                      language: Optional[str] = None) -> Window:
        """Build the global object for a session. Hosts override this."""
        return Window(self, interpreter, language)

    def register_window_object(self, window: Window) -> None:
        """Hook run once for each window: every session's and the shared one."""

    def initialize_environment(self, interpreter: Interpreter, language: str) -> Window:
        window = self.create_window(interpreter, language)
        interpreter.bind_object(WINDOW_NAME, window)
        self.register_window_object(window)
        return window

    def get_window(self) -> Window:
        """The window shared with native handlers."""
        if self._window is None:
            self._window = self.create_window()
            self.register_window_object(self._window)
        return self._window

    def get_interpreter(self, language: Optional[str] = None) -> Optional[Interpreter]:
        """Interpreter for language, or for the default language; None if unsupported."""
        if language is not None and language != self.default_language:
            session = self.sessions.get_session(language)
            return session.interpreter if session else None
        if not self._default_looked_up:
            self._default_looked_up = True
            session = self.sessions.get_session(self.default_language)
            self._default_interpreter = session.interpreter if session else None
        return self._default_interpreter

    def check_compatible_script_url(self, script_type: str, script_url: Optional[str]) -> None:
        """Raise ScriptSecurityError if script_url may not be loaded into this document."""
        self.security.check_load_script(script_type, script_url, self.doc_url or None)

    def handle_interpreter_exception(self, exc: InterpreterException) -> None:
        self.reporter.display_error(exc.unwrap())

    def handle_security_exception(self, exc: ScriptSecurityError) -> None:
        self.reporter.display_error(exc)

    def discover_scripts(self) -> List[ScriptDescriptor]:
        """Script elements with their validation status, without running anything."""
        return ScriptLoader(self).discover()

    def load_scripts(self) -> LoadReport:
        """Run every script element of the document once, in document order."""
        report = ScriptLoader(self).run()
        logger.debug("Load pass for %s: %s", self.doc_url,
                     report.to_dict()["counts"])
        return report

    def dispatch_svg_load_event(self) -> None:
        self.dispatcher.dispatch_load()

    def dispatch_zoom_event(self) -> None:
        self.dispatcher.dispatch_zoom()

    def dispatch_scroll_event(self) -> None:
        self.dispatcher.dispatch_scroll()

    def dispatch_resize_event(self) -> None:
        self.dispatcher.dispatch_resize()

    def close(self) -> None:
        """Dispose every language session."""
        self.sessions.close()
        self._window = None
        self._default_interpreter = None
        self._default_looked_up = False

    def __enter__(self) -> "ScriptingEnvironment":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
