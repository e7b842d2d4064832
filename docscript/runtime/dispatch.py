"""
docscript Lifecycle Event Dispatcher

Load events go bottom-up: every child element receives its load event
before its parent. An element's inline onload handler runs in the default
language through a listener that exists only for the duration of that one
dispatch.

Resize, scroll and zoom are document-level events fired once at the root.
"""

from __future__ import annotations

import io
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator, Optional

from docscript.constants import (
    ALTERNATE_EVENT_NAME,
    EVENT_NAME,
    EVENT_SCRIPT_DESCRIPTION,
    LOAD_EVENT_TYPES,
    ONLOAD_ATTRIBUTE,
    RESIZE_EVENT_TYPES,
    SCROLL_EVENT_TYPES,
    SVG_EVENTS_INTERFACE,
    XML_EVENTS_NAMESPACE_URI,
    ZOOM_EVENT_TYPES,
)
from docscript.dom.nodes import NodeType
from docscript.errors import InterpreterException, ScriptSecurityError
from docscript.runtime.interpreters import Interpreter, ScriptEventWrapper

if TYPE_CHECKING:
    from docscript.runtime.environment import ScriptingEnvironment

logger = logging.getLogger(__name__)


@contextmanager
def scoped_listener(target: Any, namespace_uri: Optional[str], event_type: str,
                    listener: Any) -> Iterator[Any]:
    """Register listener on target for the duration of the block."""
    target.add_event_listener_ns(namespace_uri, event_type, listener, False)
    try:
        yield listener
    finally:
        target.remove_event_listener_ns(namespace_uri, event_type, listener, False)


class InlineHandlerListener:
    """Evaluates an event-attribute handler with the event bound as 'event' and 'evt'."""

    def __init__(self, environment: "ScriptingEnvironment", interpreter: Interpreter,
                 script: str, description: str):
        self.environment = environment
        self.interpreter = interpreter
        self.script = script
        self.description = description

    def handle_event(self, event: Any) -> None:
        if isinstance(event, ScriptEventWrapper):
            event = event.get_event_object()
        self.interpreter.bind_object(EVENT_NAME, event)
        self.interpreter.bind_object(ALTERNATE_EVENT_NAME, event)
        try:
            self.interpreter.evaluate(io.StringIO(self.script), self.description)
        except InterpreterException as e:
            self.environment.handle_interpreter_exception(e)
        except ScriptSecurityError as e:
            self.environment.handle_security_exception(e)
        except OSError as e:
            self.environment.reporter.display_error(e)


class LifecycleDispatcher:
    """Fires the document lifecycle events of one scripting environment."""

    def __init__(self, environment: "ScriptingEnvironment"):
        self.environment = environment
        self._check_pending = True
        self._handlers_denied = False

    @property
    def document(self) -> Any:
        return self.environment.document

    def _event_type(self, types) -> str:
        return types[0] if self.environment.is_svg12 else types[1]

    def _create_event(self, event_type: str) -> Any:
        event = self.document.create_event(SVG_EVENTS_INTERFACE)
        event.init_event_ns(XML_EVENTS_NAMESPACE_URI, event_type, False, False)
        return event

    def dispatch_load(self, root: Any = None) -> None:
        """Dispatch the load event to root and its descendants, children first."""
        if root is None:
            root = self.document.document_element
        if root is None:
            return
        self._check_pending = True
        self._handlers_denied = False
        self._dispatch_load(root, self._event_type(LOAD_EVENT_TYPES))

    def _dispatch_load(self, element: Any, event_type: str) -> None:
        n = element.first_child
        while n is not None:
            if n.node_type == NodeType.ELEMENT:
                self._dispatch_load(n, event_type)
            n = n.next_sibling

        event = self._create_event(event_type)

        script = element.get_attribute_ns(None, ONLOAD_ATTRIBUTE)
        if not script or self._handlers_denied:
            element.dispatch_event(event)
            return

        interpreter = self.environment.get_interpreter()
        if interpreter is None:
            element.dispatch_event(event)
            return

        if self._check_pending:
            self._check_pending = False
            try:
                self.environment.check_compatible_script_url(
                    self.environment.default_language, self.environment.doc_url)
            except ScriptSecurityError as e:
                self.environment.handle_security_exception(e)
                self._handlers_denied = True
                element.dispatch_event(event)
                return

        description = EVENT_SCRIPT_DESCRIPTION.format(
            self.environment.doc_url, ONLOAD_ATTRIBUTE, getattr(element, "line_number", 0))
        listener = InlineHandlerListener(self.environment, interpreter, script, description)
        with scoped_listener(element, XML_EVENTS_NAMESPACE_URI, event_type, listener):
            element.dispatch_event(event)

    def dispatch_document_event(self, event_type: str) -> None:
        """Fire a non-bubbling, non-cancelable event at the root element."""
        root = self.document.document_element
        if root is None:
            return
        logger.debug("Dispatching %s to %s", event_type, root)
        root.dispatch_event(self._create_event(event_type))

    def dispatch_zoom(self) -> None:
        self.dispatch_document_event(self._event_type(ZOOM_EVENT_TYPES))

    def dispatch_scroll(self) -> None:
        self.dispatch_document_event(self._event_type(SCROLL_EVENT_TYPES))

    def dispatch_resize(self) -> None:
        self.dispatch_document_event(self._event_type(RESIZE_EVENT_TYPES))
