"""
docscript Script Discovery & Execution Engine

One pass over a document's script elements:

1. collect  - every SVG <script> element in document order
2. validate - security policy per element; denied elements are skipped
3. prepare  - native bundles share one import namespace
4. execute  - document order; read and evaluation failures end the pass,
              sandbox faults only skip the element

Key classes:
- ScriptDescriptor: What discovery learned about one script element
- OutcomeStatus / ScriptOutcome: Per-element result of the pass
- LoadReport: Pass summary returned by ScriptingEnvironment.load_scripts
- ScriptLoader: Runs the pass
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from docscript.constants import (
    HREF_ATTRIBUTE,
    INLINE_SCRIPT_DESCRIPTION,
    SCRIPT_TAG,
    SVG_NAMESPACE_URI,
    TYPE_ATTRIBUTE,
    XLINK_NAMESPACE_URI,
)
from docscript.dom.nodes import NodeType
from docscript.errors import (
    ErrorKind,
    InterpreterException,
    NativeHandlerError,
    ResourceUnavailableError,
    ScriptSecurityError,
    classify_error,
)
from docscript.runtime.bundles import EntryPointRole, NativeHandlerBundle, load_bundles
from docscript.runtime.sessions import Unavailable
from docscript.runtime.urls import resolve_url

if TYPE_CHECKING:
    from docscript.runtime.environment import ScriptingEnvironment

logger = logging.getLogger(__name__)


class OutcomeStatus(str, Enum):
    EXECUTED = "executed"
    SKIPPED = "skipped"
    FAILED = "failed"
    ABORTED = "aborted"


@dataclass
class ScriptDescriptor:
    """A discovered script element."""
    element: Any
    script_type: str
    is_native: bool
    href: str
    script_url: Optional[str]
    valid: bool = True
    error: Optional[BaseException] = None

    @property
    def line_number(self) -> int:
        return getattr(self.element, "line_number", 0) or 0

    @property
    def inline_source(self) -> Optional[str]:
        """Direct text and CDATA children concatenated; None when the element is empty."""
        if self.element.first_child is None:
            return None
        parts = []
        n = self.element.first_child
        while n is not None:
            if n.node_type in (NodeType.TEXT, NodeType.CDATA_SECTION):
                parts.append(n.node_value)
            n = n.next_sibling
        return "".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.script_type,
            "native": self.is_native,
            "href": self.href,
            "url": self.script_url,
            "line": self.line_number,
            "valid": self.valid,
            "error": str(self.error) if self.error is not None else None,
        }


@dataclass
class ScriptOutcome:
    """Result of one script element."""
    descriptor: ScriptDescriptor
    status: OutcomeStatus
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    @property
    def continues(self) -> bool:
        return self.status != OutcomeStatus.ABORTED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "script": self.descriptor.to_dict(),
            "status": self.status.value,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "message": self.message,
        }


@dataclass
class LoadReport:
    """Summary of one load pass. Informational; errors go to the reporter."""
    outcomes: List[ScriptOutcome] = field(default_factory=list)
    discovered: int = 0

    @property
    def aborted(self) -> bool:
        return any(o.status == OutcomeStatus.ABORTED for o in self.outcomes)

    @property
    def not_run(self) -> int:
        """Elements never reached because the pass was aborted."""
        return self.discovered - len(self.outcomes)

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "discovered": self.discovered,
            "aborted": self.aborted,
            "not_run": self.not_run,
            "counts": {s.value: self.count(s) for s in OutcomeStatus},
            "outcomes": [o.to_dict() for o in self.outcomes],
        }


def _failure(descriptor: ScriptDescriptor, status: OutcomeStatus,
             exc: BaseException) -> ScriptOutcome:
    return ScriptOutcome(descriptor, status, classify_error(exc), str(exc))


class ScriptLoader:
    """Runs one discovery and execution pass for a scripting environment."""

    def __init__(self, environment: "ScriptingEnvironment"):
        self.environment = environment
        self.document = environment.document
        self.config = environment.config
        self.reporter = environment.reporter

    def collect(self) -> List[ScriptDescriptor]:
        """Every SVG script element, in document order."""
        descriptors = []
        for element in self.document.get_elements_by_tag_name_ns(SVG_NAMESPACE_URI, SCRIPT_TAG):
            script_type = element.get_attribute_ns(None, TYPE_ATTRIBUTE)
            if not script_type:
                script_type = self.config.default_script_type
            href = (element.get_attribute_ns(XLINK_NAMESPACE_URI, HREF_ATTRIBUTE)
                    or element.get_attribute_ns(None, HREF_ATTRIBUTE))
            descriptors.append(ScriptDescriptor(
                element=element,
                script_type=script_type,
                is_native=script_type == self.config.native_script_type,
                href=href,
                script_url=None,
            ))
        logger.debug("Discovered %d script elements in %s", len(descriptors), self.document.url)
        return descriptors

    def validate(self, descriptors: List[ScriptDescriptor]) -> None:
        """Resolve URLs and run the security check; failures are reported and skipped."""
        for d in descriptors:
            try:
                d.script_url = resolve_url(d.element.base_uri, d.href)
            except ValueError as e:
                error = ResourceUnavailableError(d.href, str(e))
                self._invalidate(d, error)
                continue
            try:
                self.environment.check_compatible_script_url(d.script_type, d.script_url)
            except ScriptSecurityError as e:
                self._invalidate(d, e)

    def _invalidate(self, descriptor: ScriptDescriptor, error: BaseException) -> None:
        descriptor.valid = False
        descriptor.error = error
        logger.debug("Script at line %d refused: %s", descriptor.line_number, error)
        self.reporter.display_error(error)

    def discover(self) -> List[ScriptDescriptor]:
        descriptors = self.collect()
        self.validate(descriptors)
        return descriptors

    def prepare_bundles(self, descriptors: List[ScriptDescriptor]) -> Optional[NativeHandlerBundle]:
        urls = [d.script_url for d in descriptors if d.valid and d.is_native]
        if not urls:
            return None
        return load_bundles(urls, self.environment.doc_url, self.environment.opener, self.reporter)

    def run(self) -> LoadReport:
        """Discover, validate and execute every script element once."""
        descriptors = self.discover()
        report = LoadReport(discovered=len(descriptors))
        bundle = self.prepare_bundles(descriptors)
        try:
            window = self.environment.get_window()
            for d in descriptors:
                outcome = self.execute(d, bundle, window)
                report.outcomes.append(outcome)
                if not outcome.continues:
                    logger.debug("Load pass aborted at line %d", d.line_number)
                    break
        finally:
            if bundle is not None:
                bundle.close()
        return report

    def execute(self, descriptor: ScriptDescriptor, bundle: Optional[NativeHandlerBundle],
                window: Any) -> ScriptOutcome:
        if not descriptor.valid:
            return _failure(descriptor, OutcomeStatus.SKIPPED, descriptor.error)
        if descriptor.is_native:
            return self._execute_native(descriptor, bundle, window)
        return self._execute_interpreted(descriptor)

    def _execute_native(self, descriptor: ScriptDescriptor,
                        bundle: Optional[NativeHandlerBundle], window: Any) -> ScriptOutcome:
        if bundle is None:
            return ScriptOutcome(descriptor, OutcomeStatus.SKIPPED)

        handler_name = bundle.entry_point(descriptor.script_url, EntryPointRole.SCRIPT_HANDLER)
        initializer_name = bundle.entry_point(descriptor.script_url,
                                              EntryPointRole.EVENT_LISTENER_INITIALIZER)
        if handler_name is None and initializer_name is None:
            return ScriptOutcome(descriptor, OutcomeStatus.SKIPPED)

        name = handler_name or initializer_name
        try:
            if handler_name is not None:
                name = handler_name
                handler = bundle.instantiate(handler_name)
                handler.run(self.document, window)
            if initializer_name is not None:
                name = initializer_name
                initializer = bundle.instantiate(initializer_name)
                initializer.initialize_event_listeners(self.document)
        except NativeHandlerError as e:
            self.reporter.display_error(e)
            return _failure(descriptor, OutcomeStatus.FAILED, e)
        except Exception as e:
            error = NativeHandlerError(name, e)
            self.reporter.display_error(error)
            return _failure(descriptor, OutcomeStatus.FAILED, error)
        return ScriptOutcome(descriptor, OutcomeStatus.EXECUTED)

    def _execute_interpreted(self, descriptor: ScriptDescriptor) -> ScriptOutcome:
        lookup = self.environment.sessions.lookup(descriptor.script_type)
        if isinstance(lookup, Unavailable):
            return ScriptOutcome(descriptor, OutcomeStatus.SKIPPED, ErrorKind.UNSUPPORTED_LANGUAGE,
                                 f"No interpreter for '{descriptor.script_type}'")
        interpreter = lookup.session.interpreter

        try:
            if descriptor.href:
                source = self.environment.opener.open_text(descriptor.script_url)
                description = descriptor.href
            else:
                text = descriptor.inline_source
                if text is None:
                    return ScriptOutcome(descriptor, OutcomeStatus.SKIPPED)
                source = io.StringIO(text)
                description = INLINE_SCRIPT_DESCRIPTION.format(
                    self.environment.doc_url,
                    f"<{descriptor.element.node_name}>",
                    descriptor.line_number,
                )
            with source:
                interpreter.evaluate(source, description)
        except InterpreterException as e:
            self.environment.handle_interpreter_exception(e)
            return _failure(descriptor, OutcomeStatus.ABORTED, e)
        except ScriptSecurityError as e:
            self.environment.handle_security_exception(e)
            return _failure(descriptor, OutcomeStatus.FAILED, e)
        except OSError as e:
            self.reporter.display_error(e)
            return _failure(descriptor, OutcomeStatus.ABORTED, e)
        logger.debug("Executed %s script at line %d", descriptor.script_type, descriptor.line_number)
        return ScriptOutcome(descriptor, OutcomeStatus.EXECUTED)
