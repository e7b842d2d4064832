"""
docscript Dynamic-Document Classifier

Decides whether a document needs a live scripting environment at all.
Pure tree scans; both predicates stop at the first hit.

Extensions (objects with is_dynamic_element(element) -> bool) are consulted
before the built-in attribute checks so that custom element vocabularies can
mark their own elements dynamic.
"""

from __future__ import annotations

import logging
from importlib.metadata import entry_points
from typing import Any, Iterable, List, Protocol, Sequence

from docscript.constants import (
    DOCUMENT_EVENT_ATTRIBUTES,
    ELEMENT_EVENT_ATTRIBUTES,
    SVG_NAMESPACE_URI,
)
from docscript.dom.nodes import NodeType

logger = logging.getLogger(__name__)

EXTENSION_ENTRY_POINT_GROUP = "docscript.extensions"


class DynamicElementExtension(Protocol):
    def is_dynamic_element(self, element: Any) -> bool: ...


def _declares_any(element: Any, attributes: Iterable[str]) -> bool:
    return any(element.get_attribute_ns(None, name) for name in attributes)


def is_dynamic_document(document: Any,
                        extensions: Sequence[DynamicElementExtension] = ()) -> bool:
    """Tell whether the given document needs scripting."""
    root = document.document_element
    if root is None or root.namespace_uri != SVG_NAMESPACE_URI:
        return False
    if _declares_any(root, DOCUMENT_EVENT_ATTRIBUTES):
        return True
    return is_dynamic_element(root, extensions)


def is_dynamic_element(element: Any,
                       extensions: Sequence[DynamicElementExtension] = ()) -> bool:
    """Tell whether element or any of its descendants is dynamic."""
    for extension in extensions:
        if extension.is_dynamic_element(element):
            return True

    if element.namespace_uri == SVG_NAMESPACE_URI:
        if _declares_any(element, ELEMENT_EVENT_ATTRIBUTES):
            return True

    n = element.first_child
    while n is not None:
        if n.node_type == NodeType.ELEMENT and is_dynamic_element(n, extensions):
            return True
        n = n.next_sibling
    return False


def load_extensions(group: str = EXTENSION_ENTRY_POINT_GROUP) -> List[DynamicElementExtension]:
    """Instantiate the extensions registered under the given entry-point group."""
    extensions: List[DynamicElementExtension] = []
    for ep in entry_points(group=group):
        try:
            factory = ep.load()
            extensions.append(factory())
        except Exception:
            logger.exception("Could not load extension %s", ep.name)
    return extensions
