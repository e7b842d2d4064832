"""
docscript reference DOM

A host-side collaborator: the scripting core only relies on the traversal,
attribute and event surface of these classes, so any tree exposing the same
surface can be used instead.
"""

from docscript.dom.events import Event, EventPhase, EventTarget
from docscript.dom.nodes import (
    CDATASection,
    Comment,
    Document,
    Element,
    Node,
    NodeType,
    Text,
)
from docscript.dom.parser import parse_document, parse_file

__all__ = [
    "Event",
    "EventPhase",
    "EventTarget",
    "CDATASection",
    "Comment",
    "Document",
    "Element",
    "Node",
    "NodeType",
    "Text",
    "parse_document",
    "parse_file",
]
