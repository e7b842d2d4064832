"""
docscript document parser

Builds the reference DOM from XML text with expat, keeping namespace
information, CDATA sections and the source line of every element.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple, Union
from xml.parsers import expat

from docscript.dom.nodes import Document, Element, Node, NodeType
from docscript.errors import DocumentParseError

_SEP = " "


def _split_name(name: str) -> Tuple[Optional[str], str, Optional[str]]:
    """Split an expat 'uri local prefix' name into its parts."""
    parts = name.split(_SEP)
    if len(parts) == 3:
        return parts[0], parts[1], parts[2]
    if len(parts) == 2:
        return parts[0], parts[1], None
    return None, parts[0], None


class _TreeBuilder:
    def __init__(self, url: str):
        self.document = Document(url)
        self.stack: List[Node] = [self.document]
        self.in_cdata = False
        self.parser = expat.ParserCreate(namespace_separator=_SEP)
        self.parser.namespace_prefixes = True
        self.parser.buffer_text = True
        self.parser.StartElementHandler = self.start_element
        self.parser.EndElementHandler = self.end_element
        self.parser.CharacterDataHandler = self.characters
        self.parser.StartCdataSectionHandler = self.start_cdata
        self.parser.EndCdataSectionHandler = self.end_cdata
        self.parser.CommentHandler = self.comment

    def start_element(self, name, attrs):
        ns, local, prefix = _split_name(name)
        element = Element(ns, local, prefix, self.document, self.parser.CurrentLineNumber)
        for attr_name, value in attrs.items():
            attr_ns, attr_local, _ = _split_name(attr_name)
            element.set_attribute_ns(attr_ns, attr_local, value)
        self.stack[-1].append_child(element)
        self.stack.append(element)

    def end_element(self, name):
        self.stack.pop()

    def characters(self, data):
        parent = self.stack[-1]
        if parent is self.document:
            return
        last = parent.last_child
        wanted = NodeType.CDATA_SECTION if self.in_cdata else NodeType.TEXT
        if last is not None and last.node_type == wanted:
            last.data += data
            return
        if self.in_cdata:
            parent.append_child(self.document.create_cdata_section(data))
        else:
            parent.append_child(self.document.create_text_node(data))

    def start_cdata(self):
        self.in_cdata = True
        parent = self.stack[-1]
        if parent is not self.document:
            parent.append_child(self.document.create_cdata_section(""))

    def end_cdata(self):
        self.in_cdata = False

    def comment(self, data):
        parent = self.stack[-1]
        parent.append_child(self.document.create_comment(data))


def parse_document(text: Union[str, bytes], url: str = "") -> Document:
    """
    Parse XML markup into a Document.

    Args:
        text: Markup as str or bytes
        url: Identifying URL of the document (used as its base URI)

    Raises:
        DocumentParseError: On malformed markup
    """
    builder = _TreeBuilder(url)
    try:
        builder.parser.Parse(text, True)
    except expat.ExpatError as e:
        raise DocumentParseError(f"Malformed document {url or '<string>'}: {e}",
                                 line=e.lineno) from e
    if builder.document.document_element is None:
        raise DocumentParseError(f"Document {url or '<string>'} has no root element")
    return builder.document


def parse_file(path: Union[str, Path]) -> Document:
    """Parse a file; the document URL is the file's URI."""
    file_path = Path(path).resolve()
    with open(file_path, "rb") as f:
        data = f.read()
    return parse_document(data, file_path.as_uri())
