"""
docscript reference DOM

A small namespace-aware tree with the traversal surface the scripting core
relies on (first_child/next_sibling, attribute lookup by namespace, node
type, base URI, source line numbers).

Key classes:
- Node: Base tree node, also an EventTarget
- Element: Namespaced element with attributes
- Text, CDATASection, Comment: Character data nodes
- Document: Root handle owning the URL and the document element
"""

from __future__ import annotations

from enum import IntEnum
from typing import Dict, Iterator, List, Optional, Tuple
from urllib.parse import urljoin

from docscript.constants import XML_NAMESPACE_URI
from docscript.dom.events import Event, EventTarget


class NodeType(IntEnum):
    ELEMENT = 1
    TEXT = 3
    CDATA_SECTION = 4
    COMMENT = 8
    DOCUMENT = 9


class Node(EventTarget):
    """Base class for all tree nodes."""

    node_type: NodeType

    def __init__(self, owner_document: Optional["Document"] = None):
        self.owner_document = owner_document
        self.parent_node: Optional[Node] = None
        self.first_child: Optional[Node] = None
        self.last_child: Optional[Node] = None
        self.previous_sibling: Optional[Node] = None
        self.next_sibling: Optional[Node] = None

    @property
    def node_name(self) -> str:
        raise NotImplementedError

    @property
    def node_value(self) -> Optional[str]:
        return None

    @property
    def child_nodes(self) -> List["Node"]:
        return list(self.iter_children())

    def iter_children(self) -> Iterator["Node"]:
        n = self.first_child
        while n is not None:
            yield n
            n = n.next_sibling

    def append_child(self, child: "Node") -> "Node":
        if child.parent_node is not None:
            child.parent_node.remove_child(child)
        child.parent_node = self
        child.previous_sibling = self.last_child
        child.next_sibling = None
        if self.last_child is not None:
            self.last_child.next_sibling = child
        else:
            self.first_child = child
        self.last_child = child
        return child

    def remove_child(self, child: "Node") -> "Node":
        if child.parent_node is not self:
            raise ValueError("Node is not a child of this node")
        if child.previous_sibling is not None:
            child.previous_sibling.next_sibling = child.next_sibling
        else:
            self.first_child = child.next_sibling
        if child.next_sibling is not None:
            child.next_sibling.previous_sibling = child.previous_sibling
        else:
            self.last_child = child.previous_sibling
        child.parent_node = None
        child.previous_sibling = None
        child.next_sibling = None
        return child

    def _event_parent(self) -> Optional[EventTarget]:
        return self.parent_node

    @property
    def base_uri(self) -> str:
        if self.parent_node is not None:
            return self.parent_node.base_uri
        if self.owner_document is not None:
            return self.owner_document.url
        return ""


class CharacterData(Node):
    def __init__(self, data: str, owner_document: Optional["Document"] = None):
        super().__init__(owner_document)
        self.data = data

    @property
    def node_value(self) -> Optional[str]:
        return self.data


class Text(CharacterData):
    node_type = NodeType.TEXT

    @property
    def node_name(self) -> str:
        return "#text"


class CDATASection(Text):
    node_type = NodeType.CDATA_SECTION

    @property
    def node_name(self) -> str:
        return "#cdata-section"


class Comment(CharacterData):
    node_type = NodeType.COMMENT

    @property
    def node_name(self) -> str:
        return "#comment"


class Element(Node):
    """Namespaced element. Missing attributes read as the empty string."""

    node_type = NodeType.ELEMENT

    def __init__(self, namespace_uri: Optional[str], local_name: str,
                 prefix: Optional[str] = None,
                 owner_document: Optional["Document"] = None,
                 line_number: int = 0):
        super().__init__(owner_document)
        self.namespace_uri = namespace_uri
        self.local_name = local_name
        self.prefix = prefix
        self.line_number = line_number
        self._attributes: Dict[Tuple[Optional[str], str], str] = {}

    @property
    def node_name(self) -> str:
        if self.prefix:
            return f"{self.prefix}:{self.local_name}"
        return self.local_name

    tag_name = node_name

    @property
    def attributes(self) -> Dict[Tuple[Optional[str], str], str]:
        return dict(self._attributes)

    def get_attribute_ns(self, namespace_uri: Optional[str], local_name: str) -> str:
        return self._attributes.get((namespace_uri, local_name), "")

    def has_attribute_ns(self, namespace_uri: Optional[str], local_name: str) -> bool:
        return (namespace_uri, local_name) in self._attributes

    def set_attribute_ns(self, namespace_uri: Optional[str], local_name: str, value: str) -> None:
        self._attributes[(namespace_uri, local_name)] = value

    def remove_attribute_ns(self, namespace_uri: Optional[str], local_name: str) -> None:
        self._attributes.pop((namespace_uri, local_name), None)

    def get_attribute(self, name: str) -> str:
        return self.get_attribute_ns(None, name)

    def set_attribute(self, name: str, value: str) -> None:
        self.set_attribute_ns(None, name, value)

    @property
    def base_uri(self) -> str:
        parent_base = super().base_uri
        xml_base = self.get_attribute_ns(XML_NAMESPACE_URI, "base")
        if xml_base:
            return urljoin(parent_base, xml_base) if parent_base else xml_base
        return parent_base

    def child_elements(self) -> Iterator["Element"]:
        for n in self.iter_children():
            if n.node_type == NodeType.ELEMENT:
                yield n

    def iter_elements(self) -> Iterator["Element"]:
        """Yield this element and its descendants in document order."""
        yield self
        for child in self.child_elements():
            yield from child.iter_elements()

    @property
    def text_content(self) -> str:
        parts = []
        for n in self.iter_children():
            if n.node_type in (NodeType.TEXT, NodeType.CDATA_SECTION):
                parts.append(n.data)
            elif n.node_type == NodeType.ELEMENT:
                parts.append(n.text_content)
        return "".join(parts)

    def __repr__(self) -> str:
        return f"<Element {self.node_name} line={self.line_number}>"


class Document(Node):
    """Root of a tree; owns the identifying URL."""

    node_type = NodeType.DOCUMENT

    def __init__(self, url: str = ""):
        super().__init__(None)
        self.url = url

    @property
    def node_name(self) -> str:
        return "#document"

    @property
    def base_uri(self) -> str:
        return self.url

    @property
    def document_element(self) -> Optional[Element]:
        for n in self.iter_children():
            if n.node_type == NodeType.ELEMENT:
                return n
        return None

    def create_element_ns(self, namespace_uri: Optional[str], qualified_name: str,
                          line_number: int = 0) -> Element:
        prefix, _, local = qualified_name.rpartition(":")
        return Element(namespace_uri, local, prefix or None, self, line_number)

    def create_text_node(self, data: str) -> Text:
        return Text(data, self)

    def create_cdata_section(self, data: str) -> CDATASection:
        return CDATASection(data, self)

    def create_comment(self, data: str) -> Comment:
        return Comment(data, self)

    def create_event(self, interface: str = "Events") -> Event:
        return Event(interface)

    def get_elements_by_tag_name_ns(self, namespace_uri: Optional[str],
                                    local_name: str) -> List[Element]:
        root = self.document_element
        if root is None:
            return []
        return [
            e for e in root.iter_elements()
            if e.namespace_uri == namespace_uri and e.local_name == local_name
        ]
