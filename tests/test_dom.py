"""Test the reference DOM and parser."""
import pytest
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from conftest import svg
from docscript.constants import SVG_NAMESPACE_URI, XLINK_NAMESPACE_URI, XML_EVENTS_NAMESPACE_URI
from docscript.dom import Event, EventPhase, NodeType, parse_document, parse_file
from docscript.errors import DocumentParseError


class TestParser:
    """Tests for parse_document and parse_file."""

    def test_namespaces_and_attributes(self):
        """Test elements and attributes keep their namespaces."""
        doc = parse_document(svg('<script xlink:href="a.py" type="text/python"/>'))
        root = doc.document_element
        script = root.first_child
        assert root.namespace_uri == SVG_NAMESPACE_URI
        assert script.local_name == "script"
        assert script.get_attribute_ns(XLINK_NAMESPACE_URI, "href") == "a.py"
        assert script.get_attribute_ns(None, "type") == "text/python"
        assert script.get_attribute_ns(None, "missing") == ""

    def test_line_numbers(self):
        """Test elements record their source line."""
        doc = parse_document(svg("\n<g>\n<rect/></g>"))
        g = next(doc.document_element.child_elements())
        rect = next(g.child_elements())
        assert (doc.document_element.line_number, g.line_number, rect.line_number) == (1, 2, 3)

    def test_cdata_sections(self):
        """Test CDATA content is kept as a separate node."""
        doc = parse_document(svg("<script>a<![CDATA[b < c]]>d</script>"))
        script = doc.document_element.first_child
        kinds = [n.node_type for n in script.iter_children()]
        assert kinds == [NodeType.TEXT, NodeType.CDATA_SECTION, NodeType.TEXT]
        assert script.text_content == "ab < cd"

    def test_malformed(self):
        """Test malformed markup raises DocumentParseError."""
        with pytest.raises(DocumentParseError) as exc_info:
            parse_document("<svg><g></svg>", "broken.svg")
        assert exc_info.value.line == 1

    def test_parse_file_url(self, tmp_path):
        """Test parse_file uses the file URI as document URL."""
        path = tmp_path / "doc.svg"
        path.write_text(svg())
        doc = parse_file(path)
        assert doc.url == path.resolve().as_uri()

    def test_xml_base(self):
        """Test xml:base changes the base URI of descendants."""
        doc = parse_document(svg('<g xml:base="sub/"><rect/></g>'), "http://h/a/doc.svg")
        rect = doc.document_element.first_child.first_child
        assert rect.base_uri == "http://h/a/sub/"
        assert doc.document_element.base_uri == "http://h/a/doc.svg"


class TestEvents:
    """Tests for event dispatch in the reference DOM."""

    def test_uninitialised_event_rejected(self):
        """Test dispatching an uninitialised event is an error."""
        doc = parse_document(svg())
        with pytest.raises(ValueError):
            doc.document_element.dispatch_event(doc.create_event("SVGEvents"))

    def test_capture_target_bubble(self):
        """Test listeners fire in capture, target, bubble order."""
        doc = parse_document(svg("<g><rect/></g>"))
        root = doc.document_element
        rect = root.first_child.first_child
        calls = []
        root.add_event_listener("click", lambda e: calls.append(("capture", e.event_phase)), True)
        rect.add_event_listener("click", lambda e: calls.append(("target", e.event_phase)))
        root.add_event_listener("click", lambda e: calls.append(("bubble", e.event_phase)))

        event = doc.create_event()
        event.init_event("click", True, True)
        rect.dispatch_event(event)

        assert calls == [
            ("capture", EventPhase.CAPTURING),
            ("target", EventPhase.AT_TARGET),
            ("bubble", EventPhase.BUBBLING),
        ]

    def test_namespace_must_match(self):
        """Test a listener for another namespace does not fire."""
        doc = parse_document(svg())
        root = doc.document_element
        calls = []
        root.add_event_listener_ns("urn:other", "load", calls.append)
        event = Event()
        event.init_event_ns(XML_EVENTS_NAMESPACE_URI, "load", False, False)
        root.dispatch_event(event)
        assert calls == []

    def test_listener_error_isolated(self):
        """Test a failing listener does not stop the next one."""
        doc = parse_document(svg())
        root = doc.document_element
        calls = []

        def broken(event):
            raise RuntimeError("listener failed")

        root.add_event_listener("load", broken)
        root.add_event_listener("load", calls.append)
        event = Event()
        event.init_event("load", False, False)
        root.dispatch_event(event)
        assert len(calls) == 1

    def test_prevent_default(self):
        """Test dispatch_event reports prevent_default on cancelable events."""
        doc = parse_document(svg())
        root = doc.document_element
        root.add_event_listener("click", lambda e: e.prevent_default())
        event = Event()
        event.init_event("click", False, True)
        assert root.dispatch_event(event) is False

    def test_duplicate_registration_ignored(self):
        """Test the same listener is registered once."""
        doc = parse_document(svg())
        root = doc.document_element
        calls = []
        root.add_event_listener("load", calls.append)
        root.add_event_listener("load", calls.append)
        event = Event()
        event.init_event("load", False, False)
        root.dispatch_event(event)
        assert len(calls) == 1

    def test_remove_bound_method_listener(self):
        """Test a bound-method listener can be removed with a fresh reference."""
        doc = parse_document(svg())
        root = doc.document_element
        calls = []
        root.add_event_listener("load", calls.append)
        root.remove_event_listener("load", calls.append)
        event = Event()
        event.init_event("load", False, False)
        root.dispatch_event(event)
        assert calls == []
        assert not root.has_event_listener_ns(XML_EVENTS_NAMESPACE_URI, "load")
