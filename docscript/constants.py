"""
docscript constants

Namespaces, attribute names and message templates shared by the classifier,
the script loader and the lifecycle dispatcher.
"""

SVG_NAMESPACE_URI = "http://www.w3.org/2000/svg"
XLINK_NAMESPACE_URI = "http://www.w3.org/1999/xlink"
XML_NAMESPACE_URI = "http://www.w3.org/XML/1998/namespace"
XML_EVENTS_NAMESPACE_URI = "http://www.w3.org/2001/xml-events"

SCRIPT_TAG = "script"
TYPE_ATTRIBUTE = "type"
HREF_ATTRIBUTE = "href"
VERSION_ATTRIBUTE = "version"
CONTENT_SCRIPT_TYPE_ATTRIBUTE = "contentScriptType"
ONLOAD_ATTRIBUTE = "onload"

DEFAULT_SCRIPT_TYPE = "text/ecmascript"
NATIVE_SCRIPT_TYPE = "application/x-python-archive"
PYTHON_SCRIPT_TYPES = ("text/python", "application/python", "text/x-python")

SVG12_VERSION = "1.2"

# Root-only attributes that make a document dynamic.
DOCUMENT_EVENT_ATTRIBUTES = (
    "onabort",
    "onerror",
    "onresize",
    "onunload",
    "onscroll",
    "onzoom",
)

# Attributes that make any SVG element (and so its document) dynamic.
ELEMENT_EVENT_ATTRIBUTES = (
    "onkeyup",
    "onkeydown",
    "onkeypress",
    "onload",
    "onerror",
    "onactivate",
    "onclick",
    "onfocusin",
    "onfocusout",
    "onmousedown",
    "onmousemove",
    "onmouseout",
    "onmouseover",
    "onmouseup",
)

# Names the current event is bound under for inline handlers.
EVENT_NAME = "event"
ALTERNATE_EVENT_NAME = "evt"
WINDOW_NAME = "window"
DOCUMENT_NAME = "document"

SVG_EVENTS_INTERFACE = "SVGEvents"

# Event types as (SVG 1.2 name, SVG 1.1 name).
LOAD_EVENT_TYPES = ("load", "SVGLoad")
ZOOM_EVENT_TYPES = ("zoom", "SVGZoom")
SCROLL_EVENT_TYPES = ("scroll", "SVGScroll")
RESIZE_EVENT_TYPES = ("resize", "SVGResize")

# Bundle manifest.
MANIFEST_PATH = "META-INF/MANIFEST.MF"
SCRIPT_HANDLER_KEY = "Script-Handler"
EVENT_LISTENER_INITIALIZER_KEY = "SVG-Handler-Class"

# {0} document URL, {1} element tag or attribute name, {2} line number.
INLINE_SCRIPT_DESCRIPTION = "{0}:{2}\nInline {1} script"
EVENT_SCRIPT_DESCRIPTION = "{0}:{2}\nEvent attribute {1}"
