"""
XMP namespaces and element helpers shared by the preset writer.
"""

import re
import xml.etree.ElementTree as ET
from typing import Any

XMP_NAMESPACES = {
    'x': 'adobe:ns:meta/',
    'rdf': 'http://www.w3.org/1999/02/22-rdf-syntax-ns#',
    'crs': 'http://ns.adobe.com/camera-raw-settings/1.0/',
}

XML_LANG = '{http://www.w3.org/XML/1998/namespace}lang'

# Characters XML 1.0 cannot carry, not even as character references
_XML_INVALID = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

for _prefix, _uri in XMP_NAMESPACES.items():
    ET.register_namespace(_prefix, _uri)


def x(name: str) -> str:
    return f"{{{XMP_NAMESPACES['x']}}}{name}"


def rdf(name: str) -> str:
    return f"{{{XMP_NAMESPACES['rdf']}}}{name}"


def crs(name: str) -> str:
    return f"{{{XMP_NAMESPACES['crs']}}}{name}"


def xml_text(value: Any) -> str:
    """Text form of a value with XML-illegal characters removed."""
    return _XML_INVALID.sub("", str(value))


def set_crs(element: ET.Element, name: str, value: Any):
    """Set a ``crs:`` attribute; booleans are written the way Camera Raw spells them."""
    if isinstance(value, bool):
        value = 'true' if value else 'false'
    element.set(crs(name), xml_text(value))


def crs_element(parent: ET.Element, name: str, text: str) -> ET.Element:
    """Append ``<crs:name>text</crs:name>``."""
    elem = ET.SubElement(parent, crs(name))
    elem.text = xml_text(text)
    return elem


def alt_element(parent: ET.Element, name: str, text: str) -> ET.Element:
    """Append a language-alternative container holding a single x-default entry."""
    container = ET.SubElement(parent, crs(name))
    alt = ET.SubElement(container, rdf('Alt'))
    li = ET.SubElement(alt, rdf('li'))
    li.set(XML_LANG, 'x-default')
    li.text = xml_text(text)
    return container


def seq_element(parent: ET.Element, name: str) -> ET.Element:
    """Append ``<crs:name><rdf:Seq/></crs:name>`` and return the Seq."""
    container = ET.SubElement(parent, crs(name))
    return ET.SubElement(container, rdf('Seq'))
