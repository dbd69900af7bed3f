"""
XML codec for OBS documents.

Responses are parsed with lxml and turned into plain dictionaries which the
pydantic models validate:

    <directory name="pkg" srcmd5="...">        {"name": "pkg", "srcmd5": "...",
      <entry name="a" md5="..."/>       ->      "entry": [{"name": "a", "md5": "..."},
      <entry name="b" md5="..."/>                         {"name": "b", "md5": "..."}]}
    </directory>

Attributes and child elements become keys and repeated children become
lists. A child named like an attribute of its parent goes under
CHILD_KEY_PREFIX + tag. Children carrying only text become strings, kept
verbatim, and text next to attributes is stored under TEXT_KEY. Any parse or
validation failure is raised as ObsDecodeError.
"""

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from lxml import etree
from pydantic import BaseModel, ValidationError

from ..exceptions import ObsDecodeError
from .constants import MAX_LOGGED_BODY_LENGTH

# Key holding the text content of an element that also has attributes
TEXT_KEY = "_text"

# Prefix for child elements named like an attribute of their parent
CHILD_KEY_PREFIX = "child:"

M = TypeVar("M", bound=BaseModel)


def _parser() -> etree.XMLParser:
    # Entities and network access are disabled, OBS documents never need them
    return etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True, remove_pis=True)


def parse_document(content: Union[str, bytes]) -> etree._Element:
    """
    Parse ``content`` and return the root element.

    Raises:
        ObsDecodeError: If the content is empty or not well-formed XML
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    if not content.strip():
        raise ObsDecodeError("Empty XML document")
    try:
        return etree.fromstring(content, parser=_parser())
    except (etree.XMLSyntaxError, ValueError) as e:
        preview = content[:MAX_LOGGED_BODY_LENGTH].decode("utf-8", errors="replace")
        logging.debug("Malformed XML: %s", preview)
        raise ObsDecodeError(f"Malformed XML: {e}") from e


def element_to_value(element: etree._Element) -> Union[str, Dict[str, Any]]:
    """Convert an element into a string (text-only element) or a dictionary."""
    children = [child for child in element if isinstance(child.tag, str)]
    text = element.text or ""

    # Text-only elements keep their text untouched, whitespace included
    if not element.attrib and not children:
        return text

    grouped: Dict[str, List[Any]] = {}
    for child in children:
        grouped.setdefault(child.tag, []).append(element_to_value(child))

    data: Dict[str, Any] = dict(element.attrib)
    for tag, values in grouped.items():
        key = CHILD_KEY_PREFIX + tag if tag in element.attrib else tag
        data[key] = values if len(values) > 1 else values[0]
    # Indentation between children is not content
    if text.strip():
        data[TEXT_KEY] = text
    return data


def validate_element(element: etree._Element, model: Type[M], root: Optional[str] = None) -> M:
    """
    Validate an already parsed element into ``model``.

    Args:
        element: Root element of the document
        model: Pydantic model to build
        root: Expected root tag, defaults to ``model.xml_root`` when defined

    Raises:
        ObsDecodeError: On an unexpected root tag or a validation failure
    """
    expected = root or getattr(model, "xml_root", None)
    if expected and element.tag != expected:
        raise ObsDecodeError(f"Expected <{expected}> document, got <{element.tag}>")

    value = element_to_value(element)
    if not isinstance(value, dict):
        value = {TEXT_KEY: value} if value else {}
    try:
        return model.model_validate(value)
    except ValidationError as e:
        raise ObsDecodeError(f"Invalid <{element.tag}> document: {e}") from e


def parse_xml(content: Union[str, bytes], model: Type[M], root: Optional[str] = None) -> M:
    """Parse ``content`` and validate it into ``model``."""
    return validate_element(parse_document(content), model, root)


def serialize(element: etree._Element) -> bytes:
    """Serialize an element tree to a UTF-8 encoded document."""
    return etree.tostring(element, encoding="utf-8", xml_declaration=False)


def add_text_element(parent: etree._Element, tag: str, text: Optional[str]) -> etree._Element:
    """Append ``<tag>text</tag>`` to ``parent`` (empty element when text is None)."""
    child = etree.SubElement(parent, tag)
    child.text = text or ""
    return child


__all__ = [
    "TEXT_KEY",
    "CHILD_KEY_PREFIX",
    "parse_document",
    "element_to_value",
    "validate_element",
    "parse_xml",
    "serialize",
    "add_text_element",
]
