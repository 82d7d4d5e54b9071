"""
XML parser: raw text → canonical Object.

Conversion rules:
- The result holds one entry: document element local name → element value
- Element with no attributes and no child elements → Scalar(trimmed text)
- Otherwise an Object: attributes first, then one entry per distinct child
  local name (repeated names → Array in document order)
- Attributes + text without child elements → text kept under "#text"
- Text interleaved with child elements (mixed content) → MalformedInputError
- Namespace prefixes are stripped, comments and processing instructions dropped
"""

import logging

from lxml import etree

from docequal.domain.constants import ROOT_PATH, XML_ATTRIBUTE_PREFIX, XML_TEXT_ENTRY
from docequal.domain.errors import ErrorCodes, MalformedInputError
from docequal.domain.model import Array, Object, Scalar, ScalarKind, Value, child_path, index_path

logger = logging.getLogger(__name__)


def _create_parser() -> etree.XMLParser:
    # Parsers are not shared between calls so concurrent loads stay independent
    return etree.XMLParser(
        encoding="utf-8",
        remove_comments=True,
        remove_pis=True,
        resolve_entities=False,
        no_network=True,
    )


def local_name(element: etree._Element) -> str:
    """Tag or attribute name without namespace."""
    return etree.QName(element).localname


def parse_xml_document(text: str, label: str = "XML") -> etree._Element:
    """
    Parse raw XML text into an lxml element tree.

    Args:
        text: Raw XML contents
        label: Document label used in error messages

    Returns:
        The document element

    Raises:
        MalformedInputError: On blank or non-well-formed contents
    """
    if not isinstance(text, str) or not text.strip():
        raise MalformedInputError(
            ErrorCodes.EMPTY_INPUT,
            f"Cannot load blank {label} contents",
            document=label,
        )

    try:
        return etree.fromstring(text.encode("utf-8"), _create_parser())
    except etree.XMLSyntaxError as exc:
        line, column = exc.position
        raise MalformedInputError(
            ErrorCodes.MALFORMED_XML,
            f"Cannot correctly load the {label} contents due to a deserialization failure: {exc.msg}",
            document=label,
            line=line,
            column=column,
        ) from exc


def load_xml(text: str, label: str = "XML") -> Object:
    """
    Load raw XML text into the canonical model.

    Args:
        text: Raw XML contents
        label: Document label used in error messages

    Returns:
        Object with the document element as its single entry

    Raises:
        MalformedInputError: On non-well-formed XML or mixed content
    """
    root = parse_xml_document(text, label)
    name = local_name(root)
    logger.debug(f"Loading XML document rooted at <{name}>")

    return Object(((name, _convert_element(root, child_path(ROOT_PATH, name), label)),))


def _own_text(element: etree._Element) -> str:
    """Text directly inside the element, excluding descendants."""
    parts = [element.text or ""]
    parts.extend(child.tail or "" for child in element)
    return "".join(parts)


def _convert_element(element: etree._Element, path: str, label: str) -> Value:
    children = [child for child in element if isinstance(child.tag, str)]
    attributes = [(local_name_of(name), value) for name, value in element.attrib.items()]
    text = _own_text(element).strip()

    if not attributes and not children:
        return Scalar(text, ScalarKind.TEXT)

    if children and text:
        raise MalformedInputError(
            ErrorCodes.MIXED_XML_CONTENT,
            f"Cannot load {label} element at {path}: text {text[:40]!r} is mixed with child elements",
            document=label,
            path=path,
        )

    groups: dict[str, list[etree._Element]] = {}
    for child in children:
        groups.setdefault(local_name(child), []).append(child)

    entries: list[tuple[str, Value]] = []
    attribute_names: set[str] = set()

    for name, value in attributes:
        key = XML_ATTRIBUTE_PREFIX + name if name in groups else name
        if key in attribute_names:
            raise MalformedInputError(
                ErrorCodes.MALFORMED_XML,
                f"Cannot load {label} element at {path}: attribute local name '{name}' "
                "is used more than once across namespaces",
                document=label,
                path=path,
            )
        attribute_names.add(key)
        entries.append((key, Scalar(value, ScalarKind.TEXT)))

    if text:
        entries.append((XML_TEXT_ENTRY, Scalar(text, ScalarKind.TEXT)))

    for name, group in groups.items():
        name_path = child_path(path, name)
        if len(group) == 1:
            entries.append((name, _convert_element(group[0], name_path, label)))
        else:
            entries.append((
                name,
                Array(tuple(
                    _convert_element(child, index_path(name_path, i), label)
                    for i, child in enumerate(group)
                )),
            ))

    return Object(tuple(entries), frozenset(attribute_names))


def local_name_of(qualified: str) -> str:
    """`{urn:x}id` → `id`."""
    return etree.QName(qualified).localname
