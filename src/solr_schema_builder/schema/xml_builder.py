"""Render nested mappings as Solr schema/solrconfig XML fragments.

Conventions (matching what Solr expects in ``schema.xml`` includes):

- scalar map entries become attributes, in insertion order
- booleans render as ``true``/``false``
- a list under key ``filters`` renders as repeated ``<filter>`` children
  (trailing ``s`` stripped from the key)
- a mapping under key ``tokenizer`` renders as one ``<tokenizer>`` child
- the special keys ``VALUE`` and ``CDATA`` set the element's text content

Example: ``build_xml("fieldType", {"name": "text", "analyzers": [{"tokenizer": {"class": "solr.X"}}]})``
renders::

    <fieldType name="text">
      <analyzer>
        <tokenizer class="solr.X"/>
      </analyzer>
    </fieldType>
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from lxml import etree  # type: ignore[import-untyped]


VALUE_KEY = "VALUE"
CDATA_KEY = "CDATA"

_SCALAR_TYPES = (str, bool, int, float)


def format_scalar(value: str | bool | int | float) -> str:
    """Format a scalar the way Solr reads attribute values."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_xml(element_name: str, value: Any) -> str:
    """Serialize ``value`` as an XML element named ``element_name``.

    Output is pretty-printed with two-space indentation, has no XML
    declaration and ends with a newline. The same input always yields the
    same bytes.

    Raises:
        TypeError: If a value is neither scalar, list nor mapping
        ValueError: If a key is not a valid XML name
    """
    root = etree.Element(element_name)
    _populate(root, value)
    return etree.tostring(root, encoding="unicode", pretty_print=True)


def build_comment(*lines: str) -> str:
    """Render an XML comment block with one indented line per entry."""
    body = "".join(f"\n  {line}" for line in lines)
    return f"<!--{body}\n-->\n"


def _populate(element: etree._Element, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        for key, item in value.items():
            _add_entry(element, str(key), item)
        return
    if isinstance(value, _SCALAR_TYPES):
        element.text = format_scalar(value)
        return
    msg = f"Cannot render {type(value).__name__} inside <{element.tag}>"
    raise TypeError(msg)


def _add_entry(element: etree._Element, key: str, item: Any) -> None:
    if item is None:
        return
    if isinstance(item, _SCALAR_TYPES):
        text = format_scalar(item)
        if key == VALUE_KEY:
            element.text = text
        elif key == CDATA_KEY:
            element.text = etree.CDATA(text)
        else:
            element.set(key, text)
    elif isinstance(item, Mapping):
        _populate(etree.SubElement(element, key), item)
    elif isinstance(item, (list, tuple)):
        child_tag = key.rstrip("s") or key
        for entry in item:
            _populate(etree.SubElement(element, child_tag), entry)
    else:
        msg = f"Unsupported value for '{key}': {type(item).__name__}"
        raise TypeError(msg)
