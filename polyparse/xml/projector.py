"""
XML object projector: node tree -> JSON-like value.

Projection rules for a node:

- Childless: its text, or ``{**attributes, "$value": text}`` when it has
  attributes (``$value`` is omitted when the text is empty).
- With children: each child contributes ``{child.tag: value}`` where
  ``value`` is the child's projection with its attributes folded in:

    * leaf + attributes   -> ``{**attributes, "$value": leaf}``
    * array + attributes  -> the array, with one ``{name: value}`` entry
      appended per attribute
    * object + attributes -> attributes merged into the object

Sibling grouping: when more than one child contributes and every
contribution shares the same single key ``k``, the children collapse into
``{k + "s": [...]}``. If the parent's own tag already is ``k + "s"``
(``<tags><tag/>...</tags>``) the bare list is returned instead. Mixed
siblings are merged by tag, so a repeated tag among them keeps only its
last value.
"""

from __future__ import annotations

from typing import Union

from polyparse.xml.tree import ROOT, XmlDocument, XmlNode

XmlValue = Union[str, dict[str, "XmlValue"], list["XmlValue"]]

VALUE_KEY = "$value"


def _with_attributes(value: XmlValue, attributes: dict[str, str]) -> XmlValue:
    """Fold an element's attributes into its projected value."""
    if not attributes:
        return value
    if isinstance(value, str):
        folded: dict[str, XmlValue] = dict(attributes)
        if value:
            folded[VALUE_KEY] = value
        return folded
    if isinstance(value, list):
        return value + [{name: attr} for name, attr in attributes.items()]
    return {**attributes, **value}


def _plural(key: str) -> str:
    return key + "s"


def _combine(node: XmlNode, contributions: list[tuple[str, XmlValue]]) -> XmlValue:
    """Build a node's content from its children's projections."""
    if not contributions:
        return node.text

    tags = {tag for tag, _ in contributions}
    if len(contributions) > 1 and len(tags) == 1:
        key = _plural(contributions[0][0])
        grouped = [value for _, value in contributions]
        if node.tag == key:
            return grouped
        return {key: grouped}

    merged: dict[str, XmlValue] = {}
    for tag, value in contributions:
        merged[tag] = value
    return merged


def _index_of(document: XmlDocument, node: XmlNode) -> int:
    if node.parent is None:
        return ROOT
    siblings = document.node(node.parent).children
    return next(i for i in siblings if document.node(i) is node)


def project_node(document: XmlDocument, node: XmlNode) -> XmlValue:
    """Project one node, attributes included.

    Children are projected before their parent using an explicit stack, so
    arbitrarily deep documents project without recursion.
    """
    start = _index_of(document, node)
    values: dict[int, XmlValue] = {}
    stack = [(start, False)]
    while stack:
        index, expanded = stack.pop()
        current = document.node(index)
        if current.children and not expanded:
            stack.append((index, True))
            stack.extend((child, False) for child in reversed(current.children))
            continue
        contributions = [
            (document.node(child).tag, values.pop(child)) for child in current.children
        ]
        values[index] = _with_attributes(_combine(current, contributions), current.attributes)
    return values[start]


def project(document: XmlDocument) -> dict[str, XmlValue]:
    """Project a whole document as ``{root_tag: value}``."""
    root = document.root
    return {root.tag: project_node(document, root)}
