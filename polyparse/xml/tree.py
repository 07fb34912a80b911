"""
XML tree builder: token stream -> arena-backed node tree.

Nodes live in a flat arena (``XmlDocument.nodes``). Each node stores the
indices of its children and the index of its parent, so upward traversal
works without reference cycles between node objects.

Build algorithm:
1. The cursor starts at a synthetic root (index 0).
2. The first START_TAG names the root; later START_TAGs append a child to
   the cursor and descend into it.
3. END_TAG / EMPTY_ELEMENT_TAG pop the cursor to its parent.
4. TEXT sets the cursor's text; CDATA sets it verbatim.
5. ATTRIBUTE_NAME must be followed immediately by ATTRIBUTE_VALUE.
6. Once the root element closes, only comments, processing instructions
   and doctype tokens may follow.
7. At the end, nesting depth must be zero and the cursor must be the root.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from polyparse.exceptions import ParseSyntaxError
from polyparse.xml.tokenizer import Token, TokenKind

logger = logging.getLogger(__name__)

ROOT = 0

# Tokens that may not follow the closing tag of the root element
_CONTENT_KINDS = (TokenKind.START_TAG, TokenKind.TEXT, TokenKind.CDATA)


@dataclass
class XmlNode:
    """One element of the tree.

    Attributes:
        tag: Element name (namespace prefixes are kept as written).
        text: Last text or CDATA content seen directly inside the element.
        attributes: Attribute name -> decoded value, in document order.
        parent: Arena index of the parent, ``None`` for the root.
        children: Arena indices of the child elements, in document order.
    """

    tag: str = ""
    text: str = ""
    attributes: dict[str, str] = field(default_factory=dict)
    parent: int | None = None
    children: list[int] = field(default_factory=list)


class XmlDocument:
    """An arena of ``XmlNode`` objects with exactly one root.

    The document is not modified after ``build()`` returns it.
    """

    def __init__(self, nodes: list[XmlNode]) -> None:
        self.nodes = nodes

    def __repr__(self) -> str:
        return f"XmlDocument(root={self.root.tag!r}, nodes={len(self.nodes)})"

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def root(self) -> XmlNode:
        return self.nodes[ROOT]

    def node(self, index: int) -> XmlNode:
        return self.nodes[index]

    def children(self, node: XmlNode) -> list[XmlNode]:
        return [self.nodes[i] for i in node.children]

    def parent(self, node: XmlNode) -> XmlNode | None:
        if node.parent is None:
            return None
        return self.nodes[node.parent]

    def depth(self, node: XmlNode) -> int:
        """Nesting depth of *node*; the root has depth 0."""
        depth = 0
        while node.parent is not None:
            node = self.nodes[node.parent]
            depth += 1
        return depth

    def iter(self) -> Iterator[XmlNode]:
        """Yield every node in document (pre-)order."""
        stack = [ROOT]
        while stack:
            index = stack.pop()
            yield self.nodes[index]
            stack.extend(reversed(self.nodes[index].children))

    def find_all(self, tag: str) -> list[XmlNode]:
        return [n for n in self.iter() if n.tag == tag]


def build(tokens: list[Token]) -> XmlDocument:
    """Build the node tree from a token stream.

    Raises:
        ParseSyntaxError: ``"Unexpected EOF"`` if no root element was seen
            or start/end tags do not balance; ``"Expected attribute value
            after attribute name."`` if an attribute has no value;
            ``"Unexpected content after the root element"`` for an element
            or text after the root element closes.
    """
    nodes = [XmlNode()]
    cursor = ROOT
    depth = 0
    root_named = False
    root_closed = False
    pending_attribute: str | None = None

    for token in tokens:
        if pending_attribute is not None:
            if token.kind is not TokenKind.ATTRIBUTE_VALUE:
                raise ParseSyntaxError("Expected attribute value after attribute name.")
            nodes[cursor].attributes[pending_attribute] = token.value
            pending_attribute = None
            continue

        kind = token.kind
        if root_closed and kind in _CONTENT_KINDS:
            raise ParseSyntaxError("Unexpected content after the root element")

        if kind is TokenKind.START_TAG:
            if not root_named:
                nodes[ROOT].tag = token.value
                root_named = True
            else:
                nodes.append(XmlNode(tag=token.value, parent=cursor))
                child = len(nodes) - 1
                nodes[cursor].children.append(child)
                cursor = child
            depth += 1
        elif kind in (TokenKind.END_TAG, TokenKind.EMPTY_ELEMENT_TAG):
            parent = nodes[cursor].parent
            if parent is not None:
                cursor = parent
            depth -= 1
            if depth == 0 and root_named:
                root_closed = True
        elif kind is TokenKind.TEXT or kind is TokenKind.CDATA:
            # Entities were already decoded by the tokenizer for TEXT only
            nodes[cursor].text = token.value
        elif kind is TokenKind.ATTRIBUTE_NAME:
            pending_attribute = token.value
        elif kind is TokenKind.ATTRIBUTE_VALUE:
            raise ParseSyntaxError("Unexpected attribute value without a name.")
        # Comments, doctype and processing instructions carry no tree data

    if pending_attribute is not None:
        raise ParseSyntaxError("Expected attribute value after attribute name.")
    if not root_named or depth != 0 or cursor != ROOT:
        raise ParseSyntaxError("Unexpected EOF")

    logger.debug("Built XML tree with %d nodes (root=%s)", len(nodes), nodes[ROOT].tag)
    return XmlDocument(nodes)
