"""Read-only traversal and search over element trees.

All functions accept a bare element or a sequence wrapping one, never modify
the tree, and walk it depth-first, left to right. Match lists place a matching
node before the matches found in its subtree.
"""

import re
from typing import Iterator, List, Optional, Pattern, Union

from markup_tree.shared.config import TreeConfig
from markup_tree.tree.node import (
    Child,
    Element,
    NodeLike,
    child_reference,
    resolve_node,
)

PatternLike = Union[str, Pattern[str]]


def text(node: NodeLike) -> str:
    """Join the direct text-leaf children of a node with single spaces.

    Nested elements are ignored, not descended into.
    """
    return " ".join(
        child for child in resolve_node(node).children if isinstance(child, str)
    )


def texts(
    node: NodeLike,
    separator: Optional[str] = None,
    config: Optional[TreeConfig] = None,
) -> str:
    """Join all text in a subtree with ``separator``.

    Element children contribute their own recursive join, so an element
    without any text still adds an empty entry between separators. Without
    an explicit separator the configured ``text_separator`` is used, a single
    space by default.
    """
    if separator is None:
        separator = config.text_separator if config is not None else " "
    return _texts(resolve_node(node), separator)


def _texts(root: Element, separator: str) -> str:
    # Frame: remaining children and the parts collected so far. A finished
    # frame hands its join to the frame below.
    stack = [(iter(root.children), [])]
    while True:
        pending, parts = stack[-1]
        for child in pending:
            if isinstance(child, Element):
                stack.append((iter(child.children), []))
                break
            parts.append(child)
        else:
            joined = separator.join(parts)
            stack.pop()
            if not stack:
                return joined
            stack[-1][1].append(joined)


def by_tag(node: NodeLike, tag_name: str) -> List[Element]:
    """Find all elements in a subtree, root included, whose tag equals ``tag_name``."""
    return [
        element for element in _iter_elements(resolve_node(node))
        if element.tag == tag_name
    ]


def by_attribute(
    node: NodeLike, attribute_name: str, pattern: PatternLike
) -> List[Element]:
    """Find all elements whose ``attribute_name`` value matches ``pattern``.

    The pattern is searched for anywhere in the value, so anchors must be
    written explicitly. Elements without the attribute never match, but their
    subtrees are still searched.

    Args:
        node: Root of the subtree to search
        attribute_name: Attribute to test, e.g. ``"class"``
        pattern: Regular expression source or compiled pattern

    Returns:
        Matching elements, each before the matches inside it
    """
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    return [
        element for element in _iter_elements(resolve_node(node))
        if _attribute_matches(element, attribute_name, compiled)
    ]


def _attribute_matches(
    element: Element, attribute_name: str, compiled: Pattern[str]
) -> bool:
    value = element.attributes.get(attribute_name) if element.attributes else None
    return value is not None and compiled.search(value) is not None


def by_class(node: NodeLike, pattern: PatternLike) -> List[Element]:
    """Find elements whose ``class`` attribute matches ``pattern``."""
    return by_attribute(node, "class", pattern)


def by_style(node: NodeLike, pattern: PatternLike) -> List[Element]:
    """Find elements whose ``style`` attribute matches ``pattern``."""
    return by_attribute(node, "style", pattern)


def by_id(node: NodeLike, pattern: PatternLike) -> List[Element]:
    """Find elements whose ``id`` attribute matches ``pattern``."""
    return by_attribute(node, "id", pattern)


def parent(root: NodeLike, target: Union[Child, NodeLike]) -> Optional[Element]:
    """Find the element whose children contain ``target``.

    Children are compared by identity. Returns None when ``target`` is not
    inside ``root``'s subtree, including when ``target`` is ``root`` itself.
    Elements are scanned in document order and the first holder wins.
    """
    target = child_reference(target)
    for element in _iter_elements(resolve_node(root)):
        if any(child is target for child in element.children):
            return element
    return None


def iter_elements(node: NodeLike) -> Iterator[Element]:
    """Iterate over every element of a subtree in document order.

    Uses an explicit stack, so arbitrarily deep trees do not exhaust the
    call stack.
    """
    return _iter_elements(resolve_node(node))


def _iter_elements(root: Element) -> Iterator[Element]:
    stack = [root]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(
            child for child in reversed(current.children)
            if isinstance(child, Element)
        )
