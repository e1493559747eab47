"""In-place structural edits of element trees.

Every mutator first passes its node through :func:`ensure_node`, which unwraps
a wrapped element and gives a header-only node an empty attribute mapping.
Mutators return the effective node (or its children list); callers should keep
using that reference rather than the wrapper they passed in.
"""

from collections.abc import Mapping
from typing import Any, List, Optional

from markup_tree.shared import TreeConfig, get_logger
from markup_tree.tree.node import (
    Child,
    Element,
    InvalidReferenceError,
    NodeLike,
    OwnershipError,
    as_child,
    child_reference,
    resolve_node,
)
from markup_tree.tree.search import iter_elements

_logger = get_logger(__name__, component="tree_mutation")


def ensure_node(node: NodeLike) -> Element:
    """Resolve and normalize a node before writing through it.

    Idempotent: a normalized node is returned unchanged.
    """
    element = resolve_node(node)
    if element.attributes is None:
        element.attributes = {}
        _logger.debug("Normalized header-only node", extra={"tag": element.tag})
    return element


def set_attributes(node: NodeLike, attributes: Mapping) -> Element:
    """Replace the whole attribute mapping of a node."""
    if not isinstance(attributes, Mapping):
        raise TypeError("Attributes must be a mapping")

    element = ensure_node(node)
    element.attributes = dict(attributes)
    return element


def set_attribute(node: NodeLike, name: str, value: str) -> Element:
    """Set one attribute value.

    An existing key keeps its position; a new key is appended at the end.
    """
    if not isinstance(name, str) or not isinstance(value, str):
        raise TypeError("Attribute name and value must be strings")

    element = ensure_node(node)
    element.attributes[name] = value
    return element


def remove_attribute(node: NodeLike, name: str) -> Optional[str]:
    """Remove an attribute, returning its previous value if it was set."""
    element = ensure_node(node)
    return element.attributes.pop(name, None)


def append_child(
    node: NodeLike, child: Any, config: Optional[TreeConfig] = None
) -> List[Child]:
    """Append a text leaf or element as the last child of a node.

    Returns:
        The node's children list after the append
    """
    element = ensure_node(node)
    entry = as_child(child)
    if config is not None and config.check_ownership:
        _check_ownership(element, entry)

    element.children.append(entry)
    _logger.debug(
        "Appended child",
        extra={"tag": element.tag, "child_count": len(element.children)}
    )
    return element.children


def insert_child_before(
    node: NodeLike,
    child: Any,
    before_child: Any = None,
    config: Optional[TreeConfig] = None,
) -> Element:
    """Insert a child immediately before ``before_child``.

    Without ``before_child`` the new child becomes the first one. The relative
    order of all other children is preserved.

    Args:
        node: Parent node to insert into
        child: Text leaf or element to insert
        before_child: Existing child, compared by identity
        config: Optional tree configuration enabling ownership checks

    Returns:
        The effective, normalized parent node

    Raises:
        InvalidReferenceError: If ``before_child`` is not a child of ``node``
    """
    element = ensure_node(node)
    entry = as_child(child)

    if before_child is None:
        index = 0
    else:
        index = _index_of(element.children, child_reference(before_child))
        if index is None:
            _logger.warning(
                "Reference child not found",
                extra={"tag": element.tag, "child_count": len(element.children)}
            )
            raise InvalidReferenceError(
                f"Reference child is not among the children of <{element.tag}>",
                node=element,
                reference=before_child,
            )

    if config is not None and config.check_ownership:
        _check_ownership(element, entry)

    element.children.insert(index, entry)
    _logger.debug(
        "Inserted child",
        extra={"tag": element.tag, "index": index}
    )
    return element


def remove_child(node: NodeLike, child: Any) -> bool:
    """Remove the child entry identical to ``child``.

    Returns:
        True if a child was removed, False if it was not found
    """
    element = ensure_node(node)
    index = _index_of(element.children, child_reference(child))
    if index is None:
        return False

    del element.children[index]
    _logger.debug("Removed child", extra={"tag": element.tag, "index": index})
    return True


def _index_of(entries: List[Child], reference: Any) -> Optional[int]:
    """Find the position of ``reference`` in ``entries`` by identity."""
    for index, entry in enumerate(entries):
        if entry is reference:
            return index
    return None


def _check_ownership(target: Element, entry: Child) -> None:
    """Refuse insertions that would create a cycle or a doubly-owned child."""
    if not isinstance(entry, Element):
        return

    if any(descendant is target for descendant in iter_elements(entry)):
        raise OwnershipError(
            f"Inserting <{entry.tag}> under <{target.tag}> would create a cycle",
            node=entry,
        )
    if _index_of(target.children, entry) is not None:
        raise OwnershipError(
            f"<{entry.tag}> is already a child of <{target.tag}>",
            node=entry,
        )
