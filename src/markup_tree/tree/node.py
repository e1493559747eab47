"""Element node data model and accessors.

A tree is built from :class:`Element` objects whose ``children`` hold either
nested elements or plain ``str`` text leaves. Every public entry point accepts
a bare element or a sequence wrapping one; :func:`resolve_node` is the single
place where that wrapping is undone.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union


class TreeError(Exception):
    """Base exception for tree library errors."""

    def __init__(self, message: str, node: Any = None) -> None:
        super().__init__(message)
        self.node = node


class MalformedNodeError(TreeError, TypeError):
    """Raised when something that is not an element node is used as one."""


class InvalidReferenceError(TreeError, ValueError):
    """Raised when a caller-supplied child reference is not where claimed."""

    def __init__(self, message: str, node: Any = None, reference: Any = None) -> None:
        super().__init__(message, node)
        self.reference = reference


class OwnershipError(TreeError, ValueError):
    """Raised when an insertion would share a child or create a cycle."""


@dataclass(eq=False, repr=False)
class Element:
    """Single element node: tag, attribute mapping and ordered children.

    Elements compare by identity, so search and mutation functions can locate
    a specific node even when structurally equal siblings exist. ``attributes``
    is ``None`` only in the header-only state produced by :func:`make_node`;
    any mutator normalizes it to a dict first.
    """

    tag: str
    attributes: Optional[Dict[str, str]] = None
    children: List["Child"] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate the tag and coerce children into the canonical form."""
        if not isinstance(self.tag, str) or not self.tag:
            raise MalformedNodeError("Element tag cannot be empty", node=self.tag)
        if self.attributes is not None and not isinstance(self.attributes, dict):
            if not isinstance(self.attributes, Mapping):
                raise MalformedNodeError(
                    f"Element attributes must be a mapping, got "
                    f"{type(self.attributes).__name__}",
                    node=self.attributes,
                )
            self.attributes = dict(self.attributes)
        self.children = [as_child(child) for child in self.children]

    def __repr__(self) -> str:
        return (
            f"Element({self.tag!r}, {self.attributes!r}, "
            f"<{len(self.children)} children>)"
        )

    @property
    def is_normalized(self) -> bool:
        """Check if the node has an explicit attribute mapping."""
        return self.attributes is not None

    def to_list(self) -> List[Any]:
        """Convert to the nested ``[tag, attributes, *children]`` form."""
        if self.attributes is None and not self.children:
            return [self.tag]

        result: List[Any] = [
            self.tag,
            dict(self.attributes) if self.attributes is not None else None,
        ]
        for child in self.children:
            result.append(child.to_list() if isinstance(child, Element) else child)
        return result

    @classmethod
    def from_list(cls, data: Sequence[Any]) -> "Element":
        """Build an element tree from the nested ``[tag, attributes, *children]`` form."""
        if isinstance(data, (str, bytes)) or not isinstance(data, (list, tuple)) or not data:
            raise MalformedNodeError(
                "Element list form must be a non-empty list", node=data
            )

        tag_name = data[0]
        if not isinstance(tag_name, str):
            raise MalformedNodeError(
                f"Element list form must start with a tag, got {tag_name!r}",
                node=data,
            )

        attrs = data[1] if len(data) > 1 else None
        if attrs is not None and not isinstance(attrs, Mapping):
            raise MalformedNodeError(
                f"Attributes slot of <{tag_name}> must be a mapping or None",
                node=data,
            )

        converted: List[Child] = []
        for entry in data[2:]:
            if isinstance(entry, (str, Element)):
                converted.append(entry)
            else:
                converted.append(cls.from_list(entry))

        return cls(
            tag_name,
            dict(attrs) if attrs is not None else None,
            converted,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation."""
        return {
            "tag": self.tag,
            "attributes": dict(self.attributes or {}),
            "children": [
                child.to_dict() if isinstance(child, Element) else child
                for child in self.children
            ],
        }


Child = Union[str, Element]
NodeLike = Union[Element, Sequence[Element]]


def resolve_node(node: Any) -> Element:
    """Unwrap the node-or-sequence duality into the effective element.

    A bare :class:`Element` is returned as is. A sequence whose first entry is
    an element yields that entry. Anything else, text leaves included, is not
    a node.

    Raises:
        MalformedNodeError: If ``node`` does not denote an element
    """
    if isinstance(node, Element):
        return node
    if isinstance(node, (list, tuple)) and node and isinstance(node[0], Element):
        return node[0]

    if isinstance(node, str):
        message = f"Text leaf {node[:40]!r} is not an element node"
    elif isinstance(node, (list, tuple)) and not node:
        message = "Empty sequence is not an element node"
    else:
        message = f"Expected an element node, got {type(node).__name__}"
    raise MalformedNodeError(message, node=node)


def as_child(child: Any) -> Child:
    """Validate a children-sequence entry, unwrapping a wrapped element."""
    if isinstance(child, str):
        return child
    try:
        return resolve_node(child)
    except MalformedNodeError:
        raise MalformedNodeError(
            f"Child must be a text leaf or an element node, got "
            f"{type(child).__name__}",
            node=child,
        ) from None


def child_reference(value: Any) -> Any:
    """Turn a caller-supplied child reference into the object to look up.

    A wrapped element yields the element. Anything else is returned
    unchanged; since children are matched by identity, a value that cannot
    be a child simply never matches.
    """
    if isinstance(value, (list, tuple)) and value and isinstance(value[0], Element):
        return value[0]
    return value


def make_node(tag: str, attributes: Optional[Mapping] = None, *children: Any) -> Element:
    """Construct a new element node.

    With neither attributes nor children the result is header-only: its
    ``attributes`` slot stays ``None`` until a mutator normalizes it.

    Args:
        tag: Element tag name
        attributes: Optional attribute mapping, copied into the node
        *children: Text leaves or element nodes, kept in order

    Returns:
        The new element
    """
    return Element(
        tag,
        dict(attributes) if attributes is not None else None,
        list(children),
    )


# Accessors

def tag(node: NodeLike) -> str:
    """Get the tag of a node."""
    return resolve_node(node).tag


def attributes(node: NodeLike) -> Optional[Dict[str, str]]:
    """Get the attribute mapping of a node, by reference."""
    return resolve_node(node).attributes


def children(node: NodeLike) -> List[Child]:
    """Get the children list of a node, by reference."""
    return resolve_node(node).children


def attr(node: NodeLike, name: str) -> Optional[str]:
    """Get one attribute value, or None when the node does not carry it."""
    attrs = resolve_node(node).attributes
    if not attrs:
        return None
    return attrs.get(name)
