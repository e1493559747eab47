"""Element tree data model, search and mutation.

Key Components:
    Element: Mutable element node with tag, attributes and children
    Accessors: tag, attributes, children, attr
    Search: text, texts, by_tag, by_attribute, by_class, by_style, by_id, parent
    Mutators: ensure_node, set_attribute(s), append_child, insert_child_before
    TreeValidator: Ownership, acyclicity and normalization checks
"""

from .node import (
    Child,
    Element,
    InvalidReferenceError,
    MalformedNodeError,
    NodeLike,
    OwnershipError,
    TreeError,
    attr,
    attributes,
    children,
    make_node,
    resolve_node,
    tag,
)
from .search import (
    by_attribute,
    by_class,
    by_id,
    by_style,
    by_tag,
    iter_elements,
    parent,
    text,
    texts,
)
from .mutation import (
    append_child,
    ensure_node,
    insert_child_before,
    remove_attribute,
    remove_child,
    set_attribute,
    set_attributes,
)
from .validation import (
    TreeValidator,
    ValidationIssue,
    ValidationIssueType,
    ValidationLevel,
    ValidationResult,
    validate_tree,
)

__all__ = [
    "Child",
    "Element",
    "InvalidReferenceError",
    "MalformedNodeError",
    "NodeLike",
    "OwnershipError",
    "TreeError",
    "attr",
    "attributes",
    "children",
    "make_node",
    "resolve_node",
    "tag",
    "by_attribute",
    "by_class",
    "by_id",
    "by_style",
    "by_tag",
    "iter_elements",
    "parent",
    "text",
    "texts",
    "append_child",
    "ensure_node",
    "insert_child_before",
    "remove_attribute",
    "remove_child",
    "set_attribute",
    "set_attributes",
    "TreeValidator",
    "ValidationIssue",
    "ValidationIssueType",
    "ValidationLevel",
    "ValidationResult",
    "validate_tree",
]
