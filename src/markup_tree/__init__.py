"""Markup Tree.

In-memory representation and manipulation of parsed markup trees: an element
node model, depth-first search helpers and invariant-preserving mutators.

Progressive API Disclosure:
- Level 1: Functions - make_node(), by_tag(), texts(), set_attribute(), ...
- Level 2: Checked editing - TreeConfig(check_ownership=True), TreeValidator
- Level 3: Library integration - adapters for ElementTree, lxml, BeautifulSoup
"""

__version__ = "0.1.0"
__author__ = "Markup Tree Team"

# Level 1: data model, accessors, search and mutation
from .tree import (
    Element,
    InvalidReferenceError,
    MalformedNodeError,
    OwnershipError,
    TreeError,
    append_child,
    attr,
    attributes,
    by_attribute,
    by_class,
    by_id,
    by_style,
    by_tag,
    children,
    ensure_node,
    insert_child_before,
    iter_elements,
    make_node,
    parent,
    remove_attribute,
    remove_child,
    resolve_node,
    set_attribute,
    set_attributes,
    tag,
    text,
    texts,
)

# Level 2: configuration and validation
from .shared.config import MarkupTreeConfig, TreeConfig
from .tree.validation import TreeValidator, validate_tree

# Level 3: integration adapters
from .api.adapters import get_adapter

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Data model and errors
    "Element",
    "TreeError",
    "MalformedNodeError",
    "InvalidReferenceError",
    "OwnershipError",

    # Accessors
    "make_node",
    "resolve_node",
    "tag",
    "attributes",
    "children",
    "attr",

    # Search
    "text",
    "texts",
    "by_tag",
    "by_attribute",
    "by_class",
    "by_style",
    "by_id",
    "parent",
    "iter_elements",

    # Mutation
    "ensure_node",
    "set_attributes",
    "set_attribute",
    "remove_attribute",
    "append_child",
    "insert_child_before",
    "remove_child",

    # Configuration and validation
    "MarkupTreeConfig",
    "TreeConfig",
    "TreeValidator",
    "validate_tree",

    # Integration
    "get_adapter",
]
