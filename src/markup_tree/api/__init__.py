"""Integration API for exchanging trees with other markup libraries."""

from .adapters import (
    AdapterMetadata,
    AdapterType,
    BeautifulSoupAdapter,
    ConversionDirection,
    ConversionResult,
    ElementTreeAdapter,
    IntegrationAdapter,
    LxmlAdapter,
    get_adapter,
    list_available_adapters,
    register_adapter,
)

__all__ = [
    "AdapterMetadata",
    "AdapterType",
    "BeautifulSoupAdapter",
    "ConversionDirection",
    "ConversionResult",
    "ElementTreeAdapter",
    "IntegrationAdapter",
    "LxmlAdapter",
    "get_adapter",
    "list_available_adapters",
    "register_adapter",
]
