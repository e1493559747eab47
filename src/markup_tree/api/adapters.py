"""Integration adapters for trees produced by popular markup libraries.

This module converts between element trees and the element objects of
``xml.etree.ElementTree``, ``lxml.etree`` and BeautifulSoup. Conversions never
raise: failures are reported through :class:`ConversionResult`.

Text handling follows the ElementTree model: an element's ``text`` becomes its
first text leaf and each child's ``tail`` becomes the text leaf after that
child. Converting back, consecutive text leaves are concatenated. Comments,
processing instructions and doctypes are skipped.
"""

import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from markup_tree.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    get_logger,
)
from markup_tree.tree.node import Child, Element, NodeLike, resolve_node
from markup_tree.tree.search import iter_elements

MS_PER_SECOND = 1000
_MAX_RECORDED_CONVERSIONS = 1000


class AdapterType(Enum):
    """Types of integration adapters."""

    XML_LIBRARY = auto()     # Element tree libraries (ElementTree, lxml)
    HTML_LIBRARY = auto()    # HTML document libraries (BeautifulSoup)
    PLUGIN = auto()          # Custom plugin adapters


class ConversionDirection(Enum):
    """Direction of data conversion."""

    TO_TARGET = auto()      # Element tree to target library object
    FROM_TARGET = auto()    # Target library object to element tree


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    version: str
    adapter_type: AdapterType
    target_library: str
    supported_versions: List[str]
    description: str
    author: str = "markup-tree"


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    direction: Optional[ConversionDirection] = None
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


class AdapterPerformanceProfiler:
    """Conversion timing records for adapters."""

    def __init__(self) -> None:
        """Initialize performance profiler."""
        self._metrics: Dict[str, List[float]] = {}
        self._lock = threading.RLock()

    def record_conversion(self, adapter_name: str, conversion_time_ms: float) -> None:
        """Record conversion performance."""
        with self._lock:
            times = self._metrics.setdefault(adapter_name, [])
            times.append(conversion_time_ms)
            if len(times) > _MAX_RECORDED_CONVERSIONS:
                del times[:-_MAX_RECORDED_CONVERSIONS]

    def get_statistics(self, adapter_name: str) -> Dict[str, float]:
        """Get performance statistics for an adapter."""
        with self._lock:
            times = self._metrics.get(adapter_name)
            if not times:
                return {}

            return {
                "count": len(times),
                "average_ms": sum(times) / len(times),
                "min_ms": min(times),
                "max_ms": max(times),
                "total_ms": sum(times),
            }


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters.

    Subclasses implement :meth:`_to_target` and :meth:`_from_target`; the public
    wrappers add timing, logging and the never-fail error handling.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the integration adapter.

        Args:
            correlation_id: Optional correlation ID for request tracking
        """
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)
        self._profiler = AdapterPerformanceProfiler()

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def _to_target(self, root: Element) -> Any:
        """Convert a resolved element tree to the target library's object."""

    @abstractmethod
    def _from_target(self, target_data: Any) -> Element:
        """Convert a target library object to an element tree."""

    def to_target(self, node: NodeLike) -> ConversionResult:
        """Convert an element tree to the target library's element object.

        Args:
            node: Root element, or a sequence wrapping it

        Returns:
            ConversionResult containing the target object
        """
        return self._convert(
            node, ConversionDirection.TO_TARGET,
            lambda data: self._to_target(resolve_node(data))
        )

    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert a target library object to an element tree.

        Args:
            target_data: Element object of the target library

        Returns:
            ConversionResult containing the root :class:`Element`
        """
        return self._convert(target_data, ConversionDirection.FROM_TARGET, self._from_target)

    def get_performance_stats(self) -> Dict[str, float]:
        """Get performance statistics for this adapter."""
        return self._profiler.get_statistics(self.metadata.name)

    def _convert(
        self,
        data: Any,
        direction: ConversionDirection,
        convert: Callable[[Any], Any]
    ) -> ConversionResult:
        start_time = time.time()

        if not self.is_available():
            return self._create_error_result(
                f"{self.metadata.target_library} is not installed",
                data, direction
            )

        try:
            converted = convert(data)
        except Exception as e:
            processing_time = (time.time() - start_time) * MS_PER_SECOND
            self._logger.warning(
                "Conversion failed",
                extra={"direction": direction.name, "error": str(e)}
            )
            return self._create_error_result(
                f"Failed to convert with {self.metadata.name}: {e}",
                data, direction, processing_time
            )

        processing_time = (time.time() - start_time) * MS_PER_SECOND
        self._profiler.record_conversion(self.metadata.name, processing_time)

        tree = converted if direction == ConversionDirection.FROM_TARGET else data
        element_count = sum(1 for _ in iter_elements(tree))
        self._logger.debug(
            "Conversion completed",
            extra={
                "direction": direction.name,
                "element_count": element_count,
                "processing_time_ms": processing_time,
            }
        )

        return ConversionResult(
            success=True,
            converted_data=converted,
            original_data=data,
            conversion_time_ms=processing_time,
            direction=direction,
            metadata={"element_count": element_count},
        )

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        direction: ConversionDirection,
        conversion_time_ms: float = 0.0
    ) -> ConversionResult:
        """Create a ConversionResult for error conditions."""
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=conversion_time_ms,
            direction=direction,
            errors=[error_message],
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.ERROR,
                    message=error_message,
                    component=self.__class__.__name__,
                    correlation_id=self.correlation_id
                )
            ]
        )


class AdapterRegistry:
    """Registry for managing integration adapters."""

    def __init__(self) -> None:
        """Initialize the adapter registry."""
        self._adapters: Dict[str, Type[IntegrationAdapter]] = {}
        self._instances: Dict[Tuple[str, Optional[str]], IntegrationAdapter] = {}
        self._lock = threading.RLock()

    def register(self, adapter_class: Type[IntegrationAdapter]) -> None:
        """Register an adapter class under its metadata name.

        Re-registering a name drops the instances built from the old class.
        """
        with self._lock:
            name = adapter_class().metadata.name
            self._adapters[name] = adapter_class
            for key in [key for key in self._instances if key[0] == name]:
                del self._instances[key]

    def get_adapter(
        self,
        adapter_name: str,
        correlation_id: Optional[str] = None
    ) -> Optional[IntegrationAdapter]:
        """Get an adapter instance by name.

        Instances are cached per name and correlation ID, so conversion
        statistics accumulate across lookups.

        Returns:
            Adapter instance if registered and available, None otherwise
        """
        with self._lock:
            adapter_class = self._adapters.get(adapter_name)
            if adapter_class is None:
                return None

            instance_key = (adapter_name, correlation_id)
            instance = self._instances.get(instance_key)
            if instance is not None:
                return instance

            instance = adapter_class(correlation_id)
            if not instance.is_available():
                return None
            self._instances[instance_key] = instance
            return instance

    def list_available_adapters(self) -> List[AdapterMetadata]:
        """List metadata of every registered adapter whose library is installed."""
        with self._lock:
            instances = [adapter_class() for adapter_class in self._adapters.values()]
        return [instance.metadata for instance in instances if instance.is_available()]


# Global adapter registry instance
_adapter_registry = AdapterRegistry()


def register_adapter(adapter_class: Type[IntegrationAdapter]) -> None:
    """Register an integration adapter globally."""
    _adapter_registry.register(adapter_class)


def get_adapter(
    adapter_name: str,
    correlation_id: Optional[str] = None
) -> Optional[IntegrationAdapter]:
    """Get a registered adapter instance, or None if unknown or unavailable."""
    return _adapter_registry.get_adapter(adapter_name, correlation_id)


def list_available_adapters() -> List[AdapterMetadata]:
    """List all available integration adapters."""
    return _adapter_registry.list_available_adapters()


def _from_etree_element(source: Any) -> Element:
    """Convert an ElementTree-style element (stdlib or lxml) to an Element."""
    root = Element(source.tag, dict(source.attrib))
    stack = [(source, root)]

    while stack:
        current, element = stack.pop()
        if current.text:
            element.children.append(current.text)

        for sub in current:
            # Comments and processing instructions carry a non-string tag
            if isinstance(sub.tag, str):
                converted = Element(sub.tag, dict(sub.attrib))
                element.children.append(converted)
                stack.append((sub, converted))
            if sub.tail:
                element.children.append(sub.tail)

    return root


def _to_etree_element(node: Element, factory: Callable[..., Any]) -> Any:
    """Convert an Element to an ElementTree-style element built by ``factory``."""
    root = factory(node.tag, attrib=dict(node.attributes or {}))
    stack = [(node, root)]

    while stack:
        current, target = stack.pop()
        last = None
        for child in current.children:
            if isinstance(child, Element):
                last = factory(child.tag, attrib=dict(child.attributes or {}))
                target.append(last)
                stack.append((child, last))
            elif last is None:
                target.text = (target.text or "") + child
            else:
                last.tail = (last.tail or "") + child

    return root


class ElementTreeAdapter(IntegrationAdapter):
    """Adapter for xml.etree.ElementTree elements."""

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="elementtree",
            version="1.0.0",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="xml.etree.ElementTree",
            supported_versions=["3.8+"],
            description="Conversion between element trees and ElementTree elements"
        )

    def is_available(self) -> bool:
        """ElementTree ships with the standard library."""
        return True

    def _to_target(self, root: Element) -> Any:
        import xml.etree.ElementTree as ET

        return _to_etree_element(root, ET.Element)

    def _from_target(self, target_data: Any) -> Element:
        import xml.etree.ElementTree as ET

        if isinstance(target_data, ET.ElementTree):
            target_data = target_data.getroot()
        if not isinstance(target_data, ET.Element):
            raise TypeError(
                f"Expected an ElementTree element, got {type(target_data).__name__}"
            )
        return _from_etree_element(target_data)


class LxmlAdapter(IntegrationAdapter):
    """Adapter for lxml.etree elements."""

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="lxml",
            version="1.0.0",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="lxml",
            supported_versions=["4.0+"],
            description="Conversion between element trees and lxml.etree elements"
        )

    def is_available(self) -> bool:
        """Check if lxml is available."""
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def _to_target(self, root: Element) -> Any:
        import lxml.etree as etree

        return _to_etree_element(root, etree.Element)

    def _from_target(self, target_data: Any) -> Element:
        import lxml.etree as etree

        if isinstance(target_data, etree._ElementTree):
            target_data = target_data.getroot()
        if not isinstance(target_data, etree._Element) or not isinstance(target_data.tag, str):
            raise TypeError(
                f"Expected an lxml element, got {type(target_data).__name__}"
            )
        return _from_etree_element(target_data)


class BeautifulSoupAdapter(IntegrationAdapter):
    """Adapter for BeautifulSoup tags."""

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="beautifulsoup",
            version="1.0.0",
            adapter_type=AdapterType.HTML_LIBRARY,
            target_library="beautifulsoup4",
            supported_versions=["4.0+"],
            description="Conversion between element trees and BeautifulSoup tags"
        )

    def is_available(self) -> bool:
        """Check if BeautifulSoup is available."""
        try:
            import bs4  # noqa: F401
            return True
        except ImportError:
            return False

    def _to_target(self, root: Element) -> Any:
        from bs4 import BeautifulSoup
        from bs4.element import NavigableString

        soup = BeautifulSoup("", "html.parser")
        top = soup.new_tag(root.tag, attrs=dict(root.attributes or {}))
        soup.append(top)
        stack = [(root, top)]

        while stack:
            current, tag_object = stack.pop()
            for child in current.children:
                if isinstance(child, Element):
                    built = soup.new_tag(child.tag, attrs=dict(child.attributes or {}))
                    tag_object.append(built)
                    stack.append((child, built))
                else:
                    tag_object.append(NavigableString(child))
        return soup

    def _from_target(self, target_data: Any) -> Element:
        from bs4 import BeautifulSoup
        from bs4.element import Tag

        if isinstance(target_data, BeautifulSoup):
            root = next(
                (entry for entry in target_data.contents if isinstance(entry, Tag)),
                None
            )
            if root is None:
                raise ValueError("BeautifulSoup document has no top-level tag")
            target_data = root
        if not isinstance(target_data, Tag):
            raise TypeError(
                f"Expected a BeautifulSoup tag, got {type(target_data).__name__}"
            )
        return self._convert_tag(target_data)

    def _convert_tag(self, source: Any) -> Element:
        from bs4.element import CData, NavigableString, PreformattedString, Tag

        root = Element(source.name, self._convert_attrs(source))
        stack = [(source, root)]

        while stack:
            current, element = stack.pop()
            for entry in current.contents:
                if isinstance(entry, Tag):
                    converted = Element(entry.name, self._convert_attrs(entry))
                    element.children.append(converted)
                    stack.append((entry, converted))
                elif isinstance(entry, PreformattedString) and not isinstance(entry, CData):
                    continue
                elif isinstance(entry, NavigableString):
                    element.children.append(str(entry))

        return root

    @staticmethod
    def _convert_attrs(source: Any) -> Dict[str, str]:
        # Multi-valued attributes such as class come back as lists
        return {
            name: " ".join(value) if isinstance(value, (list, tuple)) else value
            for name, value in source.attrs.items()
        }


register_adapter(ElementTreeAdapter)
register_adapter(LxmlAdapter)
register_adapter(BeautifulSoupAdapter)
