"""Tree validation for element trees.

This module checks the invariants the tree library relies on but does not
enforce on every call: single ownership, acyclicity, well-typed tags,
attributes and children, and normalization. Validation never raises for bad
trees; every finding is reported as a :class:`ValidationIssue`.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, FrozenSet, List, Optional, Set, Tuple

from markup_tree.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    TreeConfig,
    get_logger,
)
from markup_tree.tree.node import Element, MalformedNodeError, resolve_node

_STRICT_INVALID_TAG_CHARS = set('<>&"\'/=')


class ValidationLevel(Enum):
    """Validation levels for different use cases."""

    MINIMAL = auto()     # Structural integrity only
    STANDARD = auto()    # Adds normalization checks
    STRICT = auto()      # Adds tag name hygiene

    @classmethod
    def from_strictness(cls, strictness: str) -> "ValidationLevel":
        """Map a ``TreeConfig.validation_strictness`` value to a level."""
        return cls[strictness.upper()]


class ValidationIssueType(Enum):
    """Types of validation issues that can be detected."""

    STRUCTURAL_INTEGRITY = "structural"
    WELL_FORMEDNESS = "well_formed"
    ATTRIBUTE_ISSUE = "attribute"
    NORMALIZATION = "normalization"


@dataclass
class ValidationIssue:
    """Single validation issue with detailed information."""

    issue_type: ValidationIssueType
    severity: DiagnosticSeverity
    message: str
    element_path: Optional[str] = None
    suggested_fix: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        """Validate issue data."""
        if not self.message:
            raise ValueError("Validation issue message cannot be empty")


@dataclass
class ValidationResult:
    """Validation result with detailed findings."""

    success: bool = True
    issues: List[ValidationIssue] = field(default_factory=list)
    rules_checked: List[str] = field(default_factory=list)
    validation_level: ValidationLevel = ValidationLevel.STANDARD
    processing_time_ms: float = 0.0
    elements_validated: int = 0
    attributes_validated: int = 0

    @property
    def error_count(self) -> int:
        """Get number of error-level issues."""
        return len([
            issue for issue in self.issues
            if issue.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
        ])

    @property
    def warning_count(self) -> int:
        """Get number of warning-level issues."""
        return len([
            issue for issue in self.issues
            if issue.severity == DiagnosticSeverity.WARNING
        ])

    def get_issues_by_type(self, issue_type: ValidationIssueType) -> List[ValidationIssue]:
        """Get validation issues of specific type."""
        return [issue for issue in self.issues if issue.issue_type == issue_type]

    def get_issues_by_severity(self, severity: DiagnosticSeverity) -> List[ValidationIssue]:
        """Get validation issues of specific severity."""
        return [issue for issue in self.issues if issue.severity == severity]

    def to_diagnostics(
        self,
        component: str = "tree_validator",
        correlation_id: Optional[str] = None
    ) -> List[DiagnosticEntry]:
        """Convert issues to diagnostic entries."""
        return [
            DiagnosticEntry(
                severity=issue.severity,
                message=issue.message,
                component=component,
                element_path=issue.element_path,
                details=issue.details,
                correlation_id=correlation_id,
            )
            for issue in self.issues
        ]


# Stack frame: element, its path, its depth, ids of its ancestors and itself
_Frame = Tuple[Element, str, int, FrozenSet[int]]


class TreeValidator:
    """Element tree validation engine.

    Walks the tree with an explicit stack, so it terminates on cyclic trees
    and does not depend on the interpreter recursion limit.
    """

    def __init__(
        self,
        validation_level: Optional[ValidationLevel] = None,
        config: Optional[TreeConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree validator.

        Args:
            validation_level: Level of validation strictness; defaults to the
                level named by ``config.validation_strictness``
            config: Tree configuration supplying depth limits
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or TreeConfig()
        self.validation_level = validation_level or ValidationLevel.from_strictness(
            self.config.validation_strictness
        )
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_validator")

    def validate(self, node: Any) -> ValidationResult:
        """Validate an element tree.

        Args:
            node: Root element, or a sequence wrapping it

        Returns:
            ValidationResult with all findings
        """
        start_time = time.time()
        result = ValidationResult(validation_level=self.validation_level)

        try:
            root = resolve_node(node)
        except MalformedNodeError as e:
            result.issues.append(ValidationIssue(
                issue_type=ValidationIssueType.STRUCTURAL_INTEGRITY,
                severity=DiagnosticSeverity.CRITICAL,
                message=str(e),
                suggested_fix="Pass an element node as the tree root",
            ))
            self._finalize_validation_result(result, start_time)
            return result

        self.logger.info(
            "Starting tree validation",
            extra={
                "validation_level": self.validation_level.name,
                "root_tag": root.tag,
            }
        )

        try:
            self._walk(root, result)
            self._finalize_validation_result(result, start_time)

            self.logger.info(
                "Tree validation completed",
                extra={
                    "success": result.success,
                    "error_count": result.error_count,
                    "warning_count": result.warning_count,
                    "elements_validated": result.elements_validated,
                }
            )

        except Exception as e:
            processing_time = (time.time() - start_time) * 1000

            self.logger.error(
                "Tree validation failed",
                extra={"processing_time_ms": processing_time},
                exc_info=True
            )

            result.success = False
            result.processing_time_ms = processing_time
            result.issues.append(ValidationIssue(
                issue_type=ValidationIssueType.STRUCTURAL_INTEGRITY,
                severity=DiagnosticSeverity.CRITICAL,
                message=f"Validation failed: {e}",
                details={"exception_type": type(e).__name__}
            ))

        return result

    def _walk(self, root: Element, result: ValidationResult) -> None:
        """Visit every reachable element once, checking ownership on the way."""
        root_path = f"/{root.tag}"
        stack: List[_Frame] = [(root, root_path, 0, frozenset([id(root)]))]
        seen: Set[int] = {id(root)}
        depth_reported = False

        while stack:
            element, path, depth, ancestors = stack.pop()
            result.elements_validated += 1

            if depth > self.config.max_depth and not depth_reported:
                depth_reported = True
                result.issues.append(ValidationIssue(
                    issue_type=ValidationIssueType.STRUCTURAL_INTEGRITY,
                    severity=DiagnosticSeverity.WARNING,
                    message=f"Tree depth exceeds {self.config.max_depth}",
                    element_path=path,
                    suggested_fix="Use iter_elements for traversals of very deep trees",
                    details={"depth": depth},
                ))

            self._validate_tag_name(element, path, result)
            self._validate_attributes(element, path, result)

            if not isinstance(element.children, list):
                result.issues.append(ValidationIssue(
                    issue_type=ValidationIssueType.STRUCTURAL_INTEGRITY,
                    severity=DiagnosticSeverity.ERROR,
                    message=(
                        f"Children of element must be a list, got "
                        f"{type(element.children).__name__}"
                    ),
                    element_path=path,
                ))
                continue

            frames: List[_Frame] = []
            for child, child_path in self._child_paths(element, path, result):
                if id(child) in ancestors:
                    result.issues.append(ValidationIssue(
                        issue_type=ValidationIssueType.STRUCTURAL_INTEGRITY,
                        severity=DiagnosticSeverity.CRITICAL,
                        message=f"Element <{child.tag}> is its own ancestor",
                        element_path=child_path,
                        suggested_fix="Remove the child that points back up the tree",
                    ))
                    continue
                if id(child) in seen:
                    result.issues.append(ValidationIssue(
                        issue_type=ValidationIssueType.STRUCTURAL_INTEGRITY,
                        severity=DiagnosticSeverity.ERROR,
                        message=f"Element <{child.tag}> is owned by more than one parent",
                        element_path=child_path,
                        suggested_fix="Insert a copy instead of sharing the element",
                    ))
                    continue

                seen.add(id(child))
                frames.append((child, child_path, depth + 1, ancestors | {id(child)}))

            stack.extend(reversed(frames))

        result.rules_checked.extend([
            "child_types",
            "tag_names",
            "attribute_types",
            "single_ownership",
            "acyclicity",
            "max_depth",
        ])
        if self.validation_level in (ValidationLevel.STANDARD, ValidationLevel.STRICT):
            result.rules_checked.append("normalization")
        if self.validation_level == ValidationLevel.STRICT:
            result.rules_checked.append("strict_tag_names")

    def _child_paths(
        self, element: Element, path: str, result: ValidationResult
    ) -> List[Tuple[Element, str]]:
        """Pair each element child with its XPath-like path.

        Invalid child entries are reported here and skipped.
        """
        tag_counts: Dict[str, int] = {}
        for child in element.children:
            if isinstance(child, Element):
                tag_counts[child.tag] = tag_counts.get(child.tag, 0) + 1

        positions: Dict[str, int] = {}
        paired: List[Tuple[Element, str]] = []
        for index, child in enumerate(element.children):
            if isinstance(child, str):
                continue
            if not isinstance(child, Element):
                self._report_invalid_child(child, index, path, result)
                continue

            positions[child.tag] = positions.get(child.tag, 0) + 1
            if tag_counts[child.tag] > 1:
                child_path = f"{path}/{child.tag}[{positions[child.tag]}]"
            else:
                child_path = f"{path}/{child.tag}"
            paired.append((child, child_path))
        return paired

    def _report_invalid_child(
        self,
        child: Any,
        index: int,
        path: str,
        result: ValidationResult
    ) -> None:
        result.issues.append(ValidationIssue(
            issue_type=ValidationIssueType.STRUCTURAL_INTEGRITY,
            severity=DiagnosticSeverity.ERROR,
            message=(
                f"Child entry {index} is neither text nor an element: "
                f"{type(child).__name__}"
            ),
            element_path=path,
            suggested_fix="Wrap raw data with make_node or convert it to text",
            details={"index": index},
        ))

    def _validate_tag_name(self, element: Element, path: str, result: ValidationResult) -> None:
        """Validate element tag name."""
        tag_name = element.tag

        if not isinstance(tag_name, str) or not tag_name:
            result.issues.append(ValidationIssue(
                issue_type=ValidationIssueType.WELL_FORMEDNESS,
                severity=DiagnosticSeverity.ERROR,
                message="Element has empty tag name",
                element_path=path,
                suggested_fix="Provide valid tag name for element"
            ))
            return

        if self.validation_level == ValidationLevel.STRICT and (
            any(char.isspace() for char in tag_name)
            or any(char in _STRICT_INVALID_TAG_CHARS for char in tag_name)
        ):
            result.issues.append(ValidationIssue(
                issue_type=ValidationIssueType.WELL_FORMEDNESS,
                severity=DiagnosticSeverity.WARNING,
                message=f"Tag name contains whitespace or markup characters: {tag_name!r}",
                element_path=path,
                suggested_fix="Remove invalid characters from tag name"
            ))

    def _validate_attributes(self, element: Element, path: str, result: ValidationResult) -> None:
        """Validate attribute mapping and each name/value pair."""
        attrs = element.attributes

        if attrs is None:
            if self.validation_level != ValidationLevel.MINIMAL:
                result.issues.append(ValidationIssue(
                    issue_type=ValidationIssueType.NORMALIZATION,
                    severity=DiagnosticSeverity.WARNING,
                    message=f"Element <{element.tag}> has no attribute mapping",
                    element_path=path,
                    suggested_fix="Call ensure_node before handing the tree to search functions",
                ))
            return

        if not isinstance(attrs, dict):
            result.issues.append(ValidationIssue(
                issue_type=ValidationIssueType.ATTRIBUTE_ISSUE,
                severity=DiagnosticSeverity.ERROR,
                message=f"Attributes must be a dict, got {type(attrs).__name__}",
                element_path=path,
            ))
            return

        for name, value in attrs.items():
            result.attributes_validated += 1
            if not isinstance(name, str) or not isinstance(value, str):
                result.issues.append(ValidationIssue(
                    issue_type=ValidationIssueType.ATTRIBUTE_ISSUE,
                    severity=DiagnosticSeverity.ERROR,
                    message=f"Attribute name and value must be strings: {name!r}={value!r}",
                    element_path=path,
                    suggested_fix="Convert attribute values with str() before setting them",
                ))
            elif not name:
                result.issues.append(ValidationIssue(
                    issue_type=ValidationIssueType.ATTRIBUTE_ISSUE,
                    severity=DiagnosticSeverity.ERROR,
                    message="Attribute has empty name",
                    element_path=path,
                    suggested_fix="Provide valid name for attribute"
                ))

    def _finalize_validation_result(self, result: ValidationResult, start_time: float) -> None:
        """Calculate final validation metrics."""
        result.processing_time_ms = (time.time() - start_time) * 1000
        result.success = result.error_count == 0

        self.logger.debug(
            "Validation result finalized",
            extra={
                "elements_validated": result.elements_validated,
                "attributes_validated": result.attributes_validated,
                "rules_checked": len(result.rules_checked),
                "processing_time_ms": result.processing_time_ms
            }
        )


def validate_tree(
    node: Any,
    validation_level: Optional[ValidationLevel] = None,
    config: Optional[TreeConfig] = None,
    correlation_id: Optional[str] = None
) -> ValidationResult:
    """Validate an element tree with a one-off validator."""
    validator = TreeValidator(validation_level, config, correlation_id)
    return validator.validate(node)
