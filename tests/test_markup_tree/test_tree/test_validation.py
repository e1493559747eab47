"""Tests for tree validation."""

import pytest

from markup_tree.shared import DiagnosticSeverity, TreeConfig
from markup_tree.tree import (
    Element,
    TreeValidator,
    ValidationIssueType,
    ValidationLevel,
    make_node,
    validate_tree,
)


@pytest.fixture
def clean_tree() -> Element:
    """Create a well-formed, normalized tree."""
    return make_node(
        "html", {},
        make_node("body", {"class": "main"},
                  make_node("p", {}, "one"),
                  make_node("p", {"id": "second"}, "two")),
    )


class TestValidationLevel:
    """Test validation level mapping."""

    @pytest.mark.parametrize("strictness,level", [
        ("minimal", ValidationLevel.MINIMAL),
        ("standard", ValidationLevel.STANDARD),
        ("strict", ValidationLevel.STRICT),
    ])
    def test_from_strictness(self, strictness, level) -> None:
        """Test config strictness names map to levels."""
        assert ValidationLevel.from_strictness(strictness) is level

    def test_validator_uses_config_strictness(self) -> None:
        """Test that the validator defaults to the configured level."""
        validator = TreeValidator(config=TreeConfig(validation_strictness="strict"))

        assert validator.validation_level is ValidationLevel.STRICT


class TestTreeValidator:
    """Test validation findings."""

    def test_clean_tree_passes(self, clean_tree) -> None:
        """Test that a well-formed tree has no issues."""
        result = validate_tree(clean_tree)

        assert result.success
        assert result.issues == []
        assert result.elements_validated == 4
        assert result.attributes_validated == 2
        assert "single_ownership" in result.rules_checked
        assert "normalization" in result.rules_checked

    def test_wrapped_root_accepted(self, clean_tree) -> None:
        """Test validation of a wrapped root."""
        assert validate_tree([clean_tree]).success

    def test_non_node_root_reported(self) -> None:
        """Test that a text root is reported, not raised."""
        result = validate_tree("just text")

        assert not result.success
        assert result.issues[0].severity is DiagnosticSeverity.CRITICAL

    def test_shared_child_reported(self) -> None:
        """Test that a child owned by two parents is an error."""
        shared = make_node("span", {})
        root = make_node("div", {}, make_node("p", {}, shared), make_node("p", {}, shared))

        result = validate_tree(root)

        assert not result.success
        issues = result.get_issues_by_type(ValidationIssueType.STRUCTURAL_INTEGRITY)
        assert len(issues) == 1
        assert "more than one parent" in issues[0].message
        assert issues[0].element_path == "/div/p[2]/span"

    def test_cycle_reported_and_walk_terminates(self) -> None:
        """Test that a node under itself is critical and does not loop."""
        root = make_node("div", {})
        child = make_node("p", {})
        root.children.append(child)
        child.children.append(root)

        result = validate_tree(root)

        assert not result.success
        critical = result.get_issues_by_severity(DiagnosticSeverity.CRITICAL)
        assert len(critical) == 1
        assert "own ancestor" in critical[0].message

    def test_invalid_child_entry_reported(self) -> None:
        """Test that raw data in the children list is an error."""
        root = make_node("div", {})
        root.children.append({"tag": "p"})

        result = validate_tree(root)

        assert result.error_count == 1
        assert result.issues[0].details == {"index": 0}

    def test_bad_attribute_types_reported(self) -> None:
        """Test that non-string attribute values are errors."""
        root = make_node("div", {})
        root.attributes["tabindex"] = 1

        result = validate_tree(root)

        assert result.get_issues_by_type(ValidationIssueType.ATTRIBUTE_ISSUE)
        assert not result.success

    def test_header_only_node_warns_at_standard(self) -> None:
        """Test that un-normalized nodes are warnings, not errors."""
        root = make_node("div", {}, make_node("br"))

        result = validate_tree(root)

        assert result.success
        assert result.warning_count == 1
        assert result.issues[0].issue_type is ValidationIssueType.NORMALIZATION

    def test_header_only_node_ignored_at_minimal(self) -> None:
        """Test that minimal validation skips normalization checks."""
        root = make_node("div", {}, make_node("br"))

        result = validate_tree(root, ValidationLevel.MINIMAL)

        assert result.issues == []

    def test_strict_tag_names(self) -> None:
        """Test that strict validation flags odd tag names."""
        root = make_node("my tag", {})

        assert validate_tree(root).issues == []
        strict = validate_tree(root, ValidationLevel.STRICT)
        assert strict.warning_count == 1
        assert "strict_tag_names" in strict.rules_checked

    def test_depth_limit_reported_once(self) -> None:
        """Test that exceeding max_depth is a single warning."""
        root = make_node("n", {})
        current = root
        for _ in range(10):
            child = make_node("n", {})
            current.children.append(child)
            current = child

        result = validate_tree(root, config=TreeConfig(max_depth=3))

        assert result.success
        assert result.warning_count == 1
        assert result.issues[0].details == {"depth": 4}

    def test_to_diagnostics(self) -> None:
        """Test conversion of issues to diagnostic entries."""
        root = make_node("div", {}, make_node("br"))

        diagnostics = TreeValidator(correlation_id="req-1").validate(root).to_diagnostics(
            correlation_id="req-1"
        )

        assert len(diagnostics) == 1
        assert diagnostics[0].component == "tree_validator"
        assert diagnostics[0].correlation_id == "req-1"
        assert diagnostics[0].element_path == "/div/br"
