"""Comprehensive tests for configuration system."""

import json
import pytest

from markup_tree.shared.config import (
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    MarkupTreeConfig,
    TreeConfig,
)


class TestTreeConfig:
    """Test suite for TreeConfig."""

    def test_default_configuration(self):
        """Test default tree configuration values."""
        config = TreeConfig()

        assert config.text_separator == " "
        assert config.check_ownership is False
        assert config.validation_strictness == "standard"
        assert config.max_depth == 1000

    def test_invalid_strictness(self):
        """Test that unknown strictness names are rejected."""
        with pytest.raises(ValueError, match="validation_strictness"):
            TreeConfig(validation_strictness="paranoid")

    def test_invalid_max_depth(self):
        """Test that max_depth must be positive."""
        with pytest.raises(ValueError, match="max_depth must be > 0"):
            TreeConfig(max_depth=0)

    def test_invalid_separator(self):
        """Test that the text separator must be a string."""
        with pytest.raises(ValueError, match="text_separator"):
            TreeConfig(text_separator=None)


class TestGlobalConfig:
    """Test suite for GlobalConfig."""

    def test_default_configuration(self):
        """Test default global configuration values."""
        config = GlobalConfig()

        assert config.logging_level == "INFO"
        assert config.enable_correlation_tracking is True

    def test_invalid_logging_level(self):
        """Test that unknown logging levels are rejected."""
        with pytest.raises(ValueError, match="logging_level"):
            GlobalConfig(logging_level="VERBOSE")


class TestMarkupTreeConfig:
    """Test suite for the complete configuration."""

    def test_default_configuration(self):
        """Test default complete configuration."""
        config = MarkupTreeConfig()

        assert isinstance(config.tree, TreeConfig)
        assert isinstance(config.global_, GlobalConfig)
        assert config.version == "1.0.0"
        assert config.name is None

    def test_configuration_is_immutable(self):
        """Test that the complete configuration is frozen."""
        config = MarkupTreeConfig()

        with pytest.raises(AttributeError):
            config.name = "changed"

    def test_ownership_independent_of_strictness(self):
        """Test that mutation checks and validation strictness combine freely."""
        config = MarkupTreeConfig(
            tree=TreeConfig(check_ownership=True, validation_strictness="minimal")
        )

        assert config.tree.check_ownership is True
        assert config.tree.validation_strictness == "minimal"

    def test_override_component_fields(self):
        """Test overriding nested component fields."""
        config = MarkupTreeConfig()

        new_config = config.override(
            tree__check_ownership=True,
            tree__text_separator="|",
            global___logging_level="DEBUG",
            name="custom",
        )

        assert new_config.tree.check_ownership is True
        assert new_config.tree.text_separator == "|"
        assert new_config.global_.logging_level == "DEBUG"
        assert new_config.name == "custom"
        assert config.tree.check_ownership is False
        assert config.global_.logging_level == "INFO"

    def test_override_with_invalid_value(self):
        """Test that invalid overrides raise ConfigValidationError."""
        with pytest.raises(ConfigValidationError) as info:
            MarkupTreeConfig().override(tree__max_depth=-1)

        assert info.value.field_name == "tree"
        assert isinstance(info.value, ConfigError)

    def test_override_preset_with_ownership_checks(self):
        """Test enabling ownership checks on the production preset."""
        config = MarkupTreeConfig.production().override(tree__check_ownership=True)

        assert config.tree.check_ownership is True
        assert config.tree.validation_strictness == "minimal"

    def test_to_dict(self):
        """Test dictionary conversion."""
        data = MarkupTreeConfig(name="test").to_dict()

        assert data["tree"]["validation_strictness"] == "standard"
        assert data["global_"]["logging_level"] == "INFO"
        assert data["name"] == "test"

    def test_json_round_trip(self):
        """Test JSON serialization and loading."""
        original = MarkupTreeConfig.debug()

        loaded = MarkupTreeConfig.from_json(original.to_json())

        assert loaded == original
        assert json.loads(original.to_json())["tree"]["check_ownership"] is True

    def test_from_dict_ignores_unknown_keys(self):
        """Test that unknown keys are ignored when loading."""
        config = MarkupTreeConfig.from_dict({
            "tree": {"max_depth": 50, "future_option": True},
            "global_": {"logging_level": "ERROR"},
            "unknown_section": {},
        })

        assert config.tree.max_depth == 50
        assert config.global_.logging_level == "ERROR"

    def test_from_dict_with_partial_data(self):
        """Test that missing sections use defaults."""
        config = MarkupTreeConfig.from_dict({"name": "partial"})

        assert config.tree == TreeConfig()
        assert config.name == "partial"

    def test_from_dict_rejects_non_mapping_component(self):
        """Test that component sections must be mappings."""
        with pytest.raises(ConfigValidationError, match="tree must be a mapping"):
            MarkupTreeConfig.from_dict({"tree": "strict"})

    def test_from_dict_with_invalid_values(self):
        """Test that invalid values in loaded data are reported."""
        with pytest.raises(ConfigValidationError) as info:
            MarkupTreeConfig.from_dict({"global_": {"logging_level": "LOUD"}})

        assert info.value.field_name == "global_"


class TestPresets:
    """Test preset configurations."""

    def test_debug_preset(self):
        """Test the debug preset enables every check."""
        config = MarkupTreeConfig.debug()

        assert config.tree.check_ownership is True
        assert config.tree.validation_strictness == "strict"
        assert config.global_.logging_level == "DEBUG"
        assert config.name == "debug"

    def test_production_preset(self):
        """Test the production preset disables per-mutation checks."""
        config = MarkupTreeConfig.production()

        assert config.tree.check_ownership is False
        assert config.tree.validation_strictness == "minimal"
        assert config.global_.logging_level == "WARNING"
        assert config.name == "production"
