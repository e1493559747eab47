"""Configuration classes for markup tree manipulation.

This module provides configuration objects for the tree library, enabling
control over text joining, ownership checking, validation strictness and
logging.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

_VALID_STRICTNESS = ["minimal", "standard", "strict"]
_VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
_COMPONENTS = ["tree", "global_"]


@dataclass
class TreeConfig:
    """Configuration for tree traversal, mutation and validation."""

    # Text extraction settings
    text_separator: str = " "

    # Mutation settings
    check_ownership: bool = False  # Reject cycles and double-parented children

    # Validation settings
    validation_strictness: str = "standard"  # minimal, standard, strict
    max_depth: int = 1000

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if not isinstance(self.text_separator, str):
            raise ValueError("text_separator must be a string")
        if self.validation_strictness not in _VALID_STRICTNESS:
            raise ValueError(
                "validation_strictness must be 'minimal', 'standard', or 'strict'"
            )
        if self.max_depth <= 0:
            raise ValueError("max_depth must be > 0")


@dataclass
class GlobalConfig:
    """Global configuration settings that apply across all components."""

    logging_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in _VALID_LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {_VALID_LOGGING_LEVELS}")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class MarkupTreeConfig:
    """Complete configuration for the markup tree library.

    Immutable; derive changed copies with :meth:`override`.
    """

    tree: TreeConfig = field(default_factory=TreeConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    # Metadata
    version: str = "1.0.0"
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.tree.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "MarkupTreeConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Field overrides; ``component__field`` keys target a
                component configuration

        Returns:
            New MarkupTreeConfig instance with overrides applied

        Example:
            >>> config = MarkupTreeConfig()
            >>> new_config = config.override(
            ...     tree__check_ownership=True,
            ...     global___logging_level="DEBUG"
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if key.startswith("global___"):
                nested_overrides.setdefault("global_", {})[key[len("global___"):]] = value
            elif "__" in key:
                component, field_name = key.split("__", 1)
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for key, value in nested_overrides.items():
            if key in _COMPONENTS and isinstance(value, dict):
                try:
                    new_fields[key] = replace(getattr(self, key), **value)
                except ValueError as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            """Recursively convert dataclass to dict."""
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, Enum):
                return obj.name
            if isinstance(obj, (list, tuple, set)):
                return [_dataclass_to_dict(item) for item in obj]
            if isinstance(obj, dict):
                return {key: _dataclass_to_dict(value) for key, value in obj.items()}
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MarkupTreeConfig":
        """Create configuration from dictionary.

        Unknown keys are ignored so that configuration files written by newer
        versions still load.
        """
        component_classes = {"tree": TreeConfig, "global_": GlobalConfig}
        field_values: Dict[str, Any] = {}

        for field_name in cls.__dataclass_fields__:
            if field_name not in data:
                continue
            value = data[field_name]
            if field_name in component_classes:
                if not isinstance(value, dict):
                    raise ConfigValidationError(
                        f"{field_name} must be a mapping", field_name=field_name
                    )
                target_class = component_classes[field_name]
                known = {
                    key: item for key, item in value.items()
                    if key in target_class.__dataclass_fields__
                }
                try:
                    field_values[field_name] = target_class(**known)
                except ValueError as e:
                    raise ConfigValidationError(str(e), field_name=field_name) from e
            else:
                field_values[field_name] = value

        return cls(**field_values)

    @classmethod
    def from_json(cls, json_str: str) -> "MarkupTreeConfig":
        """Create configuration from JSON string."""
        data = json.loads(json_str)
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def debug(cls) -> "MarkupTreeConfig":
        """Create configuration preset with every consistency check enabled."""
        return cls(
            tree=TreeConfig(
                check_ownership=True,
                validation_strictness="strict",
            ),
            global_=GlobalConfig(logging_level="DEBUG"),
            name="debug",
            description="Ownership checks, strict validation and debug logging",
        )

    @classmethod
    def production(cls) -> "MarkupTreeConfig":
        """Create configuration preset for trusted trees on the hot path."""
        return cls(
            tree=TreeConfig(
                check_ownership=False,
                validation_strictness="minimal",
            ),
            global_=GlobalConfig(logging_level="WARNING"),
            name="production",
            description="No per-mutation checks, warnings and above logged",
        )
