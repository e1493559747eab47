"""Shared utilities for markup tree manipulation.

This module provides configuration objects, diagnostic types and logging
helpers used across the tree library and its adapters.
"""

from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
)
from .config import (
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    MarkupTreeConfig,
    TreeConfig,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "ConfigError",
    "ConfigValidationError",
    "GlobalConfig",
    "MarkupTreeConfig",
    "TreeConfig",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
]
