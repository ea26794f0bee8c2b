"""Shared utilities for lenient markup parsing.

This module provides the configuration objects, diagnostic types and logging
helpers used by both the scanner and the tree builder.
"""

from .config import (
    BuilderConfig,
    ConfigError,
    ConfigValidationError,
    ParserConfig,
    ScannerConfig,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)

__all__ = [
    "BuilderConfig",
    "ConfigError",
    "ConfigValidationError",
    "CorrelationLogger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "ParserConfig",
    "PerformanceMetrics",
    "ScannerConfig",
    "get_logger",
]
