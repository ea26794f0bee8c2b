"""Configuration classes for lenient markup parsing.

This module provides configuration objects for the scanner, the tree builder
and the parser facade that ties them together.
"""

import json
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

_COMPONENTS = ("scanner", "builder")


def _require_bool(value: Any, field_name: str) -> None:
    if not isinstance(value, bool):
        raise ValueError(f"{field_name} must be a bool, got {type(value).__name__}")


@dataclass
class ScannerConfig:
    """Configuration for the lexical scanner."""

    enable_diagnostics: bool = True

    def __post_init__(self) -> None:
        """Validate scanner configuration."""
        _require_bool(self.enable_diagnostics, "enable_diagnostics")


@dataclass
class BuilderConfig:
    """Configuration for tree building.

    terminate_on_tag_end switches from the default lenient assembly, where
    closing tags are discarded and every element extends to the end of the
    stream, to one where any closing tag ends the innermost open element.
    Tag names are never compared.
    """

    terminate_on_tag_end: bool = False
    enable_diagnostics: bool = True

    def __post_init__(self) -> None:
        """Validate builder configuration."""
        _require_bool(self.terminate_on_tag_end, "terminate_on_tag_end")
        _require_bool(self.enable_diagnostics, "enable_diagnostics")


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
class ParserConfig:
    """Immutable configuration for a scanner/builder pair.

    Attributes:
        scanner: Scanner settings
        builder: Tree builder settings
        trim_input: Strip leading and trailing whitespace from the buffer
            once before scanning
        correlation_id: Default correlation ID for parsers built from this
            configuration
    """

    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    builder: BuilderConfig = field(default_factory=BuilderConfig)
    trim_input: bool = True
    correlation_id: Optional[str] = None

    # Metadata
    version: str = "1.0.0"
    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete parser configuration."""
        if not isinstance(self.scanner, ScannerConfig):
            raise ConfigValidationError(
                "scanner must be a ScannerConfig", field_name="scanner"
            )
        if not isinstance(self.builder, BuilderConfig):
            raise ConfigValidationError(
                "builder must be a BuilderConfig", field_name="builder"
            )
        try:
            self.scanner.__post_init__()
            self.builder.__post_init__()
            _require_bool(self.trim_input, "trim_input")
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Default configuration: closing tags never bound an element."""
        return cls(name="lenient")

    @classmethod
    def structured(cls) -> "ParserConfig":
        """Configuration where closing tags end the innermost open element."""
        return cls(builder=BuilderConfig(terminate_on_tag_end=True), name="structured")

    @classmethod
    def quiet(cls) -> "ParserConfig":
        """Configuration with diagnostic collection switched off."""
        return cls(
            scanner=ScannerConfig(enable_diagnostics=False),
            builder=BuilderConfig(enable_diagnostics=False),
            name="quiet",
        )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Fields to override; component fields use
                ``component__field`` notation

        Returns:
            New ParserConfig instance with overrides applied

        Example:
            >>> config = ParserConfig().override(
            ...     builder__terminate_on_tag_end=True,
            ...     trim_input=False,
            ... )
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=[f"Use one of {list(_COMPONENTS)}"],
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        new_fields: Dict[str, Any] = {}
        for component, overrides in nested_overrides.items():
            try:
                new_fields[component] = replace(getattr(self, component), **overrides)
            except TypeError as e:
                raise ConfigValidationError(
                    f"Invalid {component} override: {e}", field_name=component
                ) from e
            except ValueError as e:
                raise ConfigValidationError(str(e), field_name=component) from e
        new_fields.update(top_level)

        try:
            return replace(self, **new_fields)
        except TypeError as e:
            raise ConfigValidationError(f"Invalid override: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {}
        for config_field in fields(self):
            value = getattr(self, config_field.name)
            if config_field.name in _COMPONENTS:
                value = {f.name: getattr(value, f.name) for f in fields(value)}
            result[config_field.name] = value
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Raises:
            ConfigValidationError: If the dictionary has unknown keys or
                invalid values
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration data must be a dictionary")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration keys: {unknown}",
                field_name=unknown[0],
                suggestions=[f"Valid keys are {sorted(known)}"],
            )

        kwargs = dict(data)
        try:
            if "scanner" in kwargs:
                kwargs["scanner"] = ScannerConfig(**kwargs["scanner"])
            if "builder" in kwargs:
                kwargs["builder"] = BuilderConfig(**kwargs["builder"])
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(f"Invalid component configuration: {e}") from e
        return cls(**kwargs)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid JSON: {e}") from e
        return cls.from_dict(data)
