"""Configuration classes for contextual encoding.

This module provides configuration objects for writers, buffered encoders and
the translation markup hook.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

# Matches the initial capacity hint of URL encoders
DEFAULT_BUFFER_CAPACITY = 128

DEFAULT_INDENT_UNIT = "\t"
DEFAULT_NEWLINE = "\n"

_COMPONENTS = ["writer", "buffer", "markup"]


@dataclass
class WriterConfig:
    """Configuration for media writer presentation state."""

    indent_unit: str = DEFAULT_INDENT_UNIT
    newline: str = DEFAULT_NEWLINE
    indent: bool = False
    depth: int = 0

    def __post_init__(self) -> None:
        """Validate writer configuration."""
        if not self.indent_unit or self.indent_unit.strip(" \t"):
            raise ValueError("indent_unit must be a non-empty run of spaces or tabs")
        if self.newline not in ("\n", "\r\n"):
            raise ValueError("newline must be '\\n' or '\\r\\n'")
        if self.depth < 0:
            raise ValueError("depth must be >= 0")


@dataclass
class BufferConfig:
    """Configuration for buffered (whole-value) encoders."""

    initial_capacity: int = DEFAULT_BUFFER_CAPACITY
    max_buffered_chars: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate buffer configuration."""
        if self.initial_capacity <= 0:
            raise ValueError("initial_capacity must be > 0")
        if self.max_buffered_chars is not None and self.max_buffered_chars <= 0:
            raise ValueError("max_buffered_chars must be > 0 or None")


@dataclass
class MarkupConfig:
    """Configuration for translation lookup markup."""

    enable_lookup_markup: bool = False
    comment_key_max_length: int = 256

    def __post_init__(self) -> None:
        """Validate markup configuration."""
        if self.comment_key_max_length <= 0:
            raise ValueError("comment_key_max_length must be > 0")


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
class EncodingConfig:
    """Complete configuration for an output stream.

    Immutable; a single instance may be shared by any number of writers.
    """

    writer: WriterConfig = field(default_factory=WriterConfig)
    buffer: BufferConfig = field(default_factory=BufferConfig)
    markup: MarkupConfig = field(default_factory=MarkupConfig)

    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.writer.__post_init__()
            self.buffer.__post_init__()
            self.markup.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        if (
            self.buffer.max_buffered_chars is not None
            and self.buffer.max_buffered_chars < self.buffer.initial_capacity
        ):
            raise ConfigValidationError(
                "max_buffered_chars is smaller than initial_capacity",
                field_name="buffer.max_buffered_chars",
                suggestions=["Reduce buffer.initial_capacity",
                             "Increase buffer.max_buffered_chars"]
            )

    def override(self, **kwargs: Any) -> "EncodingConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Keyword arguments for configuration fields to override

        Returns:
            New EncodingConfig instance with overrides applied

        Example:
            >>> config = EncodingConfig()
            >>> new_config = config.override(
            ...     writer__indent=True,
            ...     buffer__max_buffered_chars=4096
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for field_name in _COMPONENTS:
            current_config = getattr(self, field_name)
            if field_name in nested_overrides:
                try:
                    new_fields[field_name] = replace(
                        current_config, **nested_overrides[field_name]
                    )
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=field_name) from e
            else:
                new_fields[field_name] = current_config

        for key, value in nested_overrides.items():
            if key not in _COMPONENTS:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format.

        Returns:
            Dictionary representation of the configuration
        """
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, Enum):
                return obj.name
            if isinstance(obj, (list, tuple, set)):
                return [_dataclass_to_dict(item) for item in obj]
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EncodingConfig":
        """Create configuration from dictionary.

        Args:
            data: Dictionary containing configuration data

        Returns:
            EncodingConfig instance created from dictionary
        """
        component_classes = {
            "writer": WriterConfig,
            "buffer": BufferConfig,
            "markup": MarkupConfig,
        }
        unknown = set(data) - set(component_classes) - {"name"}
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration keys: {sorted(unknown)}"
            )

        fields: Dict[str, Any] = {}
        try:
            for name, component_class in component_classes.items():
                if name in data:
                    fields[name] = component_class(**data[name])
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e
        if "name" in data:
            fields["name"] = data["name"]
        return cls(**fields)

    @classmethod
    def from_json(cls, json_str: str) -> "EncodingConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def compact(cls) -> "EncodingConfig":
        """Create configuration preset that never indents."""
        return cls(name="compact")

    @classmethod
    def pretty(cls) -> "EncodingConfig":
        """Create configuration preset for indented, human-readable output."""
        return cls(writer=WriterConfig(indent=True), name="pretty")

    @classmethod
    def translation_debug(cls) -> "EncodingConfig":
        """Create preset that wraps translated values in lookup comments."""
        return cls(
            writer=WriterConfig(indent=True),
            markup=MarkupConfig(enable_lookup_markup=True),
            name="translation_debug"
        )
