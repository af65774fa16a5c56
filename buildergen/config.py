"""
Generator configuration.

Settings come from defaults, an optional JSON file, and environment
variables, in that order of increasing precedence when combined through
``GeneratorConfig.load``.
"""

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import SchemaError
from .logging import get_logger
from .schema import SourceLocation

logger = get_logger(__name__)

DEFAULT_RUNTIME_MODULE = "buildergen.runtime"


@dataclass(frozen=True)
class GeneratorConfig:
    """Options controlling the text of generated modules."""

    indent_size: int = 4
    runtime_module: str = DEFAULT_RUNTIME_MODULE
    emit_header: bool = True
    emit_docstrings: bool = True

    @property
    def indent(self) -> str:
        return " " * self.indent_size

    @classmethod
    def from_dict(cls, data: Dict[str, Any], location: Optional[SourceLocation] = None) -> "GeneratorConfig":
        """Build a config from a mapping, rejecting unknown keys and wrong types."""
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise SchemaError(f"unknown configuration keys: {', '.join(unknown)}", location)

        values: Dict[str, Any] = {}
        for key, value in data.items():
            expected = type(getattr(cls(), key))
            if expected is int and (isinstance(value, bool) or not isinstance(value, int)):
                raise SchemaError(f"'{key}' must be an integer", location)
            if expected is not int and not isinstance(value, expected):
                raise SchemaError(f"'{key}' must be a {expected.__name__}", location)
            values[key] = value

        config = cls(**values)
        config.validate(location)
        return config

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "GeneratorConfig":
        """Load a config from a JSON object stored in ``path``."""
        location = SourceLocation(str(path))
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise SchemaError(f"cannot read configuration: {e}", location) from e
        except json.JSONDecodeError as e:
            raise SchemaError(
                f"invalid JSON: {e.msg}", SourceLocation(str(path), e.lineno, e.colno)
            ) from e
        if not isinstance(data, dict):
            raise SchemaError("configuration must be a JSON object", location)
        logger.debug(f"Loaded generator configuration from {path}")
        return cls.from_dict(data, location)

    def with_env(self, environ: Optional[Dict[str, str]] = None) -> "GeneratorConfig":
        """Return a copy with ``BUILDERGEN_*`` environment overrides applied."""
        environ = os.environ if environ is None else environ
        changes: Dict[str, Any] = {}
        if "BUILDERGEN_INDENT_SIZE" in environ:
            try:
                changes["indent_size"] = int(environ["BUILDERGEN_INDENT_SIZE"])
            except ValueError as e:
                raise SchemaError("BUILDERGEN_INDENT_SIZE must be an integer") from e
        if "BUILDERGEN_RUNTIME_MODULE" in environ:
            changes["runtime_module"] = environ["BUILDERGEN_RUNTIME_MODULE"]
        config = replace(self, **changes)
        config.validate()
        return config

    @classmethod
    def load(
        cls, path: Optional[Union[str, Path]] = None, environ: Optional[Dict[str, str]] = None
    ) -> "GeneratorConfig":
        """Defaults, then ``path`` if given, then the environment."""
        config = cls.from_file(path) if path else cls()
        return config.with_env(environ)

    def validate(self, location: Optional[SourceLocation] = None) -> None:
        if not 1 <= self.indent_size <= 8:
            raise SchemaError("indent_size must be between 1 and 8", location)
        if not all(part.isidentifier() for part in self.runtime_module.split(".")):
            raise SchemaError(f"'{self.runtime_module}' is not a module path", location)


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration for the command line tool."""

    level: Optional[str] = None
    log_file: Optional[str] = None
