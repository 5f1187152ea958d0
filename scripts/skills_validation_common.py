#!/usr/bin/env python3
"""
Agent Skills Validation - Common Module

Shared validation infrastructure for the skill frontmatter validator.
This module contains:
- Type definitions (ErrorKind, ValidationResult, ValidationReport)
- Validator configuration (ValidatorConfig, YAML config loading)
- Fatal error types (FatalIOError, ConfigError)
- Utility functions (repo root, colors, formatting)
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal

import yaml

# =============================================================================
# Type Definitions
# =============================================================================

# Result kinds. Every kind except PASSED is a validation error.
# - STRUCTURE: file exceeds the line ceiling
# - NAME_MISMATCH: 'name' is missing or differs from the directory name
# - NAME_FORMAT: 'name' violates the allowed character pattern
# - DESCRIPTION_LENGTH: 'description' exceeds the character ceiling
# - UNREADABLE: skill file could not be read or decoded as UTF-8
# - PASSED: check passed, shown in verbose mode
ErrorKind = Literal[
    "STRUCTURE",
    "NAME_MISMATCH",
    "NAME_FORMAT",
    "DESCRIPTION_LENGTH",
    "UNREADABLE",
    "PASSED",
]

ERROR_KINDS: tuple[ErrorKind, ...] = (
    "STRUCTURE",
    "NAME_MISMATCH",
    "NAME_FORMAT",
    "DESCRIPTION_LENGTH",
    "UNREADABLE",
)

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_OK = 0  # All skill files valid
EXIT_FAILED = 1  # One or more validation errors
EXIT_FATAL = 2  # Root directory unreadable or bad config

# =============================================================================
# Common Constants
# =============================================================================

DEFAULT_SKILL_FILENAME = "SKILL.md"
DEFAULT_MAX_LINES = 500
DEFAULT_MAX_DESCRIPTION_CHARS = 1024

# Lowercase letters, digits and hyphens; no leading hyphen
NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*$")

# Config file picked up from the validated root when --config is not given
DEFAULT_CONFIG_FILENAME = ".skill-validator.yaml"

# =============================================================================
# Exceptions
# =============================================================================


class FatalIOError(OSError):
    """The skills root directory cannot be enumerated. Aborts the run."""


class ConfigError(ValueError):
    """The validator config file is missing, malformed or has bad values."""


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class ValidationResult:
    """Single validation check result.

    Attributes:
        kind: Error kind, or PASSED for a successful check
        message: Human-readable description of the result
        file: Optional file path related to the result, relative to the root
    """

    kind: ErrorKind
    message: str
    file: str | None = None

    @property
    def is_error(self) -> bool:
        return self.kind != "PASSED"

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, str] = {"kind": self.kind, "message": self.message}
        if self.file is not None:
            result["file"] = self.file
        return result


@dataclass
class ValidationReport:
    """Aggregate outcome of one validator run.

    Results are kept in the order checks executed. ``errors`` exposes the
    messages of every non-PASSED result; ``passed`` is true iff there are none.
    """

    results: list[ValidationResult] = field(default_factory=list)
    files_checked: list[str] = field(default_factory=list)

    def add(self, kind: ErrorKind, message: str, file: str | None = None) -> None:
        """Add a validation result."""
        self.results.append(ValidationResult(kind, message, file))

    def ok(self, message: str, file: str | None = None) -> None:
        """Add a passed check."""
        self.add("PASSED", message, file)

    def error(self, kind: ErrorKind, message: str, file: str | None = None) -> None:
        """Add a validation error."""
        if kind == "PASSED":
            raise ValueError("PASSED is not an error kind")
        self.add(kind, message, file)

    @property
    def errors(self) -> list[str]:
        """Messages of all error results, in the order they were found."""
        return [r.message for r in self.results if r.is_error]

    @property
    def passed(self) -> bool:
        return not any(r.is_error for r in self.results)

    @property
    def exit_code(self) -> int:
        return EXIT_OK if self.passed else EXIT_FAILED

    def get_errors_by_kind(self, kind: ErrorKind) -> list[ValidationResult]:
        """Get all results of a specific kind.

        Args:
            kind: The result kind to filter by

        Returns:
            List of results matching the specified kind
        """
        return [r for r in self.results if r.kind == kind]

    def count_by_kind(self) -> dict[str, int]:
        """Get count of results by kind."""
        counts: dict[str, int] = {kind: 0 for kind in ERROR_KINDS}
        counts["PASSED"] = 0
        for r in self.results:
            counts[r.kind] = counts.get(r.kind, 0) + 1
        return counts

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "passed": self.passed,
            "exit_code": self.exit_code,
            "files_checked": list(self.files_checked),
            "counts": self.count_by_kind(),
            "errors": self.errors,
            "results": [r.to_dict() for r in self.results],
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert report to JSON string.

        Args:
            indent: JSON indentation level (default 2)

        Returns:
            JSON string representation of the report
        """
        return json.dumps(self.to_dict(), indent=indent)


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class ValidatorConfig:
    """Limits and conventions applied to every skill file.

    Attributes:
        skill_filename: Name of the metadata file inside each skill directory
        max_lines: Maximum number of lines allowed in a skill file
        max_description_chars: Maximum length of the description, in characters
    """

    skill_filename: str = DEFAULT_SKILL_FILENAME
    max_lines: int = DEFAULT_MAX_LINES
    max_description_chars: int = DEFAULT_MAX_DESCRIPTION_CHARS


def load_yaml_file(file_path: Path) -> Any:
    """Load a YAML file with ``yaml.safe_load``.

    Args:
        file_path: Path to YAML file

    Returns:
        Parsed YAML content (None for an empty file)

    Raises:
        ConfigError: If the file cannot be read or is not valid YAML
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {file_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {file_path}: {e}") from e


def config_from_dict(data: dict[str, Any], source: str = "<config>") -> ValidatorConfig:
    """Build a ValidatorConfig from a mapping, rejecting unknown keys and bad types."""
    bad_keys = [key for key in data if not isinstance(key, str)]
    if bad_keys:
        raise ConfigError(f"{source}: config keys must be strings, got {', '.join(repr(k) for k in bad_keys)}")

    known = {f.name for f in fields(ValidatorConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"{source}: unknown config key(s): {', '.join(unknown)}")

    for key in ("max_lines", "max_description_chars"):
        if key not in data:
            continue
        value = data[key]
        # bool is a subclass of int
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigError(f"{source}: '{key}' must be a positive integer, got {value!r}")

    if "skill_filename" in data:
        value = data["skill_filename"]
        if not isinstance(value, str) or not value.strip() or "/" in value:
            raise ConfigError(f"{source}: 'skill_filename' must be a plain file name, got {value!r}")

    return ValidatorConfig(**data)


def load_config(config_path: Path | None, root: Path) -> ValidatorConfig:
    """Resolve the validator configuration.

    An explicit ``config_path`` must exist. Without one, the root's
    ``.skill-validator.yaml`` is used when present, else the defaults.
    """
    if config_path is None:
        candidate = root / DEFAULT_CONFIG_FILENAME
        if not candidate.is_file():
            return ValidatorConfig()
        config_path = candidate
    elif not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")

    data = load_yaml_file(config_path)
    if data is None:
        return ValidatorConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: config must be a mapping, got {type(data).__name__}")
    return config_from_dict(data, source=str(config_path))


# =============================================================================
# Utility Functions
# =============================================================================


def get_repo_root() -> Path:
    """Get the skills repository root (parent of scripts/).

    Returns:
        Path to the repo root, assuming this module lives in scripts/.
    """
    return Path(__file__).resolve().parent.parent


# =============================================================================
# Color Formatting (for terminal output)
# =============================================================================

# ANSI color codes
COLORS = {
    "ERROR": "\033[91m",  # Red
    "PASSED": "\033[92m",  # Green
    "RESET": "\033[0m",
}


def colorize(text: str, color: str, enabled: bool = True) -> str:
    """Apply color to text when enabled."""
    if not enabled:
        return text
    return f"{COLORS.get(color, '')}{text}{COLORS['RESET']}"


def format_result(result: ValidationResult, use_color: bool = False) -> str:
    """Format a single validation result for terminal output."""
    if result.is_error:
        return f"{colorize('ERROR:', 'ERROR', use_color)} {result.message}"
    return f"{colorize('OK:', 'PASSED', use_color)} {result.message}"
