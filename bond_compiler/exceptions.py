"""Exception hierarchy for bond-compiler."""

from pathlib import Path


class BondCompilerError(Exception):
    """Base exception for all bond-compiler errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all bond-compiler errors with
    a single except clause.
    """

    pass


# Configuration Errors
class ConfigError(BondCompilerError):
    """Configuration-related errors."""

    pass


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Translation Errors
class TranslationError(BondCompilerError):
    """A bond could not be lowered to a query clause."""

    pass


class UnsupportedOperatorError(TranslationError):
    """Operator has no translation rule for the given field."""

    def __init__(self, operator: object, field: str) -> None:
        self.operator = operator
        self.field = field
        super().__init__(f"Operator {operator} not supported for field {field}")


class UnsupportedSpatialRelationError(TranslationError):
    """Spatial operator has no geo-shape relation."""

    def __init__(self, operator: object) -> None:
        self.operator = operator
        super().__init__(f"Spatial operator {operator} has no supported shape relation")


class BondValueError(TranslationError):
    """Bond value cannot be parsed for the field's declared type."""

    def __init__(self, field: str, value: object, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value {value!r} for field {field}: {reason}")


# Assembly Errors
class AssemblyError(BondCompilerError):
    """Incremental query assembly violated the open/close protocol."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Malformed query assembly: {reason}")


# Min/Max Errors
class MinMaxDiscoveryError(BondCompilerError):
    """The delegated extremum computation failed."""

    def __init__(self, field: str, detail: str) -> None:
        self.field = field
        self.detail = detail
        super().__init__(f"Failed to find extremum of {field}: {detail}")


# Parse Errors
class BondParseError(BondCompilerError):
    """Raised when a textual bond expression cannot be parsed."""

    def __init__(self, text: str, message: str) -> None:
        self.text = text
        super().__init__(f"Failed to parse bond expression '{text}': {message}")
