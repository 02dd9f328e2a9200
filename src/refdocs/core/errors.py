"""refdocs error types with typed error codes.

Error code ranges:
- 1xxx: Parse input (fatal)
- 2xxx: Precondition (fatal)
- 3xxx: Term resolution (recorded, run continues)
- 4xxx: Item upsert (recorded, run continues)
- 5xxx: Config
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Parse input (1xxx)
    PARSE_INPUT_MISSING = 1001
    PARSE_INPUT_UNREADABLE = 1002
    PARSE_INPUT_INVALID = 1003

    # Precondition (2xxx)
    PRECONDITION_NO_ACTOR = 2001

    # Term resolution (3xxx)
    TERM_REJECTED = 3001

    # Item upsert (4xxx)
    ITEM_REJECTED = 4001

    # Config (5xxx)
    CONFIG_PARSE_ERROR = 5001
    CONFIG_INVALID_VALUE = 5002
    CONFIG_UNKNOWN_KEY = 5003


@dataclass(frozen=True, slots=True)
class RefDocsError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'TERM_REJECTED')."""
        return self.code.name

    @property
    def fatal(self) -> bool:
        """Whether this error aborts a whole import run."""
        return self.code < 3000

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ParseInputError(RefDocsError):
    """The parsed documentation tree is absent or malformed."""

    @classmethod
    def missing(cls) -> "ParseInputError":
        return cls(
            code=ErrorCode.PARSE_INPUT_MISSING,
            message="No parsed documentation tree was given",
        )

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "ParseInputError":
        return cls(
            code=ErrorCode.PARSE_INPUT_UNREADABLE,
            message=f"Can't read {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid(cls, reason: str, **details: Any) -> "ParseInputError":
        return cls(
            code=ErrorCode.PARSE_INPUT_INVALID,
            message=f"Parsed tree is malformed: {reason}",
            details=details,
        )


class PreconditionError(RefDocsError):
    """A run precondition does not hold."""

    @classmethod
    def no_actor(cls) -> "PreconditionError":
        return cls(
            code=ErrorCode.PRECONDITION_NO_ACTOR,
            message="Please specify a valid user: --user=<login>",
        )


class TermResolutionError(RefDocsError):
    """The store rejected a term lookup or creation."""

    @classmethod
    def rejected(cls, label: str, taxonomy: str, reason: str) -> "TermResolutionError":
        return cls(
            code=ErrorCode.TERM_REJECTED,
            message=f'Cannot set {taxonomy} term "{label}": {reason}',
            details={"label": label, "taxonomy": taxonomy, "reason": reason},
        )


class ItemUpsertError(RefDocsError):
    """The store rejected an item create or update."""

    @classmethod
    def rejected(cls, kind: str, name: str, reason: str) -> "ItemUpsertError":
        return cls(
            code=ErrorCode.ITEM_REJECTED,
            message=f'Problem inserting/updating post for {kind} "{name}": {reason}',
            details={"kind": kind, "name": name, "reason": reason},
        )


class ConfigError(RefDocsError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def unknown_key(cls, key: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_UNKNOWN_KEY,
            message=f"Unknown setting: {key}",
            details={"key": key},
        )
