"""Outcome types for the importer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EntityKind(str, Enum):
    """Kind of documentation entity. Values double as labels in messages."""

    FUNCTION = "function"
    CLASS = "class"
    METHOD = "method"
    HOOK = "hook"


class UpsertStatus(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class UpsertOutcome:
    """Result of one upsert. item_id is set only when the item exists in the store."""

    status: UpsertStatus
    item_id: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.item_id is not None

    @property
    def parent_for_children(self) -> int:
        """Parent id children should use: this item's id, or 0 when it was not imported."""
        return self.item_id or 0


@dataclass
class ImportResult:
    """Result of an import run."""

    files: int = 0
    created: int = 0
    updated: int = 0
    unchanged: int = 0
    skipped: int = 0
    stubs: int = 0
    failed: int = 0
    duration_ms: float = 0.0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def imported_count(self) -> int:
        """Items that exist in the store after the run."""
        return self.created + self.updated + self.unchanged

    @property
    def skipped_count(self) -> int:
        """Entities left out by policy (visibility tags or stub hooks)."""
        return self.skipped + self.stubs

    def record(self, outcome: UpsertOutcome) -> None:
        if outcome.status is UpsertStatus.CREATED:
            self.created += 1
        elif outcome.status is UpsertStatus.UPDATED:
            self.updated += 1
        elif outcome.status is UpsertStatus.UNCHANGED:
            self.unchanged += 1
        elif outcome.status is UpsertStatus.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1
            if outcome.error:
                self.errors.append(outcome.error)

    def to_dict(self) -> dict[str, Any]:
        return {
            "files": self.files,
            "imported": self.imported_count,
            "created": self.created,
            "updated": self.updated,
            "unchanged": self.unchanged,
            "skipped": self.skipped_count,
            "failed": self.failed,
            "duration_ms": round(self.duration_ms, 1),
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }
