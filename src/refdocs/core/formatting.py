"""Summary formatting utilities for consistent terminal output.

Design principles:
- Every summary fits on one line
- Grammatically correct (1 item vs 2 items)
- Zero counts are left out
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from refdocs.importer.result import ImportResult


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return grammatically correct singular/plural form.

    Args:
        count: The number of items
        singular: Singular form (e.g., "item")
        plural: Plural form (default: singular + "s")

    Returns:
        Formatted string like "1 item" or "3 items"
    """
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples:
        0.345 -> "0.3s"
        90.0 -> "1m 30s"
        3661.0 -> "1h 1m"
    """
    if seconds < 0:
        raise ValueError("Duration must be non-negative")

    if seconds < 60:
        return f"{seconds:.1f}s"

    minutes = int(seconds // 60)
    remaining_secs = int(seconds % 60)

    if minutes < 60:
        return f"{minutes}m {remaining_secs}s"

    hours = minutes // 60
    remaining_mins = minutes % 60
    return f"{hours}h {remaining_mins}m"


def format_import_summary(result: ImportResult) -> str:
    """One-line summary of an import run.

    Examples:
        "3 created, 1 updated, 2 skipped in 0.4s"
        "nothing imported in 0.0s"
    """
    parts = [
        f"{count} {label}"
        for count, label in (
            (result.created, "created"),
            (result.updated, "updated"),
            (result.unchanged, "unchanged"),
            (result.skipped_count, "skipped"),
            (result.failed, "failed"),
        )
        if count
    ]
    body = ", ".join(parts) if parts else "nothing imported"
    return f"{body} in {format_duration(result.duration_ms / 1000)}"
