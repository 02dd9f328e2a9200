"""Visibility rules: which entities are imported at all."""

from __future__ import annotations

from refdocs.models import Docblock


def skip_reason(doc: Docblock, import_internal: bool) -> str | None:
    """Tag that keeps this entity out of the store, or None to import it.

    @ignore always wins; @internal is honored unless import_internal is set.
    """
    if doc.has_tag("ignore"):
        return "ignore"
    if doc.has_tag("internal") and not import_internal:
        return "internal"
    return None


def should_import(doc: Docblock, import_internal: bool) -> bool:
    return skip_reason(doc, import_internal) is None
