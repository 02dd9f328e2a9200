"""Importer: reconcile a parsed documentation tree into a content store.

This module provides:
- Importer / import_tree: depth-first orchestration of a whole run
- UpsertEngine: create-or-update of one entity
- ClassificationAssigner: since-version, package and source-file terms
- TermRegistry: per-run term cache
- should_import: visibility rules (@ignore, @internal)
"""

from refdocs.importer.classify import ClassificationAssigner
from refdocs.importer.orchestrator import Importer, import_tree
from refdocs.importer.result import EntityKind, ImportResult, UpsertOutcome, UpsertStatus
from refdocs.importer.terms import TermRegistry
from refdocs.importer.upsert import FileContext, UpsertEngine
from refdocs.importer.visibility import should_import, skip_reason

__all__ = [
    "ClassificationAssigner",
    "EntityKind",
    "FileContext",
    "ImportResult",
    "Importer",
    "TermRegistry",
    "UpsertEngine",
    "UpsertOutcome",
    "UpsertStatus",
    "import_tree",
    "should_import",
    "skip_reason",
]
