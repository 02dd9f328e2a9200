"""Content store: contract, result types and the SQLite implementation."""

from refdocs.store.base import (
    NOT_FOUND,
    Actor,
    Failure,
    Found,
    ItemFields,
    Store,
    StoredItem,
    TermRef,
)
from refdocs.store.database import Database
from refdocs.store.sql import SqlStore

__all__ = [
    "NOT_FOUND",
    "Actor",
    "Database",
    "Failure",
    "Found",
    "ItemFields",
    "SqlStore",
    "Store",
    "StoredItem",
    "TermRef",
]
