"""Store contract used by the importer.

Every store call returns an explicit result so callers cannot mistake an
error for an id:

    Found(value)   the lookup or write succeeded
    NOT_FOUND      the lookup matched nothing
    Failure(reason) the store rejected the call
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Generic, Protocol, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class _NotFound:
    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


@dataclass(frozen=True, slots=True)
class Failure:
    reason: str


LookupResult = Found[T] | _NotFound
WriteResult = Found[T] | Failure


@dataclass(frozen=True, slots=True)
class Actor:
    """The authenticated user an import runs as."""

    id: int
    login: str


@dataclass(frozen=True, slots=True)
class TermRef:
    id: int
    name: str
    slug: str
    taxonomy: str
    parent_id: int = 0


@dataclass(frozen=True, slots=True)
class ItemFields:
    """Content fields compared and written by the upsert engine."""

    post_type: str
    slug: str
    title: str
    excerpt: str
    content: str
    parent_id: int = 0
    status: str = "publish"

    def diff(self, other: ItemFields) -> dict[str, tuple[Any, Any]]:
        """Fields whose values differ, as {name: (ours, theirs)}."""
        changed: dict[str, tuple[Any, Any]] = {}
        for f in fields(self):
            ours, theirs = getattr(self, f.name), getattr(other, f.name)
            if ours != theirs:
                changed[f.name] = (ours, theirs)
        return changed


@dataclass(frozen=True, slots=True)
class StoredItem:
    id: int
    fields: ItemFields
    meta: dict[str, Any] = field(default_factory=dict)


class Store(Protocol):
    """Operations the importer needs from a content store."""

    def current_actor(self) -> Actor | None: ...

    def find_item(self, slug: str, post_type: str, parent_id: int) -> LookupResult[StoredItem]: ...

    def create_item(self, fields: ItemFields) -> WriteResult[int]: ...

    def update_item(self, item_id: int, fields: ItemFields) -> WriteResult[int]: ...

    def set_item_meta(self, item_id: int, key: str, value: Any) -> None: ...

    def find_term(self, label: str, taxonomy: str, parent_id: int = 0) -> LookupResult[TermRef]: ...

    def find_term_by_slug(self, slug: str, taxonomy: str) -> LookupResult[TermRef]: ...

    def create_term(
        self, label: str, taxonomy: str, parent_id: int = 0, slug: str | None = None
    ) -> WriteResult[TermRef]: ...

    def set_item_terms(self, item_id: int, taxonomy: str, term_ids: list[int]) -> None: ...
