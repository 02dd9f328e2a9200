"""SQLite implementation of the Store contract.

Every public method is its own unit of work. Term creation runs the
existence check and the insert inside one BEGIN IMMEDIATE transaction so
two processes importing at once cannot both create the same term.
"""

from __future__ import annotations

import json
import time
from typing import Any

import structlog
from sqlalchemy import delete, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from refdocs.core.slugs import slugify
from refdocs.store.base import (
    NOT_FOUND,
    Actor,
    Failure,
    Found,
    ItemFields,
    LookupResult,
    StoredItem,
    TermRef,
    WriteResult,
)
from refdocs.store.database import Database
from refdocs.store.tables import Item, ItemMeta, ItemTerm, Term, User

logger = structlog.get_logger()


def _term_ref(term: Term) -> TermRef:
    assert term.id is not None
    return TermRef(
        id=term.id,
        name=term.name,
        slug=term.slug,
        taxonomy=term.taxonomy,
        parent_id=term.parent_id,
    )


def _item_fields(item: Item) -> ItemFields:
    return ItemFields(
        post_type=item.post_type,
        slug=item.slug,
        title=item.title,
        excerpt=item.excerpt,
        content=item.content,
        parent_id=item.parent_id,
        status=item.status,
    )


class SqlStore:
    """Content store backed by a SQLite database."""

    def __init__(self, db: Database, actor_login: str | None = None) -> None:
        self.db = db
        self.actor_login = actor_login
        self._actor: Actor | None = None

    # -- actors --------------------------------------------------------------

    def add_user(self, login: str) -> Actor:
        """Register a user, returning the existing one if already present."""
        with self.db.session() as session:
            user = session.exec(select(User).where(User.login == login)).first()
            if user is None:
                user = User(login=login)
                session.add(user)
                session.flush()
            assert user.id is not None
            return Actor(id=user.id, login=user.login)

    def current_actor(self) -> Actor | None:
        if not self.actor_login:
            return None
        if self._actor is None:
            with self.db.session() as session:
                user = session.exec(select(User).where(User.login == self.actor_login)).first()
                if user is not None and user.id is not None:
                    self._actor = Actor(id=user.id, login=user.login)
        return self._actor

    # -- items ---------------------------------------------------------------

    def find_item(self, slug: str, post_type: str, parent_id: int) -> LookupResult[StoredItem]:
        with self.db.session() as session:
            item = session.exec(
                select(Item)
                .where(Item.slug == slug, Item.post_type == post_type, Item.parent_id == parent_id)
                .order_by(Item.id)  # type: ignore[arg-type]
                .limit(1)
            ).first()
            if item is None or item.id is None:
                return NOT_FOUND
            return Found(StoredItem(id=item.id, fields=_item_fields(item), meta=self._meta(session, item.id)))

    def create_item(self, fields: ItemFields) -> WriteResult[int]:
        if not (fields.title or fields.content or fields.excerpt):
            return Failure("Content, title, and excerpt are empty.")
        actor = self.current_actor()
        now = time.time()
        try:
            with self.db.session() as session:
                item = Item(
                    post_type=fields.post_type,
                    slug=fields.slug,
                    parent_id=fields.parent_id,
                    title=fields.title,
                    excerpt=fields.excerpt,
                    content=fields.content,
                    status=fields.status,
                    author_id=actor.id if actor else None,
                    created_at=now,
                    modified_at=now,
                )
                session.add(item)
                session.flush()
                assert item.id is not None
                return Found(item.id)
        except SQLAlchemyError as e:
            logger.warning("item_create_failed", slug=fields.slug, error=str(e))
            return Failure(str(e))

    def update_item(self, item_id: int, fields: ItemFields) -> WriteResult[int]:
        try:
            with self.db.session() as session:
                item = session.get(Item, item_id)
                if item is None:
                    return Failure("Invalid item ID.")
                item.post_type = fields.post_type
                item.slug = fields.slug
                item.parent_id = fields.parent_id
                item.title = fields.title
                item.excerpt = fields.excerpt
                item.content = fields.content
                item.status = fields.status
                item.modified_at = time.time()
                session.add(item)
                return Found(item_id)
        except SQLAlchemyError as e:
            logger.warning("item_update_failed", item_id=item_id, error=str(e))
            return Failure(str(e))

    def get_item(self, item_id: int) -> StoredItem | None:
        with self.db.session() as session:
            item = session.get(Item, item_id)
            if item is None:
                return None
            return StoredItem(id=item_id, fields=_item_fields(item), meta=self._meta(session, item_id))

    def list_items(self, post_type: str | None = None) -> list[StoredItem]:
        with self.db.session() as session:
            stmt = select(Item).order_by(Item.id)  # type: ignore[arg-type]
            if post_type is not None:
                stmt = stmt.where(Item.post_type == post_type)
            return [
                StoredItem(id=item.id, fields=_item_fields(item), meta=self._meta(session, item.id))
                for item in session.exec(stmt)
                if item.id is not None
            ]

    def set_item_meta(self, item_id: int, key: str, value: Any) -> None:
        encoded = json.dumps(value, sort_keys=True)
        with self.db.session() as session:
            row = session.exec(
                select(ItemMeta).where(ItemMeta.item_id == item_id, ItemMeta.key == key)
            ).first()
            if row is None:
                session.add(ItemMeta(item_id=item_id, key=key, value=encoded))
            elif row.value != encoded:
                row.value = encoded
                session.add(row)

    def _meta(self, session: Session, item_id: int) -> dict[str, Any]:
        rows = session.exec(select(ItemMeta).where(ItemMeta.item_id == item_id))
        return {row.key: json.loads(row.value) for row in rows}

    # -- terms ---------------------------------------------------------------

    def find_term(self, label: str, taxonomy: str, parent_id: int = 0) -> LookupResult[TermRef]:
        """Match a term by name or slug within a taxonomy and parent."""
        with self.db.session() as session:
            term = self._find_term(session, label, taxonomy, parent_id)
            return Found(_term_ref(term)) if term is not None else NOT_FOUND

    def find_term_by_slug(self, slug: str, taxonomy: str) -> LookupResult[TermRef]:
        with self.db.session() as session:
            term = session.exec(
                select(Term).where(Term.slug == slug, Term.taxonomy == taxonomy)
            ).first()
            return Found(_term_ref(term)) if term is not None else NOT_FOUND

    def create_term(
        self, label: str, taxonomy: str, parent_id: int = 0, slug: str | None = None
    ) -> WriteResult[TermRef]:
        label = label.strip()
        if not label:
            return Failure("A name is required for this term.")
        try:
            with self.db.immediate_transaction() as session:
                if parent_id:
                    parent = session.get(Term, parent_id)
                    if parent is None or parent.taxonomy != taxonomy:
                        return Failure("Parent term does not exist.")
                if self._find_term(session, label, taxonomy, parent_id, slug) is not None:
                    return Failure("A term with the name provided already exists with this parent.")
                term = Term(
                    taxonomy=taxonomy,
                    name=label,
                    slug=self._unique_slug(session, slug or slugify(label) or label, taxonomy),
                    parent_id=parent_id,
                )
                session.add(term)
                session.flush()
                return Found(_term_ref(term))
        except SQLAlchemyError as e:
            logger.warning("term_create_failed", label=label, taxonomy=taxonomy, error=str(e))
            return Failure(str(e))

    def set_item_terms(self, item_id: int, taxonomy: str, term_ids: list[int]) -> None:
        """Replace the item's terms within one taxonomy."""
        with self.db.session() as session:
            session.execute(
                delete(ItemTerm).where(
                    ItemTerm.item_id == item_id,  # type: ignore[arg-type]
                    ItemTerm.taxonomy == taxonomy,  # type: ignore[arg-type]
                )
            )
            for term_id in dict.fromkeys(term_ids):
                session.add(ItemTerm(item_id=item_id, term_id=term_id, taxonomy=taxonomy))

    def item_terms(self, item_id: int, taxonomy: str | None = None) -> list[TermRef]:
        with self.db.session() as session:
            stmt = (
                select(Term)
                .join(ItemTerm, ItemTerm.term_id == Term.id)  # type: ignore[arg-type]
                .where(ItemTerm.item_id == item_id)
                .order_by(Term.id)  # type: ignore[arg-type]
            )
            if taxonomy is not None:
                stmt = stmt.where(ItemTerm.taxonomy == taxonomy)
            return [_term_ref(term) for term in session.exec(stmt)]

    def list_terms(self, taxonomy: str | None = None) -> list[TermRef]:
        with self.db.session() as session:
            stmt = select(Term).order_by(Term.id)  # type: ignore[arg-type]
            if taxonomy is not None:
                stmt = stmt.where(Term.taxonomy == taxonomy)
            return [_term_ref(term) for term in session.exec(stmt)]

    def _find_term(
        self, session: Session, label: str, taxonomy: str, parent_id: int, slug: str | None = None
    ) -> Term | None:
        """Match by name, or by slug (the explicit one when given, else the label's)."""
        return session.exec(
            select(Term).where(
                Term.taxonomy == taxonomy,
                Term.parent_id == parent_id,
                or_(Term.name == label, Term.slug == (slug or slugify(label))),
            )
        ).first()

    def _unique_slug(self, session: Session, slug: str, taxonomy: str) -> str:
        candidate, n = slug, 2
        while session.exec(
            select(Term.id).where(Term.slug == candidate, Term.taxonomy == taxonomy)
        ).first() is not None:
            candidate = f"{slug}-{n}"
            n += 1
        return candidate
