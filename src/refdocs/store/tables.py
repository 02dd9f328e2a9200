"""SQLModel definitions for the content store.

Tables:
- users: actors allowed to run imports
- items: imported classes, methods, functions and hooks
- item_meta: key/value metadata per item (JSON encoded)
- terms: classification terms, hierarchical within a taxonomy
- item_terms: item ↔ term links, scoped by taxonomy
"""

from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint
from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    """Actor allowed to run imports."""

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    login: str = Field(unique=True, index=True)


class Item(SQLModel, table=True):
    """Imported documentation entity. Identity is (slug, post_type, parent_id)."""

    __tablename__ = "items"

    id: int | None = Field(default=None, primary_key=True)
    post_type: str = Field(index=True)
    slug: str = Field(index=True)
    parent_id: int = Field(default=0, index=True)  # 0 = no parent
    title: str
    excerpt: str = ""
    content: str = ""
    status: str = "publish"
    author_id: int | None = Field(default=None, foreign_key="users.id")
    created_at: float | None = None
    modified_at: float | None = None


class ItemMeta(SQLModel, table=True):
    __tablename__ = "item_meta"
    __table_args__ = (UniqueConstraint("item_id", "key"),)

    id: int | None = Field(default=None, primary_key=True)
    item_id: int = Field(
        sa_column=Column(Integer, ForeignKey("items.id", ondelete="CASCADE"), index=True)
    )
    key: str
    value: str  # JSON


class Term(SQLModel, table=True):
    """Classification term. Package terms may nest one level (package → subpackage)."""

    __tablename__ = "terms"

    id: int | None = Field(default=None, primary_key=True)
    taxonomy: str = Field(index=True)
    name: str = Field(index=True)
    slug: str = Field(index=True)
    parent_id: int = Field(default=0, index=True)  # 0 = top level


class ItemTerm(SQLModel, table=True):
    __tablename__ = "item_terms"

    item_id: int = Field(
        sa_column=Column(
            Integer, ForeignKey("items.id", ondelete="CASCADE"), primary_key=True
        )
    )
    term_id: int = Field(
        sa_column=Column(
            Integer, ForeignKey("terms.id", ondelete="CASCADE"), primary_key=True
        )
    )
    taxonomy: str = Field(index=True)
