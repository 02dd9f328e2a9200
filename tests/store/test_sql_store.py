"""Tests for the SQLite content store."""

from __future__ import annotations

import pytest

from refdocs.store import NOT_FOUND, Database, Failure, Found, ItemFields, SqlStore
from refdocs.store.tables import Item


def _fields(title: str = "do_thing", **overrides: object) -> ItemFields:
    values: dict[str, object] = {
        "post_type": "function",
        "slug": title.lower(),
        "title": title,
        "excerpt": "Does a thing.",
        "content": "",
    }
    values.update(overrides)
    return ItemFields(**values)  # type: ignore[arg-type]


class TestActors:
    def test_registered_actor(self, store: SqlStore) -> None:
        actor = store.current_actor()
        assert actor is not None
        assert actor.login == "admin"

    def test_no_login_means_no_actor(self, db: Database) -> None:
        assert SqlStore(db).current_actor() is None

    def test_unregistered_login_means_no_actor(self, db: Database) -> None:
        assert SqlStore(db, actor_login="ghost").current_actor() is None

    def test_add_user_is_idempotent(self, store: SqlStore) -> None:
        """Adding an existing login returns the same user."""
        assert store.add_user("admin") == store.current_actor()


class TestItems:
    def test_create_then_find(self, store: SqlStore) -> None:
        created = store.create_item(_fields())
        assert isinstance(created, Found)

        found = store.find_item("do_thing", "function", 0)

        assert isinstance(found, Found)
        assert found.value.id == created.value
        assert found.value.fields == _fields()

    def test_find_scoped_by_parent_and_type(self, store: SqlStore) -> None:
        """The same slug under a different parent or type is a different item."""
        store.create_item(_fields())

        assert store.find_item("do_thing", "function", 5) is NOT_FOUND
        assert store.find_item("do_thing", "method", 0) is NOT_FOUND

    def test_create_rejects_empty_item(self, store: SqlStore) -> None:
        result = store.create_item(_fields(title="", excerpt="", content="", slug="x"))
        assert result == Failure("Content, title, and excerpt are empty.")

    def test_create_records_author(self, store: SqlStore) -> None:
        created = store.create_item(_fields())
        assert isinstance(created, Found)
        actor = store.current_actor()
        assert actor is not None

        with store.db.session() as session:
            item = session.get(Item, created.value)
            assert item is not None
            assert item.author_id == actor.id

    def test_update_overwrites_fields(self, store: SqlStore) -> None:
        created = store.create_item(_fields())
        assert isinstance(created, Found)

        updated = store.update_item(created.value, _fields(excerpt="Does another thing."))

        assert updated == Found(created.value)
        item = store.get_item(created.value)
        assert item is not None
        assert item.fields.excerpt == "Does another thing."

    def test_update_unknown_item(self, store: SqlStore) -> None:
        assert store.update_item(999, _fields()) == Failure("Invalid item ID.")

    def test_list_items_by_type(self, store: SqlStore) -> None:
        store.create_item(_fields("a"))
        store.create_item(_fields("b", post_type="hook"))

        assert [i.fields.title for i in store.list_items("hook")] == ["b"]
        assert len(store.list_items()) == 2


class TestMeta:
    def test_meta_roundtrips_json_values(self, store: SqlStore) -> None:
        created = store.create_item(_fields())
        assert isinstance(created, Found)

        store.set_item_meta(created.value, "args", [{"name": "$id"}])
        store.set_item_meta(created.value, "static", False)
        store.set_item_meta(created.value, "extends", None)

        item = store.get_item(created.value)
        assert item is not None
        assert item.meta == {"args": [{"name": "$id"}], "static": False, "extends": None}

    def test_meta_overwrites_key(self, store: SqlStore) -> None:
        created = store.create_item(_fields())
        assert isinstance(created, Found)

        store.set_item_meta(created.value, "line_num", 1)
        store.set_item_meta(created.value, "line_num", 2)

        item = store.get_item(created.value)
        assert item is not None
        assert item.meta == {"line_num": 2}


class TestTerms:
    def test_create_and_find_by_name_or_slug(self, store: SqlStore) -> None:
        created = store.create_term("Admin Screens", "package")
        assert isinstance(created, Found)
        assert created.value.slug == "admin-screens"

        by_name = store.find_term("Admin Screens", "package")
        by_slug = store.find_term("admin-screens", "package")

        assert by_name == by_slug == Found(created.value)

    def test_find_respects_taxonomy_and_parent(self, store: SqlStore) -> None:
        store.create_term("Core", "package")

        assert store.find_term("Core", "since-version") is NOT_FOUND
        assert store.find_term("Core", "package", parent_id=42) is NOT_FOUND

    def test_duplicate_name_rejected(self, store: SqlStore) -> None:
        store.create_term("Core", "package")

        result = store.create_term("Core", "package")

        assert result == Failure("A term with the name provided already exists with this parent.")

    def test_same_name_under_other_parent_gets_unique_slug(self, store: SqlStore) -> None:
        """Slugs are unique per taxonomy even when names repeat under other parents."""
        top = store.create_term("Admin", "package")
        parent = store.create_term("Core", "package")
        assert isinstance(top, Found)
        assert isinstance(parent, Found)

        child = store.create_term("Admin", "package", parent_id=parent.value.id)

        assert isinstance(child, Found)
        assert child.value.slug == "admin-2"
        assert child.value.parent_id == parent.value.id

    def test_blank_name_rejected(self, store: SqlStore) -> None:
        assert store.create_term("   ", "package") == Failure("A name is required for this term.")

    def test_unknown_parent_rejected(self, store: SqlStore) -> None:
        assert store.create_term("Sub", "package", parent_id=77) == Failure("Parent term does not exist.")

    def test_explicit_slug(self, store: SqlStore) -> None:
        created = store.create_term("wp-includes/post.php", "source-file", slug="wp-includes_post-php")
        assert isinstance(created, Found)

        assert store.find_term_by_slug("wp-includes_post-php", "source-file") == Found(created.value)
        assert store.find_term_by_slug("wp-includes_post-php", "package") is NOT_FOUND

    def test_explicit_slug_used_for_duplicate_check(self, store: SqlStore) -> None:
        """A label whose derived slug is taken is accepted when its explicit slug is free."""
        first = store.create_term("a-b.php", "source-file", slug="a-b-php")
        second = store.create_term("a/b.php", "source-file", slug="a_b-php")

        assert isinstance(first, Found)
        assert isinstance(second, Found)
        assert second.value.slug == "a_b-php"

    def test_explicit_slug_clash_rejected(self, store: SqlStore) -> None:
        store.create_term("one.php", "source-file", slug="shared")

        result = store.create_term("two.php", "source-file", slug="shared")

        assert result == Failure("A term with the name provided already exists with this parent.")


class TestItemTerms:
    @pytest.fixture
    def item_id(self, store: SqlStore) -> int:
        created = store.create_item(_fields())
        assert isinstance(created, Found)
        return created.value

    def test_replace_within_taxonomy(self, store: SqlStore, item_id: int) -> None:
        """Setting terms replaces only that taxonomy's terms."""
        core = store.create_term("Core", "package")
        v1 = store.create_term("1.0", "since-version")
        v2 = store.create_term("2.0", "since-version")
        assert isinstance(core, Found) and isinstance(v1, Found) and isinstance(v2, Found)

        store.set_item_terms(item_id, "package", [core.value.id])
        store.set_item_terms(item_id, "since-version", [v1.value.id])
        store.set_item_terms(item_id, "since-version", [v2.value.id])

        assert [t.name for t in store.item_terms(item_id)] == ["Core", "2.0"]

    def test_empty_list_clears(self, store: SqlStore, item_id: int) -> None:
        v1 = store.create_term("1.0", "since-version")
        assert isinstance(v1, Found)
        store.set_item_terms(item_id, "since-version", [v1.value.id])

        store.set_item_terms(item_id, "since-version", [])

        assert store.item_terms(item_id, "since-version") == []

    def test_duplicate_ids_collapsed(self, store: SqlStore, item_id: int) -> None:
        core = store.create_term("Core", "package")
        assert isinstance(core, Found)

        store.set_item_terms(item_id, "package", [core.value.id, core.value.id])

        assert len(store.item_terms(item_id, "package")) == 1
