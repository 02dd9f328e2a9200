"""Tests for slug helpers."""

import pytest

from refdocs.core.slugs import file_slug, slugify


class TestSlugify:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Hello World", "hello-world"),
            ("WP_Query::get_posts", "wp_queryget_posts"),
            ("4.2.0", "4-2-0"),
            ("Café Menu", "cafe-menu"),
            ("  spaced  out  ", "spaced-out"),
            ("a -- b", "a-b"),
            ("日本", "%e6%97%a5%e6%9c%ac"),
            ("Ünïcode Ñame", "unicode-name"),
            ("100% done", "100-done"),
            ("%E6%97%A5", "%e6%97%a5"),
            ("", ""),
        ],
    )
    def test_slugify(self, text: str, expected: str) -> None:
        assert slugify(text) == expected

    def test_idempotent(self) -> None:
        """Slugifying a slug returns it unchanged."""
        assert slugify(slugify("Some Package Name")) == "some-package-name"

    def test_idempotent_for_encoded_names(self) -> None:
        assert slugify(slugify("日本 語")) == slugify("日本 語")

    def test_non_latin_names_stay_distinct(self) -> None:
        """Names with no ASCII letters do not collapse to an empty slug."""
        first, second = slugify("日本"), slugify("中国")

        assert first
        assert second
        assert first != second


class TestFileSlug:
    def test_directories_become_underscores(self) -> None:
        assert file_slug("wp-includes/class-wp.php") == "wp-includes_class-wp-php"

    def test_top_level_file(self) -> None:
        assert file_slug("index.php") == "index-php"

    def test_distinct_paths_get_distinct_slugs(self) -> None:
        """A nested path does not collide with a dashed name."""
        assert file_slug("a/b.php") != file_slug("a-b.php")
