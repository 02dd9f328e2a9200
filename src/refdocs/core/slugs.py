"""Slug helpers shared by the importer and the store."""

from __future__ import annotations

import re
import unicodedata
from urllib.parse import quote

_SEPARATORS = re.compile(r"[\s./]+")
_STRAY_PERCENT = re.compile(r"%(?![0-9a-f]{2})")
_DISALLOWED = re.compile(r"[^a-z0-9_%-]+")
_DASH_RUNS = re.compile(r"-{2,}")


def _ascii_or_octets(char: str) -> str:
    if char.isascii():
        return char
    if unicodedata.combining(char):
        return ""
    return quote(char, safe="").lower()


def slugify(text: str) -> str:
    """Create a key-safe slug from a display name.

    Accents are folded to ASCII and other non-ASCII characters are kept as
    lowercase UTF-8 percent octets, so names in other scripts stay distinct.
    Whitespace, dots and slashes become dashes. A ``%`` survives only as the
    start of an octet, and anything else outside ``[a-z0-9_-]`` is dropped.

    Examples:
        "WP_Query::get_posts" -> "wp_queryget_posts"
        "Hello World" -> "hello-world"
        "4.2.0" -> "4-2-0"
        "日本" -> "%e6%97%a5%e6%9c%ac"
    """
    text = unicodedata.normalize("NFKD", text or "").lower()
    text = _STRAY_PERCENT.sub("", text)
    text = "".join(_ascii_or_octets(char) for char in text)
    text = _SEPARATORS.sub("-", text)
    text = _DISALLOWED.sub("", text)
    text = _DASH_RUNS.sub("-", text)
    return text.strip("-")


def file_slug(path: str) -> str:
    """Slug for a source-file term. Directory separators become underscores.

    Example:
        "wp-includes/class-wp.php" -> "wp-includes_class-wp-php"
    """
    return slugify(path.replace("/", "_"))
