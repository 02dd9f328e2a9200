"""Per-run term cache.

The store is not required to enforce term uniqueness, so the registry makes
sure a run asks it to create each term at most once. Rejections are cached
too: a label the store refused is not retried in the same run, and never
affects other labels.
"""

from __future__ import annotations

import structlog

from refdocs.core.errors import TermResolutionError
from refdocs.core.slugs import file_slug
from refdocs.store.base import Failure, Found, Store, TermRef

logger = structlog.get_logger()


_Entry = TermRef | TermResolutionError


class TermRegistry:
    """Memoized find-or-create of terms for a single import run."""

    def __init__(self, store: Store) -> None:
        self.store = store
        self._cache: dict[tuple[str, str, int], _Entry] = {}
        self._files: dict[tuple[str, str], _Entry] = {}
        self.created: list[TermRef] = []

    def resolve(self, label: str, taxonomy: str, parent_id: int = 0) -> TermRef:
        """Return the term for label under parent_id, creating it if the store has none.

        Raises:
            TermResolutionError: If the store rejects the creation, now or
                earlier in this run.
        """
        key = (taxonomy, label, parent_id)
        if key in self._cache:
            return _unwrap(self._cache[key])

        try:
            found = self.store.find_term(label, taxonomy, parent_id)
            if isinstance(found, Found):
                ref = found.value
            else:
                ref = self._create(label, taxonomy, parent_id)
        except TermResolutionError as e:
            self._cache[key] = e
            raise

        self._cache[key] = ref
        return ref

    def resolve_file(self, path: str, taxonomy: str) -> TermRef:
        """Source-file term for path, keyed by its normalized slug."""
        slug = file_slug(path)
        key = (taxonomy, slug)
        if key in self._files:
            return _unwrap(self._files[key])

        try:
            found = self.store.find_term_by_slug(slug, taxonomy)
            if isinstance(found, Found):
                ref = found.value
            else:
                ref = self._create(path, taxonomy, 0, slug=slug)
        except TermResolutionError as e:
            self._files[key] = e
            raise

        self._files[key] = ref
        return ref

    def _create(self, label: str, taxonomy: str, parent_id: int, slug: str | None = None) -> TermRef:
        created = self.store.create_term(label, taxonomy, parent_id, slug=slug)
        if isinstance(created, Failure):
            logger.warning(
                "term_failed",
                label=label,
                taxonomy=taxonomy,
                parent_id=parent_id,
                reason=created.reason,
            )
            raise TermResolutionError.rejected(label, taxonomy, created.reason)
        logger.debug("term_created", label=label, taxonomy=taxonomy, term_id=created.value.id)
        self.created.append(created.value)
        return created.value


def _unwrap(entry: _Entry) -> TermRef:
    if isinstance(entry, TermResolutionError):
        raise entry
    return entry
