"""Attach since-version, package and source-file terms to imported items.

Package resolution:
    main package  = item @package    else file @package
    subpackage    = item @subpackage else file @subpackage

The subpackage is looked up under the main package term only when the main
package resolved to an id in the same call; otherwise it is looked up at the
top level.

Each assignment replaces the item's terms within that taxonomy and leaves
other taxonomies alone, so repeated runs converge on the same term set.
"""

from __future__ import annotations

import structlog

from refdocs.config.models import ImporterConfig
from refdocs.core.errors import TermResolutionError
from refdocs.importer.terms import TermRegistry
from refdocs.models import Docblock
from refdocs.store.base import Store, TermRef

logger = structlog.get_logger()


class ClassificationAssigner:
    def __init__(self, store: Store, registry: TermRegistry, config: ImporterConfig) -> None:
        self.store = store
        self.registry = registry
        self.config = config
        self.warnings: list[str] = []

    def assign_since(self, item_id: int, doc: Docblock) -> TermRef | None:
        """Attach the first @since version, or clear the taxonomy when there is none."""
        taxonomy = self.config.taxonomy_since_version
        tag = doc.tag("since")
        if tag is None:
            self.store.set_item_terms(item_id, taxonomy, [])
            return None

        term = self._resolve(tag.content, taxonomy, 0, "@since")
        if term is not None:
            self.store.set_item_terms(item_id, taxonomy, [term.id])
        return term

    def assign_package(self, item_id: int, doc: Docblock, file_doc: Docblock) -> list[TermRef]:
        """Attach @package/@subpackage, falling back to the file docblock for each."""
        taxonomy = self.config.taxonomy_package
        main = doc.tag("package") or file_doc.tag("package")
        sub = doc.tag("subpackage") or file_doc.tag("subpackage")

        attached: list[TermRef] = []
        failed = False
        main_id: int | None = None

        if main is not None:
            main_term = self._resolve(main.content, taxonomy, 0, "@package")
            if main_term is not None:
                main_id = main_term.id
                attached.append(main_term)
            else:
                failed = True

        if sub is not None:
            parent_id = main_id if main_id is not None else 0
            sub_term = self._resolve(sub.content, taxonomy, parent_id, "@subpackage")
            if sub_term is not None:
                attached.append(sub_term)
            else:
                failed = True

        # A partial failure still attaches what resolved; a total failure
        # leaves whatever an earlier run attached.
        if attached or not failed:
            self.store.set_item_terms(item_id, taxonomy, [t.id for t in attached])
        return attached

    def assign_file(self, item_id: int, file_term_id: int) -> None:
        self.store.set_item_terms(item_id, self.config.taxonomy_file, [file_term_id])

    def _resolve(self, label: str, taxonomy: str, parent_id: int, tag_label: str) -> TermRef | None:
        try:
            return self.registry.resolve(label, taxonomy, parent_id)
        except TermResolutionError as e:
            message = f"Cannot set {tag_label} term: {e.details.get('reason', e.message)}"
            logger.warning("classification_skipped", tag=tag_label, label=label, reason=e.message)
            self.warnings.append(message)
            return None
