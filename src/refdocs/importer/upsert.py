"""Create-or-update of a single entity against the store.

State machine per entity:

    visibility check ── skip ──────────────────────────────▶ SKIPPED
          │
    find (slug, post_type, parent)
          ├── found ── fields differ ── update ── ok ───────▶ UPDATED
          │      │                         └─── rejected ──▶ FAILED
          │      └── fields equal ───────────────────────────▶ UNCHANGED
          └── missing ── create ── ok ───────────────────────▶ CREATED
                            └──── rejected ────────────────▶ FAILED

Every non-failed, non-skipped outcome then refreshes classification terms
and shared meta, since those can change without any content change.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from refdocs.config.models import ImporterConfig
from refdocs.core.errors import ItemUpsertError
from refdocs.core.slugs import slugify
from refdocs.importer.classify import ClassificationAssigner
from refdocs.importer.result import EntityKind, UpsertOutcome, UpsertStatus
from refdocs.importer.visibility import skip_reason
from refdocs.models import Class, Docblock, Entity
from refdocs.store.base import Failure, Found, ItemFields, Store

logger = structlog.get_logger()


@dataclass(frozen=True)
class FileContext:
    """The file an entity came from, passed down the import call chain."""

    path: str
    doc: Docblock
    term_id: int


class UpsertEngine:
    def __init__(
        self,
        store: Store,
        assigner: ClassificationAssigner,
        config: ImporterConfig,
        import_internal: bool = False,
    ) -> None:
        self.store = store
        self.assigner = assigner
        self.config = config
        self.import_internal = import_internal

    def post_type(self, kind: EntityKind) -> str:
        return {
            EntityKind.FUNCTION: self.config.post_type_function,
            EntityKind.CLASS: self.config.post_type_class,
            EntityKind.METHOD: self.config.post_type_method,
            EntityKind.HOOK: self.config.post_type_hook,
        }[kind]

    def candidate_fields(self, entity: Entity, kind: EntityKind, parent_id: int) -> ItemFields:
        return ItemFields(
            post_type=self.post_type(kind),
            slug=slugify(entity.name),
            title=entity.name,
            excerpt=entity.doc.description,
            content=entity.doc.long_description,
            parent_id=parent_id,
            status="publish",
        )

    def upsert(
        self,
        entity: Entity,
        context: FileContext,
        parent_id: int = 0,
        kind: EntityKind = EntityKind.FUNCTION,
    ) -> UpsertOutcome:
        """Create or update the item for entity. Never raises on store rejection."""
        log = logger.bind(kind=kind.value, name=entity.name, parent_id=parent_id)

        reason = skip_reason(entity.doc, self.import_internal)
        if reason is not None:
            log.info("item_skipped", reason=reason)
            return UpsertOutcome(UpsertStatus.SKIPPED)

        fields = self.candidate_fields(entity, kind, parent_id)
        existing = self.store.find_item(fields.slug, fields.post_type, parent_id)

        if isinstance(existing, Found):
            item_id = existing.value.id
            changed = fields.diff(existing.value.fields)
            if changed:
                written = self.store.update_item(item_id, fields)
                status = UpsertStatus.UPDATED
            else:
                written = Found(item_id)
                status = UpsertStatus.UNCHANGED
        else:
            changed = {}
            written = self.store.create_item(fields)
            status = UpsertStatus.CREATED

        if isinstance(written, Failure):
            error = ItemUpsertError.rejected(kind.value, entity.name, written.reason)
            log.error("item_failed", reason=written.reason)
            return UpsertOutcome(UpsertStatus.FAILED, error=error.message)

        item_id = written.value
        self._refresh(item_id, entity, context)

        if status is UpsertStatus.UNCHANGED:
            log.debug("item_unchanged", item_id=item_id)
        else:
            log.info(f"item_{status.value}", item_id=item_id, changed=sorted(changed))
        return UpsertOutcome(status, item_id=item_id)

    def _refresh(self, item_id: int, entity: Entity, context: FileContext) -> None:
        self.assigner.assign_since(item_id, entity.doc)
        self.assigner.assign_package(item_id, entity.doc, context.doc)
        self.assigner.assign_file(item_id, context.term_id)

        if not isinstance(entity, Class):
            self.store.set_item_meta(item_id, "args", list(entity.arguments))
        self.store.set_item_meta(item_id, "line_num", entity.line)
        self.store.set_item_meta(item_id, "end_line_num", entity.end_line)
        self.store.set_item_meta(item_id, "tags", entity.doc.tags_as_dicts())
