"""Depth-first import of a parsed documentation tree.

Walk order per file:

    file term ─▶ functions ─▶ function hooks
              ─▶ classes   ─▶ methods (Class::method) ─▶ method hooks
              ─▶ file hooks

Parent ids flow downward only. An entity that is skipped or fails hands its
children parent 0 instead of failing them.

CRITICAL INVARIANT: runs are strictly sequential. The term cache and the
find-then-write upserts are not safe under concurrent runs without a
transactional primitive in the store.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from refdocs.config.models import ImporterConfig
from refdocs.core.errors import ParseInputError, PreconditionError, TermResolutionError
from refdocs.core.logging import clear_run_id, set_run_id
from refdocs.core.slugs import file_slug
from refdocs.importer.classify import ClassificationAssigner
from refdocs.importer.result import EntityKind, ImportResult, UpsertOutcome
from refdocs.importer.terms import TermRegistry
from refdocs.importer.upsert import FileContext, UpsertEngine
from refdocs.models import Class, Function, Hook, Method, ParsedFile
from refdocs.store.base import Store

logger = structlog.get_logger()


@dataclass
class _Run:
    """Per-run collaborators and counters."""

    registry: TermRegistry
    assigner: ClassificationAssigner
    engine: UpsertEngine
    skip_throttle: bool
    result: ImportResult = field(default_factory=ImportResult)


class Importer:
    """Imports parsed files into a store."""

    def __init__(
        self,
        store: Store,
        config: ImporterConfig | None = None,
        sleep: Callable[[float], Any] = time.sleep,
    ) -> None:
        self.store = store
        self.config = config or ImporterConfig()
        self._sleep = sleep

    def run(
        self,
        files: Sequence[ParsedFile] | None,
        *,
        skip_throttle: bool = False,
        import_internal: bool | None = None,
    ) -> ImportResult:
        """Import every file in the tree.

        Args:
            files: Validated parser output.
            skip_throttle: Never pause between batches.
            import_internal: Import @internal entities. Defaults to the config value.

        Raises:
            ParseInputError: If no tree was given.
            PreconditionError: If the store has no authenticated actor.
        """
        if files is None:
            raise ParseInputError.missing()
        actor = self.store.current_actor()
        if actor is None:
            raise PreconditionError.no_actor()

        if import_internal is None:
            import_internal = self.config.import_internal

        registry = TermRegistry(self.store)
        assigner = ClassificationAssigner(self.store, registry, self.config)
        state = _Run(
            registry=registry,
            assigner=assigner,
            engine=UpsertEngine(self.store, assigner, self.config, import_internal=import_internal),
            skip_throttle=skip_throttle,
        )

        set_run_id()
        start = time.perf_counter()
        logger.info(
            "import_started",
            files=len(files),
            actor=actor.login,
            import_internal=import_internal,
            skip_throttle=skip_throttle,
        )
        try:
            for parsed in files:
                self.import_file(parsed, state)
        finally:
            result = state.result
            result.warnings.extend(assigner.warnings)
            result.duration_ms = (time.perf_counter() - start) * 1000
            logger.info(
                "import_completed",
                imported=result.imported_count,
                created=result.created,
                updated=result.updated,
                skipped=result.skipped_count,
                failed=result.failed,
                terms_created=len(registry.created),
            )
            clear_run_id()
        return result

    def import_file(self, parsed: ParsedFile, state: _Run) -> None:
        result = state.result
        try:
            term = state.registry.resolve_file(parsed.path, self.config.taxonomy_file)
        except TermResolutionError as e:
            reason = e.details.get("reason", e.message)
            result.errors.append(
                f'Problem creating file tax item "{file_slug(parsed.path)}" for {parsed.path}: {reason}'
            )
            logger.error("file_term_failed", path=parsed.path, reason=reason)
            return

        result.files += 1
        context = FileContext(path=parsed.path, doc=parsed.file, term_id=term.id)
        logger.info(
            "file_import_started",
            path=parsed.path,
            functions=len(parsed.functions),
            classes=len(parsed.classes),
            hooks=len(parsed.hooks),
        )

        for function in self._throttled(parsed.functions, "functions", state):
            self.import_function(function, context, state)

        for cls in self._throttled(parsed.classes, "classes", state):
            self.import_class(cls, context, state)

        for hook in self._throttled(parsed.hooks, "hooks", state):
            self.import_hook(hook, context, state, parent_id=0)

    def import_function(self, function: Function, context: FileContext, state: _Run) -> UpsertOutcome:
        outcome = state.engine.upsert(function, context, parent_id=0, kind=EntityKind.FUNCTION)
        state.result.record(outcome)
        for hook in function.hooks:
            self.import_hook(hook, context, state, parent_id=outcome.parent_for_children)
        return outcome

    def import_class(self, cls: Class, context: FileContext, state: _Run) -> UpsertOutcome:
        outcome = state.engine.upsert(cls, context, parent_id=0, kind=EntityKind.CLASS)
        state.result.record(outcome)

        if outcome.item_id is not None:
            self.store.set_item_meta(outcome.item_id, "final", cls.final)
            self.store.set_item_meta(outcome.item_id, "abstract", cls.abstract)
            self.store.set_item_meta(outcome.item_id, "extends", cls.extends)
            self.store.set_item_meta(outcome.item_id, "implements", list(cls.implements))
            self.store.set_item_meta(outcome.item_id, "properties", list(cls.properties))

        for method in cls.methods:
            self.import_method(
                method.namespaced(cls.name), context, state, parent_id=outcome.parent_for_children
            )
        return outcome

    def import_method(
        self, method: Method, context: FileContext, state: _Run, parent_id: int = 0
    ) -> UpsertOutcome:
        """Import a method already namespaced as `Class::method`."""
        outcome = state.engine.upsert(method, context, parent_id=parent_id, kind=EntityKind.METHOD)
        state.result.record(outcome)

        if outcome.item_id is not None:
            self.store.set_item_meta(outcome.item_id, "final", method.final)
            self.store.set_item_meta(outcome.item_id, "abstract", method.abstract)
            self.store.set_item_meta(outcome.item_id, "static", method.static)
            self.store.set_item_meta(outcome.item_id, "visibility", method.visibility)

        for hook in method.hooks:
            self.import_hook(hook, context, state, parent_id=outcome.parent_for_children)
        return outcome

    def import_hook(
        self, hook: Hook, context: FileContext, state: _Run, parent_id: int = 0
    ) -> UpsertOutcome | None:
        """Import a hook. Returns None for cross-reference stubs, which leave no trace."""
        if hook.is_stub:
            state.result.stubs += 1
            logger.debug("hook_stub_skipped", name=hook.name, parent_id=parent_id)
            return None

        outcome = state.engine.upsert(hook, context, parent_id=parent_id, kind=EntityKind.HOOK)
        state.result.record(outcome)
        if outcome.item_id is not None:
            self.store.set_item_meta(outcome.item_id, "hook_type", hook.type)
        return outcome

    def _throttled(self, entities: Iterable[Any], collection: str, state: _Run) -> Iterable[Any]:
        """Yield entities, pausing after every `throttle_every` of them."""
        every = self.config.throttle_every
        for i, entity in enumerate(entities, start=1):
            yield entity
            if not state.skip_throttle and i % every == 0:
                logger.debug(
                    "import_throttled",
                    collection=collection,
                    processed=i,
                    pause_sec=self.config.throttle_pause_sec,
                )
                self._sleep(self.config.throttle_pause_sec)


def import_tree(
    store: Store,
    files: Sequence[ParsedFile] | None,
    config: ImporterConfig | None = None,
    *,
    skip_throttle: bool = False,
    import_internal: bool | None = None,
) -> ImportResult:
    """Convenience wrapper: build an Importer and run it once."""
    return Importer(store, config).run(
        files, skip_throttle=skip_throttle, import_internal=import_internal
    )
