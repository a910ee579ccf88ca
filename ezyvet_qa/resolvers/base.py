"""Idempotent provisioning through the UI.

Every entity kind goes through the same two phases. Resolve: search the
entity's list for its natural key and stop if it is there. Create: fill the
form, press Save and classify what the application reports.

Kinds differ only in the ``EntityStrategy`` they hand to ``EntityResolver``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional

from ezyvet_qa.actions.context import UIContext
from ezyvet_qa.actions.wait import TextMatcher
from ezyvet_qa.data.records import EntityKind, Resolution, ResolutionKind, SignalKind
from ezyvet_qa.exceptions import (
    AmbiguousOutcomeError,
    CreationError,
    MandatoryFieldError,
    NotFoundTimeout,
    ProbeTimeout,
)
from ezyvet_qa.utils import events as ev

Step = Callable[[UIContext], Awaitable[Any]]

SAVE_TEST_ID = "Save"


@dataclass
class EntityStrategy:
    kind: EntityKind
    natural_key: str
    fill_form: Step
    # Position of this form's Save among the Save buttons of all open tabs
    form_context_index: int = 0
    navigate: Optional[Step] = None
    # No search_query means there is nothing to resolve: always create
    search_query: Optional[str] = None
    search_pattern: Optional[TextMatcher] = None
    on_resolved: Optional[Step] = None
    # Positive existence check used when Save shows no toast
    verify: Optional[Step] = None
    after_create: Optional[Step] = None
    # Also read the non-toast message holders used by some admin screens
    broad_toasts: bool = False
    required: Dict[str, Any] = field(default_factory=dict)


class EntityResolver:
    def __init__(self, ui: UIContext):
        self.ui = ui

    def _emit(self, event: str, strategy: EntityStrategy, level: int = logging.INFO, **fields):
        self.ui.events.emit(event, level, kind=strategy.kind.value, natural_key=strategy.natural_key, **fields)

    def _check_required(self, strategy: EntityStrategy):
        for name, value in strategy.required.items():
            if value is None or (isinstance(value, str) and not value.strip()):
                self._emit(ev.CREATION_FAILED, strategy, logging.ERROR, reason=f"missing {name}")
                raise MandatoryFieldError(strategy.kind.value, name)

    async def resolve(self, strategy: EntityStrategy) -> Optional[Resolution]:
        """Phase 1. Returns the resolution when the entity already exists, None otherwise."""
        if strategy.search_query is None:
            return None

        self._emit(ev.RESOLVE_ATTEMPTED, strategy, query=strategy.search_query)
        await self.ui.search.sidebar_search(strategy.search_query)
        try:
            await self.ui.search.await_search_result(strategy.search_pattern)
        except NotFoundTimeout:
            self._emit(ev.ENTITY_NOT_FOUND, strategy, logging.DEBUG)
            return None

        self._emit(ev.ENTITY_FOUND, strategy)
        if strategy.on_resolved is not None:
            await strategy.on_resolved(self.ui)
        return Resolution(kind=strategy.kind, natural_key=strategy.natural_key, outcome=ResolutionKind.RESOLVED)

    async def create(self, strategy: EntityStrategy) -> Resolution:
        """Phase 2. Fill, save and classify the outcome."""
        await strategy.fill_form(self.ui)
        await self.ui.toast.wait_for_clear(broad=strategy.broad_toasts)
        await self.ui.page.get_by_test_id(SAVE_TEST_ID).nth(strategy.form_context_index).click()

        signal = await self.ui.toast.await_outcome(broad=strategy.broad_toasts)
        if signal.kind == SignalKind.ERROR:
            self._emit(ev.CREATION_FAILED, strategy, logging.ERROR, message=signal.message)
            raise CreationError(strategy.kind.value, strategy.natural_key, signal.message)

        message = signal.message
        if signal.kind == SignalKind.UNKNOWN:
            self._emit(ev.OUTCOME_UNCONFIRMED, strategy, logging.WARNING)
            if strategy.verify is None:
                self._emit(ev.CREATION_FAILED, strategy, logging.ERROR, reason="no toast")
                raise AmbiguousOutcomeError(strategy.kind.value, strategy.natural_key)
            try:
                await strategy.verify(self.ui)
            except ProbeTimeout as e:
                self._emit(ev.CREATION_FAILED, strategy, logging.ERROR, reason="not found after save")
                raise AmbiguousOutcomeError(strategy.kind.value, strategy.natural_key, str(e)) from e
            message = ""

        self._emit(ev.ENTITY_CREATED, strategy, message=message)
        if strategy.after_create is not None:
            await strategy.after_create(self.ui)
        return Resolution(
            kind=strategy.kind, natural_key=strategy.natural_key, outcome=ResolutionKind.CREATED, message=message
        )

    async def resolve_or_create(self, strategy: EntityStrategy) -> Resolution:
        self._check_required(strategy)
        if strategy.navigate is not None:
            await strategy.navigate(self.ui)

        resolution = await self.resolve(strategy)
        if resolution is not None:
            return resolution
        return await self.create(strategy)
