"""Discrete, leveled events emitted by the resolver and orchestrator.

The core never narrates progress as free text; it emits named events with
structured fields and lets the configured sink decide where they go.
"""

import logging
from typing import Any, Dict, List, Protocol, Tuple

from ezyvet_qa.utils.log_icon import icon

RESOLVE_ATTEMPTED = "resolve_attempted"
ENTITY_FOUND = "entity_found"
ENTITY_NOT_FOUND = "entity_not_found"
ENTITY_CREATED = "entity_created"
CREATION_FAILED = "creation_failed"
OUTCOME_UNCONFIRMED = "outcome_unconfirmed"
LOGIN_ATTEMPT = "login_attempt"
LOGIN_FAILED = "login_failed"
LOGIN_SUCCEEDED = "login_succeeded"
STEP_STARTED = "step_started"
STEP_FAILED = "step_failed"
SCENARIO_COMPLETED = "scenario_completed"

_ICONS = {
    RESOLVE_ATTEMPTED: icon["search"],
    ENTITY_FOUND: icon["success"],
    ENTITY_NOT_FOUND: icon["create"],
    ENTITY_CREATED: icon["success"],
    CREATION_FAILED: icon["failed"],
    OUTCOME_UNCONFIRMED: icon["warning"],
    LOGIN_ATTEMPT: icon["login"],
    LOGIN_FAILED: icon["failed"],
    LOGIN_SUCCEEDED: icon["success"],
    STEP_STARTED: icon["running"],
    STEP_FAILED: icon["failed"],
    SCENARIO_COMPLETED: icon["scenario"],
}


class EventSink(Protocol):
    def emit(self, event: str, level: int = logging.INFO, **fields: Any) -> None: ...


class LoggingEventSink:
    """Forward events to the standard logging tree."""

    def __init__(self, logger: logging.Logger = None):
        self.logger = logger or logging.getLogger("ezyvet_qa.events")

    def emit(self, event: str, level: int = logging.INFO, **fields: Any) -> None:
        detail = " ".join(f"{key}={value!r}" for key, value in fields.items())
        self.logger.log(level, f"{_ICONS.get(event, '')} {event} {detail}".strip(), extra={"event": event, "fields": fields})


class RecordingEventSink:
    """Keep events in memory, optionally forwarding them to another sink."""

    def __init__(self, forward_to: EventSink = None):
        self.events: List[Tuple[str, int, Dict[str, Any]]] = []
        self.forward_to = forward_to

    def emit(self, event: str, level: int = logging.INFO, **fields: Any) -> None:
        self.events.append((event, level, fields))
        if self.forward_to is not None:
            self.forward_to.emit(event, level, **fields)

    def names(self) -> List[str]:
        return [name for name, _, _ in self.events]

    def of(self, event: str) -> List[Dict[str, Any]]:
        return [fields for name, _, fields in self.events if name == event]
