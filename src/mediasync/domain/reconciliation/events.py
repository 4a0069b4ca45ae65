"""Structured events emitted while reconciling a batch.

The reconciler never logs on its own; it emits ``ReconciliationEvent`` values
to an injected sink. ``LoggingEventSink`` is the default wiring.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol, runtime_checkable

log = logging.getLogger(__name__)


class ReconciliationEventKind(StrEnum):
    DUPLICATE_DROPPED = "duplicate_dropped"
    BATCH_PARTITIONED = "batch_partitioned"
    PLACEHOLDERS_CREATED = "placeholders_created"
    FAVORITES_CHANGED = "favorites_changed"
    UNPARSABLE_DATE = "unparsable_date"
    INVALID_DURATION = "invalid_duration"
    UNRESOLVED_ALBUM = "unresolved_album"
    BATCH_COMPLETED = "batch_completed"


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconciliationEvent:
    kind: ReconciliationEventKind
    external_id: str | None = None
    count: int | None = None
    detail: str | None = None


@runtime_checkable
class ReconciliationEventSink(Protocol):
    def emit(self, event: ReconciliationEvent) -> None: ...


_LEVELS: dict[ReconciliationEventKind, int] = {
    ReconciliationEventKind.DUPLICATE_DROPPED: logging.WARNING,
    ReconciliationEventKind.UNPARSABLE_DATE: logging.WARNING,
    ReconciliationEventKind.INVALID_DURATION: logging.WARNING,
    ReconciliationEventKind.UNRESOLVED_ALBUM: logging.DEBUG,
    ReconciliationEventKind.BATCH_PARTITIONED: logging.INFO,
    ReconciliationEventKind.PLACEHOLDERS_CREATED: logging.INFO,
    ReconciliationEventKind.FAVORITES_CHANGED: logging.INFO,
    ReconciliationEventKind.BATCH_COMPLETED: logging.INFO,
}


class LoggingEventSink:
    """Write events through stdlib logging."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or log

    def emit(self, event: ReconciliationEvent) -> None:
        level = _LEVELS.get(event.kind, logging.INFO)
        if not self._logger.isEnabledFor(level):
            return
        parts = [event.kind.value]
        if event.external_id is not None:
            parts.append(f"id={event.external_id}")
        if event.count is not None:
            parts.append(f"count={event.count}")
        if event.detail:
            parts.append(event.detail)
        self._logger.log(level, " ".join(parts))


@dataclass(slots=True)
class CollectingEventSink:
    """Keep every event in memory, in emission order."""

    events: list[ReconciliationEvent] = field(default_factory=list[ReconciliationEvent])

    def emit(self, event: ReconciliationEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: ReconciliationEventKind) -> list[ReconciliationEvent]:
        return [event for event in self.events if event.kind is kind]
