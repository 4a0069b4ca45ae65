"""Intra-batch deduplication of incoming records.

Responsibilities of this stage:
- collapse records sharing an external id, first occurrence wins
- report which records were dropped
- avoid persistence lookups
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .contracts import IncomingRecord


@dataclass(slots=True)
class DeduplicationResult:
    """Surviving records in input order plus the ones that lost."""

    records: list[IncomingRecord] = field(default_factory=list["IncomingRecord"])
    dropped: list[IncomingRecord] = field(default_factory=list["IncomingRecord"])

    @property
    def dropped_count(self) -> int:
        return len(self.dropped)


def deduplicate_records(batch: Iterable[IncomingRecord]) -> DeduplicationResult:
    """Keep the first record per external id; later ones are dropped, not merged."""

    result = DeduplicationResult()
    seen: set[str] = set()
    for record in batch:
        if record.external_id in seen:
            result.dropped.append(record)
            continue
        seen.add(record.external_id)
        result.records.append(record)
    return result
