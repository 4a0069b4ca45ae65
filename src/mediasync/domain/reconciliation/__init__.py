"""Reconciliation core for merging remote catalog batches into the local store.

Layered flow for one batch of tracks:
1) deduplicate records intra-batch
2) create placeholders for unseen external ids
3) resolve album, artist and genre links from known maps
4) apply scalar fields and genre projections
5) apply favorite changes and report completion
"""

from __future__ import annotations

from .contracts import (
    AlbumsByExternalId,
    ArtistsByExternalId,
    GenresByNormalizedName,
    IncomingAlbum,
    IncomingArtist,
    IncomingRecord,
    LibrarySnapshot,
    TracksByExternalId,
)
from .deduplicate import DeduplicationResult, deduplicate_records
from .engine import ReconcileResult, TrackReconciler
from .events import (
    CollectingEventSink,
    LoggingEventSink,
    ReconciliationEvent,
    ReconciliationEventKind,
    ReconciliationEventSink,
)
from .progress import (
    BackgroundProgressReporter,
    CallbackProgressReporter,
    MonotonicProgress,
    NullProgressReporter,
    ProgressReporter,
    SyncProgress,
)
from .resolve import TrackLinks, find_artist_by_name, resolve_track_links

__all__ = [
    "AlbumsByExternalId",
    "ArtistsByExternalId",
    "BackgroundProgressReporter",
    "CallbackProgressReporter",
    "CollectingEventSink",
    "DeduplicationResult",
    "GenresByNormalizedName",
    "IncomingAlbum",
    "IncomingArtist",
    "IncomingRecord",
    "LibrarySnapshot",
    "LoggingEventSink",
    "MonotonicProgress",
    "NullProgressReporter",
    "ProgressReporter",
    "ReconcileResult",
    "ReconciliationEvent",
    "ReconciliationEventKind",
    "ReconciliationEventSink",
    "SyncProgress",
    "TrackLinks",
    "TrackReconciler",
    "TracksByExternalId",
    "deduplicate_records",
    "find_artist_by_name",
    "resolve_track_links",
]
