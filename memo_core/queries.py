"""
Read-only projections over note snapshots.

Everything here is a pure function of its arguments: filter by scope, search,
sort, split pinned from unpinned, and bucket by how recently a note was edited.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from memo_core.schemas import NoteOut


class SortKey(str, Enum):
    UPDATED = "updated"  # newest edit first
    CREATED = "created"  # newest first
    TITLE = "title"      # A-Z, case-sensitive


class RecencyBucket(str, Enum):
    TODAY = "Today"
    YESTERDAY = "Yesterday"
    THIS_WEEK = "This Week"
    THIS_MONTH = "This Month"
    OLDER = "Older"


BUCKET_ORDER = (
    RecencyBucket.TODAY,
    RecencyBucket.YESTERDAY,
    RecencyBucket.THIS_WEEK,
    RecencyBucket.THIS_MONTH,
    RecencyBucket.OLDER,
)


class ScopeKind(str, Enum):
    ALL = "all"
    TRASH = "trash"
    FOLDER = "folder"


@dataclass(frozen=True)
class Scope:
    """Which slice of the store a list shows: everything, the trash, or one folder."""
    kind: ScopeKind
    folder_id: Optional[int] = None

    @classmethod
    def all(cls) -> "Scope":
        return cls(ScopeKind.ALL)

    @classmethod
    def trash(cls) -> "Scope":
        return cls(ScopeKind.TRASH)

    @classmethod
    def folder(cls, folder_id: int) -> "Scope":
        return cls(ScopeKind.FOLDER, folder_id)

    @property
    def is_trash(self) -> bool:
        return self.kind is ScopeKind.TRASH


# PUBLIC_INTERFACE
def active_notes(notes: Iterable[NoteOut], folder_id: Optional[int] = None) -> List[NoteOut]:
    """Notes not in the trash; with `folder_id`, only those filed in that folder."""
    return [
        note for note in notes
        if note.trashed_at is None and (folder_id is None or note.folder_id == folder_id)
    ]


# PUBLIC_INTERFACE
def trashed_notes(notes: Iterable[NoteOut]) -> List[NoteOut]:
    """Notes in the trash, whatever folder they belong to."""
    return [note for note in notes if note.trashed_at is not None]


# PUBLIC_INTERFACE
def notes_in_scope(notes: Iterable[NoteOut], scope: Scope) -> List[NoteOut]:
    """Notes visible in `scope`: the trash, one folder, or every active note."""
    if scope.kind is ScopeKind.TRASH:
        return trashed_notes(notes)
    if scope.kind is ScopeKind.FOLDER:
        return active_notes(notes, scope.folder_id)
    return active_notes(notes)


# PUBLIC_INTERFACE
def search(notes: Sequence[NoteOut], query: str) -> List[NoteOut]:
    """Case-insensitive substring match on title or content; an empty query keeps everything."""
    if not query:
        return list(notes)
    needle = query.casefold()
    return [
        note for note in notes
        if needle in note.title.casefold() or needle in note.content.casefold()
    ]


# PUBLIC_INTERFACE
def sort_notes(notes: Iterable[NoteOut], key: SortKey = SortKey.UPDATED) -> List[NoteOut]:
    """
    Order notes by `key`.

    Equal keys fall back to ascending id. Python's sort is stable even with
    reverse=True, so sorting by id first fixes the tie order.
    """
    key = SortKey(key)
    ordered = sorted(notes, key=lambda note: note.id)
    if key is SortKey.UPDATED:
        ordered.sort(key=lambda note: note.updated_at, reverse=True)
    elif key is SortKey.CREATED:
        ordered.sort(key=lambda note: note.created_at, reverse=True)
    else:
        ordered.sort(key=lambda note: note.title)
    return ordered


# PUBLIC_INTERFACE
def partition_by_pin(notes: Iterable[NoteOut]) -> Tuple[List[NoteOut], List[NoteOut]]:
    """Split notes into (pinned, unpinned), keeping their order."""
    pinned: List[NoteOut] = []
    unpinned: List[NoteOut] = []
    for note in notes:
        (pinned if note.is_pinned else unpinned).append(note)
    return pinned, unpinned


def recency_bucket(moment: datetime, now: datetime) -> RecencyBucket:
    """Calendar bucket of `moment` relative to `now`, both in local time."""
    day: date = moment.date()
    today = now.date()
    if day == today:
        return RecencyBucket.TODAY
    if day == today - timedelta(days=1):
        return RecencyBucket.YESTERDAY
    if day.isocalendar()[:2] == today.isocalendar()[:2]:
        return RecencyBucket.THIS_WEEK
    if (day.year, day.month) == (today.year, today.month):
        return RecencyBucket.THIS_MONTH
    return RecencyBucket.OLDER


# PUBLIC_INTERFACE
def group_by_recency(
    notes: Iterable[NoteOut],
    now: datetime,
    key: SortKey = SortKey.UPDATED,
) -> List[Tuple[RecencyBucket, List[NoteOut]]]:
    """
    Bucket unpinned notes by last edit into Today / Yesterday / This Week / This Month / Older.

    Buckets come back in that order, empty ones are dropped, and each bucket
    is sorted by `key`. Pinned notes are left out; they belong in the
    section partition_by_pin builds.
    """
    grouped = {bucket: [] for bucket in BUCKET_ORDER}
    for note in notes:
        if note.is_pinned:
            continue
        grouped[recency_bucket(note.updated_at, now)].append(note)
    return [(bucket, sort_notes(grouped[bucket], key)) for bucket in BUCKET_ORDER if grouped[bucket]]
