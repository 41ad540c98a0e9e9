import logging
from datetime import datetime
from typing import List, Optional, Tuple

from memo_core.events import ChangeEvent
from memo_core.exceptions import FolderNotFoundError
from memo_core.queries import (
    Scope,
    ScopeKind,
    SortKey,
    group_by_recency,
    notes_in_scope,
    partition_by_pin,
    search,
    sort_notes,
)
from memo_core.schemas import NoteOut
from memo_core.store import EntityStore

logger = logging.getLogger(__name__)

PINNED_SECTION = "Pinned"
ALL_NOTES_TITLE = "All Notes"
TRASH_TITLE = "Recently Deleted"

Section = Tuple[str, List[NoteOut]]


class NoteListView:
    """
    View model behind one note list.

    Holds the scope, search text and sort key chosen by the user and rebuilds
    its projection from the store whenever a change event marks it stale.
    """

    def __init__(
        self,
        store: EntityStore,
        scope: Optional[Scope] = None,
        sort_key: SortKey = SortKey.UPDATED,
    ) -> None:
        self._store = store
        self.scope = scope or Scope.all()
        self.sort_key = sort_key
        self.search_text = ""
        self._snapshot: Optional[List[NoteOut]] = None
        self._unsubscribe = store.bus.subscribe(self._on_change)

    def _on_change(self, event: ChangeEvent) -> None:
        self._snapshot = None

    def close(self) -> None:
        self._unsubscribe()

    @property
    def is_stale(self) -> bool:
        return self._snapshot is None

    def _notes(self) -> List[NoteOut]:
        if self._snapshot is None:
            self._snapshot = self._store.list_notes()
        return self._snapshot

    @property
    def title(self) -> str:
        if self.scope.kind is ScopeKind.TRASH:
            return TRASH_TITLE
        if self.scope.kind is ScopeKind.FOLDER:
            try:
                return self._store.get_folder(self.scope.folder_id).name
            except FolderNotFoundError:
                logger.warning("List scoped to missing folder id=%s", self.scope.folder_id)
        return ALL_NOTES_TITLE

    # PUBLIC_INTERFACE
    def notes(self) -> List[NoteOut]:
        """Scoped, searched and sorted notes as one flat list."""
        scoped = notes_in_scope(self._notes(), self.scope)
        return sort_notes(search(scoped, self.search_text), self.sort_key)

    # PUBLIC_INTERFACE
    def sections(self, now: Optional[datetime] = None) -> List[Section]:
        """Pinned notes first, then the unpinned ones grouped by recency."""
        now = now or self._store.now()
        pinned, unpinned = partition_by_pin(self.notes())
        sections: List[Section] = []
        if pinned:
            sections.append((PINNED_SECTION, pinned))
        for bucket, notes in group_by_recency(unpinned, now, self.sort_key):
            sections.append((bucket.value, notes))
        return sections
