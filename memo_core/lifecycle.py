"""
Note lifecycle: the operations that move a note between states.

    create -> active <-> trashed -> (hard delete)

Each function runs one store transaction and returns the fresh snapshot.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from memo_core.queries import Scope, ScopeKind
from memo_core.schemas import NoteOut, NoteUpdate
from memo_core.store import EntityStore

logger = logging.getLogger(__name__)

TRANSCRIPT_HEADER = "[Transcript {time}]"


# PUBLIC_INTERFACE
def edit(store: EntityStore, note_id: int, title: Optional[str] = None, content: Optional[str] = None) -> NoteOut:
    """
    Update title and/or content.

    updated_at is refreshed even when the values did not change, and never
    moves backwards if the clock does.
    """
    payload = NoteUpdate(title=title, content=content)

    def apply(note, now: datetime) -> None:
        if payload.title is not None:
            note.title = payload.title
        if payload.content is not None:
            note.content = payload.content
        note.updated_at = max(now, note.updated_at)

    return store.update_note(note_id, apply)


# PUBLIC_INTERFACE
def toggle_pin(store: EntityStore, note_id: int) -> NoteOut:
    """Flip the pinned flag; updated_at is left alone."""
    def apply(note, now: datetime) -> None:
        note.is_pinned = not note.is_pinned

    return store.update_note(note_id, apply)


# PUBLIC_INTERFACE
def trash(store: EntityStore, note_id: int) -> NoteOut:
    """Move a note to the trash. Trashing twice just restamps trashed_at."""
    def apply(note, now: datetime) -> None:
        note.trashed_at = now

    logger.info("Trashing note id=%s", note_id)
    return store.update_note(note_id, apply)


# PUBLIC_INTERFACE
def restore(store: EntityStore, note_id: int) -> NoteOut:
    """Take a note out of the trash; harmless on an active note."""
    def apply(note, now: datetime) -> None:
        note.trashed_at = None

    logger.info("Restoring note id=%s", note_id)
    return store.update_note(note_id, apply)


# PUBLIC_INTERFACE
def hard_delete(store: EntityStore, note_id: int) -> None:
    """Remove a note permanently. Meant for trashed notes, but not refused for active ones."""
    if store.get_note(note_id).trashed_at is None:
        logger.warning("Hard-deleting note id=%s that is not in the trash", note_id)
    store.delete_note(note_id)


# PUBLIC_INTERFACE
def reassign_folder(store: EntityStore, note_id: int, folder_id: Optional[int]) -> NoteOut:
    """File a note in `folder_id`, or unfile it with None. Trash state is left as is."""
    def apply(note, now: datetime) -> None:
        note.folder_id = folder_id

    return store.update_note(note_id, apply)


# PUBLIC_INTERFACE
def set_summary(store: EntityStore, note_id: int, summary: Optional[str]) -> NoteOut:
    """Store (or clear) the assistant summary of a note."""
    def apply(note, now: datetime) -> None:
        note.summary = summary

    return store.update_note(note_id, apply)


# PUBLIC_INTERFACE
def add_image(store: EntityStore, note_id: int, data: bytes) -> NoteOut:
    """Attach an image to a note."""
    return store.add_image(note_id, data)


# PUBLIC_INTERFACE
def remove_image(store: EntityStore, note_id: int, image_id: int) -> NoteOut:
    """Remove an image from a note."""
    return store.remove_image(note_id, image_id)


# PUBLIC_INTERFACE
def append_transcript(store: EntityStore, note_id: int, transcript: str, at: Optional[datetime] = None) -> NoteOut:
    """Append a timestamped transcript block to the note body."""
    at = at or store.now()
    current = store.get_note(note_id)
    header = TRANSCRIPT_HEADER.format(time=at.strftime("%H:%M"))
    return edit(store, note_id, content=f"{current.content}\n\n{header}\n{transcript}\n")


# PUBLIC_INTERFACE
def add_note(store: EntityStore, scope: Scope) -> NoteOut:
    """New empty note for the list being shown; outside a folder it is unfiled."""
    folder_id = scope.folder_id if scope.kind is ScopeKind.FOLDER else None
    return store.create_note(title="", content="", folder_id=folder_id)


# PUBLIC_INTERFACE
def delete(store: EntityStore, note_id: int, scope: Scope) -> Optional[NoteOut]:
    """
    The list's delete action: permanent inside the trash, a move to the
    trash everywhere else. Returns the trashed snapshot, or None when the
    note is gone.
    """
    if scope.is_trash:
        hard_delete(store, note_id)
        return None
    return trash(store, note_id)


# PUBLIC_INTERFACE
def delete_many(store: EntityStore, note_ids: Iterable[int], scope: Scope) -> List[int]:
    """Apply `delete` to a multi-selection; returns the ids handled."""
    handled = []
    for note_id in note_ids:
        delete(store, note_id, scope)
        handled.append(note_id)
    return handled
