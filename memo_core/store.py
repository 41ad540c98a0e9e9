import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterator, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from memo_core.db import session_scope
from memo_core.events import ChangeEvent, ChangeKind, EntityKind, EventBus
from memo_core.exceptions import FolderNotFoundError, ImageNotFoundError, NoteNotFoundError, PersistenceError
from memo_core.models import DEFAULT_FOLDER_ICON, Folder, Note, NoteImage
from memo_core.schemas import DEFAULT_FOLDER_NAME, FolderCreate, FolderOut, NoteCreate, NoteOut

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
NoteChange = Callable[[Note, datetime], None]


class EntityStore:
    """
    Canonical home of folders and notes.

    Every write runs in its own transaction and is announced on the event bus
    after commit, so observers only ever see committed state. Reads return
    detached pydantic snapshots; callers change notes through
    memo_core.lifecycle, never by editing a snapshot.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        bus: Optional[EventBus] = None,
        clock: Clock = datetime.now,
    ) -> None:
        self._session_factory = session_factory
        self.bus = bus if bus is not None else EventBus()
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        with session_scope(self._session_factory) as db:
            try:
                yield db
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                logger.exception("Database write failed; transaction rolled back")
                raise PersistenceError(str(exc)) from exc

    def _publish(self, kind: ChangeKind, entity: EntityKind, *ids: int) -> None:
        if ids:
            self.bus.publish(ChangeEvent(kind=kind, entity=entity, ids=tuple(ids)))

    @staticmethod
    def _load_note(db: Session, note_id: int) -> Note:
        note = db.get(Note, note_id)
        if note is None:
            raise NoteNotFoundError(note_id)
        return note

    @staticmethod
    def _load_folder(db: Session, folder_id: int) -> Folder:
        folder = db.get(Folder, folder_id)
        if folder is None:
            raise FolderNotFoundError(folder_id)
        return folder

    # ==================== Folders ====================

    # PUBLIC_INTERFACE
    def create_folder(self, name: str = "", icon_name: str = DEFAULT_FOLDER_ICON) -> FolderOut:
        """Create a folder; a blank name becomes 'New Folder'. Names need not be unique."""
        payload = FolderCreate(name=name, icon_name=icon_name or DEFAULT_FOLDER_ICON)
        with self._transaction() as db:
            folder = Folder(
                name=payload.name.strip() or DEFAULT_FOLDER_NAME,
                icon_name=payload.icon_name,
                created_at=self.now(),
            )
            db.add(folder)
            db.flush()
            out = FolderOut.model_validate(folder)
        logger.info("Created folder id=%s name_len=%s", out.id, len(out.name))
        self._publish(ChangeKind.CREATED, EntityKind.FOLDER, out.id)
        return out

    # PUBLIC_INTERFACE
    def rename_folder(self, folder_id: int, name: str) -> FolderOut:
        """Give a folder a new name."""
        with self._transaction() as db:
            folder = self._load_folder(db, folder_id)
            folder.name = name.strip() or DEFAULT_FOLDER_NAME
            out = FolderOut.model_validate(folder)
        self._publish(ChangeKind.UPDATED, EntityKind.FOLDER, folder_id)
        return out

    # PUBLIC_INTERFACE
    def delete_folder(self, folder_id: int) -> List[int]:
        """
        Delete a folder together with every note filed in it.

        Both go in one transaction, and the folder and note events are only
        published after commit. Returns the ids of the cascaded notes.
        """
        with self._transaction() as db:
            folder = self._load_folder(db, folder_id)
            note_ids = sorted(note.id for note in folder.notes)
            db.delete(folder)
        logger.info("Deleted folder id=%s cascaded_notes=%s", folder_id, len(note_ids))
        self._publish(ChangeKind.DELETED, EntityKind.FOLDER, folder_id)
        self._publish(ChangeKind.DELETED, EntityKind.NOTE, *note_ids)
        return note_ids

    # PUBLIC_INTERFACE
    def get_folder(self, folder_id: int) -> FolderOut:
        """Snapshot of one folder; raises FolderNotFoundError if it is gone."""
        with session_scope(self._session_factory) as db:
            return FolderOut.model_validate(self._load_folder(db, folder_id))

    # PUBLIC_INTERFACE
    def list_folders(self) -> List[FolderOut]:
        """All folders, oldest first."""
        with session_scope(self._session_factory) as db:
            rows = db.scalars(select(Folder).order_by(Folder.created_at, Folder.id)).all()
            return [FolderOut.model_validate(row) for row in rows]

    # ==================== Notes ====================

    # PUBLIC_INTERFACE
    def create_note(self, title: str = "", content: str = "", folder_id: Optional[int] = None) -> NoteOut:
        """Create an active, unpinned note; both timestamps are set to now."""
        payload = NoteCreate(title=title, content=content, folder_id=folder_id)
        logger.info(
            "Creating note folder_id=%s title_len=%s content_len=%s",
            payload.folder_id, len(payload.title), len(payload.content),
        )
        with self._transaction() as db:
            if payload.folder_id is not None:
                self._load_folder(db, payload.folder_id)
            now = self.now()
            note = Note(
                title=payload.title,
                content=payload.content,
                created_at=now,
                updated_at=now,
                is_pinned=False,
                trashed_at=None,
                folder_id=payload.folder_id,
            )
            db.add(note)
            db.flush()
            out = NoteOut.model_validate(note)
        self._publish(ChangeKind.CREATED, EntityKind.NOTE, out.id)
        return out

    # PUBLIC_INTERFACE
    def get_note(self, note_id: int) -> NoteOut:
        """Snapshot of one note; raises NoteNotFoundError if it is gone."""
        with session_scope(self._session_factory) as db:
            return NoteOut.model_validate(self._load_note(db, note_id))

    # PUBLIC_INTERFACE
    def list_notes(self) -> List[NoteOut]:
        """Every stored note, active and trashed, in id (creation) order."""
        with session_scope(self._session_factory) as db:
            rows = db.scalars(select(Note).order_by(Note.id)).all()
            return [NoteOut.model_validate(row) for row in rows]

    # PUBLIC_INTERFACE
    def update_note(self, note_id: int, change: NoteChange) -> NoteOut:
        """Apply `change(note, now)` to the stored note in one transaction."""
        with self._transaction() as db:
            note = self._load_note(db, note_id)
            change(note, self.now())
            if note.folder_id is not None:
                self._load_folder(db, note.folder_id)
            db.flush()
            out = NoteOut.model_validate(note)
        self._publish(ChangeKind.UPDATED, EntityKind.NOTE, note_id)
        return out

    # PUBLIC_INTERFACE
    def delete_note(self, note_id: int) -> None:
        """Remove a note for good. Whether it was trashed first is the caller's business."""
        with self._transaction() as db:
            db.delete(self._load_note(db, note_id))
        logger.info("Hard-deleted note id=%s", note_id)
        self._publish(ChangeKind.DELETED, EntityKind.NOTE, note_id)

    # ==================== Images ====================

    # PUBLIC_INTERFACE
    def add_image(self, note_id: int, data: bytes) -> NoteOut:
        """Attach raw image bytes to a note."""
        with self._transaction() as db:
            note = self._load_note(db, note_id)
            note.images.append(NoteImage(data=data, created_at=self.now()))
            db.flush()
            out = NoteOut.model_validate(note)
        logger.info("Attached image to note id=%s bytes=%s", note_id, len(data))
        self._publish(ChangeKind.UPDATED, EntityKind.NOTE, note_id)
        return out

    # PUBLIC_INTERFACE
    def remove_image(self, note_id: int, image_id: int) -> NoteOut:
        """Detach one image from a note."""
        with self._transaction() as db:
            note = self._load_note(db, note_id)
            image = next((img for img in note.images if img.id == image_id), None)
            if image is None:
                raise ImageNotFoundError(image_id)
            note.images.remove(image)
            db.flush()
            out = NoteOut.model_validate(note)
        self._publish(ChangeKind.UPDATED, EntityKind.NOTE, note_id)
        return out
