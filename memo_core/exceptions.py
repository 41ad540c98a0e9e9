"""Errors raised by the memo store and its collaborators."""


class MemoError(Exception):
    """Base class for every error raised by memo_core."""


class NotFoundError(MemoError):
    entity = "Entity"

    def __init__(self, entity_id: int):
        self.entity_id = entity_id
        super().__init__(f"{self.entity} not found: {entity_id}")


class NoteNotFoundError(NotFoundError):
    entity = "Note"


class FolderNotFoundError(NotFoundError):
    entity = "Folder"


class ImageNotFoundError(NotFoundError):
    entity = "Image"


class PersistenceError(MemoError):
    """The database rejected a write; the transaction was rolled back."""


class RecordingError(MemoError):
    """A recording file could not be listed, created or removed."""
