from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from memo_core.models import DEFAULT_FOLDER_ICON

DEFAULT_FOLDER_NAME = "New Folder"
UNTITLED_NOTE = "New Note"
EMPTY_PREVIEW = "No additional text"


class FolderCreate(BaseModel):
    """Schema for creating a folder; a blank name falls back to the default."""
    name: str = Field("", description="Display name; blank means 'New Folder'.")
    icon_name: str = Field(DEFAULT_FOLDER_ICON, description="Icon identifier.")


class FolderOut(BaseModel):
    """Snapshot returned for a folder."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int = Field(..., description="Database ID of the folder.")
    name: str
    icon_name: str
    created_at: datetime


class NoteCreate(BaseModel):
    """Schema for creating a note. Empty title and content are allowed."""
    title: str = ""
    content: str = ""
    folder_id: int | None = Field(None, description="Folder to file the note in; None means unfiled.")


class NoteUpdate(BaseModel):
    """Schema for editing a note (partial update)."""
    title: str | None = Field(None, description="Updated title.")
    content: str | None = Field(None, description="Updated content.")


class NoteImageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    note_id: int
    data: bytes
    created_at: datetime


class NoteOut(BaseModel):
    """Detached snapshot of a note, safe to hand to the presentation layer."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int = Field(..., description="Database ID of the note.")
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    is_pinned: bool
    trashed_at: datetime | None = None
    folder_id: int | None = None
    summary: str | None = None
    images: tuple[NoteImageOut, ...] = ()

    @property
    def is_trashed(self) -> bool:
        return self.trashed_at is not None

    @property
    def display_title(self) -> str:
        return self.title if self.title.strip() else UNTITLED_NOTE

    @property
    def preview(self) -> str:
        return self.content if self.content.strip() else EMPTY_PREVIEW


class ChatMessage(BaseModel):
    """One line of an assistant conversation."""
    model_config = ConfigDict(frozen=True)

    content: str
    is_user: bool
    timestamp: datetime = Field(default_factory=datetime.now)
