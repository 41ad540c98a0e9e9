from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, LargeBinary, Text
from sqlalchemy.orm import relationship

from memo_core.db import Base

DEFAULT_FOLDER_ICON = "folder"


class Folder(Base):
    """SQLAlchemy model representing a folder of notes."""
    __tablename__ = "folders"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False)
    icon_name = Column(Text, nullable=False, default=DEFAULT_FOLDER_ICON)
    created_at = Column(DateTime, nullable=False)

    # Deleting a folder hard-deletes its notes, trashed or not.
    notes = relationship(
        "Note",
        back_populates="folder",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Note(Base):
    """SQLAlchemy model representing a note."""
    __tablename__ = "notes"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text, nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
    is_pinned = Column(Boolean, nullable=False, default=False)
    # NULL = active, otherwise the instant the note went to the trash.
    trashed_at = Column(DateTime, nullable=True, index=True)
    folder_id = Column(Integer, ForeignKey("folders.id", ondelete="CASCADE"), nullable=True, index=True)
    summary = Column(Text, nullable=True)

    folder = relationship("Folder", back_populates="notes")
    images = relationship(
        "NoteImage",
        back_populates="note",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="NoteImage.id",
    )


class NoteImage(Base):
    """Binary image attached to a note."""
    __tablename__ = "note_images"

    id = Column(Integer, primary_key=True, index=True)
    note_id = Column(Integer, ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True)
    data = Column(LargeBinary, nullable=False)
    created_at = Column(DateTime, nullable=False)

    note = relationship("Note", back_populates="images")
