import asyncio
import logging
from pathlib import Path
from typing import Optional, Protocol

from memo_core import lifecycle
from memo_core.assistant.chat import summarize_note
from memo_core.assistant.responder import Responder
from memo_core.exceptions import NotFoundError
from memo_core.schemas import NoteOut
from memo_core.store import EntityStore

logger = logging.getLogger(__name__)

MOCK_TRANSCRIPT = (
    "This is a test recording of the meeting. Today's agenda covers the new "
    "list design and the assistant integration. Everyone present agreed."
)


class Transcriber(Protocol):
    async def transcribe(self, path: Path) -> str: ...


class MockTranscriber:
    """Returns a fixed transcript after a short delay; no audio is read."""

    def __init__(self, delay: float = 2.0, transcript: str = MOCK_TRANSCRIPT) -> None:
        self.delay = delay
        self.transcript = transcript

    async def transcribe(self, path: Path) -> str:
        logger.info("Transcribing recording %s", Path(path).name)
        await asyncio.sleep(self.delay)
        return self.transcript


# PUBLIC_INTERFACE
async def process_recording(
    store: EntityStore,
    note_id: int,
    path: Path,
    transcriber: Transcriber,
    responder: Responder,
) -> Optional[NoteOut]:
    """
    Append the transcript of `path` to a note, then summarize the note.

    Returns the updated note, or None if transcription failed, in which case
    the note is unchanged. A note deleted while the transcript was being
    produced also yields None.
    """
    try:
        transcript = await transcriber.transcribe(path)
    except Exception:
        logger.exception("Transcription failed for note id=%s", note_id)
        return None

    try:
        lifecycle.append_transcript(store, note_id, transcript)
        await summarize_note(store, note_id, responder)
        return store.get_note(note_id)
    except NotFoundError:
        logger.warning("Note id=%s was deleted before its transcript arrived", note_id)
        return None
