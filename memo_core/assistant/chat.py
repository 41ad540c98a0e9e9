import logging
from typing import List, Optional

from memo_core import lifecycle
from memo_core.assistant.responder import Responder
from memo_core.schemas import ChatMessage
from memo_core.store import EntityStore

logger = logging.getLogger(__name__)

GREETING = "Hello! I can help you with your note. Ask me anything about it."
ERROR_REPLY = "Sorry, I encountered an error."
SUMMARY_UNAVAILABLE = "Summary is unavailable right now."


class ChatSession:
    """Conversation with the assistant about one note's text."""

    def __init__(self, responder: Responder, note_context: str = "") -> None:
        self._responder = responder
        self.note_context = note_context
        self.messages: List[ChatMessage] = [ChatMessage(content=GREETING, is_user=False)]
        self.is_thinking = False

    # PUBLIC_INTERFACE
    async def send(self, text: str) -> Optional[ChatMessage]:
        """
        Post `text` and wait for the assistant.

        Blank input is ignored (returns None), as is a send while a reply is
        still pending. A failing responder never
        propagates; the reply becomes the error message instead.
        """
        if not text.strip() or self.is_thinking:
            return None

        self.messages.append(ChatMessage(content=text, is_user=True))
        self.is_thinking = True
        try:
            content = await self._responder.respond(text, self.note_context)
        except Exception:
            logger.exception("Assistant request failed")
            content = ERROR_REPLY
        finally:
            self.is_thinking = False

        reply = ChatMessage(content=content, is_user=False)
        self.messages.append(reply)
        return reply

    def clear(self) -> None:
        self.messages = []


# PUBLIC_INTERFACE
async def summarize_note(store: EntityStore, note_id: int, responder: Responder) -> str:
    """
    Generate and store a summary for a note.

    On assistant failure the note is left untouched and a fallback text is
    returned for display.
    """
    note = store.get_note(note_id)
    try:
        summary = await responder.summarize(note.content)
    except Exception:
        logger.exception("Summary generation failed for note id=%s", note_id)
        return SUMMARY_UNAVAILABLE

    lifecycle.set_summary(store, note_id, summary)
    return summary
