import asyncio
import logging
import random
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

SUMMARY_REPLY = (
    "Here is a summary of your note:\n\n"
    "The note tracks work on a mobile notes app: an assistant chat, voice "
    "recording with transcription, and the visual design of the note list."
)

NOTE_SUMMARY = (
    "This note covers the development of the notes app. Main topics are the "
    "assistant chat built on mock replies, the voice recording and transcription "
    "flow, and refinements to the list and editor design."
)

CANNED_REPLIES = (
    "This looks like notes from a planning meeting. Would a short action list help?",
    "I can help you summarize this. It reads like a brainstorming session.",
    "Interesting point. Do you want me to expand on the design idea?",
    "I've read through the text. It focuses mostly on UI and UX decisions.",
    "Noted. I'll remind you about this deadline tomorrow.",
)


class Responder(Protocol):
    async def respond(self, user_text: str, note_context: str) -> str: ...

    async def summarize(self, content: str) -> str: ...


class MockResponder:
    """
    Stand-in assistant that answers from a fixed set of replies after a delay.

    Asking to "summarize" always gets the summary reply; anything else gets a
    random canned reply.
    """

    def __init__(
        self,
        response_delay: float = 1.5,
        summary_delay: float = 2.0,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.response_delay = response_delay
        self.summary_delay = summary_delay
        self._rng = rng or random.Random()
        self.is_processing = False

    # PUBLIC_INTERFACE
    async def respond(self, user_text: str, note_context: str) -> str:
        """Reply to `user_text` about a note whose text is `note_context`."""
        logger.info("Assistant request text_len=%s context_len=%s", len(user_text), len(note_context))
        self.is_processing = True
        try:
            await asyncio.sleep(self.response_delay)
        finally:
            self.is_processing = False

        if "summarize" in user_text.lower():
            return SUMMARY_REPLY
        return self._rng.choice(CANNED_REPLIES)

    # PUBLIC_INTERFACE
    async def summarize(self, content: str) -> str:
        logger.info("Assistant summary content_len=%s", len(content))
        await asyncio.sleep(self.summary_delay)
        return NOTE_SUMMARY
