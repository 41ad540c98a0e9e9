import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List

logger = logging.getLogger(__name__)


class ChangeKind(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class EntityKind(str, Enum):
    NOTE = "note"
    FOLDER = "folder"


@dataclass(frozen=True)
class ChangeEvent:
    """A committed mutation of one or more entities of the same kind."""
    kind: ChangeKind
    entity: EntityKind
    ids: tuple[int, ...]


Subscriber = Callable[[ChangeEvent], None]


class EventBus:
    """
    Synchronous publish/subscribe for store changes.

    Subscribers run on the publishing thread, in subscription order, before the
    mutating call returns.
    """

    def __init__(self) -> None:
        self._subscribers: List[Subscriber] = []

    # PUBLIC_INTERFACE
    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register `callback`; returns a function that removes it again."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # PUBLIC_INTERFACE
    def publish(self, event: ChangeEvent) -> None:
        """Deliver `event` to every subscriber; a failing subscriber does not stop the rest."""
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception("Change subscriber failed for %s %s %s", event.entity.value, event.kind.value, event.ids)
