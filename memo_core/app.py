import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from memo_core.assistant.responder import MockResponder
from memo_core.config import Settings, configure_logging
from memo_core.db import build_engine, database_url, init_db, make_session_factory, session_scope
from memo_core.events import EventBus
from memo_core.queries import Scope
from memo_core.recordings import RecordingLibrary
from memo_core.store import EntityStore
from memo_core.views import NoteListView

logger = logging.getLogger(__name__)


@dataclass
class MemoApp:
    """Everything the presentation layer needs, wired together."""
    settings: Settings
    engine: Engine
    store: EntityStore
    responder: MockResponder
    recordings: RecordingLibrary
    db_ready: bool = False

    # PUBLIC_INTERFACE
    def note_list(self, scope: Optional[Scope] = None) -> NoteListView:
        return NoteListView(self.store, scope)

    # PUBLIC_INTERFACE
    def check_database(self) -> Dict[str, Any]:
        """
        Verify connectivity by running SELECT 1.

        Returns status=up when the query succeeds, otherwise status=down with the error.
        """
        try:
            with session_scope(make_session_factory(self.engine)) as db:
                value = db.execute(text("SELECT 1")).scalar_one()
            return {"status": "up", "query": "SELECT 1", "result": int(value)}
        except Exception as exc:
            return {"status": "down", "error": str(exc)}


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    url: Optional[str] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> MemoApp:
    """
    Build the application from settings (environment by default).

    A database that cannot be initialized is logged rather than raised, so
    the caller can still inspect check_database() and report the problem.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    engine = build_engine(url or database_url(settings.data_dir))
    db_ready = True
    try:
        init_db(engine)
    except Exception:
        db_ready = False
        logger.exception("Database initialization failed during startup (tables not created).")

    app = MemoApp(
        settings=settings,
        engine=engine,
        store=EntityStore(make_session_factory(engine), EventBus(), clock),
        responder=MockResponder(settings.ai_response_delay, settings.ai_summary_delay),
        recordings=RecordingLibrary(settings.recordings_dir),
        db_ready=db_ready,
    )
    logger.info("Memo app ready db_ready=%s", db_ready)
    return app
