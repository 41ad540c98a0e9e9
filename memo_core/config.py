import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logging.getLogger(__name__).warning("Ignoring non-numeric %s=%r", name, raw)
        return default


def _data_dir() -> Path:
    raw = (os.getenv("MEMO_DATA_DIR") or "").strip()
    if raw:
        return Path(raw).expanduser()
    return Path.home() / ".memo"


@dataclass(frozen=True)
class Settings:
    """Runtime settings, read once from the environment."""

    data_dir: Path
    recordings_dir: Path
    ai_response_delay: float = 1.5
    ai_summary_delay: float = 2.0
    log_level: str = "INFO"

    # PUBLIC_INTERFACE
    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Env:
          MEMO_DATA_DIR: root for the sqlite file and recordings (default ~/.memo).
          MEMO_RECORDINGS_DIR: override for the recordings directory.
          MEMO_AI_RESPONSE_DELAY / MEMO_AI_SUMMARY_DELAY: simulated assistant latency in seconds.
          MEMO_LOG_LEVEL: logging level name.
        """
        data_dir = _data_dir()
        recordings = (os.getenv("MEMO_RECORDINGS_DIR") or "").strip()
        return cls(
            data_dir=data_dir,
            recordings_dir=Path(recordings).expanduser() if recordings else data_dir / "recordings",
            ai_response_delay=_env_float("MEMO_AI_RESPONSE_DELAY", 1.5),
            ai_summary_delay=_env_float("MEMO_AI_SUMMARY_DELAY", 2.0),
            log_level=(os.getenv("MEMO_LOG_LEVEL") or "INFO").strip().upper(),
        )


# PUBLIC_INTERFACE
def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a single stdout handler to the package logger and set its level."""
    logger = logging.getLogger("memo_core")

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    logger.handlers = [handler]

    logger.setLevel(getattr(logging, level, logging.INFO))
    return logger
