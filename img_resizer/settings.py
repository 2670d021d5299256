import os
import logging

from pathlib import Path
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# столько событий помещается в буфер между наблюдателем и обработчиками
DEFAULT_EVENT_BUFFER = 65536
DEFAULT_POLL_INTERVAL = 0.5
# сколько секунд размер нового файла не должен меняться, если не пришло закрытие
DEFAULT_SETTLE_TIME = 0.5
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"⚠️ {name}={raw!r} is not an integer, using {default}")
        return default
    if value < 1:
        logger.warning(f"⚠️ {name}={raw!r} must be positive, using {default}")
        return default
    return value


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"⚠️ {name}={raw!r} is not a number, using {default}")
        return default
    if value <= 0:
        logger.warning(f"⚠️ {name}={raw!r} must be positive, using {default}")
        return default
    return value


class Settings:
    """Значения по умолчанию из окружения и .env"""

    def __init__(self, cwd: str | Path | None = None):
        load_dotenv()
        base = Path(cwd) if cwd is not None else Path.cwd()

        self.WATCH_IN_DIR = os.getenv("IMG_RESIZER_WATCH_IN_DIR") or str(base / "in")
        self.WATCH_OUT_DIR = os.getenv("IMG_RESIZER_WATCH_OUT_DIR") or str(
            base / "out"
        )
        self.WORKERS = _int_from_env("IMG_RESIZER_WORKERS", os.cpu_count() or 4)
        self.EVENT_BUFFER = _int_from_env(
            "IMG_RESIZER_EVENT_BUFFER", DEFAULT_EVENT_BUFFER
        )
        self.POLL_INTERVAL = _float_from_env(
            "IMG_RESIZER_POLL_INTERVAL", DEFAULT_POLL_INTERVAL
        )
        self.SETTLE_TIME = _float_from_env(
            "IMG_RESIZER_SETTLE_TIME", DEFAULT_SETTLE_TIME
        )

        level = os.getenv("IMG_RESIZER_LOG_LEVEL", "INFO").upper()
        if level not in LOG_LEVELS:
            logger.warning(f"⚠️ Unknown log level {level!r}, using INFO")
            level = "INFO"
        self.LOG_LEVEL = level
