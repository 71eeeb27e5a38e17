"""Root logging configured from :class:`~mindnote.services.settings.Settings`.

``Settings.log_dir`` already carries the ``MINDNOTE_LOG_DIR`` override applied
by the settings store, so this module reads no environment of its own.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from ..services.settings import Settings, redact_secret

__all__ = ["LOG_FILE_NAME", "log_dir_for", "setup_logging"]

LOG_FILE_NAME = "mindnote.log"
DEFAULT_LOG_DIR = Path.home() / ".mindnote" / "logs"
_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
# Transport chatter: kept at WARNING unless the app itself logs above that.
_TRANSPORT_LOGGERS = ("asyncio", "httpx", "httpcore")

LOGGER = logging.getLogger(__name__)
_active: tuple[Path, int] | None = None


def log_dir_for(settings: Settings) -> Path:
    return Path(settings.log_dir or DEFAULT_LOG_DIR).expanduser()


def setup_logging(
    settings: Settings,
    *,
    console: bool = True,
    max_bytes: int = 512_000,
    backup_count: int = 5,
    force: bool = False,
) -> Path:
    """Route records to ``<log_dir>/mindnote.log`` and, optionally, stderr.

    Debug logging follows ``settings.debug_logging``. A second call with the
    same target and level is a no-op unless ``force`` is set.
    """

    global _active
    level = logging.DEBUG if settings.debug_logging else logging.INFO
    log_path = log_dir_for(settings) / LOG_FILE_NAME
    if not force and _active == (log_path, level):
        return log_path

    log_path.parent.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(_LOG_FORMAT)
    rotating = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handlers: list[logging.Handler] = [rotating]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    logging.captureWarnings(True)
    transport_level = max(level, logging.WARNING)
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)

    _active = (log_path, level)
    LOGGER.info(
        "Logging to %s; block store %s (token %s)",
        log_path,
        settings.store_url or "in memory",
        redact_secret(settings.api_token) or "unset",
    )
    return log_path
