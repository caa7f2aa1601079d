"""Root logging setup for the dictionary CLI and embedding applications.

Searches run on ``dictionary-search`` worker threads, so the thread name is
part of every line.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

LOG_LEVEL_ENV = "ALABAMA_DICT_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s: %(message)s"

_PACKAGE_LOGGER = "alabama_dictionary"
_configured_level: Optional[int] = None


def _resolve_level(level: str | int | None) -> int:
    if level is None or level == "":
        return logging.INFO
    if isinstance(level, int):
        return level
    text = str(level).strip()
    if text.isdigit():
        return int(text)
    resolved = logging.getLevelName(text.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: Optional[str | int] = None, *, force: bool = False) -> int:
    """Install a stderr handler and set the package log level.

    ``level`` wins over ``ALABAMA_DICT_LOG_LEVEL``; unknown names fall back
    to ``INFO``. Only the first call has an effect unless ``force`` is set.
    Returns the level in use.
    """

    global _configured_level

    if _configured_level is not None and not force:
        return _configured_level

    resolved = _resolve_level(level if level is not None else os.environ.get(LOG_LEVEL_ENV))
    logging.basicConfig(level=resolved, format=LOG_FORMAT, force=force)
    logging.getLogger(_PACKAGE_LOGGER).setLevel(resolved)
    _configured_level = resolved
    return resolved


__all__ = ["LOG_FORMAT", "LOG_LEVEL_ENV", "configure_logging"]
