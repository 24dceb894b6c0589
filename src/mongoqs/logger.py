"""Logging for mongoqs.

Every logger lives under the "mongoqs" namespace ("mongoqs.MongoQS", ...), so
applications can raise or silence the parser's records with
`logging.getLogger("mongoqs")`. Global configuration happens once, driven by
`settings.LOG_LEVEL`, the first time a `Logger` is created.
"""

import logging
from typing import Optional

from mongoqs.settings import settings as api_settings

NAMESPACE = "mongoqs"

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

_configured = False


def level_for(name: Optional[str]) -> int:
    """Map a level name (any case) to a logging level; unknown or unset is INFO."""
    return _LEVELS.get((name or "").upper(), logging.INFO)


def setup_global_logging(level: str = "INFO") -> None:
    """Configure the root logger once in a standardized format.

    Args:
        level: Log level name (e.g., "DEBUG", "info")
    """
    global _configured
    if _configured:
        return
    logging.basicConfig(
        level=level_for(level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    _configured = True


def _qualify(name: Optional[str]) -> str:
    if not name or name == NAMESPACE:
        return NAMESPACE
    if name.startswith(NAMESPACE + "."):
        return name
    return f"{NAMESPACE}.{name}"


def get_logger(name: Optional[str] = None) -> "Logger":
    """Return a logger under the mongoqs namespace.

    Args:
        name: Logger name, usually a class name or __name__
    """
    return Logger(name)


class Logger:
    """Thin wrapper over standard logging with a convenience message method.

    `.message(text)` is for one-off lifecycle records such as parser
    construction. It logs at the level LOG_LEVEL names, so it is visible
    whatever the configured level is.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        if not _configured:
            setup_global_logging(api_settings.LOG_LEVEL)
        self._logger = logging.getLogger(_qualify(name))

    @property
    def name(self) -> str:
        return self._logger.name

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._logger.error(msg, *args, **kwargs)

    def message(self, msg: str, *args, **kwargs) -> None:
        level = level_for(api_settings.LOG_LEVEL)
        if level == logging.DEBUG:
            self.debug(msg, *args, **kwargs)
        elif level == logging.INFO:
            self.info(msg, *args, **kwargs)
        else:
            self._logger.log(level, msg, *args, **kwargs)
