"""
Package logger.

Every module logs through `logger` (name "komando"). The library never
configures handlers on its own; hosts either wire the "komando" logger into
their logging setup or call enable_logging() for a quick rich console handler.
"""
import logging

from rich.logging import RichHandler

logger = logging.getLogger("komando")
logger.addHandler(logging.NullHandler())


def enable_logging(level=logging.DEBUG, /):
    """
    Attach a RichHandler to the package logger and set its level.

    Calling this more than once only updates the level; a second handler is
    never added. Returns the package logger.
    """
    for handler in logger.handlers:
        if isinstance(handler, RichHandler):
            break
    else:
        logger.addHandler(RichHandler(
            rich_tracebacks=True,
            show_time=False,
            show_level=True,
            show_path=False,
            markup=False,
        ))
    logger.setLevel(level)
    logger.debug("logging enabled at level %s", logging.getLevelName(level))
    return logger


__all__ = (
    "logger",
    "enable_logging",
)
