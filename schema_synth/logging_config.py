"""Logging setup for schema_synth.

Every module obtains its logger through :func:`get_logger` so that the whole
package hangs off a single ``schema_synth`` logger that callers can configure
once.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "schema_synth"

_DEFAULT_FORMAT = "%(name)s: %(message)s"
_PLAIN_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    if name != PACKAGE_LOGGER and not name.startswith(f"{PACKAGE_LOGGER}."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: int | str = logging.INFO,
    rich_output: bool = True,
    console: Console | None = None,
) -> logging.Logger:
    """Attach a handler to the package logger.

    Calling this more than once replaces the handler installed previously
    instead of stacking duplicates.

    Args:
        level: Logging level for the package logger.
        rich_output: Use a rich handler; otherwise a plain stream handler.
        console: Console for the rich handler (defaults to stderr).

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for existing in list(logger.handlers):
        if getattr(existing, "_schema_synth_handler", False):
            logger.removeHandler(existing)

    handler: logging.Handler
    if rich_output:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_PLAIN_FORMAT))

    handler._schema_synth_handler = True
    logger.addHandler(handler)
    logger.propagate = False
    return logger
