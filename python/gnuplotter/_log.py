"""gnuplotter logger.

Usage from any module::

    from ._log import log

    log.debug("spawning %s", argv)
    log.warning("could not prepare %s: %s", path, exc)

Enable via environment variable::

    GNUPLOTTER_LOG=DEBUG python my_script.py   # all messages, script included
    GNUPLOTTER_LOG=INFO  python my_script.py   # info and above
    GNUPLOTTER_LOG=1     python my_script.py   # alias for DEBUG

Or programmatically::

    import logging
    logging.getLogger("gnuplotter").setLevel(logging.DEBUG)
"""

import logging
import os

log = logging.getLogger("gnuplotter")

# ANSI color codes
_COLORS = {
    "DEBUG": "\033[36m",    # Cyan
    "INFO": "\033[32m",     # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",    # Red
    "RESET": "\033[0m",
}


class ColoredFormatter(logging.Formatter):
    """Add colors to log levels when output is a TTY."""

    def __init__(self, fmt=None, handler=None):
        super().__init__(fmt)
        self.handler = handler

    def format(self, record):
        stream = getattr(self.handler, "stream", None)
        if stream is not None and hasattr(stream, "isatty") and stream.isatty():
            record = logging.makeLogRecord(record.__dict__)
            color = _COLORS.get(record.levelname, "")
            record.levelname = f"{color}{record.levelname}{_COLORS['RESET']}"
        return super().format(record)


_ALIASES = {"1": "DEBUG", "0": "WARNING", "TRUE": "DEBUG", "FALSE": "WARNING"}


def configure_from_env(value=None) -> bool:
    """Apply a GNUPLOTTER_LOG style level string. Returns True if a level was set."""
    if value is None:
        value = os.environ.get("GNUPLOTTER_LOG", "")
    level_str = value.strip().upper()
    if not level_str:
        return False
    level_str = _ALIASES.get(level_str, level_str)
    level = getattr(logging, level_str, None)
    if not isinstance(level, int):
        return False
    log.setLevel(level)
    if not log.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(ColoredFormatter(
            "[gnuplotter %(levelname)s] %(message)s (%(filename)s:%(lineno)d)",
            handler=handler,
        ))
        log.addHandler(handler)
    return True


configure_from_env()
