# Core Module - Structured Logging
#
# structlog configuration shared by every crypted-preferences module.
# Events are rendered as JSON lines (or a console renderer for local use)
# through the stdlib logging machinery, so host applications keep control
# of handlers and levels.
#
# Nothing secret goes through here: callers log names and reasons, never
# plaintext values or key bytes.

import logging
import sys
from typing import Optional

import structlog

_configured = False


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """
    Configure structlog and the root stdlib handler.

    Safe to call more than once; later calls replace the previous setup.

    Args:
        level: stdlib level name ("DEBUG", "INFO", ...)
        json_output: JSON lines if True, human-readable console output otherwise
    """
    global _configured

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    if not any(getattr(h, "_crypted_prefs", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._crypted_prefs = True
        root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    _configured = True


def get_logger(name: Optional[str] = None):
    """Return a structlog logger bound to ``name``."""
    return structlog.get_logger(name)


def is_configured() -> bool:
    return _configured
