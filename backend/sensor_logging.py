import logging
import sys
from typing import Optional, TextIO

import structlog


def configure_logging(level: int = logging.INFO, output: Optional[TextIO] = None,
                      json_format: bool = False) -> None:
    """Route structlog output away from stdout, which carries the PRTG XML."""
    output = output or sys.stderr
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )
    # msal and httpx log through the standard library
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s", stream=output,
                        level=max(level, logging.WARNING), force=True)
