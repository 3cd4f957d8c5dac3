"""
structlog + stdlib logging wiring, imported by the settings modules.

Every record, whether it comes from structlog or from Django's own stdlib
loggers, goes through the same processor chain and one console handler:
colored key/value output in development, one JSON object per line elsewhere.
"""

import logging
import os

import structlog
from structlog.contextvars import merge_contextvars
from structlog.processors import StackInfoRenderer, TimeStamper, format_exc_info
from structlog.stdlib import add_log_level, add_logger_name

ENVIRONMENT = os.getenv("DJANGO_ENV", "dev")
LOG_LEVEL = os.getenv("DJANGO_LOG_LEVEL", "INFO").upper()
APP_LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "DEBUG" if ENVIRONMENT == "dev" else "INFO").upper()

SHARED_PROCESSORS = [
    merge_contextvars,
    add_log_level,
    add_logger_name,
    TimeStamper(fmt="iso", utc=True),
    StackInfoRenderer(),
    format_exc_info,
]

if ENVIRONMENT == "dev":
    RENDERER = structlog.dev.ConsoleRenderer(colors=True, pad_event=0, pad_level=False)
else:
    RENDERER = structlog.processors.JSONRenderer()


def _project_logger(level: str) -> dict:
    return {"handlers": ["console"], "level": level, "propagate": False}


LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "structlog": {
            "()": "structlog.stdlib.ProcessorFormatter",
            "processor": RENDERER,
            "foreign_pre_chain": SHARED_PROCESSORS,
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "structlog",
        },
    },
    "loggers": {
        "": _project_logger(LOG_LEVEL),
        "django": _project_logger(LOG_LEVEL),
        # Query logging is far too noisy for anything but targeted debugging.
        "django.db.backends": _project_logger("WARNING"),
        "apps": _project_logger(APP_LOG_LEVEL),
        "common": _project_logger(APP_LOG_LEVEL),
    },
}

structlog.configure(
    processors=[
        *SHARED_PROCESSORS,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)
