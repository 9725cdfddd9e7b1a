"""
Structured logging: structlog on top of stdlib logging.
Request-scoped values (request_id) are merged from contextvars into every line.
"""

import logging
import re
import sys

import structlog

SENSITIVE_PATTERN = re.compile(
    r"""(password|passwd|secret|token|authorization)([=:]\s*["']?)([^\s,}"']+)""",
    re.IGNORECASE,
)
SENSITIVE_KEYS = {"password", "password_confirmation", "token", "authorization", "secret_key"}
MASK = "***MASKED***"


def mask_sensitive_data(_, __, event_dict):
    """Processor that masks passwords and tokens in log values."""
    for key, value in list(event_dict.items()):
        if key in SENSITIVE_KEYS:
            event_dict[key] = MASK
        elif isinstance(value, str):
            event_dict[key] = SENSITIVE_PATTERN.sub(lambda m: m.group(1) + m.group(2) + MASK, value)
    return event_dict


_shared_processors = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    mask_sensitive_data,
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def configure_logging(level: str = "INFO", json: bool = True) -> None:
    """Route structlog and stdlib records through one formatter on stdout."""
    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *_shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
        foreign_pre_chain=_shared_processors,
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level.upper())
    # Uvicorn's access log duplicates request_finished.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
