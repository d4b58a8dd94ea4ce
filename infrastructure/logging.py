import logging
import logging.handlers
import sys

import structlog

from infrastructure.config import Settings, settings

_HANDLER_MARKER = "_customer_profiles_handler"

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = ("botocore", "boto3", "s3transfer", "urllib3", "httpx", "httpcore", "fsspec")


def setup_logging(config: Settings | None = None) -> None:
    """Configure unified logging for structlog, uvicorn, and standard library.

    Safe to call more than once: handlers installed by a previous call are
    replaced rather than duplicated.
    """
    config = config or settings

    config.log_dir.mkdir(parents=True, exist_ok=True)
    log_file = config.log_dir / f"{config.app_env}.log"

    common_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if config.app_env == "development":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *common_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=common_processors,
        processor=renderer,
    )

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    file_handler = logging.handlers.TimedRotatingFileHandler(
        log_file,
        when="midnight",
        interval=1,
        backupCount=7,
    )
    file_handler.setFormatter(formatter)

    handlers: list[logging.Handler] = [stream_handler, file_handler]
    for handler in handlers:
        setattr(handler, _HANDLER_MARKER, True)

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if getattr(existing, _HANDLER_MARKER, False):
            root_logger.removeHandler(existing)
            existing.close()
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(config.log_level.upper())

    # Intercept Uvicorn/FastAPI logs
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi"):
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers = list(handlers)
        logging_logger.propagate = False

    for logger_name in _QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
