"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` once at process start-up (the lambda
packages do it in their `__init__.py`) before any other logging is done.

Every record is printed to stdout as one JSON object, `extra` fields included:
{
    "timestamp": "2026-10-19T12:00:00.000Z",
    "level": "INFO",
    "logger": "linkshortener.service.eviction_engine",
    "message": "Evicted link.",
    "thread": "eviction-sweeper",
    "token": "aB3xY9",
    "reason": "expired"
}
"""

import os
import json
import logging
import logging.config
import threading
from datetime import datetime, UTC

from linkshortener.constants import ENV


# Chatty third-party loggers (AWS SDK, HTTP pools) are capped at this level
LIBRARY_LOG_LEVEL = 'WARNING'
LIBRARY_LOGGERS = ('boto3', 'botocore', 'urllib3')


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras"""

    # Attributes of every LogRecord; anything else was passed via `extra`
    STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {'message', 'asctime'}

    def format(self, record: logging.LogRecord) -> str:
        # fmt: off
        timestamp = datetime.fromtimestamp(record.created, tz=UTC) \
                            .isoformat(timespec="milliseconds") \
                            .replace("+00:00", "Z")
        # fmt: on

        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        # Background work (periodic sweeps) is told apart by its thread name
        if record.threadName != threading.main_thread().name:
            log['thread'] = record.threadName

        log.update((key, value) for key, value in record.__dict__.items() if key not in self.STANDARD_ATTRS)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        # datetimes, enums etc. in extras are rendered via str()
        return json.dumps(log, default=str)


def initialize_logging(level: str | None = None) -> None:
    """Configure the root logger to print JSON lines to stdout.

    Args:
        level (str | None):
            Root log level. Defaults to `LOG_LEVEL`, or INFO if that is unset.
    """
    log_level = (level or os.getenv(ENV.App.LOG_LEVEL, 'INFO')).upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': LIBRARY_LOG_LEVEL} for name in LIBRARY_LOGGERS},
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
