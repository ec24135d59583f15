"""Structured (JSON) logging for the Lambda handlers

`initialize_logging()` runs when `shortlinks.lambdas` is imported, so every
handler module logs through it. One JSON object is written per line to stdout,
where CloudWatch picks it up:

{
    "timestamp": "2025-10-15T12:00:00.000Z",
    "level": "INFO",
    "logger": "shortlinks.lambdas.redirect_url.app",
    "message": "Redirecting client to original URL. Responding with 302.",
    "shortcode": "Gh71WPT",
    "event": "REDIRECT_SUCCESS"
}

Keys passed through `extra=` become top level fields.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC
from typing import Optional

from shortlinks.constants import ENV


# Third-party loggers that are chatty at INFO (httpx logs every geo lookup)
QUIET_LOGGERS = ('boto3', 'botocore', 'urllib3', 'httpx', 'httpcore')


class JsonFormatter(logging.Formatter):
    """Render LogRecords as single-line JSON, including `extra` fields"""

    # Attributes every LogRecord carries; anything else came from `extra=`
    RESERVED_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {'message', 'asctime', 'taskName'}

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        moment = datetime.fromtimestamp(record.created, tz=UTC)
        return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update((key, value) for key, value in record.__dict__.items() if key not in self.RESERVED_ATTRS)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        return json.dumps(log, default=str)


def initialize_logging(level: Optional[str] = None) -> None:
    """Route all logging to stdout as JSON

    Args:
        level (Optional[str]):
            Root log level. Defaults to LOG_LEVEL, else INFO.
    """
    level = (level or os.getenv(ENV.App.LOG_LEVEL) or 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in QUIET_LOGGERS},
            'root': {'level': level, 'handlers': ['stdout']},
        }
    )
