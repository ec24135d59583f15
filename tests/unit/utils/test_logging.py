"""Unit tests for JSON logging in logging.py

Test coverage includes:
    - JsonFormatter emits timestamp, level, logger, message and `extra` fields.
    - Standard LogRecord attributes are not leaked as fields.
    - Exceptions are attached as formatted tracebacks.
    - initialize_logging() honors its argument, then LOG_LEVEL, and quiets third-party loggers.
"""

import json
import logging

import pytest

from shortlinks.utils.logging import JsonFormatter, initialize_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield
    root.setLevel(level)
    root.handlers[:] = handlers


def make_record(**kwargs) -> logging.LogRecord:
    record = logging.LogRecord(
        name='shortlinks.lambdas.redirect_url.app',
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg='Redirecting client to original URL. Responding with %s.',
        args=(302,),
        exc_info=kwargs.pop('exc_info', None),
    )
    record.created = 1760529600.0  # 2025-10-15T12:00:00Z
    for key, value in kwargs.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extras():
    log = json.loads(JsonFormatter().format(make_record(shortcode='Gh71WPT', event='REDIRECT_SUCCESS')))

    assert log == {
        'timestamp': '2025-10-15T12:00:00.000Z',
        'level': 'INFO',
        'logger': 'shortlinks.lambdas.redirect_url.app',
        'message': 'Redirecting client to original URL. Responding with 302.',
        'shortcode': 'Gh71WPT',
        'event': 'REDIRECT_SUCCESS',
    }


def test_json_formatter_serializes_unknown_types():
    log = json.loads(JsonFormatter().format(make_record(attempts={3})))
    assert log['attempts'] == '{3}'


def test_json_formatter_includes_exceptions():
    try:
        raise RuntimeError('boom')
    except RuntimeError as e:
        exc_info = (type(e), e, e.__traceback__)

    log = json.loads(JsonFormatter().format(make_record(exc_info=exc_info)))

    assert 'RuntimeError: boom' in log['exception']


def test_initialize_logging(monkeypatch):
    monkeypatch.setenv('LOG_LEVEL', 'debug')

    initialize_logging()

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(isinstance(handler.formatter, JsonFormatter) for handler in root.handlers)
    assert logging.getLogger('httpx').level == logging.WARNING


def test_initialize_logging_with_explicit_level(monkeypatch):
    monkeypatch.setenv('LOG_LEVEL', 'debug')

    initialize_logging('warning')

    assert logging.getLogger().level == logging.WARNING
