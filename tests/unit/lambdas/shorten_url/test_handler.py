"""Unit tests for the shorten_url AWS Lambda handler.

Verify that the Lambda correctly handles incoming API Gateway events,
drives the resolution service and returns proper HTTP responses in both
success and error scenarios.

Test coverage includes:

1. Successful shortening
   - New short URLs respond with HTTP 201, re-shortened URLs with HTTP 200.
   - camelCase request keys are accepted.

2. Bad requests
   - Malformed JSON, non-object bodies, missing or invalid URLs return HTTP 400.

3. Custom aliases
   - Taken aliases return HTTP 409.

4. Unauthorized access attempt
   - Lambda only runs if the event carries Amazon Cognito claims (HTTP 401).

5. Unexpected failures
   - Data store and configuration faults respond with a generic HTTP 500.

Fixtures:
    - `memory_dao`: in-memory DAO the handler's Redis DAO is replaced with.
    - `_patch_lambda_dependencies`: autouse fixture that monkeypatches app dependencies
                                    (config and DAO).
"""

import json
from unittest.mock import MagicMock

import pytest

from shortlinks.lambdas.shorten_url import app
from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.dao.exceptions import DataStoreError
from shortlinks.exceptions import ConfigurationError


URL = 'https://example.com/blog/chuck-norris-is-awesome'


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def shorten_event(make_event):
    def _shorten_event(body, **kwargs):
        payload = body if isinstance(body, str) else json.dumps(body)
        return make_event(resource='/api/urls', path='/api/urls', method='POST', body=payload, **kwargs)

    return _shorten_event


@pytest.fixture(autouse=True)
def _patch_lambda_dependencies(monkeypatch, config, memory_dao):
    monkeypatch.setattr(app, 'load_config', lambda *a, **kw: config)
    monkeypatch.setattr(app, 'UrlRecordRedisDAO', lambda *a, **kw: memory_dao)


# -------------------------------
# 1. Successful shortening
# -------------------------------


def test_lambda_handler(shorten_event, context, memory_dao):
    """Ensure Lambda successfully shortens URLs and stores the record."""
    response = app.lambda_handler(shorten_event({'original_url': URL}), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 201
    assert response['headers']['Access-Control-Allow-Origin'] == '*'
    assert body['original_url'] == URL
    assert len(body['short_code']) == 7
    assert body['short_url'] == f"https://sho.rt/{body['short_code']}"
    assert body['message'] == f"Successfully shortened {URL} to {body['short_url']}"
    assert body['expires_at'] is None

    record = memory_dao.find_by_identifier(body['short_code'])
    assert record.owner_id == 'user123'
    assert record.original_url == URL


def test_lambda_handler_with_camel_case_keys(shorten_event, context):
    event = shorten_event({'originalUrl': URL, 'customAlias': 'Chuck', 'expiresIn': 30})

    response = app.lambda_handler(event, context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 201
    assert body['short_code'] == 'chuck'
    assert body['short_url'] == 'https://sho.rt/chuck'
    assert body['expires_at'] is not None


def test_lambda_handler_with_already_shortened_url(shorten_event, context, memory_dao):
    first = json.loads(app.lambda_handler(shorten_event({'original_url': URL}), context)['body'])

    response = app.lambda_handler(shorten_event({'original_url': URL}), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 200
    assert body['message'] == 'URL already shortened'
    assert body['short_code'] == first['short_code']
    assert memory_dao.stats() == (1, 0)


def test_lambda_handler_derives_base_url_from_event(shorten_event, context, config):
    del config['service']['base_url']

    response = app.lambda_handler(shorten_event({'original_url': URL}), context)
    body = json.loads(response['body'])

    assert body['short_url'] == f"https://testhost:1000/{body['short_code']}"


# -------------------------------
# 2. Bad requests
# -------------------------------


def test_lambda_handler_with_invalid_json(shorten_event, context):
    response = app.lambda_handler(shorten_event('{"invalid_json": true'), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 400
    assert body['message'] == 'Bad Request (invalid JSON body)'
    assert body['error_code'] == 'INVALID_JSON'


def test_lambda_handler_with_non_object_body(shorten_event, context):
    response = app.lambda_handler(shorten_event([URL]), context)

    assert response['statusCode'] == 400
    assert json.loads(response['body'])['message'] == 'Bad Request (JSON body must be an object)'


def test_lambda_handler_with_missing_original_url(shorten_event, context):
    response = app.lambda_handler(shorten_event({'target_url': URL}), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 400
    assert body['message'] == "Bad Request (missing 'original_url' or 'originalUrl' in JSON body)"
    assert body['error_code'] == 'MISSING_ORIGINAL_URL'


@pytest.mark.parametrize(
    'payload, message',
    [
        ({'original_url': 'ftp://example.com/file'}, 'Only HTTP and HTTPS URLs are allowed'),
        ({'original_url': URL, 'custom_alias': 'a!'}, 'Custom alias must be between 3 and 50 characters'),
        ({'original_url': URL, 'custom_alias': 'bad alias'}, 'Custom alias can only contain letters, numbers, hyphens, and underscores'),
        ({'original_url': URL, 'expires_in_days': 0}, 'Expiry must be between 1 and 3650 days'),
    ],
)
def test_lambda_handler_with_invalid_input(shorten_event, context, memory_dao, payload, message):
    response = app.lambda_handler(shorten_event(payload), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 400
    assert body['message'] == message
    assert body['error_code'] == 'request:validation_error'
    assert memory_dao.stats() == (0, 0)


# -------------------------------
# 3. Custom aliases
# -------------------------------


def test_lambda_handler_with_taken_alias(shorten_event, context):
    app.lambda_handler(shorten_event({'original_url': URL, 'custom_alias': 'chuck'}), context)

    response = app.lambda_handler(shorten_event({'original_url': 'https://example.com/other', 'custom_alias': 'CHUCK'}, sub='user456'), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 409
    assert body['message'] == 'Custom alias is already taken'
    assert body['error_code'] == 'link:alias_conflict'


# -------------------------------
# 4. Unauthorized access attempt
# -------------------------------


def test_lambda_handler_without_cognito_claims(shorten_event, context, memory_dao):
    response = app.lambda_handler(shorten_event({'original_url': URL}, sub=None), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 401
    assert body['message'] == "Unauthorized (missing 'sub' in JWT claims)"
    assert body['error_code'] == 'auth:unauthenticated'
    assert memory_dao.stats() == (0, 0)


def test_lambda_handler_with_null_authorizer(shorten_event, context, memory_dao):
    event = shorten_event({'original_url': URL}, sub=None)
    event['requestContext']['authorizer'] = None

    response = app.lambda_handler(event, context)

    assert response['statusCode'] == 401
    assert memory_dao.stats() == (0, 0)


# -------------------------------
# 5. Unexpected failures
# -------------------------------


def test_lambda_handler_with_data_store_failure(monkeypatch, shorten_event, context):
    dao = MagicMock(spec=UrlRecordBaseDAO)
    dao.find_by_owner_and_url.side_effect = DataStoreError("Can't connect to Redis at redis.test:6379/0.")
    monkeypatch.setattr(app, 'UrlRecordRedisDAO', lambda *a, **kw: dao)

    response = app.lambda_handler(shorten_event({'original_url': URL}), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 500
    assert body == {'message': 'Internal Server Error', 'error_code': 'infra:storage_error'}


def test_lambda_handler_with_configuration_error(monkeypatch, shorten_event, context):
    def _broken_config(*args, **kwargs):
        raise ConfigurationError('no shorten_url section')

    monkeypatch.setattr(app, 'load_config', _broken_config)

    response = app.lambda_handler(shorten_event({'original_url': URL}), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 500
    assert body == {'message': 'Internal Server Error', 'error_code': 'UNKNOWN_INTERNAL_SERVER_ERROR'}


def test_lambda_handler_reraises_when_running_locally(monkeypatch, shorten_event, context):
    monkeypatch.setenv('APP_ENV', 'local')
    monkeypatch.setattr(app, 'load_config', MagicMock(side_effect=KeyError('redis')))

    with pytest.raises(KeyError):
        app.lambda_handler(shorten_event({'original_url': URL}), context)
