import json

import pytest
from freezegun import freeze_time

from shortlinks.lambdas.url_analytics import app
from shortlinks.services import ResolutionService, VisitRecorder


URL = 'https://example.com/blog/chuck-norris-is-awesome'
WINDOWS = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64)'


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def analytics_event(make_event):
    def _analytics_event(shortcode, analytics=True, **kwargs):
        resource = '/api/urls/{shortcode}/analytics' if analytics else '/api/urls/{shortcode}'
        path_parameters = None if shortcode is None else {'shortcode': shortcode}
        return make_event(resource=resource, path=resource.replace('{shortcode}', str(shortcode)), path_parameters=path_parameters, **kwargs)

    return _analytics_event


@pytest.fixture(autouse=True)
def _patch_lambda_dependencies(monkeypatch, config, memory_dao):
    monkeypatch.setattr(app, 'load_config', lambda *a, **kw: config)
    monkeypatch.setattr(app, 'UrlRecordRedisDAO', lambda *a, **kw: memory_dao)


@pytest.fixture
def service(memory_dao):
    return ResolutionService(memory_dao, recorder=VisitRecorder(memory_dao))


@pytest.fixture
def shortcode(service):
    """A short URL of user123 visited on 2025-10-05 and twice on 2025-10-15."""
    with freeze_time('2025-10-01 08:00:00'):
        created = service.create_short_url('user123', URL, custom_alias='chuck')
    with freeze_time('2025-10-05 10:00:00'):
        service.redirect('chuck', user_agent=WINDOWS)
    with freeze_time('2025-10-15 09:00:00'):
        service.redirect('chuck', user_agent=WINDOWS)
        service.redirect('chuck', user_agent='Mozilla/5.0 (iPhone) Mobile')
    return created.short_code


# -------------------------------
# 1. Analytics
# -------------------------------


@freeze_time('2025-10-15 12:00:00')
def test_lambda_handler(analytics_event, context, shortcode):
    response = app.lambda_handler(analytics_event(shortcode), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 200
    assert body == {
        'short_code': 'chuck',
        'visit_count': 3,
        'country_histogram': {'Unknown': 3},
        'device_histogram': {'desktop': 2, 'mobile': 1},
        'timeline': {'2025-10-15': 2},
    }


@freeze_time('2025-10-15 12:00:00')
def test_lambda_handler_with_window_days(analytics_event, context, shortcode):
    response = app.lambda_handler(analytics_event(shortcode, query={'window_days': '30'}), context)

    assert json.loads(response['body'])['timeline'] == {'2025-10-05': 1, '2025-10-15': 2}


@pytest.mark.parametrize('window_days', ['0', '-3', 'week'])
def test_lambda_handler_with_invalid_window_days(analytics_event, context, shortcode, window_days):
    response = app.lambda_handler(analytics_event(shortcode, query={'window_days': window_days}), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 400
    assert body['message'] == 'window_days must be a positive whole number'


# -------------------------------
# 2. URL info
# -------------------------------


@freeze_time('2025-10-15 12:00:00')
def test_lambda_handler_url_info(analytics_event, context, shortcode):
    response = app.lambda_handler(analytics_event(shortcode, analytics=False), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 200
    assert body['short_code'] == 'chuck'
    assert body['short_url'] == 'https://sho.rt/chuck'
    assert body['visit_count'] == 3
    assert body['created_at'] == '2025-10-01T08:00:00+00:00'
    assert body['is_expired'] is False


# -------------------------------
# 3. Rejected requests
# -------------------------------


def test_lambda_handler_for_foreign_short_url(analytics_event, context, shortcode):
    response = app.lambda_handler(analytics_event(shortcode, sub='user456'), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 403
    assert body == {'message': 'Access denied', 'error_code': 'auth:forbidden'}


def test_lambda_handler_for_unknown_short_url(analytics_event, context):
    response = app.lambda_handler(analytics_event('nope123'), context)

    assert response['statusCode'] == 404
    assert json.loads(response['body'])['error_code'] == 'link:not_found'


def test_lambda_handler_without_cognito_claims(analytics_event, context, shortcode):
    response = app.lambda_handler(analytics_event(shortcode, sub=None), context)

    assert response['statusCode'] == 401


def test_lambda_handler_with_missing_shortcode(analytics_event, context):
    response = app.lambda_handler(analytics_event(None), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 400
    assert body['error_code'] == 'MISSING_SHORTCODE'
