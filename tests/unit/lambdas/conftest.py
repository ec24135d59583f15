from typing import cast

import pytest
from pytest import MonkeyPatch

from shortlinks.types import LambdaContext, AppConfig
from shortlinks.constants import ENV


# -------------------------------
# Shared lambda fixtures
# -------------------------------


@pytest.fixture
def make_event():
    """Build an API Gateway (Lambda proxy) event

    Pass `sub=None` to drop the Cognito claims.
    """

    def _make_event(
        *,
        resource: str = '/{proxy+}',
        path: str = '/examplepath',
        method: str = 'GET',
        body: str | None = None,
        path_parameters: dict | None = None,
        query: dict | None = None,
        headers: dict | None = None,
        sub: str | None = 'user123',
    ):
        request_context = {
            'resourcePath': resource,
            'httpMethod': method,
            'domainName': 'testhost:1000',
            'stage': 'test',
            'identity': {'sourceIp': '198.51.100.7'},
        }
        if sub is not None:
            request_context['authorizer'] = {
                'claims': {'sub': sub, 'email': 'pytest@example.com', 'cognito:username': 'pytest-user', 'email_verified': 'true'}
            }
        return {
            'body': body,
            'resource': resource,
            'path': path,
            'httpMethod': method,
            'headers': {'User-Agent': 'pytest', 'Authorization': 'Bearer fake-jwt-token', **(headers or {})},
            'pathParameters': path_parameters,
            'queryStringParameters': query,
            'requestContext': request_context,
        }

    return _make_event


@pytest.fixture
def context() -> LambdaContext:
    class _Context:
        function_name = 'pytest'

    return cast(LambdaContext, _Context())


@pytest.fixture
def config() -> AppConfig:
    return cast(
        AppConfig,
        {
            'redis': {'host': 'redis.test', 'port': 6379, 'db': 0},
            'service': {'base_url': 'https://sho.rt', 'geo_lookup_enabled': False},
        },
    )


@pytest.fixture(autouse=True)
def _deployed_environment(monkeypatch: MonkeyPatch):
    """Run handlers as if deployed, so unhandled errors become HTTP 500 responses."""
    monkeypatch.setenv(ENV.App.APP_ENV, 'dev')
    monkeypatch.delenv(ENV.App.AWS_SAM_LOCAL, raising=False)
    monkeypatch.delenv(ENV.App.APP_NAME, raising=False)
