from datetime import datetime, UTC
from unittest.mock import MagicMock

import pytest
import redis

from shortlinks.models import UrlRecord, VisitEvent, DeviceClass
from shortlinks.dao.memory import UrlRecordMemoryDAO


# -------------------------------
# Shared fixtures
# -------------------------------


@pytest.fixture
def app_prefix():
    """Provide a consistent Redis key prefix for testing."""
    return 'testapp:test'


@pytest.fixture
def redis_client():
    """Mock a Redis pipeline-compatible client."""
    _redis_client = MagicMock(spec=redis.client.Pipeline)
    _redis_client.exists.return_value = True
    _redis_client.pipeline.return_value = _redis_client
    _redis_client.__enter__.return_value = _redis_client
    _redis_client.__exit__.return_value = None
    _redis_client.connection_pool = MagicMock()
    _redis_client.connection_pool.connection_kwargs = {'host': '203.0.113.1', 'port': 18000, 'db': 5}
    return _redis_client


@pytest.fixture
def memory_dao():
    return UrlRecordMemoryDAO()


@pytest.fixture
def url_record():
    """A never-expiring record created on 2025-10-15."""
    return UrlRecord(
        id='5f0c2a4e9b1d4c7a8e3f6a2b1c0d9e8f',
        original_url='https://example.com/blog/chuck-norris-is-awesome',
        short_code='Gh71WPT',
        owner_id='user123',
        created_at=datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC),
    )


@pytest.fixture
def visits():
    # fmt: off
    return (
        VisitEvent(timestamp=datetime(2025, 10, 13, 9, 30, tzinfo=UTC), country='BG', device_class=DeviceClass.MOBILE),
        VisitEvent(timestamp=datetime(2025, 10, 14, 18, 0, tzinfo=UTC), country='US', device_class=DeviceClass.DESKTOP),
        VisitEvent(timestamp=datetime(2025, 10, 14, 23, 59, 59, tzinfo=UTC), country='BG', device_class=DeviceClass.DESKTOP),
        VisitEvent(timestamp=datetime(2025, 10, 15, 0, 0, 1, tzinfo=UTC), country='Unknown', device_class=DeviceClass.TABLET),
    )
    # fmt: on
