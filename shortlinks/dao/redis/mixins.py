"""Shared Redis plumbing for the Redis-backed URL record DAO.

Classes:
    - RedisClientMixin: owns the Redis client and the key schema, and verifies
      connectivity when the DAO is constructed.

Example:
    >>> class UrlRecordRedisDAO(RedisClientMixin, UrlRecordBaseDAO):
    ...     pass
    ...
    >>> dao = UrlRecordRedisDAO(redis_host='redis.internal', redis_ssl=True, prefix='shortlinks:prod')
    >>> dao.keys.identifier_key('my-link')
    'shortlinks:prod:codes:my-link'
"""

from typing import Optional

import redis

from shortlinks.dao.redis.redis_key_schema import RedisKeySchema
from shortlinks.dao.redis.helpers import CONNECTIVITY_ERRORS, connection_label
from shortlinks.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Redis client and key schema for Redis-backed DAOs.

    Keyword arguments prefixed with `redis_` match the keys of the `redis`
    configuration section, so handlers pass that section straight through.

    Attributes:
        redis (redis.Redis):
            Client every DAO call goes through. Responses are decoded to str.
        keys (RedisKeySchema):
            Builds the (optionally app/env namespaced) key names.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_socket_timeout: Optional[float] = 5.0,
        redis_ssl: Optional[bool] = False,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
        healthcheck: bool = True,
    ):
        """Connect to Redis (or adopt `redis_client`) and ping it

        Args:
            redis_port, redis_db:
                Accept numeric strings, as YAML and JSON configuration may carry them.
            redis_socket_timeout (Optional[float]):
                Upper bound in seconds for every Redis call.
            redis_ssl (Optional[bool]):
                Use TLS (managed Redis with in-transit encryption).
            redis_client (Optional[redis.Redis]):
                Pre-built client. Connection arguments are ignored when given.
            prefix (Optional[str]):
                Key namespace, usually '<app name>:<app env>'.
            healthcheck (bool):
                PING Redis right away. Defaults to True.

        Raises:
            DataStoreError:
                If the healthcheck can't reach Redis.
        """
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
                socket_timeout=redis_socket_timeout,
                ssl=bool(redis_ssl),
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        if healthcheck:
            self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis

        Returns:
            bool: False if Redis is unreachable and `raise_error` is False.

        Raises:
            DataStoreError: If Redis is unreachable and `raise_error` is True.
        """
        try:
            self.redis.ping()
        except CONNECTIVITY_ERRORS as e:
            if not raise_error:
                return False
            raise DataStoreError(
                f"Can't connect to Redis at {connection_label(self.redis)}. Check the provided configuration parameters."
            ) from e
        return True
