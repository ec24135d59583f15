import functools
import redis
from typing import TypeVar, Any
from collections.abc import Callable

from shortlinks.dao.exceptions import DataStoreError


__all__ = ['connection_label', 'handle_redis_connection_error']

F = TypeVar('F', bound=Callable[..., Any])

CONNECTIVITY_ERRORS = (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError)


def connection_label(client: redis.Redis) -> str:
    """Describe where a Redis client points to, as `<host>:<port>/<db>`

    Example:
        >>> connection_label(redis.Redis(host='10.0.0.5', db=2))
        '10.0.0.5:6379/2'
    """
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def handle_redis_connection_error[F](method: F) -> F:
    """Decorator: report Redis connectivity faults of a DAO method as DataStoreError

    Covers refused/reset connections and socket timeouts. Any other redis-py
    error (e.g. a script error) propagates unchanged.

    Example:
        >>> @handle_redis_connection_error
        ... def stats(self):
        ...     return self.redis.get('stats:links')
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except CONNECTIVITY_ERRORS as e:
            raise DataStoreError(f"Can't connect to Redis at {connection_label(self.redis)}.") from e

    return wrapper
