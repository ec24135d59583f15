import functools
from collections.abc import Callable

import xxhash


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing URL records and their visits.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "shortlinks:prod" or "shortlinks:dev".

    Short codes and custom aliases share one key space (`codes:<identifier>`),
    which is what makes them a single uniqueness namespace.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_key(self, record_id: str) -> str:
        return f'links:{record_id}'

    @prefix_key
    def link_visits_key(self, record_id: str) -> str:
        return f'links:{record_id}:visits'

    @prefix_key
    def identifier_key(self, identifier: str) -> str:
        return f'codes:{identifier}'

    @prefix_key
    def owner_links_key(self, owner_id: str) -> str:
        return f'owners:{owner_id}:links'

    @prefix_key
    def owner_target_key(self, owner_id: str, original_url: str) -> str:
        # Destination URLs are unbounded in length, so key on a digest
        return f'owners:{owner_id}:targets:{xxhash.xxh64_hexdigest(original_url)}'

    @prefix_key
    def expiry_index_key(self) -> str:
        return 'links:expiry'

    @prefix_key
    def links_counter_key(self) -> str:
        return 'stats:links'

    @prefix_key
    def visits_counter_key(self) -> str:
        return 'stats:visits'
