"""Data Access Object (DAO) implementation for managing URL records in Redis

This module provides a Redis-based implementation of UrlRecordBaseDAO.

Responsibilities:
    - Insert records atomically while enforcing one uniqueness namespace for
      short codes and custom aliases;
    - Resolve identifiers through the `codes:<identifier>` index in O(1);
    - Append visit events and increment visit counters in one transaction;
    - Maintain owner, owner+destination and expiry indices;
    - Translate Redis connectivity faults into DAO exceptions.

Classes:
    UrlRecordRedisDAO:
        DAO for storing and retrieving UrlRecord in a Redis datastore.

Example:
    >>> from shortlinks.dao.redis import UrlRecordRedisDAO

    >>> dao = UrlRecordRedisDAO(prefix="shortlinks:dev")
    >>> dao.insert(record)
    UrlRecord(...)

    >>> dao.find_by_identifier("my-link").original_url
    'https://example.com/page'

    >>> dao.record_visit(record.id, VisitEvent(timestamp=datetime.now(UTC)))
    1
"""

import json
from datetime import datetime
from typing import Any

from beartype import beartype

from shortlinks.models import UrlRecord, VisitEvent
from shortlinks.models.url_record_model import isoformat, parse_isoformat
from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.dao.redis.mixins import RedisClientMixin
from shortlinks.dao.redis.helpers import handle_redis_connection_error
from shortlinks.dao.exceptions import UrlRecordAlreadyExistsError, UrlRecordNotFoundError


# Server-side insert: the uniqueness check and every write run as one atomic
# Redis operation, so two concurrent inserts of the same alias can't both pass.
#
# KEYS: 1 short code index, 2 record hash, 3 owner links, 4 owner target,
#       5 expiry index, 6 links counter, [7 alias index]
# ARGV: 1 record id, 2 created_at score, 3 expires_at score or '', 4.. hash field/value pairs
# Returns: 0 inserted, 1 short code taken, 2 custom alias taken
INSERT_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 1 then
    return 1
end
if #KEYS == 7 then
    if KEYS[7] == KEYS[1] then
        return 1
    end
    if redis.call('EXISTS', KEYS[7]) == 1 then
        return 2
    end
    redis.call('SET', KEYS[7], ARGV[1])
end
redis.call('SET', KEYS[1], ARGV[1])
redis.call('HSET', KEYS[2], unpack(ARGV, 4))
redis.call('ZADD', KEYS[3], ARGV[2], ARGV[1])
redis.call('SET', KEYS[4], ARGV[1])
if ARGV[3] ~= '' then
    redis.call('ZADD', KEYS[5], ARGV[3], ARGV[1])
end
redis.call('INCR', KEYS[6])
return 0
"""

SHORT_CODE_TAKEN = 1
CUSTOM_ALIAS_TAKEN = 2


class UrlRecordRedisDAO(RedisClientMixin, UrlRecordBaseDAO):
    """Redis-based Data Access Object (DAO) for managing URL records

    This class implements the UrlRecordBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(record: UrlRecord, **kwargs) -> UrlRecord:
            Insert a record via a Lua script (atomic uniqueness check + writes).
            Raises UrlRecordAlreadyExistsError when the short code or alias is taken.

        find_by_identifier(identifier: str, **kwargs) -> UrlRecord | None:
            Resolve a short code or alias through the identifier index.

        find_by_owner_and_url(owner_id: str, original_url: str, **kwargs) -> UrlRecord | None:
            Latest record an owner created for a destination URL.

        list_by_owner(owner_id: str, **kwargs) -> list[UrlRecord]:
            All records of an owner, newest first.

        record_visit(record_id: str, event: VisitEvent, **kwargs) -> int:
            RPUSH the visit and HINCRBY the counter in one MULTI/EXEC transaction.
            Raises UrlRecordNotFoundError when the record doesn't exist.

        list_expired(before: datetime, **kwargs) -> list[str]:
            Record ids from the expiry index with expiry <= before.

        stats(**kwargs) -> tuple[int, int]:
            Global (records created, visits recorded) counters.

        All methods raise DataStoreError on connectivity issues with Redis.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._insert_script = self.redis.register_script(INSERT_SCRIPT)

    @handle_redis_connection_error
    @beartype
    def insert(self, record: UrlRecord, **kwargs) -> UrlRecord:
        """Insert a URL record into Redis

        Args:
            record (UrlRecord):
                UrlRecord instance to store. Its custom alias (if any) must already
                be normalized.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            UrlRecord: the stored record

        Raises:
            UrlRecordAlreadyExistsError:
                If the short code or custom alias already exists (field says which).
            DataStoreError:
                If a Redis connection issue occurs.
        """
        keys = [
            self.keys.identifier_key(record.short_code),
            self.keys.link_key(record.id),
            self.keys.owner_links_key(record.owner_id),
            self.keys.owner_target_key(record.owner_id, record.original_url),
            self.keys.expiry_index_key(),
            self.keys.links_counter_key(),
        ]
        if record.custom_alias is not None:
            keys.append(self.keys.identifier_key(record.custom_alias))

        expires_score = '' if record.expires_at is None else record.expires_at.timestamp()
        args = [record.id, record.created_at.timestamp(), expires_score]
        for name, value in self._to_hash(record).items():
            args.extend((name, value))

        outcome = self._insert_script(keys=keys, args=args)
        if outcome == SHORT_CODE_TAKEN:
            raise UrlRecordAlreadyExistsError(f"Identifier '{record.short_code}' is already taken.", field='short_code')
        if outcome == CUSTOM_ALIAS_TAKEN:
            raise UrlRecordAlreadyExistsError(f"Identifier '{record.custom_alias}' is already taken.", field='custom_alias')
        return record

    @handle_redis_connection_error
    @beartype
    def find_by_identifier(self, identifier: str, **kwargs) -> UrlRecord | None:
        """Retrieve a URL record by short code or custom alias

        Args:
            identifier (str):
                Short code or custom alias.

        Returns:
            UrlRecord | None: the record with its visits, None if the identifier is unknown.

        Example:
            >>> dao.find_by_identifier('my-link')
            UrlRecord(original_url='https://example.com', short_code='Gh71WPT', custom_alias='my-link', ...)
        """
        record_id = self.redis.get(self.keys.identifier_key(identifier))
        if record_id is None:
            return None
        return self._load(record_id)

    @handle_redis_connection_error
    @beartype
    def find_by_owner_and_url(self, owner_id: str, original_url: str, **kwargs) -> UrlRecord | None:
        record_id = self.redis.get(self.keys.owner_target_key(owner_id, original_url))
        if record_id is None:
            return None

        record = self._load(record_id)
        # Guard against digest collisions in the target key
        if record is None or record.owner_id != owner_id or record.original_url != original_url:
            return None
        return record

    @handle_redis_connection_error
    @beartype
    def list_by_owner(self, owner_id: str, **kwargs) -> list[UrlRecord]:
        record_ids = self.redis.zrevrange(self.keys.owner_links_key(owner_id), 0, -1)
        if not record_ids:
            return []

        with self.redis.pipeline(transaction=True) as pipe:
            for record_id in record_ids:
                pipe.hgetall(self.keys.link_key(record_id))
                pipe.lrange(self.keys.link_visits_key(record_id), 0, -1)
            results = pipe.execute()

        records = []
        for fields, raw_visits in zip(results[::2], results[1::2]):
            if fields:
                records.append(self._to_record(fields, raw_visits))
        return records

    @handle_redis_connection_error
    @beartype
    def record_visit(self, record_id: str, event: VisitEvent, **kwargs) -> int:
        """Append a visit event and increment the visit counter of a record

        Args:
            record_id (str):
                Opaque identifier of the record.
            event (VisitEvent):
                Visit to append.

        Returns:
            int: the record's visit count after this visit

        Raises:
            UrlRecordNotFoundError:
                If no record with the given id exists.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.record_visit('5f0c2a...', VisitEvent(timestamp=datetime.now(UTC), country='BG'))
            42
        """
        link_key = self.keys.link_key(record_id)
        if not self.redis.exists(link_key):
            raise UrlRecordNotFoundError(f"URL record '{record_id}' not found.")

        # NOTE: RPUSH and HINCRBY are executed as one MULTI/EXEC transaction so
        #       the visit log and the counter can't drift apart. Concurrent
        #       redirects of the same link serialize inside Redis:
        #
        #       (lambda 1): MULTI, RPUSH <app>:links:<id>:visits <event>, HINCRBY <app>:links:<id> visit_count 1, EXEC
        #       (lambda 2): MULTI, RPUSH <app>:links:<id>:visits <event>, HINCRBY <app>:links:<id> visit_count 1, EXEC
        #
        #       HINCRBY is a server-side increment, never a read-modify-write
        #       in application code, so no visit count is lost.
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.rpush(self.keys.link_visits_key(record_id), json.dumps(event.to_dict()))
            pipe.hincrby(link_key, 'visit_count', 1)
            pipe.incr(self.keys.visits_counter_key())
            _, visit_count, _ = pipe.execute()

        return int(visit_count)

    @handle_redis_connection_error
    @beartype
    def list_expired(self, before: datetime, **kwargs) -> list[str]:
        record_ids = self.redis.zrangebyscore(self.keys.expiry_index_key(), '-inf', before.timestamp())
        return [str(record_id) for record_id in record_ids]

    @handle_redis_connection_error
    def stats(self, **kwargs) -> tuple[int, int]:
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.get(self.keys.links_counter_key())
            pipe.get(self.keys.visits_counter_key())
            links, visits = pipe.execute()
        return int(links or 0), int(visits or 0)

    def _load(self, record_id: str) -> UrlRecord | None:
        # Hash and visit list are read in one transaction for a consistent snapshot
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hgetall(self.keys.link_key(record_id))
            pipe.lrange(self.keys.link_visits_key(record_id), 0, -1)
            fields, raw_visits = pipe.execute()

        if not fields:
            return None
        return self._to_record(fields, raw_visits)

    @staticmethod
    def _to_hash(record: UrlRecord) -> dict[str, Any]:
        return {
            'id': record.id,
            'original_url': record.original_url,
            'short_code': record.short_code,
            'custom_alias': record.custom_alias or '',
            'owner_id': record.owner_id,
            'created_at': isoformat(record.created_at),
            'expires_at': isoformat(record.expires_at) or '',
            'visit_count': record.visit_count,
        }

    @staticmethod
    def _to_record(fields: dict[str, str], raw_visits: list[str]) -> UrlRecord:
        return UrlRecord(
            id=fields['id'],
            original_url=fields['original_url'],
            short_code=fields['short_code'],
            owner_id=fields['owner_id'],
            created_at=parse_isoformat(fields['created_at']),
            custom_alias=fields.get('custom_alias') or None,
            expires_at=parse_isoformat(fields.get('expires_at')),
            visit_count=int(fields.get('visit_count', 0)),
            visits=tuple(VisitEvent.from_dict(json.loads(raw)) for raw in raw_visits),
        )
