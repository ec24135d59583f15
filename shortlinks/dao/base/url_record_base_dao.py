"""Abstract base class for UrlRecord data access objects (DAOs).

This class establishes a consistent contract for all UrlRecord DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, in-memory, PostgreSQL).

Responsibilities:
    - Atomically insert UrlRecord objects while enforcing uniqueness of the
      shared short code / custom alias namespace.
    - Resolve identifiers (short code or alias) to records via an index.
    - Atomically append visit events and increment the visit counter.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from shortlinks.models import UrlRecord
        >>> from shortlinks.dao.redis import UrlRecordRedisDAO

        >>> dao = UrlRecordRedisDAO(...)

        >>> record = UrlRecord(
        ...     id='5f0c2a...',
        ...     original_url='https://example.com/blog/article-123',
        ...     short_code='a1B2c3D',
        ...     owner_id='user-123',
        ...     created_at=datetime.now(UTC),
        ... )
        >>> dao.insert(record)

        >>> retrieved = dao.find_by_identifier('a1B2c3D')
        >>> print(retrieved.original_url)
        https://example.com/blog/article-123

        >>> dao.record_visit(retrieved.id, VisitEvent(timestamp=datetime.now(UTC)))
        1

NOTE:
    - The DAO is owner-agnostic. Ownership checks belong to the service façade.
    - Records are never deleted by the DAO. Expiry is evaluated at query time.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from shortlinks.models import UrlRecord, VisitEvent


class UrlRecordBaseDAO(ABC):
    """Interface for UrlRecord data access objects (DAOs).

    Methods:
        insert(record: UrlRecord, **kwargs) -> UrlRecord:
            Atomically insert a new record.
            Raises UrlRecordAlreadyExistsError if the short code or alias is taken.
            Raises DataStoreError on connection or write failure.

        find_by_identifier(identifier: str, **kwargs) -> UrlRecord | None:
            Resolve a short code or custom alias. Returns None if not found.

        find_by_owner_and_url(owner_id: str, original_url: str, **kwargs) -> UrlRecord | None:
            Latest record created by `owner_id` for `original_url`.

        list_by_owner(owner_id: str, **kwargs) -> list[UrlRecord]:
            All records of an owner, newest first.

        record_visit(record_id: str, event: VisitEvent, **kwargs) -> int:
            Append a visit and increment the visit counter as one atomic unit.
            Raises UrlRecordNotFoundError if the record does not exist.

        list_expired(before: datetime, **kwargs) -> list[str]:
            Ids of records expiring at or before `before`.

        stats(**kwargs) -> tuple[int, int]:
            Global counters: (records created, visits recorded).

    Subclassing:
        Datastore-specific implementations (e.g., UrlRecordRedisDAO or
        UrlRecordMemoryDAO) must extend this class and implement all
        abstract methods.
    """

    @abstractmethod
    def insert(self, record: UrlRecord, **kwargs) -> UrlRecord:
        """Atomically insert a new UrlRecord into the data store.

        The uniqueness check and the write must be a single operation at the
        storage layer. A check-then-insert in application code is not enough.

        Args:
            record (UrlRecord):
                The UrlRecord instance to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            UrlRecord: the inserted record

        Raises:
            UrlRecordAlreadyExistsError:
                If the short code or the custom alias already exists as any
                record's short code or alias.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_by_identifier(self, identifier: str, **kwargs) -> UrlRecord | None:
        """Retrieve a UrlRecord by its short code or custom alias.

        Args:
            identifier (str):
                Short code or custom alias.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            UrlRecord | None: The record if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_by_owner_and_url(self, owner_id: str, original_url: str, **kwargs) -> UrlRecord | None:
        """Retrieve the latest UrlRecord an owner created for a destination URL.

        Args:
            owner_id (str):
                Identifier of the creating principal.

            original_url (str):
                Destination URL.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            UrlRecord | None: The record if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def list_by_owner(self, owner_id: str, **kwargs) -> list[UrlRecord]:
        """Retrieve all UrlRecords of an owner ordered by creation time, newest first.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def record_visit(self, record_id: str, event: VisitEvent, **kwargs) -> int:
        """Append a visit event and increment the record's visit counter atomically.

        Args:
            record_id (str):
                Opaque identifier of the record.

            event (VisitEvent):
                The visit to append.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            int: The record's visit count after the increment.

        Raises:
            UrlRecordNotFoundError:
                If no record with the given id exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def list_expired(self, before: datetime, **kwargs) -> list[str]:
        """Return ids of records whose expiry is at or before `before`.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def stats(self, **kwargs) -> tuple[int, int]:
        """Return global counters as (records created, visits recorded).

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
