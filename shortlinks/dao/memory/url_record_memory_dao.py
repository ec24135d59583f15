"""In-process implementation of UrlRecordBaseDAO

Keeps records in plain dictionaries guarded by a single lock. The lock plays the
role of the storage layer's atomicity guarantees: every method is one critical
section, so the identifier uniqueness check and the insert, as well as the visit
append and the counter increment, are indivisible.

Intended for unit tests and local runs without Redis.

Example:
    >>> dao = UrlRecordMemoryDAO()
    >>> dao.insert(record)
    UrlRecord(...)
    >>> dao.record_visit(record.id, VisitEvent(timestamp=datetime.now(UTC)))
    1
"""

import dataclasses
import threading
from datetime import datetime

from beartype import beartype

from shortlinks.models import UrlRecord, VisitEvent
from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.dao.exceptions import UrlRecordAlreadyExistsError, UrlRecordNotFoundError


class UrlRecordMemoryDAO(UrlRecordBaseDAO):
    """Dictionary-backed DAO for URL records.

    Attributes:
        records (dict[str, UrlRecord]):
            Records by id.
        identifiers (dict[str, str]):
            Shared short code / custom alias namespace, identifier -> record id.
    """

    def __init__(self):
        self.records: dict[str, UrlRecord] = {}
        self.identifiers: dict[str, str] = {}
        self._owner_targets: dict[tuple[str, str], str] = {}
        self._visits_recorded = 0
        self._lock = threading.Lock()

    @beartype
    def insert(self, record: UrlRecord, **kwargs) -> UrlRecord:
        with self._lock:
            if record.short_code in self.identifiers or record.short_code == record.custom_alias:
                raise UrlRecordAlreadyExistsError(f"Identifier '{record.short_code}' is already taken.", field='short_code')
            if record.custom_alias is not None and record.custom_alias in self.identifiers:
                raise UrlRecordAlreadyExistsError(f"Identifier '{record.custom_alias}' is already taken.", field='custom_alias')

            self.records[record.id] = record
            self.identifiers[record.short_code] = record.id
            if record.custom_alias is not None:
                self.identifiers[record.custom_alias] = record.id
            self._owner_targets[(record.owner_id, record.original_url)] = record.id
            return record

    @beartype
    def find_by_identifier(self, identifier: str, **kwargs) -> UrlRecord | None:
        with self._lock:
            record_id = self.identifiers.get(identifier)
            return None if record_id is None else self.records[record_id]

    @beartype
    def find_by_owner_and_url(self, owner_id: str, original_url: str, **kwargs) -> UrlRecord | None:
        with self._lock:
            record_id = self._owner_targets.get((owner_id, original_url))
            return None if record_id is None else self.records[record_id]

    @beartype
    def list_by_owner(self, owner_id: str, **kwargs) -> list[UrlRecord]:
        with self._lock:
            owned = [record for record in self.records.values() if record.owner_id == owner_id]
        return sorted(owned, key=lambda record: record.created_at, reverse=True)

    @beartype
    def record_visit(self, record_id: str, event: VisitEvent, **kwargs) -> int:
        with self._lock:
            record = self.records.get(record_id)
            if record is None:
                raise UrlRecordNotFoundError(f"URL record '{record_id}' not found.")

            # Records are frozen; swap in a copy carrying the new visit and count together
            updated = dataclasses.replace(record, visit_count=record.visit_count + 1, visits=record.visits + (event,))
            self.records[record_id] = updated
            self._visits_recorded += 1
            return updated.visit_count

    @beartype
    def list_expired(self, before: datetime, **kwargs) -> list[str]:
        with self._lock:
            return [
                record.id
                for record in sorted(self.records.values(), key=lambda r: r.expires_at or before)
                if record.expires_at is not None and record.expires_at <= before
            ]

    def stats(self, **kwargs) -> tuple[int, int]:
        with self._lock:
            return len(self.records), self._visits_recorded
