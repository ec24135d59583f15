"""Resolution service façade

Composes the shortcode generator, the URL record DAO, the visit recorder and
the analytics aggregator into the operations exposed to the Lambda handlers.

Request flows:
    - Create: validate URL -> return the owner's existing link for the same URL
      (no alias requested) -> validate alias -> generate code -> insert, retrying
      on generated-code collisions (bounded) -> CreatedShortUrl
    - Redirect: resolve identifier -> NotFoundError / ExpiredError -> record visit
      (best-effort) -> destination URL
    - Analytics: resolve identifier -> ForbiddenError unless the caller owns the
      record -> aggregate visits

Authorization lives here. The DAO is owner-agnostic.

Classes:
    ResolutionService

Example:
    >>> service = ResolutionService(UrlRecordRedisDAO(prefix='shortlinks:dev'), recorder=VisitRecorder(dao))
    >>> created = service.create_short_url('user-123', 'https://example.com/a')
    >>> service.redirect(created.short_code)
    'https://example.com/a'
"""

import uuid
import logging
import functools
from collections.abc import Callable
from datetime import datetime, timedelta, UTC
from typing import Optional

from shortlinks.constants import Defaults
from shortlinks.types import ShortcodeFactory
from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.dao.exceptions import DataStoreError, UrlRecordAlreadyExistsError
from shortlinks.exceptions import (
    ConflictError,
    ExhaustedRetriesError,
    ExpiredError,
    ForbiddenError,
    NotFoundError,
    StorageError,
    UnauthenticatedError,
)
from shortlinks.models import (
    UrlRecord,
    CreatedShortUrl,
    UrlSummary,
    UrlAnalytics,
    AggregatedAnalytics,
    PublicStats,
)
from shortlinks.services.analytics import aggregate_across_records, build_url_analytics
from shortlinks.services.recorder import VisitRecorder
from shortlinks.utils.config import ServiceSettings
from shortlinks.utils.helpers import get_short_url
from shortlinks.utils.shortener import generate_shortcode, validate_alias, normalize_alias
from shortlinks.utils.validators import validate_url, validate_expiry_days


logger = logging.getLogger(__name__)


def wrap_datastore_errors(method: Callable) -> Callable:
    """Decorator: generalize data store faults into StorageError

    No raw storage-layer error leaks past the façade.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except DataStoreError as e:
            logger.error('Data store failure in %s.', method.__name__, exc_info=True, extra={'event': 'DATA_STORE_FAILURE'})
            raise StorageError('Data store is unavailable.') from e

    return wrapper


class ResolutionService:
    """Create, resolve and analyze short URLs.

    Attributes:
        dao (UrlRecordBaseDAO):
            Injected data store. Its atomicity guarantees serialize conflicting writes.
        recorder (Optional[VisitRecorder]):
            Visit recorder used on redirects. None disables visit recording.
        settings (ServiceSettings):
            Service parameters (code length, retry bound, expiry policy...).
    """

    def __init__(
        self,
        dao: UrlRecordBaseDAO,
        recorder: Optional[VisitRecorder] = None,
        settings: Optional[ServiceSettings] = None,
        shortcode_factory: ShortcodeFactory = generate_shortcode,
    ):
        self.dao = dao
        self.recorder = recorder
        self.settings = settings or ServiceSettings()
        self._generate_shortcode = shortcode_factory

    @property
    def base_url(self) -> str:
        return self.settings.base_url or Defaults.LOCAL_BASE_URL

    @wrap_datastore_errors
    def create_short_url(
        self,
        owner_id: str,
        original_url: str,
        custom_alias: Optional[str] = None,
        expires_in_days: Optional[int] = None,
    ) -> CreatedShortUrl:
        """Shorten a URL on behalf of an owner

        Args:
            owner_id (str):
                Identifier of the authenticated principal.
            original_url (str):
                Absolute http/https destination.
            custom_alias (Optional[str]):
                User chosen identifier. Stored lowercase.
            expires_in_days (Optional[int]):
                Lifetime in days. Falls back to the configured default.

        Returns:
            CreatedShortUrl: `created` is False when an existing active link of the
            owner for the same destination was returned instead.

        Raises:
            UnauthenticatedError: If owner_id is empty.
            ValidationError: If the URL, alias or expiry is malformed.
            ConflictError: If the custom alias is already taken.
            ExhaustedRetriesError: If every generated shortcode collided.
            StorageError: If the data store fails.
        """
        if not owner_id:
            raise UnauthenticatedError('Authentication required')
        original_url = validate_url(original_url)

        alias = None
        if custom_alias:
            validate_alias(custom_alias)
            alias = normalize_alias(custom_alias)
        else:
            existing = self.dao.find_by_owner_and_url(owner_id, original_url)
            if existing is not None and existing.is_active():
                logger.info('URL already shortened by owner.', extra={'shortcode': existing.identifier, 'event': 'URL_ALREADY_SHORTENED'})
                return self._created(existing, created=False)

        created_at = datetime.now(UTC)
        expires_at = self._expires_at(created_at, expires_in_days)

        for attempt in range(1, self.settings.max_create_attempts + 1):
            record = UrlRecord(
                id=uuid.uuid4().hex,
                original_url=original_url,
                short_code=self._generate_shortcode(self.settings.code_length),
                owner_id=owner_id,
                created_at=created_at,
                custom_alias=alias,
                expires_at=expires_at,
            )
            try:
                self.dao.insert(record)
            except UrlRecordAlreadyExistsError as e:
                if e.field == 'custom_alias':
                    logger.info('Custom alias already taken.', extra={'alias': alias, 'event': 'ALIAS_CONFLICT'})
                    raise ConflictError('Custom alias is already taken') from e
                logger.warning(
                    'Generated shortcode collided with an existing identifier. Retrying.',
                    extra={'shortcode': record.short_code, 'attempt': attempt, 'event': 'SHORTCODE_COLLISION'},
                )
                continue

            logger.info('Created short URL.', extra={'shortcode': record.identifier, 'event': 'URL_CREATED'})
            return self._created(record, created=True)

        logger.error(
            'Shortcode generation exhausted its retries.',
            extra={'attempts': self.settings.max_create_attempts, 'event': 'SHORTCODE_RETRIES_EXHAUSTED'},
        )
        raise ExhaustedRetriesError(f'Could not allocate a free shortcode in {self.settings.max_create_attempts} attempts')

    @wrap_datastore_errors
    def resolve(self, identifier: str) -> UrlRecord:
        """Resolve a short code or custom alias to an active record

        Raises:
            NotFoundError: If the identifier is unknown.
            ExpiredError: If the record is past its expiry.
        """
        record = self._find(identifier)
        if record is None:
            raise NotFoundError('Short URL not found')
        if record.is_expired():
            raise ExpiredError('Short URL has expired')
        return record

    def redirect(self, identifier: str, ip: Optional[str] = None, user_agent: Optional[str] = None) -> str:
        """Resolve an identifier and record the visit (best-effort)

        Returns:
            str: destination URL

        Raises:
            NotFoundError, ExpiredError, StorageError: from resolve().
            Visit recording never raises.
        """
        record = self.resolve(identifier)
        if self.recorder is not None:
            self.recorder.dispatch(record.id, ip=ip, user_agent=user_agent)
        return record.original_url

    @wrap_datastore_errors
    def get_analytics(self, owner_id: str, identifier: str, window_days: Optional[int] = None) -> UrlAnalytics:
        """Country, device and daily visit breakdown of an owned record

        Raises:
            NotFoundError: If the identifier is unknown.
            ForbiddenError: If the caller doesn't own the record.
        """
        record = self._owned_record(owner_id, identifier)
        return build_url_analytics(record, window_days or self.settings.timeline_window_days)

    @wrap_datastore_errors
    def get_url_info(self, owner_id: str, identifier: str) -> UrlSummary:
        record = self._owned_record(owner_id, identifier)
        return self._summary(record)

    @wrap_datastore_errors
    def list_owner_urls(self, owner_id: str) -> list[UrlSummary]:
        if not owner_id:
            raise UnauthenticatedError('Authentication required')
        return [self._summary(record) for record in self.dao.list_by_owner(owner_id)]

    @wrap_datastore_errors
    def get_aggregated_analytics(self, owner_id: str) -> AggregatedAnalytics:
        if not owner_id:
            raise UnauthenticatedError('Authentication required')
        return aggregate_across_records(self.dao.list_by_owner(owner_id))

    @wrap_datastore_errors
    def get_public_stats(self) -> PublicStats:
        urls_created, clicks_tracked = self.dao.stats()
        return PublicStats(urls_created=urls_created, clicks_tracked=clicks_tracked)

    def _find(self, identifier: str) -> Optional[UrlRecord]:
        """Exact lookup, then a case-insensitive retry matching custom aliases only

        Aliases are stored lowercase while short codes are case-sensitive, so the
        retry never returns a short code that differs from `identifier` by case.
        """
        record = self.dao.find_by_identifier(identifier)
        if record is not None:
            return record

        alias = normalize_alias(identifier)
        if alias == identifier:
            return None
        record = self.dao.find_by_identifier(alias)
        if record is None or record.custom_alias != alias:
            return None
        return record

    def _owned_record(self, owner_id: str, identifier: str) -> UrlRecord:
        if not owner_id:
            raise UnauthenticatedError('Authentication required')
        record = self._find(identifier)
        if record is None:
            raise NotFoundError('Short URL not found')
        if record.owner_id != owner_id:
            logger.info('Analytics access denied.', extra={'shortcode': identifier, 'event': 'ACCESS_DENIED'})
            raise ForbiddenError('Access denied')
        return record

    def _expires_at(self, created_at: datetime, expires_in_days: Optional[int]) -> Optional[datetime]:
        if expires_in_days is not None:
            days = validate_expiry_days(expires_in_days, self.settings.max_expiry_days)
        elif self.settings.default_expiry_days is not None:
            days = self.settings.default_expiry_days
        else:
            return None
        return created_at + timedelta(days=days)

    def _created(self, record: UrlRecord, created: bool) -> CreatedShortUrl:
        return CreatedShortUrl(
            original_url=record.original_url,
            short_url=get_short_url(record.identifier, self.base_url),
            short_code=record.identifier,
            created_at=record.created_at,
            expires_at=record.expires_at,
            created=created,
        )

    def _summary(self, record: UrlRecord) -> UrlSummary:
        return UrlSummary(
            id=record.id,
            original_url=record.original_url,
            short_url=get_short_url(record.identifier, self.base_url),
            short_code=record.identifier,
            visit_count=record.visit_count,
            created_at=record.created_at,
            expires_at=record.expires_at,
            is_expired=record.is_expired(),
        )
