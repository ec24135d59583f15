"""Best-effort visit recording

The redirect path never depends on the outcome of recording a visit: a visit
may be lost, a redirect may not break. VisitRecorder classifies the visit,
hands it to the DAO with a bounded number of attempts and swallows (logs)
every failure.

Classes:
    VisitRecorder:
        Build and record VisitEvents inline or on a background executor.

Example:
    >>> recorder = VisitRecorder(dao, geo=IpApiGeoLookup())
    >>> recorder.record(record.id, ip='203.0.113.7', user_agent='Mozilla/5.0 (iPad; ...)')
    True
"""

import logging
from concurrent.futures import Executor, Future
from datetime import datetime, UTC
from typing import Optional

from shortlinks.constants import Defaults
from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.dao.exceptions import DataStoreError, UrlRecordNotFoundError
from shortlinks.exceptions import RecordingFailure
from shortlinks.models import VisitEvent
from shortlinks.utils.geo import GeoLookup, resolve_country
from shortlinks.utils.useragent import classify_device


logger = logging.getLogger(__name__)


class VisitRecorder:
    """Record visits without ever failing the caller.

    Attributes:
        dao (UrlRecordBaseDAO):
            Store the visits are appended to.
        geo (Optional[GeoLookup]):
            IP to country collaborator. None records `fallback_country` for every visit.
        fallback_country (str):
            Country used for private/unresolvable IPs.
        max_attempts (int):
            Attempts per visit on data store faults.
        executor (Optional[Executor]):
            When set, dispatch() records on this executor instead of inline.
    """

    def __init__(
        self,
        dao: UrlRecordBaseDAO,
        geo: Optional[GeoLookup] = None,
        fallback_country: str = Defaults.GEO_FALLBACK_COUNTRY,
        max_attempts: int = Defaults.RECORDING_ATTEMPTS,
        executor: Optional[Executor] = None,
    ):
        if max_attempts < 1:
            raise ValueError(f'max_attempts must be positive (given value: {max_attempts}).')

        self.dao = dao
        self.geo = geo
        self.fallback_country = fallback_country
        self.max_attempts = max_attempts
        self.executor = executor

    def build_event(self, ip: Optional[str] = None, user_agent: Optional[str] = None, timestamp: Optional[datetime] = None) -> VisitEvent:
        return VisitEvent(
            timestamp=timestamp or datetime.now(UTC),
            country=resolve_country(ip, self.geo, fallback=self.fallback_country),
            device_class=classify_device(user_agent),
            ip=ip,
            user_agent=user_agent,
        )

    def record(self, record_id: str, ip: Optional[str] = None, user_agent: Optional[str] = None) -> bool:
        """Record a visit, swallowing any failure

        Returns:
            bool: True if the visit was stored, False if it was dropped.
        """
        try:
            event = self.build_event(ip=ip, user_agent=user_agent)
            visit_count = self._record_with_retries(record_id, event)
        except RecordingFailure as e:
            logger.warning('Dropped visit: %s', e, extra={'recordId': record_id, 'event': 'VISIT_DROPPED'})
            return False
        except Exception:
            logger.exception('Unexpected error while recording a visit.', extra={'recordId': record_id, 'event': 'VISIT_DROPPED'})
            return False

        logger.debug('Recorded visit.', extra={'recordId': record_id, 'visitCount': visit_count})
        return True

    def dispatch(self, record_id: str, ip: Optional[str] = None, user_agent: Optional[str] = None) -> Optional[Future]:
        """Record a visit without making the caller depend on the outcome

        With an executor, the visit is submitted to it and the Future is returned
        (the caller is free to ignore it). Without one, the visit is recorded inline.
        """
        if self.executor is None:
            self.record(record_id, ip=ip, user_agent=user_agent)
            return None

        try:
            return self.executor.submit(self.record, record_id, ip, user_agent)
        except RuntimeError:
            # Executor already shut down
            logger.warning('Visit recorder executor is unavailable. Dropped visit.', extra={'recordId': record_id, 'event': 'VISIT_DROPPED'})
            return None

    def _record_with_retries(self, record_id: str, event: VisitEvent) -> int:
        for attempt in range(1, self.max_attempts + 1):
            try:
                return self.dao.record_visit(record_id, event)
            except UrlRecordNotFoundError as e:
                raise RecordingFailure(f"URL record '{record_id}' no longer exists.") from e
            except DataStoreError as e:
                if attempt == self.max_attempts:
                    raise RecordingFailure(f'Data store failed {self.max_attempts} time(s).') from e
                logger.info('Retrying visit recording after data store error.', extra={'recordId': record_id, 'attempt': attempt})
        raise RecordingFailure('Visit recording was not attempted.')  # pragma: no cover
