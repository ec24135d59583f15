from dataclasses import dataclass, field
from datetime import datetime, UTC
from enum import StrEnum
from typing import Any, Optional


class DeviceClass(StrEnum):
    """Coarse categorization of a visiting client."""

    DESKTOP = 'desktop'
    MOBILE = 'mobile'
    TABLET = 'tablet'
    UNKNOWN = 'unknown'


def isoformat(moment: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime as an ISO-8601 string in UTC (None passes through)."""
    if moment is None:
        return None
    return moment.astimezone(UTC).isoformat()


def parse_isoformat(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 string into an aware UTC datetime ('' and None yield None)."""
    if not value:
        return None
    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


@dataclass(frozen=True)
class VisitEvent:
    """Represent a single recorded visit of a short URL.

    Attributes:
        timestamp (datetime):
            Moment of the visit (UTC).
        country (str):
            ISO country code of the visitor or 'Unknown'.
        device_class (DeviceClass):
            Coarse device category derived from the user agent.
        ip (Optional[str]):
            Raw client IP address, best-effort.
        user_agent (Optional[str]):
            Raw User-Agent header, best-effort.

    Example:
        >>> visit = VisitEvent(
        ...     timestamp=datetime(2025, 10, 15, tzinfo=UTC),
        ...     country='BG',
        ...     device_class=DeviceClass.MOBILE,
        ... )
        >>> visit.to_dict()['device_class']
        'mobile'
    """

    timestamp: datetime
    country: str = 'Unknown'
    device_class: DeviceClass = DeviceClass.UNKNOWN
    ip: Optional[str] = None
    user_agent: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            'timestamp': isoformat(self.timestamp),
            'country': self.country,
            'device_class': str(self.device_class),
            'ip': self.ip,
            'user_agent': self.user_agent,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'VisitEvent':
        return cls(
            timestamp=parse_isoformat(data['timestamp']),
            country=data.get('country') or 'Unknown',
            device_class=DeviceClass(data.get('device_class') or DeviceClass.UNKNOWN),
            ip=data.get('ip'),
            user_agent=data.get('user_agent'),
        )


@dataclass(frozen=True)
class UrlRecord:
    """Represent a shortened URL mapping together with its visit log.

    Attributes:
        id (str):
            Opaque unique identifier, assigned at creation.
        original_url (str):
            The destination URL that the short code redirects to.
        short_code (str):
            System generated code, unique across all records.
        owner_id (str):
            Identifier of the principal that created the record.
        created_at (datetime):
            Creation timestamp (UTC).
        custom_alias (Optional[str]):
            Lowercase user chosen code, unique in the same namespace as short codes.
        expires_at (Optional[datetime]):
            Absolute expiry timestamp (UTC). None means the record never expires.
        visit_count (int):
            Number of recorded visits.
        visits (tuple[VisitEvent, ...]):
            Recorded visits in insertion order.

    Example:
        >>> record = UrlRecord(
        ...     id='5f0c...',
        ...     original_url='https://example.com/a',
        ...     short_code='Gh71WPT',
        ...     owner_id='user-123',
        ...     created_at=datetime.now(UTC),
        ... )
        >>> record.identifier
        'Gh71WPT'
        >>> record.is_active()
        True
    """

    id: str
    original_url: str
    short_code: str
    owner_id: str
    created_at: datetime
    custom_alias: Optional[str] = None
    expires_at: Optional[datetime] = None
    visit_count: int = 0
    visits: tuple[VisitEvent, ...] = field(default_factory=tuple)

    @property
    def identifier(self) -> str:
        """Public identifier of the record: custom alias if set, short code otherwise."""
        return self.custom_alias or self.short_code

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        now = now or datetime.now(UTC)
        return now >= self.expires_at

    def is_active(self, now: Optional[datetime] = None) -> bool:
        return not self.is_expired(now)
