# fmt: off
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from shortlinks.models.url_record_model import isoformat


@dataclass(frozen=True)
class CreatedShortUrl:
    original_url: str                   # Destination URL
    short_url: str                      # Public short URL (<base url>/<identifier>)
    short_code: str                     # Public identifier (custom alias if set, short code otherwise)
    created_at: datetime                # Creation timestamp of the record
    expires_at: Optional[datetime]      # Expiry timestamp, None if the link never expires
    created: bool = True                # False when an existing record was returned

    def to_dict(self) -> dict[str, Any]:
        return {
            'original_url': self.original_url,
            'short_url': self.short_url,
            'short_code': self.short_code,
            'created_at': isoformat(self.created_at),
            'expires_at': isoformat(self.expires_at),
        }


@dataclass(frozen=True)
class UrlSummary:
    id: str                             # Opaque record identifier
    original_url: str                   # Destination URL
    short_url: str                      # Public short URL
    short_code: str                     # Public identifier
    visit_count: int                    # Recorded visits
    created_at: datetime                # Creation timestamp
    expires_at: Optional[datetime]      # Expiry timestamp
    is_expired: bool                    # Expiry evaluated at query time

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'original_url': self.original_url,
            'short_url': self.short_url,
            'short_code': self.short_code,
            'visit_count': self.visit_count,
            'created_at': isoformat(self.created_at),
            'expires_at': isoformat(self.expires_at),
            'is_expired': self.is_expired,
        }


@dataclass(frozen=True)
class UrlAnalytics:
    short_code: str                                             # Public identifier
    visit_count: int                                            # Total recorded visits
    country_histogram: dict[str, int] = field(default_factory=dict)
    device_histogram: dict[str, int] = field(default_factory=dict)
    timeline: dict[str, int] = field(default_factory=dict)      # ISO date -> visits

    def to_dict(self) -> dict[str, Any]:
        return {
            'short_code': self.short_code,
            'visit_count': self.visit_count,
            'country_histogram': dict(self.country_histogram),
            'device_histogram': dict(self.device_histogram),
            'timeline': dict(self.timeline),
        }


@dataclass(frozen=True)
class AggregatedAnalytics:
    country_histogram: dict[str, int] = field(default_factory=dict)
    device_histogram: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            'country_histogram': dict(self.country_histogram),
            'device_histogram': dict(self.device_histogram),
        }


@dataclass(frozen=True)
class PublicStats:
    urls_created: int                   # Records ever created
    clicks_tracked: int                 # Visits ever recorded

    def to_dict(self) -> dict[str, Any]:
        return {
            'urls_created': self.urls_created,
            'clicks_tracked': self.clicks_tracked,
        }
# fmt: on
