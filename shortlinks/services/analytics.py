"""Visit analytics aggregation

Pure, deterministic functions over already-loaded visit events. No I/O, no
mutation of their inputs, and empty input yields empty mappings.

Functions:
    country_histogram(visits) -> dict[str, int]
    device_histogram(visits) -> dict[str, int]
    timeline(visits, window_days, now=None) -> dict[str, int]
    aggregate_across_records(records) -> AggregatedAnalytics
    build_url_analytics(record, window_days, now=None) -> UrlAnalytics

Example:
    >>> timeline(record.visits, window_days=7)
    {'2025-10-14': 3, '2025-10-15': 12}
"""

from collections import Counter
from collections.abc import Iterable
from datetime import datetime, timedelta, UTC
from typing import Optional

from shortlinks.models import UrlRecord, VisitEvent, UrlAnalytics, AggregatedAnalytics


def country_histogram(visits: Iterable[VisitEvent]) -> dict[str, int]:
    return dict(Counter(visit.country for visit in visits))


def device_histogram(visits: Iterable[VisitEvent]) -> dict[str, int]:
    return dict(Counter(str(visit.device_class) for visit in visits))


def timeline(visits: Iterable[VisitEvent], window_days: int, now: Optional[datetime] = None) -> dict[str, int]:
    """Count visits per UTC calendar day within [now - window_days, now]

    Args:
        visits (Iterable[VisitEvent]):
            Visits with timezone-aware timestamps.
        window_days (int):
            Size of the look-back window in days.
        now (Optional[datetime]):
            End of the window. Defaults to the current time.

    Returns:
        dict[str, int]: ISO date (YYYY-MM-DD) -> visits, in chronological order.
    """
    now = now or datetime.now(UTC)
    start = now - timedelta(days=window_days)
    buckets = Counter(visit.timestamp.astimezone(UTC).date().isoformat() for visit in visits if start <= visit.timestamp <= now)
    return dict(sorted(buckets.items()))


def aggregate_across_records(records: Iterable[UrlRecord]) -> AggregatedAnalytics:
    """Union-sum the country and device histograms of many records."""
    countries: Counter = Counter()
    devices: Counter = Counter()
    for record in records:
        countries.update(country_histogram(record.visits))
        devices.update(device_histogram(record.visits))
    return AggregatedAnalytics(country_histogram=dict(countries), device_histogram=dict(devices))


def build_url_analytics(record: UrlRecord, window_days: int, now: Optional[datetime] = None) -> UrlAnalytics:
    return UrlAnalytics(
        short_code=record.identifier,
        visit_count=record.visit_count,
        country_histogram=country_histogram(record.visits),
        device_histogram=device_histogram(record.visits),
        timeline=timeline(record.visits, window_days, now=now),
    )
