from shortlinks.models.url_record_model import DeviceClass, VisitEvent, UrlRecord
from shortlinks.models.analytics_model import (
    CreatedShortUrl,
    UrlSummary,
    UrlAnalytics,
    AggregatedAnalytics,
    PublicStats,
)


__all__ = [
    'DeviceClass',
    'VisitEvent',
    'UrlRecord',
    'CreatedShortUrl',
    'UrlSummary',
    'UrlAnalytics',
    'AggregatedAnalytics',
    'PublicStats',
]
