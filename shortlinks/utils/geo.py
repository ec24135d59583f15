"""IP to country resolution

Classes:
    GeoLookup:
        Interface of the geo database collaborator: lookup(ip) -> country code | None.
    IpApiGeoLookup:
        GeoLookup backed by the ip-api.com JSON endpoint (httpx, successful lookups LRU cached).

Functions:
    is_private_ip(ip) -> bool:
        True for missing, malformed, private, loopback, link-local and reserved addresses.
    resolve_country(ip, geo, fallback) -> str:
        Country code for a visitor, never raising.
"""

import ipaddress
import logging
import threading
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Optional

import httpx

from shortlinks.constants import Defaults


logger = logging.getLogger(__name__)


def is_private_ip(ip: Optional[str]) -> bool:
    """Check if an IP address can't be geolocated (private/local/malformed)

    Example:
        >>> is_private_ip('192.168.1.10')
        True
        >>> is_private_ip('8.8.8.8')
        False
    """
    if not ip:
        return True
    try:
        address = ipaddress.ip_address(ip.strip())
    except ValueError:
        return True
    return address.is_private or address.is_loopback or address.is_link_local or address.is_reserved or address.is_unspecified


class GeoLookup(ABC):
    """Interface for IP to country lookups."""

    @abstractmethod
    def lookup(self, ip: str) -> Optional[str]:
        """Return the ISO country code of `ip`, or None if it can't be resolved."""
        pass


class IpApiGeoLookup(GeoLookup):
    """GeoLookup backed by ip-api.com

    Successful responses are cached per IP address (LRU, `cache_size` entries).
    Network and decoding failures resolve to None and are not cached, so the
    next visit from the same IP retries the lookup.
    """

    def __init__(
        self,
        base_url: str = 'http://ip-api.com/json',
        timeout: float = 2.0,
        cache_size: int = 10_000,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.transport = transport
        self.cache_size = cache_size
        self._cache: OrderedDict[str, str] = OrderedDict()
        self._lock = threading.Lock()

    def lookup(self, ip: str) -> Optional[str]:
        with self._lock:
            if ip in self._cache:
                self._cache.move_to_end(ip)
                return self._cache[ip]

        country = self._lookup(ip)
        if country is None:
            return None

        with self._lock:
            self._cache[ip] = country
            self._cache.move_to_end(ip)
            if len(self._cache) > self.cache_size:
                self._cache.popitem(last=False)
        return country

    def _lookup(self, ip: str) -> Optional[str]:
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(f'{self.base_url}/{ip}', params={'fields': 'status,countryCode'})
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError):
            logger.debug('Geo lookup failed.', extra={'ip': ip}, exc_info=True)
            return None

        if not isinstance(data, dict) or data.get('status') != 'success':
            return None
        return data.get('countryCode') or None


def resolve_country(ip: Optional[str], geo: Optional[GeoLookup], fallback: str = Defaults.GEO_FALLBACK_COUNTRY) -> str:
    """Resolve a visitor's country, falling back instead of failing

    Private/loopback/missing addresses, a missing geo collaborator and failed
    lookups all resolve to `fallback`.

    Example:
        >>> resolve_country('127.0.0.1', IpApiGeoLookup(), fallback='US')
        'US'
    """
    if geo is None or is_private_ip(ip):
        return fallback
    return geo.lookup(ip.strip()) or fallback
