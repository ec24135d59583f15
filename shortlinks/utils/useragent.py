"""User-agent based device classification

Patterns are checked in order and the first match wins: mobile, then tablet,
then desktop. A user agent matching both the mobile and the tablet pattern
(e.g. Android tablets advertising "Mobile") classifies as mobile.
"""

import re
from typing import Optional

from shortlinks.models import DeviceClass


DEVICE_PATTERNS: tuple[tuple[DeviceClass, re.Pattern], ...] = (
    (DeviceClass.MOBILE, re.compile(r'mobile', re.IGNORECASE)),
    (DeviceClass.TABLET, re.compile(r'tablet|ipad|playbook|silk', re.IGNORECASE)),
    (DeviceClass.DESKTOP, re.compile(r'desktop|pc|mac|windows|linux|x11', re.IGNORECASE)),
)


def classify_device(user_agent: Optional[str]) -> DeviceClass:
    """Classify a raw User-Agent string into a coarse device class.

    Example:
        >>> classify_device('Mozilla/5.0 (iPhone; CPU iPhone OS 17_0) Mobile/15E148')
        <DeviceClass.MOBILE: 'mobile'>
        >>> classify_device(None)
        <DeviceClass.UNKNOWN: 'unknown'>
    """
    if not user_agent:
        return DeviceClass.UNKNOWN

    for device_class, pattern in DEVICE_PATTERNS:
        if pattern.search(user_agent):
            return device_class
    return DeviceClass.UNKNOWN
