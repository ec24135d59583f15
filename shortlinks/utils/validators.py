"""Input validators for URL shortening requests

Functions:
    validate_url(url) -> str:
        Ensure the destination is an absolute http/https URL.
    validate_expiry_days(days, max_days) -> int:
        Ensure the requested lifetime is a positive, bounded number of days.
"""

from urllib.parse import urlparse

from shortlinks.constants import MAX_URL_LENGTH, Defaults
from shortlinks.exceptions import ValidationError


def validate_url(url: str) -> str:
    """Validate that a destination URL is a syntactically valid absolute http/https URL.

    Args:
        url (str): destination URL

    Returns:
        str: the URL with surrounding whitespace stripped

    Raises:
        ValidationError:
            If the URL is empty, too long, relative or uses another scheme.

    Example:
        >>> validate_url(' https://example.com/a ')
        'https://example.com/a'
    """
    if not isinstance(url, str) or not url.strip():
        raise ValidationError('Original URL is required')

    url = url.strip()
    if len(url) > MAX_URL_LENGTH:
        raise ValidationError(f'URL is too long (max {MAX_URL_LENGTH} characters)')

    try:
        components = urlparse(url)
    except ValueError as e:
        raise ValidationError(f'Invalid URL: {e}') from e

    if components.scheme not in {'http', 'https'}:
        raise ValidationError('Only HTTP and HTTPS URLs are allowed')
    if not components.netloc:
        raise ValidationError('Invalid URL format')
    return url


def validate_expiry_days(days, max_days: int = Defaults.MAX_EXPIRY_DAYS) -> int:
    """Validate a requested link lifetime in days.

    Accepts integers and integer strings (JSON bodies often carry strings).

    Raises:
        ValidationError:
            If `days` is not an integer in [1, max_days].
    """
    if isinstance(days, bool) or (isinstance(days, float) and not days.is_integer()):
        raise ValidationError('Expiry must be a whole number of days')
    try:
        days = int(days)
    except (TypeError, ValueError) as e:
        raise ValidationError('Expiry must be a whole number of days') from e

    if not 1 <= days <= max_days:
        raise ValidationError(f'Expiry must be between 1 and {max_days} days')
    return days
