"""Shortcode generation and custom alias validation utilities

Functions:
    generate_shortcode(length=7, alphabet=ALPHABET) -> str:
        Generate a random, unguessable Base62 shortcode.
    validate_alias(alias) -> None:
        Check the syntax of a user supplied custom alias.
    normalize_alias(alias) -> str:
        Lowercase an alias before it is stored or looked up.

Example:
    >>> from shortlinks.utils import generate_shortcode, validate_alias, normalize_alias
    >>> generate_shortcode()
    'Gh71WPT'
    >>> validate_alias('My-Link')
    >>> normalize_alias('My-Link')
    'my-link'
"""

import re
import secrets
import string

from shortlinks.constants import AliasRules, Defaults
from shortlinks.exceptions import ValidationError


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits

_ALIAS_PATTERN = re.compile(AliasRules.PATTERN)


def generate_shortcode(length: int = Defaults.SHORTCODE_LENGTH, alphabet: str = ALPHABET) -> str:
    """Generate a random Base62 shortcode.

    Characters are drawn independently from the `secrets` CSPRNG, so codes carry
    no sequential pattern and can't be enumerated from previous codes.

    Args:
        length (int, optional):
            Number of characters. Defaults to 7 (62^7 ~ 3.5e12 codes).
        alphabet (str, optional):
            Characters to draw from. Defaults to Base62.

    Returns:
        str: A shortcode of exactly `length` characters from `alphabet`.

    NOTE:
        - Uniqueness is not guaranteed here. The data store rejects duplicates at
          insert time and the caller retries with a fresh code.
        - With 10^7 stored links a fresh 7-character code collides with
          probability ~2.9e-6, so 5 consecutive collisions (~2e-28) are out of reach.
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length < 1:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    return ''.join(secrets.choice(alphabet) for _ in range(length))


def validate_alias(alias: str) -> None:
    """Validate the syntax of a custom alias.

    Purely syntactic: no data store access. Case is not normalized here.

    Args:
        alias (str): user supplied custom alias

    Raises:
        ValidationError:
            If the alias is not 3-50 characters of [A-Za-z0-9_-].

    Example:
        >>> validate_alias('my-link')
        >>> validate_alias('a!')
        ValidationError: Custom alias must be between 3 and 50 characters
    """
    if not isinstance(alias, str):
        raise ValidationError('Custom alias must be a string')
    if not AliasRules.MIN_LENGTH <= len(alias) <= AliasRules.MAX_LENGTH:
        raise ValidationError(f'Custom alias must be between {AliasRules.MIN_LENGTH} and {AliasRules.MAX_LENGTH} characters')
    if not _ALIAS_PATTERN.fullmatch(alias):
        raise ValidationError('Custom alias can only contain letters, numbers, hyphens, and underscores')


def normalize_alias(alias: str) -> str:
    return alias.lower()
