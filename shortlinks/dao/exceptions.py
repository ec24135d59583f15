"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    UrlRecordNotFoundError:
        Raised when a UrlRecord is not found in the data store.

    UrlRecordAlreadyExistsError:
        Raised when a UrlRecord's short code or custom alias is already taken.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

Example:
    >>> from shortlinks.dao.exceptions import UrlRecordAlreadyExistsError
    >>> raise UrlRecordAlreadyExistsError("Identifier 'my-link' is already taken.", field='custom_alias')
    Traceback (most recent call last):
        ...
    shortlinks.dao.exceptions.UrlRecordAlreadyExistsError: Identifier 'my-link' is already taken.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class UrlRecordNotFoundError(DAOError):
    """Exception raised when a UrlRecord is not found in the data store."""

    pass


class UrlRecordAlreadyExistsError(DAOError):
    """Exception raised when a UrlRecord identifier is already taken in the data store.

    Attributes:
        field (str):
            Which identifier collided: 'short_code' or 'custom_alias'.
    """

    def __init__(self, message: str = '', field: str = 'short_code'):
        super().__init__(message)
        self.field = field


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    pass
