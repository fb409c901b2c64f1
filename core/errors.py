"""Exception types raised by the expansion pipeline."""

from __future__ import annotations


class IamxError(Exception):
    """Base class for catalog, pattern and policy failures."""


class MalformedDataError(IamxError):
    """Catalog records are missing required fields or have the wrong shape."""


class CatalogSourceError(IamxError):
    """The action catalog could not be fetched, read or cached."""


class InvalidPatternError(IamxError):
    def __init__(self, pattern: str, message: str = "pattern is empty") -> None:
        self.pattern = pattern
        super().__init__(f"Invalid action pattern '{pattern}': {message}")


class MissingServiceError(IamxError):
    """A pattern did not carry the ``service:`` namespace."""

    def __init__(self, pattern: str, path: str = "") -> None:
        self.pattern = pattern
        self.path = path
        message = f"Action pattern '{pattern}' is missing a service prefix (expected 'service:action')"
        super().__init__(f"{path}: {message}" if path else message)


class MalformedPolicyError(IamxError):
    """The policy document does not have the expected statement layout."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


__all__ = [
    "IamxError",
    "MalformedDataError",
    "CatalogSourceError",
    "InvalidPatternError",
    "MissingServiceError",
    "MalformedPolicyError",
]
