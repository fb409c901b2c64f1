"""Core catalog, search and policy expansion services for iamx."""

from .errors import (
    CatalogSourceError,
    IamxError,
    InvalidPatternError,
    MalformedDataError,
    MalformedPolicyError,
    MissingServiceError,
)
from .models import ActionRecord, ExpansionResult, StatementError

__all__ = [
    "ActionRecord",
    "ExpansionResult",
    "StatementError",
    "IamxError",
    "MalformedDataError",
    "CatalogSourceError",
    "InvalidPatternError",
    "MissingServiceError",
    "MalformedPolicyError",
]
