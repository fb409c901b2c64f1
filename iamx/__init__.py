"""Public entry points for expanding wildcard IAM actions.

>>> from iamx import load_matcher
>>> matcher = load_matcher([{"service": "iam", "name": "CreateRole"}])
>>> matcher.expand_qualified("iam:Create*")
['iam:CreateRole']
"""

from typing import Any

from core.catalog import ActionCatalog, CatalogSource, ServiceIndex
from core.errors import (
    CatalogSourceError,
    IamxError,
    InvalidPatternError,
    MalformedDataError,
    MalformedPolicyError,
    MissingServiceError,
)
from core.policy import PolicyExpander, expand_policy
from core.search import ActionTrie, GlobMatcher, compile_pattern

__version__ = "0.1.0"


def load_matcher(raw_records: Any, *, eager: bool = False) -> GlobMatcher:
    """Build a matcher from already deserialized catalog records."""
    return GlobMatcher.from_raw(raw_records, eager=eager)


__all__ = [
    "ActionCatalog",
    "ActionTrie",
    "CatalogSource",
    "GlobMatcher",
    "PolicyExpander",
    "ServiceIndex",
    "compile_pattern",
    "expand_policy",
    "load_matcher",
    "IamxError",
    "CatalogSourceError",
    "InvalidPatternError",
    "MalformedDataError",
    "MalformedPolicyError",
    "MissingServiceError",
]
