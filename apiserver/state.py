"""Process-wide matcher shared by warm Lambda invocations."""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Optional

from core.catalog.source import DEFAULT_CACHE_PATH, DEFAULT_CATALOG_URL, CatalogSource
from core.search.matcher import GlobMatcher

_matcher: Optional[GlobMatcher] = None
_lock = threading.Lock()


def get_matcher() -> GlobMatcher:
    """Load the catalog on first use; ``IAMX_CATALOG`` and ``IAMX_CACHE_PATH`` override the defaults."""
    global _matcher
    if _matcher is None:
        with _lock:
            if _matcher is None:
                source = CatalogSource(
                    location=os.getenv("IAMX_CATALOG", DEFAULT_CATALOG_URL),
                    cache_path=Path(os.getenv("IAMX_CACHE_PATH", str(DEFAULT_CACHE_PATH))),
                )
                _matcher = GlobMatcher.from_raw(source.load())
    return _matcher


def set_matcher(matcher: Optional[GlobMatcher]) -> None:
    global _matcher
    _matcher = matcher
