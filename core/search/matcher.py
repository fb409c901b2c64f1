"""Resolve ``service:pattern`` strings against per-service action tries."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

from core.catalog.catalog import ActionCatalog
from core.catalog.index import ServiceIndex
from core.errors import MissingServiceError
from core.models import ActionRecord
from core.search.glob import GlobPattern, compile_pattern, prefix_pattern
from core.search.trie import ActionTrie

logger = logging.getLogger(__name__)


def split_qualified(qualified: str) -> tuple[str, str]:
    """Split ``service:pattern`` on the first colon."""
    service, sep, pattern = qualified.partition(":")
    if not sep:
        raise MissingServiceError(qualified)
    return service, pattern


class GlobMatcher:
    """Answer wildcard queries using one lazily built trie per service."""

    def __init__(self, index: ServiceIndex, *, eager: bool = False) -> None:
        self.index = index
        self._tries: Dict[str, ActionTrie] = {}
        self._lock = threading.Lock()
        if eager:
            for service in index.list_services():
                self.trie_for(service)

    @classmethod
    def from_catalog(cls, catalog: ActionCatalog, *, eager: bool = False) -> "GlobMatcher":
        return cls(ServiceIndex.build(catalog), eager=eager)

    @classmethod
    def from_raw(cls, raw_records: Any, *, eager: bool = False) -> "GlobMatcher":
        return cls.from_catalog(ActionCatalog.load(raw_records), eager=eager)

    def trie_for(self, service: str) -> Optional[ActionTrie]:
        trie = self._tries.get(service)
        if trie is not None:
            return trie
        records = self.index.actions_for(service)
        if not records:
            return None
        with self._lock:
            trie = self._tries.get(service)
            if trie is None:
                trie = ActionTrie.build(records, service=service)
                self._tries[service] = trie
                logger.debug("Built trie for %s: %d actions, %d nodes", service, len(trie), trie.node_count())
        return trie

    # Queries -------------------------------------------------------------
    def list_services(self) -> list[str]:
        return self.index.list_services()

    def exact(self, service: str, name: str) -> Optional[ActionRecord]:
        trie = self.trie_for(service)
        return trie.exact(name) if trie is not None else None

    def expand(self, service: str, pattern: GlobPattern | str) -> list[ActionRecord]:
        """Records of ``service`` matching ``pattern``; unknown services match nothing."""
        if isinstance(pattern, str):
            pattern = compile_pattern(pattern)
        trie = self.trie_for(service)
        if trie is None:
            return []
        return trie.expand(pattern)

    def expand_qualified(self, qualified: str) -> list[str]:
        """Expand ``service:pattern`` into fully qualified action identifiers."""
        service, pattern = split_qualified(qualified)
        return [record.qualified for record in self.expand(service, pattern)]

    def expand_service(self, service: str, prefix: str | None = None) -> list[str]:
        """All actions of ``service``, optionally restricted to names starting with ``prefix``."""
        return [record.qualified for record in self.expand(service, prefix_pattern(prefix))]

    @property
    def built_services(self) -> list[str]:
        return sorted(self._tries)


__all__ = ["GlobMatcher", "split_qualified"]
