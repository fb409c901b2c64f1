"""Wildcard search over per-service action tries."""

from .glob import GlobPattern, compile_pattern, prefix_pattern
from .matcher import GlobMatcher, split_qualified
from .trie import ActionTrie

__all__ = ["ActionTrie", "GlobMatcher", "GlobPattern", "compile_pattern", "prefix_pattern", "split_qualified"]
