"""Character trie over the action names of a single service.

Names are inserted one character per edge. Wildcard queries are answered by
walking the trie depth-first while tracking the set of pattern positions that
are still alive, which is the usual NFA simulation run over the trie's edge
alphabet instead of over a single string:

    "Get*Acl"   ->  G e t * A c l
    "Get?bject" ->  G e t ? b j e c t

At each node the live positions are advanced by the edge character. A child
whose position set becomes empty is never entered, so a whole subtree is
pruned at the first character that cannot match. When the only thing left to
match is a trailing ``*``, every name below the node matches and the subtree
is collected without further bookkeeping.

Children are kept in sorted character order, so results come back in
lexicographic order and identical queries always return identical lists.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Iterator, Optional, Union

from core.errors import MalformedDataError
from core.models import ActionRecord
from core.search.glob import AnyChar, GlobPattern, Literal


class _Wild:
    __slots__ = ("symbol",)

    def __init__(self, symbol: str) -> None:
        self.symbol = symbol

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return self.symbol


_STAR = _Wild("*")
_ANY = _Wild("?")

Step = Union[str, _Wild]


@dataclass
class TrieNode:
    """A node in the action trie.

    ``children`` maps one character to the next node; ``record`` is set when a
    name ends here.
    """

    children: dict[str, "TrieNode"] = field(default_factory=dict)
    record: Optional[ActionRecord] = None


class _PatternAutomaton:
    """Position-set automaton for one compiled pattern."""

    __slots__ = ("steps", "accept")

    def __init__(self, pattern: GlobPattern) -> None:
        steps: list[Step] = []
        for token in pattern.tokens:
            if isinstance(token, Literal):
                steps.extend(token.text)
            elif isinstance(token, AnyChar):
                steps.append(_ANY)
            else:
                steps.append(_STAR)
        self.steps: tuple[Step, ...] = tuple(steps)
        self.accept = len(steps)

    def start(self) -> FrozenSet[int]:
        return self._closure((0,))

    def _closure(self, positions: Iterable[int]) -> FrozenSet[int]:
        # A star may match zero characters, so the position after it is live too.
        live: set[int] = set()
        pending = list(positions)
        while pending:
            position = pending.pop()
            if position in live:
                continue
            live.add(position)
            if position < self.accept and self.steps[position] is _STAR:
                pending.append(position + 1)
        return frozenset(live)

    def advance(self, positions: FrozenSet[int], char: str) -> FrozenSet[int]:
        following: list[int] = []
        for position in positions:
            if position == self.accept:
                continue
            step = self.steps[position]
            if step is _STAR:
                following.append(position)
            elif step is _ANY or step == char:
                following.append(position + 1)
        return self._closure(following)

    def accepts(self, positions: FrozenSet[int]) -> bool:
        return self.accept in positions

    def matches_any_suffix(self, positions: FrozenSet[int]) -> bool:
        return self.accept > 0 and self.steps[-1] is _STAR and (self.accept - 1) in positions

    def literal_edges(self, positions: FrozenSet[int]) -> Optional[list[str]]:
        """Characters that can advance ``positions``, or None if any wildcard is live."""
        chars: set[str] = set()
        for position in positions:
            if position == self.accept:
                continue
            step = self.steps[position]
            if isinstance(step, _Wild):
                return None
            chars.add(step)
        return sorted(chars)


class ActionTrie:
    """Prefix trie of one service's action names, read-only once built."""

    def __init__(self, service: str) -> None:
        self.service = service
        self._root = TrieNode()
        self._size = 0

    @classmethod
    def build(cls, records: Iterable[ActionRecord], service: str | None = None) -> "ActionTrie":
        items = list(records)
        if service is None:
            if not items:
                raise MalformedDataError("Cannot infer the service of an empty trie")
            service = items[0].service
        trie = cls(service)
        for record in items:
            trie._insert(record)
        trie._sort_children(trie._root)
        return trie

    def _insert(self, record: ActionRecord) -> None:
        if record.service != self.service:
            raise MalformedDataError(
                f"Record {record.qualified} does not belong to service '{self.service}'"
            )
        node = self._root
        for char in record.name:
            child = node.children.get(char)
            if child is None:
                child = TrieNode()
                node.children[char] = child
            node = child
        if node.record is None:
            node.record = record
            self._size += 1

    def _sort_children(self, node: TrieNode) -> None:
        stack = [node]
        while stack:
            current = stack.pop()
            current.children = dict(sorted(current.children.items()))
            stack.extend(current.children.values())

    # Queries -------------------------------------------------------------
    def exact(self, name: str) -> Optional[ActionRecord]:
        """Return the record called ``name``, if any."""
        node = self._root
        for char in name:
            node = node.children.get(char)  # type: ignore[assignment]
            if node is None:
                return None
        return node.record

    def expand(self, pattern: GlobPattern) -> list[ActionRecord]:
        """Return every record whose name matches ``pattern``, in lexicographic order."""
        if not pattern.has_wildcards:
            record = self.exact(pattern.literal)
            return [record] if record is not None else []
        if pattern.matches_everything:
            return list(self)

        automaton = _PatternAutomaton(pattern)
        matches: list[ActionRecord] = []
        self._walk(self._root, automaton.start(), automaton, matches)
        return matches

    def _walk(
        self,
        node: TrieNode,
        positions: FrozenSet[int],
        automaton: _PatternAutomaton,
        matches: list[ActionRecord],
    ) -> None:
        if automaton.matches_any_suffix(positions):
            matches.extend(self._subtree(node))
            return
        if node.record is not None and automaton.accepts(positions):
            matches.append(node.record)

        edges = automaton.literal_edges(positions)
        if edges is None:
            children = node.children.items()
        else:
            children = [(char, node.children[char]) for char in edges if char in node.children]

        for char, child in children:
            following = automaton.advance(positions, char)
            if following:
                self._walk(child, following, automaton, matches)

    @staticmethod
    def _subtree(node: TrieNode) -> Iterator[ActionRecord]:
        stack = [node]
        while stack:
            current = stack.pop()
            if current.record is not None:
                yield current.record
            stack.extend(reversed(current.children.values()))

    def node_count(self) -> int:
        """Count trie nodes, root included."""
        return sum(1 for _ in self._nodes())

    def _nodes(self) -> Iterator[TrieNode]:
        stack = [self._root]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(current.children.values())

    def __iter__(self) -> Iterator[ActionRecord]:
        return self._subtree(self._root)

    def __len__(self) -> int:
        return self._size

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.exact(name) is not None


__all__ = ["ActionTrie", "TrieNode"]
