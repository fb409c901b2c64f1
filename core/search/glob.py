"""Compile IAM wildcard strings into token sequences."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from core.errors import InvalidPatternError

WILDCARDS = frozenset("*?")


@dataclass(frozen=True, slots=True)
class Literal:
    text: str


@dataclass(frozen=True, slots=True)
class AnyChar:
    """``?``: exactly one character."""


@dataclass(frozen=True, slots=True)
class AnyRun:
    """``*``: zero or more characters."""


Token = Union[Literal, AnyChar, AnyRun]

ANY_CHAR = AnyChar()
ANY_RUN = AnyRun()


@dataclass(frozen=True, slots=True)
class GlobPattern:
    """Compiled wildcard pattern. Only ``*`` and ``?`` are special; everything else is literal."""

    raw: str
    tokens: tuple[Token, ...]

    @property
    def has_wildcards(self) -> bool:
        return any(not isinstance(token, Literal) for token in self.tokens)

    @property
    def matches_everything(self) -> bool:
        return self.tokens == (ANY_RUN,)

    @property
    def literal(self) -> str:
        """Concatenated literal text; only meaningful when there are no wildcards."""
        return "".join(token.text for token in self.tokens if isinstance(token, Literal))

    def __str__(self) -> str:
        return self.raw


def compile_pattern(raw: str, *, allow_empty: bool = True) -> GlobPattern:
    """Tokenize ``raw`` into literal runs and wildcards, collapsing repeated ``*``."""
    if not raw and not allow_empty:
        raise InvalidPatternError(raw)

    tokens: list[Token] = []
    run: list[str] = []
    for char in raw:
        if char not in WILDCARDS:
            run.append(char)
            continue
        if run:
            tokens.append(Literal("".join(run)))
            run = []
        if char == "?":
            tokens.append(ANY_CHAR)
        elif not tokens or tokens[-1] is not ANY_RUN:
            tokens.append(ANY_RUN)
    if run:
        tokens.append(Literal("".join(run)))
    return GlobPattern(raw=raw, tokens=tuple(tokens))


def prefix_pattern(prefix: str | None) -> GlobPattern:
    """Pattern matching every name that starts with ``prefix``."""
    return compile_pattern(f"{prefix or ''}*")


__all__ = [
    "GlobPattern",
    "Literal",
    "AnyChar",
    "AnyRun",
    "Token",
    "ANY_CHAR",
    "ANY_RUN",
    "compile_pattern",
    "prefix_pattern",
]
