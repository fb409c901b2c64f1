"""Expand wildcard actions across every statement of an IAM policy document."""

from __future__ import annotations

import copy
import logging
from typing import Any

from core.errors import MalformedPolicyError, MissingServiceError
from core.models import ExpansionResult, StatementError
from core.search.matcher import GlobMatcher

logger = logging.getLogger(__name__)

ACTION_FIELDS = ("Action", "NotAction")


class PolicyExpander:
    """Rewrite ``Action``/``NotAction`` fields while passing everything else through.

    Document-level shape errors always raise. Errors inside a single statement
    are recorded on the result and that statement is copied unchanged, unless
    ``strict`` is set, in which case the first error is raised.
    """

    def __init__(self, matcher: GlobMatcher, *, strict: bool = False) -> None:
        self.matcher = matcher
        self.strict = strict

    def expand(self, document: Any) -> ExpansionResult:
        if not isinstance(document, dict):
            raise MalformedPolicyError("policy document must be a JSON object")
        if "Statement" not in document:
            raise MalformedPolicyError("is missing", "Statement")
        statements = document["Statement"]
        if not isinstance(statements, list):
            raise MalformedPolicyError(f"must be a list, got {type(statements).__name__}", "Statement")

        expanded: list[Any] = []
        errors: list[StatementError] = []
        for index, statement in enumerate(statements):
            try:
                expanded.append(self.expand_statement(statement, index))
            except (MalformedPolicyError, MissingServiceError) as exc:
                if self.strict:
                    raise
                logger.warning("Leaving statement %d unexpanded: %s", index, exc)
                errors.append(
                    StatementError(
                        index=index,
                        path=exc.path or f"Statement[{index}]",
                        error=type(exc).__name__,
                        message=str(exc),
                    )
                )
                expanded.append(copy.deepcopy(statement))

        rebuilt = {
            key: expanded if key == "Statement" else copy.deepcopy(value)
            for key, value in document.items()
        }
        return ExpansionResult(document=rebuilt, errors=errors)

    def expand_document(self, document: Any) -> dict[str, Any]:
        return self.expand(document).document

    def expand_statement(self, statement: Any, index: int = 0) -> dict[str, Any]:
        path = f"Statement[{index}]"
        if not isinstance(statement, dict):
            raise MalformedPolicyError(f"statement must be a JSON object, got {type(statement).__name__}", path)
        return {
            key: self._expand_field(value, f"{path}.{key}") if key in ACTION_FIELDS else copy.deepcopy(value)
            for key, value in statement.items()
        }

    def _expand_field(self, value: Any, path: str) -> str | list[str]:
        if isinstance(value, str):
            patterns = [value]
        elif isinstance(value, list) and all(isinstance(item, str) for item in value):
            patterns = value
        else:
            raise MalformedPolicyError("must be a string or a list of strings", path)

        # dict keeps first-seen order while dropping repeats across patterns
        resolved: dict[str, None] = {}
        for offset, pattern in enumerate(patterns):
            try:
                matches = self.matcher.expand_qualified(pattern)
            except MissingServiceError as exc:
                location = path if isinstance(value, str) else f"{path}[{offset}]"
                raise MissingServiceError(pattern, location) from exc
            if not matches:
                logger.info("%s: '%s' matched no known actions", path, pattern)
            resolved.update(dict.fromkeys(matches))

        actions = list(resolved)
        if isinstance(value, str) and actions == [value]:
            return value
        return actions


def expand_policy(matcher: GlobMatcher, document: Any, *, strict: bool = False) -> ExpansionResult:
    """Convenience wrapper around :class:`PolicyExpander`."""
    return PolicyExpander(matcher, strict=strict).expand(document)


__all__ = ["PolicyExpander", "ACTION_FIELDS", "expand_policy"]
