"""Immutable in-memory catalog of IAM actions."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator

from pydantic import ValidationError

from core.errors import MalformedDataError
from core.models import ActionRecord

logger = logging.getLogger(__name__)


def _strip_prefix(service: str, name: str) -> str:
    # The awsiamactions.io feed qualifies names ("iam:CreateRole").
    prefix = f"{service}:"
    if name.startswith(prefix):
        return name[len(prefix) :]
    return name


def _build_record(
    position: str,
    service: Any,
    name: Any,
    access_level: Any = None,
    service_name: Any = None,
) -> ActionRecord:
    if not isinstance(service, str) or not service:
        raise MalformedDataError(f"{position}: record is missing a service prefix")
    if not isinstance(name, str) or not name:
        raise MalformedDataError(f"{position}: record is missing an action name")
    try:
        return ActionRecord(
            service=service,
            name=_strip_prefix(service, name),
            access_level=access_level if isinstance(access_level, str) else None,
            service_name=service_name if isinstance(service_name, str) else None,
        )
    except ValidationError as exc:
        raise MalformedDataError(f"{position}: {exc.errors()[0]['msg']}") from exc


def _iter_raw(position: int, raw: Any) -> Iterator[ActionRecord]:
    if not isinstance(raw, dict):
        raise MalformedDataError(f"[{position}]: expected a mapping, got {type(raw).__name__}")

    if "actions" not in raw:
        yield _build_record(
            f"[{position}]",
            raw.get("service"),
            raw.get("name", raw.get("action")),
            raw.get("access_level", raw.get("type")),
            raw.get("service_name"),
        )
        return

    # Service listing: {"service": "...", "servicePrefix": "iam", "actions": [...]}
    prefix = raw.get("servicePrefix", raw.get("prefix"))
    actions = raw["actions"]
    if not isinstance(actions, list):
        raise MalformedDataError(f"[{position}].actions: expected a list")
    for offset, action in enumerate(actions):
        label = f"[{position}].actions[{offset}]"
        if not isinstance(action, dict):
            raise MalformedDataError(f"{label}: expected a mapping, got {type(action).__name__}")
        yield _build_record(
            label,
            prefix,
            action.get("action", action.get("name")),
            action.get("type", action.get("access_level")),
            raw.get("service"),
        )


class ActionCatalog:
    """Ordered, de-duplicated collection of ActionRecords.

    The catalog is built once from already deserialized records and never
    mutated afterwards; indexes and tries hold references into it.
    """

    __slots__ = ("_records", "_keys")

    def __init__(self, records: Iterable[ActionRecord] = ()) -> None:
        unique: list[ActionRecord] = []
        keys: set[tuple[str, str]] = set()
        for record in records:
            if record.key in keys:
                continue
            keys.add(record.key)
            unique.append(record)
        self._records: tuple[ActionRecord, ...] = tuple(unique)
        self._keys: frozenset[tuple[str, str]] = frozenset(keys)

    @classmethod
    def load(cls, raw_records: Any) -> "ActionCatalog":
        """Validate raw records and build a catalog.

        Accepts flat ``{"service", "name"}`` records as well as awsiamactions.io
        service listings. Any malformed entry aborts the load.
        """
        if not isinstance(raw_records, list):
            raise MalformedDataError(
                f"Catalog data must be a list of records, got {type(raw_records).__name__}"
            )
        parsed: list[ActionRecord] = []
        for position, raw in enumerate(raw_records):
            parsed.extend(_iter_raw(position, raw))
        catalog = cls(parsed)
        if len(catalog) != len(parsed):
            logger.debug("Dropped %d duplicate catalog records", len(parsed) - len(catalog))
        return catalog

    @property
    def records(self) -> tuple[ActionRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ActionRecord]:
        return iter(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._keys


__all__ = ["ActionCatalog"]
