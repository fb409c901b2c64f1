"""Group catalog records by service prefix."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from core.catalog.catalog import ActionCatalog
from core.models import ActionRecord


@dataclass(slots=True)
class ServiceIndex:
    """Read-only view mapping service prefixes to their actions in source order."""

    services: Dict[str, tuple[ActionRecord, ...]] = field(default_factory=dict)
    service_names: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def build(cls, catalog: ActionCatalog) -> "ServiceIndex":
        grouped: Dict[str, list[ActionRecord]] = {}
        names: Dict[str, str] = {}
        for record in catalog:
            grouped.setdefault(record.service, []).append(record)
            if record.service_name and record.service not in names:
                names[record.service] = record.service_name
        return cls(
            services={service: tuple(records) for service, records in grouped.items()},
            service_names=names,
        )

    def list_services(self) -> list[str]:
        """Return service prefixes in lexicographic order."""
        return sorted(self.services)

    def actions_for(self, service: str) -> tuple[ActionRecord, ...]:
        """Return the actions of ``service``; unknown services yield an empty tuple."""
        return self.services.get(service, ())

    def service_name(self, service: str) -> Optional[str]:
        return self.service_names.get(service)

    def __contains__(self, service: object) -> bool:
        return service in self.services


__all__ = ["ServiceIndex"]
