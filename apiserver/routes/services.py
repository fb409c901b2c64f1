"""API route listing known service prefixes."""

from __future__ import annotations

from typing import Any

from apiserver import state


def handle(event: dict[str, Any]) -> dict[str, Any]:
    matcher = state.get_matcher()
    services = matcher.list_services()
    return {
        "statusCode": 200,
        "body": {
            "services": [
                {"prefix": service, "name": matcher.index.service_name(service)} for service in services
            ],
            "count": len(services),
        },
    }
