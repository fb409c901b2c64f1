"""API routes for expanding patterns and whole policies."""

from __future__ import annotations

import json
from typing import Any

from apiserver import state
from core.policy.expander import PolicyExpander


def _body(event: dict[str, Any]) -> Any:
    payload = event.get("body")
    if isinstance(payload, str):
        return json.loads(payload or "{}")
    return payload or {}


def _bad_request(message: str) -> dict[str, Any]:
    return {"statusCode": 400, "body": {"error": "BadRequest", "message": message}}


def handle(event: dict[str, Any]) -> dict[str, Any]:
    """Expand ``{"patterns": [...]}`` or ``{"service": "iam", "prefix": "Create"}``."""
    data = _body(event)
    if not isinstance(data, dict):
        return _bad_request("Request body must be a JSON object")
    matcher = state.get_matcher()

    if "patterns" in data:
        patterns = data["patterns"]
        if isinstance(patterns, str):
            patterns = [patterns]
        if not isinstance(patterns, list) or not all(isinstance(item, str) for item in patterns):
            return _bad_request("'patterns' must be a string or a list of strings")
        results = {pattern: matcher.expand_qualified(pattern) for pattern in patterns}
        return {"statusCode": 200, "body": {"results": results}}

    service = data.get("service")
    if not isinstance(service, str) or not service:
        return _bad_request("Provide 'patterns' or 'service'")
    prefix = data.get("prefix")
    if prefix is not None and not isinstance(prefix, str):
        return _bad_request("'prefix' must be a string")
    actions = matcher.expand_service(service, prefix)
    return {"statusCode": 200, "body": {"service": service, "actions": actions}}


def handle_policy(event: dict[str, Any]) -> dict[str, Any]:
    """Expand ``{"policy": {...}, "strict": false}`` or a bare policy document."""
    data = _body(event)
    if isinstance(data, dict) and "policy" in data:
        document = data["policy"]
        strict = bool(data.get("strict", False))
    else:
        document = data
        strict = False
    result = PolicyExpander(state.get_matcher(), strict=strict).expand(document)
    return {"statusCode": 200, "body": result.model_dump(mode="json")}
