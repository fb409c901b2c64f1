"""Entrypoint compatible with AWS Lambda + API Gateway."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict

from apiserver.routes import expand, services
from core.errors import CatalogSourceError, IamxError, MalformedDataError

RouteHandler = Callable[[dict[str, Any]], dict[str, Any]]


ROUTES: Dict[str, RouteHandler] = {
    "GET /services": services.handle,
    "POST /expand": expand.handle,
    "POST /expand-policy": expand.handle_policy,
}


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    method = event.get("httpMethod", "GET")
    path = event.get("resource") or event.get("path", "/")
    key = f"{method.upper()} {path}"
    handler = ROUTES.get(key)

    if not handler:
        return {
            "statusCode": 404,
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps({"message": "Route not found"}),
        }

    try:
        response = handler(event)
    except CatalogSourceError as exc:
        response = {"statusCode": 503, "body": {"error": type(exc).__name__, "message": str(exc)}}
    except MalformedDataError as exc:
        response = {"statusCode": 502, "body": {"error": type(exc).__name__, "message": str(exc)}}
    except IamxError as exc:
        response = {"statusCode": 400, "body": {"error": type(exc).__name__, "message": str(exc)}}
    except json.JSONDecodeError:
        response = {"statusCode": 400, "body": {"error": "InvalidJSON", "message": "Request body is not valid JSON"}}
    response.setdefault("headers", {"Content-Type": "application/json"})
    if "body" in response and not isinstance(response["body"], str):
        response["body"] = json.dumps(response["body"])
    return response
