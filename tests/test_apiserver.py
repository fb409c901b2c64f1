"""Lambda API adapter tests."""

from __future__ import annotations

import json

import pytest

from apiserver import state
from apiserver.app import lambda_handler
from core.search.matcher import GlobMatcher

CATALOG = [
    {"service": "iam", "name": "CreateRole"},
    {"service": "iam", "name": "CreateUser"},
    {"service": "s3", "name": "GetObject"},
]


@pytest.fixture(autouse=True)
def matcher():
    instance = GlobMatcher.from_raw(CATALOG)
    state.set_matcher(instance)
    yield instance
    state.set_matcher(None)


def _call(method: str, path: str, body=None) -> tuple[int, dict]:
    event = {"httpMethod": method, "path": path}
    if body is not None:
        event["body"] = json.dumps(body)
    response = lambda_handler(event, None)
    return response["statusCode"], json.loads(response["body"])


def test_unknown_route_returns_404():
    status, body = _call("GET", "/nope")
    assert status == 404
    assert body["message"] == "Route not found"


def test_list_services():
    status, body = _call("GET", "/services")
    assert status == 200
    assert [entry["prefix"] for entry in body["services"]] == ["iam", "s3"]
    assert body["count"] == 2


def test_expand_patterns():
    status, body = _call("POST", "/expand", {"patterns": ["iam:Create*", "nosuchservice:*"]})
    assert status == 200
    assert body["results"] == {"iam:Create*": ["iam:CreateRole", "iam:CreateUser"], "nosuchservice:*": []}


def test_expand_service_prefix():
    status, body = _call("POST", "/expand", {"service": "iam", "prefix": "CreateU"})
    assert status == 200
    assert body["actions"] == ["iam:CreateUser"]


def test_expand_missing_service_prefix_is_bad_request():
    status, body = _call("POST", "/expand", {"patterns": "CreateRole"})
    assert status == 400
    assert body["error"] == "MissingServiceError"


def test_expand_requires_input():
    status, body = _call("POST", "/expand", {})
    assert status == 400


def test_expand_policy_returns_document_and_errors():
    policy = {"Statement": [{"Effect": "Allow", "Action": "iam:Create*", "Resource": "*"}, {"Action": "*"}]}
    status, body = _call("POST", "/expand-policy", {"policy": policy})
    assert status == 200
    assert body["document"]["Statement"][0]["Action"] == ["iam:CreateRole", "iam:CreateUser"]
    assert body["errors"][0]["index"] == 1
    assert body["ok"] is False


def test_expand_policy_shape_error_is_bad_request():
    status, body = _call("POST", "/expand-policy", {"Version": "2012-10-17"})
    assert status == 400
    assert body["error"] == "MalformedPolicyError"


def test_invalid_json_body():
    response = lambda_handler({"httpMethod": "POST", "path": "/expand", "body": "{oops"}, None)
    assert response["statusCode"] == 400


def test_unreachable_catalog_is_service_unavailable(tmp_path, monkeypatch):
    state.set_matcher(None)
    monkeypatch.setenv("IAMX_CATALOG", str(tmp_path / "missing.json"))
    status, body = _call("GET", "/services")
    assert status == 503
    assert body["error"] == "CatalogSourceError"


def test_malformed_catalog_is_bad_gateway(tmp_path, monkeypatch):
    catalog = tmp_path / "catalog.json"
    catalog.write_text(json.dumps([{"service": "iam"}]), encoding="utf-8")
    state.set_matcher(None)
    monkeypatch.setenv("IAMX_CATALOG", str(catalog))
    status, body = _call("POST", "/expand", {"patterns": ["iam:*"]})
    assert status == 502
    assert body["error"] == "MalformedDataError"
