"""Tests for the wiki_api Lambda handler: routing, envelopes and error mapping."""

from __future__ import annotations

import base64
import json
import os
import sys

sys.path.insert(0, os.path.dirname(__file__))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "shared_layer", "python"))

import lambda_function
import resolvers
from errors import StoreQueryError, StoreUnavailable, StoreWriteError
from test_persistence import _FakeWikiDdb


def _event(method="POST", body=None, base64_body=False):
    event = {
        "requestContext": {"http": {"method": method, "path": "/"}},
        "rawPath": "/",
        "headers": {"content-type": "application/json"},
    }
    if body is not None:
        raw = json.dumps(body) if isinstance(body, (dict, list)) else body
        if base64_body:
            raw = base64.b64encode(raw.encode()).decode()
            event["isBase64Encoded"] = True
        event["body"] = raw
    return event


def _call(operation, arguments=None, **kwargs):
    body = {"operation": operation}
    if arguments is not None:
        body["arguments"] = arguments
    resp = lambda_function.lambda_handler(_event(body=body, **kwargs), None)
    return resp, json.loads(resp["body"])


def _use_fake_store(monkeypatch):
    fake = _FakeWikiDdb()
    monkeypatch.setattr(lambda_function, "_store_client", lambda: fake)
    return fake


def test_options_returns_cors_preflight():
    resp = lambda_function.lambda_handler(_event(method="OPTIONS"), None)
    assert resp["statusCode"] == 204
    assert "Access-Control-Allow-Origin" in resp["headers"]


def test_get_returns_operation_catalog():
    resp = lambda_function.lambda_handler(_event(method="GET"), None)
    assert resp["statusCode"] == 200
    payload = json.loads(resp["body"])
    assert set(payload["operations"]) == {"wiki", "createWiki", "updateWiki", "deleteWiki"}
    assert payload["operations"]["wiki"] == {"owner": True, "category": False}


def test_unsupported_method_returns_405():
    resp = lambda_function.lambda_handler(_event(method="DELETE"), None)
    assert resp["statusCode"] == 405


def test_invalid_json_returns_400():
    resp = lambda_function.lambda_handler(_event(body="{nope"), None)
    assert resp["statusCode"] == 400
    assert "JSON object" in json.loads(resp["body"])["error"]


def test_unknown_operation_returns_400():
    resp, payload = _call("dropWiki", {"id": "w1"})
    assert resp["statusCode"] == 400
    assert payload["error_envelope"]["code"] == "UNKNOWN_OPERATION"
    assert "deleteWiki" in payload["error_envelope"]["details"]["operations"]


def test_request_shape_error_returns_400_without_store_call(monkeypatch):
    fake = _use_fake_store(monkeypatch)
    resp, payload = _call("createWiki", {"input": {"title": "A", "owner": "u1", "text": "t"}})

    assert resp["statusCode"] == 400
    assert payload["error_envelope"]["code"] == "INVALID_INPUT"
    assert payload["error_envelope"]["details"]["field"] == "category"
    assert fake.calls == []


def test_missing_arguments_is_a_shape_error(monkeypatch):
    _use_fake_store(monkeypatch)
    resp, payload = _call("wiki")
    assert resp["statusCode"] == 400
    assert "owner" in payload["error"]


def test_store_unavailable_returns_503(monkeypatch):
    _use_fake_store(monkeypatch)

    def _raise(*_args):
        raise StoreUnavailable("down")

    monkeypatch.setattr(resolvers, "_query_by_owner", _raise)

    resp, payload = _call("wiki", {"owner": "u1"})

    assert resp["statusCode"] == 503
    assert payload["error_envelope"]["code"] == "STORE_UNAVAILABLE"
    assert payload["error_envelope"]["retryable"] is True
    assert "down" not in payload["error"]


def test_store_faults_return_opaque_500(monkeypatch):
    _use_fake_store(monkeypatch)
    for target, operation, arguments, fault in (
        ("_query_by_owner", "wiki", {"owner": "u1"}, StoreQueryError),
        ("_delete_wiki", "deleteWiki", {"id": "w1"}, StoreWriteError),
    ):
        def _raise(*_args, _fault=fault):
            raise _fault("ValidationException: secret detail")

        monkeypatch.setattr(resolvers, target, _raise)
        resp, payload = _call(operation, arguments)
        assert resp["statusCode"] == 500
        assert payload["error_envelope"]["code"] == "INTERNAL_ERROR"
        assert "secret" not in payload["error"]


def test_observability_line_per_operation(monkeypatch):
    _use_fake_store(monkeypatch)
    emitted = []
    monkeypatch.setattr(lambda_function, "_emit_structured_observability", lambda **kw: emitted.append(kw))

    _call("wiki", {"owner": "u1"})
    _call("wiki", {})

    assert [e["event"] for e in emitted] == ["operation_succeeded", "operation_failed"]
    assert emitted[0]["extra"] == {"result_count": 0}
    assert emitted[1]["error_code"] == "INVALID_INPUT"


def test_base64_body_is_decoded(monkeypatch):
    _use_fake_store(monkeypatch)
    resp, payload = _call("wiki", {"owner": "u1"}, base64_body=True)
    assert resp["statusCode"] == 200
    assert payload["data"] == []


def test_store_client_uses_configured_region_and_endpoint(monkeypatch):
    captured = {}
    monkeypatch.setattr(lambda_function, "DYNAMODB_REGION", "eu-west-1")
    monkeypatch.setattr(lambda_function, "DYNAMODB_ENDPOINT_URL", "http://localhost:8001")
    monkeypatch.setattr(lambda_function, "_get_ddb", lambda **kw: captured.update(kw) or "client")

    assert lambda_function._store_client() == "client"
    assert captured == {"region": "eu-west-1", "endpoint_url": "http://localhost:8001"}


def test_wire_scenario(monkeypatch):
    _use_fake_store(monkeypatch)

    resp, created = _call(
        "createWiki", {"input": {"title": "A", "owner": "u1", "text": "hello", "category": "c1"}}
    )
    assert resp["statusCode"] == 200
    wiki = created["data"]
    assert wiki["id"]
    assert (wiki["owner"], wiki["category"]) == ("u1", "c1")

    _, listed = _call("wiki", {"owner": "u1"})
    assert listed["data"] == [wiki]

    _, updated = _call("updateWiki", {"input": {"id": wiki["id"], "category": "c2"}})
    assert updated["data"]["category"] == "c2"
    assert updated["data"]["title"] == "A"

    assert _call("wiki", {"owner": "u1", "category": "c1"})[1]["data"] == []
    assert len(_call("wiki", {"owner": "u1", "category": "c2"})[1]["data"]) == 1

    _, deleted = _call("deleteWiki", {"id": wiki["id"]})
    assert deleted["data"] == {"success": True}
    assert _call("wiki", {"owner": "u1"})[1]["data"] == []


def test_update_of_missing_id_returns_null_data(monkeypatch):
    _use_fake_store(monkeypatch)
    resp, payload = _call("updateWiki", {"input": {"id": "missing", "title": "X"}})
    assert resp["statusCode"] == 200
    assert payload["success"] is True
    assert payload["data"] is None


def test_delete_of_missing_id_reports_success(monkeypatch):
    _use_fake_store(monkeypatch)
    resp, payload = _call("deleteWiki", {"id": "missing"})
    assert resp["statusCode"] == 200
    assert payload["data"] == {"success": True}


def test_empty_key_values_never_become_store_faults(monkeypatch):
    _use_fake_store(monkeypatch)

    resp, payload = _call("wiki", {"owner": ""})
    assert (resp["statusCode"], payload["data"]) == (200, [])

    resp, payload = _call("updateWiki", {"input": {"id": "", "title": "X"}})
    assert (resp["statusCode"], payload["data"]) == (200, None)

    resp, payload = _call("deleteWiki", {"id": ""})
    assert (resp["statusCode"], payload["data"]) == (200, {"success": True})

    resp, payload = _call(
        "createWiki", {"input": {"title": "A", "owner": "", "text": "t", "category": "c"}}
    )
    assert resp["statusCode"] == 400
    assert payload["error_envelope"]["details"]["field"] == "owner"
