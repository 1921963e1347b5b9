"""wiki_api/lambda_function.py

Lambda API for wiki records stored in DynamoDB.
A single endpoint dispatches named operations to their resolvers.

Routes (via API Gateway proxy):
    POST    /      — run an operation: {"operation": <name>, "arguments": {...}}
    GET     /      — operation catalog (names, arguments, optionality)
    OPTIONS /      — CORS preflight

Operations:
    wiki         {"owner": str, "category"?: str}
    createWiki   {"input": {"title", "owner", "text", "category"}}
    updateWiki   {"input": {"id", "title"?, "text"?, "category"?}}
    deleteWiki   {"id": str}

Success envelope: {"success": true, "operation": <name>, "data": <result>}.
``data`` is null when updateWiki addresses an id that does not exist.

Environment variables:
    WIKI_TABLE             default: wiki
    WIKI_OWNER_INDEX       default: owner
    DYNAMODB_REGION        default: ap-northeast-1
    DYNAMODB_ENDPOINT_URL  optional, DynamoDB Local endpoint
    CORS_ORIGIN            default: *
"""

from __future__ import annotations

import time
from typing import Any, Dict

from config import COMPONENT_NAME, DYNAMODB_ENDPOINT_URL, DYNAMODB_REGION, logger
from errors import WikiApiError
from resolvers import OPERATIONS
from wiki_shared.aws_clients import _get_ddb
from wiki_shared.http_utils import _cors_headers, _error, _parse_body, _path_method, _response
from wiki_shared.serialization import _emit_structured_observability


def _store_client():
    return _get_ddb(region=DYNAMODB_REGION, endpoint_url=DYNAMODB_ENDPOINT_URL or None)


def _to_wire(result: Any) -> Any:
    if result is None:
        return None
    if isinstance(result, list):
        return [r.to_dict() for r in result]
    return result.to_dict()


def _operation_catalog() -> Dict[str, Any]:
    return {
        "success": True,
        "operations": {name: args for name, (_resolver, args) in OPERATIONS.items()},
    }


def _dispatch(operation: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
    resolver, _catalog = OPERATIONS[operation]
    started = time.monotonic()
    try:
        result = resolver(_store_client(), arguments)
    except WikiApiError as exc:
        _emit_structured_observability(
            component=COMPONENT_NAME,
            event="operation_failed",
            operation=operation,
            latency_ms=int((time.monotonic() - started) * 1000),
            error_code=exc.code,
        )
        if exc.status_code >= 500:
            # Store faults are opaque to callers.
            return _error(
                exc.status_code,
                "Wiki store is temporarily unavailable." if exc.retryable else "Wiki store request failed.",
                code=exc.code,
                retryable=exc.retryable,
                operation=operation,
            )
        return _error(exc.status_code, str(exc), code=exc.code, operation=operation,
                      field=getattr(exc, "field", ""))

    data = _to_wire(result)
    extra: Dict[str, Any] = {}
    if isinstance(data, list):
        extra["result_count"] = len(data)
    _emit_structured_observability(
        component=COMPONENT_NAME,
        event="operation_succeeded",
        operation=operation,
        latency_ms=int((time.monotonic() - started) * 1000),
        extra=extra,
    )
    return _response(200, {"success": True, "operation": operation, "data": data})


# ---------------------------------------------------------------------------
# Handler
# ---------------------------------------------------------------------------


def lambda_handler(event: Dict, context: Any) -> Dict:
    method, path = _path_method(event)

    # CORS preflight
    if method == "OPTIONS":
        return {"statusCode": 204, "headers": _cors_headers(), "body": ""}

    if method == "GET":
        return _response(200, _operation_catalog())

    if method != "POST":
        return _error(405, f"Method {method} not allowed.")

    body = _parse_body(event)
    if not isinstance(body, dict):
        return _error(400, "Request body must be a JSON object.")

    operation = body.get("operation")
    if not isinstance(operation, str) or operation not in OPERATIONS:
        return _error(
            400,
            f"Unknown operation: {operation!r}.",
            code="UNKNOWN_OPERATION",
            operations=sorted(OPERATIONS),
        )

    arguments = body.get("arguments")
    if arguments is None:
        arguments = {}
    logger.info("request parse: method=%s path=%s operation=%s", method, path, operation)
    return _dispatch(operation, arguments)
